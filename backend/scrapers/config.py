"""
Site configurations for the hotel listing sources.

Each site has a SiteConfig that defines:
- The search URL template ({query} is percent-encoded)
- The card signatures to wait for after navigation
- Whether it is searched by default

The set is fixed at import time and exposed read-only.
"""

from types import MappingProxyType
from typing import Mapping

from .base import SiteConfig


# ============================================================
# SITE CONFIGURATIONS
# ============================================================
# Order here is the order results are merged in.

SITES: Mapping[str, SiteConfig] = MappingProxyType({
    'kiwi': SiteConfig(
        key='kiwi',
        name='Kiwi Collection',
        search_url='https://www.kiwicollection.com/search?keyword={query}',
        wait_selectors=('.hotel-card', '.property-card', '[class*="hotel"]'),
    ),

    'virtuoso': SiteConfig(
        key='virtuoso',
        name='Virtuoso',
        search_url='https://www.virtuoso.com/travel/luxury-hotels/search?searchText={query}',
        wait_selectors=('[class*="hotel"]', '[class*="property"]', '[class*="card"]'),
    ),

    'michelin': SiteConfig(
        key='michelin',
        name='Michelin Guide',
        search_url='https://guide.michelin.com/en/hotels-stays?q={query}',
        wait_selectors=('[class*="card"]', '[class*="hotel"]'),
    ),

    'mrAndMrsSmith': SiteConfig(
        key='mrAndMrsSmith',
        name='Mr & Mrs Smith',
        search_url='https://www.mrandmrssmith.com/search?q={query}',
        wait_selectors=('[class*="hotel"]', '[class*="property"]'),
    ),
})


# ============================================================
# HELPER FUNCTIONS
# ============================================================

def get_site_config(site_key: str) -> SiteConfig:
    """
    Get configuration for a site by its key.

    Args:
        site_key: Site identifier (e.g., 'kiwi', 'michelin')

    Returns:
        SiteConfig for the site

    Raises:
        ValueError: If site_key is not found
    """
    if site_key not in SITES:
        valid_keys = ', '.join(sorted(SITES.keys()))
        raise ValueError(f"Unknown site: '{site_key}'. Valid sites: {valid_keys}")
    return SITES[site_key]

