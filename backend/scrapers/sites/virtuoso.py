"""
Virtuoso scraper.

Site structure:
- Search page: React-rendered result list; cards carry `hotel-card`,
  `property` or `SearchResult` in their class names
- Location lives in a `*destination*` element on most cards
"""

from ..base import BaseScraper
from ..config import get_site_config
from ..utils.extractors import text, attr


class VirtuosoScraper(BaseScraper):
    """Scraper for virtuoso.com luxury hotel search."""

    card_selectors = (
        '[class*="hotel-card"]',
        '[class*="property"]',
        '[class*="SearchResult"]',
        '[class*="card"]',
    )
    name_selectors = text('h2', 'h3', '[class*="name"]', '[class*="title"]')
    location_selectors = text('[class*="location"]', '[class*="destination"]')
    description_selectors = text('[class*="description"]', '[class*="summary"]')
    link_selectors = attr('href', 'a[href]')
    image_selectors = attr('src', 'img[src]')

    def __init__(self, **kwargs):
        super().__init__(get_site_config('virtuoso'), **kwargs)
