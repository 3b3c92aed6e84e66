"""
Kiwi Collection scraper.

Site structure:
- Search page: `.hotel-card` or `.property-card` blocks; newer builds use
  CSS-module class names such as `HotelCard_root__x1y2`
- Name in an `h2`/`h3`, location in a `*location*` or `*city*` element
"""

from ..base import BaseScraper
from ..config import get_site_config
from ..utils.extractors import text, attr


class KiwiScraper(BaseScraper):
    """Scraper for kiwicollection.com search results."""

    card_selectors = (
        '.hotel-card',
        '.property-card',
        '[class*="HotelCard"]',
        '[class*="property"]',
    )
    name_selectors = text('h2', 'h3', '[class*="name"]', '[class*="title"]')
    location_selectors = text('[class*="location"]', '[class*="city"]')
    description_selectors = text('[class*="description"]', 'p')
    link_selectors = attr('href', 'a[href]')
    image_selectors = attr('src', 'img[src]')

    def __init__(self, **kwargs):
        super().__init__(get_site_config('kiwi'), **kwargs)
