"""
Mr & Mrs Smith scraper.

Site structure:
- Search page: hotel cards are `article` elements, older templates use
  `hotel-card` / `property` class names
- Short marketing line in a `*tagline*` element when there is no description
"""

from ..base import BaseScraper
from ..config import get_site_config
from ..utils.extractors import text, attr


class MrAndMrsSmithScraper(BaseScraper):
    """Scraper for mrandmrssmith.com search results."""

    card_selectors = (
        '[class*="hotel-card"]',
        '[class*="property"]',
        'article',
        '[class*="card"]',
    )
    name_selectors = text('h2', 'h3', '[class*="name"]', '[class*="title"]')
    location_selectors = text('[class*="location"]', '[class*="destination"]')
    description_selectors = text('[class*="description"]', '[class*="tagline"]')
    link_selectors = attr('href', 'a[href]')
    image_selectors = attr('src', 'img[src]')

    def __init__(self, **kwargs):
        super().__init__(get_site_config('mrAndMrsSmith'), **kwargs)
