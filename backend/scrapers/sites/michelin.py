"""
Michelin Guide scraper.

Site structure:
- Search page: `.card` / `.poi-card` grid items
- Images are lazy-loaded: `src` may be missing until scrolled into view,
  the real URL sits in `data-src`
"""

from ..base import BaseScraper
from ..config import get_site_config
from ..utils.extractors import text, attr


class MichelinScraper(BaseScraper):
    """Scraper for guide.michelin.com hotel stays."""

    card_selectors = (
        '[class*="card"]',
        '[class*="poi-card"]',
        '[class*="hotel"]',
    )
    name_selectors = text('h2', 'h3', '[class*="title"]', '[class*="name"]')
    location_selectors = text('[class*="location"]', '[class*="address"]')
    description_selectors = text('[class*="description"]')
    link_selectors = attr('href', 'a[href]')
    image_selectors = attr('src', 'img[src]') + attr('data-src', 'img[data-src]')

    def __init__(self, **kwargs):
        super().__init__(get_site_config('michelin'), **kwargs)
