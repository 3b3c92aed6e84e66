"""Rendering session used by the source scrapers."""

from .browser import BrowserCrawler, render_page

__all__ = ['BrowserCrawler', 'render_page']
