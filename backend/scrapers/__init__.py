"""
Hotel listing scraper system.

This module provides a unified scraping framework for luxury hotel sources:
- One Playwright browser per search request
- One scraper per source, sharing a tiered selector extraction algorithm
- Per-source failure isolation with results merged in a fixed order
"""

from .base import (
    BaseScraper,
    SiteConfig,
    RawListing,
    NormalizedListing,
    SourceOutcome,
    SearchResult,
    InvalidRequest,
    ScraperError,
    NavigationError,
    ExtractionError,
    RenderingEngineUnavailable,
)
from .config import SITES, get_site_config
from .manager import ScraperManager, SCRAPER_REGISTRY, build_scraper_registry

__all__ = [
    'BaseScraper',
    'SiteConfig',
    'RawListing',
    'NormalizedListing',
    'SourceOutcome',
    'SearchResult',
    'InvalidRequest',
    'ScraperError',
    'NavigationError',
    'ExtractionError',
    'RenderingEngineUnavailable',
    'SITES',
    'get_site_config',
    'ScraperManager',
    'SCRAPER_REGISTRY',
    'build_scraper_registry',
]
