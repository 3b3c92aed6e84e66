"""Per-site scraper implementations."""

from .kiwi import KiwiScraper
from .virtuoso import VirtuosoScraper
from .michelin import MichelinScraper
from .mrandmrssmith import MrAndMrsSmithScraper

__all__ = ['KiwiScraper', 'VirtuosoScraper', 'MichelinScraper', 'MrAndMrsSmithScraper']
