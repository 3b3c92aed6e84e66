"""
Base classes for the hotel scraper system.

This module defines the scraper base class, error types and data structures
used by all site-specific scrapers.
"""

from typing import List, Dict, Optional, Any, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from urllib.parse import quote
import asyncio
import logging

from bs4 import BeautifulSoup

from .utils.extractors import Selector, first_match, select_cards, wait_selector
from .utils.normalizers import parse_hotel_location

logger = logging.getLogger(__name__)

# ANSI color codes for terminal output
class Colors:
    """ANSI color codes for colorized logging."""
    RESET = '\033[0m'

    # Colors
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    CYAN = '\033[96m'
    GRAY = '\033[90m'

    @staticmethod
    def green(text):
        return f"{Colors.GREEN}{text}{Colors.RESET}"

    @staticmethod
    def yellow(text):
        return f"{Colors.YELLOW}{text}{Colors.RESET}"

    @staticmethod
    def red(text):
        return f"{Colors.RED}{text}{Colors.RESET}"

    @staticmethod
    def cyan(text):
        return f"{Colors.CYAN}{text}{Colors.RESET}"

    @staticmethod
    def gray(text):
        return f"{Colors.GRAY}{text}{Colors.RESET}"


class InvalidRequest(ValueError):
    """The search request itself is unusable (e.g. blank query)."""


class ScraperError(Exception):
    """Base class for scraping failures."""


class NavigationError(ScraperError):
    """A source's search page could not be reached or timed out."""


class ExtractionError(ScraperError):
    """The rendered page could not be parsed."""


class RenderingEngineUnavailable(ScraperError):
    """The browser could not be launched, or died mid-request."""


def encode_query(query: str) -> str:
    """Percent-encode a query the way JavaScript's encodeURIComponent does."""
    return quote(query, safe="!~*'()")


@dataclass(frozen=True)
class SiteConfig:
    """Configuration for a hotel listing source."""
    key: str                            # Stable identifier used in requests
    name: str                           # Full display name
    search_url: str                     # Search page template with {query}
    wait_selectors: Sequence[str] = ()  # Signatures that mean "cards are in"
    enabled: bool = True                # Whether to include by default

    def build_search_url(self, query: str) -> str:
        return self.search_url.format(query=encode_query(query))


@dataclass
class RawListing:
    """One hotel card as extracted, before location parsing."""
    name: str
    source: str
    location: str = ''
    description: str = ''
    website_url: str = ''
    image_url: str = ''


@dataclass
class NormalizedListing(RawListing):
    """A listing enriched with city/country and the source's search URL."""
    city: str = ''
    country: str = ''
    source_url: str = ''

    def to_dict(self) -> Dict[str, str]:
        return {
            'name': self.name,
            'location': self.location,
            'description': self.description,
            'websiteURL': self.website_url,
            'imageURL': self.image_url,
            'source': self.source,
            'city': self.city,
            'country': self.country,
            'sourceURL': self.source_url,
        }


@dataclass
class SourceOutcome:
    """Result of running one source for one query."""
    source: str
    started_at: datetime
    completed_at: Optional[datetime] = None
    listings: List[NormalizedListing] = field(default_factory=list)
    error: Optional[BaseException] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.completed_at and self.started_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source': self.source,
            'started_at': self.started_at.isoformat(),
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
            'duration_seconds': self.duration_seconds,
            'total': len(self.listings),
            'error': f"{type(self.error).__name__}: {self.error}" if self.error else None,
            'success': self.success,
        }


@dataclass
class SearchResult:
    """Merged listings for one search, in source order."""
    listings: List[NormalizedListing] = field(default_factory=list)
    outcomes: List[SourceOutcome] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.listings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'hotels': [listing.to_dict() for listing in self.listings],
            'count': self.count,
        }


class BaseScraper:
    """
    Base class for all hotel source scrapers.

    Subclasses only supply selector tiers; the extraction algorithm is shared:
    - card_selectors: every match of any selector is a card, in document order
    - *_selectors: per-field tiers, first non-empty value wins

    Optional overrides:
    - extract_listings(): custom parsing of the rendered document
    - normalize_listing(): custom enrichment
    """

    card_selectors: Sequence[str] = ()
    name_selectors: Sequence[Selector] = ()
    location_selectors: Sequence[Selector] = ()
    description_selectors: Sequence[Selector] = ()
    link_selectors: Sequence[Selector] = ()
    image_selectors: Sequence[Selector] = ()

    def __init__(
        self,
        config: SiteConfig,
        navigation_timeout: float = 30.0,
        card_wait_timeout: float = 10.0,
        source_timeout: float = 45.0,
    ):
        """
        Initialize the scraper.

        Args:
            config: Site configuration
            navigation_timeout: Seconds allowed for the search page to settle
            card_wait_timeout: Seconds to wait for the first card (best effort)
            source_timeout: Upper bound on all work for this source
        """
        self.config = config
        self.navigation_timeout = navigation_timeout
        self.card_wait_timeout = card_wait_timeout
        self.source_timeout = source_timeout
        self.logger = logging.getLogger(f"scraper.{config.key}")

    @property
    def key(self) -> str:
        return self.config.key

    def extract_listings(self, soup: BeautifulSoup, base_url: str = '') -> List[RawListing]:
        """
        Pull listings out of a rendered search page.

        Pure: no I/O, and the same document always yields the same sequence.
        Cards without a resolvable name are skipped.
        """
        listings = []
        for card in select_cards(soup, self.card_selectors):
            name = first_match(card, self.name_selectors, base_url)
            if not name:
                continue
            listings.append(RawListing(
                name=name,
                source=self.key,
                location=first_match(card, self.location_selectors, base_url),
                description=first_match(card, self.description_selectors, base_url),
                website_url=first_match(card, self.link_selectors, base_url),
                image_url=first_match(card, self.image_selectors, base_url),
            ))
        return listings

    def normalize_listing(self, raw: RawListing, query: str) -> NormalizedListing:
        """Attach city/country and the source's canonical search URL."""
        city, country = parse_hotel_location(raw.location, query)
        return NormalizedListing(
            name=raw.name,
            source=raw.source,
            location=raw.location,
            description=raw.description,
            website_url=raw.website_url,
            image_url=raw.image_url,
            city=city,
            country=country,
            source_url=self.config.build_search_url(query),
        )

    async def search(self, session, query: str) -> List[RawListing]:
        """
        Render this source's search page and extract its listings.

        Args:
            session: Rendering session (see crawlers.browser.BrowserCrawler)
            query: Free-text hotel query

        Returns:
            Raw listings in card order (possibly empty)

        Raises:
            NavigationError: Page unreachable or navigation timed out
            ExtractionError: The rendered page could not be parsed
        """
        from .crawlers.browser import render_page

        url = self.config.build_search_url(query)
        self.logger.debug(f"Searching {self.config.name}: {Colors.gray(url)}")

        async with session.page() as page:
            soup, final_url = await render_page(
                page,
                url,
                wait_for=wait_selector(self.config.wait_selectors),
                navigation_timeout=self.navigation_timeout,
                wait_timeout=self.card_wait_timeout,
            )
            try:
                return self.extract_listings(soup, final_url or url)
            except Exception as e:
                raise ExtractionError(f"Failed to parse {url}: {e}") from e

    async def run(self, session, query: str) -> SourceOutcome:
        """
        Main entry point - search one source and report the outcome.

        Failures never propagate: they are recorded on the outcome so the
        caller can decide what to do with them.
        """
        outcome = SourceOutcome(source=self.key, started_at=datetime.now(timezone.utc))

        if not session.is_connected():
            outcome.error = RenderingEngineUnavailable("Browser is no longer connected")
            outcome.completed_at = datetime.now(timezone.utc)
            return outcome

        try:
            raw_listings = await asyncio.wait_for(
                self.search(session, query),
                timeout=self.source_timeout,
            )
        except asyncio.TimeoutError:
            outcome.error = NavigationError(
                f"{self.config.name} did not finish within {self.source_timeout:.0f}s"
            )
        except ScraperError as e:
            outcome.error = e
        except Exception as e:
            outcome.error = ExtractionError(str(e))
        else:
            outcome.listings = [self.normalize_listing(raw, query) for raw in raw_listings]

        outcome.completed_at = datetime.now(timezone.utc)
        return outcome
