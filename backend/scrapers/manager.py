"""
Scraper Manager - orchestrates all hotel source scrapers.

Provides a unified interface for searching some or all sources for one query.
Each request owns its own browser; sources are isolated from each other and
their results are merged in registry order.
"""

import asyncio
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Type
from datetime import datetime, timezone
import logging

from .base import (
    BaseScraper,
    Colors,
    InvalidRequest,
    NavigationError,
    SearchResult,
    SourceOutcome,
)
from .config import SITES
from .crawlers.browser import BrowserCrawler

# Import all implemented scrapers
from .sites.kiwi import KiwiScraper
from .sites.virtuoso import VirtuosoScraper
from .sites.michelin import MichelinScraper
from .sites.mrandmrssmith import MrAndMrsSmithScraper

logger = logging.getLogger(__name__)


# Registry of implemented scrapers
SCRAPER_REGISTRY: Mapping[str, Type[BaseScraper]] = MappingProxyType({
    'kiwi': KiwiScraper,
    'virtuoso': VirtuosoScraper,
    'michelin': MichelinScraper,
    'mrAndMrsSmith': MrAndMrsSmithScraper,
})


def build_scraper_registry(settings=None) -> Mapping[str, BaseScraper]:
    """
    Instantiate every scraper once, in site order.

    Args:
        settings: Object carrying navigation_timeout, card_wait_timeout and
            source_timeout (defaults to api.config.settings)

    Returns:
        Read-only mapping of site key -> scraper
    """
    if settings is None:
        from api.config import settings

    scrapers = {}
    for key in SITES:
        scraper_class = SCRAPER_REGISTRY.get(key)
        if scraper_class is None:
            logger.warning(f"Scraper not implemented for site: {key}")
            continue
        scrapers[key] = scraper_class(
            navigation_timeout=settings.navigation_timeout,
            card_wait_timeout=settings.card_wait_timeout,
            source_timeout=settings.source_timeout,
        )
    return MappingProxyType(scrapers)


class ScraperManager:
    """
    Manages and orchestrates the hotel source scrapers.

    Usage:
        manager = ScraperManager()

        # Search every source
        result = await manager.search('paris')

        # Search a subset; unknown keys are ignored
        result = await manager.search('paris', ['kiwi', 'michelin'])

        # Check status
        status = manager.list_scrapers()
    """

    def __init__(
        self,
        scrapers: Optional[Mapping[str, BaseScraper]] = None,
        engine_factory: Optional[Callable[[], BrowserCrawler]] = None,
        settings=None,
    ):
        """
        Initialize the scraper manager.

        Args:
            scrapers: Site key -> scraper, in merge order (defaults to all sites)
            engine_factory: Returns an unstarted rendering session usable with
                ``async with`` (defaults to a Chromium BrowserCrawler)
            settings: Settings object (defaults to api.config.settings)
        """
        if settings is None:
            from api.config import settings
        self.settings = settings
        self.scrapers = scrapers if scrapers is not None else build_scraper_registry(settings)
        self.engine_factory = engine_factory or (lambda: BrowserCrawler.from_settings(settings))
        self.max_concurrent_sources = max(1, settings.max_concurrent_sources)
        self.request_deadline = settings.request_deadline

    def get_scraper(self, site_key: str) -> Optional[BaseScraper]:
        """
        Get the scraper for a site.

        Args:
            site_key: Site identifier (e.g., 'kiwi')

        Returns:
            Scraper instance or None if unknown
        """
        return self.scrapers.get(site_key)

    def resolve_sources(self, source_keys: Optional[Iterable[str]] = None) -> List[BaseScraper]:
        """
        Pick the scrapers for a request, in registry order.

        None means every enabled source. Unknown keys are dropped silently.
        """
        if source_keys is None:
            return [s for s in self.scrapers.values() if s.config.enabled]

        requested = set(source_keys)
        unknown = requested - set(self.scrapers)
        if unknown:
            logger.debug(f"Ignoring unknown sources: {sorted(unknown)}")
        return [s for key, s in self.scrapers.items() if key in requested]

    async def search(
        self,
        query: Optional[str],
        source_keys: Optional[Iterable[str]] = None,
    ) -> SearchResult:
        """
        Search the requested sources for hotels matching a query.

        Args:
            query: Free-text query
            source_keys: Site keys to search (defaults to all enabled)

        Returns:
            SearchResult with listings merged in registry order

        Raises:
            InvalidRequest: If the query is missing or blank
            RenderingEngineUnavailable: If the browser cannot be launched
        """
        query = (query or '').strip()
        if not query:
            raise InvalidRequest("Query parameter is required")

        scrapers = self.resolve_sources(source_keys)
        if not scrapers:
            logger.info(f"No known sources requested for '{query}'")
            return SearchResult()

        logger.info(f"Searching for: {query} ({', '.join(s.key for s in scrapers)})")
        started = datetime.now(timezone.utc)

        async with self.engine_factory() as session:
            outcomes = await self._run_sources(session, scrapers, query)

        result = SearchResult(outcomes=outcomes)
        for outcome in outcomes:
            name = self.scrapers[outcome.source].config.name
            duration = outcome.duration_seconds or 0
            if outcome.success:
                result.listings.extend(outcome.listings)
                logger.info(
                    f"   {Colors.green('[OK]')} Found {len(outcome.listings)} hotels "
                    f"from {name} in {duration:.1f}s"
                )
            else:
                logger.error(f"   {Colors.red('[ERR]')} Error scraping {outcome.source}: {outcome.error}")

        elapsed = (datetime.now(timezone.utc) - started).total_seconds()
        summary = self.get_results_summary(result)
        logger.info(
            f"✅ Search complete in {elapsed:.1f}s: {result.count} hotels, "
            f"{summary['successful']} sources ok, {summary['failed']} failed"
        )
        return result

    async def _run_sources(
        self,
        session,
        scrapers: List[BaseScraper],
        query: str,
    ) -> List[SourceOutcome]:
        """
        Run scrapers with bounded concurrency, returning outcomes in input order.

        With max_concurrent_sources == 1 this is a plain sequential loop.
        Sources still running at the request deadline are cancelled and
        reported as failed; finished ones are kept.
        """
        semaphore = asyncio.Semaphore(self.max_concurrent_sources)

        async def run_one(scraper: BaseScraper) -> SourceOutcome:
            async with semaphore:
                logger.info(f"Scraping {Colors.cyan(scraper.config.name)}...")
                return await scraper.run(session, query)

        tasks = [asyncio.create_task(run_one(s)) for s in scrapers]
        try:
            _, pending = await asyncio.wait(tasks, timeout=self.request_deadline)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        if pending:
            logger.warning(
                Colors.yellow(
                    f"Request deadline of {self.request_deadline}s reached, "
                    f"abandoning {len(pending)} source(s)"
                )
            )
            for task in pending:
                task.cancel()

        results = await asyncio.gather(*tasks, return_exceptions=True)

        outcomes = []
        for scraper, result in zip(scrapers, results):
            if isinstance(result, SourceOutcome):
                outcomes.append(result)
                continue
            if isinstance(result, asyncio.CancelledError):
                error = NavigationError(f"Abandoned at request deadline ({self.request_deadline}s)")
            else:
                error = result
            now = datetime.now(timezone.utc)
            outcomes.append(SourceOutcome(
                source=scraper.key,
                started_at=now,
                completed_at=now,
                error=error,
            ))
        return outcomes

    def list_scrapers(self) -> List[Dict]:
        """
        List all configured sites.

        Returns:
            List of site info dictionaries
        """
        scrapers = []
        for key, config in SITES.items():
            scrapers.append({
                'key': key,
                'name': config.name,
                'enabled': config.enabled,
                'implemented': key in self.scrapers,
                'url': config.search_url,
            })
        return scrapers

    def get_results_summary(self, result: SearchResult) -> Dict:
        """
        Get summary of one search's per-source outcomes.

        Returns:
            Summary dictionary with totals
        """
        successful = sum(1 for o in result.outcomes if o.success)
        return {
            'total_sites': len(result.outcomes),
            'successful': successful,
            'failed': len(result.outcomes) - successful,
            'total_listings': result.count,
            'sites': {o.source: o.to_dict() for o in result.outcomes},
        }
