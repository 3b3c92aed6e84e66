"""
Tests for ScraperManager orchestration.

The manager is driven against FakeBrowser, so no Chromium is launched.
"""

import asyncio
import logging

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from scrapers.base import (
    ExtractionError,
    InvalidRequest,
    NavigationError,
    RenderingEngineUnavailable,
)
from scrapers.manager import SCRAPER_REGISTRY, build_scraper_registry
from fakes import Delay, FakeBrowser
from site_pages import KIWI_HTML, VIRTUOSO_HTML, MICHELIN_HTML, SMITH_HTML, SITE_PAGES


ALL_NAMES = [
    "Le Bristol Paris",
    "Hotel Plaza Athénée",
    "Aman Tokyo",
    "The Peninsula Tokyo",
    "Memmo Alfama",
    "Pestana Palace",
    "The Retreat at Blue Lagoon",
]


def run(coro):
    return asyncio.run(coro)


class TestRequestValidation:
    """Blank queries are rejected before the browser is touched."""

    @pytest.mark.parametrize("query", [None, "", "   ", "\t\n"])
    def test_blank_query_raises(self, manager, browser, query):
        with pytest.raises(InvalidRequest):
            run(manager.search(query))

        assert browser.launches == 0

    def test_query_is_trimmed_before_encoding(self, manager, browser):
        run(manager.search("  lake como & spa ", ["kiwi"]))

        assert browser.visited == [
            "https://www.kiwicollection.com/search?keyword=lake%20como%20%26%20spa"
        ]


class TestSourceSelection:
    """Test which sources a request runs."""

    def test_all_sources_by_default(self, manager, browser):
        result = run(manager.search("paris"))

        assert [l.name for l in result.listings] == ALL_NAMES
        assert [o.source for o in result.outcomes] == ['kiwi', 'virtuoso', 'michelin', 'mrAndMrsSmith']
        assert browser.launches == 1
        assert browser.closed

    def test_subset_keeps_registry_order(self, manager):
        result = run(manager.search("paris", ["mrAndMrsSmith", "kiwi"]))

        assert [o.source for o in result.outcomes] == ['kiwi', 'mrAndMrsSmith']
        assert [l.source for l in result.listings] == ['kiwi', 'kiwi', 'mrAndMrsSmith']

    def test_unknown_keys_are_ignored(self, make_manager):
        with_unknown = FakeBrowser()
        without_unknown = FakeBrowser()

        first = run(make_manager(with_unknown).search("paris", ["kiwi", "bogus"]))
        second = run(make_manager(without_unknown).search("paris", ["kiwi"]))

        assert first.to_dict() == second.to_dict()
        assert with_unknown.visited == without_unknown.visited

    @pytest.mark.parametrize("keys", [[], ["bogus"], ["Kiwi", "MICHELIN"]])
    def test_no_known_sources_skips_browser(self, manager, browser, keys):
        result = run(manager.search("paris", keys))

        assert result.listings == []
        assert result.count == 0
        assert browser.launches == 0

    def test_duplicate_keys_run_once(self, manager, browser):
        run(manager.search("paris", ["kiwi", "kiwi"]))

        assert len(browser.visited) == 1


class TestFailureIsolation:
    """One source failing never sinks the request."""

    def test_navigation_timeout_is_isolated(self, make_manager):
        responses = dict(SITE_PAGES)
        responses['virtuoso.com'] = PlaywrightTimeoutError("Timeout 5000ms exceeded")
        browser = FakeBrowser(responses)

        result = run(make_manager(browser).search("paris"))

        outcomes = {o.source: o for o in result.outcomes}
        assert isinstance(outcomes['virtuoso'].error, NavigationError)
        assert not outcomes['virtuoso'].success
        assert all(outcomes[k].success for k in ('kiwi', 'michelin', 'mrAndMrsSmith'))
        assert [l.name for l in result.listings] == [
            n for n in ALL_NAMES if n not in ("Aman Tokyo", "The Peninsula Tokyo")
        ]

    def test_extraction_failure_is_isolated(self, manager, monkeypatch):
        def broken(soup, base_url=''):
            raise AttributeError("'NoneType' object has no attribute 'select'")

        monkeypatch.setattr(manager.get_scraper('michelin'), 'extract_listings', broken)

        result = run(manager.search("lisbon"))

        outcomes = {o.source: o for o in result.outcomes}
        assert isinstance(outcomes['michelin'].error, ExtractionError)
        assert result.count == 5

    def test_unexpected_error_becomes_extraction_error(self, make_manager):
        responses = dict(SITE_PAGES)
        responses['kiwicollection.com'] = RuntimeError("renderer crashed")

        result = run(make_manager(FakeBrowser(responses)).search("paris"))

        assert isinstance(result.outcomes[0].error, ExtractionError)
        assert "renderer crashed" in str(result.outcomes[0].error)
        assert result.count == 5

    def test_every_source_failing_is_still_a_result(self, make_manager):
        responses = {k: PlaywrightTimeoutError("net::ERR_NAME_NOT_RESOLVED") for k in SITE_PAGES}

        result = run(make_manager(FakeBrowser(responses)).search("paris"))

        assert result.listings == []
        assert len(result.outcomes) == 4
        assert not any(o.success for o in result.outcomes)

    def test_page_without_cards_is_success(self, make_manager):
        browser = FakeBrowser({})

        result = run(make_manager(browser).search("atlantis"))

        assert result.listings == []
        assert all(o.success for o in result.outcomes)

    def test_source_timeout(self, make_manager):
        responses = dict(SITE_PAGES)
        responses['mrandmrssmith.com'] = Delay(5, SMITH_HTML)
        browser = FakeBrowser(responses)

        result = run(make_manager(browser, source_timeout=0.2).search("paris"))

        smith = result.outcomes[-1]
        assert isinstance(smith.error, NavigationError)
        assert result.count == 6
        assert all(page.closed for page in browser.pages)


class TestRenderingEngine:
    """Browser lifecycle failures."""

    def test_launch_failure_propagates(self, make_manager):
        browser = FakeBrowser(fail_launch=True)

        with pytest.raises(RenderingEngineUnavailable):
            run(make_manager(browser).search("paris"))

        assert browser.pages == []

    def test_browser_dying_keeps_partial_results(self, make_manager):
        browser = FakeBrowser(disconnect_after=2)

        result = run(make_manager(browser).search("paris"))

        assert [l.source for l in result.listings] == ['kiwi', 'kiwi', 'virtuoso', 'virtuoso']
        failed = [o for o in result.outcomes if not o.success]
        assert [o.source for o in failed] == ['michelin', 'mrAndMrsSmith']
        assert all(isinstance(o.error, RenderingEngineUnavailable) for o in failed)
        assert len(browser.pages) == 2

    def test_pages_are_always_closed(self, make_manager):
        responses = dict(SITE_PAGES)
        responses['guide.michelin.com'] = PlaywrightTimeoutError("Timeout")
        browser = FakeBrowser(responses)

        run(make_manager(browser).search("paris"))

        assert len(browser.pages) == 4
        assert all(page.closed for page in browser.pages)
        assert browser.closed


class TestConcurrency:
    """Bounded concurrency and the request deadline."""

    def test_order_is_stable_when_sources_finish_out_of_order(self, make_manager):
        browser = FakeBrowser({
            'kiwicollection.com': Delay(0.3, KIWI_HTML),
            'virtuoso.com': Delay(0.2, VIRTUOSO_HTML),
            'guide.michelin.com': Delay(0.1, MICHELIN_HTML),
            'mrandmrssmith.com': SMITH_HTML,
        })

        result = run(make_manager(browser, max_concurrent_sources=4).search("paris"))

        assert [l.name for l in result.listings] == ALL_NAMES
        # Smith finished first but is still merged last
        kiwi, smith = result.outcomes[0], result.outcomes[-1]
        assert smith.completed_at < kiwi.completed_at

    def test_sequential_and_concurrent_agree(self, make_manager):
        sequential = run(make_manager(FakeBrowser()).search("paris"))
        concurrent = run(make_manager(FakeBrowser(), max_concurrent_sources=3).search("paris"))

        assert sequential.to_dict() == concurrent.to_dict()

    def test_deadline_abandons_slow_sources(self, make_manager, caplog):
        responses = dict(SITE_PAGES)
        responses['virtuoso.com'] = Delay(30, VIRTUOSO_HTML)
        browser = FakeBrowser(responses)
        manager = make_manager(browser, max_concurrent_sources=4, request_deadline=0.5)

        with caplog.at_level(logging.WARNING, logger="scrapers.manager"):
            result = run(manager.search("paris"))

        outcomes = {o.source: o for o in result.outcomes}
        assert isinstance(outcomes['virtuoso'].error, NavigationError)
        assert "deadline" in str(outcomes['virtuoso'].error)
        assert result.count == 5
        assert all(page.closed for page in browser.pages)
        assert browser.closed
        assert "Request deadline of 0.5s reached, abandoning 1 source(s)" in caplog.text


class TestResultShape:
    """Test the merged result and its summary."""

    def test_count_matches_listings(self, manager):
        result = run(manager.search("paris"))

        body = result.to_dict()
        assert body['count'] == len(body['hotels']) == 7

    def test_listing_wire_keys(self, manager):
        result = run(manager.search("paris", ["kiwi"]))

        assert result.to_dict()['hotels'][0] == {
            'name': "Le Bristol Paris",
            'location': "Paris, France",
            'description': "A palace on the Faubourg Saint-Honoré.",
            'websiteURL': "https://www.kiwicollection.com/hotels/le-bristol-paris",
            'imageURL': "https://img.kiwicollection.com/bristol.jpg",
            'source': "kiwi",
            'city': "Paris",
            'country': "France",
            'sourceURL': "https://www.kiwicollection.com/search?keyword=paris",
        }

    def test_results_summary(self, make_manager):
        responses = dict(SITE_PAGES)
        responses['virtuoso.com'] = PlaywrightTimeoutError("Timeout")
        manager = make_manager(FakeBrowser(responses))

        summary = manager.get_results_summary(run(manager.search("paris")))

        assert summary['total_sites'] == 4
        assert summary['successful'] == 3
        assert summary['failed'] == 1
        assert summary['total_listings'] == 5
        assert summary['sites']['virtuoso']['error'].startswith("NavigationError")


class TestRegistry:
    """Test source registry and listing."""

    def test_registry_order(self, manager):
        assert list(manager.scrapers) == ['kiwi', 'virtuoso', 'michelin', 'mrAndMrsSmith']
        assert list(SCRAPER_REGISTRY) == list(manager.scrapers)

    def test_registry_is_read_only(self, test_settings):
        registry = build_scraper_registry(test_settings)

        with pytest.raises(TypeError):
            registry['extra'] = registry['kiwi']

    def test_scrapers_take_timeouts_from_settings(self, make_manager):
        manager = make_manager(FakeBrowser(), navigation_timeout=12.0, source_timeout=20.0)

        kiwi = manager.get_scraper('kiwi')
        assert kiwi.navigation_timeout == 12.0
        assert kiwi.source_timeout == 20.0

    def test_get_scraper_unknown(self, manager):
        assert manager.get_scraper('bogus') is None

    def test_list_scrapers(self, manager):
        sites = manager.list_scrapers()

        assert [s['key'] for s in sites] == ['kiwi', 'virtuoso', 'michelin', 'mrAndMrsSmith']
        assert all(s['implemented'] and s['enabled'] for s in sites)
        assert sites[2]['name'] == "Michelin Guide"
