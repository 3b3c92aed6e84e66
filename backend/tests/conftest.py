"""
Pytest configuration and fixtures for hotel search tests.
"""

import pytest
from fastapi.testclient import TestClient

from api.config import Settings
from api.main import app, get_manager
from scrapers.manager import ScraperManager
from fakes import FakeBrowser


@pytest.fixture
def test_settings():
    """Settings with short timeouts for tests."""
    return Settings(
        navigation_timeout=5.0,
        card_wait_timeout=1.0,
        source_timeout=5.0,
        request_deadline=None,
        max_concurrent_sources=1,
    )


@pytest.fixture
def browser():
    """A fake browser serving every site's canned page."""
    return FakeBrowser()


@pytest.fixture
def make_manager(test_settings):
    """Build a ScraperManager bound to a given fake browser."""
    def _make(fake_browser, **overrides):
        settings = test_settings.model_copy(update=overrides)
        return ScraperManager(engine_factory=lambda: fake_browser, settings=settings)
    return _make


@pytest.fixture
def manager(make_manager, browser):
    return make_manager(browser)


@pytest.fixture
def client(manager):
    """Create a test client with the manager override."""
    app.dependency_overrides[get_manager] = lambda: manager

    test_client = TestClient(app)
    yield test_client

    app.dependency_overrides.clear()
