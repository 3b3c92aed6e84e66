"""
Browser crawler for JavaScript-rendered hotel search pages.

Wraps one Playwright Chromium instance for the lifetime of a single search
request. Each source gets its own page, opened and closed through ``page()``.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional, Tuple

from bs4 import BeautifulSoup
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Error as PlaywrightError,
)
import logging

from ..base import NavigationError, ExtractionError, RenderingEngineUnavailable

logger = logging.getLogger(__name__)


DEFAULT_USER_AGENT = (
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)

DEFAULT_BROWSER_ARGS = [
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-dev-shm-usage',
]

# Seconds allowed for each close/stop step during cleanup
CLEANUP_TIMEOUT = 2.0


class BrowserCrawler:
    """
    Rendering session backed by a headless Chromium.

    Usage:
        async with BrowserCrawler() as session:
            async with session.page() as page:
                soup, url = await render_page(page, 'https://...')
    """

    def __init__(
        self,
        executable_path: Optional[str] = None,
        headless: bool = True,
        args: Optional[List[str]] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        launch_timeout: float = 30.0,
        page_timeout: float = 10.0,
    ):
        """
        Initialize the browser crawler.

        Args:
            executable_path: Chrome binary; None uses Playwright's bundled Chromium
            headless: Run browser in headless mode
            args: Extra Chromium flags (sandboxing etc.), passed through unvalidated
            user_agent: User agent for every page
            launch_timeout: Seconds allowed for the browser to start
            page_timeout: Seconds allowed to open a new page
        """
        self.executable_path = executable_path or None
        self.headless = headless
        self.args = list(DEFAULT_BROWSER_ARGS if args is None else args)
        self.user_agent = user_agent
        self.launch_timeout = launch_timeout
        self.page_timeout = page_timeout
        self._playwright = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None

    @classmethod
    def from_settings(cls, settings) -> 'BrowserCrawler':
        return cls(
            executable_path=settings.browser_executable_path,
            headless=settings.browser_headless,
            args=settings.browser_args,
            user_agent=settings.browser_user_agent,
            launch_timeout=settings.browser_launch_timeout,
        )

    async def start(self):
        """
        Launch Chromium and create the shared context.

        Raises:
            RenderingEngineUnavailable: If the browser cannot be started
        """
        try:
            await asyncio.wait_for(self._launch(), timeout=self.launch_timeout)
        except Exception as e:
            logger.error(f"Failed to launch browser: {e}")
            await self._cleanup()
            raise RenderingEngineUnavailable(f"Could not launch browser: {e}") from e

    async def _launch(self):
        self._playwright = await async_playwright().start()

        logger.debug(f"Launching Chromium (executable={self.executable_path or 'bundled'})")
        self._browser = await self._playwright.chromium.launch(
            headless=self.headless,
            executable_path=self.executable_path,
            args=self.args,
            handle_sigint=False,
            handle_sigterm=False,
            handle_sighup=False,
        )

        if not self._browser.is_connected():
            raise RuntimeError("Browser launched but not connected")

        self._context = await self._browser.new_context(
            viewport={'width': 1920, 'height': 1080},
            user_agent=self.user_agent,
            locale='en-US',
            extra_http_headers={
                'Accept-Language': 'en-US,en;q=0.9',
            },
        )

        # Hide the most common automation indicator
        await self._context.add_init_script("""
            Object.defineProperty(navigator, 'webdriver', {
                get: () => undefined
            });
        """)

    def is_connected(self) -> bool:
        """Check if the browser is still usable."""
        try:
            return (
                self._browser is not None
                and self._context is not None
                and self._browser.is_connected()
            )
        except Exception:
            return False

    @asynccontextmanager
    async def page(self) -> AsyncIterator[Page]:
        """Open a page for one source; it is closed on every exit path."""
        if not self.is_connected():
            raise RenderingEngineUnavailable("Browser is no longer connected")

        try:
            page = await asyncio.wait_for(self._context.new_page(), timeout=self.page_timeout)
        except asyncio.TimeoutError:
            raise RenderingEngineUnavailable("Timeout creating new page - browser may be unresponsive")
        except PlaywrightError as e:
            raise RenderingEngineUnavailable(f"Could not open page: {e}") from e

        try:
            yield page
        finally:
            try:
                await asyncio.wait_for(page.close(), timeout=CLEANUP_TIMEOUT)
            except asyncio.TimeoutError:
                logger.warning("Page close timed out, forcing cleanup")
            except PlaywrightError as e:
                logger.debug(f"Error closing page: {e}")

    async def _cleanup(self):
        """Clean up browser resources with timeouts to prevent hanging."""
        if self._context:
            try:
                await asyncio.wait_for(self._context.close(), timeout=CLEANUP_TIMEOUT)
            except asyncio.TimeoutError:
                logger.warning("Context close timed out, forcing cleanup")
            except Exception as e:
                logger.warning(f"Error closing context: {e}")
            self._context = None

        if self._browser:
            try:
                await asyncio.wait_for(self._browser.close(), timeout=CLEANUP_TIMEOUT)
            except asyncio.TimeoutError:
                logger.warning("Browser close timed out, forcing cleanup")
            except Exception as e:
                logger.warning(f"Error closing browser: {e}")
            self._browser = None

        if self._playwright:
            try:
                await asyncio.wait_for(self._playwright.stop(), timeout=CLEANUP_TIMEOUT)
            except asyncio.TimeoutError:
                logger.warning("Playwright stop timed out, forcing cleanup")
            except Exception as e:
                logger.warning(f"Error stopping playwright: {e}")
            self._playwright = None

    async def close(self):
        """Close the browser and cleanup resources."""
        await self._cleanup()

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self._cleanup()


async def render_page(
    page,
    url: str,
    wait_for: Optional[str] = None,
    navigation_timeout: float = 30.0,
    wait_timeout: float = 10.0,
) -> Tuple[BeautifulSoup, str]:
    """
    Navigate a page and return the settled document.

    Args:
        page: Playwright page (or anything with the same async API)
        url: URL to load
        wait_for: CSS group to wait for after load; absence is not an error
        navigation_timeout: Seconds allowed for network activity to quiesce
        wait_timeout: Seconds to wait for ``wait_for``

    Returns:
        Tuple of (parsed document, final page URL)

    Raises:
        NavigationError: Page unreachable or navigation timed out
        ExtractionError: Page content could not be read
    """
    try:
        await page.goto(url, wait_until='networkidle', timeout=int(navigation_timeout * 1000))
    except PlaywrightError as e:
        raise NavigationError(f"Failed to load {url}: {e}") from e

    if wait_for:
        try:
            await page.wait_for_selector(wait_for, state='attached', timeout=int(wait_timeout * 1000))
        except PlaywrightError as e:
            logger.debug(f"Selector {wait_for} not found: {e}")

    try:
        html = await page.content()
    except PlaywrightError as e:
        raise ExtractionError(f"Could not read content of {url}: {e}") from e

    return BeautifulSoup(html, 'html.parser'), page.url
