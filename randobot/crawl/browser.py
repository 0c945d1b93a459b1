"""
Headless browser page loader backed by Playwright
"""

import logging
from typing import Optional, Protocol

from playwright.async_api import async_playwright

from ..errors import BrowserLaunchError, PageLoadError
from .config import CrawlConfig
from .models import LoadedPage


logger = logging.getLogger(__name__)

BROWSER_ARGS = [
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-dev-shm-usage',
    '--disable-gpu',
    '--no-first-run',
]
USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)


class PageLoader(Protocol):
    """What the crawler needs from a browser session"""

    async def __aenter__(self) -> 'PageLoader': ...

    async def __aexit__(self, exc_type, exc, tb) -> None: ...

    async def load(self, url: str, wait_until: str, timeout_ms: int) -> LoadedPage: ...


class PlaywrightPageLoader:
    """One Chromium page reused for every navigation of a crawl"""

    def __init__(self, config: Optional[CrawlConfig] = None):
        self.config = config or CrawlConfig()
        self._playwright = None
        self._browser = None
        self._page = None

    async def __aenter__(self) -> 'PlaywrightPageLoader':
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.config.headless,
                args=BROWSER_ARGS,
            )
            context = await self._browser.new_context(
                user_agent=USER_AGENT,
                viewport={'width': 1920, 'height': 1080},
            )
            self._page = await context.new_page()
            self._page.set_default_navigation_timeout(self.config.page_timeout_ms)
        except Exception as e:
            await self._shutdown()
            raise BrowserLaunchError(f"Could not launch browser: {e}") from e

        logger.info("Browser launched")
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self._shutdown()

    async def _shutdown(self):
        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception as e:
                logger.warning(f"Error closing browser: {e}")
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
        self._page = None

    async def load(self, url: str, wait_until: str, timeout_ms: int) -> LoadedPage:
        """Navigate and return the rendered DOM"""
        if self._page is None:
            raise PageLoadError(url, "browser not started")

        try:
            await self._page.goto(url, wait_until=wait_until, timeout=timeout_ms)
            await self._page.wait_for_selector('body', timeout=timeout_ms)
            html = await self._page.content()
            title = await self._page.title()
        except Exception as e:
            raise PageLoadError(url, f"{wait_until}: {e}") from e

        return LoadedPage(url=self._page.url, html=html, title=title)
