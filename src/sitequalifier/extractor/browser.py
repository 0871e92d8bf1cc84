"""
Shared headless browser for a qualification run.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional, Sequence

import structlog
from playwright.async_api import Browser, Page, Playwright, async_playwright

from sitequalifier.errors import BrowserLaunchError

logger = structlog.get_logger(__name__)


class BrowserSession:
    """
    Owns the single Chromium process used for a whole run.

    The browser is launched on the first ``acquire()`` and relaunched if it
    has disconnected since. Each ``page()`` lives in its own browser context,
    so cookies and DOM state never leak from one website to the next.
    """

    def __init__(self, *, headless: bool = True, launch_args: Optional[Sequence[str]] = None) -> None:
        self.headless = headless
        self.launch_args: List[str] = list(launch_args or [])
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self.launch_count = 0

    @property
    def is_connected(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    async def acquire(self) -> Browser:
        """Return a connected browser, launching one if needed."""
        if self._browser is not None and self._browser.is_connected():
            return self._browser

        if self._browser is not None:
            logger.warning("Browser disconnected, relaunching")
            self._browser = None

        try:
            if self._playwright is None:
                self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(headless=self.headless, args=self.launch_args)
        except Exception as e:
            raise BrowserLaunchError(f"Failed to launch browser: {e}") from e

        self.launch_count += 1
        logger.info("Browser launched", headless=self.headless, launch_count=self.launch_count)
        return self._browser

    @asynccontextmanager
    async def page(self, *, user_agent: Optional[str] = None) -> AsyncIterator[Page]:
        """Yield a fresh page in an isolated context; always closed on exit."""
        browser = await self.acquire()
        context = await browser.new_context(user_agent=user_agent)
        try:
            page = await context.new_page()
            if user_agent:
                await page.set_extra_http_headers({"User-Agent": user_agent})
            yield page
        finally:
            await context.close()

    async def release(self) -> None:
        """Close the browser and stop the Playwright driver. Safe to call twice."""
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None

        if browser is not None:
            try:
                await browser.close()
            except Exception as e:
                logger.warning("Error closing browser", error=str(e))
        if playwright is not None:
            await playwright.stop()
            logger.info("Browser session released")

    async def close(self) -> None:
        await self.release()

    async def __aenter__(self) -> BrowserSession:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.release()
