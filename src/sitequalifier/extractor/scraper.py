"""
Renders a website and turns it into a ScrapeResult.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import structlog

from sitequalifier.errors import BrowserLaunchError
from sitequalifier.protocols import ScrapeResult
from sitequalifier.utils.url import normalize_url

from .page_parser import (
    ANNOTATE_FONT_SIZES_JS,
    DEFAULT_BODY_LIMIT,
    DEFAULT_HERO_LIMIT,
    DEFAULT_HERO_MIN_FONT_PX,
    extract_page_fields,
)

if TYPE_CHECKING:
    from sitequalifier.config.config import ScraperConfig

    from .browser import BrowserSession

logger = structlog.get_logger(__name__)

INSUFFICIENT_CONTENT_ERROR = "Insufficient content scraped - page may be empty or blocked"


class ContentScraper:
    """Extracts a bounded plain-text summary of a website for classification."""

    def __init__(
        self,
        session: BrowserSession,
        *,
        user_agent: Optional[str] = None,
        page_timeout_ms: int = 30000,
        min_content_length: int = 50,
        body_text_limit: int = DEFAULT_BODY_LIMIT,
        hero_text_limit: int = DEFAULT_HERO_LIMIT,
        hero_min_font_px: float = DEFAULT_HERO_MIN_FONT_PX,
    ) -> None:
        self.session = session
        self.user_agent = user_agent
        self.page_timeout_ms = page_timeout_ms
        self.min_content_length = min_content_length
        self.body_text_limit = body_text_limit
        self.hero_text_limit = hero_text_limit
        self.hero_min_font_px = hero_min_font_px

    @classmethod
    def from_config(cls, session: BrowserSession, config: ScraperConfig) -> ContentScraper:
        return cls(
            session,
            user_agent=config.user_agent,
            page_timeout_ms=config.page_timeout_ms,
            min_content_length=config.min_content_length,
            body_text_limit=config.body_text_limit,
            hero_text_limit=config.hero_text_limit,
            hero_min_font_px=config.hero_min_font_px,
        )

    async def _snapshot(self, url: str) -> str:
        async with self.session.page(user_agent=self.user_agent) as page:
            await page.goto(url, wait_until="networkidle", timeout=self.page_timeout_ms)
            await page.evaluate(ANNOTATE_FONT_SIZES_JS)
            return await page.content()

    async def scrape(self, url: str) -> ScrapeResult:
        """
        Render ``url`` and extract its marketing text.

        Navigation, timeout and DOM errors come back as a failed result;
        only a browser that cannot be launched at all is raised.
        """
        normalized_url = normalize_url(url)

        try:
            html = await self._snapshot(normalized_url)
            fields = extract_page_fields(
                html,
                body_limit=self.body_text_limit,
                hero_limit=self.hero_text_limit,
                hero_min_font_px=self.hero_min_font_px,
            )
        except BrowserLaunchError:
            raise
        except Exception as e:
            logger.error("Error scraping website", url=normalized_url, error=str(e), error_type=type(e).__name__)
            return ScrapeResult.failed(normalized_url, f"Scraping failed: {e}")

        content = fields.to_content()
        if len(content) < self.min_content_length:
            logger.warning("Insufficient content scraped", url=normalized_url, content_length=len(content))
            return ScrapeResult.failed(normalized_url, INSUFFICIENT_CONTENT_ERROR)

        logger.debug("Website scraped", url=normalized_url, title=fields.title, content_length=len(content))
        return ScrapeResult(url=normalized_url, content=content, title=fields.title, success=True)

    async def close(self) -> None:
        """Release the shared browser session."""
        await self.session.release()
