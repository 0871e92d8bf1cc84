"""
Pipeline orchestration for SiteQualifier.
"""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, List, Optional, Protocol, Sequence
from uuid import uuid4

import structlog

from sitequalifier.classifier.classifier import NO_CONTENT_REASON
from sitequalifier.errors import BrowserLaunchError
from sitequalifier.observability.metrics import increment, observe
from sitequalifier.protocols import ClassificationResult, KeyValueStore, RecordSink, RunSummary, ScrapeResult
from sitequalifier.utils.url import normalize_url


class Scraper(Protocol):
    async def scrape(self, url: str) -> ScrapeResult: ...

    async def close(self) -> None: ...


class WebsiteClassifier(Protocol):
    async def classify(self, url: str, content: str) -> ClassificationResult: ...


class ResultStore(RecordSink, KeyValueStore, Protocol):
    """Receives the per-URL records and the final summary."""


class Pipeline:
    """
    Drives every URL through scrape -> classify -> persist, one at a time.

    Exactly one record is persisted per input URL, in input order. A failure
    while handling one URL becomes a DISQUALIFY record for that URL and the
    run carries on; only a browser that cannot be launched stops the run.
    """

    def __init__(
        self,
        scraper: Scraper,
        classifier: WebsiteClassifier,
        store: ResultStore,
        *,
        delay_between_requests: float = 2.0,
        output_key: str = "OUTPUT",
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ) -> None:
        self.scraper = scraper
        self.classifier = classifier
        self.store = store
        self.delay_between_requests = delay_between_requests
        self.output_key = output_key
        self._sleep = sleep or asyncio.sleep
        self.logger = structlog.get_logger(self.__class__.__name__)

    async def _process_url(self, url: str) -> ClassificationResult:
        """Scrape and classify one URL; always returns a record."""
        start_time = time.perf_counter()

        try:
            self.logger.info("Scraping website", url=url)
            scraped = await self.scraper.scrape(url)

            if not scraped.success:
                increment("scrape_failures")
                self.logger.warning("Scraping failed", url=scraped.url, error=scraped.error)
                result = ClassificationResult.disqualified(
                    scraped.url, f"{NO_CONTENT_REASON} Error: {scraped.error}"
                )
            else:
                self.logger.info("Scraped successfully, qualifying", url=scraped.url, title=scraped.title)
                result = await self.classifier.classify(scraped.url, scraped.content)
                self.logger.info(
                    "Qualification result",
                    url=result.url,
                    verdict=result.verdict.value,
                    score=result.score,
                    reason=result.reason,
                )

        except BrowserLaunchError:
            raise
        except Exception as e:
            self.logger.error("Unexpected error processing website", url=url, error=str(e), error_type=type(e).__name__)
            result = ClassificationResult.disqualified(normalize_url(url), f"Error: {e}")

        increment("urls_processed", labels={"verdict": result.verdict.value})
        observe("url_duration_seconds", time.perf_counter() - start_time)
        return result

    async def run(self, urls: Sequence[str]) -> RunSummary:
        """
        Qualify ``urls`` sequentially and return the run summary.

        Each record is pushed to the store as soon as it exists; the summary
        is stored under ``output_key`` once the loop has finished.
        """
        run_id = str(uuid4())
        structlog.contextvars.bind_contextvars(run_id=run_id)
        total = len(urls)
        results: List[ClassificationResult] = []

        self.logger.info("Starting qualification run", url_count=total)

        try:
            try:
                for index, url in enumerate(urls):
                    self.logger.info("Processing website", url=url, position=index + 1, total=total)

                    result = await self._process_url(url)
                    await self.store.push(result.to_dict())
                    results.append(result)

                    if index < total - 1:
                        self.logger.info("Waiting before next website", delay_ms=int(self.delay_between_requests * 1000))
                        await self._sleep(self.delay_between_requests)
            finally:
                await self.scraper.close()

            summary = RunSummary.from_results(results)
            self.logger.info(
                "Qualification run complete",
                total=summary.total,
                qualified=summary.qualified,
                disqualified=summary.disqualified,
            )
            await self.store.set_value(self.output_key, summary.to_dict())
            return summary

        except Exception as e:
            self.logger.error("Qualification run failed", error=str(e), processed=len(results), total=total)
            raise
        finally:
            structlog.contextvars.unbind_contextvars("run_id")
