"""
Dependency injection container for SiteQualifier components.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, AsyncIterator, Callable, Dict, Generic, Optional, TypeVar
from uuid import uuid4

import structlog

from sitequalifier.config import Config, RunInput, load_config
from sitequalifier.protocols import RunSummary

if TYPE_CHECKING:
    from sitequalifier.classifier import OpenRouterClient
    from sitequalifier.extractor import BrowserSession
    from sitequalifier.pipeline import Pipeline
    from sitequalifier.storage import FileRecordStore

T = TypeVar("T")


class LazyInstance(Generic[T]):
    """Lazy-loaded instance with lifecycle management."""

    def __init__(self, factory: Callable[..., T], *args: Any, **kwargs: Any) -> None:
        self._factory = factory
        self._args = args
        self._kwargs = kwargs
        self._instance: Optional[T] = None
        self._initialized = False

    @property
    def created(self) -> bool:
        return self._initialized

    async def get(self) -> T:
        """Get or create the instance."""
        if not self._initialized:
            self._instance = self._factory(*self._args, **self._kwargs)
            if callable(getattr(self._instance, "initialize", None)):
                await self._instance.initialize()  # type: ignore
            self._initialized = True
        assert self._instance is not None
        return self._instance

    async def cleanup(self) -> None:
        """Clean up the instance."""
        if self._instance is not None and callable(getattr(self._instance, "close", None)):
            await self._instance.close()  # type: ignore
        self._instance = None
        self._initialized = False


class DependencyContainer:
    """
    Owns the browser session, the classification client and the record store
    for one run, and assembles them into a ``Pipeline``.

    Components are only built when first requested, so validating a
    configuration never launches a browser.
    """

    def __init__(
        self,
        run_input: RunInput,
        config: Optional[Config] = None,
        *,
        config_path: Optional[Path] = None,
    ) -> None:
        self.run_input = run_input
        self.config = config
        self.config_path = config_path
        self.logger = structlog.get_logger(self.__class__.__name__)

        self._instances: Dict[str, LazyInstance[Any]] = {}
        self._instances_lock = asyncio.Lock()

        self.container_id = str(uuid4())
        self.is_running = False

    async def initialize(self) -> None:
        """Load configuration (unless one was given) and register components."""
        if self.config is None:
            self.config = load_config(self.config_path)

        self._create_instances()
        self.is_running = True

        self.logger.info(
            "Dependency container initialized",
            container_id=self.container_id,
            config_path=str(self.config_path) if self.config_path else "default",
            url_count=len(self.run_input.urls),
        )

    def _create_instances(self) -> None:
        if self.config is None:
            raise RuntimeError("Configuration must be loaded before creating instances")

        # Imported here so that loading the configuration stays cheap
        from sitequalifier.classifier import OpenRouterClient
        from sitequalifier.extractor import BrowserSession
        from sitequalifier.storage import FileRecordStore

        self._instances = {
            "browser": LazyInstance(
                BrowserSession,
                headless=self.config.scraper.headless,
                launch_args=self.config.scraper.launch_args,
            ),
            "service_client": LazyInstance(
                OpenRouterClient.from_config, self.run_input.api_key, self.config.classifier
            ),
            "record_store": LazyInstance(
                FileRecordStore, self.config.storage.output_dir, self.config.storage.dataset_name
            ),
        }

    async def _get(self, name: str) -> Any:
        if not self._instances:
            raise RuntimeError("Container is not initialized")
        async with self._instances_lock:
            return await self._instances[name].get()

    async def get_browser(self) -> BrowserSession:
        """Get the browser session (Chromium is launched on first page load)."""
        return await self._get("browser")  # type: ignore[no-any-return]

    async def get_service_client(self) -> OpenRouterClient:
        """Get the classification service client."""
        return await self._get("service_client")  # type: ignore[no-any-return]

    async def get_record_store(self) -> FileRecordStore:
        """Get the record store."""
        return await self._get("record_store")  # type: ignore[no-any-return]

    async def build_pipeline(self) -> Pipeline:
        """Assemble scraper, classifier and store into a pipeline for this run."""
        from sitequalifier.classifier import Classifier
        from sitequalifier.extractor import ContentScraper
        from sitequalifier.pipeline import Pipeline
        from sitequalifier.recovery import RetryExecutor

        assert self.config is not None

        scraper = ContentScraper.from_config(await self.get_browser(), self.config.scraper)
        retry = RetryExecutor(
            max_retries=self.run_input.max_retries,
            base_delay=self.config.retry.base_delay_ms / 1000.0,
        )
        classifier = Classifier(
            await self.get_service_client(),
            system_prompt=self.run_input.icp_system_prompt,
            retry=retry,
            min_content_length=self.config.classifier.min_content_length,
        )

        return Pipeline(
            scraper,
            classifier,
            await self.get_record_store(),
            delay_between_requests=self.run_input.delay_seconds,
            output_key=self.config.storage.output_key,
        )

    @asynccontextmanager
    async def lifecycle(self) -> AsyncIterator[DependencyContainer]:
        """Context manager for proper lifecycle management."""
        try:
            await self.initialize()
            yield self
        finally:
            await self.shutdown()

    async def shutdown(self) -> None:
        """Close every component that was created."""
        if not self.is_running:
            return

        self.logger.info("Shutting down dependency container", container_id=self.container_id)

        for name, instance in self._instances.items():
            if not instance.created:
                continue
            try:
                await instance.cleanup()
            except Exception as e:
                self.logger.error("Error cleaning up component", component=name, error=str(e))

        self.is_running = False
        self.logger.info("Dependency container shutdown complete")


async def run_qualification(run_input: RunInput, config: Config) -> RunSummary:
    """Qualify ``run_input.urls`` with components built from ``config``."""
    container = DependencyContainer(run_input, config)
    async with container.lifecycle():
        pipeline = await container.build_pipeline()
        summary = await pipeline.run(run_input.urls)

        store = await container.get_record_store()
        container.logger.info(
            "Results stored",
            records_written=store.records_written,
            dataset=str(store.dataset_path),
            output=str(store.values_dir / f"{config.storage.output_key}.json"),
        )
        return summary
