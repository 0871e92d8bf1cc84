"""
Bounded exponential-backoff retry for calls to the classification service.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

import structlog
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt, wait_exponential

from sitequalifier.observability.metrics import increment

logger = structlog.get_logger(__name__)

T = TypeVar("T")

RATE_LIMIT_MARKERS = ("rate_limit", "429")
SERVER_ERROR_MARKERS = ("500", "503")


def is_rate_limit_error(exc: BaseException) -> bool:
    message = str(exc)
    return getattr(exc, "status_code", None) == 429 or any(marker in message for marker in RATE_LIMIT_MARKERS)


def is_server_error(exc: BaseException) -> bool:
    message = str(exc)
    return getattr(exc, "status_code", None) in {500, 503} or any(marker in message for marker in SERVER_ERROR_MARKERS)


def is_recoverable(exc: BaseException) -> bool:
    """Rate limiting and transient server errors are worth another attempt."""
    return is_rate_limit_error(exc) or is_server_error(exc)


class RetryExecutor:
    """
    Runs an async operation up to ``max_retries`` times.

    The wait before attempt k+1 is ``base_delay * 2 ** (k - 1)`` seconds,
    without jitter. Unrecoverable errors and the final failure are re-raised
    unchanged.
    """

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 2.0,
        *,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ) -> None:
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if base_delay < 0:
            raise ValueError("base_delay must not be negative")
        self.max_retries = max_retries
        self.base_delay = base_delay
        self._sleep = sleep or asyncio.sleep

    def _log_before_sleep(self, retry_state: RetryCallState) -> None:
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        error = retry_state.outcome.exception() if retry_state.outcome else None
        increment("service_retries")
        logger.info(
            "Rate limited or server error, waiting before retry",
            attempt=retry_state.attempt_number,
            max_retries=self.max_retries,
            delay_ms=int(delay * 1000),
            error=str(error),
        )

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            sleep=self._sleep,
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=self.base_delay, exp_base=2, min=0),
            retry=retry_if_exception(is_recoverable),
            before_sleep=self._log_before_sleep,
            reraise=True,
        )

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Execute ``operation`` under the retry policy and return its result.

        ``operation`` is called afresh for every attempt and may be any
        callable returning an awaitable, such as a lambda around a coroutine.
        """
        async for attempt in self._retrying():
            with attempt:
                result = await operation()
        return result
