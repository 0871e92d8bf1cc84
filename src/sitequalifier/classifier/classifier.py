"""
ICP classification of extracted website content.
"""

from __future__ import annotations

import structlog

from sitequalifier.errors import ClassificationError
from sitequalifier.observability.metrics import increment
from sitequalifier.protocols import ClassificationResult, ClassificationService
from sitequalifier.recovery.retry import RetryExecutor

from .parser import ParseFailure, parse_classification
from .prompts import DEFAULT_SYSTEM_PROMPT, build_user_message

logger = structlog.get_logger(__name__)

NO_CONTENT_REASON = "Website inaccessible or no product description found."


class Classifier:
    """
    Decides QUALIFY/DISQUALIFY, a 0-10 score and a reason for one website.

    ``classify`` never raises: every failure becomes a DISQUALIFY record
    whose reason starts with ``"Error: "``.
    """

    def __init__(
        self,
        service: ClassificationService,
        *,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        retry: RetryExecutor | None = None,
        min_content_length: int = 20,
    ) -> None:
        self.service = service
        self.system_prompt = system_prompt
        self.retry = retry or RetryExecutor()
        self.min_content_length = min_content_length

    async def _ask(self, url: str, content: str) -> ClassificationResult:
        user_message = build_user_message(url, content)
        response_text = await self.retry.run(lambda: self.service.complete(self.system_prompt, user_message))

        outcome = parse_classification(response_text)
        if isinstance(outcome, ParseFailure):
            raise ClassificationError(outcome.message)

        if outcome.raw_verdict is not None:
            logger.warning("Unrecognised verdict, disqualifying", url=url, verdict=outcome.raw_verdict)

        return ClassificationResult(url=url, verdict=outcome.verdict, score=outcome.score, reason=outcome.reason)

    async def classify(self, url: str, content: str) -> ClassificationResult:
        if not content or len(content) < self.min_content_length:
            return ClassificationResult.disqualified(url, NO_CONTENT_REASON)

        try:
            return await self._ask(url, content)
        except Exception as e:
            increment("classification_errors")
            logger.error("Error qualifying website", url=url, error=str(e), error_type=type(e).__name__)
            return ClassificationResult.disqualified(url, f"Error: {e}")
