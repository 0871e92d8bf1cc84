"""
Core data structures and collaborator contracts for SiteQualifier.

Every URL of a run produces exactly one ScrapeResult and one
ClassificationResult; the run as a whole produces one RunSummary.
The pipeline talks to the outside world only through the protocols
defined at the bottom of this module.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable

# ============================================================================
# Enums and Constants
# ============================================================================

MIN_SCORE = 0
MAX_SCORE = 10


class Verdict(str, Enum):
    """Binary qualification outcome."""

    QUALIFY = "QUALIFY"
    DISQUALIFY = "DISQUALIFY"


# ============================================================================
# Core Dataclasses
# ============================================================================


@dataclass(frozen=True)
class ScrapeResult:
    """Outcome of rendering and extracting one website."""

    url: str
    content: str
    title: str
    success: bool
    error: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the result."""
        if not self.success and self.content:
            raise ValueError("A failed scrape cannot carry content")

    @classmethod
    def failed(cls, url: str, error: str) -> ScrapeResult:
        return cls(url=url, content="", title="", success=False, error=error)


@dataclass(frozen=True)
class ClassificationResult:
    """ICP verdict for a single website."""

    url: str
    verdict: Verdict
    score: int
    reason: str

    def __post_init__(self) -> None:
        """Validate the result."""
        if isinstance(self.score, bool) or not isinstance(self.score, int):
            raise TypeError("Score must be an integer")
        if not MIN_SCORE <= self.score <= MAX_SCORE:
            raise ValueError(f"Score must be between {MIN_SCORE} and {MAX_SCORE}")

    @classmethod
    def disqualified(cls, url: str, reason: str) -> ClassificationResult:
        """Build the score-0 record used for every failure path."""
        return cls(url=url, verdict=Verdict.DISQUALIFY, score=MIN_SCORE, reason=reason)

    @property
    def qualified(self) -> bool:
        return self.verdict is Verdict.QUALIFY

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "verdict": self.verdict.value,
            "score": self.score,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class RunSummary:
    """Aggregate counters and the ordered results of a run."""

    total: int
    qualified: int
    disqualified: int
    results: List[ClassificationResult] = field(default_factory=list)

    @classmethod
    def from_results(cls, results: Sequence[ClassificationResult]) -> RunSummary:
        qualified = sum(1 for result in results if result.verdict is Verdict.QUALIFY)
        disqualified = sum(1 for result in results if result.verdict is Verdict.DISQUALIFY)
        return cls(
            total=len(results),
            qualified=qualified,
            disqualified=disqualified,
            results=list(results),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "qualified": self.qualified,
            "disqualified": self.disqualified,
            "results": [result.to_dict() for result in self.results],
        }


# ============================================================================
# Collaborator Protocols
# ============================================================================


@runtime_checkable
class ClassificationService(Protocol):
    """Language-model backend that turns a directive and a message into text."""

    async def complete(self, system_prompt: str, user_message: str) -> str:
        """Return the generated text.

        May raise on transport, rate-limit or server errors; the caller
        decides whether to retry.
        """
        ...


@runtime_checkable
class RecordSink(Protocol):
    """Append-only store receiving one record per processed URL."""

    async def push(self, record: Dict[str, Any]) -> None:
        ...


@runtime_checkable
class KeyValueStore(Protocol):
    """Named slots for run-level output such as the final summary."""

    async def set_value(self, key: str, value: Dict[str, Any]) -> None:
        ...
