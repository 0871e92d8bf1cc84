"""
Parsing of the classification service's free-text answer.

The model is asked for a single JSON object but sometimes wraps it in
prose. Two strategies are tried in order: the whole text, then the span
from the first ``{`` to the last ``}``.
"""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from sitequalifier.protocols import MAX_SCORE, MIN_SCORE, Verdict

PARSE_FAILURE_MESSAGE = "Failed to parse AI response as JSON"
DEFAULT_REASON = "Unable to determine qualification."

_BRACED_OBJECT = re.compile(r"\{.*\}", re.DOTALL)
_LEADING_INTEGER = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class ParsedClassification:
    verdict: Verdict
    score: int
    reason: str
    # Set when the model returned a verdict outside QUALIFY/DISQUALIFY
    raw_verdict: Optional[str] = None


@dataclass(frozen=True)
class ParseFailure:
    message: str = PARSE_FAILURE_MESSAGE


ParseOutcome = Union[ParsedClassification, ParseFailure]


def _load_object(candidate: str) -> Optional[Dict[str, Any]]:
    try:
        value = json.loads(candidate)
    except ValueError:
        return None
    return value if isinstance(value, dict) else None


def _whole_text(text: str) -> Optional[Dict[str, Any]]:
    return _load_object(text)


def _braced_span(text: str) -> Optional[Dict[str, Any]]:
    match = _BRACED_OBJECT.search(text)
    return _load_object(match.group(0)) if match else None


STRATEGIES: List[Callable[[str], Optional[Dict[str, Any]]]] = [_whole_text, _braced_span]


def coerce_score(value: Any) -> int:
    """
    Read an integer score the way a lenient reader would.

    ``8``, ``8.7``, ``"8"`` and ``"8/10"`` all give 8. Anything without a
    leading integer, and anything outside 0-10, gives 0.
    """
    if isinstance(value, bool) or value is None:
        return MIN_SCORE
    if isinstance(value, int):
        score = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            return MIN_SCORE
        score = int(value)
    elif isinstance(value, str):
        match = _LEADING_INTEGER.match(value)
        if not match:
            return MIN_SCORE
        score = int(match.group(1))
    else:
        return MIN_SCORE
    return score if MIN_SCORE <= score <= MAX_SCORE else MIN_SCORE


def coerce_verdict(value: Any) -> tuple[Verdict, Optional[str]]:
    """Map the model's verdict onto the enum; unknown values disqualify."""
    if isinstance(value, str):
        normalized = value.strip().upper()
        if normalized in Verdict.__members__:
            return Verdict(normalized), None
        if normalized:
            return Verdict.DISQUALIFY, value
    return Verdict.DISQUALIFY, None


def _coerce_reason(value: Any) -> str:
    if isinstance(value, str):
        return value.strip() or DEFAULT_REASON
    if not value:
        return DEFAULT_REASON
    return str(value)


def parse_classification(text: str) -> ParseOutcome:
    """Parse a raw model answer into a structured verdict."""
    payload: Optional[Dict[str, Any]] = None
    for strategy in STRATEGIES:
        payload = strategy(text)
        if payload is not None:
            break

    if payload is None:
        return ParseFailure()

    verdict, raw_verdict = coerce_verdict(payload.get("verdict"))
    return ParsedClassification(
        verdict=verdict,
        score=coerce_score(payload.get("score")),
        reason=_coerce_reason(payload.get("reason")),
        raw_verdict=raw_verdict,
    )
