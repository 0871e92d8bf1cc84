"""Test helpers shared across the unit and integration suites."""

from .fakes import (
    EMPTY_PAGE_HTML,
    LANDING_PAGE_HTML,
    FakePage,
    FakeScraper,
    FakeSession,
    RecordingSleep,
    RecordingStore,
    completion,
    scraped,
)
from .metric_delta import histogram_observes, metric_delta, sample_value

__all__ = [
    "EMPTY_PAGE_HTML",
    "LANDING_PAGE_HTML",
    "FakePage",
    "FakeScraper",
    "FakeSession",
    "RecordingSleep",
    "RecordingStore",
    "completion",
    "histogram_observes",
    "metric_delta",
    "sample_value",
    "scraped",
]
