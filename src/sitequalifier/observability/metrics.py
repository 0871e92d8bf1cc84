"""
Defines Prometheus metrics for the qualification pipeline.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter
from prometheus_client import Histogram as _OrigHistogram
from prometheus_client import start_http_server

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Duplicate-safe Prometheus metric wrappers
# ---------------------------------------------------------------------------
# Re-importing this module (test reloads, embedding) must not register the
# same collector twice.


def _duplicate_safe_factory(metric_cls):
    """Return a factory that reuses an existing collector if already present."""

    def _factory(name: str, documentation: str, *args, **kwargs):  # type: ignore[override]
        existing = _PROM_REGISTRY._names_to_collectors.get(name)
        if existing is not None:
            return existing  # type: ignore[return-value]

        try:
            return metric_cls(name, documentation, *args, **kwargs)  # type: ignore[call-arg]
        except ValueError:
            # Counters register under both "<name>" and "<name>_total"
            return _PROM_REGISTRY._names_to_collectors[name]  # type: ignore[return-value]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)  # type: ignore[assignment]
Histogram = _duplicate_safe_factory(_OrigHistogram)  # type: ignore[assignment]


def _create_metrics() -> Dict[str, Any]:
    return {
        "urls_processed": Counter(
            "sitequalifier_urls_processed",
            "Websites that received a verdict",
            ["verdict"],
        ),
        "scrape_failures": Counter(
            "sitequalifier_scrape_failures",
            "Websites whose content could not be extracted",
        ),
        "classification_errors": Counter(
            "sitequalifier_classification_errors",
            "Classification attempts that ended in an error record",
        ),
        "service_retries": Counter(
            "sitequalifier_service_retries",
            "Retries of the classification service after recoverable failures",
        ),
        "url_duration_seconds": Histogram(
            "sitequalifier_url_duration_seconds",
            "Time taken to scrape and classify one website",
            buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 30.0, 60.0, 120.0],
        ),
    }


METRICS: Dict[str, Any] = _create_metrics()


def increment(name: str, value: float = 1.0, labels: Optional[Dict[str, Any]] = None) -> None:
    """Increment a counter metric."""
    metric = METRICS.get(name)
    if metric is None:
        return
    if labels is not None:
        metric.labels(**labels).inc(value)
    else:
        metric.inc(value)


def observe(name: str, value: float) -> None:
    """Observe a histogram metric."""
    metric = METRICS.get(name)
    if metric is not None:
        metric.observe(value)


def start_metrics_server(port: Optional[int]) -> bool:
    """Expose the metrics over HTTP when a port is configured."""
    if port is None:
        return False
    start_http_server(port)
    logger.info("Prometheus exporter started", port=port)
    return True
