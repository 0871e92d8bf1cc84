"""Logging and metrics for SiteQualifier."""

from __future__ import annotations

from .logging import configure_logging
from .metrics import METRICS, increment, observe, start_metrics_server

__all__ = ["METRICS", "configure_logging", "increment", "observe", "start_metrics_server"]
