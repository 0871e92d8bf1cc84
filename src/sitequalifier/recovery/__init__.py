"""Retry policy for recoverable classification-service failures."""

from .retry import RetryExecutor, is_recoverable

__all__ = ["RetryExecutor", "is_recoverable"]
