"""Utility modules for SiteQualifier."""

from .atomic import atomic_write_json
from .url import normalize_url

__all__ = ["atomic_write_json", "normalize_url"]
