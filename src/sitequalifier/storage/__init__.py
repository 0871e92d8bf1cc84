"""Persistence of per-website records and the run summary."""

from .record_store import FileRecordStore, MemoryRecordStore

__all__ = ["FileRecordStore", "MemoryRecordStore"]
