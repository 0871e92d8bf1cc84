"""
Record stores for qualification results.

The layout on disk follows the dataset / key-value-store split of the
Apify actor storage::

    <output_dir>/datasets/<dataset_name>.jsonl      one line per website
    <output_dir>/key_value_stores/<KEY>.json        run-level values (OUTPUT)
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, List

import structlog

from sitequalifier.utils.atomic import atomic_write_json

logger = structlog.get_logger(__name__)


class FileRecordStore:
    """Append-only JSONL dataset plus a directory of JSON values."""

    def __init__(self, output_dir: Path, dataset_name: str = "default") -> None:
        self.output_dir = Path(output_dir)
        self.dataset_path = self.output_dir / "datasets" / f"{dataset_name}.jsonl"
        self.values_dir = self.output_dir / "key_value_stores"
        self.records_written = 0
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        self.dataset_path.parent.mkdir(parents=True, exist_ok=True)
        self.values_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Record store ready", dataset=str(self.dataset_path), values=str(self.values_dir))

    def _append_line(self, line: str) -> None:
        self.dataset_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.dataset_path, "a", encoding="utf-8") as f:
            f.write(line + "\n")
            f.flush()

    async def push(self, record: Dict[str, Any]) -> None:
        """Append one record; it is on disk when this returns."""
        line = json.dumps(record, ensure_ascii=False)
        async with self._lock:
            await asyncio.to_thread(self._append_line, line)
            self.records_written += 1

    async def set_value(self, key: str, value: Dict[str, Any]) -> None:
        """Atomically replace the value stored under ``key``."""
        target = self.values_dir / f"{key}.json"
        await asyncio.to_thread(atomic_write_json, target, value)
        logger.debug("Value stored", key=key, path=str(target))


class MemoryRecordStore:
    """In-process store, handy for tests and for embedding the pipeline."""

    def __init__(self) -> None:
        self.records: List[Dict[str, Any]] = []
        self.values: Dict[str, Dict[str, Any]] = {}

    async def push(self, record: Dict[str, Any]) -> None:
        self.records.append(dict(record))

    async def set_value(self, key: str, value: Dict[str, Any]) -> None:
        self.values[key] = value
