"""
File-based Trace Store

Reads execution logs from a JSONL export (one raw document per line).
Human-readable, easy to inspect, no external services.

DESIGN RULES:
- Read-only
- The file is re-read on every call so fresh exports show up without a restart
- A missing file is an empty store; an unreadable file is StoreUnavailableError
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from app.core.errors import StoreUnavailableError
from store.memory import InMemoryTraceStore


logger = logging.getLogger(__name__)


class JsonlTraceStore(InMemoryTraceStore):
    """
    JSONL file-backed trace store.

    Query semantics are inherited from InMemoryTraceStore.
    """

    DEFAULT_PATH = "execution_logs.jsonl"

    def __init__(self, path: str | None = None, collection: str | None = None):
        super().__init__(documents=None, collection=collection)
        self._path = Path(path or self.DEFAULT_PATH)

    async def _load(self) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self._read_all)

    def _read_all(self) -> List[Dict[str, Any]]:
        if not self._path.exists():
            return []

        records: List[Dict[str, Any]] = []
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                for line_number, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        records.append(json.loads(line))
                    except json.JSONDecodeError as e:
                        logger.warning(f"[STORE] Skipping malformed line {line_number} in {self._path}: {e}")
        except OSError as e:
            raise StoreUnavailableError(f"Cannot read trace file {self._path}", operation="load") from e

        return records
