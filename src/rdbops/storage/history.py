"""
Analysis history backed by a JSON file.

Entries are kept most-recent-first, one per filename, and bounded to
``max_entries``. Every mutation rewrites the file.
"""
from __future__ import annotations

import json
import threading
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from ..core.config import settings
from ..core.exceptions import HistoryStoreException
from ..core.logging import get_logger

logger = get_logger(__name__)


class HistoryEntry(BaseModel):
    """One analysed snapshot."""

    filename: str
    filepath: str = ""
    upload_time: datetime
    file_size: int = Field(default=0, ge=0)
    total_keys: int = Field(default=0, ge=0)
    total_memory: int = Field(default=0, ge=0)


_entries_adapter = TypeAdapter(list[HistoryEntry])


class HistoryStore:
    """Manages analysis history persisted to ``path``."""

    def __init__(self, path: Path | str | None = None, max_entries: int | None = None):
        self.path = Path(path or settings.history_file)
        self.max_entries = max_entries or settings.history_max_entries
        self._lock = threading.Lock()
        self._entries: list[HistoryEntry] = []
        self._load()

    def add(self, entry: HistoryEntry) -> None:
        """Insert or update (by filename) an entry."""
        with self._lock:
            entries = list(self._entries)
            for i, existing in enumerate(entries):
                if existing.filename == entry.filename:
                    entries[i] = entry
                    break
            else:
                entries.insert(0, entry)
                del entries[self.max_entries:]
            self._save(entries)
            self._entries = entries

    def get(self, filename: str) -> HistoryEntry | None:
        with self._lock:
            for entry in self._entries:
                if entry.filename == filename:
                    return entry
        return None

    def all(self) -> list[HistoryEntry]:
        with self._lock:
            return list(self._entries)

    def remove(self, filename: str) -> bool:
        with self._lock:
            for i, entry in enumerate(self._entries):
                if entry.filename == filename:
                    entries = self._entries[:i] + self._entries[i + 1:]
                    self._save(entries)
                    self._entries = entries
                    return True
        return False

    def _load(self) -> None:
        try:
            data = self.path.read_bytes()
        except FileNotFoundError:
            return
        except OSError as e:
            raise HistoryStoreException(f"Error loading history file: {e}", path=str(self.path)) from e

        if not data.strip():
            return

        try:
            self._entries = _entries_adapter.validate_json(data)[: self.max_entries]
        except ValidationError as e:
            raise HistoryStoreException(f"Error parsing history file: {e}", path=str(self.path)) from e

        logger.info(f"Loaded {len(self._entries)} history entries from {self.path}")

    def _save(self, entries: list[HistoryEntry]) -> None:
        """Write ``entries`` to disk; the in-memory list is only replaced after this succeeds."""
        payload = [entry.model_dump(mode="json") for entry in entries]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as e:
            logger.error(f"Error saving history file {self.path}: {e}")
            raise HistoryStoreException(f"Error saving history file: {e}", path=str(self.path)) from e
