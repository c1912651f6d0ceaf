"""
Snapshot store.

Named snapshot summaries ("instances") available for analysis. Writers replace
whole summaries; readers get the summary object, which is never mutated.
"""
from __future__ import annotations

import threading

from ..core.exceptions import SnapshotNotFoundException
from ..core.logging import get_logger
from ..domain.entities.snapshot import SnapshotSummary

logger = get_logger(__name__)


class SnapshotStore:
    """Thread-safe mapping of snapshot name to summary."""

    def __init__(self):
        self._lock = threading.Lock()
        self._summaries: dict[str, SnapshotSummary] = {}

    def put(self, name: str, summary: SnapshotSummary) -> None:
        with self._lock:
            replaced = name in self._summaries
            self._summaries[name] = summary
        logger.info(f"{'Replaced' if replaced else 'Registered'} snapshot {name}")

    def get(self, name: str) -> SnapshotSummary:
        with self._lock:
            summary = self._summaries.get(name)
        if summary is None:
            raise SnapshotNotFoundException(name)
        return summary

    def contains(self, name: str) -> bool:
        with self._lock:
            return name in self._summaries

    def names(self) -> list[str]:
        with self._lock:
            return list(self._summaries)

    def remove(self, name: str) -> bool:
        with self._lock:
            removed = self._summaries.pop(name, None) is not None
        if removed:
            logger.info(f"Removed snapshot {name}")
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._summaries)
