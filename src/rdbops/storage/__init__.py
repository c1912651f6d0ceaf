"""Owned stores used by the service layer."""

from .history import HistoryEntry, HistoryStore
from .progress import ParseProgress, ProgressRegistry, ProgressStatus
from .snapshot_store import SnapshotStore

__all__ = [
    "HistoryEntry",
    "HistoryStore",
    "ParseProgress",
    "ProgressRegistry",
    "ProgressStatus",
    "SnapshotStore",
]
