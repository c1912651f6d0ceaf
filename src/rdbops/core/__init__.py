"""Settings and cross-cutting infrastructure shared by every layer."""

from .config import Environment, Settings, get_settings, settings
from .exceptions import (
    BaseApplicationException,
    HistoryStoreException,
    InvalidSnapshotSummaryException,
    SnapshotNotFoundException,
)
from .logging import get_logger

__all__ = [
    "settings",
    "Settings",
    "Environment",
    "get_settings",
    "BaseApplicationException",
    "HistoryStoreException",
    "InvalidSnapshotSummaryException",
    "SnapshotNotFoundException",
    "get_logger",
]
