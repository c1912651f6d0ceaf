"""FastAPI dependencies resolving the stores owned by the application."""

from fastapi import Request

from ..analytics.ops_analyzer import OpsAnalyzer
from ..storage.history import HistoryStore
from ..storage.progress import ProgressRegistry
from ..storage.snapshot_store import SnapshotStore


def get_snapshot_store(request: Request) -> SnapshotStore:
    return request.app.state.snapshot_store


def get_history_store(request: Request) -> HistoryStore:
    return request.app.state.history_store


def get_progress_registry(request: Request) -> ProgressRegistry:
    return request.app.state.progress_registry


def get_analyzer(request: Request) -> OpsAnalyzer:
    return request.app.state.analyzer
