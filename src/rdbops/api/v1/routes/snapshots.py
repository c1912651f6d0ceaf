from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status

from ....analytics.ops_analyzer import OpsAnalyzer
from ....core.exceptions import (
    HistoryStoreException,
    InvalidSnapshotSummaryException,
    SnapshotNotFoundException,
)
from ....core.logging import get_logger
from ....domain.entities.snapshot import AggregateSnapshotSummary
from ....storage.history import HistoryEntry, HistoryStore
from ....storage.progress import ProgressRegistry, ProgressStatus
from ....storage.snapshot_store import SnapshotStore
from ...dependencies import (
    get_analyzer,
    get_history_store,
    get_progress_registry,
    get_snapshot_store,
)
from ..schemas.ops import SnapshotList, SnapshotRegistered

logger = get_logger(__name__)

router = APIRouter(prefix="/snapshots", tags=["snapshots"])


@router.get("", response_model=SnapshotList)
async def list_snapshots(store: SnapshotStore = Depends(get_snapshot_store)) -> SnapshotList:
    return SnapshotList(instances=store.names())


@router.put("/{name}", response_model=SnapshotRegistered, status_code=status.HTTP_201_CREATED)
def register_snapshot(
    name: str,
    document: dict[str, Any] = Body(...),
    filepath: str = Query("", description="Path of the snapshot file the summary came from"),
    file_size: int = Query(0, ge=0, description="Size of the snapshot file in bytes"),
    store: SnapshotStore = Depends(get_snapshot_store),
    history: HistoryStore = Depends(get_history_store),
    progress: ProgressRegistry = Depends(get_progress_registry),
) -> SnapshotRegistered:
    """Register (or replace) the summary of a decoded snapshot."""
    tracker = progress.get_or_create(name)
    tracker.restart()
    tracker.set_current_step("validating summary")
    tracker.add_log(f"Received summary for {name}")

    try:
        summary = AggregateSnapshotSummary.from_dict(document)
    except InvalidSnapshotSummaryException as e:
        logger.warning(f"Rejected summary for {name}: {e.message}", extra=e.details)
        tracker.set_error(e.message)
        tracker.add_log(f"Rejected summary for {name}: {e.message}")
        raise

    # History first: a summary is only served once it is recorded
    tracker.set_current_step("recording history")
    try:
        history.add(HistoryEntry(
            filename=name,
            filepath=filepath,
            upload_time=datetime.now(timezone.utc),
            file_size=file_size,
            total_keys=summary.total_keys,
            total_memory=summary.total_bytes,
        ))
    except HistoryStoreException as e:
        tracker.set_error(e.message)
        tracker.add_log(f"Could not record {name}: {e.message}")
        raise

    store.put(name, summary)

    tracker.set_progress(100)
    tracker.set_current_step("completed")
    tracker.add_log(f"Registered {name}: {summary.total_keys} keys, {summary.total_bytes} bytes")
    tracker.set_status(ProgressStatus.COMPLETED)

    return SnapshotRegistered(name=name, total_keys=summary.total_keys, total_bytes=summary.total_bytes)


@router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT)
def delete_snapshot(
    name: str,
    store: SnapshotStore = Depends(get_snapshot_store),
    history: HistoryStore = Depends(get_history_store),
    analyzer: OpsAnalyzer = Depends(get_analyzer),
) -> None:
    if not store.remove(name):
        raise SnapshotNotFoundException(name)
    history.remove(name)
    if analyzer.metrics is not None:
        analyzer.metrics.forget(name)
