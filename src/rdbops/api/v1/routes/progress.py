from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import StreamingResponse

from ....core.config import settings
from ....storage.progress import ParseProgress, ProgressRegistry
from ...dependencies import get_progress_registry
from ..schemas.ops import ProgressResponse

router = APIRouter(prefix="/progress", tags=["progress"])


def _require_tracker(name: str, registry: ProgressRegistry) -> ParseProgress:
    tracker = registry.get(name)
    if tracker is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Progress not found")
    return tracker


@router.get("/{name}", response_model=ProgressResponse)
async def get_progress(
    name: str,
    registry: ProgressRegistry = Depends(get_progress_registry),
) -> ProgressResponse:
    data = _require_tracker(name, registry).to_dict()
    data.pop("logs")
    return ProgressResponse(**data)


async def _progress_events(
    request: Request,
    tracker: ParseProgress,
    interval: float,
) -> AsyncIterator[str]:
    # Only lines logged after the client connected are streamed
    _, seq = tracker.logs_since(0)
    while True:
        if await request.is_disconnected():
            return

        lines, seq = tracker.logs_since(seq)
        for line in lines:
            yield f"data: {json.dumps({'type': 'log', 'message': line})}\n\n"

        snapshot = tracker.to_dict()
        yield "data: " + json.dumps({
            "type": "progress",
            "status": snapshot["status"],
            "progress": snapshot["progress"],
        }) + "\n\n"

        if tracker.status.is_terminal:
            return
        await asyncio.sleep(interval)


@router.get("/{name}/stream")
async def stream_progress(
    name: str,
    request: Request,
    registry: ProgressRegistry = Depends(get_progress_registry),
) -> StreamingResponse:
    """Server-Sent Events with new log lines and progress until the job ends."""
    tracker = _require_tracker(name, registry)
    return StreamingResponse(
        _progress_events(request, tracker, settings.progress_poll_interval_seconds),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )
