"""
Parse progress tracking.

A ProgressRegistry owns one ParseProgress per snapshot name, created on first
use and evicted oldest-first once ``max_trackers`` is exceeded. Log lines are
bounded per tracker.
"""
from __future__ import annotations

import threading
import time
from collections import OrderedDict, deque
from datetime import datetime
from enum import Enum
from typing import Any

from ..core.config import settings


class ProgressStatus(str, Enum):
    PENDING = "pending"
    PARSING = "parsing"
    COMPLETED = "completed"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (ProgressStatus.COMPLETED, ProgressStatus.ERROR)


class ParseProgress:
    """Progress of one long-running snapshot job."""

    def __init__(self, filename: str, max_log_lines: int | None = None):
        self.filename = filename
        self.status = ProgressStatus.PENDING
        self.progress = 0
        self.current_step = ""
        self.error = ""
        self.start_time = time.monotonic()
        self._logs: deque[str] = deque(maxlen=max_log_lines or settings.progress_max_log_lines)
        self._log_seq = 0
        self._lock = threading.Lock()

    def restart(self) -> None:
        """Begin a new job on this tracker. Earlier log lines are kept."""
        with self._lock:
            self.status = ProgressStatus.PARSING
            self.progress = 0
            self.current_step = ""
            self.error = ""
            self.start_time = time.monotonic()

    def add_log(self, message: str) -> None:
        line = f"[{datetime.now().strftime('%H:%M:%S')}] {message}"
        with self._lock:
            self._logs.append(line)
            self._log_seq += 1

    def set_status(self, status: ProgressStatus) -> None:
        with self._lock:
            self.status = status

    def set_progress(self, progress: int) -> None:
        with self._lock:
            self.progress = max(0, min(100, progress))

    def set_current_step(self, step: str) -> None:
        with self._lock:
            self.current_step = step

    def set_error(self, error: str) -> None:
        with self._lock:
            self.error = error
            self.status = ProgressStatus.ERROR

    def logs_since(self, seq: int) -> tuple[list[str], int]:
        """Log lines appended after sequence number ``seq`` and the new sequence number."""
        with self._lock:
            new_count = min(self._log_seq - seq, len(self._logs))
            lines = list(self._logs)[len(self._logs) - new_count:] if new_count > 0 else []
            return lines, self._log_seq

    def to_dict(self) -> dict[str, Any]:
        with self._lock:
            return {
                "filename": self.filename,
                "status": self.status.value,
                "progress": self.progress,
                "currentStep": self.current_step,
                "logs": list(self._logs),
                "error": self.error,
                "duration": round(time.monotonic() - self.start_time, 1),
            }


class ProgressRegistry:
    """Owned store of progress trackers with bounded retention."""

    def __init__(self, max_trackers: int | None = None, max_log_lines: int | None = None):
        self.max_trackers = max_trackers or settings.progress_max_trackers
        self.max_log_lines = max_log_lines or settings.progress_max_log_lines
        self._trackers: OrderedDict[str, ParseProgress] = OrderedDict()
        self._lock = threading.Lock()

    def get_or_create(self, filename: str) -> ParseProgress:
        with self._lock:
            tracker = self._trackers.get(filename)
            if tracker is None:
                tracker = ParseProgress(filename, max_log_lines=self.max_log_lines)
                self._trackers[filename] = tracker
                while len(self._trackers) > self.max_trackers:
                    self._trackers.popitem(last=False)
            return tracker

    def get(self, filename: str) -> ParseProgress | None:
        with self._lock:
            return self._trackers.get(filename)

    def discard(self, filename: str) -> None:
        with self._lock:
            self._trackers.pop(filename, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._trackers)
