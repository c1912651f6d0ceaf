"""
Unit Tests for the owned stores: snapshots, history and parse progress.
"""
import json
import re
from datetime import datetime, timedelta, timezone

import pytest

from rdbops.core.exceptions import HistoryStoreException, SnapshotNotFoundException
from rdbops.storage.history import HistoryEntry, HistoryStore
from rdbops.storage.progress import ParseProgress, ProgressRegistry, ProgressStatus
from rdbops.storage.snapshot_store import SnapshotStore


def history_entry(filename: str, minutes: int = 0, total_keys: int = 1) -> HistoryEntry:
    return HistoryEntry(
        filename=filename,
        filepath=f"/data/{filename}",
        upload_time=datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=minutes),
        file_size=1024,
        total_keys=total_keys,
        total_memory=2048,
    )


class TestSnapshotStore:

    def setup_method(self):
        self.store = SnapshotStore()

    def test_put_and_get(self, large_key_summary):
        self.store.put("dump.rdb", large_key_summary)
        assert self.store.get("dump.rdb") is large_key_summary
        assert self.store.contains("dump.rdb")
        assert self.store.names() == ["dump.rdb"]
        assert len(self.store) == 1

    def test_replace(self, empty_summary, large_key_summary):
        self.store.put("dump.rdb", empty_summary)
        self.store.put("dump.rdb", large_key_summary)
        assert self.store.get("dump.rdb") is large_key_summary
        assert len(self.store) == 1

    def test_missing_snapshot(self):
        with pytest.raises(SnapshotNotFoundException) as exc_info:
            self.store.get("missing.rdb")
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Snapshot 'missing.rdb' not found or still parsing"
        assert exc_info.value.details == {"snapshot": "missing.rdb"}

    def test_remove(self, empty_summary):
        self.store.put("dump.rdb", empty_summary)
        assert self.store.remove("dump.rdb") is True
        assert self.store.remove("dump.rdb") is False
        assert not self.store.contains("dump.rdb")


class TestHistoryStore:
    """History persistence and bounds."""

    def test_missing_file_starts_empty(self, history_path):
        store = HistoryStore(history_path)
        assert store.all() == []
        assert not history_path.exists()

    def test_most_recent_first_and_persisted(self, history_path):
        store = HistoryStore(history_path)
        store.add(history_entry("a.rdb"))
        store.add(history_entry("b.rdb", minutes=1))

        assert [e.filename for e in store.all()] == ["b.rdb", "a.rdb"]
        saved = json.loads(history_path.read_text(encoding="utf-8"))
        assert [e["filename"] for e in saved] == ["b.rdb", "a.rdb"]

        reloaded = HistoryStore(history_path)
        assert reloaded.all() == store.all()

    def test_upsert_by_filename(self, history_path):
        store = HistoryStore(history_path)
        store.add(history_entry("a.rdb"))
        store.add(history_entry("b.rdb"))
        store.add(history_entry("a.rdb", total_keys=99))

        assert [e.filename for e in store.all()] == ["b.rdb", "a.rdb"]
        assert store.get("a.rdb").total_keys == 99

    def test_bounded(self, history_path):
        store = HistoryStore(history_path, max_entries=3)
        for i in range(5):
            store.add(history_entry(f"{i}.rdb", minutes=i))
        assert [e.filename for e in store.all()] == ["4.rdb", "3.rdb", "2.rdb"]

    def test_remove(self, history_path):
        store = HistoryStore(history_path)
        store.add(history_entry("a.rdb"))
        assert store.remove("a.rdb") is True
        assert store.remove("a.rdb") is False
        assert store.get("a.rdb") is None
        assert json.loads(history_path.read_text(encoding="utf-8")) == []

    def test_empty_file(self, history_path):
        history_path.write_text("", encoding="utf-8")
        assert HistoryStore(history_path).all() == []

    def test_failed_save_keeps_previous_entries(self, history_path, tmp_path):
        store = HistoryStore(history_path)
        store.add(history_entry("a.rdb"))
        blocker = tmp_path / "not-a-directory"
        blocker.write_text("", encoding="utf-8")
        store.path = blocker / "history.json"

        with pytest.raises(HistoryStoreException):
            store.add(history_entry("b.rdb"))
        with pytest.raises(HistoryStoreException):
            store.remove("a.rdb")

        assert [e.filename for e in store.all()] == ["a.rdb"]

    def test_corrupt_file(self, history_path):
        history_path.write_text("{not json", encoding="utf-8")
        with pytest.raises(HistoryStoreException) as exc_info:
            HistoryStore(history_path)
        assert exc_info.value.details["path"] == str(history_path)


class TestParseProgress:

    def setup_method(self):
        self.progress = ParseProgress("dump.rdb", max_log_lines=3)

    def test_initial_state(self):
        data = self.progress.to_dict()
        assert data["status"] == "pending"
        assert data["progress"] == 0
        assert data["logs"] == []
        assert set(data) == {"filename", "status", "progress", "currentStep", "logs", "error", "duration"}

    def test_log_lines_are_timestamped(self):
        self.progress.add_log("hello")
        assert re.fullmatch(r"\[\d{2}:\d{2}:\d{2}\] hello", self.progress.to_dict()["logs"][0])

    def test_logs_since(self):
        self.progress.add_log("one")
        self.progress.add_log("two")
        lines, seq = self.progress.logs_since(0)
        assert len(lines) == 2
        assert seq == 2

        self.progress.add_log("three")
        lines, seq = self.progress.logs_since(seq)
        assert len(lines) == 1
        assert lines[0].endswith("three")
        assert seq == 3

        assert self.progress.logs_since(seq) == ([], 3)

    def test_logs_are_bounded(self):
        for i in range(5):
            self.progress.add_log(f"line {i}")
        lines, seq = self.progress.logs_since(0)
        assert [line.split("] ")[1] for line in lines] == ["line 2", "line 3", "line 4"]
        assert seq == 5

    def test_progress_clamped(self):
        self.progress.set_progress(150)
        assert self.progress.progress == 100
        self.progress.set_progress(-5)
        assert self.progress.progress == 0

    def test_error_is_terminal(self):
        self.progress.set_error("boom")
        assert self.progress.status == ProgressStatus.ERROR
        assert self.progress.status.is_terminal
        assert self.progress.to_dict()["error"] == "boom"

    def test_restart_clears_previous_job(self):
        self.progress.add_log("first attempt")
        self.progress.set_progress(40)
        self.progress.set_error("boom")

        self.progress.restart()

        data = self.progress.to_dict()
        assert data["status"] == "parsing"
        assert data["error"] == ""
        assert data["progress"] == 0
        assert data["currentStep"] == ""
        assert len(data["logs"]) == 1

    def test_terminal_statuses(self):
        assert ProgressStatus.COMPLETED.is_terminal
        assert not ProgressStatus.PARSING.is_terminal
        assert not ProgressStatus.PENDING.is_terminal


class TestProgressRegistry:

    def test_get_or_create_reuses_tracker(self):
        registry = ProgressRegistry(max_trackers=4)
        assert registry.get_or_create("a") is registry.get_or_create("a")
        assert len(registry) == 1

    def test_oldest_evicted(self):
        registry = ProgressRegistry(max_trackers=2)
        registry.get_or_create("a")
        registry.get_or_create("b")
        registry.get_or_create("c")
        assert registry.get("a") is None
        assert registry.get("b") is not None
        assert len(registry) == 2

    def test_discard(self):
        registry = ProgressRegistry()
        registry.get_or_create("a")
        registry.discard("a")
        registry.discard("a")
        assert registry.get("a") is None
