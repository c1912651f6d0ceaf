"""
Pytest Configuration and Fixtures
Provides shared fixtures and configuration for all tests.
"""
from collections.abc import Callable, Generator, Sequence
from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from rdbops.analytics.metrics import AnalysisMetrics
from rdbops.analytics.ops_analyzer import OpsAnalyzer
from rdbops.api.main import create_app
from rdbops.core.constants import MIB
from rdbops.domain.entities.snapshot import AggregateSnapshotSummary, Entry, PrefixGroup
from rdbops.storage.history import HistoryStore
from rdbops.storage.progress import ProgressRegistry
from rdbops.storage.snapshot_store import SnapshotStore

FIXED_NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)

SummaryFactory = Callable[..., AggregateSnapshotSummary]


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )


def fixed_clock() -> datetime:
    return FIXED_NOW


def build_summary(
    entries: Sequence[Entry] = (),
    prefix_groups: Sequence[PrefixGroup] = (),
    type_bytes: dict[str, int] | None = None,
    type_counts: dict[str, int] | None = None,
    slot_bytes: dict[int, int] | None = None,
    slot_counts: dict[int, int] | None = None,
) -> AggregateSnapshotSummary:
    """Summary whose type totals default to the totals of ``entries``."""
    if type_bytes is None:
        type_bytes = {}
        for entry in entries:
            type_bytes[entry.type] = type_bytes.get(entry.type, 0) + entry.bytes
    if type_counts is None:
        type_counts = {}
        for entry in entries:
            type_counts[entry.type] = type_counts.get(entry.type, 0) + 1
    return AggregateSnapshotSummary(
        entries=entries,
        prefix_groups=prefix_groups,
        type_bytes=type_bytes,
        type_counts=type_counts,
        slot_bytes=slot_bytes,
        slot_counts=slot_counts,
    )


@pytest.fixture
def summary_factory() -> SummaryFactory:
    return build_summary


@pytest.fixture
def empty_summary() -> AggregateSnapshotSummary:
    return AggregateSnapshotSummary()


@pytest.fixture
def large_key_summary() -> AggregateSnapshotSummary:
    """A single 60 MiB string."""
    return build_summary(entries=[Entry(key="blob:video:1", type="string", bytes=60 * MIB)])


@pytest.fixture
def large_key_document() -> dict:
    return {
        "entries": [{"key": "blob:video:1", "type": "string", "element_count": 0, "bytes": 60 * MIB}],
        "type_bytes": {"string": 60 * MIB},
        "type_counts": {"string": 1},
    }


@pytest.fixture
def analysis_metrics() -> AnalysisMetrics:
    """Metrics on a private registry so tests do not share counters."""
    return AnalysisMetrics()


@pytest.fixture
def analyzer(analysis_metrics: AnalysisMetrics) -> OpsAnalyzer:
    return OpsAnalyzer(clock=fixed_clock, metrics=analysis_metrics)


@pytest.fixture
def history_path(tmp_path: Path) -> Path:
    return tmp_path / "history.json"


@pytest.fixture
def client(history_path: Path, analyzer: OpsAnalyzer) -> Generator[TestClient, None, None]:
    app = create_app(
        snapshot_store=SnapshotStore(),
        history_store=HistoryStore(history_path),
        progress_registry=ProgressRegistry(),
        analyzer=analyzer,
    )
    with TestClient(app) as test_client:
        yield test_client
