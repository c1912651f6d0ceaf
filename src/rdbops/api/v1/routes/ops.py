from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from ....analytics.health_scorer import health_status
from ....analytics.models import AnomalyLevel, Report
from ....analytics.ops_analyzer import OpsAnalyzer
from ....storage.snapshot_store import SnapshotStore
from ...dependencies import get_analyzer, get_snapshot_store
from ..schemas.ops import AnomaliesResponse, HealthResponse, RecommendationsResponse

router = APIRouter(prefix="/ops", tags=["ops"])


def _run_analysis(name: str, store: SnapshotStore, analyzer: OpsAnalyzer) -> Report:
    summary = store.get(name)
    return analyzer.analyze(summary, snapshot_name=name)


@router.get("/analysis/{name}", response_model=dict)
async def ops_analysis(
    name: str,
    store: SnapshotStore = Depends(get_snapshot_store),
    analyzer: OpsAnalyzer = Depends(get_analyzer),
) -> dict[str, Any]:
    """Comprehensive operational analysis of one snapshot."""
    return _run_analysis(name, store, analyzer).to_dict()


@router.get("/anomalies/{name}", response_model=AnomaliesResponse)
async def ops_anomalies(
    name: str,
    store: SnapshotStore = Depends(get_snapshot_store),
    analyzer: OpsAnalyzer = Depends(get_analyzer),
) -> AnomaliesResponse:
    """Anomalies grouped by level, for quick alerting."""
    report = _run_analysis(name, store, analyzer)
    return AnomaliesResponse(
        critical=[a.to_dict() for a in report.anomalies_by_level(AnomalyLevel.CRITICAL)],
        warning=[a.to_dict() for a in report.anomalies_by_level(AnomalyLevel.WARNING)],
        info=[a.to_dict() for a in report.anomalies_by_level(AnomalyLevel.INFO)],
        total=len(report.anomalies),
        health_score=report.health_score,
    )


@router.get("/recommendations/{name}", response_model=RecommendationsResponse)
async def ops_recommendations(
    name: str,
    store: SnapshotStore = Depends(get_snapshot_store),
    analyzer: OpsAnalyzer = Depends(get_analyzer),
) -> RecommendationsResponse:
    report = _run_analysis(name, store, analyzer)
    return RecommendationsResponse(
        recommendations=[r.to_dict() for r in report.recommendations],
        total=len(report.recommendations),
    )


@router.get("/health/{name}", response_model=HealthResponse)
async def ops_health(
    name: str,
    store: SnapshotStore = Depends(get_snapshot_store),
    analyzer: OpsAnalyzer = Depends(get_analyzer),
) -> HealthResponse:
    """Health score with its coarse label."""
    report = _run_analysis(name, store, analyzer)
    return HealthResponse(
        health_score=report.health_score,
        health_status=health_status(report.health_score).value,
        critical_issues=len(report.anomalies_by_level(AnomalyLevel.CRITICAL)),
        warnings=len(report.anomalies_by_level(AnomalyLevel.WARNING)),
        total_anomalies=len(report.anomalies),
        recommendations=len(report.recommendations),
    )
