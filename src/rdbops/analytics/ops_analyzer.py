"""
Operational Analyzer
====================

Runs the detector set against a snapshot summary, merges the findings, and
derives the health score and recommendations into one Report.

A run never mutates the summary and recomputes everything from scratch. One
timestamp is taken per run and stamped on every anomaly and recommendation,
so two runs with the same clock produce equal reports.
"""
from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from ..core.logging import LoggerAdapter, get_logger
from ..domain.entities.snapshot import SnapshotSummary
from .detectors import (
    DEFAULT_DETECTORS,
    AnalysisContext,
    Detector,
    DetectorFindings,
    compute_basic_stats,
)
from .health_scorer import calculate_health_score
from .metrics import AnalysisMetrics, analysis_metrics
from .models import AnomalyLevel, Report
from .recommendations import generate_recommendations

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OpsAnalyzer:
    """Comprehensive operational analysis for one snapshot summary."""

    def __init__(
        self,
        detectors: Sequence[Detector] = DEFAULT_DETECTORS,
        clock: Clock = utc_now,
        metrics: AnalysisMetrics | None = analysis_metrics,
    ):
        self.detectors = tuple(detectors)
        self.clock = clock
        self.metrics = metrics

    def analyze(self, summary: SnapshotSummary, snapshot_name: str | None = None) -> Report:
        started = time.perf_counter()
        stats = compute_basic_stats(summary)
        ctx = AnalysisContext(summary=summary, stats=stats, now=self.clock())

        merged = DetectorFindings()
        for detector in self.detectors:
            findings = detector(ctx)
            merged.anomalies.extend(findings.anomalies)
            merged.hotspots.extend(findings.hotspots)
            merged.key_patterns.extend(findings.key_patterns)
            merged.type_efficiency.update(findings.type_efficiency)
            merged.top_slots.extend(findings.top_slots)
            if findings.slot_imbalance_percentage:
                merged.slot_imbalance_percentage = findings.slot_imbalance_percentage

        merged.hotspots.sort(key=lambda h: h.memory_used, reverse=True)

        report = Report(
            health_score=calculate_health_score(merged.anomalies, stats),
            stats=stats,
            anomalies=tuple(merged.anomalies),
            memory_hotspots=tuple(merged.hotspots),
            key_patterns=tuple(merged.key_patterns),
            type_efficiency=merged.type_efficiency,
            slot_imbalance_percentage=merged.slot_imbalance_percentage,
            top_slots=tuple(merged.top_slots),
            recommendations=tuple(
                generate_recommendations(summary, stats, merged.type_efficiency, ctx.now)
            ),
        )

        duration = time.perf_counter() - started
        if self.metrics is not None:
            self.metrics.record(report, duration, snapshot_name)

        log = LoggerAdapter(logger, {"snapshot": snapshot_name})
        log.info(
            f"Analyzed snapshot {snapshot_name or '<unnamed>'}: "
            f"score={report.health_score} anomalies={len(report.anomalies)}",
            extra={
                "health_score": report.health_score,
                "critical": len(report.anomalies_by_level(AnomalyLevel.CRITICAL)),
                "warning": len(report.anomalies_by_level(AnomalyLevel.WARNING)),
                "info": len(report.anomalies_by_level(AnomalyLevel.INFO)),
                "duration_ms": round(duration * 1000, 3),
            },
        )
        return report


def analyze(
    summary: SnapshotSummary,
    *,
    clock: Clock | None = None,
    snapshot_name: str | None = None,
) -> Report:
    """Analyze a snapshot summary with the default detector set."""
    analyzer = OpsAnalyzer(clock=clock or utc_now)
    return analyzer.analyze(summary, snapshot_name=snapshot_name)
