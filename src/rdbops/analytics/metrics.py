"""
Prometheus metrics for analysis runs.
"""
from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

from ..core.constants import METRICS_PREFIX
from .models import AnomalyLevel, Report


class AnalysisMetrics:
    """Counters and gauges describing analysis runs, on a dedicated registry."""

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry or CollectorRegistry()

        self.analyses_total = Counter(
            f"{METRICS_PREFIX}_analyses_total",
            "Number of completed analysis runs",
            registry=self.registry,
        )
        self.anomalies_total = Counter(
            f"{METRICS_PREFIX}_anomalies_total",
            "Anomalies detected, by level",
            ["level"],
            registry=self.registry,
        )
        self.analysis_duration = Histogram(
            f"{METRICS_PREFIX}_analysis_duration_seconds",
            "Wall time of one analysis run",
            buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
            registry=self.registry,
        )
        self.health_score = Gauge(
            f"{METRICS_PREFIX}_health_score",
            "Health score of the last analysis of a snapshot",
            ["snapshot"],
            registry=self.registry,
        )

    def record(self, report: Report, duration_seconds: float, snapshot: str | None = None) -> None:
        self.analyses_total.inc()
        self.analysis_duration.observe(duration_seconds)
        for level in AnomalyLevel:
            count = len(report.anomalies_by_level(level))
            if count:
                self.anomalies_total.labels(level=level.value).inc(count)
        if snapshot:
            self.health_score.labels(snapshot=snapshot).set(report.health_score)

    def forget(self, snapshot: str) -> None:
        try:
            self.health_score.remove(snapshot)
        except KeyError:
            pass

    def export(self) -> tuple[bytes, str]:
        """Exposition payload and its content type."""
        return generate_latest(self.registry), CONTENT_TYPE_LATEST


analysis_metrics = AnalysisMetrics()
