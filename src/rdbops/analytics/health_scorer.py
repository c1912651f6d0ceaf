"""Health score: additive deductions from anomalies and global totals."""
from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from ..core import constants as c
from .models import Anomaly, AnomalyLevel, BasicStats

LEVEL_DEDUCTIONS: dict[AnomalyLevel, int] = {
    AnomalyLevel.CRITICAL: c.CRITICAL_DEDUCTION,
    AnomalyLevel.WARNING: c.WARNING_DEDUCTION,
    AnomalyLevel.INFO: c.INFO_DEDUCTION,
}


class HealthStatus(str, Enum):
    """Coarse health label derived from the score."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    CRITICAL = "critical"


def calculate_health_score(anomalies: Iterable[Anomaly], stats: BasicStats) -> int:
    """
    Compute overall health in [0, 100].

    Starts at 100, subtracts a fixed amount per anomaly by level, then
    subtracts for very high key counts and large average key sizes.
    """
    score = 100
    for anomaly in anomalies:
        score -= LEVEL_DEDUCTIONS[anomaly.level]

    if stats.total_keys > c.KEY_COUNT_SEVERE:
        score -= c.SEVERE_DEDUCTION
    elif stats.total_keys > c.KEY_COUNT_ELEVATED:
        score -= c.ELEVATED_DEDUCTION

    if stats.avg_key_size > c.AVG_KEY_SIZE_SEVERE:
        score -= c.SEVERE_DEDUCTION
    elif stats.avg_key_size > c.AVG_KEY_SIZE_ELEVATED:
        score -= c.ELEVATED_DEDUCTION

    return max(0, min(100, score))


def health_status(score: int) -> HealthStatus:
    if score >= c.HEALTH_EXCELLENT:
        return HealthStatus.EXCELLENT
    if score >= c.HEALTH_GOOD:
        return HealthStatus.GOOD
    if score >= c.HEALTH_FAIR:
        return HealthStatus.FAIR
    if score >= c.HEALTH_POOR:
        return HealthStatus.POOR
    return HealthStatus.CRITICAL
