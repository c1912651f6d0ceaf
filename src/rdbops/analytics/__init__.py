"""Analysis engine that turns a snapshot summary into a Report."""

from .health_scorer import HealthStatus, calculate_health_score, health_status
from .models import (
    Anomaly,
    AnomalyCategory,
    AnomalyLevel,
    BasicStats,
    Effort,
    HotspotKind,
    KeyPattern,
    MemoryHotspot,
    Recommendation,
    RecommendationCategory,
    Report,
    SlotUsage,
    TypeEfficiency,
)
from .ops_analyzer import OpsAnalyzer, analyze

__all__ = [
    "Anomaly",
    "AnomalyCategory",
    "AnomalyLevel",
    "BasicStats",
    "Effort",
    "HealthStatus",
    "HotspotKind",
    "KeyPattern",
    "MemoryHotspot",
    "OpsAnalyzer",
    "Recommendation",
    "RecommendationCategory",
    "Report",
    "SlotUsage",
    "TypeEfficiency",
    "analyze",
    "calculate_health_score",
    "health_status",
]
