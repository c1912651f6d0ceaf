"""
Recommendation Engine

Rule-based action list built from the global totals and the per-type
efficiency results. The slow-log recommendation is always present, so the list
is never empty.
"""
from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

from ..core import constants as c
from ..domain.entities.snapshot import SnapshotSummary
from .formatting import format_bytes
from .models import (
    BasicStats,
    Effort,
    Recommendation,
    RecommendationCategory,
    TypeEfficiency,
)


def generate_recommendations(
    summary: SnapshotSummary,
    stats: BasicStats,
    type_efficiency: Mapping[str, TypeEfficiency],
    now: datetime,
) -> list[Recommendation]:
    """Return recommendations sorted by priority (stable on ties)."""
    recommendations: list[Recommendation] = []

    if stats.total_bytes > c.EVICTION_POLICY_BYTES:
        recommendations.append(Recommendation(
            priority=2,
            category=RecommendationCategory.MEMORY,
            title="Enable Memory Eviction Policy",
            description=f"Database is using significant memory (>{format_bytes(c.EVICTION_POLICY_BYTES)})",
            action="Configure 'maxmemory' and 'maxmemory-policy' in redis.conf",
            impact="Prevents OOM errors and automatic eviction of less important data",
            effort=Effort.LOW,
            created_at=now,
        ))

    # The summary carries no per-entry expiry, so every sampled large entry
    # counts as lacking a TTL.
    keys_needing_ttl = len(summary.largest_entries(c.TTL_SAMPLE_SIZE))
    if keys_needing_ttl > c.TTL_RECOMMENDATION_MIN_ENTRIES:
        recommendations.append(Recommendation(
            priority=1,
            category=RecommendationCategory.TTL,
            title="Implement TTL for Large Keys",
            description="Many large keys appear to have no expiration set",
            action="Review and set appropriate TTL values for large keys",
            impact="Prevents unbounded memory growth and automatic cleanup",
            effort=Effort.MEDIUM,
            created_at=now,
        ))

    string_efficiency = type_efficiency.get("string")
    if (
        string_efficiency is not None
        and string_efficiency.efficiency_score < c.STRING_EFFICIENCY_RECOMMENDATION
    ):
        recommendations.append(Recommendation(
            priority=3,
            category=RecommendationCategory.PERFORMANCE,
            title="Consider Using Hash for Small Strings",
            description=f"String type shows low efficiency ({string_efficiency.efficiency_score:.1f}%)",
            action="Group related small string values into Hash structures",
            impact="Can reduce memory overhead by 30-50% for small values",
            effort=Effort.HIGH,
            created_at=now,
        ))

    recommendations.append(Recommendation(
        priority=4,
        category=RecommendationCategory.MONITORING,
        title="Enable Redis Slow Log",
        description="Track slow commands for performance optimization",
        action="Set 'slowlog-log-slower-than 10000' and 'slowlog-max-len 128'",
        impact="Helps identify performance bottlenecks",
        effort=Effort.LOW,
        created_at=now,
    ))

    return sorted(recommendations, key=lambda r: r.priority)
