"""
Report data model.

Immutable value records produced once per analysis run, plus their document
(JSON-ready dict) form.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any


class AnomalyLevel(str, Enum):
    """Anomaly severity levels."""
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class AnomalyCategory(str, Enum):
    """Facet of the snapshot an anomaly is about."""
    MEMORY = "memory"
    TTL = "ttl"
    KEYS = "keys"
    PERFORMANCE = "performance"
    CLUSTER = "cluster"


class HotspotKind(str, Enum):
    """What a memory hotspot aggregates over."""
    KEY_PREFIX = "key_prefix"
    DATA_TYPE = "data_type"
    SINGLE_KEY = "single_key"


class RecommendationCategory(str, Enum):
    MEMORY = "memory"
    TTL = "ttl"
    PERFORMANCE = "performance"
    MONITORING = "monitoring"


class Effort(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Anomaly:
    """A detected issue."""
    level: AnomalyLevel
    category: AnomalyCategory
    title: str
    description: str
    impact: str
    suggestion: str
    value: str
    detected_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level.value,
            "category": self.category.value,
            "title": self.title,
            "description": self.description,
            "impact": self.impact,
            "suggestion": self.suggestion,
            "value": self.value,
            "detected_at": self.detected_at.isoformat(),
        }


@dataclass(frozen=True)
class MemoryHotspot:
    """Memory concentrated on one identifier (a key prefix or a data type)."""
    kind: HotspotKind
    identifier: str
    memory_used: int
    key_count: int
    percentage_of_total: float
    avg_entry_size: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind.value,
            "identifier": self.identifier,
            "memory_used": self.memory_used,
            "key_count": self.key_count,
            "percentage": self.percentage_of_total,
            "avg_key_size": self.avg_entry_size,
        }


@dataclass(frozen=True)
class KeyPattern:
    """Statistics for one key naming pattern."""
    pattern: str
    count: int
    total_memory: int
    avg_memory: int
    percentage_of_keys: float
    example_key: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "pattern": self.pattern,
            "count": self.count,
            "total_memory": self.total_memory,
            "avg_memory": self.avg_memory,
            "percentage": self.percentage_of_keys,
            "example": self.example_key,
        }


@dataclass(frozen=True)
class TypeEfficiency:
    """
    Size distribution of one data type over the sampled largest entries.

    ``wasted_memory`` is not estimated yet and is always 0; ``suggested_type``
    always echoes the observed type.
    """
    avg_size: int
    median_size: int
    p95_size: int
    p99_size: int
    efficiency_score: float
    wasted_memory: int
    suggested_type: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "avg_size": self.avg_size,
            "median_size": self.median_size,
            "p95_size": self.p95_size,
            "p99_size": self.p99_size,
            "efficiency": self.efficiency_score,
            "wasted_memory": self.wasted_memory,
            "optimal_type": self.suggested_type,
        }


@dataclass(frozen=True)
class SlotUsage:
    """Usage of one cluster hash slot."""
    slot: int
    key_count: int
    memory_used: int
    percentage_of_total: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "slot": self.slot,
            "key_count": self.key_count,
            "memory_used": self.memory_used,
            "percentage": self.percentage_of_total,
        }


@dataclass(frozen=True)
class Recommendation:
    """Actionable advice; priority 1 is the most urgent."""
    priority: int
    category: RecommendationCategory
    title: str
    description: str
    action: str
    impact: str
    effort: Effort
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "priority": self.priority,
            "category": self.category.value,
            "title": self.title,
            "description": self.description,
            "action": self.action,
            "impact": self.impact,
            "effort": self.effort.value,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class BasicStats:
    """Global totals derived from the per-type counters."""
    total_keys: int
    total_bytes: int
    avg_key_size: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_keys": self.total_keys,
            "total_bytes": self.total_bytes,
            "avg_key_size": self.avg_key_size,
        }


@dataclass(frozen=True)
class Report:
    """Complete result of one analysis run."""
    health_score: int
    stats: BasicStats
    anomalies: tuple[Anomaly, ...] = ()
    memory_hotspots: tuple[MemoryHotspot, ...] = ()
    key_patterns: tuple[KeyPattern, ...] = ()
    type_efficiency: Mapping[str, TypeEfficiency] = field(default_factory=dict)
    slot_imbalance_percentage: float = 0.0
    top_slots: tuple[SlotUsage, ...] = ()
    recommendations: tuple[Recommendation, ...] = ()

    def __post_init__(self) -> None:
        # Read-only view over a private copy
        object.__setattr__(self, "type_efficiency", MappingProxyType(dict(self.type_efficiency)))

    @property
    def total_keys(self) -> int:
        return self.stats.total_keys

    @property
    def total_bytes(self) -> int:
        return self.stats.total_bytes

    @property
    def avg_key_size(self) -> float:
        return self.stats.avg_key_size

    def anomalies_by_level(self, level: AnomalyLevel) -> list[Anomaly]:
        return [a for a in self.anomalies if a.level == level]

    def to_dict(self) -> dict[str, Any]:
        return {
            "health_score": self.health_score,
            "anomalies": [a.to_dict() for a in self.anomalies],
            "memory_hotspots": [h.to_dict() for h in self.memory_hotspots],
            "key_patterns": [p.to_dict() for p in self.key_patterns],
            "type_efficiency": {t: e.to_dict() for t, e in self.type_efficiency.items()},
            "slot_imbalance": self.slot_imbalance_percentage,
            "top_slots_usage": [s.to_dict() for s in self.top_slots],
            "recommendations": [r.to_dict() for r in self.recommendations],
            "basic_stats": self.stats.to_dict(),
        }
