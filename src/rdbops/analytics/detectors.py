"""
Detector Set
============

Seven independent analysis passes over a frozen snapshot summary. Every pass
is a pure function of an AnalysisContext and returns its own DetectorFindings;
the OpsAnalyzer merges them in DEFAULT_DETECTORS order.
"""
from __future__ import annotations

import math
import statistics
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from ..core import constants as c
from ..domain.entities.snapshot import SnapshotSummary
from .formatting import format_bytes, format_number, percentage, truncate_key
from .models import (
    Anomaly,
    AnomalyCategory,
    AnomalyLevel,
    BasicStats,
    HotspotKind,
    KeyPattern,
    MemoryHotspot,
    SlotUsage,
    TypeEfficiency,
)


@dataclass(frozen=True)
class AnalysisContext:
    """Inputs shared by every pass of one run."""
    summary: SnapshotSummary
    stats: BasicStats
    now: datetime


@dataclass
class DetectorFindings:
    """Output of a single pass. Facets a pass does not touch stay empty."""
    anomalies: list[Anomaly] = field(default_factory=list)
    hotspots: list[MemoryHotspot] = field(default_factory=list)
    key_patterns: list[KeyPattern] = field(default_factory=list)
    type_efficiency: dict[str, TypeEfficiency] = field(default_factory=dict)
    slot_imbalance_percentage: float = 0.0
    top_slots: list[SlotUsage] = field(default_factory=list)


Detector = Callable[[AnalysisContext], DetectorFindings]


def compute_basic_stats(summary: SnapshotSummary) -> BasicStats:
    total_keys = sum(summary.counts_by_type().values())
    total_bytes = sum(summary.byte_totals_by_type().values())
    avg_key_size = total_bytes / total_keys if total_keys > 0 else 0.0
    return BasicStats(total_keys=total_keys, total_bytes=total_bytes, avg_key_size=avg_key_size)


def _share_of_total(part: int, total: int) -> float:
    return min(percentage(part, total), 100.0)


def detect_large_keys(ctx: AnalysisContext) -> DetectorFindings:
    """One critical anomaly per very large key, one aggregate warning for large ones."""
    findings = DetectorFindings()
    warning_count = 0

    for entry in ctx.summary.largest_entries(c.LARGE_KEY_SAMPLE_SIZE):
        if entry.bytes >= c.LARGE_KEY_CRITICAL_BYTES:
            findings.anomalies.append(Anomaly(
                level=AnomalyLevel.CRITICAL,
                category=AnomalyCategory.MEMORY,
                title="Extremely Large Key Detected",
                description=(
                    f"Key '{truncate_key(entry.key)}' is {format_bytes(entry.bytes)}, "
                    "which is extremely large"
                ),
                impact="Can cause blocking operations, memory pressure, and slow replication",
                suggestion="Consider splitting this key into smaller chunks or using a different data structure",
                value=format_bytes(entry.bytes),
                detected_at=ctx.now,
            ))
        elif entry.bytes >= c.LARGE_KEY_WARNING_BYTES:
            warning_count += 1

    if warning_count > 0:
        findings.anomalies.append(Anomaly(
            level=AnomalyLevel.WARNING,
            category=AnomalyCategory.MEMORY,
            title="Large Keys Detected",
            description=f"Found {warning_count} keys larger than {format_bytes(c.LARGE_KEY_WARNING_BYTES)}",
            impact="May cause performance degradation and increased memory fragmentation",
            suggestion="Review large keys and consider optimization",
            value=f"{warning_count} keys",
            detected_at=ctx.now,
        ))

    return findings


def detect_memory_hotspots(ctx: AnalysisContext) -> DetectorFindings:
    """Prefix and type hotspots, with anomalies for heavy concentration."""
    findings = DetectorFindings()
    total_bytes = ctx.stats.total_bytes

    for group in ctx.summary.largest_prefix_groups()[: c.HOTSPOT_PREFIX_LIMIT]:
        share = _share_of_total(group.total_bytes, total_bytes)
        findings.hotspots.append(MemoryHotspot(
            kind=HotspotKind.KEY_PREFIX,
            identifier=group.prefix,
            memory_used=group.total_bytes,
            key_count=group.count,
            percentage_of_total=share,
            avg_entry_size=group.total_bytes // group.count if group.count > 0 else 0,
        ))

        if share > c.PREFIX_HOTSPOT_PERCENT:
            findings.anomalies.append(Anomaly(
                level=AnomalyLevel.WARNING,
                category=AnomalyCategory.MEMORY,
                title="Memory Hotspot Detected",
                description=f"Key prefix '{group.prefix}' uses {share:.1f}% of total memory",
                impact="Memory concentration can cause uneven load distribution in cluster mode",
                suggestion="Consider reviewing keys with this prefix for optimization or better distribution",
                value=f"{share:.1f}%",
                detected_at=ctx.now,
            ))

    type_bytes = ctx.summary.byte_totals_by_type()
    type_counts = ctx.summary.counts_by_type()
    for type_name in sorted(type_bytes):
        used = type_bytes[type_name]
        count = type_counts.get(type_name, 0)
        share = _share_of_total(used, total_bytes)

        if share > c.TYPE_DOMINANCE_PERCENT:
            findings.anomalies.append(Anomaly(
                level=AnomalyLevel.INFO,
                category=AnomalyCategory.MEMORY,
                title="Data Type Dominance",
                description=f"Type '{type_name}' accounts for {share:.1f}% of memory usage",
                impact="Single type dominance might indicate optimization opportunities",
                suggestion="Review if this data type usage pattern is optimal for your use case",
                value=f"{share:.1f}%",
                detected_at=ctx.now,
            ))

        findings.hotspots.append(MemoryHotspot(
            kind=HotspotKind.DATA_TYPE,
            identifier=type_name,
            memory_used=used,
            key_count=count,
            percentage_of_total=share,
            avg_entry_size=used // count if count > 0 else 0,
        ))

    findings.hotspots.sort(key=lambda h: h.memory_used, reverse=True)
    return findings


def detect_key_explosion(ctx: AnalysisContext) -> DetectorFindings:
    """High total key count and the many-tiny-keys anti-pattern."""
    findings = DetectorFindings()

    if ctx.stats.total_keys > c.HIGH_KEY_COUNT:
        findings.anomalies.append(Anomaly(
            level=AnomalyLevel.WARNING,
            category=AnomalyCategory.KEYS,
            title="High Key Count",
            description=f"Database contains {format_number(ctx.stats.total_keys)} keys",
            impact="High key count can slow down operations like KEYS, SCAN, and BGSAVE",
            suggestion="Consider implementing key expiration policies or data archiving",
            value=format_number(ctx.stats.total_keys),
            detected_at=ctx.now,
        ))

    sample = ctx.summary.largest_entries(c.ENTRY_SAMPLE_SIZE)
    tiny_count = sum(1 for entry in sample if entry.bytes < c.TINY_KEY_BYTES)
    if tiny_count > c.TINY_KEY_MIN_COUNT and tiny_count / len(sample) > c.TINY_KEY_MIN_RATIO:
        findings.anomalies.append(Anomaly(
            level=AnomalyLevel.WARNING,
            category=AnomalyCategory.KEYS,
            title="Many Tiny Keys Detected",
            description="Large number of very small keys found, indicating possible key explosion",
            impact="Overhead of key storage can exceed value storage, wasting memory",
            suggestion="Consider using Hash data structures to group related small values",
            value=f"{tiny_count} tiny keys",
            detected_at=ctx.now,
        ))

    return findings


def detect_type_imbalance(ctx: AnalysisContext) -> DetectorFindings:
    """One warning per collection holding more than a million elements."""
    findings = DetectorFindings()

    for entry in ctx.summary.largest_entries(c.ENTRY_SAMPLE_SIZE):
        if entry.element_count > c.HUGE_COLLECTION_ELEMENTS:
            findings.anomalies.append(Anomaly(
                level=AnomalyLevel.WARNING,
                category=AnomalyCategory.PERFORMANCE,
                title="Huge Collection Detected",
                description=(
                    f"Key '{truncate_key(entry.key)}' ({entry.type}) contains "
                    f"{format_number(entry.element_count)} elements"
                ),
                impact="Operations on huge collections can block Redis and cause latency spikes",
                suggestion="Consider splitting into smaller collections or using different access patterns",
                value=format_number(entry.element_count),
                detected_at=ctx.now,
            ))

    return findings


def analyze_key_patterns(ctx: AnalysisContext) -> DetectorFindings:
    """
    Per-prefix key statistics.

    The example key is looked up in the sampled largest entries only, so
    patterns made of small keys usually have an empty example.
    """
    findings = DetectorFindings()
    sample = ctx.summary.largest_entries(c.ENTRY_SAMPLE_SIZE)

    for group in ctx.summary.largest_prefix_groups()[: c.PATTERN_PREFIX_LIMIT]:
        example = next((e.key for e in sample if e.key.startswith(group.prefix)), "")
        findings.key_patterns.append(KeyPattern(
            pattern=group.prefix,
            count=group.count,
            total_memory=group.total_bytes,
            avg_memory=group.total_bytes // group.count if group.count > 0 else 0,
            percentage_of_keys=percentage(group.count, ctx.stats.total_keys),
            example_key=example,
        ))

    return findings


def _percentile_index(count: int, fraction: float) -> int:
    return min(int(count * fraction), count - 1)


def summarize_sizes(type_name: str, sizes: list[int]) -> TypeEfficiency:
    """Percentiles and coefficient-of-variation efficiency for one type."""
    sizes = sorted(sizes)
    count = len(sizes)
    mean = statistics.fmean(sizes)
    stddev = statistics.pstdev(sizes, mu=mean) if count > 1 else 0.0

    cv = stddev / mean if mean > 0 else 0.0
    efficiency = max(0.0, 100.0 - cv * 100.0)

    return TypeEfficiency(
        avg_size=math.floor(mean),
        median_size=sizes[count // 2],
        p95_size=sizes[_percentile_index(count, 0.95)],
        p99_size=sizes[_percentile_index(count, 0.99)],
        efficiency_score=efficiency,
        wasted_memory=0,
        suggested_type=type_name,
    )


def analyze_type_efficiency(ctx: AnalysisContext) -> DetectorFindings:
    """Size dispersion per type over the sampled largest entries."""
    findings = DetectorFindings()

    sizes_by_type: dict[str, list[int]] = defaultdict(list)
    for entry in ctx.summary.largest_entries(c.ENTRY_SAMPLE_SIZE):
        sizes_by_type[entry.type].append(entry.bytes)

    for type_name, sizes in sizes_by_type.items():
        efficiency = summarize_sizes(type_name, sizes)
        findings.type_efficiency[type_name] = efficiency

        if efficiency.efficiency_score < c.LOW_EFFICIENCY_SCORE:
            findings.anomalies.append(Anomaly(
                level=AnomalyLevel.INFO,
                category=AnomalyCategory.PERFORMANCE,
                title="Inconsistent Key Sizes",
                description=(
                    f"Type '{type_name}' shows high size variance "
                    f"(efficiency: {efficiency.efficiency_score:.1f}%)"
                ),
                impact="Inconsistent sizes can indicate suboptimal data structure usage",
                suggestion="Review keys of this type for potential optimization",
                value=f"{efficiency.efficiency_score:.1f}% efficient",
                detected_at=ctx.now,
            ))

    return findings


def analyze_cluster_balance(ctx: AnalysisContext) -> DetectorFindings:
    """Slot imbalance and the ten heaviest slots; no-op outside cluster mode."""
    findings = DetectorFindings()
    slot_bytes = ctx.summary.byte_totals_by_slot()
    if not slot_bytes:
        return findings

    slot_counts = ctx.summary.counts_by_slot()
    total_slot_memory = sum(slot_bytes.values())
    avg_slot_memory = total_slot_memory / len(slot_bytes)
    if avg_slot_memory > 0:
        findings.slot_imbalance_percentage = (
            (max(slot_bytes.values()) - min(slot_bytes.values())) / avg_slot_memory * 100
        )

    ranked = sorted(slot_bytes.items(), key=lambda kv: (-kv[1], kv[0]))
    for slot, used in ranked[: c.TOP_SLOTS_LIMIT]:
        findings.top_slots.append(SlotUsage(
            slot=slot,
            key_count=slot_counts.get(slot, 0),
            memory_used=used,
            percentage_of_total=_share_of_total(used, ctx.stats.total_bytes),
        ))

    imbalance = findings.slot_imbalance_percentage
    if imbalance > c.SLOT_IMBALANCE_PERCENT:
        findings.anomalies.append(Anomaly(
            level=AnomalyLevel.WARNING,
            category=AnomalyCategory.CLUSTER,
            title="Slot Imbalance Detected",
            description=f"Cluster slots show {imbalance:.1f}% imbalance",
            impact="Uneven slot distribution can cause hotspots and performance issues",
            suggestion="Consider rebalancing slots or reviewing key distribution strategy",
            value=f"{imbalance:.1f}% imbalance",
            detected_at=ctx.now,
        ))

    return findings


DEFAULT_DETECTORS: tuple[Detector, ...] = (
    detect_large_keys,
    detect_memory_hotspots,
    detect_key_explosion,
    detect_type_imbalance,
    analyze_key_patterns,
    analyze_type_efficiency,
    analyze_cluster_balance,
)
