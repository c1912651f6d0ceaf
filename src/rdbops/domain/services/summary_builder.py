"""
Summary builder.

Accumulates decoded entries into the aggregate counters that the analysis
engine consumes. Only the largest entries are retained individually.
"""
from __future__ import annotations

import heapq
from collections import defaultdict
from collections.abc import Iterable

from redis.crc import key_slot

from ...core.config import settings
from ...core.constants import CLUSTER_SLOT_COUNT
from ...core.logging import get_logger
from ..entities.snapshot import AggregateSnapshotSummary, Entry, PrefixGroup

logger = get_logger(__name__)


class SummaryBuilder:
    """Incrementally builds an AggregateSnapshotSummary from entries."""

    def __init__(
        self,
        cluster_mode: bool = False,
        delimiters: str = ":",
        max_prefix_depth: int | None = None,
        largest_capacity: int | None = None,
        prefix_limit: int = 100,
    ):
        self.cluster_mode = cluster_mode
        self.delimiters = frozenset(delimiters)
        self.max_prefix_depth = max_prefix_depth or settings.prefix_max_depth
        self.largest_capacity = largest_capacity or settings.largest_entries_capacity
        self.prefix_limit = prefix_limit

        self._type_bytes: dict[str, int] = defaultdict(int)
        self._type_counts: dict[str, int] = defaultdict(int)
        self._slot_bytes: dict[int, int] = defaultdict(int)
        self._slot_counts: dict[int, int] = defaultdict(int)
        self._prefix_bytes: dict[str, int] = defaultdict(int)
        self._prefix_counts: dict[str, int] = defaultdict(int)
        self._largest: list[tuple[int, int, Entry]] = []
        self._seq = 0

    def key_prefixes(self, key: str) -> list[str]:
        """Prefixes of ``key`` ending at each delimiter, shallowest first."""
        prefixes = []
        for i, ch in enumerate(key):
            if ch in self.delimiters:
                prefixes.append(key[:i + 1])
                if len(prefixes) >= self.max_prefix_depth:
                    break
        return prefixes

    def add(self, entry: Entry) -> None:
        self._type_bytes[entry.type] += entry.bytes
        self._type_counts[entry.type] += 1

        if self.cluster_mode:
            slot = key_slot(entry.key.encode("utf-8"), CLUSTER_SLOT_COUNT)
            self._slot_bytes[slot] += entry.bytes
            self._slot_counts[slot] += 1

        for prefix in self.key_prefixes(entry.key):
            self._prefix_bytes[prefix] += entry.bytes
            self._prefix_counts[prefix] += 1

        # Min-heap keyed on size; the sequence number keeps ordering total
        item = (entry.bytes, -self._seq, entry)
        self._seq += 1
        if len(self._largest) < self.largest_capacity:
            heapq.heappush(self._largest, item)
        elif item[0] > self._largest[0][0]:
            heapq.heapreplace(self._largest, item)

    def add_all(self, entries: Iterable[Entry]) -> "SummaryBuilder":
        for entry in entries:
            self.add(entry)
        return self

    def build(self) -> AggregateSnapshotSummary:
        largest = [item[2] for item in sorted(self._largest, key=lambda i: (i[0], i[1]), reverse=True)]

        ranked_prefixes = sorted(
            self._prefix_bytes.items(), key=lambda kv: (-kv[1], kv[0])
        )[: self.prefix_limit]
        prefix_groups = [
            PrefixGroup(prefix=prefix, count=self._prefix_counts[prefix], total_bytes=total)
            for prefix, total in ranked_prefixes
        ]

        logger.debug(
            f"Built summary from {self._seq} entries: {len(self._type_counts)} types, "
            f"{len(prefix_groups)} prefix groups, {len(self._slot_bytes)} slots"
        )

        return AggregateSnapshotSummary(
            entries=largest,
            prefix_groups=prefix_groups,
            type_bytes=dict(self._type_bytes),
            type_counts=dict(self._type_counts),
            slot_bytes=dict(self._slot_bytes),
            slot_counts=dict(self._slot_counts),
        )
