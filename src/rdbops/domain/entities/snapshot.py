"""
Snapshot Summary Domain Models
==============================

Read-only aggregate produced by decoding a snapshot file. The analysis engine
only reads ranked slices and totals from it, never the raw keyspace.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ...core.exceptions import InvalidSnapshotSummaryException


class Entry(BaseModel):
    """One key of the snapshot as reported by the decoder."""

    model_config = ConfigDict(frozen=True)

    key: str
    type: str = Field(..., description="Declared data-type name (string, hash, list, ...)")
    element_count: int = Field(default=0, ge=0, description="Number of elements in the value")
    bytes: int = Field(..., ge=0, description="Estimated memory used by the key")


class PrefixGroup(BaseModel):
    """Keys sharing a common leading substring."""

    model_config = ConfigDict(frozen=True)

    prefix: str
    count: int = Field(..., ge=0)
    total_bytes: int = Field(..., ge=0)


@runtime_checkable
class SnapshotSummary(Protocol):
    """Read-only view over the aggregate counters of one snapshot."""

    def largest_entries(self, n: int) -> list[Entry]: ...

    def largest_prefix_groups(self) -> list[PrefixGroup]: ...

    def byte_totals_by_type(self) -> dict[str, int]: ...

    def counts_by_type(self) -> dict[str, int]: ...

    def byte_totals_by_slot(self) -> dict[int, int]: ...

    def counts_by_slot(self) -> dict[int, int]: ...


class SnapshotSummaryDocument(BaseModel):
    """JSON document form of a snapshot summary."""

    model_config = ConfigDict(extra="ignore")

    entries: list[Entry] = Field(default_factory=list)
    prefix_groups: list[PrefixGroup] = Field(default_factory=list)
    type_bytes: dict[str, int] = Field(default_factory=dict)
    type_counts: dict[str, int] = Field(default_factory=dict)
    slot_bytes: dict[int, int] = Field(default_factory=dict)
    slot_counts: dict[int, int] = Field(default_factory=dict)


class AggregateSnapshotSummary:
    """
    Concrete, immutable snapshot summary.

    Entries are kept sorted descending by bytes and prefix groups descending by
    total bytes, so every ranked accessor is a slice.
    """

    def __init__(
        self,
        entries: Sequence[Entry] = (),
        prefix_groups: Sequence[PrefixGroup] = (),
        type_bytes: Mapping[str, int] | None = None,
        type_counts: Mapping[str, int] | None = None,
        slot_bytes: Mapping[int, int] | None = None,
        slot_counts: Mapping[int, int] | None = None,
    ):
        self._entries = tuple(sorted(entries, key=lambda e: e.bytes, reverse=True))
        self._prefix_groups = tuple(
            sorted(prefix_groups, key=lambda g: g.total_bytes, reverse=True)
        )
        self._type_bytes = dict(type_bytes or {})
        self._type_counts = dict(type_counts or {})
        self._slot_bytes = dict(slot_bytes or {})
        self._slot_counts = dict(slot_counts or {})

    @classmethod
    def from_document(cls, document: SnapshotSummaryDocument) -> "AggregateSnapshotSummary":
        return cls(
            entries=document.entries,
            prefix_groups=document.prefix_groups,
            type_bytes=document.type_bytes,
            type_counts=document.type_counts,
            slot_bytes=document.slot_bytes,
            slot_counts=document.slot_counts,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AggregateSnapshotSummary":
        """Validate a JSON summary document and build a summary from it."""
        try:
            document = SnapshotSummaryDocument.model_validate(data)
        except ValidationError as e:
            raise InvalidSnapshotSummaryException(
                "Invalid snapshot summary document",
                errors=[
                    {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                    for err in e.errors()
                ],
            ) from e
        return cls.from_document(document)

    def to_document(self) -> SnapshotSummaryDocument:
        return SnapshotSummaryDocument(
            entries=list(self._entries),
            prefix_groups=list(self._prefix_groups),
            type_bytes=dict(self._type_bytes),
            type_counts=dict(self._type_counts),
            slot_bytes=dict(self._slot_bytes),
            slot_counts=dict(self._slot_counts),
        )

    def largest_entries(self, n: int) -> list[Entry]:
        if n <= 0:
            return []
        return list(self._entries[:n])

    def largest_prefix_groups(self) -> list[PrefixGroup]:
        return list(self._prefix_groups)

    def byte_totals_by_type(self) -> dict[str, int]:
        return dict(self._type_bytes)

    def counts_by_type(self) -> dict[str, int]:
        return dict(self._type_counts)

    def byte_totals_by_slot(self) -> dict[int, int]:
        return dict(self._slot_bytes)

    def counts_by_slot(self) -> dict[int, int]:
        return dict(self._slot_counts)

    @property
    def total_keys(self) -> int:
        return sum(self._type_counts.values())

    @property
    def total_bytes(self) -> int:
        return sum(self._type_bytes.values())

    def __repr__(self) -> str:
        return (
            f"AggregateSnapshotSummary(keys={self.total_keys}, bytes={self.total_bytes}, "
            f"entries={len(self._entries)}, prefixes={len(self._prefix_groups)}, "
            f"slots={len(self._slot_bytes)})"
        )
