"""Domain layer: snapshot summary inputs and the services that build them."""

from .entities.snapshot import (
    AggregateSnapshotSummary,
    Entry,
    PrefixGroup,
    SnapshotSummary,
    SnapshotSummaryDocument,
)
from .services.summary_builder import SummaryBuilder

__all__ = [
    "AggregateSnapshotSummary",
    "Entry",
    "PrefixGroup",
    "SnapshotSummary",
    "SnapshotSummaryDocument",
    "SummaryBuilder",
]
