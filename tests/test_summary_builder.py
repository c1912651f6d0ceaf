"""
Unit Tests for snapshot summary ingestion.
Covers the summary document model and the incremental SummaryBuilder.
"""
import pytest

from rdbops.core.exceptions import InvalidSnapshotSummaryException
from rdbops.domain.entities.snapshot import (
    AggregateSnapshotSummary,
    Entry,
    PrefixGroup,
    SnapshotSummary,
)
from rdbops.domain.services.summary_builder import SummaryBuilder


class TestAggregateSnapshotSummary:

    def test_satisfies_protocol(self, empty_summary):
        assert isinstance(empty_summary, SnapshotSummary)

    def test_ranked_accessors(self):
        summary = AggregateSnapshotSummary(
            entries=[
                Entry(key="small", type="string", bytes=10),
                Entry(key="large", type="string", bytes=1000),
                Entry(key="medium", type="hash", bytes=100),
            ],
            prefix_groups=[
                PrefixGroup(prefix="a:", count=1, total_bytes=5),
                PrefixGroup(prefix="b:", count=1, total_bytes=50),
            ],
        )
        assert [e.key for e in summary.largest_entries(2)] == ["large", "medium"]
        assert [e.key for e in summary.largest_entries(10)] == ["large", "medium", "small"]
        assert summary.largest_entries(0) == []
        assert [g.prefix for g in summary.largest_prefix_groups()] == ["b:", "a:"]

    def test_accessors_return_copies(self):
        summary = AggregateSnapshotSummary(type_bytes={"string": 10}, type_counts={"string": 1})
        summary.byte_totals_by_type()["string"] = 0
        summary.counts_by_type().clear()
        assert summary.byte_totals_by_type() == {"string": 10}
        assert summary.counts_by_type() == {"string": 1}

    def test_from_dict(self):
        summary = AggregateSnapshotSummary.from_dict({
            "entries": [{"key": "foo", "type": "string", "bytes": 64}],
            "prefix_groups": [],
            "type_bytes": {"string": 64},
            "type_counts": {"string": 1},
            "slot_bytes": {"12182": 64},
            "slot_counts": {"12182": 1},
        })
        assert summary.total_keys == 1
        assert summary.total_bytes == 64
        assert summary.byte_totals_by_slot() == {12182: 64}
        assert summary.largest_entries(1)[0].element_count == 0

    def test_from_dict_missing_sections_default_to_empty(self):
        summary = AggregateSnapshotSummary.from_dict({})
        assert summary.total_keys == 0
        assert summary.byte_totals_by_slot() == {}

    def test_from_dict_rejects_negative_sizes(self):
        with pytest.raises(InvalidSnapshotSummaryException) as exc_info:
            AggregateSnapshotSummary.from_dict({
                "entries": [{"key": "foo", "type": "string", "bytes": -1}],
            })

        exc = exc_info.value
        assert exc.status_code == 422
        errors = exc.to_dict()["details"]["errors"]
        assert errors[0]["loc"] == ["entries", 0, "bytes"]

    def test_document_roundtrip_keeps_order(self):
        summary = AggregateSnapshotSummary(
            entries=[Entry(key="a", type="string", bytes=1), Entry(key="b", type="string", bytes=2)],
        )
        document = summary.to_document()
        assert [e.key for e in document.entries] == ["b", "a"]


class TestSummaryBuilder:
    """Incremental aggregation of entries."""

    def setup_method(self):
        self.builder = SummaryBuilder()

    def test_key_prefixes(self):
        assert self.builder.key_prefixes("user:1:profile") == ["user:", "user:1:"]
        assert self.builder.key_prefixes("plain") == []

    def test_key_prefixes_depth_limit(self):
        builder = SummaryBuilder(max_prefix_depth=1)
        assert builder.key_prefixes("a:b:c:d") == ["a:"]

    def test_key_prefixes_multiple_delimiters(self):
        builder = SummaryBuilder(delimiters=":_")
        assert builder.key_prefixes("a_b:c") == ["a_", "a_b:"]

    def test_type_totals_and_prefix_groups(self):
        summary = self.builder.add_all([
            Entry(key="user:1", type="hash", element_count=3, bytes=100),
            Entry(key="user:2", type="hash", element_count=2, bytes=50),
            Entry(key="session:9", type="string", bytes=30),
        ]).build()

        assert summary.counts_by_type() == {"hash": 2, "string": 1}
        assert summary.byte_totals_by_type() == {"hash": 150, "string": 30}
        groups = summary.largest_prefix_groups()
        assert [(g.prefix, g.count, g.total_bytes) for g in groups] == [
            ("user:", 2, 150),
            ("session:", 1, 30),
        ]
        assert summary.byte_totals_by_slot() == {}

    def test_largest_capacity(self):
        builder = SummaryBuilder(largest_capacity=2)
        builder.add_all(Entry(key=f"k{i}", type="string", bytes=size) for i, size in enumerate([5, 50, 20, 1]))
        summary = builder.build()
        assert [e.bytes for e in summary.largest_entries(10)] == [50, 20]
        assert summary.total_keys == 4

    def test_cluster_slots(self):
        builder = SummaryBuilder(cluster_mode=True)
        summary = builder.add_all([
            Entry(key="foo", type="string", bytes=10),
            Entry(key="{user1000}.following", type="set", bytes=20),
            Entry(key="{user1000}.followers", type="set", bytes=30),
        ]).build()

        slots = summary.byte_totals_by_slot()
        assert slots[12182] == 10
        assert len(slots) == 2
        assert sorted(summary.counts_by_slot().values()) == [1, 2]

    def test_prefix_limit(self):
        builder = SummaryBuilder(prefix_limit=3)
        builder.add_all(Entry(key=f"p{i}:x", type="string", bytes=i + 1) for i in range(10))
        groups = builder.build().largest_prefix_groups()
        assert [g.prefix for g in groups] == ["p9:", "p8:", "p7:"]

    def test_empty_build(self):
        summary = self.builder.build()
        assert summary.total_keys == 0
        assert summary.largest_entries(10) == []
