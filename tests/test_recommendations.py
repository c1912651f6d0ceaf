"""
Unit Tests for the recommendation engine.
"""
from rdbops.analytics.detectors import compute_basic_stats
from rdbops.analytics.models import Effort, RecommendationCategory, TypeEfficiency
from rdbops.analytics.recommendations import generate_recommendations
from rdbops.core.constants import GIB
from rdbops.domain.entities.snapshot import Entry
from tests.conftest import FIXED_NOW, build_summary


def efficiency(score: float) -> TypeEfficiency:
    return TypeEfficiency(
        avg_size=100,
        median_size=100,
        p95_size=100,
        p99_size=100,
        efficiency_score=score,
        wasted_memory=0,
        suggested_type="string",
    )


def recommend(summary, type_efficiency=None):
    return generate_recommendations(summary, compute_basic_stats(summary), type_efficiency or {}, FIXED_NOW)


class TestRecommendations:

    def test_slow_log_always_present(self, empty_summary):
        recommendations = recommend(empty_summary)
        assert len(recommendations) == 1
        assert recommendations[0].priority == 4
        assert recommendations[0].category == RecommendationCategory.MONITORING
        assert recommendations[0].title == "Enable Redis Slow Log"
        assert recommendations[0].created_at == FIXED_NOW

    def test_eviction_policy_above_ten_gib(self):
        summary = build_summary(type_bytes={"string": 11 * GIB}, type_counts={"string": 1000})
        recommendations = recommend(summary)
        assert [r.priority for r in recommendations] == [2, 4]
        assert recommendations[0].category == RecommendationCategory.MEMORY
        assert recommendations[0].effort == Effort.LOW
        assert "10.0 GB" in recommendations[0].description

    def test_no_eviction_policy_at_ten_gib(self):
        summary = build_summary(type_bytes={"string": 10 * GIB}, type_counts={"string": 1000})
        assert [r.priority for r in recommend(summary)] == [4]

    def test_ttl_when_many_large_keys(self):
        entries = [Entry(key=f"k:{i}", type="hash", bytes=1000) for i in range(51)]
        recommendations = recommend(build_summary(entries=entries))
        assert recommendations[0].priority == 1
        assert recommendations[0].category == RecommendationCategory.TTL
        assert recommendations[0].effort == Effort.MEDIUM

    def test_no_ttl_with_fifty_entries(self):
        entries = [Entry(key=f"k:{i}", type="hash", bytes=1000) for i in range(50)]
        recommendations = recommend(build_summary(entries=entries))
        assert all(r.category != RecommendationCategory.TTL for r in recommendations)

    def test_hash_for_inefficient_strings(self, empty_summary):
        recommendations = recommend(empty_summary, {"string": efficiency(40.0)})
        assert [r.priority for r in recommendations] == [3, 4]
        assert recommendations[0].description == "String type shows low efficiency (40.0%)"
        assert recommendations[0].effort == Effort.HIGH

    def test_efficient_strings_or_other_types_ignored(self, empty_summary):
        assert len(recommend(empty_summary, {"string": efficiency(60.0)})) == 1
        assert len(recommend(empty_summary, {"hash": efficiency(10.0)})) == 1

    def test_sorted_by_priority(self):
        entries = [Entry(key=f"k:{i}", type="string", bytes=1000) for i in range(60)]
        summary = build_summary(entries=entries, type_bytes={"string": 11 * GIB}, type_counts={"string": 60})
        recommendations = recommend(summary, {"string": efficiency(10.0)})
        assert [r.priority for r in recommendations] == [1, 2, 3, 4]
