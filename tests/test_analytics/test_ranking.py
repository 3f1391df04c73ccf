"""Tests for ranking views and the health overview."""

from __future__ import annotations

from asset_health.analytics.models import AssetMetrics
from asset_health.analytics.ranking import (
    HEALTH_SAMPLE_SIZE,
    critical_assets,
    downtime_ranking,
    fault_frequency_ranking,
    health_overview,
    maintenance_cost_ranking,
    performance_ranking,
    rank,
)


def _m(code: str, downtime: float = 0.0, faults: int = 0, cost: float = 0.0, score: float = 100.0) -> AssetMetrics:
    return AssetMetrics(
        asset_id=code.lower(),
        code=code,
        name=f"Asset {code}",
        location="Plant",
        total_downtime_hours=downtime,
        downtime_incidents=faults,
        average_downtime_per_incident=downtime / faults if faults else 0.0,
        fault_frequency=faults,
        maintenance_cost=cost,
        health_score=score,
    )


def _codes(items: list[AssetMetrics]) -> list[str]:
    return [m.code for m in items]


class TestRank:
    def test_stable_descending(self):
        items = [_m("A", downtime=1), _m("B", downtime=3), _m("C", downtime=1), _m("D", downtime=3)]
        result = rank(items, lambda m: m.total_downtime_hours, descending=True, limit=10)
        assert _codes(result) == ["B", "D", "A", "C"]

    def test_stable_ascending(self):
        items = [_m("A", score=40), _m("B", score=20), _m("C", score=40)]
        result = rank(items, lambda m: m.health_score, descending=False, limit=10)
        assert _codes(result) == ["B", "A", "C"]

    def test_predicate_and_limit(self):
        items = [_m(str(i), downtime=i) for i in range(10)]
        result = rank(
            items, lambda m: m.total_downtime_hours, descending=True, limit=3,
            predicate=lambda m: m.total_downtime_hours % 2 == 0,
        )
        assert _codes(result) == ["8", "6", "4"]

    def test_does_not_mutate_input(self):
        items = [_m("A", downtime=1), _m("B", downtime=2)]
        rank(items, lambda m: m.total_downtime_hours, descending=True, limit=1)
        assert _codes(items) == ["A", "B"]

    def test_empty(self):
        assert rank([], lambda m: m.health_score, descending=True, limit=5) == []


class TestViews:
    def test_downtime_ranking_top_five_with_ties(self):
        downtimes = [5, 9, 2, 9, 7, 1, 5, 3]
        items = [_m(f"EQ-{i}", downtime=d) for i, d in enumerate(downtimes)]
        result = downtime_ranking(items, limit=5)
        assert len(result) == 5
        assert _codes(result) == ["EQ-1", "EQ-3", "EQ-4", "EQ-0", "EQ-6"]

    def test_downtime_default_limit(self):
        items = [_m(str(i), downtime=i) for i in range(8)]
        assert len(downtime_ranking(items)) == 5

    def test_fault_frequency_ranking(self):
        items = [_m("A", faults=2), _m("B", faults=7), _m("C", faults=4)]
        assert _codes(fault_frequency_ranking(items)) == ["B", "C", "A"]

    def test_maintenance_cost_default_limit(self):
        items = [_m(str(i), cost=i * 100) for i in range(15)]
        result = maintenance_cost_ranking(items)
        assert len(result) == 10
        assert result[0].code == "14"

    def test_performance_ranking_by_downtime(self):
        items = [_m("A", downtime=1), _m("B", downtime=8)]
        assert _codes(performance_ranking(items)) == ["B", "A"]

    def test_length_never_exceeds_candidates(self):
        items = [_m("A"), _m("B")]
        assert len(downtime_ranking(items, limit=5)) == 2
        assert len(maintenance_cost_ranking(items, limit=100)) == 2


class TestCriticalAssets:
    def test_filters_and_sorts_ascending(self):
        items = [_m("A", score=45), _m("B", score=80), _m("C", score=10), _m("D", score=50), _m("E", score=30)]
        result = critical_assets(items)
        assert _codes(result) == ["C", "E", "A"]
        assert all(m.health_score < 50 for m in result)

    def test_none_critical_returns_empty(self):
        items = [_m("A", score=50), _m("B", score=75)]
        assert critical_assets(items) == []

    def test_default_limit_five(self):
        items = [_m(str(i), score=float(i)) for i in range(12)]
        assert len(critical_assets(items)) == 5


class TestHealthOverview:
    def test_summary_over_sample(self):
        sample = [_m("A", score=90), _m("B", score=60), _m("C", score=40), _m("D", score=10)]
        summary = health_overview(sample, total_assets=12, active_assets=9)
        assert summary.total_assets == 12
        assert summary.active_assets == 9
        assert summary.assets_with_issues == 3
        assert summary.average_health_score == 50.0
        assert _codes(summary.critical_assets) == ["D", "C"]

    def test_empty_sample(self):
        summary = health_overview([], total_assets=0, active_assets=0)
        assert summary.assets_with_issues == 0
        assert summary.average_health_score == 0
        assert summary.critical_assets == []

    def test_sample_capped(self):
        sample = [_m(str(i), score=60.0) for i in range(HEALTH_SAMPLE_SIZE)] + [_m("X", score=0.0)]
        summary = health_overview(sample, total_assets=101, active_assets=101)
        assert summary.assets_with_issues == HEALTH_SAMPLE_SIZE
        assert summary.average_health_score == 60.0
        assert summary.critical_assets == []

    def test_critical_capped_at_five(self):
        sample = [_m(str(i), score=float(i)) for i in range(20)]
        summary = health_overview(sample, total_assets=20, active_assets=20)
        assert _codes(summary.critical_assets) == ["0", "1", "2", "3", "4"]
