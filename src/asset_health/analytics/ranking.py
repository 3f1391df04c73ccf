"""Ranking views over scored asset metrics.

Every view is filter -> stable sort -> cap. Equal keys keep their input
order, which is the order the repository returned the assets in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from asset_health.analytics.health_score import has_issues, is_critical
from asset_health.analytics.models import AssetMetrics, HealthMetricsSummary

HEALTH_SAMPLE_SIZE = 100
CRITICAL_OVERVIEW_SIZE = 5


@dataclass(frozen=True)
class ViewPolicy:
    """Filter/sort/limit policy for one KPI view."""

    name: str
    key: Callable[[AssetMetrics], float]
    descending: bool
    default_limit: int
    predicate: Callable[[AssetMetrics], bool] | None = None


DOWNTIME = ViewPolicy("downtime", lambda m: m.total_downtime_hours, True, 5)
FAULT_FREQUENCY = ViewPolicy("fault_frequency", lambda m: m.fault_frequency, True, 5)
MAINTENANCE_COST = ViewPolicy("maintenance_cost", lambda m: m.maintenance_cost, True, 10)
PERFORMANCE = ViewPolicy("performance", lambda m: m.downtime_hours, True, 10)
CRITICAL = ViewPolicy(
    "critical", lambda m: m.health_score, False, 5, predicate=lambda m: is_critical(m.health_score),
)


def rank(
    items: list[AssetMetrics],
    key: Callable[[AssetMetrics], float],
    *,
    descending: bool,
    limit: int,
    predicate: Callable[[AssetMetrics], bool] | None = None,
) -> list[AssetMetrics]:
    """Filter, stable-sort and cap ``items``."""
    candidates = [m for m in items if predicate(m)] if predicate is not None else list(items)
    ordered = sorted(candidates, key=key, reverse=descending)
    return ordered[: max(0, limit)]


def apply_view(
    policy: ViewPolicy, items: list[AssetMetrics], limit: int | None = None,
) -> list[AssetMetrics]:
    return rank(
        items,
        policy.key,
        descending=policy.descending,
        limit=policy.default_limit if limit is None else limit,
        predicate=policy.predicate,
    )


def downtime_ranking(items: list[AssetMetrics], limit: int | None = None) -> list[AssetMetrics]:
    return apply_view(DOWNTIME, items, limit)


def fault_frequency_ranking(items: list[AssetMetrics], limit: int | None = None) -> list[AssetMetrics]:
    return apply_view(FAULT_FREQUENCY, items, limit)


def maintenance_cost_ranking(items: list[AssetMetrics], limit: int | None = None) -> list[AssetMetrics]:
    return apply_view(MAINTENANCE_COST, items, limit)


def performance_ranking(items: list[AssetMetrics], limit: int | None = None) -> list[AssetMetrics]:
    return apply_view(PERFORMANCE, items, limit)


def critical_assets(items: list[AssetMetrics], limit: int | None = None) -> list[AssetMetrics]:
    """Assets scoring strictly below 50, worst first."""
    return apply_view(CRITICAL, items, limit)


def health_overview(
    sample: list[AssetMetrics],
    total_assets: int,
    active_assets: int,
) -> HealthMetricsSummary:
    """Summarise a capped sample of scored assets.

    ``total_assets`` and ``active_assets`` are counted independently of the
    sample; everything else is computed over the sample only.
    """
    capped = sample[:HEALTH_SAMPLE_SIZE]
    with_issues = sum(1 for m in capped if has_issues(m.health_score))
    average = sum(m.health_score for m in capped) / len(capped) if capped else 0.0

    return HealthMetricsSummary(
        total_assets=total_assets,
        active_assets=active_assets,
        assets_with_issues=with_issues,
        average_health_score=average,
        critical_assets=critical_assets(capped, CRITICAL_OVERVIEW_SIZE),
    )
