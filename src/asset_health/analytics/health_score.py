"""Synthetic maintenance cost and 0-100 health score.

Fixed heuristics, not a learned model:

    maintenance_cost = events * 500 + downtime_hours * 100
    downtime_score   = max(0, 100 - downtime_hours / 100 * 100)
    fault_score      = max(0, 100 - faults / 20 * 100)
    health_score     = (downtime_score + fault_score) / 2
"""

from __future__ import annotations

from dataclasses import dataclass

from asset_health.analytics.models import AssetMetrics
from asset_health.analytics.record_aggregator import RawAssetMetrics

COST_PER_MAINTENANCE_EVENT = 500
COST_PER_DOWNTIME_HOUR = 100

REFERENCE_DOWNTIME_HOURS = 100
REFERENCE_FAULT_COUNT = 20

ISSUE_THRESHOLD = 70
CRITICAL_THRESHOLD = 50

MAX_SCORE = 100.0


@dataclass
class HealthBreakdown:
    downtime_score: float
    fault_score: float
    health_score: float


def maintenance_cost(maintenance_events: int, downtime_hours: float) -> float:
    return maintenance_events * COST_PER_MAINTENANCE_EVENT + downtime_hours * COST_PER_DOWNTIME_HOUR


def _penalty_score(value: float, reference: float) -> float:
    return max(0.0, MAX_SCORE - (value / reference) * MAX_SCORE)


def health_breakdown(downtime_hours: float, fault_frequency: int) -> HealthBreakdown:
    downtime_score = _penalty_score(downtime_hours, REFERENCE_DOWNTIME_HOURS)
    fault_score = _penalty_score(fault_frequency, REFERENCE_FAULT_COUNT)
    combined = (downtime_score + fault_score) / 2
    return HealthBreakdown(
        downtime_score=downtime_score,
        fault_score=fault_score,
        health_score=min(MAX_SCORE, max(0.0, combined)),
    )


def health_score(downtime_hours: float, fault_frequency: int) -> float:
    return health_breakdown(downtime_hours, fault_frequency).health_score


def has_issues(score: float) -> bool:
    return score < ISSUE_THRESHOLD


def is_critical(score: float) -> bool:
    # Strict: exactly 50 is not critical.
    return score < CRITICAL_THRESHOLD


def score_asset(raw: RawAssetMetrics) -> AssetMetrics:
    """Enrich raw metrics with cost and health score.

    The completed work-order count doubles as the fault frequency.
    """
    fault_frequency = raw.downtime_incidents
    asset = raw.asset
    return AssetMetrics(
        asset_id=asset.id,
        code=asset.code,
        name=asset.name,
        location=asset.location,
        total_downtime_hours=raw.total_downtime_hours,
        downtime_incidents=raw.downtime_incidents,
        average_downtime_per_incident=raw.average_downtime_per_incident,
        fault_frequency=fault_frequency,
        maintenance_cost=maintenance_cost(raw.maintenance_events, raw.total_downtime_hours),
        health_score=health_score(raw.total_downtime_hours, fault_frequency),
        last_maintenance_date=raw.last_maintenance_date,
        maintenance_events=raw.maintenance_events,
    )
