"""Per-asset reduction of work-order spans and maintenance history.

Pure functions: the records passed in are assumed to be already bounded by
the resolved time window.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from asset_health.analytics.models import (
    COMPLETED_STATUS,
    Asset,
    AssetRecords,
    MaintenanceHistoryEntry,
    WorkOrderSpan,
)

logger = logging.getLogger(__name__)

MS_PER_HOUR = 1000 * 60 * 60


@dataclass
class DowntimeTotals:
    total_hours: float
    incidents: int

    @property
    def average_hours(self) -> float:
        return self.total_hours / self.incidents if self.incidents > 0 else 0.0


@dataclass
class RawAssetMetrics:
    """Raw per-asset metrics before cost and health scoring."""

    asset: Asset
    total_downtime_hours: float
    downtime_incidents: int
    average_downtime_per_incident: float
    last_maintenance_date: datetime | None
    maintenance_events: int


def counts_as_downtime(span: WorkOrderSpan) -> bool:
    """Only completed work orders with both timestamps contribute."""
    return (
        span.status == COMPLETED_STATUS
        and span.reported_at is not None
        and span.completed_at is not None
    )


def span_duration_hours(span: WorkOrderSpan) -> float:
    """Duration of one contributing span in hours.

    A span completed before it was reported is clamped to zero.
    """
    elapsed_ms = (span.completed_at - span.reported_at).total_seconds() * 1000
    if elapsed_ms < 0:
        logger.warning(
            "Clamping negative work-order span for asset %s (%s -> %s)",
            span.asset_id, span.reported_at, span.completed_at,
        )
        return 0.0
    return elapsed_ms / MS_PER_HOUR


def total_downtime(spans: list[WorkOrderSpan]) -> DowntimeTotals:
    total = 0.0
    incidents = 0
    for span in spans:
        if not counts_as_downtime(span):
            continue
        total += span_duration_hours(span)
        incidents += 1
    return DowntimeTotals(total_hours=total, incidents=incidents)


def last_maintenance_date(history: list[MaintenanceHistoryEntry]) -> datetime | None:
    """Most recent ``completed_at``; ``history`` is ordered newest first."""
    if not history:
        return None
    return history[0].completed_at


def aggregate_records(records: AssetRecords) -> RawAssetMetrics:
    """Reduce one asset's bounded records into raw metrics."""
    downtime = total_downtime(records.work_orders)
    history = records.maintenance_history or []
    return RawAssetMetrics(
        asset=records.asset,
        total_downtime_hours=downtime.total_hours,
        downtime_incidents=downtime.incidents,
        average_downtime_per_incident=downtime.average_hours,
        last_maintenance_date=last_maintenance_date(history),
        maintenance_events=len(history),
    )
