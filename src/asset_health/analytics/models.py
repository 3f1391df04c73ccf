"""Domain types shared by the asset health analytics modules.

Plain dataclasses only: these are read-only inputs handed over by the
persistence layer and ephemeral results computed per request. Nothing here
is persisted.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Any, Mapping

MIN_LIMIT = 1
MAX_LIMIT = 100

COMPLETED_STATUS = "COMPLETED"


# ---------------------------------------------------------------------------
# Records supplied by the repository
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Asset:
    """A maintainable piece of equipment."""

    id: str
    code: str
    name: str
    location: str
    is_active: bool = True
    asset_type: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class WorkOrderSpan:
    """The reported → completed span of one work order."""

    asset_id: str
    reported_at: datetime | None
    completed_at: datetime | None = None
    status: str = COMPLETED_STATUS
    fault_code: str | None = None


@dataclass(frozen=True)
class MaintenanceHistoryEntry:
    asset_id: str
    completed_at: datetime


@dataclass
class AssetRecords:
    """One asset with its window-bounded work orders and maintenance history.

    ``maintenance_history`` is None when the repository did not load it;
    the engine fetches it separately in that case.
    """

    asset: Asset
    work_orders: list[WorkOrderSpan] = field(default_factory=list)
    maintenance_history: list[MaintenanceHistoryEntry] | None = field(default_factory=list)


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


class TimeRange(str, enum.Enum):
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


@dataclass(frozen=True)
class AssetFilter:
    """Asset-level part of a KPI filter (pushed down to the repository)."""

    location: str | None = None
    asset_type: str | None = None


@dataclass(frozen=True)
class KPIFilter:
    """Caller-supplied KPI filter, validated once at construction.

    Every field is normalised in ``__post_init__`` whether the filter comes
    from ``from_params`` or is built directly: dates become UTC-aware and a
    limit outside 1-100 is dropped so the view's default applies.
    """

    location: str | None = None
    asset_type: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    time_range: TimeRange | None = None
    limit: int | None = None

    def __post_init__(self) -> None:
        # frozen dataclass: assign through object.__setattr__
        object.__setattr__(self, "location", _parse_text(self.location))
        object.__setattr__(self, "asset_type", _parse_text(self.asset_type))
        object.__setattr__(self, "start_date", _parse_datetime(self.start_date))
        object.__setattr__(self, "end_date", _parse_datetime(self.end_date))
        object.__setattr__(self, "time_range", _parse_time_range(self.time_range))
        object.__setattr__(self, "limit", parse_limit(self.limit))

    @property
    def asset_filter(self) -> AssetFilter:
        return AssetFilter(location=self.location, asset_type=self.asset_type)

    @classmethod
    def from_params(cls, params: Mapping[str, Any] | None) -> KPIFilter:
        """Build a filter from raw query params.

        Accepts camelCase or snake_case keys. Malformed values are dropped
        rather than rejected: an unknown time range, an unparseable date or a
        limit outside 1-100 simply leaves that field unset.
        """
        if not params:
            return cls()

        def pick(*keys: str) -> Any:
            for key in keys:
                if params.get(key) not in (None, ""):
                    return params[key]
            return None

        return cls(
            location=pick("location"),
            asset_type=pick("assetType", "asset_type"),
            start_date=pick("startDate", "start_date"),
            end_date=pick("endDate", "end_date"),
            time_range=pick("timeRange", "time_range"),
            limit=pick("limit"),
        )


@dataclass(frozen=True)
class DateWindow:
    """Inclusive date bounds applied to work-order and maintenance timestamps."""

    gte: datetime | None = None
    lte: datetime | None = None

    @property
    def is_unbounded(self) -> bool:
        return self.gte is None and self.lte is None

    def contains(self, ts: datetime | None) -> bool:
        if ts is None:
            return False
        if self.gte is not None and ts < self.gte:
            return False
        if self.lte is not None and ts > self.lte:
            return False
        return True


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass
class AssetMetrics:
    """Per-asset KPI metrics, computed per request."""

    asset_id: str
    code: str
    name: str
    location: str
    total_downtime_hours: float
    downtime_incidents: int
    average_downtime_per_incident: float
    fault_frequency: int
    maintenance_cost: float
    health_score: float
    last_maintenance_date: datetime | None = None
    maintenance_events: int = 0

    @property
    def downtime_hours(self) -> float:
        return self.total_downtime_hours


@dataclass
class HealthMetricsSummary:
    total_assets: int
    active_assets: int
    assets_with_issues: int
    average_health_score: float
    critical_assets: list[AssetMetrics]


@dataclass
class CodeValidation:
    exists: bool
    asset: Asset | None = None


# ---------------------------------------------------------------------------
# Internal parsing helpers
# ---------------------------------------------------------------------------


def _parse_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_time_range(value: Any) -> TimeRange | None:
    if value is None or isinstance(value, TimeRange):
        return value
    try:
        return TimeRange(str(value).strip().lower())
    except ValueError:
        return None


def parse_limit(value: Any) -> int | None:
    """Integer limit in [MIN_LIMIT, MAX_LIMIT], or None when unusable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number or not number.is_integer():  # NaN or fractional
        return None
    limit = int(number)
    if limit < MIN_LIMIT or limit > MAX_LIMIT:
        return None
    return limit


def _parse_datetime(value: Any) -> datetime | None:
    """Parse to a UTC-aware datetime. Naive input is taken as UTC."""
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
