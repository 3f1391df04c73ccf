"""Resolve a KPI filter into concrete date bounds.

An explicit start date wins over a named range for the lower bound; the end
date, when given, is always the upper bound. Missing inputs leave the window
open on that side.
"""

from __future__ import annotations

import calendar
from datetime import datetime, timedelta, timezone

from asset_health.analytics.models import DateWindow, KPIFilter, TimeRange

_RANGE_MONTHS = {
    TimeRange.MONTH: 1,
    TimeRange.QUARTER: 3,
    TimeRange.YEAR: 12,
}


def resolve_time_window(kpi_filter: KPIFilter, now: datetime | None = None) -> DateWindow:
    """Compute the ``DateWindow`` for a filter.

    Args:
        kpi_filter: Parsed KPI filter.
        now: Reference "now" for named ranges (defaults to current UTC time).

    Returns:
        DateWindow with ``gte``/``lte`` set where the filter restricts them.
    """
    lower: datetime | None = None
    if kpi_filter.start_date is not None:
        lower = kpi_filter.start_date
    elif kpi_filter.time_range is not None:
        lower = range_start(kpi_filter.time_range, now or datetime.now(timezone.utc))

    return DateWindow(gte=lower, lte=kpi_filter.end_date)


def range_start(time_range: TimeRange, now: datetime) -> datetime:
    """Lower bound of a named range ending at ``now``."""
    if time_range is TimeRange.WEEK:
        return now - timedelta(days=7)
    return subtract_months(now, _RANGE_MONTHS[time_range])


def subtract_months(moment: datetime, months: int) -> datetime:
    """Step back whole calendar months, clamping to the target month's last day."""
    index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return moment.replace(year=year, month=month, day=min(moment.day, last_day))
