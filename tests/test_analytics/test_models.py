"""Tests for KPI filter parsing at the boundary."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from asset_health.analytics.models import AssetFilter, AssetMetrics, DateWindow, KPIFilter, TimeRange


class TestKPIFilterFromParams:
    def test_empty_params(self):
        assert KPIFilter.from_params(None) == KPIFilter()
        assert KPIFilter.from_params({}) == KPIFilter()

    def test_camel_case_keys(self):
        f = KPIFilter.from_params({
            "location": "Plant A",
            "assetType": "pump",
            "startDate": "2024-01-01T00:00:00Z",
            "endDate": "2024-02-01",
            "timeRange": "month",
            "limit": "20",
        })
        assert f.location == "Plant A"
        assert f.asset_type == "pump"
        assert f.start_date == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert f.end_date == datetime(2024, 2, 1, tzinfo=timezone.utc)
        assert f.time_range is TimeRange.MONTH
        assert f.limit == 20

    def test_snake_case_keys(self):
        f = KPIFilter.from_params({"asset_type": "motor", "time_range": "year"})
        assert f.asset_type == "motor"
        assert f.time_range is TimeRange.YEAR

    def test_unknown_time_range_ignored(self):
        assert KPIFilter.from_params({"timeRange": "decade"}).time_range is None

    def test_time_range_case_insensitive(self):
        assert KPIFilter.from_params({"timeRange": "Week"}).time_range is TimeRange.WEEK

    def test_limit_out_of_range_ignored(self):
        assert KPIFilter.from_params({"limit": 0}).limit is None
        assert KPIFilter.from_params({"limit": 101}).limit is None
        assert KPIFilter.from_params({"limit": -3}).limit is None

    def test_limit_bounds_accepted(self):
        assert KPIFilter.from_params({"limit": 1}).limit == 1
        assert KPIFilter.from_params({"limit": 100}).limit == 100

    def test_non_numeric_limit_ignored(self):
        assert KPIFilter.from_params({"limit": "ten"}).limit is None
        assert KPIFilter.from_params({"limit": "2.5"}).limit is None
        assert KPIFilter.from_params({"limit": True}).limit is None
        assert KPIFilter.from_params({"limit": "nan"}).limit is None

    def test_bad_date_ignored(self):
        assert KPIFilter.from_params({"startDate": "yesterday"}).start_date is None

    def test_date_objects_accepted(self):
        f = KPIFilter.from_params({"startDate": date(2024, 5, 1)})
        assert f.start_date == datetime(2024, 5, 1, tzinfo=timezone.utc)

    def test_blank_strings_ignored(self):
        f = KPIFilter.from_params({"location": "  ", "assetType": ""})
        assert f.location is None
        assert f.asset_type is None

    def test_date_only_and_zulu_dates_share_a_window(self):
        f = KPIFilter.from_params({"startDate": "2024-01-01", "endDate": "2024-02-01T00:00:00Z"})
        window = DateWindow(gte=f.start_date, lte=f.end_date)
        assert window.contains(datetime(2024, 1, 15, tzinfo=timezone.utc))
        assert not window.contains(datetime(2024, 2, 2, tzinfo=timezone.utc))

    def test_offset_dates_converted_to_utc(self):
        f = KPIFilter.from_params({"startDate": "2024-01-01T02:00:00+02:00"})
        assert f.start_date == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert f.start_date.utcoffset() == timedelta(0)

    def test_asset_filter_projection(self):
        f = KPIFilter(location="A", asset_type="pump", limit=3)
        assert f.asset_filter == AssetFilter(location="A", asset_type="pump")


class TestKPIFilterConstruction:
    def test_out_of_range_limit_dropped(self):
        assert KPIFilter(limit=0).limit is None
        assert KPIFilter(limit=-5).limit is None
        assert KPIFilter(limit=500).limit is None

    def test_in_range_limit_kept(self):
        assert KPIFilter(limit=100).limit == 100

    def test_naive_datetime_taken_as_utc(self):
        f = KPIFilter(start_date=datetime(2024, 3, 1))
        assert f.start_date == datetime(2024, 3, 1, tzinfo=timezone.utc)

    def test_time_range_string_coerced(self):
        assert KPIFilter(time_range="quarter").time_range is TimeRange.QUARTER

    def test_equal_to_parsed_filter(self):
        assert KPIFilter(location=" A ", limit="7") == KPIFilter.from_params({"location": "A", "limit": 7})


class TestAssetMetrics:
    def test_downtime_hours_alias(self):
        m = AssetMetrics(
            asset_id="1", code="EQ-1", name="Pump", location="A",
            total_downtime_hours=4.5, downtime_incidents=2, average_downtime_per_incident=2.25,
            fault_frequency=2, maintenance_cost=450.0, health_score=92.75,
        )
        assert m.downtime_hours == 4.5
        assert m.last_maintenance_date is None
