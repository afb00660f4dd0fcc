"""Tests for adrevenue.services.time_range."""

from datetime import date, datetime, timedelta

import pytest

from adrevenue.services.errors import InvalidTimeRangeError
from adrevenue.services.time_range import (
    RangePreset,
    TimeRange,
    parse_preset,
    resolve_time_range,
)


class TestPresets:
    def test_default_is_30_days(self, now: datetime) -> None:
        r: TimeRange = resolve_time_range(now=now)
        assert r.start == now - timedelta(days=30)
        assert r.end == now

    @pytest.mark.parametrize(("preset", "days"), [("7d", 7), ("30d", 30), ("90d", 90)])
    def test_rolling_windows(self, now: datetime, preset: str, days: int) -> None:
        r: TimeRange = resolve_time_range(preset, now=now)
        assert r.start == now - timedelta(days=days)
        assert r.end == now

    def test_year_to_date(self) -> None:
        now: datetime = datetime(2024, 6, 15, 14, 5, 0)
        r: TimeRange = resolve_time_range("ytd", now=now)
        assert r.start == datetime(2024, 1, 1, 0, 0, 0)
        assert r.end == now

    def test_month_is_closed_period(self, now: datetime) -> None:
        r: TimeRange = resolve_time_range("month", now=now)
        assert r.start == datetime(2024, 6, 1)
        assert r.end == datetime(2024, 6, 30, 23, 59, 59, 999999)

    def test_month_in_december(self) -> None:
        r: TimeRange = resolve_time_range("month", now=datetime(2023, 12, 10))
        assert r.start == datetime(2023, 12, 1)
        assert r.end == datetime(2023, 12, 31, 23, 59, 59, 999999)

    def test_unknown_preset_falls_back(self, now: datetime) -> None:
        assert parse_preset("fortnight") is RangePreset.LAST_30_DAYS
        r: TimeRange = resolve_time_range("fortnight", now=now)
        assert r.start == now - timedelta(days=30)


class TestExplicitBounds:
    def test_dates_override_preset(self, now: datetime) -> None:
        r: TimeRange = resolve_time_range("7d", "2024-03-01", "2024-03-31", now=now)
        assert r.start == datetime(2024, 3, 1)
        assert r.end == datetime(2024, 3, 31)

    def test_datetimes_accepted(self) -> None:
        r: TimeRange = resolve_time_range(None, "2024-03-01T00:00:00", "2024-03-31T23:59:59")
        assert r.end == datetime(2024, 3, 31, 23, 59, 59)

    def test_aware_datetime_normalized_to_utc(self) -> None:
        r: TimeRange = resolve_time_range(None, "2024-03-01T03:00:00+03:00", "2024-03-02")
        assert r.start == datetime(2024, 3, 1, 0, 0, 0)
        assert r.start.tzinfo is None

    def test_single_bound_uses_preset(self, now: datetime) -> None:
        r: TimeRange = resolve_time_range("7d", "2024-03-01", None, now=now)
        assert r.start == now - timedelta(days=7)

    def test_inverted_range_rejected(self) -> None:
        with pytest.raises(InvalidTimeRangeError) as exc:
            resolve_time_range(None, "2024-04-01", "2024-03-01")
        assert exc.value.status_code == 400

    def test_unparseable_date_rejected(self) -> None:
        with pytest.raises(InvalidTimeRangeError, match="startDate"):
            resolve_time_range(None, "March 1st", "2024-03-31")


class TestTimeRange:
    def test_contains_is_inclusive(self) -> None:
        r = TimeRange(datetime(2024, 3, 1), datetime(2024, 3, 31))
        assert r.contains(datetime(2024, 3, 1))
        assert r.contains(datetime(2024, 3, 31))
        assert not r.contains(datetime(2024, 3, 31, 0, 0, 1))

    def test_previous_period(self) -> None:
        r = TimeRange(datetime(2024, 3, 11), datetime(2024, 3, 21))
        prev: TimeRange = r.previous()
        assert prev.start == datetime(2024, 3, 1)
        assert prev.end == datetime(2024, 3, 11)

    def test_extended_back(self) -> None:
        r = TimeRange(datetime(2024, 3, 1), datetime(2024, 3, 31))
        assert r.extended_back(365).start == datetime(2023, 3, 2)

    def test_calendar_days(self) -> None:
        r = TimeRange(datetime(2024, 2, 28, 18), datetime(2024, 3, 1, 6))
        assert r.calendar_days() == [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]
