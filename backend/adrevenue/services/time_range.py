"""Resolve a range preset or explicit bounds into a concrete instant interval."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from enum import Enum

import structlog

from adrevenue.services._helpers import utc_now
from adrevenue.services.errors import InvalidTimeRangeError

logger = structlog.get_logger(__name__)


class RangePreset(str, Enum):
    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_90_DAYS = "90d"
    YEAR_TO_DATE = "ytd"
    MONTH = "month"


DEFAULT_PRESET = RangePreset.LAST_30_DAYS

_ROLLING_DAYS: dict[RangePreset, int] = {
    RangePreset.LAST_7_DAYS: 7,
    RangePreset.LAST_30_DAYS: 30,
    RangePreset.LAST_90_DAYS: 90,
}


@dataclass(frozen=True)
class TimeRange:
    """Closed interval ``[start, end]`` of naive UTC instants."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise InvalidTimeRangeError("startDate must not be after endDate")

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def previous(self) -> "TimeRange":
        """Equally long period ending where this one starts."""
        span: timedelta = self.duration
        return TimeRange(self.start - span, self.end - span)

    def extended_back(self, days: int) -> "TimeRange":
        return TimeRange(self.start - timedelta(days=days), self.end)

    def calendar_days(self) -> list[date]:
        days: list[date] = []
        current: date = self.start.date()
        last: date = self.end.date()
        while current <= last:
            days.append(current)
            current += timedelta(days=1)
        return days


def _start_of_month(now: datetime) -> datetime:
    return datetime(now.year, now.month, 1)


def _end_of_month(now: datetime) -> datetime:
    if now.month == 12:
        first_of_next = datetime(now.year + 1, 1, 1)
    else:
        first_of_next = datetime(now.year, now.month + 1, 1)
    return first_of_next - timedelta(microseconds=1)


def parse_preset(value: str | None) -> RangePreset:
    """Map a preset tag to ``RangePreset``; unknown tags fall back to 30d."""
    if not value:
        return DEFAULT_PRESET
    try:
        return RangePreset(value)
    except ValueError:
        logger.warning("unknown_range_preset", value=value, fallback=DEFAULT_PRESET.value)
        return DEFAULT_PRESET


def parse_bound(value: str, field: str) -> datetime:
    """Parse an ISO date or datetime. Dates resolve to midnight."""
    try:
        parsed: datetime = datetime.fromisoformat(value.strip())
    except ValueError as e:
        raise InvalidTimeRangeError(f"Invalid {field}: {value!r}") from e
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC).replace(tzinfo=None)
    return parsed


def resolve_preset(preset: RangePreset, now: datetime) -> TimeRange:
    if preset in _ROLLING_DAYS:
        return TimeRange(now - timedelta(days=_ROLLING_DAYS[preset]), now)
    if preset is RangePreset.YEAR_TO_DATE:
        return TimeRange(datetime(now.year, 1, 1), now)
    return TimeRange(_start_of_month(now), _end_of_month(now))


def resolve_time_range(
    preset: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    now: datetime | None = None,
) -> TimeRange:
    """Resolve request parameters into a ``TimeRange``.

    Explicit bounds win when both are given and are used exactly as
    received. An inverted explicit range raises ``InvalidTimeRangeError``.
    Otherwise the preset (default ``30d``) is resolved against ``now``.
    """
    if start_date and end_date:
        return TimeRange(
            parse_bound(start_date, "startDate"),
            parse_bound(end_date, "endDate"),
        )
    return resolve_preset(parse_preset(preset), now or utc_now())
