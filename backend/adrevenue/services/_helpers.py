"""Shared utilities for the service layer."""

from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"

ZERO = Decimal("0")


def utc_now() -> datetime:
    """Current instant as a naive UTC datetime (the store's convention)."""
    return datetime.now(UTC).replace(tzinfo=None)


def format_timestamp(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.strftime(TIMESTAMP_FORMAT)


def format_date(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.strftime(DATE_FORMAT)


def to_decimal(value: object) -> Decimal:
    """Coerce a DB numeric (Decimal, float, int, str or None) to Decimal."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_whole(value: Decimal) -> Decimal:
    """Round half-up to the nearest whole currency unit.

    Precision is widened to fit every integer digit, so large compounded
    projections keep all their digits instead of failing to quantize.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 2)
        return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def percent_change(current: Decimal, previous: Decimal) -> int:
    """Whole-percent change from ``previous``; 0 when there is no baseline."""
    if previous <= 0:
        return 0
    return int(round_whole((current - previous) / previous * 100))
