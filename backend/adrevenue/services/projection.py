"""Growth projector: average month-over-month growth compounded forward."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext

import structlog

from adrevenue.services._helpers import ZERO, round_whole

logger = structlog.get_logger(__name__)

PROJECTION_MONTHS = 12
HISTORY_DAYS = 365
FALLBACK_GROWTH_RATE = Decimal("0.05")


@dataclass(frozen=True)
class ProjectionPoint:
    month: date
    period_label: str
    projected_revenue: Decimal
    actual_revenue: Decimal | None
    growth_rate_percent: str


@dataclass(frozen=True)
class GrowthProjection:
    average_growth: Decimal
    growth_samples: int
    base_revenue: Decimal
    points: list[ProjectionPoint]


def add_months(month: date, offset: int) -> date:
    index: int = month.year * 12 + (month.month - 1) + offset
    return date(index // 12, index % 12 + 1, 1)


def average_monthly_growth(monthly: Mapping[date, Decimal]) -> tuple[Decimal, int]:
    """Mean growth over adjacent month pairs, and the number of pairs used.

    Pairs whose earlier month has no revenue are skipped. With no usable
    pair the fallback rate is returned with a sample count of 0.
    """
    months: list[date] = sorted(monthly)
    total: Decimal = ZERO
    count: int = 0
    for prev_month, curr_month in zip(months, months[1:]):
        prev: Decimal = monthly[prev_month]
        if prev > 0:
            total += (monthly[curr_month] - prev) / prev
            count += 1
    if count == 0:
        return FALLBACK_GROWTH_RATE, 0
    return total / count, count


def base_revenue(monthly: Mapping[date, Decimal]) -> Decimal:
    """Latest month's revenue; the mean of all months when that is zero."""
    if not monthly:
        return ZERO
    latest: Decimal = monthly[max(monthly)]
    if latest:
        return latest
    return sum(monthly.values(), ZERO) / len(monthly)


def format_growth_rate(rate: Decimal) -> str:
    percent: Decimal = rate * 100
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, percent.adjusted() + 4)
        return f"{percent.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)}%"


def project_revenue(
    monthly: Mapping[date, Decimal],
    anchor: datetime,
    now: datetime,
    periods: int = PROJECTION_MONTHS,
) -> GrowthProjection:
    """Project ``periods`` consecutive months starting at ``anchor``'s month.

    Months strictly before ``now``'s month carry their recorded revenue
    as the actual value, or ``None`` when nothing was recorded. Current
    and future months never carry an actual value.
    """
    growth, samples = average_monthly_growth(monthly)
    base: Decimal = base_revenue(monthly)
    rate_label: str = format_growth_rate(growth)
    first: date = date(anchor.year, anchor.month, 1)
    current_month: date = date(now.year, now.month, 1)

    points: list[ProjectionPoint] = []
    factor: Decimal = Decimal("1")
    for i in range(periods):
        month: date = add_months(first, i)
        projected: Decimal = round_whole(base * factor)
        factor *= 1 + growth
        actual: Decimal | None = monthly.get(month) if month < current_month else None
        points.append(
            ProjectionPoint(
                month=month,
                period_label=month.strftime("%B %Y"),
                projected_revenue=projected,
                actual_revenue=actual,
                growth_rate_percent=rate_label,
            )
        )

    logger.debug(
        "revenue_projected",
        history_months=len(monthly),
        growth_samples=samples,
        average_growth=str(growth),
        base_revenue=str(base),
    )
    return GrowthProjection(
        average_growth=growth,
        growth_samples=samples,
        base_revenue=base,
        points=points,
    )
