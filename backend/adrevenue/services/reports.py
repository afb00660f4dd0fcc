"""Report assembler: one builder per report type, selected by tag.

Each builder pulls its records from a ``RecordSource`` and lays them out
as a ``ReportTable``. New report types register with ``@report_builder``
without touching existing ones.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum

import structlog

from adrevenue.services._helpers import format_date, format_timestamp
from adrevenue.services.projection import HISTORY_DAYS, project_revenue
from adrevenue.services.sources import RecordSource
from adrevenue.services.time_range import TimeRange

logger = structlog.get_logger(__name__)

Cell = str | int | Decimal | None


class ReportType(str, Enum):
    TRANSACTIONS = "transactions"
    PAYMENTS = "payments"
    PARTNERS = "partners"
    ADVERTISERS = "advertisers"
    PROJECTIONS = "projections"
    OVERVIEW = "overview"


DEFAULT_REPORT_TYPE = ReportType.OVERVIEW


@dataclass
class ReportTable:
    """Ordered headers plus rows; every row is exactly as wide as the headers."""

    headers: tuple[str, ...]
    rows: list[tuple[Cell, ...]] = field(default_factory=list)

    def __post_init__(self) -> None:
        for row in self.rows:
            self._check_width(row)

    def _check_width(self, row: Sequence[Cell]) -> None:
        if len(row) != len(self.headers):
            raise ValueError(
                f"Row has {len(row)} values, expected {len(self.headers)}"
            )

    def add_row(self, *values: Cell) -> None:
        self._check_width(values)
        self.rows.append(tuple(values))


@dataclass(frozen=True)
class ReportContext:
    source: RecordSource
    time_range: TimeRange
    now: datetime


ReportBuilder = Callable[[ReportContext], ReportTable]

_BUILDERS: dict[ReportType, ReportBuilder] = {}


def report_builder(report_type: ReportType) -> Callable[[ReportBuilder], ReportBuilder]:
    def register(fn: ReportBuilder) -> ReportBuilder:
        _BUILDERS[report_type] = fn
        return fn

    return register


def parse_report_type(value: str | None) -> ReportType:
    """Map a type tag to ``ReportType``; unknown tags fall back to overview."""
    if not value:
        return DEFAULT_REPORT_TYPE
    try:
        return ReportType(value)
    except ValueError:
        logger.warning("unknown_report_type", value=value, fallback=DEFAULT_REPORT_TYPE.value)
        return DEFAULT_REPORT_TYPE


def build_report(report_type: ReportType, context: ReportContext) -> ReportTable:
    table: ReportTable = _BUILDERS[report_type](context)
    logger.info(
        "report_assembled",
        report_type=report_type.value,
        start=context.time_range.start.isoformat(),
        end=context.time_range.end.isoformat(),
        rows=len(table.rows),
    )
    return table


# ------------------------------------------------------------------
# Builders
# ------------------------------------------------------------------


@report_builder(ReportType.TRANSACTIONS)
def build_transactions(ctx: ReportContext) -> ReportTable:
    table = ReportTable(
        headers=(
            "ID",
            "Type",
            "Amount",
            "Currency",
            "Status",
            "Date",
            "Processed At",
            "Reference",
            "Wallet ID",
            "Payment Method ID",
            "Payment Method Type",
            "Payment Method Last 4",
        )
    )
    for entry in ctx.source.ledger_entries(ctx.time_range):
        method = entry.payment_method
        table.add_row(
            entry.id,
            entry.kind,
            entry.amount,
            entry.currency,
            entry.status,
            format_timestamp(entry.occurred_at),
            format_timestamp(entry.processed_at),
            entry.reference,
            entry.wallet_id,
            entry.payment_method_id,
            method.type if method else None,
            method.last_four if method else None,
        )
    return table


@report_builder(ReportType.PAYMENTS)
def build_payments(ctx: ReportContext) -> ReportTable:
    table = ReportTable(
        headers=(
            "ID",
            "Type",
            "Amount",
            "Currency",
            "Status",
            "Date Initiated",
            "Date Completed",
            "Transaction ID",
            "Receipt URL",
            "Payment Method Type",
            "Advertiser ID",
            "Partner ID",
            "Advertiser Name",
            "Partner Name",
        )
    )
    for p in ctx.source.payments(ctx.time_range):
        table.add_row(
            p.id,
            p.type,
            p.amount,
            p.currency,
            p.status,
            format_timestamp(p.initiated_at),
            format_timestamp(p.completed_at),
            p.transaction_id,
            p.receipt_url,
            p.payment_method_type,
            p.advertiser_id,
            p.partner_id,
            p.advertiser_name,
            p.partner_name,
        )
    return table


@report_builder(ReportType.PARTNERS)
def build_partners(ctx: ReportContext) -> ReportTable:
    table = ReportTable(
        headers=(
            "ID",
            "Company Name",
            "Commission Rate",
            "Revenue",
            "Impressions",
            "Engagements",
            "Created At",
        )
    )
    for s in ctx.source.partner_earnings(ctx.time_range):
        table.add_row(
            s.partner_id,
            s.company_name,
            s.commission_rate,
            s.total_amount,
            s.total_impressions,
            s.total_engagements,
            format_date(s.created_at),
        )
    return table


@report_builder(ReportType.ADVERTISERS)
def build_advertisers(ctx: ReportContext) -> ReportTable:
    table = ReportTable(
        headers=(
            "ID",
            "Company Name",
            "Total Campaigns",
            "Total Budget",
            "Total Payments",
            "Created At",
        )
    )
    for a in ctx.source.advertiser_spend(ctx.time_range):
        table.add_row(
            a.advertiser_id,
            a.company_name,
            a.total_campaigns,
            a.total_budget,
            a.total_completed_payments,
            format_date(a.created_at),
        )
    return table


@report_builder(ReportType.OVERVIEW)
def build_overview(ctx: ReportContext) -> ReportTable:
    table = ReportTable(headers=("Date", "Revenue"))
    daily = ctx.source.revenue_by_day(ctx.time_range)
    for day in sorted(daily):
        table.add_row(day.isoformat(), daily[day])
    return table


@report_builder(ReportType.PROJECTIONS)
def build_projections(ctx: ReportContext) -> ReportTable:
    table = ReportTable(
        headers=("Month", "Projected Revenue", "Actual Revenue", "Monthly Growth Rate")
    )
    history = ctx.source.revenue_by_month(ctx.time_range.extended_back(HISTORY_DAYS))
    projection = project_revenue(history, anchor=ctx.time_range.end, now=ctx.now)
    for point in projection.points:
        table.add_row(
            point.period_label,
            point.projected_revenue,
            point.actual_revenue,
            point.growth_rate_percent,
        )
    return table
