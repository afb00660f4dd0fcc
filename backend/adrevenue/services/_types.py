"""Typed dicts for service-layer return values.

Keeps route-facing methods explicit about their shape instead of returning bare dicts.
"""

import sys

if sys.version_info >= (3, 12):
    from typing import TypedDict
else:
    from typing_extensions import TypedDict

# -- Revenue summary -------------------------------------------------------


class PaymentMethodShare(TypedDict):
    method: str
    amount: float
    percentage: float
    transactions: int


class DailyTrend(TypedDict):
    date: str
    revenue: float
    transactions: int
    refunds: float


class SummaryPeriod(TypedDict):
    start: str
    end: str


class RevenueSummaryDict(TypedDict):
    period: SummaryPeriod
    previous_period: SummaryPeriod
    total_revenue: float
    previous_total_revenue: float
    revenue_growth: int
    pending_revenue: float
    total_transactions: int
    transaction_growth: int
    average_transaction_value: float
    pending_payouts: int
    failed_transactions: int
    refunded_amount: float
    top_payment_method: str
    top_payment_method_percentage: int
    by_payment_method: list[PaymentMethodShare]
    trends: list[DailyTrend]


# -- Health ----------------------------------------------------------------


class DbInfoDict(TypedDict, total=False):
    backend_type: str
    database_url_or_path: str | None
    tables_present: list[str]
    tables_missing: list[str]
    schema_initialized: bool
    pid: int
    error: str
