"""Revenue summary response schemas."""

from app.schemas.common import CamelModel


class PeriodSchema(CamelModel):
    start: str
    end: str


class PaymentMethodShareSchema(CamelModel):
    method: str
    amount: float
    percentage: float
    transactions: int


class DailyTrendSchema(CamelModel):
    date: str
    revenue: float
    transactions: int
    refunds: float


class RevenueSummaryResponse(CamelModel):
    period: PeriodSchema
    previous_period: PeriodSchema
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
    by_payment_method: list[PaymentMethodShareSchema]
    trends: list[DailyTrendSchema]
