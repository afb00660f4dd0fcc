"""Typed read-only records produced by the record source adapters.

Rows are decoded into these once, at the adapter boundary; everything
downstream works with them instead of ORM objects.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from db.enums import REVENUE_TRANSACTION_TYPES, TransactionStatus

# Keyed by calendar day, or by the first day of a calendar month.
RevenueByDay = dict[date, Decimal]
RevenueByMonth = dict[date, Decimal]


@dataclass(frozen=True)
class PaymentMethodSummary:
    id: str
    type: str
    last_four: str | None


@dataclass(frozen=True)
class LedgerEntryRecord:
    id: str
    kind: str
    amount: Decimal
    currency: str
    status: str
    occurred_at: datetime
    processed_at: datetime | None
    reference: str | None
    wallet_id: str
    payment_method_id: str | None
    payment_method: PaymentMethodSummary | None


@dataclass(frozen=True)
class PaymentRecord:
    id: str
    type: str
    amount: Decimal
    currency: str
    status: str
    initiated_at: datetime | None
    completed_at: datetime | None
    transaction_id: str | None
    receipt_url: str | None
    payment_method_type: str | None
    advertiser_id: str | None
    partner_id: str | None
    advertiser_name: str | None
    partner_name: str | None


@dataclass(frozen=True)
class PartnerEarningSummary:
    """A partner with its earnings summed over the requested range."""

    partner_id: str
    company_name: str
    commission_rate: Decimal
    total_amount: Decimal
    total_impressions: int
    total_engagements: int
    created_at: datetime


@dataclass(frozen=True)
class AdvertiserSpendRecord:
    advertiser_id: str
    company_name: str
    total_campaigns: int
    total_budget: Decimal
    total_completed_payments: Decimal
    created_at: datetime


@dataclass(frozen=True)
class LedgerActivity:
    """Slim ledger row used for dashboard totals."""

    kind: str
    status: str
    amount: Decimal
    occurred_at: datetime
    payment_method_type: str | None

    @property
    def counts_as_revenue(self) -> bool:
        return (
            self.status == TransactionStatus.COMPLETED.value
            and self.kind in REVENUE_TRANSACTION_TYPES
        )
