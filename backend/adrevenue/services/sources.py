"""Record source adapters: one query per report type against the store."""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal

import structlog
from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from adrevenue.services._helpers import ZERO, to_decimal
from adrevenue.services.errors import RecordSourceError, ReportTooLargeError
from adrevenue.services.records import (
    AdvertiserSpendRecord,
    LedgerActivity,
    LedgerEntryRecord,
    PartnerEarningSummary,
    PaymentMethodSummary,
    PaymentRecord,
    RevenueByDay,
    RevenueByMonth,
)
from adrevenue.services.time_range import TimeRange
from config import get_settings
from db.enums import REVENUE_TRANSACTION_TYPES, PaymentStatus, TransactionStatus
from db.models import (
    Advertisers,
    Campaigns,
    PartnerEarnings,
    Partners,
    PaymentMethods,
    Payments,
    Transactions,
)

logger = structlog.get_logger(__name__)


class RecordSource:
    """Reads report inputs from the store for a resolved ``TimeRange``.

    Row-per-record queries (ledger entries, payments) are capped at
    ``max_rows``; revenue aggregates stream in batches of ``batch_size``.
    """

    def __init__(
        self,
        session: Session,
        max_rows: int | None = None,
        batch_size: int | None = None,
    ) -> None:
        settings = get_settings().reports
        self.session: Session = session
        self.max_rows: int = settings.max_rows if max_rows is None else max_rows
        self.batch_size: int = settings.stream_batch_size if batch_size is None else batch_size

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _query(self, name: str, time_range: TimeRange) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(
                "record_query_failed",
                query=name,
                start=time_range.start.isoformat(),
                end=time_range.end.isoformat(),
                error=str(e),
            )
            raise RecordSourceError(f"{name} query failed: {e}") from e

    def _fetch_capped(self, stmt: Select) -> list:
        rows: list = list(self.session.scalars(stmt.limit(self.max_rows + 1)).unique().all())
        if len(rows) > self.max_rows:
            raise ReportTooLargeError(self.max_rows)
        return rows

    def _stream_revenue(self, time_range: TimeRange) -> Iterator[tuple[datetime, Decimal]]:
        stmt = (
            select(Transactions.date, Transactions.amount)
            .where(
                Transactions.date >= time_range.start,
                Transactions.date <= time_range.end,
                Transactions.status == TransactionStatus.COMPLETED.value,
                Transactions.type.in_(REVENUE_TRANSACTION_TYPES),
            )
            .execution_options(yield_per=self.batch_size)
        )
        for occurred_at, amount in self.session.execute(stmt):
            yield occurred_at, to_decimal(amount)

    # ------------------------------------------------------------------
    # Adapters
    # ------------------------------------------------------------------

    def ledger_entries(self, time_range: TimeRange) -> list[LedgerEntryRecord]:
        """Ledger entries inside the range, newest first."""
        stmt = (
            select(Transactions)
            .options(joinedload(Transactions.payment_method))
            .where(
                Transactions.date >= time_range.start,
                Transactions.date <= time_range.end,
            )
            .order_by(Transactions.date.desc(), Transactions.id)
        )
        with self._query("ledger_entries", time_range):
            rows: list[Transactions] = self._fetch_capped(stmt)

        records: list[LedgerEntryRecord] = []
        for t in rows:
            method = t.payment_method
            records.append(
                LedgerEntryRecord(
                    id=t.id,
                    kind=t.type,
                    amount=to_decimal(t.amount),
                    currency=t.currency,
                    status=t.status,
                    occurred_at=t.date,
                    processed_at=t.processed_at,
                    reference=t.reference,
                    wallet_id=t.wallet_id,
                    payment_method_id=t.payment_method_id,
                    payment_method=(
                        PaymentMethodSummary(id=method.id, type=method.type, last_four=method.last4)
                        if method is not None
                        else None
                    ),
                )
            )
        return records

    def payments(self, time_range: TimeRange) -> list[PaymentRecord]:
        """Payments initiated inside the range, newest first, with counterparty names."""
        stmt = (
            select(Payments)
            .options(joinedload(Payments.advertiser), joinedload(Payments.partner))
            .where(
                Payments.date_initiated >= time_range.start,
                Payments.date_initiated <= time_range.end,
            )
            .order_by(Payments.date_initiated.desc(), Payments.id)
        )
        with self._query("payments", time_range):
            rows: list[Payments] = self._fetch_capped(stmt)

        return [
            PaymentRecord(
                id=p.id,
                type=p.type,
                amount=to_decimal(p.amount),
                currency=p.currency,
                status=p.status,
                initiated_at=p.date_initiated,
                completed_at=p.date_completed,
                transaction_id=p.transaction_id,
                receipt_url=p.receipt_url,
                payment_method_type=p.payment_method_type,
                advertiser_id=p.advertiser_id,
                partner_id=p.partner_id,
                advertiser_name=p.advertiser.company_name if p.advertiser else None,
                partner_name=p.partner.company_name if p.partner else None,
            )
            for p in rows
        ]

    def partner_earnings(self, time_range: TimeRange) -> list[PartnerEarningSummary]:
        """Every partner, with earnings whose period ends in the range summed.

        Partners without matching earnings report zeros.
        """
        totals_stmt = (
            select(
                PartnerEarnings.partner_id,
                func.sum(PartnerEarnings.amount),
                func.sum(PartnerEarnings.total_impressions),
                func.sum(PartnerEarnings.total_engagements),
            )
            .where(
                PartnerEarnings.period_end >= time_range.start,
                PartnerEarnings.period_end <= time_range.end,
            )
            .group_by(PartnerEarnings.partner_id)
        )
        partners_stmt = select(Partners).order_by(Partners.created_at, Partners.id)

        with self._query("partner_earnings", time_range):
            totals: dict[str, tuple[Decimal, int, int]] = {
                pid: (to_decimal(amount), int(impressions or 0), int(engagements or 0))
                for pid, amount, impressions, engagements in self.session.execute(totals_stmt)
            }
            partners: list[Partners] = list(self.session.scalars(partners_stmt).all())

        summaries: list[PartnerEarningSummary] = []
        for partner in partners:
            amount, impressions, engagements = totals.get(partner.id, (ZERO, 0, 0))
            summaries.append(
                PartnerEarningSummary(
                    partner_id=partner.id,
                    company_name=partner.company_name,
                    commission_rate=to_decimal(partner.commission_rate),
                    total_amount=amount,
                    total_impressions=impressions,
                    total_engagements=engagements,
                    created_at=partner.created_at,
                )
            )
        return summaries

    def advertiser_spend(self, time_range: TimeRange) -> list[AdvertiserSpendRecord]:
        """Every advertiser with all-time campaign budgets and in-range completed payments."""
        campaigns_stmt = select(
            Campaigns.advertiser_id,
            func.count(Campaigns.id),
            func.sum(Campaigns.budget),
        ).group_by(Campaigns.advertiser_id)
        payments_stmt = (
            select(Payments.advertiser_id, func.sum(Payments.amount))
            .where(
                Payments.advertiser_id.is_not(None),
                Payments.status == PaymentStatus.COMPLETED.value,
                Payments.date_initiated >= time_range.start,
                Payments.date_initiated <= time_range.end,
            )
            .group_by(Payments.advertiser_id)
        )
        advertisers_stmt = select(Advertisers).order_by(Advertisers.created_at, Advertisers.id)

        with self._query("advertiser_spend", time_range):
            campaign_totals: dict[str, tuple[int, Decimal]] = {
                aid: (int(count), to_decimal(budget))
                for aid, count, budget in self.session.execute(campaigns_stmt)
            }
            payment_totals: dict[str, Decimal] = {
                aid: to_decimal(amount) for aid, amount in self.session.execute(payments_stmt)
            }
            advertisers: list[Advertisers] = list(self.session.scalars(advertisers_stmt).all())

        records: list[AdvertiserSpendRecord] = []
        for adv in advertisers:
            count, budget = campaign_totals.get(adv.id, (0, ZERO))
            records.append(
                AdvertiserSpendRecord(
                    advertiser_id=adv.id,
                    company_name=adv.company_name,
                    total_campaigns=count,
                    total_budget=budget,
                    total_completed_payments=payment_totals.get(adv.id, ZERO),
                    created_at=adv.created_at,
                )
            )
        return records

    def revenue_by_day(self, time_range: TimeRange) -> RevenueByDay:
        """Completed deposit/payment amounts summed per calendar day."""
        daily: RevenueByDay = {}
        with self._query("revenue_by_day", time_range):
            for occurred_at, amount in self._stream_revenue(time_range):
                day: date = occurred_at.date()
                daily[day] = daily.get(day, ZERO) + amount
        return daily

    def revenue_by_month(self, time_range: TimeRange) -> RevenueByMonth:
        """Completed deposit/payment amounts summed per calendar month."""
        monthly: RevenueByMonth = {}
        with self._query("revenue_by_month", time_range):
            for occurred_at, amount in self._stream_revenue(time_range):
                month: date = date(occurred_at.year, occurred_at.month, 1)
                monthly[month] = monthly.get(month, ZERO) + amount
        return monthly

    def ledger_activity(self, time_range: TimeRange) -> list[LedgerActivity]:
        """Every ledger entry in the range, reduced to what totals need."""
        stmt = (
            select(
                Transactions.type,
                Transactions.status,
                Transactions.amount,
                Transactions.date,
                PaymentMethods.type,
            )
            .outerjoin(PaymentMethods, Transactions.payment_method_id == PaymentMethods.id)
            .where(
                Transactions.date >= time_range.start,
                Transactions.date <= time_range.end,
            )
            .execution_options(yield_per=self.batch_size)
        )
        with self._query("ledger_activity", time_range):
            return [
                LedgerActivity(
                    kind=kind,
                    status=status,
                    amount=to_decimal(amount),
                    occurred_at=occurred_at,
                    payment_method_type=method_type,
                )
                for kind, status, amount, occurred_at, method_type in self.session.execute(stmt)
            ]
