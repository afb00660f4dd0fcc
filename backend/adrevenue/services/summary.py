"""Revenue dashboard summary: period totals compared with the previous period."""

from datetime import date, datetime
from decimal import Decimal

import structlog
from sqlalchemy.orm import Session

from adrevenue.services._helpers import ZERO, percent_change, round_whole, utc_now
from adrevenue.services._types import DailyTrend, PaymentMethodShare, RevenueSummaryDict
from adrevenue.services.records import LedgerActivity
from adrevenue.services.sources import RecordSource
from adrevenue.services.time_range import TimeRange, resolve_time_range
from db.enums import REVENUE_TRANSACTION_TYPES, TransactionStatus, TransactionType

logger = structlog.get_logger(__name__)

_COMPLETED = TransactionStatus.COMPLETED.value
_PENDING = TransactionStatus.PENDING.value


def _share(part: Decimal, whole: Decimal) -> float:
    return float(part / whole * 100) if whole > 0 else 0.0


def _revenue(rows: list[LedgerActivity]) -> Decimal:
    return sum((r.amount for r in rows if r.counts_as_revenue), ZERO)


class RevenueSummaryService:
    """Aggregates ledger activity for the admin revenue dashboard."""

    def __init__(self, session: Session, source: RecordSource | None = None) -> None:
        self.session: Session = session
        self.source: RecordSource = source or RecordSource(session)

    def get_summary(
        self,
        preset: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        now: datetime | None = None,
    ) -> RevenueSummaryDict:
        time_range: TimeRange = resolve_time_range(preset, start_date, end_date, now=now or utc_now())
        return self.summarize(time_range)

    def summarize(self, time_range: TimeRange) -> RevenueSummaryDict:
        previous_range: TimeRange = time_range.previous()
        current: list[LedgerActivity] = self.source.ledger_activity(time_range)
        previous: list[LedgerActivity] = self.source.ledger_activity(previous_range)

        total_revenue: Decimal = _revenue(current)
        previous_revenue: Decimal = _revenue(previous)
        completed: int = sum(1 for r in current if r.status == _COMPLETED)
        previous_completed: int = sum(1 for r in previous if r.status == _COMPLETED)

        pending_revenue: Decimal = sum(
            (
                r.amount
                for r in current
                if r.status == _PENDING and r.kind in REVENUE_TRANSACTION_TYPES
            ),
            ZERO,
        )
        refunded: Decimal = sum(
            (
                r.amount
                for r in current
                if r.kind == TransactionType.REFUND.value and r.status == _COMPLETED
            ),
            ZERO,
        )
        pending_payouts: int = sum(
            1
            for r in current
            if r.status == _PENDING and r.kind == TransactionType.WITHDRAWAL.value
        )
        failed: int = sum(1 for r in current if r.status == TransactionStatus.FAILED.value)

        method_amounts, method_counts = self._payment_method_totals(current)
        top_method: str = "OTHER"
        top_amount: Decimal = ZERO
        for method, amount in method_amounts.items():
            if amount > top_amount:
                top_method, top_amount = method, amount
        by_method: list[PaymentMethodShare] = sorted(
            (
                PaymentMethodShare(
                    method=method,
                    amount=float(amount),
                    percentage=_share(amount, total_revenue),
                    transactions=method_counts[method],
                )
                for method, amount in method_amounts.items()
            ),
            key=lambda s: s["amount"],
            reverse=True,
        )

        logger.info(
            "revenue_summarized",
            start=time_range.start.isoformat(),
            end=time_range.end.isoformat(),
            entries=len(current),
            total_revenue=str(total_revenue),
        )

        return RevenueSummaryDict(
            period={"start": time_range.start.isoformat(), "end": time_range.end.isoformat()},
            previous_period={
                "start": previous_range.start.isoformat(),
                "end": previous_range.end.isoformat(),
            },
            total_revenue=float(total_revenue),
            previous_total_revenue=float(previous_revenue),
            revenue_growth=percent_change(total_revenue, previous_revenue),
            pending_revenue=float(pending_revenue),
            total_transactions=completed,
            transaction_growth=percent_change(Decimal(completed), Decimal(previous_completed)),
            average_transaction_value=float(total_revenue / completed) if completed else 0.0,
            pending_payouts=pending_payouts,
            failed_transactions=failed,
            refunded_amount=float(refunded),
            top_payment_method=top_method,
            top_payment_method_percentage=(
                int(round_whole(top_amount / total_revenue * 100)) if total_revenue > 0 else 0
            ),
            by_payment_method=by_method,
            trends=self._daily_trends(current, time_range),
        )

    def _payment_method_totals(
        self, rows: list[LedgerActivity]
    ) -> tuple[dict[str, Decimal], dict[str, int]]:
        amounts: dict[str, Decimal] = {}
        counts: dict[str, int] = {}
        for r in rows:
            if r.payment_method_type is None:
                continue
            amounts[r.payment_method_type] = amounts.get(r.payment_method_type, ZERO) + r.amount
            counts[r.payment_method_type] = counts.get(r.payment_method_type, 0) + 1
        return amounts, counts

    def _daily_trends(self, rows: list[LedgerActivity], time_range: TimeRange) -> list[DailyTrend]:
        days: dict[date, list] = {d: [ZERO, 0, ZERO] for d in time_range.calendar_days()}
        for r in rows:
            bucket = days.get(r.occurred_at.date())
            if bucket is None or r.status != _COMPLETED:
                continue
            if r.counts_as_revenue:
                bucket[0] += r.amount
            elif r.kind == TransactionType.REFUND.value:
                bucket[2] += r.amount
            bucket[1] += 1

        return [
            DailyTrend(
                date=d.isoformat(),
                revenue=float(revenue),
                transactions=count,
                refunds=float(refunds),
            )
            for d, (revenue, count, refunds) in days.items()
        ]
