"""Seed sample data for local testing.

Idempotent: skips seeding if users already exist.
Run: python scripts/seed_sample_data.py
"""

import json
import sys
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from pathlib import Path
from uuid import uuid4

# Ensure backend root is on sys.path so 'config' and 'db' resolve
backend_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(backend_root))

from sqlalchemy.orm import Session  # noqa: E402

from db.connection import get_session, init_database  # noqa: E402
from db.models import (  # noqa: E402
    Admins,
    Advertisers,
    Campaigns,
    PartnerEarnings,
    Partners,
    PaymentMethods,
    Payments,
    Transactions,
    Users,
    Wallets,
)

ADMIN_TOKEN = "dev-admin-token"


def _uid() -> str:
    return str(uuid4())


def _ago(days: int, hour: int = 12) -> datetime:
    now = datetime.now(UTC).replace(tzinfo=None)
    return (now - timedelta(days=days)).replace(hour=hour, minute=0, second=0, microsecond=0)


def seed(session: Session) -> None:
    # Skip if already seeded
    existing = session.query(Users).first()
    if existing:
        print("Sample data already seeded, skipping.")
        return

    print("Seeding sample data...")

    # --- Admin user ---
    admin_user = Users(
        id=_uid(), name="Console Admin", email="admin@example.com", role="ADMIN", api_token=ADMIN_TOKEN
    )
    session.add(admin_user)
    session.flush()
    session.add(Admins(id=_uid(), user_id=admin_user.id, permissions=json.dumps({"revenue": "read"})))

    # --- Advertisers and campaigns ---
    advertisers = []
    for name, budgets in (
        ("Savanna Foods", ["12000.00", "4500.00"]),
        ("Kilima Telecom", ["30000.00"]),
        ("Pwani Motors", []),
    ):
        adv = Advertisers(id=_uid(), company_name=name, contact_person="Marketing", created_at=_ago(400))
        session.add(adv)
        session.flush()
        for i, budget in enumerate(budgets):
            session.add(
                Campaigns(
                    id=_uid(),
                    advertiser_id=adv.id,
                    name=f"{name} campaign {i + 1}",
                    status="ACTIVE",
                    budget=Decimal(budget),
                    start_date=_ago(90),
                )
            )
        advertisers.append(adv)

    # --- Partners, wallets, earnings ---
    partners = []
    for name, rate in (("Matatu Screens Ltd", "0.30"), ("Boda Displays", "0.25")):
        partner = Partners(id=_uid(), company_name=name, commission_rate=Decimal(rate), created_at=_ago(380))
        session.add(partner)
        partners.append(partner)
    session.flush()

    wallets = []
    for partner in partners:
        wallet = Wallets(id=_uid(), partner_id=partner.id)
        session.add(wallet)
        wallets.append(wallet)
        for week in range(8):
            session.add(
                PartnerEarnings(
                    id=_uid(),
                    partner_id=partner.id,
                    period_start=_ago(7 * week + 7),
                    period_end=_ago(7 * week),
                    total_impressions=1500 + 100 * week,
                    total_engagements=120 + 5 * week,
                    amount=Decimal("250.00") + Decimal(week * 10),
                    status="PAID",
                )
            )
    session.flush()

    card = PaymentMethods(id=_uid(), wallet_id=wallets[0].id, type="VISA", last4="4242")
    mpesa = PaymentMethods(id=_uid(), wallet_id=wallets[1].id, type="MPESA")
    session.add_all([card, mpesa])
    session.flush()

    # --- Ledger: ~14 months of growing revenue plus some noise ---
    entries = 0
    for day in range(0, 420, 3):
        amount = Decimal("400.00") + Decimal(420 - day)
        method = card if day % 2 == 0 else mpesa
        session.add(
            Transactions(
                id=_uid(),
                wallet_id=method.wallet_id,
                type="DEPOSIT" if day % 4 else "PAYMENT",
                amount=amount,
                status="COMPLETED",
                reference=f"adv:{advertisers[day % len(advertisers)].id}",
                payment_method_id=method.id,
                date=_ago(day),
                processed_at=_ago(day, hour=13),
            )
        )
        entries += 1
    for day, kind, status in (
        (2, "WITHDRAWAL", "PENDING"),
        (4, "REFUND", "COMPLETED"),
        (5, "DEPOSIT", "FAILED"),
        (6, "PAYMENT", "PENDING"),
    ):
        session.add(
            Transactions(
                id=_uid(),
                wallet_id=wallets[0].id,
                type=kind,
                amount=Decimal("75.00"),
                status=status,
                date=_ago(day),
            )
        )
        entries += 1

    # --- Payments ---
    for i, adv in enumerate(advertisers):
        session.add(
            Payments(
                id=_uid(),
                type="DEPOSIT",
                amount=Decimal("1500.00") * (i + 1),
                status="COMPLETED",
                date_initiated=_ago(10 + i),
                date_completed=_ago(9 + i),
                transaction_id=f"txn_{i:04d}",
                receipt_url=f"https://receipts.example.com/{i:04d}",
                payment_method_type="CREDIT_CARD",
                advertiser_id=adv.id,
            )
        )
    for i, partner in enumerate(partners):
        session.add(
            Payments(
                id=_uid(),
                type="WITHDRAWAL",
                amount=Decimal("800.00"),
                status="PENDING",
                date_initiated=_ago(3 + i),
                payment_method_type="MPESA",
                partner_id=partner.id,
            )
        )
    session.flush()

    print("  1 admin user (token: dev-admin-token)")
    print(f"  {len(advertisers)} advertisers")
    print(f"  {len(partners)} partners with 8 weekly earnings each")
    print(f"  {entries} ledger entries")
    print(f"  {len(advertisers) + len(partners)} payments")
    print("Done.")


if __name__ == "__main__":
    init_database()
    with get_session() as session:
        seed(session)
