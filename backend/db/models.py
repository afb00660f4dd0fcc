"""SQLAlchemy ORM models for the ad platform record store.

Timestamps are naive UTC datetimes; money columns are fixed-point Numeric
and surface as ``Decimal``.
"""

from datetime import UTC, datetime
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import ForeignKey, Index, MetaData, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

Money = Numeric(12, 2, asdecimal=True)


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=convention)


def generate_uuid() -> str:
    return str(uuid4())


def utc_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class Users(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(primary_key=True, default=generate_uuid)
    name: Mapped[str | None] = mapped_column()
    email: Mapped[str] = mapped_column(nullable=False, unique=True)
    role: Mapped[str] = mapped_column(nullable=False, default="ADVERTISER")
    api_token: Mapped[str | None] = mapped_column(String(128), unique=True)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utc_now)

    admin = relationship("Admins", back_populates="user", uselist=False)


class Admins(Base):
    __tablename__ = "admins"

    id: Mapped[str] = mapped_column(primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, unique=True)
    permissions: Mapped[str] = mapped_column(nullable=False, default="{}")
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utc_now)

    user = relationship("Users", back_populates="admin")


class Advertisers(Base):
    __tablename__ = "advertisers"

    id: Mapped[str] = mapped_column(primary_key=True, default=generate_uuid)
    user_id: Mapped[str | None] = mapped_column(ForeignKey("users.id"))
    company_name: Mapped[str] = mapped_column(nullable=False)
    contact_person: Mapped[str | None] = mapped_column()
    country: Mapped[str | None] = mapped_column()
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utc_now)

    campaigns = relationship("Campaigns", back_populates="advertiser")
    payments = relationship("Payments", back_populates="advertiser")


class Campaigns(Base):
    __tablename__ = "campaigns"

    id: Mapped[str] = mapped_column(primary_key=True, default=generate_uuid)
    advertiser_id: Mapped[str] = mapped_column(ForeignKey("advertisers.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(nullable=False, default="DRAFT")
    budget: Mapped[Decimal] = mapped_column(Money, nullable=False)
    start_date: Mapped[datetime] = mapped_column(nullable=False, default=utc_now)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utc_now)

    advertiser = relationship("Advertisers", back_populates="campaigns")


class Partners(Base):
    __tablename__ = "partners"

    id: Mapped[str] = mapped_column(primary_key=True, default=generate_uuid)
    user_id: Mapped[str | None] = mapped_column(ForeignKey("users.id"))
    company_name: Mapped[str] = mapped_column(nullable=False)
    contact_person: Mapped[str | None] = mapped_column()
    commission_rate: Mapped[Decimal] = mapped_column(
        Numeric(5, 2, asdecimal=True), nullable=False, default=Decimal("0.30")
    )
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utc_now)

    earnings = relationship("PartnerEarnings", back_populates="partner")
    payments = relationship("Payments", back_populates="partner")


class PartnerEarnings(Base):
    __tablename__ = "partner_earnings"

    id: Mapped[str] = mapped_column(primary_key=True, default=generate_uuid)
    partner_id: Mapped[str] = mapped_column(ForeignKey("partners.id"), nullable=False)
    period_start: Mapped[datetime] = mapped_column(nullable=False)
    period_end: Mapped[datetime] = mapped_column(nullable=False)
    total_impressions: Mapped[int] = mapped_column(nullable=False, default=0)
    total_engagements: Mapped[int] = mapped_column(nullable=False, default=0)
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    status: Mapped[str] = mapped_column(nullable=False, default="PENDING")
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utc_now)

    partner = relationship("Partners", back_populates="earnings")

    __table_args__ = (Index("ix_partner_earnings_period_end", "period_end"),)


class Wallets(Base):
    __tablename__ = "wallets"

    id: Mapped[str] = mapped_column(primary_key=True, default=generate_uuid)
    partner_id: Mapped[str | None] = mapped_column(ForeignKey("partners.id"))
    balance: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    currency: Mapped[str] = mapped_column(nullable=False, default="USD")
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utc_now)


class PaymentMethods(Base):
    __tablename__ = "payment_methods"

    id: Mapped[str] = mapped_column(primary_key=True, default=generate_uuid)
    wallet_id: Mapped[str | None] = mapped_column(ForeignKey("wallets.id"))
    advertiser_id: Mapped[str | None] = mapped_column(ForeignKey("advertisers.id"))
    type: Mapped[str] = mapped_column(nullable=False)
    last4: Mapped[str | None] = mapped_column(String(4))
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utc_now)


class Transactions(Base):
    """Ledger entry: an atomic monetary movement."""

    __tablename__ = "transactions"

    id: Mapped[str] = mapped_column(primary_key=True, default=generate_uuid)
    wallet_id: Mapped[str] = mapped_column(ForeignKey("wallets.id"), nullable=False)
    type: Mapped[str] = mapped_column(nullable=False)
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    currency: Mapped[str] = mapped_column(nullable=False, default="USD")
    status: Mapped[str] = mapped_column(nullable=False, default="PENDING")
    description: Mapped[str | None] = mapped_column()
    reference: Mapped[str | None] = mapped_column()
    payment_method_id: Mapped[str | None] = mapped_column(ForeignKey("payment_methods.id"))
    date: Mapped[datetime] = mapped_column(nullable=False, default=utc_now)
    processed_at: Mapped[datetime | None] = mapped_column()
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utc_now)

    payment_method = relationship("PaymentMethods")

    __table_args__ = (Index("ix_transactions_date", "date"),)


class Payments(Base):
    __tablename__ = "payments"

    id: Mapped[str] = mapped_column(primary_key=True, default=generate_uuid)
    type: Mapped[str] = mapped_column(nullable=False, default="DEPOSIT")
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    currency: Mapped[str] = mapped_column(nullable=False, default="USD")
    status: Mapped[str] = mapped_column(nullable=False, default="PENDING")
    date_initiated: Mapped[datetime | None] = mapped_column()
    date_completed: Mapped[datetime | None] = mapped_column()
    transaction_id: Mapped[str | None] = mapped_column()
    receipt_url: Mapped[str | None] = mapped_column()
    payment_method_type: Mapped[str | None] = mapped_column()
    advertiser_id: Mapped[str | None] = mapped_column(ForeignKey("advertisers.id"))
    partner_id: Mapped[str | None] = mapped_column(ForeignKey("partners.id"))
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utc_now)

    advertiser = relationship("Advertisers", back_populates="payments")
    partner = relationship("Partners", back_populates="payments")

    __table_args__ = (Index("ix_payments_date_initiated", "date_initiated"),)
