"""Enumeration types for the ad platform record store."""

from enum import Enum


class UserRole(str, Enum):
    """Role assigned to a console user."""

    ADMIN = "ADMIN"
    ADVERTISER = "ADVERTISER"
    PARTNER = "PARTNER"


class TransactionType(str, Enum):
    """Kind of monetary movement recorded in the ledger."""

    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"
    PAYMENT = "PAYMENT"
    REFUND = "REFUND"
    ADJUSTMENT = "ADJUSTMENT"


class TransactionStatus(str, Enum):
    """Lifecycle status of a ledger entry."""

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, Enum):
    """Lifecycle status of an advertiser or partner payment."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class PaymentType(str, Enum):
    """Direction / purpose of a payment."""

    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"
    REFUND = "REFUND"
    TRANSFER = "TRANSFER"
    FEE = "FEE"


class PaymentMethodType(str, Enum):
    """Instrument used for a payment or transaction."""

    VISA = "VISA"
    MASTERCARD = "MASTERCARD"
    AMEX = "AMEX"
    OTHER = "OTHER"
    BANK_TRANSFER = "BANK_TRANSFER"
    MPESA = "MPESA"
    FLUTTERWAVE = "FLUTTERWAVE"
    PAYPAL = "PAYPAL"
    STRIPE = "STRIPE"
    CREDIT_CARD = "CREDIT_CARD"


class CampaignStatus(str, Enum):
    """Campaign lifecycle status."""

    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Only completed entries of these kinds count toward revenue.
REVENUE_TRANSACTION_TYPES: tuple[str, ...] = (
    TransactionType.DEPOSIT.value,
    TransactionType.PAYMENT.value,
)
