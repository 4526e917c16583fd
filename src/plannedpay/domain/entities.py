"""Domain model entities for plannedpay.

These are pure data classes representing business concepts, independent of
the storage backend. Stores hand them out and take them back; services never
mutate them in place but build new instances with ``dataclasses.replace``.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from typing import Optional

# Transaction / planned payment types
INCOME = "income"
EXPENSE = "expense"
TRANSFER = "transfer"
PAYMENT_TYPES = (INCOME, EXPENSE, TRANSFER)

# Frequencies
ONE_TIME = "one_time"
RECURRENT = "recurrent"
FREQUENCIES = (ONE_TIME, RECURRENT)

# Recurrence types
DAILY = "daily"
WEEKLY = "weekly"
MONTHLY = "monthly"
YEARLY = "yearly"
RECURRENCE_TYPES = (DAILY, WEEKLY, MONTHLY, YEARLY)

PAYMENT_METHODS = (
    "cash",
    "debit_card",
    "credit_card",
    "bank_transfer",
    "voucher",
    "mobile_payment",
    "web_payment",
)

TRANSACTION_STATUSES = ("reconciled", "cleared", "uncleared")

ACCOUNT_TYPES = ("general", "cash", "current", "savings", "credit_card", "investment", "loan")

# Fields whose change invalidates a stored next_execution_date
SCHEDULING_FIELDS = frozenset(
    {
        "frequency",
        "recurrence_type",
        "weekly_days",
        "monthly_interval",
        "start_date",
        "scheduled_date",
    }
)


@dataclass(frozen=True)
class Account:
    """Money account domain entity."""

    id: int
    user_id: str
    name: str
    account_type: str
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity with optional parent."""

    id: int
    user_id: str
    name: str
    parent_id: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class PlannedPayment:
    """Template for a transaction that occurs once or recurs.

    ``weekly_days`` holds weekday indices where 0 is Sunday and 6 is Saturday.
    ``id`` and ``created_at`` are None until the payment has been stored.
    """

    id: Optional[int]
    user_id: str
    name: str
    type: str
    amount: Decimal
    frequency: str
    category_id: Optional[int] = None
    account_id: Optional[int] = None
    destination_account_id: Optional[int] = None
    payee: Optional[str] = None
    payment_method: Optional[str] = None
    note: Optional[str] = None
    scheduled_date: Optional[date] = None
    start_date: Optional[date] = None
    recurrence_type: Optional[str] = None
    weekly_days: tuple[int, ...] = ()
    monthly_interval: int = 1
    is_active: bool = True
    last_executed_at: Optional[datetime] = None
    next_execution_date: Optional[date] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Transaction:
    """Ledger transaction domain entity."""

    id: Optional[int]
    user_id: str
    name: Optional[str]
    type: str
    amount: Decimal
    transaction_date: date
    source_account_id: Optional[int] = None
    destination_account_id: Optional[int] = None
    category_id: Optional[int] = None
    payee: Optional[str] = None
    payment_method: Optional[str] = None
    note: Optional[str] = None
    status: str = "uncleared"
    planned_payment_id: Optional[int] = None
    created_at: Optional[datetime] = None
