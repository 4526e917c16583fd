"""Abstract storage interfaces."""

from abc import ABC, abstractmethod
from typing import Optional, Any
from datetime import date

# Import entities directly to avoid circular import through domain/__init__.py
from plannedpay.domain.entities import (
    Account,
    Category,
    PlannedPayment,
    Transaction,
)


class PaymentStore(ABC):
    """Durable collection of planned payments.

    Implementations raise StoreError when the backend fails and NotFoundError
    when an operation targets an unknown payment.
    """

    @abstractmethod
    def list_planned_payments(self, user_id: str) -> list[PlannedPayment]:
        """List a user's planned payments by next execution date (nulls last)."""
        pass

    @abstractmethod
    def get_planned_payment(self, payment_id: int) -> Optional[PlannedPayment]:
        """Get planned payment by ID."""
        pass

    @abstractmethod
    def insert_planned_payment(self, payment: PlannedPayment) -> PlannedPayment:
        """Store a new planned payment. Returns it with ``id`` and ``created_at`` set."""
        pass

    @abstractmethod
    def update_planned_payment(self, payment_id: int, changes: dict[str, Any]) -> None:
        """Apply field changes to a stored planned payment."""
        pass

    @abstractmethod
    def delete_planned_payment(self, payment_id: int) -> None:
        """Delete a planned payment."""
        pass


class Ledger(ABC):
    """Durable record of transactions."""

    @abstractmethod
    def create_transaction(self, record: Transaction) -> Transaction:
        """Store a transaction. Returns it with ``id`` and ``created_at`` set."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        planned_payment_id: Optional[int] = None,
    ) -> list[Transaction]:
        """List a user's transactions, newest first, with optional filters."""
        pass


class Database(PaymentStore, Ledger):
    """Full storage backend for plannedpay: payments, ledger, accounts and categories."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(self, user_id: str, name: str, account_type: str = "general") -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, user_id: str) -> list[Account]:
        """List a user's accounts by name."""
        pass

    # Category operations
    @abstractmethod
    def create_category(self, user_id: str, name: str, parent_id: Optional[int] = None) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def list_categories(self, user_id: str) -> list[Category]:
        """List a user's categories by name."""
        pass
