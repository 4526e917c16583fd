"""In-memory database implementation.

Backs demo sessions and tests. Everything is lost when the instance goes away.
"""

from dataclasses import replace, fields
from datetime import date, datetime, UTC
from itertools import count
from typing import Any, Optional

from plannedpay.database.base import Database
from plannedpay.domain.entities import Account, Category, PlannedPayment, Transaction
from plannedpay.domain.errors import NotFoundError, planned_payment_not_found

_PAYMENT_FIELDS = {f.name for f in fields(PlannedPayment)}
_IMMUTABLE_PAYMENT_FIELDS = {"id", "user_id", "created_at"}


class InMemoryDatabase(Database):
    """Dictionary-backed implementation of Database interface."""

    def __init__(self):
        self._ids = count(1)
        self._accounts: dict[int, Account] = {}
        self._categories: dict[int, Category] = {}
        self._payments: dict[int, PlannedPayment] = {}
        self._transactions: dict[int, Transaction] = {}

    def _next_id(self) -> int:
        return next(self._ids)

    def connect(self) -> None:
        """Connect to the database."""
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    def create_account(self, user_id: str, name: str, account_type: str = "general") -> int:
        account_id = self._next_id()
        self._accounts[account_id] = Account(
            id=account_id,
            user_id=user_id,
            name=name,
            account_type=account_type,
            created_at=datetime.now(UTC),
        )
        return account_id

    def get_account(self, account_id: int) -> Optional[Account]:
        return self._accounts.get(account_id)

    def list_accounts(self, user_id: str) -> list[Account]:
        accounts = [a for a in self._accounts.values() if a.user_id == user_id]
        return sorted(accounts, key=lambda a: a.name)

    # Category operations
    def create_category(self, user_id: str, name: str, parent_id: Optional[int] = None) -> int:
        category_id = self._next_id()
        self._categories[category_id] = Category(
            id=category_id,
            user_id=user_id,
            name=name,
            parent_id=parent_id,
            created_at=datetime.now(UTC),
        )
        return category_id

    def get_category(self, category_id: int) -> Optional[Category]:
        return self._categories.get(category_id)

    def list_categories(self, user_id: str) -> list[Category]:
        categories = [c for c in self._categories.values() if c.user_id == user_id]
        return sorted(categories, key=lambda c: c.name)

    # Planned payment operations
    def list_planned_payments(self, user_id: str) -> list[PlannedPayment]:
        payments = [p for p in self._payments.values() if p.user_id == user_id]
        return sorted(
            payments,
            key=lambda p: (
                p.next_execution_date is None,
                p.next_execution_date or date.min,
                p.id,
            ),
        )

    def get_planned_payment(self, payment_id: int) -> Optional[PlannedPayment]:
        return self._payments.get(payment_id)

    def insert_planned_payment(self, payment: PlannedPayment) -> PlannedPayment:
        stored = replace(
            payment,
            id=self._next_id(),
            weekly_days=tuple(payment.weekly_days or ()),
            created_at=datetime.now(UTC),
        )
        self._payments[stored.id] = stored
        return stored

    def update_planned_payment(self, payment_id: int, changes: dict[str, Any]) -> None:
        payment = self._payments.get(payment_id)
        if payment is None:
            raise NotFoundError(planned_payment_not_found(payment_id))

        unknown = set(changes) - _PAYMENT_FIELDS
        if unknown:
            raise ValueError(f"Unknown planned payment fields: {', '.join(sorted(unknown))}")
        immutable = _IMMUTABLE_PAYMENT_FIELDS.intersection(changes)
        if immutable:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(immutable))}")

        self._payments[payment_id] = replace(payment, **changes)

    def delete_planned_payment(self, payment_id: int) -> None:
        if payment_id not in self._payments:
            raise NotFoundError(planned_payment_not_found(payment_id))
        del self._payments[payment_id]

    # Transaction operations
    def create_transaction(self, record: Transaction) -> Transaction:
        stored = replace(record, id=self._next_id(), created_at=datetime.now(UTC))
        self._transactions[stored.id] = stored
        return stored

    def list_transactions(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        planned_payment_id: Optional[int] = None,
    ) -> list[Transaction]:
        transactions = [
            t
            for t in self._transactions.values()
            if t.user_id == user_id
            and (start_date is None or t.transaction_date >= start_date)
            and (end_date is None or t.transaction_date <= end_date)
            and (planned_payment_id is None or t.planned_payment_id == planned_payment_id)
        ]
        return sorted(transactions, key=lambda t: (t.transaction_date, t.id), reverse=True)
