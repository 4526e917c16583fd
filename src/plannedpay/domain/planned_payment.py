"""Planned payment domain service.

Owns the in-memory view of a user's planned payments, keeps every stored
``next_execution_date`` consistent with the payment's schedule, and turns due
payments into ledger transactions.
"""

import logging
from dataclasses import fields, replace
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional

from plannedpay.database.base import PaymentStore
from plannedpay.domain.entities import (
    PlannedPayment,
    Transaction,
    PAYMENT_TYPES,
    PAYMENT_METHODS,
    FREQUENCIES,
    RECURRENCE_TYPES,
    SCHEDULING_FIELDS,
    EXPENSE,
    INCOME,
    TRANSFER,
    ONE_TIME,
    RECURRENT,
)
from plannedpay.domain.errors import (
    DomainError,
    NotFoundError,
    StoreError,
    ValidationError,
    friendly_store_error,
    planned_payment_not_found,
)
from plannedpay.domain.recurrence import compute_next_execution_date

logger = logging.getLogger(__name__)

AUTO_NOTE_PREFIX = "[Auto]"

CreateTransaction = Callable[[Transaction], Optional[Transaction]]

_PAYMENT_FIELDS = {f.name for f in fields(PlannedPayment)}
_IMMUTABLE_FIELDS = {"id", "user_id", "created_at"}
_EXECUTION_FIELDS = {"is_active", "last_executed_at", "next_execution_date"}


def validate_planned_payment(payment: PlannedPayment) -> None:
    """Check a planned payment's fields.

    Raises:
        ValidationError: If any field holds an unsupported value
    """
    if not payment.name or not payment.name.strip():
        raise ValidationError("Planned payment name is required")
    if payment.type not in PAYMENT_TYPES:
        raise ValidationError(
            f"Invalid payment type '{payment.type}'. Expected one of: {', '.join(PAYMENT_TYPES)}"
        )
    if not isinstance(payment.amount, Decimal) or payment.amount <= 0:
        raise ValidationError(f"Amount must be a positive decimal, got {payment.amount!r}")
    if payment.payment_method is not None and payment.payment_method not in PAYMENT_METHODS:
        raise ValidationError(
            f"Invalid payment method '{payment.payment_method}'. "
            f"Expected one of: {', '.join(PAYMENT_METHODS)}"
        )
    if payment.type == TRANSFER:
        if payment.account_id is None or payment.destination_account_id is None:
            raise ValidationError("A transfer needs both a source and a destination account")
        if payment.account_id == payment.destination_account_id:
            raise ValidationError("A transfer cannot use the same source and destination account")

    if payment.frequency not in FREQUENCIES:
        raise ValidationError(
            f"Invalid frequency '{payment.frequency}'. Expected one of: {', '.join(FREQUENCIES)}"
        )
    if payment.frequency == ONE_TIME and payment.scheduled_date is None:
        raise ValidationError("A one-time payment needs a scheduled date")
    if payment.frequency == RECURRENT:
        if payment.recurrence_type not in RECURRENCE_TYPES:
            raise ValidationError(
                f"Invalid recurrence type '{payment.recurrence_type}'. "
                f"Expected one of: {', '.join(RECURRENCE_TYPES)}"
            )

    for day in payment.weekly_days:
        if not isinstance(day, int) or not 0 <= day <= 6:
            raise ValidationError(f"Weekday index must be between 0 (Sunday) and 6, got {day!r}")
    if not isinstance(payment.monthly_interval, int) or payment.monthly_interval < 1:
        raise ValidationError(
            f"Monthly interval must be a positive integer, got {payment.monthly_interval!r}"
        )


def build_transaction_record(payment: PlannedPayment, user_id: str, on: date) -> Transaction:
    """Build the ledger record that materializes one occurrence of a payment."""
    source_account_id = None
    if payment.type in (EXPENSE, TRANSFER):
        source_account_id = payment.account_id

    if payment.type == INCOME:
        destination_account_id = payment.account_id
    elif payment.type == TRANSFER:
        destination_account_id = payment.destination_account_id
    else:
        destination_account_id = None

    return Transaction(
        id=None,
        user_id=user_id,
        name=payment.name,
        type=payment.type,
        amount=payment.amount,
        transaction_date=on,
        source_account_id=source_account_id,
        destination_account_id=destination_account_id,
        category_id=payment.category_id,
        payee=payment.payee,
        payment_method=payment.payment_method,
        note=f"{AUTO_NOTE_PREFIX} {payment.note or payment.name}",
        status="cleared",
        planned_payment_id=payment.id,
    )


def _normalize_weekdays(days: Optional[Iterable[int]]) -> tuple[int, ...]:
    return tuple(sorted(set(days or ())))


class PlannedPaymentService:
    """Service for managing and executing planned payments."""

    def __init__(self, store: PaymentStore, clock: Callable[[], datetime] = datetime.now):
        """Initialize planned payment service.

        Args:
            store: Store holding planned payments
            clock: Returns the current timestamp; "today" is its calendar date
        """
        self.store = store
        self.clock = clock
        self.planned_payments: list[PlannedPayment] = []
        self.last_error: Optional[str] = None

    def _today(self) -> date:
        return self.clock().date()

    def _fail(self, operation: str, error: Exception) -> None:
        logger.error("Planned payment %s failed: %s", operation, error)
        if isinstance(error, NotFoundError):
            self.last_error = str(error)
        else:
            self.last_error = friendly_store_error(operation)

    def load_planned_payments(self, user_id: str) -> bool:
        """Replace the in-memory view with the user's stored payments.

        Args:
            user_id: Owner of the payments

        Returns:
            True on success; False if the store failed (the view is left unchanged)
        """
        self.last_error = None
        try:
            payments = self.store.list_planned_payments(user_id)
        except StoreError as e:
            self._fail("load", e)
            return False

        self.planned_payments = list(payments)
        logger.debug("Loaded %d planned payment(s) for user %s", len(payments), user_id)
        return True

    def add_planned_payment(
        self,
        user_id: str,
        name: str,
        type: str,
        amount: Decimal,
        frequency: str,
        category_id: Optional[int] = None,
        account_id: Optional[int] = None,
        destination_account_id: Optional[int] = None,
        payee: Optional[str] = None,
        payment_method: Optional[str] = None,
        note: Optional[str] = None,
        scheduled_date: Optional[date] = None,
        start_date: Optional[date] = None,
        recurrence_type: Optional[str] = None,
        weekly_days: Optional[Iterable[int]] = None,
        monthly_interval: int = 1,
        is_active: bool = True,
    ) -> Optional[PlannedPayment]:
        """Create a planned payment with its first execution date.

        Returns:
            The stored payment, or None if the store failed

        Raises:
            ValidationError: If the payment fields are invalid
        """
        self.last_error = None
        if isinstance(amount, int) and not isinstance(amount, bool):
            amount = Decimal(amount)
        payment = PlannedPayment(
            id=None,
            user_id=user_id,
            name=name,
            type=type,
            amount=amount,
            frequency=frequency,
            category_id=category_id,
            account_id=account_id,
            destination_account_id=destination_account_id,
            payee=payee,
            payment_method=payment_method,
            note=note,
            scheduled_date=scheduled_date,
            start_date=start_date,
            recurrence_type=recurrence_type,
            weekly_days=_normalize_weekdays(weekly_days),
            monthly_interval=monthly_interval,
            is_active=is_active,
        )
        validate_planned_payment(payment)
        payment = replace(
            payment,
            next_execution_date=compute_next_execution_date(payment, today=self._today()),
        )

        try:
            stored = self.store.insert_planned_payment(payment)
        except StoreError as e:
            self._fail("add", e)
            return None

        self.planned_payments.append(stored)
        logger.info(
            "Added planned payment %s '%s' (next execution: %s)",
            stored.id,
            stored.name,
            stored.next_execution_date,
        )
        return stored

    def update_planned_payment(self, payment_id: int, changes: dict[str, Any]) -> bool:
        """Apply changes to a planned payment.

        When a scheduling field is among the changes the next execution date
        is derived again from the merged schedule, anchored on the payment's
        last execution. Other changes leave it alone.

        Args:
            payment_id: Planned payment ID
            changes: Field names mapped to new values

        Returns:
            True on success; False if the payment is unknown or the store failed

        Raises:
            ValidationError: If a field is unknown, read-only, or gets an invalid value
        """
        self.last_error = None
        unknown = set(changes) - _PAYMENT_FIELDS
        if unknown:
            raise ValidationError(f"Unknown planned payment fields: {', '.join(sorted(unknown))}")
        read_only = _IMMUTABLE_FIELDS.intersection(changes)
        if read_only:
            raise ValidationError(f"Fields cannot be changed: {', '.join(sorted(read_only))}")

        payment = self.get_payment_by_id(payment_id)
        if payment is None:
            self._fail("update", NotFoundError(planned_payment_not_found(payment_id)))
            return False

        changes = dict(changes)
        amount = changes.get("amount")
        if isinstance(amount, int) and not isinstance(amount, bool):
            changes["amount"] = Decimal(amount)
        if "weekly_days" in changes:
            changes["weekly_days"] = _normalize_weekdays(changes["weekly_days"])

        merged = replace(payment, **changes)
        if set(changes) - _EXECUTION_FIELDS:
            validate_planned_payment(merged)

        if SCHEDULING_FIELDS.intersection(changes):
            changes["next_execution_date"] = compute_next_execution_date(
                merged, last_executed=merged.last_executed_at, today=self._today()
            )

        try:
            self.store.update_planned_payment(payment_id, changes)
        except (StoreError, NotFoundError) as e:
            self._fail("update", e)
            return False

        self.planned_payments = [
            replace(p, **changes) if p.id == payment_id else p for p in self.planned_payments
        ]
        return True

    def delete_planned_payment(self, payment_id: int) -> bool:
        """Delete a planned payment. Already created transactions are kept.

        Returns:
            True on success; False if the store failed
        """
        self.last_error = None
        try:
            self.store.delete_planned_payment(payment_id)
        except (StoreError, NotFoundError) as e:
            self._fail("delete", e)
            return False

        self.planned_payments = [p for p in self.planned_payments if p.id != payment_id]
        logger.info("Deleted planned payment %s", payment_id)
        return True

    def toggle_active(self, payment_id: int) -> bool:
        """Pause an active payment or resume a paused one."""
        payment = self.get_payment_by_id(payment_id)
        if payment is None:
            self.last_error = planned_payment_not_found(payment_id)
            return False
        return self.update_planned_payment(payment_id, {"is_active": not payment.is_active})

    def check_and_execute_due_payments(
        self, user_id: str, create_transaction: CreateTransaction
    ) -> list[Transaction]:
        """Materialize every due payment as a ledger transaction.

        A payment only advances when its transaction was created. A failed
        creation leaves it due, so the next check retries it.

        Args:
            user_id: Owner of the created transactions
            create_transaction: Stores a transaction record; returns None on failure

        Returns:
            Transactions created during this check
        """
        now = self.clock()
        today = now.date()
        created = []

        for payment in self.get_due_payments(today):
            record = build_transaction_record(payment, user_id, today)
            try:
                transaction = create_transaction(record)
            except (StoreError, DomainError) as e:
                logger.warning("Transaction for planned payment %s was rejected: %s", payment.id, e)
                transaction = None

            if transaction is None:
                logger.warning(
                    "Planned payment %s '%s' stays due: transaction was not created",
                    payment.id,
                    payment.name,
                )
                continue

            created.append(transaction)
            changes = {
                "last_executed_at": now,
                "next_execution_date": compute_next_execution_date(
                    payment, last_executed=today, today=today
                ),
            }
            if payment.frequency == ONE_TIME:
                changes["is_active"] = False

            if not self.update_planned_payment(payment.id, changes):
                # The transaction exists but the payment did not advance
                logger.error(
                    "Planned payment %s executed as transaction %s but could not be advanced",
                    payment.id,
                    transaction.id,
                )
                continue

            logger.info(
                "Executed planned payment %s '%s' as transaction %s (next execution: %s)",
                payment.id,
                payment.name,
                transaction.id,
                changes["next_execution_date"],
            )

        return created

    def get_payment_by_id(self, payment_id: int) -> Optional[PlannedPayment]:
        """Get a loaded planned payment by ID."""
        for payment in self.planned_payments:
            if payment.id == payment_id:
                return payment
        return None

    def get_active_payments(self) -> list[PlannedPayment]:
        """Get loaded payments that are not paused."""
        return [p for p in self.planned_payments if p.is_active]

    def get_upcoming_payments(self, days: int = 30) -> list[PlannedPayment]:
        """Get active payments due between today and ``days`` days from now.

        Args:
            days: Size of the window in days (both ends inclusive)

        Returns:
            Payments sorted by next execution date
        """
        today = self._today()
        end_date = today + timedelta(days=days)
        upcoming = [
            p
            for p in self.planned_payments
            if p.is_active
            and p.next_execution_date is not None
            and today <= p.next_execution_date <= end_date
        ]
        return sorted(upcoming, key=lambda p: p.next_execution_date)

    def get_due_payments(self, today: Optional[date] = None) -> list[PlannedPayment]:
        """Get active payments whose next execution date is on or before ``today``.

        ``today`` defaults to the clock's current date.
        """
        if today is None:
            today = self._today()
        return [
            p
            for p in self.planned_payments
            if p.is_active and p.next_execution_date is not None and p.next_execution_date <= today
        ]
