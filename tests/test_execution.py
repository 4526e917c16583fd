"""Tests for executing due planned payments."""

import pytest
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import text

from plannedpay.domain.errors import StoreError, ValidationError
from plannedpay.domain.planned_payment import PlannedPaymentService, build_transaction_record
from plannedpay.domain.transaction import TransactionService


def test_monthly_payment_executes_and_advances(
    memory_db, planned_service, transaction_service, payment_factory, clock, user_id
):
    """A payment created for Jan 1 and checked on Jan 5 runs once and moves to Feb 5."""
    payment = payment_factory(name="Rent", amount=Decimal("21000"), start_date=date(2024, 1, 1))
    assert payment.next_execution_date == date(2024, 1, 1)

    created = planned_service.check_and_execute_due_payments(
        user_id, transaction_service.create_transaction
    )

    assert len(created) == 1
    transaction = created[0]
    assert transaction.id is not None
    assert transaction.transaction_date == date(2024, 1, 5)
    assert transaction.amount == Decimal("21000")
    assert transaction.planned_payment_id == payment.id

    updated = planned_service.get_payment_by_id(payment.id)
    assert updated.last_executed_at == clock()
    assert updated.last_executed_at.date() == date(2024, 1, 5)
    assert updated.next_execution_date == date(2024, 2, 5)
    assert updated.is_active is True
    assert memory_db.get_planned_payment(payment.id) == updated


def test_second_check_does_not_repeat(planned_service, transaction_service, payment_factory, user_id):
    payment_factory()

    planned_service.check_and_execute_due_payments(user_id, transaction_service.create_transaction)
    again = planned_service.check_and_execute_due_payments(
        user_id, transaction_service.create_transaction
    )

    assert again == []
    assert len(transaction_service.list_transactions(user_id)) == 1


def test_overdue_payment_executes_once(planned_service, transaction_service, payment_factory, user_id):
    """Several missed periods produce a single transaction."""
    payment = payment_factory(recurrence_type="daily", start_date=date(2023, 12, 1))

    created = planned_service.check_and_execute_due_payments(
        user_id, transaction_service.create_transaction
    )

    assert len(created) == 1
    assert planned_service.get_payment_by_id(payment.id).next_execution_date == date(2024, 1, 6)


def test_one_time_payment_is_deactivated(planned_service, transaction_service, payment_factory, user_id):
    payment = payment_factory(
        frequency="one_time",
        scheduled_date=date(2024, 1, 5),
        start_date=None,
        recurrence_type=None,
    )

    created = planned_service.check_and_execute_due_payments(
        user_id, transaction_service.create_transaction
    )

    assert len(created) == 1
    updated = planned_service.get_payment_by_id(payment.id)
    assert updated.is_active is False
    assert updated.next_execution_date is None
    assert updated.last_executed_at is not None
    assert planned_service.get_due_payments() == []


def test_future_and_paused_payments_are_skipped(
    planned_service, transaction_service, payment_factory, user_id
):
    payment_factory(name="Future", start_date=date(2024, 1, 6))
    paused = payment_factory(name="Paused", start_date=date(2024, 1, 1))
    planned_service.toggle_active(paused.id)

    created = planned_service.check_and_execute_due_payments(
        user_id, transaction_service.create_transaction
    )

    assert created == []
    assert planned_service.get_payment_by_id(paused.id).next_execution_date == date(2024, 1, 1)


def test_weekly_payment_moves_to_next_chosen_day(
    planned_service, transaction_service, payment_factory, user_id
):
    # Friday 2024-01-05 -> Monday 2024-01-08
    payment = payment_factory(
        recurrence_type="weekly", weekly_days=[1, 5], start_date=date(2024, 1, 5)
    )

    planned_service.check_and_execute_due_payments(user_id, transaction_service.create_transaction)

    assert planned_service.get_payment_by_id(payment.id).next_execution_date == date(2024, 1, 8)


def test_clock_advance_executes_next_period(
    planned_service, transaction_service, payment_factory, clock, user_id
):
    payment = payment_factory()
    planned_service.check_and_execute_due_payments(user_id, transaction_service.create_transaction)

    clock.advance(days=31)
    created = planned_service.check_and_execute_due_payments(
        user_id, transaction_service.create_transaction
    )

    assert [t.transaction_date for t in created] == [date(2024, 2, 5)]
    assert planned_service.get_payment_by_id(payment.id).next_execution_date == date(2024, 3, 5)


class TestFailedCreation:
    """A payment stays due when its transaction was not created."""

    def test_none_result_leaves_payment_due(self, planned_service, payment_factory, user_id):
        payment = payment_factory()

        created = planned_service.check_and_execute_due_payments(user_id, lambda record: None)

        assert created == []
        unchanged = planned_service.get_payment_by_id(payment.id)
        assert unchanged == payment
        assert planned_service.get_due_payments() == [payment]

    def test_raising_creator_leaves_payment_due(self, planned_service, payment_factory, user_id):
        payment = payment_factory()

        def failing_creator(record):
            raise StoreError("ledger offline")

        created = planned_service.check_and_execute_due_payments(user_id, failing_creator)

        assert created == []
        assert planned_service.get_payment_by_id(payment.id) == payment

    def test_rejected_record_leaves_payment_due(self, planned_service, payment_factory, user_id):
        payment = payment_factory()

        def rejecting_creator(record):
            raise ValidationError("rejected")

        assert planned_service.check_and_execute_due_payments(user_id, rejecting_creator) == []
        assert planned_service.get_payment_by_id(payment.id).last_executed_at is None

    def test_retry_after_ledger_failure(self, flaky_db, clock, user_id):
        service = PlannedPaymentService(flaky_db, clock=clock)
        ledger = TransactionService(flaky_db)
        payment = service.add_planned_payment(
            user_id=user_id,
            name="Internet",
            type="expense",
            amount=Decimal("49.99"),
            frequency="recurrent",
            account_id=1,
            start_date=date(2024, 1, 1),
            recurrence_type="monthly",
        )

        flaky_db.failing.add("transaction")
        assert service.check_and_execute_due_payments(user_id, ledger.create_transaction) == []
        assert ledger.last_error is not None
        assert service.get_payment_by_id(payment.id).next_execution_date == date(2024, 1, 1)

        flaky_db.failing.clear()
        created = service.check_and_execute_due_payments(user_id, ledger.create_transaction)

        assert len(created) == 1
        assert service.get_payment_by_id(payment.id).next_execution_date == date(2024, 2, 5)

    def test_other_payments_still_execute(self, planned_service, payment_factory, user_id):
        first = payment_factory(name="First")
        second = payment_factory(name="Second")
        calls = []

        def creator(record):
            calls.append(record.planned_payment_id)
            if record.planned_payment_id == first.id:
                return None
            return record

        created = planned_service.check_and_execute_due_payments(user_id, creator)

        assert calls == [first.id, second.id]
        assert [t.planned_payment_id for t in created] == [second.id]
        assert planned_service.get_payment_by_id(first.id).last_executed_at is None
        assert planned_service.get_payment_by_id(second.id).last_executed_at is not None


def test_advance_failure_still_returns_transaction(flaky_db, clock, user_id, caplog):
    """The created transaction is reported even when the payment cannot be advanced."""
    service = PlannedPaymentService(flaky_db, clock=clock)
    ledger = TransactionService(flaky_db)
    payment = service.add_planned_payment(
        user_id=user_id,
        name="Gym",
        type="expense",
        amount=Decimal("30"),
        frequency="recurrent",
        start_date=date(2024, 1, 1),
        recurrence_type="monthly",
    )
    flaky_db.failing.add("update")

    with caplog.at_level("ERROR", logger="plannedpay"):
        created = service.check_and_execute_due_payments(user_id, ledger.create_transaction)

    assert len(created) == 1
    assert service.get_payment_by_id(payment.id).next_execution_date == date(2024, 1, 1)
    assert "could not be advanced" in caplog.text


def test_missing_table_still_returns_transaction(temp_db, clock, user_id):
    """A database error while advancing is reported, not raised."""
    service = PlannedPaymentService(temp_db, clock=clock)
    ledger = TransactionService(temp_db)
    payment = service.add_planned_payment(
        user_id=user_id,
        name="Gym",
        type="expense",
        amount=Decimal("30"),
        frequency="recurrent",
        start_date=date(2024, 1, 1),
        recurrence_type="monthly",
    )
    session = temp_db._get_session()
    session.execute(text("DROP TABLE planned_payments"))
    session.commit()

    assert service.update_planned_payment(payment.id, {"note": "changed"}) is False
    assert service.get_payment_by_id(payment.id) == payment
    assert service.last_error is not None

    created = service.check_and_execute_due_payments(user_id, ledger.create_transaction)

    assert len(created) == 1
    assert created[0].planned_payment_id == payment.id
    assert service.get_payment_by_id(payment.id).next_execution_date == date(2024, 1, 1)

    assert service.delete_planned_payment(payment.id) is False
    assert service.get_payment_by_id(payment.id) == payment


class SteppingClock:
    """Clock that moves to the next given time on every read."""

    def __init__(self, *times):
        self.times = list(times)

    def __call__(self):
        if len(self.times) > 1:
            return self.times.pop(0)
        return self.times[0]


def test_midnight_during_check_uses_one_date(
    planned_service, transaction_service, payment_factory, user_id
):
    """Due payments are chosen with the same date the transactions get."""
    tomorrow = payment_factory(start_date=date(2024, 1, 6))
    planned_service.clock = SteppingClock(
        datetime(2024, 1, 5, 23, 59, 59), datetime(2024, 1, 6, 0, 0, 1)
    )

    created = planned_service.check_and_execute_due_payments(
        user_id, transaction_service.create_transaction
    )

    assert created == []
    assert planned_service.get_payment_by_id(tomorrow.id).last_executed_at is None


def test_due_payments_for_given_date(planned_service, payment_factory):
    payment = payment_factory(start_date=date(2024, 1, 6))

    assert planned_service.get_due_payments() == []
    assert planned_service.get_due_payments(date(2024, 1, 6)) == [payment]


class TestTransactionRecord:
    """Tests for mapping a planned payment onto a ledger record."""

    def test_expense_uses_source_account(self, payment_factory, user_id):
        payment = payment_factory(
            type="expense",
            account_id=3,
            category_id=7,
            payee="Landlord",
            payment_method="bank_transfer",
        )

        record = build_transaction_record(payment, user_id, date(2024, 1, 5))

        assert record.id is None
        assert record.source_account_id == 3
        assert record.destination_account_id is None
        assert record.category_id == 7
        assert record.payee == "Landlord"
        assert record.payment_method == "bank_transfer"
        assert record.status == "cleared"
        assert record.planned_payment_id == payment.id
        assert record.transaction_date == date(2024, 1, 5)

    def test_income_uses_destination_account(self, payment_factory, user_id):
        payment = payment_factory(type="income", name="Salary", account_id=3)

        record = build_transaction_record(payment, user_id, date(2024, 1, 5))

        assert record.source_account_id is None
        assert record.destination_account_id == 3

    def test_transfer_uses_both_accounts(self, payment_factory, user_id):
        payment = payment_factory(type="transfer", account_id=3, destination_account_id=4)

        record = build_transaction_record(payment, user_id, date(2024, 1, 5))

        assert record.source_account_id == 3
        assert record.destination_account_id == 4

    def test_note_falls_back_to_name(self, payment_factory, user_id):
        payment = payment_factory(name="Rent")
        record = build_transaction_record(payment, user_id, date(2024, 1, 5))
        assert record.note == "[Auto] Rent"

    def test_note_is_prefixed(self, payment_factory, user_id):
        payment = payment_factory(note="Flat 2B")
        record = build_transaction_record(payment, user_id, date(2024, 1, 5))
        assert record.note == "[Auto] Flat 2B"


def test_execution_persists_in_sqlite(temp_db, clock, user_id):
    """Execution state survives reloading from the database."""
    account_id = temp_db.create_account(user_id, "Checking", "current")
    service = PlannedPaymentService(temp_db, clock=clock)
    ledger = TransactionService(temp_db)
    payment = service.add_planned_payment(
        user_id=user_id,
        name="Rent",
        type="expense",
        amount=Decimal("21000.00"),
        frequency="recurrent",
        account_id=account_id,
        start_date=date(2024, 1, 1),
        recurrence_type="monthly",
    )

    service.check_and_execute_due_payments(user_id, ledger.create_transaction)

    reloaded = PlannedPaymentService(temp_db, clock=clock)
    assert reloaded.load_planned_payments(user_id)
    stored = reloaded.get_payment_by_id(payment.id)
    assert stored.next_execution_date == date(2024, 2, 5)
    assert stored.last_executed_at.date() == date(2024, 1, 5)
    assert reloaded.get_due_payments() == []

    transactions = ledger.list_transactions(user_id, planned_payment_id=payment.id)
    assert len(transactions) == 1
    assert transactions[0].amount == Decimal("21000.00")
    assert transactions[0].source_account_id == account_id
    assert transactions[0].note == "[Auto] Rent"


@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-1")])
def test_ledger_rejects_non_positive_amount(transaction_service, payment_factory, user_id, amount):
    payment = payment_factory()
    record = build_transaction_record(payment, user_id, date(2024, 1, 5))

    with pytest.raises(ValidationError):
        transaction_service.create_transaction(
            replace(record, amount=amount)
        )
