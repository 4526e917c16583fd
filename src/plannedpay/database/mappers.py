"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the domain entities stay stable
when the database schema changes.
"""

from typing import Any

from plannedpay.domain import entities as domain
from plannedpay.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    PlannedPayment as ORMPlannedPayment,
    Transaction as ORMTransaction,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        user_id=orm_account.user_id,
        name=orm_account.name,
        account_type=orm_account.account_type,
        created_at=orm_account.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        user_id=orm_category.user_id,
        name=orm_category.name,
        parent_id=orm_category.parent_id,
        created_at=orm_category.created_at,
    )


def planned_payment_to_domain(orm_payment: ORMPlannedPayment) -> domain.PlannedPayment:
    """Convert SQLAlchemy PlannedPayment model to domain PlannedPayment entity."""
    return domain.PlannedPayment(
        id=orm_payment.id,
        user_id=orm_payment.user_id,
        name=orm_payment.name,
        type=orm_payment.type,
        amount=orm_payment.amount,
        frequency=orm_payment.frequency,
        category_id=orm_payment.category_id,
        account_id=orm_payment.account_id,
        destination_account_id=orm_payment.destination_account_id,
        payee=orm_payment.payee,
        payment_method=orm_payment.payment_method,
        note=orm_payment.note,
        scheduled_date=orm_payment.scheduled_date,
        start_date=orm_payment.start_date,
        recurrence_type=orm_payment.recurrence_type,
        weekly_days=tuple(orm_payment.weekly_days or ()),
        monthly_interval=orm_payment.monthly_interval,
        is_active=orm_payment.is_active,
        last_executed_at=orm_payment.last_executed_at,
        next_execution_date=orm_payment.next_execution_date,
        created_at=orm_payment.created_at,
    )


def planned_payment_columns(changes: dict[str, Any]) -> dict[str, Any]:
    """Convert domain field values to column values for a PlannedPayment row."""
    columns = dict(changes)
    if "weekly_days" in columns:
        columns["weekly_days"] = list(columns["weekly_days"] or ())
    return columns


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        user_id=orm_transaction.user_id,
        name=orm_transaction.name,
        type=orm_transaction.type,
        amount=orm_transaction.amount,
        transaction_date=orm_transaction.transaction_date,
        source_account_id=orm_transaction.source_account_id,
        destination_account_id=orm_transaction.destination_account_id,
        category_id=orm_transaction.category_id,
        payee=orm_transaction.payee,
        payment_method=orm_transaction.payment_method,
        note=orm_transaction.note,
        status=orm_transaction.status,
        planned_payment_id=orm_transaction.planned_payment_id,
        created_at=orm_transaction.created_at,
    )
