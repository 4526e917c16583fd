"""Transaction domain service."""

import logging
from typing import Optional
from datetime import date
from plannedpay.database.base import Ledger
from plannedpay.domain.entities import Transaction as TransactionEntity, PAYMENT_TYPES, TRANSACTION_STATUSES
from plannedpay.domain.errors import StoreError, ValidationError

logger = logging.getLogger(__name__)


class TransactionService:
    """Service for recording and listing ledger transactions."""

    def __init__(self, ledger: Ledger):
        """Initialize transaction service.

        Args:
            ledger: Ledger instance
        """
        self.ledger = ledger
        self.last_error: Optional[str] = None

    def create_transaction(self, record: TransactionEntity) -> Optional[TransactionEntity]:
        """Record a transaction in the ledger.

        Args:
            record: Transaction to store (its ``id`` is ignored)

        Returns:
            Stored transaction, or None if the ledger failed

        Raises:
            ValidationError: If the record has an invalid type, status or amount
        """
        if record.type not in PAYMENT_TYPES:
            raise ValidationError(f"Invalid transaction type '{record.type}'")
        if record.status not in TRANSACTION_STATUSES:
            raise ValidationError(f"Invalid transaction status '{record.status}'")
        if record.amount <= 0:
            raise ValidationError(f"Transaction amount must be positive, got {record.amount}")

        self.last_error = None
        try:
            return self.ledger.create_transaction(record)
        except StoreError as e:
            logger.error("Error adding transaction '%s': %s", record.name, e)
            self.last_error = str(e)
            return None

    def list_transactions(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        planned_payment_id: Optional[int] = None,
    ) -> list[TransactionEntity]:
        """List a user's transactions with filters.

        Args:
            user_id: Owner of the transactions
            start_date: Optional start date filter
            end_date: Optional end date filter
            planned_payment_id: Only transactions generated by this planned payment

        Returns:
            List of transaction entities, newest first
        """
        return self.ledger.list_transactions(
            user_id,
            start_date=start_date,
            end_date=end_date,
            planned_payment_id=planned_payment_id,
        )
