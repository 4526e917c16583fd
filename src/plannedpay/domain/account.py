"""Account domain service."""

from typing import Optional
from plannedpay.database.base import Database
from plannedpay.domain.entities import Account as AccountEntity, ACCOUNT_TYPES
from plannedpay.domain.errors import ConflictError, ValidationError, duplicate_account_name


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(self, user_id: str, name: str, account_type: str = "general") -> int:
        """Create a new account.

        Args:
            user_id: Owner of the account
            name: Account name
            account_type: One of ACCOUNT_TYPES

        Returns:
            Account ID

        Raises:
            ValidationError: If the account type is unknown
            ConflictError: If the user already has an account with that name
        """
        if account_type not in ACCOUNT_TYPES:
            raise ValidationError(
                f"Invalid account type '{account_type}'. Expected one of: {', '.join(ACCOUNT_TYPES)}"
            )

        # Check if account with same name exists
        for acc in self.db.list_accounts(user_id):
            if acc.name == name:
                raise ConflictError(duplicate_account_name(name))

        return self.db.create_account(user_id=user_id, name=name, account_type=account_type)

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def list_accounts(self, user_id: str) -> list[AccountEntity]:
        """List a user's accounts."""
        return self.db.list_accounts(user_id)
