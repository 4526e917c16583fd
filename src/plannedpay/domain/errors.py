"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class StoreError(RuntimeError):
    """A storage backend failed to complete an operation."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def planned_payment_not_found(payment_id: int) -> str:
    """Return message for missing planned payment."""
    return f"Planned payment {payment_id} not found"


def duplicate_account_name(name: str) -> str:
    """Return message for an account name that is already taken."""
    return f"Account with name '{name}' already exists"


def friendly_store_error(operation: str) -> str:
    """Return a user-facing message for a failed store operation."""
    messages = {
        "load": "Could not load planned payments. Please try again.",
        "add": "Could not save the planned payment. Please try again.",
        "update": "Could not update the planned payment. Please try again.",
        "delete": "Could not delete the planned payment. Please try again.",
        "transaction": "Could not record the transaction. Please try again.",
    }
    return messages.get(operation, "Something went wrong. Please try again.")
