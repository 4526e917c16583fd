"""Domain layer for plannedpay application."""

from importlib import import_module

# Services import the database interfaces, which import domain entities, so
# they are resolved lazily to avoid circular imports
_SERVICES = {
    "PlannedPaymentService": "plannedpay.domain.planned_payment",
    "TransactionService": "plannedpay.domain.transaction",
    "CategoryService": "plannedpay.domain.category",
    "AccountService": "plannedpay.domain.account",
    "compute_next_execution_date": "plannedpay.domain.recurrence",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
