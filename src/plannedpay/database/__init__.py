"""Database layer for plannedpay application."""

from plannedpay.database.base import Database, PaymentStore, Ledger
from plannedpay.database.factories import create_database, create_sqlite_database, create_memory_database

__all__ = [
    "Database",
    "PaymentStore",
    "Ledger",
    "create_sqlite_database",
    "create_memory_database",
    "create_database",
]
