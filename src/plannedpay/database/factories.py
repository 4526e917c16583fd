"""Database factory functions."""

import logging
import os
from pathlib import Path
from typing import Optional

from plannedpay.database.base import Database
from plannedpay.database.memory import InMemoryDatabase
from plannedpay.database.sqlalchemy_db import SQLAlchemyDatabase

logger = logging.getLogger(__name__)

DB_PATH_ENV = "PLANNEDPAY_DB_PATH"
DEFAULT_DB_FILE = Path.home() / ".plannedpay" / "plannedpay.db"


def resolve_database_path(database_path: Optional[str] = None) -> Path:
    """Pick the SQLite file: explicit path, then $PLANNEDPAY_DB_PATH, then the home default.

    The parent directory of the home default is created when missing.
    """
    if database_path:
        return Path(database_path)

    from_env = os.environ.get(DB_PATH_ENV)
    if from_env:
        return Path(from_env)

    DEFAULT_DB_FILE.parent.mkdir(parents=True, exist_ok=True)
    return DEFAULT_DB_FILE


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLAlchemy database backed by a SQLite file.

    Args:
        database_path: SQLite file; see resolve_database_path for the fallbacks

    Returns:
        SQLAlchemyDatabase for the resolved file
    """
    path = resolve_database_path(database_path)
    logger.debug("Using SQLite database at %s", path)
    return SQLAlchemyDatabase(f"sqlite:///{path}")


def create_memory_database() -> InMemoryDatabase:
    """Create an in-memory database for demo sessions and tests."""
    logger.debug("Using in-memory database; nothing will be saved")
    return InMemoryDatabase()


def create_database(database_path: Optional[str] = None, demo: bool = False) -> Database:
    """Create the database a CLI session works against."""
    if demo:
        return create_memory_database()
    return create_sqlite_database(database_path)
