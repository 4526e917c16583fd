"""Shared pytest fixtures for plannedpay tests."""

import logging
import tempfile
import os
from datetime import date, datetime, timedelta
from decimal import Decimal
import pytest

from plannedpay.database.factories import create_sqlite_database, create_memory_database
from plannedpay.database.memory import InMemoryDatabase
from plannedpay.domain.account import AccountService
from plannedpay.domain.category import CategoryService
from plannedpay.domain.planned_payment import PlannedPaymentService
from plannedpay.domain.transaction import TransactionService
from plannedpay.domain.errors import StoreError

USER_ID = "user-1"


class FakeClock:
    """Controllable replacement for datetime.now."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FlakyDatabase(InMemoryDatabase):
    """In-memory database whose named operations can be made to fail."""

    def __init__(self):
        super().__init__()
        self.failing: set[str] = set()

    def _check(self, operation: str) -> None:
        if operation in self.failing:
            raise StoreError(f"{operation} is unavailable")

    def list_planned_payments(self, user_id):
        self._check("load")
        return super().list_planned_payments(user_id)

    def insert_planned_payment(self, payment):
        self._check("insert")
        return super().insert_planned_payment(payment)

    def update_planned_payment(self, payment_id, changes):
        self._check("update")
        return super().update_planned_payment(payment_id, changes)

    def delete_planned_payment(self, payment_id):
        self._check("delete")
        return super().delete_planned_payment(payment_id)

    def create_transaction(self, record):
        self._check("transaction")
        return super().create_transaction(record)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def memory_db():
    """Create an in-memory database for testing."""
    return create_memory_database()


@pytest.fixture(params=["sqlite", "memory"])
def any_db(request):
    """Run a test against every database implementation."""
    if request.param == "memory":
        return create_memory_database()
    return request.getfixturevalue("temp_db")


@pytest.fixture
def user_id():
    """User that owns the test data."""
    return USER_ID


@pytest.fixture
def clock():
    """Clock fixed at 2024-01-05 09:00."""
    return FakeClock(datetime(2024, 1, 5, 9, 0))


@pytest.fixture
def flaky_db():
    """Create an in-memory database with switchable failures."""
    return FlakyDatabase()


@pytest.fixture
def planned_service(memory_db, clock):
    """Create a PlannedPaymentService over an in-memory database."""
    return PlannedPaymentService(memory_db, clock=clock)


@pytest.fixture
def transaction_service(memory_db):
    """Create a TransactionService over an in-memory database."""
    return TransactionService(memory_db)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def sample_account(account_service):
    """Create a sample account for testing."""
    account_id = account_service.create_account(user_id=USER_ID, name="Checking")
    return account_service.get_account(account_id)


@pytest.fixture
def payment_factory(planned_service, user_id):
    """Add planned payments with sensible defaults."""

    def create(**overrides):
        fields = {
            "user_id": user_id,
            "name": "Rent",
            "type": "expense",
            "amount": Decimal("21000"),
            "frequency": "recurrent",
            "account_id": 1,
            "start_date": date(2024, 1, 1),
            "recurrence_type": "monthly",
        }
        fields.update(overrides)
        return planned_service.add_planned_payment(**fields)

    return create


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers that setup_logging attached during a test."""
    yield
    logger = logging.getLogger("plannedpay")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
