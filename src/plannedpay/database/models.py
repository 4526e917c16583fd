"""SQLAlchemy models for plannedpay database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    JSON,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Account(Base):
    """Money account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    account_type = Column(String, default="general", nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_account_user_name"),)


class Category(Base):
    """Category model with optional parent."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    parent_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    parent = relationship("Category", remote_side=[id], backref="children")


class PlannedPayment(Base):
    """Planned payment model."""

    __tablename__ = "planned_payments"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True)
    destination_account_id = Column(
        Integer, ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True
    )
    payee = Column(String, nullable=True)
    payment_method = Column(String, nullable=True)
    note = Column(String, nullable=True)
    frequency = Column(String, nullable=False)
    # One-time
    scheduled_date = Column(Date, nullable=True)
    # Recurrent
    start_date = Column(Date, nullable=True)
    recurrence_type = Column(String, nullable=True)
    weekly_days = Column(JSON, nullable=True)  # 0=Sun .. 6=Sat
    monthly_interval = Column(Integer, default=1, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_executed_at = Column(DateTime, nullable=True)
    next_execution_date = Column(Date, nullable=True, index=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="planned_payment")


class Transaction(Base):
    """Ledger transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=True)
    type = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    transaction_date = Column(Date, nullable=False)
    source_account_id = Column(Integer, ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True)
    destination_account_id = Column(
        Integer, ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True
    )
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    payee = Column(String, nullable=True)
    payment_method = Column(String, nullable=True)
    note = Column(String, nullable=True)
    status = Column(String, default="uncleared", nullable=False)
    planned_payment_id = Column(
        Integer, ForeignKey("planned_payments.id", ondelete="SET NULL"), nullable=True
    )
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    planned_payment = relationship("PlannedPayment", back_populates="transactions")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
