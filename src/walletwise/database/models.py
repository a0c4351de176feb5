"""SQLAlchemy models for walletwise database."""

from datetime import datetime, date, UTC
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

from walletwise.domain.entities import ActivityAction, RecurringInterval, TransactionType

Base = declarative_base()


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class User(Base):
    """Wallet owner model. ``wallet_balance`` is a denormalized running total."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    wallet_balance = Column(Numeric(12, 2), default=0, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="user")


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"
    # Ids are never reused, so a restored transaction always gets a fresh one
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(
        Enum(TransactionType, values_callable=_enum_values, name="transaction_type"),
        nullable=False,
    )
    amount = Column(Numeric(10, 2), nullable=False)
    category = Column(String, nullable=False)
    description = Column(String, default="", nullable=False)
    payment_method = Column(String, default="cash", nullable=False)
    mood = Column(String, default="neutral", nullable=False)
    date = Column(Date, default=date.today, nullable=False)
    is_recurring = Column(Boolean, default=False, nullable=False)
    recurring_interval = Column(
        Enum(RecurringInterval, values_callable=_enum_values, name="recurring_interval"),
        nullable=True,
    )
    next_execution_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    user = relationship("User", back_populates="transactions")


class TransactionActivity(Base):
    """Append-only audit record for transaction mutations.

    ``transaction_id`` is not a foreign key; records of deleted
    transactions outlive them.
    """

    __tablename__ = "transaction_activities"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    transaction_id = Column(Integer, nullable=False, index=True)
    action = Column(
        Enum(ActivityAction, values_callable=_enum_values, name="activity_action"),
        nullable=False,
    )
    changes = Column(JSON, default=dict, nullable=False)
    timestamp = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
