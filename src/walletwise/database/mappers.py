"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the services never handle
ORM instances and schema changes stay local to the database package.
"""

from decimal import Decimal

from walletwise.domain import entities as domain
from walletwise.database.models import (
    User as ORMUser,
    Transaction as ORMTransaction,
    TransactionActivity as ORMTransactionActivity,
)


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        name=orm_user.name,
        wallet_balance=Decimal(orm_user.wallet_balance or 0),
        created_at=orm_user.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    interval = orm_transaction.recurring_interval
    return domain.Transaction(
        id=orm_transaction.id,
        user_id=orm_transaction.user_id,
        type=domain.TransactionType(orm_transaction.type),
        amount=Decimal(orm_transaction.amount),
        category=orm_transaction.category,
        date=orm_transaction.date,
        description=orm_transaction.description or "",
        payment_method=orm_transaction.payment_method,
        mood=orm_transaction.mood,
        is_recurring=bool(orm_transaction.is_recurring),
        recurring_interval=domain.RecurringInterval(interval) if interval is not None else None,
        next_execution_date=orm_transaction.next_execution_date,
        created_at=orm_transaction.created_at,
    )


def activity_to_domain(orm_activity: ORMTransactionActivity) -> domain.ActivityRecord:
    """Convert SQLAlchemy TransactionActivity model to domain ActivityRecord entity."""
    return domain.ActivityRecord(
        id=orm_activity.id,
        user_id=orm_activity.user_id,
        transaction_id=orm_activity.transaction_id,
        action=domain.ActivityAction(orm_activity.action),
        changes=dict(orm_activity.changes or {}),
        timestamp=orm_activity.timestamp,
    )
