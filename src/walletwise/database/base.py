"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from walletwise.domain.entities import (
    ActivityAction,
    ActivityRecord,
    RecurringInterval,
    SortOrder,
    Transaction,
    TransactionType,
    User,
)


class Database(ABC):
    """Abstract database interface for walletwise.

    Every write commits on its own; there is no multi-record transaction
    spanning a transaction write and the balance increment that follows it.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # User operations
    @abstractmethod
    def create_user(self, name: str) -> int:
        """Create a user with a zero balance. Returns user ID."""
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID, reading the balance as currently persisted."""
        pass

    @abstractmethod
    def get_user_by_name(self, name: str) -> Optional[User]:
        """Get user by name."""
        pass

    @abstractmethod
    def list_users(self) -> list[User]:
        """List all users."""
        pass

    @abstractmethod
    def increment_wallet_balance(self, user_id: int, delta: Decimal) -> None:
        """Atomically add ``delta`` to the user's stored balance."""
        pass

    @abstractmethod
    def set_wallet_balance(self, user_id: int, balance: Decimal) -> None:
        """Overwrite the user's stored balance (reconciliation only)."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        user_id: int,
        type: TransactionType,
        amount: Decimal,
        category: str,
        date: Optional[date] = None,
        description: str = "",
        payment_method: str = "cash",
        mood: str = "neutral",
        is_recurring: bool = False,
        recurring_interval: Optional[RecurringInterval] = None,
        next_execution_date: Optional[date] = None,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int, user_id: Optional[int] = None) -> Optional[Transaction]:
        """Get transaction by ID, restricted to ``user_id`` when given."""
        pass

    @abstractmethod
    def update_transaction(self, transaction_id: int, fields: dict[str, Any]) -> None:
        """Overwrite the given transaction fields."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int, user_id: int) -> Optional[Transaction]:
        """Delete a user's transaction and return its snapshot.

        Returns None when nothing was deleted, including when a concurrent
        call removed the same row first.
        """
        pass

    @abstractmethod
    def list_transactions(
        self,
        user_id: int,
        type: Optional[TransactionType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        search: Optional[str] = None,
        sort: SortOrder = SortOrder.NEWEST,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> list[Transaction]:
        """List a user's transactions with optional filters.

        Args:
            user_id: Owner of the transactions
            type: Optional type filter
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
            search: Optional case-insensitive text matched against description and category
            sort: Result ordering
            offset: Number of rows to skip
            limit: Maximum number of rows, None for all
        """
        pass

    @abstractmethod
    def count_transactions(
        self,
        user_id: int,
        type: Optional[TransactionType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        search: Optional[str] = None,
    ) -> int:
        """Count a user's transactions matching the same filters as list_transactions."""
        pass

    @abstractmethod
    def list_due_recurring(self, user_id: int, as_of: date) -> list[Transaction]:
        """List recurring transactions whose next execution date is on or before ``as_of``."""
        pass

    # Activity operations
    @abstractmethod
    def create_activity(
        self,
        user_id: int,
        transaction_id: int,
        action: ActivityAction,
        changes: dict[str, Any],
    ) -> int:
        """Append an activity record. Returns record ID."""
        pass

    @abstractmethod
    def list_activity(self, user_id: int, transaction_id: int) -> list[ActivityRecord]:
        """List activity records for a transaction, newest first."""
        pass
