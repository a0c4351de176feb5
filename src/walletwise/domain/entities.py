"""Domain model entities for walletwise.

These are pure data classes representing business concepts, independent of
database schema. Services and the ledger only ever see these types; the
SQLAlchemy models stay behind the database layer.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class TransactionType(str, Enum):
    """Direction of a transaction relative to the wallet."""

    INCOME = "income"
    EXPENSE = "expense"


class RecurringInterval(str, Enum):
    """How often a recurring transaction repeats."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class ActivityAction(str, Enum):
    """Kinds of mutation recorded in the activity trail."""

    CREATED = "CREATED"
    UPDATED = "UPDATED"
    DELETED = "DELETED"
    RESTORED = "RESTORED"


class SortOrder(str, Enum):
    """Supported orderings for transaction listings."""

    NEWEST = "newest"
    OLDEST = "oldest"
    AMOUNT_HIGH = "amount-high"
    AMOUNT_LOW = "amount-low"


@dataclass(frozen=True)
class User:
    """Wallet owner domain entity."""

    id: int
    name: str
    wallet_balance: Decimal
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    user_id: int
    type: TransactionType
    amount: Decimal
    category: str
    date: date
    description: str = ""
    payment_method: str = "cash"
    mood: str = "neutral"
    is_recurring: bool = False
    recurring_interval: Optional[RecurringInterval] = None
    next_execution_date: Optional[date] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class ActivityRecord:
    """Immutable audit entry describing a mutation to a transaction."""

    id: int
    user_id: int
    transaction_id: int
    action: ActivityAction
    changes: dict[str, Any]
    timestamp: datetime


@dataclass(frozen=True)
class LedgerDecision:
    """Outcome of applying a balance delta.

    ``new_balance`` is the projected balance when accepted and the current
    balance when rejected.
    """

    accepted: bool
    new_balance: Decimal
    warning: bool = False


@dataclass(frozen=True)
class MutationResult:
    """Result of a balance-affecting transaction operation."""

    transaction: Transaction
    balance: Decimal
    warning: bool = False


@dataclass(frozen=True)
class TransactionPage:
    """One page of a filtered transaction listing."""

    transactions: list[Transaction]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        if self.limit <= 0:
            return 0
        return -(-self.total // self.limit)


@dataclass
class RecurringRun:
    """Summary of a recurring-transaction processing pass."""

    posted: list[Transaction] = field(default_factory=list)
    rejected: list[Transaction] = field(default_factory=list)
