"""Transaction domain service.

Every mutation keeps the user's stored ``wallet_balance`` in step with the
transaction history: the operation's effect is computed as one signed
delta, checked by the BalanceLedger against the balance read just before,
and applied by atomic increment after the transaction write.

The check and the increment are separate store round trips. Two writers
for the same user can both pass a strict-mode check against the same
stale balance; the increments still add up correctly, but the combined
result may end below zero. ``reconcile_balance`` repairs drift left by a
failed write between the two steps.
"""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional

import structlog

from walletwise.database.base import Database
from walletwise.domain.activity import ActivityRecorder
from walletwise.domain.entities import (
    ActivityAction,
    ActivityRecord,
    LedgerDecision,
    MutationResult,
    RecurringRun,
    SortOrder,
    Transaction as TransactionEntity,
    TransactionPage,
    TransactionType,
    User,
)
from walletwise.domain.errors import (
    InsufficientBalanceError,
    NotFoundError,
    ValidationError,
    insufficient_balance,
    not_recurring,
    transaction_not_found,
    user_not_found,
)
from walletwise.domain.ledger import (
    ZERO,
    BalanceLedger,
    add_delta,
    delete_delta,
    replay_balance,
    update_delta,
)
from walletwise.domain.snapshot import snapshot_fields, transaction_to_snapshot
from walletwise.domain.validation import (
    MAX_ROW_INT,
    validate_transaction_id,
    validate_transaction_input,
)
from walletwise.utils.date_parser import parse_date
from walletwise.utils.recurrence import advance_date

logger = structlog.get_logger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


def merge_changes(existing: TransactionEntity, changes: Mapping[str, Any]) -> TransactionEntity:
    """Return the fully populated state of ``existing`` after a partial update.

    Fields absent from ``changes`` keep their stored values.
    """
    return replace(existing, **changes)


def schedule_for(transaction: TransactionEntity) -> Optional[date]:
    """Next execution date for a freshly (re)scheduled transaction."""
    if transaction.is_recurring and transaction.recurring_interval is not None:
        return advance_date(transaction.date, transaction.recurring_interval)
    return None


def _positive_int(value: Any, default: int, maximum: int = MAX_ROW_INT) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if 0 < number <= maximum else default


class TransactionService:
    """Service for balance-consistent transaction mutations."""

    def __init__(
        self,
        db: Database,
        ledger: Optional[BalanceLedger] = None,
        recorder: Optional[ActivityRecorder] = None,
    ):
        """Initialize transaction service.

        Args:
            db: Database instance
            ledger: Balance ledger carrying the overdraft policy (non-strict if None)
            recorder: Activity recorder (one writing to ``db`` if None)
        """
        self.db = db
        self.ledger = ledger if ledger is not None else BalanceLedger(strict=False)
        self.recorder = recorder if recorder is not None else ActivityRecorder(db)

    # Helpers
    def _require_user(self, user_id: int) -> User:
        user = self.db.get_user(user_id)
        if user is None:
            raise NotFoundError(user_not_found(user_id))
        return user

    def _require_transaction(self, user_id: int, transaction_id: int) -> TransactionEntity:
        txn = self.db.get_transaction(transaction_id, user_id=user_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def _decide(self, user: User, delta: Decimal) -> LedgerDecision:
        decision = self.ledger.apply_delta(user.wallet_balance, delta)
        if not decision.accepted:
            raise InsufficientBalanceError(insufficient_balance(user.wallet_balance, delta))
        return decision

    def _apply_balance(self, user_id: int, transaction_id: int, delta: Decimal) -> Decimal:
        """Increment the stored balance and return the balance as now persisted."""
        try:
            self.db.increment_wallet_balance(user_id, delta)
        except Exception:
            logger.error(
                "balance_write_failed",
                user_id=user_id,
                transaction_id=transaction_id,
                delta=str(delta),
                reconciliation_required=True,
                exc_info=True,
            )
            raise
        return self._require_user(user_id).wallet_balance

    def _post(
        self,
        user_id: int,
        values: dict[str, Any],
        next_execution_date: Optional[date] = None,
    ) -> tuple[TransactionEntity, Decimal, bool]:
        """Check, write and apply a new transaction built from validated values."""
        user = self._require_user(user_id)
        delta = add_delta(values["type"], values["amount"])
        decision = self._decide(user, delta)

        values = dict(values)
        txn_date = values.pop("date", None) or date.today()
        if next_execution_date is None and values["is_recurring"] and values["recurring_interval"]:
            next_execution_date = advance_date(txn_date, values["recurring_interval"])

        transaction_id = self.db.create_transaction(
            user_id=user_id,
            date=txn_date,
            next_execution_date=next_execution_date,
            **values,
        )
        balance = self._apply_balance(user_id, transaction_id, delta)
        transaction = self._require_transaction(user_id, transaction_id)
        return transaction, balance, decision.warning

    # Mutations
    def add_transaction(
        self,
        user_id: int,
        type: Optional[str] = None,
        amount: Any = None,
        category: Optional[str] = None,
        description: Optional[str] = None,
        payment_method: Optional[str] = None,
        mood: Optional[str] = None,
        date: Any = None,
        is_recurring: Optional[bool] = None,
        recurring_interval: Optional[str] = None,
    ) -> MutationResult:
        """Create a transaction and apply it to the wallet balance.

        Args:
            user_id: Acting user
            type: "income" or "expense"
            amount: Positive amount (number or numeric string)
            category: Category name, stored lower case
            description: Optional description
            payment_method: Optional payment method (defaults to "cash")
            mood: Optional mood tag (defaults to "neutral")
            date: Optional transaction date (defaults to today)
            is_recurring: Whether the transaction repeats
            recurring_interval: "daily", "weekly" or "monthly"

        Returns:
            MutationResult with the created transaction, the new balance and
            a warning flag set when the balance went negative (non-strict mode)

        Raises:
            ValidationError: If input is invalid
            NotFoundError: If the user doesn't exist
            InsufficientBalanceError: If strict mode rejects the overdraft
        """
        raw = {
            "type": type,
            "amount": amount,
            "category": category,
            "description": description,
            "payment_method": payment_method,
            "mood": mood,
            "date": date,
            "is_recurring": is_recurring,
            "recurring_interval": recurring_interval,
        }
        values = validate_transaction_input({k: v for k, v in raw.items() if v is not None})

        transaction, balance, warning = self._post(user_id, values)
        logger.info(
            "transaction_added",
            user_id=user_id,
            transaction_id=transaction.id,
            type=transaction.type.value,
            amount=str(transaction.amount),
        )
        return MutationResult(transaction=transaction, balance=balance, warning=warning)

    def update_transaction(
        self, user_id: int, transaction_id: Any, /, **changes: Any
    ) -> MutationResult:
        """Apply a partial update and rebalance the wallet.

        The old transaction's effect is reversed and the new one applied.

        Raises:
            ValidationError: If the ID or any supplied field is invalid
            NotFoundError: If the transaction doesn't exist or isn't the user's
            InsufficientBalanceError: If strict mode rejects the overdraft
        """
        transaction_id = validate_transaction_id(transaction_id)
        values = validate_transaction_input(changes, partial=True)

        existing = self._require_transaction(user_id, transaction_id)
        user = self._require_user(user_id)

        updated = merge_changes(existing, values)
        delta = update_delta(existing, updated)
        decision = self._decide(user, delta)

        fields = dict(values)
        if {"is_recurring", "recurring_interval"} & set(values):
            fields["next_execution_date"] = schedule_for(updated)
        self.db.update_transaction(transaction_id, fields)

        balance = user.wallet_balance
        if delta != ZERO:
            balance = self._apply_balance(user_id, transaction_id, delta)

        self.recorder.record(user_id, transaction_id, ActivityAction.UPDATED, values)
        logger.info("transaction_updated", user_id=user_id, transaction_id=transaction_id, delta=str(delta))
        return MutationResult(
            transaction=self._require_transaction(user_id, transaction_id),
            balance=balance,
            warning=decision.warning,
        )

    def delete_transaction(self, user_id: int, transaction_id: Any) -> TransactionEntity:
        """Delete a transaction and reverse its effect on the balance.

        Returns:
            Snapshot of the deleted transaction, suitable for undo_transaction

        Raises:
            ValidationError: If the ID is malformed
            NotFoundError: If the transaction doesn't exist, isn't the user's,
                or was deleted concurrently
        """
        transaction_id = validate_transaction_id(transaction_id)
        deleted = self.db.delete_transaction(transaction_id, user_id=user_id)
        if deleted is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        delta = delete_delta(deleted.type, deleted.amount)
        self._apply_balance(user_id, transaction_id, delta)

        self.recorder.record(
            user_id, transaction_id, ActivityAction.DELETED, transaction_to_snapshot(deleted)
        )
        logger.info("transaction_deleted", user_id=user_id, transaction_id=transaction_id, delta=str(delta))
        return deleted

    def undo_transaction(self, user_id: int, snapshot: TransactionEntity | Mapping[str, Any]) -> MutationResult:
        """Restore a deleted transaction from its snapshot.

        The restored transaction is a new record with a new ID.

        Raises:
            ValidationError: If the snapshot is malformed
            NotFoundError: If the snapshot belongs to another user
            InsufficientBalanceError: If strict mode rejects restoring an expense
        """
        fields, owner, next_execution_date = snapshot_fields(snapshot)
        if owner is not None and owner != user_id:
            raise NotFoundError(f"Transaction snapshot does not belong to user {user_id}")
        values = validate_transaction_input(fields)
        original_id = snapshot.id if isinstance(snapshot, TransactionEntity) else snapshot.get("id")

        transaction, balance, warning = self._post(user_id, values, next_execution_date)

        self.recorder.record(
            user_id, transaction.id, ActivityAction.RESTORED, {"restored_from": original_id}
        )
        logger.info(
            "transaction_restored",
            user_id=user_id,
            transaction_id=transaction.id,
            restored_from=original_id,
        )
        return MutationResult(transaction=transaction, balance=balance, warning=warning)

    def skip_next_occurrence(self, user_id: int, transaction_id: Any) -> date:
        """Advance a recurring transaction's next execution date by one interval.

        Returns:
            The new next execution date

        Raises:
            ValidationError: If the ID is malformed or the transaction isn't
                recurring with a scheduled date
            NotFoundError: If the transaction doesn't exist or isn't the user's
        """
        transaction_id = validate_transaction_id(transaction_id)
        txn = self._require_transaction(user_id, transaction_id)
        if not txn.is_recurring or txn.next_execution_date is None or txn.recurring_interval is None:
            raise ValidationError(not_recurring(transaction_id))

        next_date = advance_date(txn.next_execution_date, txn.recurring_interval)
        self.db.update_transaction(transaction_id, {"next_execution_date": next_date})
        return next_date

    def process_recurring(self, user_id: int, as_of: Optional[date] = None) -> RecurringRun:
        """Post every due occurrence of the user's recurring transactions.

        Each occurrence is a plain (non-recurring) transaction going through
        the same ledger check as add_transaction. An occurrence rejected in
        strict mode stays due and its template is reported as rejected.
        """
        as_of = as_of or date.today()
        run = RecurringRun()
        for template in self.db.list_due_recurring(user_id, as_of):
            next_date = template.next_execution_date
            while next_date is not None and next_date <= as_of:
                values = validate_transaction_input(
                    {
                        "type": template.type,
                        "amount": template.amount,
                        "category": template.category,
                        "description": template.description,
                        "payment_method": template.payment_method,
                        "mood": template.mood,
                        "date": next_date,
                    }
                )
                try:
                    occurrence, _, _ = self._post(user_id, values)
                except InsufficientBalanceError:
                    logger.warning(
                        "recurring_occurrence_rejected",
                        user_id=user_id,
                        transaction_id=template.id,
                        due=next_date.isoformat(),
                    )
                    run.rejected.append(template)
                    break
                run.posted.append(occurrence)
                next_date = advance_date(next_date, template.recurring_interval)
                self.db.update_transaction(template.id, {"next_execution_date": next_date})
        return run

    def reconcile_balance(self, user_id: int) -> Decimal:
        """Recompute the stored balance by full replay and correct any drift.

        Returns:
            The replayed balance, now stored on the user
        """
        user = self._require_user(user_id)
        expected = replay_balance(self.db.list_transactions(user_id))
        if user.wallet_balance != expected:
            logger.warning(
                "balance_drift_corrected",
                user_id=user_id,
                stored=str(user.wallet_balance),
                expected=str(expected),
            )
            self.db.set_wallet_balance(user_id, expected)
        return expected

    # Queries
    def get_transaction(self, user_id: int, transaction_id: Any) -> Optional[TransactionEntity]:
        """Get one of the user's transactions by ID.

        Returns:
            Transaction entity or None if not found or not the user's
        """
        transaction_id = validate_transaction_id(transaction_id)
        return self.db.get_transaction(transaction_id, user_id=user_id)

    def list_transactions(
        self,
        user_id: int,
        type: Optional[str] = None,
        start_date: Any = None,
        end_date: Any = None,
        search: Optional[str] = None,
        page: Any = DEFAULT_PAGE,
        limit: Any = DEFAULT_LIMIT,
        sort: Optional[str] = None,
    ) -> TransactionPage:
        """List one page of a user's transactions.

        Unrecognized filter values fall back to "all": an unknown type or
        an unparseable date is ignored, an unknown sort means newest first,
        and a page or limit that is not positive, or too large to page
        through, uses the default.
        """
        try:
            type_filter = TransactionType(type) if type else None
        except ValueError:
            type_filter = None
        try:
            sort_order = SortOrder(sort) if sort else SortOrder.NEWEST
        except ValueError:
            sort_order = SortOrder.NEWEST

        def _date_or_none(value: Any) -> Optional[date]:
            if value is None or value == "":
                return None
            try:
                return parse_date(value)
            except ValueError:
                return None

        filters = {
            "type": type_filter,
            "start_date": _date_or_none(start_date),
            "end_date": _date_or_none(end_date),
            "search": search.strip() if isinstance(search, str) and search.strip() else None,
        }
        limit_num = _positive_int(limit, DEFAULT_LIMIT)
        page_num = _positive_int(page, DEFAULT_PAGE, maximum=MAX_ROW_INT // limit_num)

        transactions = self.db.list_transactions(
            user_id,
            sort=sort_order,
            offset=(page_num - 1) * limit_num,
            limit=limit_num,
            **filters,
        )
        total = self.db.count_transactions(user_id, **filters)
        return TransactionPage(transactions=transactions, total=total, page=page_num, limit=limit_num)

    def get_transaction_activity(self, user_id: int, transaction_id: Any) -> list[ActivityRecord]:
        """Get the activity trail of a transaction, newest first.

        Works for deleted transactions as well, since the trail outlives them.

        Raises:
            ValidationError: If the ID is malformed
        """
        transaction_id = validate_transaction_id(transaction_id)
        return self.recorder.list_activity(user_id, transaction_id)
