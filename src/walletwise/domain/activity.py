"""Transaction activity recorder.

Appends one audit record per mutation after the transaction and balance
writes have committed. Recording is best-effort: a failing audit write is
logged and swallowed so it can never fail or roll back the mutation that
triggered it.
"""

from typing import Any, Mapping, Optional

import structlog

from walletwise.database.base import Database
from walletwise.domain.entities import ActivityAction, ActivityRecord
from walletwise.domain.snapshot import jsonable


class ActivityRecorder:
    """Best-effort audit sink for transaction mutations."""

    def __init__(self, db: Database):
        """Initialize activity recorder.

        Args:
            db: Database instance
        """
        self.db = db
        self._logger = structlog.get_logger(__name__)

    def record(
        self,
        user_id: int,
        transaction_id: int,
        action: ActivityAction,
        changes: Optional[Mapping[str, Any]] = None,
    ) -> bool:
        """Append an activity record.

        Returns:
            True if the record was stored, False if the store write failed
        """
        action = ActivityAction(action)
        try:
            self.db.create_activity(
                user_id=user_id,
                transaction_id=transaction_id,
                action=action,
                changes=jsonable(changes),
            )
        except Exception as e:
            self._logger.error(
                "activity_record_failed",
                user_id=user_id,
                transaction_id=transaction_id,
                action=action.value,
                error=str(e),
            )
            return False

        self._logger.debug(
            "activity_recorded",
            user_id=user_id,
            transaction_id=transaction_id,
            action=action.value,
        )
        return True

    def list_activity(self, user_id: int, transaction_id: int) -> list[ActivityRecord]:
        """List activity records for a user's transaction, newest first."""
        return self.db.list_activity(user_id=user_id, transaction_id=transaction_id)
