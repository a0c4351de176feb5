"""Balance ledger: signed deltas and the overdraft policy.

Income contributes ``+amount`` to the wallet balance and expense
contributes ``-amount``. Every mutation path expresses its effect as a
single delta that is applied to the stored balance by atomic increment.
"""

from decimal import Decimal
from typing import Iterable

import structlog

from walletwise.domain.entities import LedgerDecision, Transaction, TransactionType

logger = structlog.get_logger(__name__)

ZERO = Decimal("0")


def signed_amount(type: TransactionType, amount: Decimal) -> Decimal:
    """Return the contribution of a transaction to the wallet balance."""
    if TransactionType(type) is TransactionType.INCOME:
        return amount
    return -amount


def add_delta(type: TransactionType, amount: Decimal) -> Decimal:
    """Delta for creating (or restoring) a transaction."""
    return signed_amount(type, amount)


def delete_delta(type: TransactionType, amount: Decimal) -> Decimal:
    """Delta that reverses the original contribution of a transaction."""
    return -signed_amount(type, amount)


def update_delta(old: Transaction, new: Transaction) -> Decimal:
    """Delta for replacing ``old`` by ``new``.

    The old effect is always fully reversed and the new one applied, even
    when only one of type or amount changed.
    """
    return delete_delta(old.type, old.amount) + add_delta(new.type, new.amount)


def replay_balance(transactions: Iterable[Transaction]) -> Decimal:
    """Recompute a balance from scratch over a transaction history."""
    return sum((signed_amount(txn.type, txn.amount) for txn in transactions), ZERO)


class BalanceLedger:
    """Decides whether a balance delta may be applied."""

    def __init__(self, strict: bool = False):
        """Initialize ledger.

        Args:
            strict: If True, reject any delta that would make the balance
                negative. If False, accept it and flag a warning.
        """
        self.strict = strict

    def apply_delta(self, current_balance: Decimal, delta: Decimal) -> LedgerDecision:
        """Project ``current_balance + delta`` and apply the overdraft policy.

        In strict mode any projection below zero is rejected, whatever the
        sign of the delta. Callers that must never be blocked (Delete) do not
        consult the ledger at all.
        """
        projected = current_balance + delta
        if projected >= ZERO:
            return LedgerDecision(accepted=True, new_balance=projected)

        if self.strict:
            logger.info(
                "overdraft_rejected",
                balance=str(current_balance),
                delta=str(delta),
            )
            return LedgerDecision(accepted=False, new_balance=current_balance)

        logger.warning(
            "balance_negative",
            balance=str(current_balance),
            delta=str(delta),
            projected=str(projected),
        )
        return LedgerDecision(accepted=True, new_balance=projected, warning=True)
