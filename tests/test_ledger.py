"""Tests for balance ledger rules."""

from datetime import date
from decimal import Decimal

import pytest

from walletwise.domain.entities import Transaction, TransactionType
from walletwise.domain.ledger import (
    BalanceLedger,
    add_delta,
    delete_delta,
    replay_balance,
    signed_amount,
    update_delta,
)

INCOME = TransactionType.INCOME
EXPENSE = TransactionType.EXPENSE


def _txn(type, amount, id=1):
    return Transaction(
        id=id,
        user_id=1,
        type=type,
        amount=Decimal(amount),
        category="food",
        date=date(2024, 1, 15),
    )


class TestDeltas:
    """Tests for delta computation per operation."""

    def test_signed_amount(self):
        assert signed_amount(INCOME, Decimal("10")) == Decimal("10")
        assert signed_amount(EXPENSE, Decimal("10")) == Decimal("-10")

    def test_signed_amount_accepts_string_type(self):
        assert signed_amount("expense", Decimal("4")) == Decimal("-4")

    def test_add_delta(self):
        assert add_delta(INCOME, Decimal("200")) == Decimal("200")
        assert add_delta(EXPENSE, Decimal("100")) == Decimal("-100")

    def test_delete_delta_reverses_add(self):
        for type in (INCOME, EXPENSE):
            amount = Decimal("42.50")
            assert add_delta(type, amount) + delete_delta(type, amount) == 0

    @pytest.mark.parametrize(
        "old_type,old_amount,new_type,new_amount,expected",
        [
            (EXPENSE, "100", EXPENSE, "250", "-150"),
            (EXPENSE, "100", INCOME, "100", "200"),
            (INCOME, "50", EXPENSE, "20", "-70"),
            (INCOME, "50", INCOME, "50", "0"),
        ],
    )
    def test_update_delta_reverses_old_and_applies_new(
        self, old_type, old_amount, new_type, new_amount, expected
    ):
        old = _txn(old_type, old_amount)
        new = _txn(new_type, new_amount)
        assert update_delta(old, new) == Decimal(expected)

    def test_replay_balance(self):
        history = [_txn(INCOME, "200", 1), _txn(EXPENSE, "75.25", 2), _txn(INCOME, "0.25", 3)]
        assert replay_balance(history) == Decimal("125.00")

    def test_replay_balance_empty(self):
        assert replay_balance([]) == Decimal("0")


class TestApplyDelta:
    """Tests for the overdraft policy."""

    def test_strict_rejects_overdraft(self):
        decision = BalanceLedger(strict=True).apply_delta(Decimal("0"), Decimal("-100"))
        assert decision.accepted is False
        assert decision.new_balance == Decimal("0")
        assert decision.warning is False

    def test_strict_accepts_exact_zero(self):
        decision = BalanceLedger(strict=True).apply_delta(Decimal("100"), Decimal("-100"))
        assert decision.accepted is True
        assert decision.new_balance == Decimal("0")
        assert decision.warning is False

    def test_non_strict_accepts_with_warning(self):
        decision = BalanceLedger(strict=False).apply_delta(Decimal("10"), Decimal("-60"))
        assert decision.accepted is True
        assert decision.new_balance == Decimal("-50")
        assert decision.warning is True

    def test_strict_rejects_positive_delta_still_below_zero(self):
        decision = BalanceLedger(strict=True).apply_delta(Decimal("-80"), Decimal("30"))
        assert decision.accepted is False
        assert decision.new_balance == Decimal("-80")

    def test_strict_accepts_positive_delta_reaching_zero(self):
        decision = BalanceLedger(strict=True).apply_delta(Decimal("-80"), Decimal("80"))
        assert decision.accepted is True
        assert decision.new_balance == Decimal("0")
        assert decision.warning is False

    def test_non_strict_positive_delta_below_zero_warns(self):
        decision = BalanceLedger(strict=False).apply_delta(Decimal("-80"), Decimal("30"))
        assert decision.accepted is True
        assert decision.new_balance == Decimal("-50")
        assert decision.warning is True

    @pytest.mark.parametrize("strict", [True, False])
    def test_non_negative_result_has_no_warning(self, strict):
        decision = BalanceLedger(strict=strict).apply_delta(Decimal("200"), Decimal("-100"))
        assert decision.accepted is True
        assert decision.new_balance == Decimal("100")
        assert decision.warning is False

    def test_default_is_non_strict(self):
        assert BalanceLedger().strict is False
