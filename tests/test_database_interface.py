"""Tests for Database interface returning domain models."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from walletwise.domain import entities
from walletwise.domain.entities import ActivityAction, RecurringInterval, SortOrder, TransactionType


def _create(temp_db, user_id, **overrides):
    values = dict(
        user_id=user_id,
        type=TransactionType.EXPENSE,
        amount=Decimal("10.00"),
        category="food",
        date=date(2024, 1, 15),
    )
    values.update(overrides)
    return temp_db.create_transaction(**values)


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_user_returns_domain_model(self, temp_db):
        """Test that get_user returns a domain User entity."""
        user_id = temp_db.create_user(name="alice")

        user = temp_db.get_user(user_id)

        assert isinstance(user, entities.User)
        assert user.id == user_id
        assert user.name == "alice"
        assert user.wallet_balance == Decimal("0")
        assert isinstance(user.created_at, datetime)

    def test_get_user_by_name(self, temp_db):
        user_id = temp_db.create_user(name="alice")

        assert temp_db.get_user_by_name("alice").id == user_id
        assert temp_db.get_user_by_name("nobody") is None

    def test_get_transaction_returns_domain_model(self, temp_db, sample_user):
        """Test that get_transaction returns a domain Transaction entity."""
        txn_id = _create(
            temp_db,
            sample_user.id,
            description="Test transaction",
            is_recurring=True,
            recurring_interval=RecurringInterval.WEEKLY,
            next_execution_date=date(2024, 1, 22),
        )

        transaction = temp_db.get_transaction(txn_id)

        assert isinstance(transaction, entities.Transaction)
        assert transaction.id == txn_id
        assert transaction.user_id == sample_user.id
        assert transaction.type is TransactionType.EXPENSE
        assert transaction.amount == Decimal("10.00")
        assert transaction.date == date(2024, 1, 15)
        assert transaction.description == "Test transaction"
        assert transaction.recurring_interval is RecurringInterval.WEEKLY
        assert transaction.next_execution_date == date(2024, 1, 22)
        assert isinstance(transaction.created_at, datetime)

    def test_get_transaction_scoped_to_user(self, temp_db, sample_user, other_user):
        txn_id = _create(temp_db, sample_user.id)

        assert temp_db.get_transaction(txn_id, user_id=sample_user.id) is not None
        assert temp_db.get_transaction(txn_id, user_id=other_user.id) is None

    def test_create_transaction_defaults_date_to_today(self, temp_db, sample_user):
        txn_id = temp_db.create_transaction(
            user_id=sample_user.id, type=TransactionType.INCOME, amount=Decimal("1"), category="x"
        )
        assert temp_db.get_transaction(txn_id).date == date.today()

    def test_increment_wallet_balance(self, temp_db, sample_user):
        temp_db.increment_wallet_balance(sample_user.id, Decimal("25.50"))
        temp_db.increment_wallet_balance(sample_user.id, Decimal("-30.00"))

        assert temp_db.get_user(sample_user.id).wallet_balance == Decimal("-4.50")

    def test_balance_writes_require_existing_user(self, temp_db):
        with pytest.raises(ValueError):
            temp_db.increment_wallet_balance(999, Decimal("1"))
        with pytest.raises(ValueError):
            temp_db.set_wallet_balance(999, Decimal("1"))

    def test_failed_balance_commit_is_rolled_back(self, temp_db, sample_user, monkeypatch):
        session = temp_db._get_session()

        def fail_commit():
            raise RuntimeError("disk I/O error")

        with monkeypatch.context() as m:
            m.setattr(session, "commit", fail_commit)
            with pytest.raises(RuntimeError, match="disk I/O error"):
                temp_db.increment_wallet_balance(sample_user.id, Decimal("5"))

        # The pending increment was discarded and the session still works
        assert temp_db.get_user(sample_user.id).wallet_balance == Decimal("0")
        temp_db.increment_wallet_balance(sample_user.id, Decimal("2"))
        assert temp_db.get_user(sample_user.id).wallet_balance == Decimal("2")

    def test_failed_update_commit_is_rolled_back(self, temp_db, sample_user, monkeypatch):
        txn_id = _create(temp_db, sample_user.id)
        session = temp_db._get_session()

        def fail_commit():
            raise RuntimeError("disk I/O error")

        with monkeypatch.context() as m:
            m.setattr(session, "commit", fail_commit)
            with pytest.raises(RuntimeError):
                temp_db.update_transaction(txn_id, {"amount": Decimal("99.99")})

        assert temp_db.get_transaction(txn_id).amount == Decimal("10.00")
        temp_db.create_user(name="carol")
        assert temp_db.get_user_by_name("carol") is not None

    def test_update_transaction_fields(self, temp_db, sample_user):
        txn_id = _create(temp_db, sample_user.id)

        temp_db.update_transaction(txn_id, {"amount": Decimal("99.99"), "mood": "happy"})

        transaction = temp_db.get_transaction(txn_id)
        assert transaction.amount == Decimal("99.99")
        assert transaction.mood == "happy"

    def test_update_transaction_rejects_identity_fields(self, temp_db, sample_user, other_user):
        txn_id = _create(temp_db, sample_user.id)

        with pytest.raises(ValueError, match="cannot be updated"):
            temp_db.update_transaction(txn_id, {"user_id": other_user.id})

    def test_delete_transaction_returns_snapshot(self, temp_db, sample_user):
        txn_id = _create(temp_db, sample_user.id, description="Snack")

        snapshot = temp_db.delete_transaction(txn_id, user_id=sample_user.id)

        assert isinstance(snapshot, entities.Transaction)
        assert snapshot.id == txn_id
        assert snapshot.description == "Snack"
        assert temp_db.get_transaction(txn_id) is None
        assert temp_db.delete_transaction(txn_id, user_id=sample_user.id) is None

    def test_ids_are_not_reused_after_delete(self, temp_db, sample_user):
        first = _create(temp_db, sample_user.id)
        newest = _create(temp_db, sample_user.id)
        temp_db.delete_transaction(newest, sample_user.id)

        assert _create(temp_db, sample_user.id) > newest > first

    def test_delete_transaction_of_other_user(self, temp_db, sample_user, other_user):
        txn_id = _create(temp_db, sample_user.id)

        assert temp_db.delete_transaction(txn_id, user_id=other_user.id) is None
        assert temp_db.get_transaction(txn_id) is not None

    def test_list_and_count_transactions(self, temp_db, sample_user, other_user):
        _create(temp_db, sample_user.id, amount=Decimal("5"), date=date(2024, 1, 1))
        _create(temp_db, sample_user.id, amount=Decimal("7"), date=date(2024, 1, 3), description="a_b")
        _create(temp_db, sample_user.id, type=TransactionType.INCOME, amount=Decimal("9"), date=date(2024, 1, 2))
        _create(temp_db, other_user.id)

        transactions = temp_db.list_transactions(sample_user.id)
        assert [t.date for t in transactions] == [date(2024, 1, 3), date(2024, 1, 2), date(2024, 1, 1)]
        for transaction in transactions:
            assert isinstance(transaction, entities.Transaction)
            assert isinstance(transaction.amount, Decimal)

        assert temp_db.count_transactions(sample_user.id) == 3
        assert temp_db.count_transactions(sample_user.id, type=TransactionType.INCOME) == 1
        # Underscore is matched literally
        assert temp_db.count_transactions(sample_user.id, search="a_b") == 1
        assert temp_db.count_transactions(sample_user.id, search="a%") == 0

        cheapest = temp_db.list_transactions(sample_user.id, sort=SortOrder.AMOUNT_LOW, limit=1)
        assert [t.amount for t in cheapest] == [Decimal("5.00")]
        second = temp_db.list_transactions(sample_user.id, sort=SortOrder.OLDEST, offset=1, limit=1)
        assert [t.date for t in second] == [date(2024, 1, 2)]

    def test_list_due_recurring(self, temp_db, sample_user):
        due = _create(
            temp_db,
            sample_user.id,
            is_recurring=True,
            recurring_interval=RecurringInterval.DAILY,
            next_execution_date=date(2024, 1, 16),
        )
        _create(
            temp_db,
            sample_user.id,
            is_recurring=True,
            recurring_interval=RecurringInterval.MONTHLY,
            next_execution_date=date(2024, 2, 15),
        )
        _create(temp_db, sample_user.id)

        assert [t.id for t in temp_db.list_due_recurring(sample_user.id, date(2024, 1, 20))] == [due]

    def test_activity_round_trip(self, temp_db, sample_user):
        record_id = temp_db.create_activity(
            user_id=sample_user.id,
            transaction_id=42,
            action=ActivityAction.DELETED,
            changes={"amount": "10.00"},
        )

        records = temp_db.list_activity(sample_user.id, 42)

        assert len(records) == 1
        assert isinstance(records[0], entities.ActivityRecord)
        assert records[0].id == record_id
        assert records[0].changes == {"amount": "10.00"}
