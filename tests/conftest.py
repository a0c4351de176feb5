"""Shared pytest fixtures for walletwise tests."""

import tempfile
import os
from decimal import Decimal
import pytest
import structlog

from walletwise.database.factories import create_sqlite_database
from walletwise.domain.activity import ActivityRecorder
from walletwise.domain.ledger import BalanceLedger
from walletwise.domain.transaction import TransactionService
from walletwise.domain.user import UserService


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any logging configuration done by CLI invocations."""
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def clear_strict_env(monkeypatch):
    """Keep the developer's environment from changing the overdraft mode."""
    monkeypatch.delenv("WALLETWISE_STRICT_BALANCE", raising=False)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def user_service(temp_db):
    """Create a UserService with a temporary database."""
    return UserService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a non-strict TransactionService with a temporary database."""
    return TransactionService(temp_db, ledger=BalanceLedger(strict=False), recorder=ActivityRecorder(temp_db))


@pytest.fixture
def strict_service(temp_db):
    """Create a strict-mode TransactionService with a temporary database."""
    return TransactionService(temp_db, ledger=BalanceLedger(strict=True), recorder=ActivityRecorder(temp_db))


@pytest.fixture
def sample_user(user_service):
    """Create a sample user with an empty wallet."""
    user_id = user_service.create_user(name="alice")
    return user_service.get_user(user_id)


@pytest.fixture
def other_user(user_service):
    """Create a second user for ownership checks."""
    user_id = user_service.create_user(name="bob")
    return user_service.get_user(user_id)


@pytest.fixture
def balance_of(temp_db):
    """Return a helper reading a user's stored balance."""

    def _balance(user_id: int) -> Decimal:
        return temp_db.get_user(user_id).wallet_balance

    return _balance


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
