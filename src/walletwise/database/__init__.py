"""Database layer for walletwise application."""

from walletwise.database.base import Database
from walletwise.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
