"""User domain service."""

from decimal import Decimal
from typing import Optional
from walletwise.database.base import Database
from walletwise.domain.entities import User as UserEntity
from walletwise.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_user_name,
    user_not_found,
)


class UserService:
    """Service for managing wallet owners."""

    def __init__(self, db: Database):
        """Initialize user service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_user(self, name: str) -> int:
        """Create a new user with an empty wallet.

        Args:
            name: Unique user name

        Returns:
            User ID

        Raises:
            ValidationError: If name is empty
            ConflictError: If a user with that name already exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("User name is required")
        if self.db.get_user_by_name(name) is not None:
            raise ConflictError(duplicate_user_name(name))
        return self.db.create_user(name=name)

    def get_user(self, user_id: int) -> Optional[UserEntity]:
        """Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User entity or None if not found
        """
        return self.db.get_user(user_id)

    def require_user(self, user_id: int) -> UserEntity:
        """Get user by ID or raise NotFoundError."""
        user = self.db.get_user(user_id)
        if user is None:
            raise NotFoundError(user_not_found(user_id))
        return user

    def list_users(self) -> list[UserEntity]:
        """List all users."""
        return self.db.list_users()

    def get_balance(self, user_id: int) -> Decimal:
        """Return the user's stored wallet balance."""
        return self.require_user(user_id).wallet_balance
