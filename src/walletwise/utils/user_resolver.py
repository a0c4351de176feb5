"""Utility for resolving user names to IDs."""

from walletwise.domain.user import UserService
from walletwise.domain.validation import MAX_ROW_INT


def resolve_user(user_service: UserService, user: str | int) -> int:
    """Resolve user name or ID to user ID.

    Args:
        user_service: UserService instance
        user: User name (str) or ID (int or string representation of int)

    Returns:
        User ID

    Raises:
        ValueError: If user is not found
    """
    if isinstance(user, int) or (isinstance(user, str) and user.strip().isdigit()):
        user_id = int(user)
        if user_id > MAX_ROW_INT or user_service.get_user(user_id) is None:
            raise ValueError(f"User ID {user_id} not found")
        return user_id

    for candidate in user_service.list_users():
        if candidate.name == user:
            return candidate.id

    raise ValueError(f"User '{user}' not found")
