"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist or belongs to another user."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class InsufficientBalanceError(DomainError):
    """Strict mode rejected an operation that would overdraw the wallet."""


def user_not_found(user_id: int) -> str:
    """Return message for missing user."""
    return f"User {user_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing or foreign transaction."""
    return f"Transaction {transaction_id} not found"


def invalid_transaction_id(value: object) -> str:
    """Return message for a malformed transaction ID."""
    return f"Invalid transaction ID: {value!r}"


def duplicate_user_name(name: str) -> str:
    """Return message for duplicate user name."""
    return f"User with name '{name}' already exists"


def insufficient_balance(balance, delta) -> str:
    """Return message when strict mode blocks an overdraft."""
    return (
        f"Insufficient wallet balance: balance {balance:,.2f}, "
        f"change {delta:,.2f} would leave {balance + delta:,.2f}"
    )


def not_recurring(transaction_id: int) -> str:
    """Return message when skipping a non-recurring transaction."""
    return f"Transaction {transaction_id} is not recurring or has no scheduled next date"
