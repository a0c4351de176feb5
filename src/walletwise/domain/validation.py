"""Input validation for transaction fields.

Raw values arrive from the CLI or from deserialized snapshots. They are
normalized here, before any store access, into the typed values the
services and the ledger work with.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Mapping, Optional

from walletwise.domain.entities import RecurringInterval, TransactionType
from walletwise.domain.errors import ValidationError, invalid_transaction_id
from walletwise.utils.amount_parser import parse_amount
from walletwise.utils.date_parser import parse_date

# SQLite stores ids and binds LIMIT and OFFSET as signed 64-bit integers
MAX_ROW_INT = 2**63 - 1

TRANSACTION_FIELDS = (
    "type",
    "amount",
    "category",
    "description",
    "payment_method",
    "mood",
    "date",
    "is_recurring",
    "recurring_interval",
)

DEFAULTS: dict[str, Any] = {
    "description": "",
    "payment_method": "cash",
    "mood": "neutral",
    "is_recurring": False,
    "recurring_interval": None,
}

REQUIRED = ("type", "amount", "category")

CENT = Decimal("0.01")
# Largest value the transactions.amount column (Numeric(10, 2)) holds
MAX_AMOUNT = Decimal("99999999.99")


def validate_amount(value: Any) -> Decimal:
    """Coerce an amount to Decimal; it must be finite and greater than 0."""
    if isinstance(value, bool):
        raise ValidationError("Amount must be a number")
    if isinstance(value, str):
        try:
            amount = parse_amount(value)
        except ValueError as e:
            raise ValidationError(str(e))
    elif isinstance(value, (int, float, Decimal)):
        amount = Decimal(str(value))
    else:
        raise ValidationError("Amount must be a number")

    if not amount.is_finite():
        raise ValidationError("Amount must be a finite number")
    if amount > MAX_AMOUNT:
        raise ValidationError(f"Amount must not exceed {MAX_AMOUNT}")
    if amount > 0:
        # Amounts are stored in cents; the balance delta must use the stored value
        amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    if amount <= 0:
        raise ValidationError("Amount must be greater than 0")
    return amount


def _enum_text(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    return str(value).strip().lower()


def validate_type(value: Any) -> TransactionType:
    try:
        return TransactionType(_enum_text(value))
    except ValueError:
        raise ValidationError(f"Type must be 'income' or 'expense', got {value!r}")


def validate_category(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Category is required")
    return value.strip().lower()


def validate_interval(value: Any) -> Optional[RecurringInterval]:
    if value is None or value == "":
        return None
    try:
        return RecurringInterval(_enum_text(value))
    except ValueError:
        raise ValidationError(
            f"Recurring interval must be one of daily, weekly, monthly, got {value!r}"
        )


def validate_date(value: Any) -> date:
    try:
        return parse_date(value)
    except ValueError as e:
        raise ValidationError(str(e))


def _validate_text(name: str, value: Any) -> str:
    if value is None:
        return DEFAULTS[name]
    if not isinstance(value, str):
        raise ValidationError(f"{name.replace('_', ' ').capitalize()} must be text")
    return value.strip()


def _validate_flag(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValidationError("is_recurring must be true or false")
    return value


_VALIDATORS = {
    "type": validate_type,
    "amount": validate_amount,
    "category": validate_category,
    "description": lambda v: _validate_text("description", v),
    "payment_method": lambda v: _validate_text("payment_method", v),
    "mood": lambda v: _validate_text("mood", v),
    "date": validate_date,
    "is_recurring": _validate_flag,
    "recurring_interval": validate_interval,
}


def validate_transaction_input(data: Mapping[str, Any], partial: bool = False) -> dict[str, Any]:
    """Validate and normalize transaction fields.

    Args:
        data: Raw field values keyed by field name
        partial: If True (updates), every field is optional and only the
            supplied ones are returned. If False, type, amount and category
            are required and defaults are filled in for optional fields.

    Returns:
        Dict of normalized values. ``date`` is only present when supplied.

    Raises:
        ValidationError: On unknown fields or invalid values
    """
    unknown = sorted(set(data) - set(TRANSACTION_FIELDS))
    if unknown:
        raise ValidationError(f"Unknown transaction field(s): {', '.join(unknown)}")

    if not partial:
        for name in REQUIRED:
            if data.get(name) is None:
                raise ValidationError(f"{name.capitalize()} is required")

    result: dict[str, Any] = {}
    for name, value in data.items():
        if partial and value is None and name != "recurring_interval":
            # Absent in a partial update means "keep the stored value"
            continue
        result[name] = _VALIDATORS[name](value)

    if not partial:
        for name, default in DEFAULTS.items():
            result.setdefault(name, default)
    return result


def validate_transaction_id(value: Any) -> int:
    """Return ``value`` as a positive integer transaction ID.

    Raises:
        ValidationError: If the ID is not a positive integer
    """
    if isinstance(value, bool):
        raise ValidationError(invalid_transaction_id(value))
    if isinstance(value, int):
        transaction_id = value
    elif isinstance(value, str) and value.strip().isdigit():
        transaction_id = int(value.strip())
    else:
        raise ValidationError(invalid_transaction_id(value))
    if not 0 < transaction_id <= MAX_ROW_INT:
        raise ValidationError(invalid_transaction_id(value))
    return transaction_id
