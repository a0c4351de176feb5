"""Serialization of deleted-transaction snapshots.

Delete returns a snapshot of the removed transaction; Undo accepts the
same snapshot back, either as a Transaction entity or as the plain mapping
produced here (e.g. after a JSON round trip through the CLI).
"""

from dataclasses import asdict
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional

from walletwise.domain.entities import Transaction
from walletwise.domain.errors import ValidationError
from walletwise.domain.validation import TRANSACTION_FIELDS, validate_date

# Identity fields are carried for display but never reused on restore
IDENTITY_FIELDS = ("id", "user_id", "created_at")
SCHEDULE_FIELDS = ("next_execution_date",)


def jsonable(values: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    """Convert enum, Decimal and date values into plain JSON-compatible ones."""
    result: dict[str, Any] = {}
    for name, value in (values or {}).items():
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, Decimal):
            value = str(value)
        elif isinstance(value, (date, datetime)):
            value = value.isoformat()
        result[name] = value
    return result


def transaction_to_snapshot(transaction: Transaction) -> dict[str, Any]:
    """Return a JSON-compatible mapping of a transaction."""
    return jsonable(asdict(transaction))


def snapshot_fields(
    snapshot: Transaction | Mapping[str, Any],
) -> tuple[dict[str, Any], Optional[int], Optional[Any]]:
    """Split a snapshot into restorable fields, its owner and its schedule.

    Returns:
        Tuple of (raw transaction fields, snapshot user_id or None,
        parsed next_execution_date or None)

    Raises:
        ValidationError: If the snapshot is not a mapping or entity, or
            carries fields that are not part of a transaction
    """
    if isinstance(snapshot, Transaction):
        data = asdict(snapshot)
    elif isinstance(snapshot, Mapping):
        data = dict(snapshot)
    else:
        raise ValidationError("Snapshot must be a transaction or a mapping of its fields")

    allowed = set(TRANSACTION_FIELDS) | set(IDENTITY_FIELDS) | set(SCHEDULE_FIELDS)
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ValidationError(f"Unknown snapshot field(s): {', '.join(unknown)}")

    owner = data.get("user_id")
    if owner is not None and (isinstance(owner, bool) or not isinstance(owner, int)):
        raise ValidationError(f"Invalid snapshot user_id: {owner!r}")

    next_date = data.get("next_execution_date")
    if next_date is not None:
        next_date = validate_date(next_date)

    fields = {name: data[name] for name in TRANSACTION_FIELDS if name in data}
    return fields, owner, next_date
