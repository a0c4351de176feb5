"""CLI helpers for user resolution and service wiring."""

from __future__ import annotations

import click
from walletwise.domain.activity import ActivityRecorder
from walletwise.domain.ledger import BalanceLedger
from walletwise.domain.transaction import TransactionService
from walletwise.domain.user import UserService
from walletwise.utils.user_resolver import resolve_user


def resolve_user_or_exit(ctx: click.Context, user_service: UserService, user: str | int) -> int:
    """Resolve user name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_user(user_service, user)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def transaction_service_from_context(ctx: click.Context) -> TransactionService:
    """Build a TransactionService using the strict mode chosen at startup."""
    db = ctx.obj["db"]
    return TransactionService(
        db,
        ledger=BalanceLedger(strict=ctx.obj["strict"]),
        recorder=ActivityRecorder(db),
    )
