"""Add transaction command."""

import click
from walletwise.cli.display import echo_result
from walletwise.cli.error_handling import run_or_exit
from walletwise.cli.user_resolution import resolve_user_or_exit, transaction_service_from_context
from walletwise.domain.user import UserService


@click.command("add")
@click.option("--user", required=True, help="User name or ID")
@click.option("--type", "txn_type", required=True, help="Transaction type: income or expense")
@click.option("--amount", required=True, help="Positive amount (e.g., 123.45)")
@click.option("--category", required=True, help="Category (stored lower case)")
@click.option(
    "--date",
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday'); defaults to today",
)
@click.option("--description", help="Transaction description")
@click.option("--payment-method", help="Payment method (defaults to 'cash')")
@click.option("--mood", help="Mood tag (defaults to 'neutral')")
@click.option(
    "--recurring",
    "recurring_interval",
    help="Make the transaction recurring: daily, weekly or monthly",
)
@click.pass_context
def add_transaction(
    ctx,
    user: str,
    txn_type: str,
    amount: str,
    category: str,
    date: str | None,
    description: str | None,
    payment_method: str | None,
    mood: str | None,
    recurring_interval: str | None,
):
    """Add an income or expense and update the wallet balance.

    In strict mode an expense that would make the balance negative is
    rejected; otherwise it is recorded with a warning.

    Examples:
        walletwise add --user alice --type income --amount 200 --category allowance
        walletwise add --user alice --type expense --amount 12.50 --category Food --description "Lunch"
        walletwise add --user alice --type expense --amount 9.99 --category subscriptions --recurring monthly
    """
    db = ctx.obj["db"]
    user_id = resolve_user_or_exit(ctx, UserService(db), user)
    service = transaction_service_from_context(ctx)

    result = run_or_exit(
        ctx,
        service.add_transaction,
        user_id,
        type=txn_type,
        amount=amount,
        category=category,
        date=date,
        description=description,
        payment_method=payment_method,
        mood=mood,
        is_recurring=True if recurring_interval else None,
        recurring_interval=recurring_interval,
    )
    echo_result("Created", result)


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
