"""Transaction management commands."""

import json

import click
from walletwise.cli.date_filters import resolve_cli_date_range
from walletwise.cli.display import echo_result, echo_transaction, format_money
from walletwise.cli.error_handling import run_or_exit
from walletwise.cli.user_resolution import resolve_user_or_exit, transaction_service_from_context
from walletwise.domain.snapshot import transaction_to_snapshot
from walletwise.domain.user import UserService
from walletwise.utils.date_parser import PERIODS, parse_date


def _user_id(ctx, user: str) -> int:
    return resolve_user_or_exit(ctx, UserService(ctx.obj["db"]), user)


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("update")
@click.argument("transaction_id")
@click.option("--user", required=True, help="User name or ID")
@click.option("--type", "txn_type", help="Transaction type: income or expense")
@click.option("--amount", help="Positive amount (e.g., 123.45)")
@click.option("--category", help="Category")
@click.option("--date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--description", help="Transaction description")
@click.option("--payment-method", help="Payment method")
@click.option("--mood", help="Mood tag")
@click.option(
    "--recurring",
    "recurring_interval",
    help="Recurrence: daily, weekly, monthly, or 'none' to stop recurring",
)
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: str,
    user: str,
    txn_type: str | None,
    amount: str | None,
    category: str | None,
    date: str | None,
    description: str | None,
    payment_method: str | None,
    mood: str | None,
    recurring_interval: str | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided. The wallet balance is
    adjusted by reversing the old transaction and applying the new one.

    Examples:
        walletwise transaction update 1 --user alice --amount 75.00
        walletwise transaction update 1 --user alice --type income
        walletwise transaction update 3 --user alice --recurring none
    """
    user_id = _user_id(ctx, user)
    service = transaction_service_from_context(ctx)

    changes = {
        "type": txn_type,
        "amount": amount,
        "category": category,
        "date": date,
        "description": description,
        "payment_method": payment_method,
        "mood": mood,
    }
    changes = {name: value for name, value in changes.items() if value is not None}
    if recurring_interval is not None:
        if recurring_interval.strip().lower() == "none":
            changes.update(is_recurring=False, recurring_interval=None)
        else:
            changes.update(is_recurring=True, recurring_interval=recurring_interval)

    if not changes:
        click.echo("Nothing to update.")
        return

    result = run_or_exit(ctx, service.update_transaction, user_id, transaction_id, **changes)
    echo_result("Updated", result)


@transaction_group.command("list")
@click.option("--user", required=True, help="User name or ID")
@click.option("--type", "txn_type", help="income, expense or all")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--period", type=click.Choice(PERIODS), help="Named period instead of explicit dates")
@click.option("--search", help="Text to match in description or category")
@click.option("--page", default="1", show_default=True, help="Page number")
@click.option("--limit", default="10", show_default=True, help="Transactions per page")
@click.option("--sort", default="newest", show_default=True, help="newest, oldest, amount-high or amount-low")
@click.pass_context
def list_transactions(
    ctx,
    user: str,
    txn_type: str | None,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    search: str | None,
    page: str,
    limit: str,
    sort: str,
):
    """View a page of transactions with optional filters.

    Unrecognized type or sort values fall back to all transactions, newest first.
    """
    user_id = _user_id(ctx, user)
    service = transaction_service_from_context(ctx)
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date, period=period)

    result = run_or_exit(
        ctx,
        service.list_transactions,
        user_id,
        type=txn_type,
        start_date=start,
        end_date=end,
        search=search,
        page=page,
        limit=limit,
        sort=sort,
    )

    if not result.transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nShowing page {result.page} of {result.pages} ({result.total} transaction(s)):")
    click.echo("-" * 100)
    click.echo(f"{'ID':<6} {'Date':<12} {'Type':<8} {'Amount':<12} {'Category':<20} {'Description':<30}")
    click.echo("-" * 100)

    for txn in result.transactions:
        description = (txn.description or "")[:30]
        click.echo(
            f"{txn.id:<6} {str(txn.date):<12} {txn.type.value:<8} {format_money(txn.amount):<12} "
            f"{txn.category[:20]:<20} {description:<30}"
        )

    income = sum(txn.amount for txn in result.transactions if txn.type.value == "income")
    expenses = sum(txn.amount for txn in result.transactions if txn.type.value == "expense")
    click.echo("-" * 100)
    click.echo(
        f"{'PAGE':<6} Income: {format_money(income)} | Expenses: {format_money(expenses)} | "
        f"Count: {len(result.transactions)}"
    )


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.option("--user", required=True, help="User name or ID")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.option(
    "--snapshot",
    type=click.File("w"),
    help="Write the deleted transaction as JSON to this file (use with 'transaction undo')",
)
@click.pass_context
def delete_transaction(ctx, transaction_id: str, user: str, yes: bool, snapshot) -> None:
    """Delete a transaction and reverse its effect on the balance.

    Examples:
        walletwise transaction delete 1 --user alice --snapshot deleted.json
    """
    user_id = _user_id(ctx, user)
    service = transaction_service_from_context(ctx)

    if not yes and not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    deleted = run_or_exit(ctx, service.delete_transaction, user_id, transaction_id)
    click.echo(f"Deleted transaction {deleted.id}")
    echo_transaction(deleted)
    click.echo(f"Wallet balance: {format_money(UserService(ctx.obj['db']).get_balance(user_id))}")

    if snapshot is not None:
        json.dump(transaction_to_snapshot(deleted), snapshot, indent=2)
        snapshot.write("\n")
        click.echo("Snapshot written; restore it with 'walletwise transaction undo'.")


@transaction_group.command("undo")
@click.argument("snapshot", type=click.File("r"))
@click.option("--user", required=True, help="User name or ID")
@click.pass_context
def undo_transaction(ctx, snapshot, user: str) -> None:
    """Restore a deleted transaction from its JSON snapshot.

    The restored transaction gets a new ID. Use '-' to read the snapshot
    from standard input.

    Examples:
        walletwise transaction undo deleted.json --user alice
    """
    user_id = _user_id(ctx, user)
    service = transaction_service_from_context(ctx)

    try:
        data = json.load(snapshot)
    except json.JSONDecodeError as e:
        click.echo(f"Error: Invalid snapshot JSON: {e}", err=True)
        ctx.exit(1)

    result = run_or_exit(ctx, service.undo_transaction, user_id, data)
    echo_result("Restored", result)


@transaction_group.command("skip")
@click.argument("transaction_id")
@click.option("--user", required=True, help="User name or ID")
@click.pass_context
def skip_next_occurrence(ctx, transaction_id: str, user: str) -> None:
    """Skip the next occurrence of a recurring transaction."""
    user_id = _user_id(ctx, user)
    service = transaction_service_from_context(ctx)

    next_date = run_or_exit(ctx, service.skip_next_occurrence, user_id, transaction_id)
    click.echo(f"Next occurrence skipped; now scheduled for {next_date}")


@transaction_group.command("activity")
@click.argument("transaction_id")
@click.option("--user", required=True, help="User name or ID")
@click.pass_context
def show_activity(ctx, transaction_id: str, user: str) -> None:
    """Show the change history of a transaction, newest first."""
    user_id = _user_id(ctx, user)
    service = transaction_service_from_context(ctx)

    records = run_or_exit(ctx, service.get_transaction_activity, user_id, transaction_id)
    if not records:
        click.echo("No activity found.")
        return

    for record in records:
        line = f"{record.timestamp:%Y-%m-%d %H:%M:%S}  {record.action.value:<9}"
        if record.changes:
            line += f"  {json.dumps(record.changes, sort_keys=True)}"
        click.echo(line)


@transaction_group.command("process-recurring")
@click.option("--user", required=True, help="User name or ID")
@click.option("--as-of", help="Post occurrences due on or before this date (defaults to today)")
@click.pass_context
def process_recurring(ctx, user: str, as_of: str | None) -> None:
    """Post all due occurrences of recurring transactions."""
    user_id = _user_id(ctx, user)
    service = transaction_service_from_context(ctx)

    as_of_date = None
    if as_of:
        try:
            as_of_date = parse_date(as_of)
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)

    run = run_or_exit(ctx, service.process_recurring, user_id, as_of_date)
    click.echo(f"Posted {len(run.posted)} occurrence(s)")
    for template in run.rejected:
        click.echo(
            f"Warning: transaction {template.id} skipped for insufficient balance; still due",
            err=True,
        )


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
