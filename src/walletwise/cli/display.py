"""Shared CLI output helpers."""

import click

from walletwise.domain.entities import MutationResult, Transaction


def format_money(amount) -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def echo_transaction(txn: Transaction) -> None:
    """Print the details of a transaction, one field per line."""
    click.echo(f"  Type: {txn.type.value}")
    click.echo(f"  Amount: {format_money(txn.amount)}")
    click.echo(f"  Category: {txn.category}")
    click.echo(f"  Date: {txn.date}")
    if txn.description:
        click.echo(f"  Description: {txn.description}")
    click.echo(f"  Payment method: {txn.payment_method}")
    if txn.is_recurring:
        interval = txn.recurring_interval.value if txn.recurring_interval else "unscheduled"
        click.echo(f"  Recurring: {interval}")
        if txn.next_execution_date:
            click.echo(f"  Next occurrence: {txn.next_execution_date}")


def echo_result(verb: str, result: MutationResult) -> None:
    """Print a mutation result, including the negative-balance advisory."""
    click.echo(f"{verb} transaction {result.transaction.id}")
    echo_transaction(result.transaction)
    click.echo(f"Wallet balance: {format_money(result.balance)}")
    if result.warning:
        click.echo("Warning: wallet balance is negative", err=True)
