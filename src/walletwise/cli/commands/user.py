"""User management commands."""

import click
from walletwise.cli.display import format_money
from walletwise.cli.error_handling import run_or_exit
from walletwise.cli.user_resolution import resolve_user_or_exit, transaction_service_from_context
from walletwise.domain.user import UserService


@click.group()
def user_group():
    """Manage wallet owners."""
    pass


@user_group.command("create")
@click.argument("name", metavar="USER_NAME")
@click.pass_context
def create_user(ctx, name: str):
    """Create a new user with an empty wallet.

    Examples:
        walletwise user create "alice"
    """
    service = UserService(ctx.obj["db"])
    user_id = run_or_exit(ctx, service.create_user, name)
    click.echo(f"Created user '{name.strip()}' (ID: {user_id})")


@user_group.command("list")
@click.pass_context
def list_users(ctx):
    """List all users and their wallet balances."""
    service = UserService(ctx.obj["db"])

    users = service.list_users()
    if not users:
        click.echo("No users found.")
        return

    click.echo("\nUsers:")
    click.echo("-" * 60)
    for usr in users:
        click.echo(f"ID: {usr.id:3d} | {usr.name:20s} | Balance: {format_money(usr.wallet_balance)}")


@user_group.command("balance")
@click.argument("user", metavar="USER")
@click.pass_context
def show_balance(ctx, user: str):
    """Show a user's wallet balance.

    USER can be a user name or ID.
    """
    service = UserService(ctx.obj["db"])
    user_id = resolve_user_or_exit(ctx, service, user)
    balance = run_or_exit(ctx, service.get_balance, user_id)
    click.echo(f"Wallet balance: {format_money(balance)}")


@user_group.command("reconcile")
@click.argument("user", metavar="USER")
@click.pass_context
def reconcile(ctx, user: str):
    """Recompute a user's balance from the full transaction history.

    Corrects any drift left behind by a failed write.

    Examples:
        walletwise user reconcile alice
    """
    user_service = UserService(ctx.obj["db"])
    user_id = resolve_user_or_exit(ctx, user_service, user)
    stored = run_or_exit(ctx, user_service.get_balance, user_id)

    service = transaction_service_from_context(ctx)
    expected = run_or_exit(ctx, service.reconcile_balance, user_id)
    if stored == expected:
        click.echo(f"Balance is consistent: {format_money(expected)}")
    else:
        click.echo(f"Corrected balance from {format_money(stored)} to {format_money(expected)}")


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group, name="user")
