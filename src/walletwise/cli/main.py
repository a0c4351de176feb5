"""Main CLI entry point."""

import click
from walletwise.config import DB_PATH_ENV, LOG_LEVEL_ENV, read_strict_mode
from walletwise.database.factories import create_sqlite_database
from walletwise.logging_config import configure_logging

# Import and register all commands at module level
from walletwise.cli.commands import (
    add,
    transaction,
    user,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides WALLETWISE_DB_PATH environment variable)",
    envvar=DB_PATH_ENV,
)
@click.option(
    "--strict/--no-strict",
    default=None,
    help="Reject operations that would make a wallet balance negative "
    "(defaults to WALLETWISE_STRICT_BALANCE)",
)
@click.option(
    "--log-level",
    default="WARNING",
    envvar=LOG_LEVEL_ENV,
    show_default=True,
    help="Log level for structured logs on stderr",
)
@click.pass_context
def cli(ctx, db_path: str | None, strict: bool | None, log_level: str):
    """Walletwise - student wallet tracker.

    Record income and expenses against a running wallet balance, with
    undoable deletes, recurring transactions and a per-transaction
    activity history.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["strict"] = read_strict_mode() if strict is None else strict
        ctx.call_on_close(db.disconnect)


# Register all commands
user.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
