"""CLI error handling helpers."""

import click
import structlog

from walletwise.domain.errors import DomainError, InsufficientBalanceError

EXIT_DOMAIN_ERROR = 1
EXIT_INSUFFICIENT_BALANCE = 3
# sysexits.h EX_SOFTWARE
EXIT_INTERNAL_ERROR = 70

logger = structlog.get_logger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure.

    Strict-mode balance rejections get their own exit code so scripts can
    tell a business-rule refusal from bad input.
    """
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, InsufficientBalanceError):
        ctx.exit(EXIT_INSUFFICIENT_BALANCE)
    ctx.exit(EXIT_DOMAIN_ERROR)


def handle_internal_error(ctx: click.Context, error: Exception) -> None:
    """Log an unexpected error with detail and exit with a generic message."""
    logger.error("internal_error", command=ctx.command_path, error=str(error), exc_info=error)
    click.echo("Error: internal error", err=True)
    ctx.exit(EXIT_INTERNAL_ERROR)


def run_or_exit(ctx: click.Context, operation, *args, **kwargs):
    """Call a domain operation, mapping its failures to CLI exits."""
    try:
        return operation(*args, **kwargs)
    except ValueError as e:
        handle_domain_error(ctx, e)
    except Exception as e:
        handle_internal_error(ctx, e)
