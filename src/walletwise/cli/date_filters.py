"""CLI helpers for date range resolution."""

from datetime import date

import click

from walletwise.utils.date_parser import get_date_range, parse_date


def resolve_cli_date_range(
    ctx: click.Context,
    *,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
) -> tuple[date | None, date | None]:
    """Resolve a listing date range from --period or explicit dates."""
    if period is not None:
        if start_date or end_date:
            click.echo(
                "Error: --period cannot be combined with --start-date or --end-date.",
                err=True,
            )
            ctx.exit(1)
        return get_date_range(period)

    bounds: list[date | None] = []
    for label, value in (("start", start_date), ("end", end_date)):
        if not value:
            bounds.append(None)
            continue
        try:
            bounds.append(parse_date(value))
        except ValueError as e:
            click.echo(f"Error: Invalid {label} date: {e}", err=True)
            ctx.exit(1)
    return bounds[0], bounds[1]
