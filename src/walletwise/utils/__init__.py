"""Utility functions for walletwise."""

from walletwise.utils.date_parser import parse_date
from walletwise.utils.amount_parser import parse_amount
from walletwise.utils.recurrence import advance_date

__all__ = ["parse_date", "parse_amount", "advance_date"]
