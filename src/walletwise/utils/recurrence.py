"""Recurring schedule helpers."""

from datetime import date, timedelta
from dateutil.relativedelta import relativedelta

from walletwise.domain.entities import RecurringInterval


def advance_date(current: date, interval: RecurringInterval) -> date:
    """Return the next occurrence after ``current`` for ``interval``.

    Monthly steps use calendar months, so Jan 31 advances to the last day
    of February.
    """
    interval = RecurringInterval(interval)
    if interval is RecurringInterval.DAILY:
        return current + timedelta(days=1)
    if interval is RecurringInterval.WEEKLY:
        return current + timedelta(days=7)
    return current + relativedelta(months=1)
