"""Tests for date parser with relative dates."""

import pytest
from datetime import date, datetime, timedelta
from walletwise.utils.date_parser import PERIODS, parse_date, get_date_range

# A Wednesday
TODAY = date(2024, 3, 13)


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    result = parse_date("2024-01-15")
    assert result == date(2024, 1, 15)


def test_parse_date_objects():
    """Dates pass through and datetimes are truncated."""
    assert parse_date(date(2024, 1, 15)) == date(2024, 1, 15)
    assert parse_date(datetime(2024, 1, 15, 23, 59)) == date(2024, 1, 15)


def test_parse_today():
    """Test parsing 'today'."""
    assert parse_date("today") == date.today()
    assert parse_date("  Today ", today=TODAY) == TODAY


def test_parse_yesterday_and_tomorrow():
    assert parse_date("yesterday", today=TODAY) == date(2024, 3, 12)
    assert parse_date("tomorrow", today=TODAY) == date(2024, 3, 14)


def test_parse_days_ago():
    assert parse_date("3 days ago", today=TODAY) == date(2024, 3, 10)
    assert parse_date("1 day ago", today=TODAY) == date(2024, 3, 12)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("this week", date(2024, 3, 11)),
        ("last week", date(2024, 3, 4)),
        ("this month", date(2024, 3, 1)),
        ("last month", date(2024, 2, 1)),
        ("this year", date(2024, 1, 1)),
        ("last year", date(2023, 1, 1)),
    ],
)
def test_parse_period_start(text, expected):
    """Relative period names resolve to the first day of the period."""
    assert parse_date(text, today=TODAY) == expected


def test_parse_last_month_in_january():
    assert parse_date("last month", today=date(2024, 1, 20)) == date(2023, 12, 1)


def test_parse_invalid_relative():
    """Test parsing invalid relative date."""
    with pytest.raises(ValueError):
        parse_date("last invalid")


@pytest.mark.parametrize("value", ["", "   ", None, 20240115])
def test_parse_rejects_non_text(value):
    with pytest.raises(ValueError):
        parse_date(value)


def test_parse_standard_formats():
    """Test parsing various standard date formats."""
    # These should all work via dateutil parser
    assert parse_date("January 15, 2024") == date(2024, 1, 15)
    assert parse_date("15/01/2024") == date(2024, 1, 15)


@pytest.mark.parametrize(
    "period,expected",
    [
        ("this-week", (date(2024, 3, 11), TODAY)),
        ("this-month", (date(2024, 3, 1), TODAY)),
        ("this-year", (date(2024, 1, 1), TODAY)),
        ("last-week", (date(2024, 3, 4), date(2024, 3, 10))),
        ("last-month", (date(2024, 2, 1), date(2024, 2, 29))),
        ("last-year", (date(2023, 1, 1), date(2023, 12, 31))),
    ],
)
def test_get_date_range(period, expected):
    assert get_date_range(period, today=TODAY) == expected


def test_get_date_range_defaults_to_today():
    today = date.today()
    start, end = get_date_range("this-month")
    assert start == date(today.year, today.month, 1)
    assert end == today


def test_get_date_range_last_week_is_monday_to_sunday():
    start, end = get_date_range("last-week")
    assert start.weekday() == 0
    assert end - start == timedelta(days=6)


def test_get_date_range_covers_all_periods():
    for period in PERIODS:
        start, end = get_date_range(period, today=TODAY)
        assert start <= end


def test_get_date_range_invalid():
    """Test get_date_range with invalid period."""
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("next-decade")
