"""Tests for date and timestamp parsing."""

import pytest
from datetime import date, datetime, timedelta, timezone, UTC

from smsledger.utils.date_parser import parse_date, parse_timestamp, period_start


def test_parse_epoch_millis():
    """Message sources report epoch milliseconds."""
    assert parse_timestamp("1705312800000") == datetime(2024, 1, 15, 10, 0, tzinfo=UTC)


def test_parse_iso_timestamp():
    result = parse_timestamp("2024-01-15T10:00:00+05:30")
    assert result.utcoffset() == timedelta(hours=5, minutes=30)


def test_naive_timestamp_is_utc():
    assert parse_timestamp("2024-01-15 10:00").tzinfo is UTC


@pytest.mark.parametrize("value", ["", "   ", "not a timestamp"])
def test_bad_timestamp(value):
    with pytest.raises(ValueError):
        parse_timestamp(value)


def test_parse_absolute_date():
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_today():
    assert parse_date("today") == date.today()


def test_parse_yesterday():
    assert parse_date("Yesterday") == date.today() - timedelta(days=1)


def test_parse_last_month():
    """Test parsing 'last month'."""
    result = parse_date("last month")
    today = date.today()
    if today.month == 1:
        expected = date(today.year - 1, 12, 1)
    else:
        expected = date(today.year, today.month - 1, 1)
    assert result == expected


def test_parse_invalid_date():
    with pytest.raises(ValueError):
        parse_date("whenever")


class TestPeriodStart:
    """Tests for history period boundaries."""

    now = datetime(2024, 6, 15, 18, 30, tzinfo=timezone(timedelta(hours=5, minutes=30)))

    def test_all_has_no_start(self):
        assert period_start("all", self.now) is None

    def test_daily(self):
        assert period_start("daily", self.now) == self.now.replace(hour=0, minute=0)

    def test_monthly(self):
        assert period_start("monthly", self.now) == self.now.replace(day=1, hour=0, minute=0)

    def test_yearly(self):
        assert period_start("Yearly", self.now) == self.now.replace(month=1, day=1, hour=0, minute=0)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown period"):
            period_start("weekly", self.now)
