"""Date and timestamp parsing utilities."""

from datetime import date, datetime, timedelta, UTC
from typing import Optional
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = ("all", "daily", "monthly", "yearly")


def parse_timestamp(value: str) -> datetime:
    """Parse a stored message timestamp into an aware datetime.

    Message sources report epoch milliseconds ("1700000000000"); manual entries
    use ISO 8601 strings. Naive values are taken to be UTC.

    Raises:
        ValueError: If the value is neither
    """
    value = (value or "").strip()
    if not value:
        raise ValueError("Empty timestamp")

    if value.isdigit():
        return datetime.fromtimestamp(int(value) / 1000, tz=UTC)

    try:
        dt = date_parser.isoparse(value)
    except ValueError:
        try:
            dt = date_parser.parse(value)
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Could not parse timestamp '{value}': {e}")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def now_timestamp() -> str:
    """Current time as an ISO 8601 string, the format used for manual entries."""
    return datetime.now(UTC).isoformat()


def parse_date(date_str: str) -> date:
    """Parse a date string, allowing "today", "yesterday" and "last month".

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "this year": today.replace(month=1, day=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def period_start(period: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """Return the inclusive start of a history period, or None for "all".

    "daily" starts at midnight today, "monthly" on the first of the month and
    "yearly" on January 1, all in the timezone of ``now``.

    Raises:
        ValueError: If the period is not recognized
    """
    period = period.strip().lower()
    if period not in PERIODS:
        raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
    if period == "all":
        return None

    now = now or datetime.now().astimezone()
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "daily":
        return midnight
    if period == "monthly":
        return midnight.replace(day=1)
    return midnight.replace(month=1, day=1)
