"""Date utility functions for togglPy."""
from datetime import datetime, date, timedelta, timezone
from typing import Optional


def local_now() -> datetime:
    """Get the current instant in the system's local timezone."""
    return datetime.now(timezone.utc).astimezone()


def parse_timestamp(value: str) -> datetime:
    """Parse an API timestamp into a local, timezone aware datetime.

    Args:
        value: ISO 8601 timestamp (e.g. "2024-03-15T08:30:00Z")

    Returns:
        Datetime converted to the local timezone

    Raises:
        ValueError: If the value is not a valid ISO 8601 timestamp
    """
    if not isinstance(value, str) or not value:
        raise ValueError(f"Invalid timestamp: {value!r}")
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    # fromisoformat before 3.11 only takes 3 or 6 fractional digits
    if "." in text:
        head, _, rest = text.partition(".")
        digits = ""
        while rest and rest[0].isdigit():
            digits, rest = digits + rest[0], rest[1:]
        text = f"{head}.{digits[:6].ljust(6, '0')}{rest}" if digits else head + rest
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone()


def to_api_timestamp(dt: datetime) -> str:
    """Format a datetime the way the API expects it (UTC, "Z" suffix).

    Args:
        dt: Timezone aware datetime

    Returns:
        ISO 8601 string in UTC
    """
    return dt.astimezone(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def target_date(days_before: int = 0, today: Optional[date] = None) -> date:
    """Get the date a number of days before today.

    Args:
        days_before: Offset in days (0 is today)
        today: Reference date (default: local today)

    Returns:
        The target date
    """
    today = today or local_now().date()
    return today - timedelta(days=days_before)


def relative_day(day: date, today: date) -> Optional[str]:
    """Describe a date relative to today.

    Args:
        day: Date to describe
        today: Reference date

    Returns:
        None for today, "yesterday" for the day before, else e.g. "05 Mar"
    """
    if day == today:
        return None
    if day == today - timedelta(days=1):
        return "yesterday"
    return day.strftime("%d %b")


def format_clock(dt: datetime) -> str:
    """Format a datetime as HH:MM in 24-hour time."""
    return dt.strftime("%H:%M")
