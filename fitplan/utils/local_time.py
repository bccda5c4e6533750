"""Local wall-time helpers for scheduled sessions.

Session start times are stored as naive local wall time in the form
``YYYY-MM-DDTHH:mm`` (no seconds, no offset). Every parse and format of that
wire format goes through this module.
"""

from datetime import date, datetime, time, timedelta

def format_local_datetime(value: datetime) -> str:
    """Format a datetime as ``YYYY-MM-DDTHH:mm``, dropping seconds and tzinfo.

    The year is always four digits; ``strftime("%Y")`` does not pad years
    below 1000 on every platform.
    """
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}T{value.hour:02d}:{value.minute:02d}"


def parse_local_datetime(value: str) -> datetime:
    """Parse a local start time.

    Accepts ``YYYY-MM-DDTHH:mm`` as well as longer ISO forms (seconds, offset).
    Any offset is discarded: the wall-clock reading is what is kept.

    Raises:
        ValueError: If the value is not an ISO date-time
    """
    if not isinstance(value, str) or "T" not in value:
        raise ValueError(f"Invalid local date-time: {value!r}")
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    return parsed.replace(tzinfo=None)


def parse_start_date(value: str | date) -> date:
    """Parse a scheduling anchor date.

    Accepts a ``date``/``datetime``, ``YYYY-MM-DD`` or an ISO date-time string
    (the date part is used).

    Raises:
        ValueError: If the value cannot be interpreted as a calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid start date: {value!r}")

    text = value.strip()
    if "T" in text:
        return parse_local_datetime(text).date()
    return date.fromisoformat(text)


def parse_time_of_day(value: str) -> time:
    """Parse ``HH:mm`` (seconds tolerated) into a ``time``.

    Raises:
        ValueError: If the value is not a valid 24h time of day
    """
    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid time of day: {value!r}")
    # time() range-checks every component, seconds included
    parsed = time(*(int(p) for p in parts))
    return parsed.replace(second=0)


def combine_local(day: date, time_of_day: time) -> str:
    return format_local_datetime(datetime.combine(day, time_of_day))


def offset_local_datetime(value: str, days: int = 0, minutes: int = 0) -> str:
    """Shift a ``YYYY-MM-DDTHH:mm`` value by whole days and minutes.

    Raises:
        ValueError: If the value does not parse, or the shifted time falls
            outside years 1-9999
    """
    start = parse_local_datetime(value)
    try:
        shifted = start + timedelta(days=days, minutes=minutes)
    except OverflowError as e:
        raise ValueError(f"Shifting {value} by {days}d {minutes}m leaves the supported date range") from e
    return format_local_datetime(shifted)
