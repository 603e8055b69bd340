"""
Exercise Tracker — Calendar Date Helpers
=========================================

What:  Parsing of client-supplied dates and the fixed wire format for output.
How:   Pure functions, no I/O. Parsing never raises: anything that cannot be
       read as a calendar date comes back as None and the caller decides the
       fallback (today for new exercises, "no bound" for log filters).

Wire format:
    "%a %b %d %Y" → "Sun Jan 15 2023"
    Weekday and month names are spelled out explicitly so the output does not
    depend on the process locale.
"""

from datetime import date, datetime, timezone
from typing import Optional

WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

# Accepted in addition to ISO 8601 dates and date-times.
_EXTRA_FORMATS = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%a %b %d %Y",
)


def today() -> date:
    """Current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def parse_calendar_date(value: Optional[str]) -> Optional[date]:
    """
    Read a client-supplied date, discarding any time-of-day.

    Returns None for None, blank strings, and anything unparseable, including
    out-of-range dates such as "2023-02-30".
    """
    if value is None:
        return None
    raw = str(value).strip()
    if not raw:
        return None

    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass

    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    for fmt in _EXTRA_FORMATS:
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue
    return None


def format_calendar_date(value: date) -> str:
    """Render a date as e.g. "Mon Jan 01 2024"."""
    if isinstance(value, datetime):
        value = value.date()
    return (
        f"{WEEKDAYS[value.weekday()]} {MONTHS[value.month - 1]} "
        f"{value.day:02d} {value.year:04d}"
    )
