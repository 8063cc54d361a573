"""
Calendar Day Handling

Single place where workload dates are normalized. A workload date is a
calendar day (year, month, day) with no time-of-day:

- Plain "yyyy-MM-dd" strings and date values are kept exactly as authored.
- ISO timestamps are truncated to their calendar day in the local zone
  (host zone, or WORKBOARD_TIMEZONE when configured).
"""
import re
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterator, Optional, Tuple, Union
from zoneinfo import ZoneInfo

from workboard import config
from workboard.errors import ValidationError

DAY_FORMAT = "%Y-%m-%d"

_PLAIN_DAY = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DayLike = Union[date, datetime, str]


def local_zone() -> Optional[tzinfo]:
    """Configured zone, or None for the host local zone"""
    if config.WORKBOARD_TIMEZONE:
        return ZoneInfo(config.WORKBOARD_TIMEZONE)
    return None


def to_calendar_day(value: DayLike, tz: Optional[tzinfo] = None) -> date:
    """
    Normalize a date-like value to a calendar day.

    Args:
        value: date, datetime, "yyyy-MM-dd" string or ISO timestamp string
        tz: Zone used to truncate aware timestamps (defaults to local_zone())

    Returns:
        datetime.date

    Raises:
        ValidationError: If the value cannot be read as a date
    """
    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return _truncate(value, tz)
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if _PLAIN_DAY.match(text):
                return date.fromisoformat(text)
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            return _truncate(datetime.fromisoformat(text), tz)
        except ValueError:
            raise ValidationError(f"Invalid date: {value!r}. Expected yyyy-MM-dd or an ISO timestamp")
    raise ValidationError(f"Invalid date type: {type(value).__name__}")


def _truncate(value: datetime, tz: Optional[tzinfo]) -> date:
    if value.tzinfo is None:
        # Naive timestamps are already local wall-clock time
        return value.date()
    zone = tz if tz is not None else local_zone()
    return value.astimezone(zone).date()


def format_day(value: DayLike) -> str:
    """Format a date-like value as yyyy-MM-dd"""
    return to_calendar_day(value).strftime(DAY_FORMAT)


def days_between(start: date, end: date) -> int:
    """Inclusive number of calendar days from start to end (0 when end < start)"""
    return max(0, (end - start).days + 1)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end inclusive"""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def current_week_bounds(today: Optional[date] = None) -> Tuple[date, date]:
    """Monday-Sunday week containing today"""
    if today is None:
        today = datetime.now(local_zone()).date()
    monday = today - timedelta(days=today.weekday())
    return monday, monday + timedelta(days=6)
