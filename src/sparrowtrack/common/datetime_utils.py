"""Wall-clock and duration helpers.

Everything here works on local clock semantics: a punch time is a plain
``HH:MM:SS`` string and durations are fractional hours.
"""
from __future__ import annotations

import calendar
import math
from datetime import date, datetime, time, timedelta, timezone
from typing import Union

from ..core.constants import CLOCK_FORMAT, ISO_DATE_FORMAT
from ..core.exceptions import ValidationError

ClockValue = Union[str, time]
DateValue = Union[str, date]

_NOMINAL_DATE = date(2000, 1, 1)
_SATURDAY = 5

# Labels are English whatever the process locale is.
_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, ISO_DATE_FORMAT).date()


def to_date(value: DateValue) -> date:
    """Accept a date (or datetime) or an ISO string; reject anything else."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value).strip())
    except ValueError:
        raise ValidationError(f"Invalid date (expected YYYY-MM-DD): {value!r}")


def parse_clock(value: ClockValue) -> time:
    if isinstance(value, time):
        return value
    text = str(value).strip()
    for fmt in (CLOCK_FORMAT, "%H:%M"):
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    raise ValidationError(f"Invalid time (expected HH:MM:SS): {value!r}")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def clock_string(moment: datetime) -> str:
    return moment.strftime(CLOCK_FORMAT)


def utc_timestamp(moment: datetime) -> str:
    """ISO 8601 instant in UTC with millisecond precision, e.g. 2024-01-15T09:00:00.000Z.

    Naive datetimes are taken as local time.
    """
    instant = moment.astimezone(timezone.utc)
    return instant.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def hours_between(start: ClockValue, end: ClockValue) -> float:
    """Hours from `start` to `end` on the same nominal day, never below zero.

    An `end` earlier than `start` (e.g. an overnight shift) yields 0.
    """
    start_dt = datetime.combine(_NOMINAL_DATE, parse_clock(start))
    end_dt = datetime.combine(_NOMINAL_DATE, parse_clock(end))
    return max(0.0, (end_dt - start_dt).total_seconds() / 3600)


def format_hours(hours: float) -> str:
    """Render fractional hours: "45 minutes", "1 hour", "2 hours", "8h 30m"."""
    hours = max(float(hours or 0), 0.0)
    whole = int(math.floor(hours))
    # round half up; plain round() would use banker's rounding
    minutes = int(math.floor((hours - whole) * 60 + 0.5))
    if minutes == 60:
        whole += 1
        minutes = 0

    if whole == 0:
        return f"{minutes} minutes"
    if minutes == 0:
        return f"{whole} hour" if whole == 1 else f"{whole} hours"
    return f"{whole}h {minutes}m"


def is_weekend(value: DateValue) -> bool:
    return to_date(value).weekday() >= _SATURDAY


def month_bounds(year: int, month: int) -> tuple[date, date]:
    if not 1 <= int(month) <= 12:
        raise ValidationError(f"Month must be between 1 and 12, got {month!r}")
    last_day = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)


def working_days_in_month(year: int, month: int) -> int:
    """Number of Monday-Friday dates in the month."""
    first, last = month_bounds(year, month)
    days = (last - first).days + 1
    return sum(1 for offset in range(days) if not is_weekend(first + timedelta(days=offset)))


def format_long_date(value: DateValue) -> str:
    d = to_date(value)
    return f"{_WEEKDAYS[d.weekday()]}, {_MONTHS[d.month - 1]} {d.day}, {d.year}"


def short_weekday(value: DateValue) -> str:
    return _WEEKDAYS[to_date(value).weekday()][:3]


def month_name(month: int) -> str:
    month = int(month)
    if not 1 <= month <= 12:
        raise ValidationError(f"Month must be between 1 and 12, got {month}")
    return _MONTHS[month - 1]
