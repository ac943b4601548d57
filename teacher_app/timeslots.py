"""
Input parsing for scheduling and attendance: record ids, wall-clock times
and calendar days. Times travel as "HH:MM" strings but are compared as
minutes since midnight.
"""
import re
from collections import namedtuple
from datetime import date

from django.utils.dateparse import parse_date

from .exceptions import ValidationError

CLOCK_RE = re.compile(r"([0-9]{1,2}):([0-9]{2})")
MINUTES_PER_DAY = 24 * 60


def parse_clock(value):
    """Return minutes since midnight for "H:MM" / "HH:MM"."""
    if not isinstance(value, str):
        raise ValidationError(f"Invalid time: {value!r}. Expected HH:MM.")
    match = CLOCK_RE.fullmatch(value)
    if not match:
        raise ValidationError(f"Invalid time: {value!r}. Expected HH:MM.")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValidationError(f"Invalid time: {value!r}. Expected HH:MM.")
    return hours * 60 + minutes


def format_clock(minutes):
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValidationError(f"Minute offset out of range: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


class TimeSlot(namedtuple("TimeSlot", ["start", "end"])):
    """Half-open [start, end) interval in minutes since midnight."""

    __slots__ = ()

    @classmethod
    def parse(cls, start_time, end_time):
        start = parse_clock(start_time)
        end = parse_clock(end_time)
        if start >= end:
            raise ValidationError("Start time must be before end time.")
        return cls(start, end)

    @classmethod
    def of(cls, record):
        """Slot of anything carrying start_time / end_time strings (a Session row)."""
        return cls(parse_clock(record.start_time), parse_clock(record.end_time))

    def overlaps(self, other):
        # Back-to-back slots (self.end == other.start) do not overlap.
        return self.start < other.end and other.start < self.end

    @property
    def start_time(self):
        return format_clock(self.start)

    @property
    def end_time(self):
        return format_clock(self.end)


def parse_day(value):
    """Parse a calendar day given as YYYY-MM-DD (date objects pass through)."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value:
        raise ValidationError("Date is required (YYYY-MM-DD).")
    try:
        day = parse_date(value)
    except ValueError:
        day = None
    if day is None:
        raise ValidationError(f"Invalid date: {value!r}. Expected YYYY-MM-DD.")
    return day


def parse_id(value, field):
    """Integer record id from a JSON number or a decimal string."""
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValidationError(f"{field} must be an integer.")
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{field} must be an integer.")
