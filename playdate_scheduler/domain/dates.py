# playdate_scheduler/domain/dates.py
from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Union

from playdate_scheduler.domain.models import AvailabilityStatus
from playdate_scheduler.validation.validator import ValidationError

DAY_LABELS = {
    "full": ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"),
    "short": ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"),
    "abbrev": ("S", "M", "T", "W", "T", "F", "S"),
}

_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")

DateLike = Union[date, str]
TimeLike = Union[time, str]


def weekday_of(d: date) -> int:
    """0=日曜 … 6=土曜（date.weekday()は月曜始まりなので変換する）"""
    return d.isoweekday() % 7


def parse_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    m = _DATE_RE.match(str(value).strip())
    if not m:
        raise ValidationError(f"Malformed date (expected YYYY-MM-DD): {value!r}")
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        raise ValidationError(f"Invalid calendar date: {value!r}")


def parse_time(value: TimeLike) -> time:
    """"HH:MM" / "HH:MM:SS"（時は1桁も可）を受け付ける"""
    if isinstance(value, time):
        return value
    m = _TIME_RE.match(str(value).strip())
    if not m:
        raise ValidationError(f"Malformed time (expected HH:MM or HH:MM:SS): {value!r}")
    try:
        return time(int(m.group(1)), int(m.group(2)), int(m.group(3) or 0))
    except ValueError:
        raise ValidationError(f"Invalid time of day: {value!r}")


def parse_optional_time(value):
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_time(value)


def parse_weekday(value: Union[int, str]) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"Weekday must be 0-6: {value!r}")
    if isinstance(value, int):
        n = value
    else:
        s = str(value).strip()
        if not s.isdigit():
            raise ValidationError(f"Weekday must be 0-6: {value!r}")
        n = int(s)
    if not 0 <= n <= 6:
        raise ValidationError(f"Weekday must be 0-6: {value!r}")
    return n


def parse_status(value: Union[AvailabilityStatus, str]) -> AvailabilityStatus:
    if isinstance(value, AvailabilityStatus):
        return value
    try:
        return AvailabilityStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown availability status: {value!r}")


def format_date(d: date) -> str:
    return d.isoformat()


def format_time(t: time) -> str:
    return t.strftime("%H:%M:%S")


def format_time_12h(value) -> str:
    """"18:30" → "6:30 PM"。空なら空文字"""
    if value is None or value == "":
        return ""
    t = parse_time(value)
    h12 = t.hour % 12 or 12
    ampm = "PM" if t.hour >= 12 else "AM"
    return f"{h12}:{t.minute:02d} {ampm}"
