"""Date/time helpers behind the task display strings and urgency styling.

Due dates are stored as "YYYY-MM-DD" and due times as "HH:MM". They are
always split into integer parts and rebuilt as local wall-clock datetimes,
never parsed as an instant, so a date-only value cannot drift a day when
read as UTC midnight.

Month names are fixed English abbreviations so the output does not depend
on the process locale.
"""
from __future__ import annotations
from datetime import date, datetime, time
from typing import Optional, Tuple

from models import Task

MONTHS = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
          'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')

DUE_TODAY = 'due-today'
OVERDUE = 'overdue'
END_OF_DAY = time(23, 59, 59)


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse "YYYY-MM-DD" into a date; None when unset or malformed."""
    if not value:
        return None
    parts = value.strip().split('-')
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        return None
    try:
        return date(int(parts[0]), int(parts[1]), int(parts[2]))
    except ValueError:
        return None


def parse_time(value: Optional[str]) -> Optional[time]:
    """Parse "HH:MM" (seconds tolerated and dropped); None when unset or malformed."""
    if not value:
        return None
    parts = value.strip().split(':')
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        return None
    try:
        return time(int(parts[0]), int(parts[1]))
    except ValueError:
        return None


def _clock(dt: datetime) -> str:
    hour = dt.hour % 12 or 12
    suffix = 'AM' if dt.hour < 12 else 'PM'
    return f"{hour}:{dt.minute:02d} {suffix}"


def _day(d: date) -> str:
    return f"{MONTHS[d.month - 1]} {d.day}, {d.year}"


def format_created_at(timestamp_ms: int) -> Optional[str]:
    """Render epoch milliseconds as e.g. "Jan 1, 2025 at 3:05 PM" (local time).

    None when the timestamp is outside what the platform can represent.
    """
    try:
        dt = datetime.fromtimestamp(timestamp_ms / 1000)
    except (OverflowError, OSError, ValueError):
        return None
    return f"{_day(dt.date())} at {_clock(dt)}"


def format_due_datetime(due_date: Optional[str], due_time: Optional[str] = None) -> Optional[str]:
    """Render a due date (and optional time); None when there is no due date."""
    d = parse_date(due_date)
    if d is None:
        return None
    t = parse_time(due_time)
    if t is None:
        return _day(d)
    return f"{_day(d)} at {_clock(datetime.combine(d, t))}"


def due_deadline(due_date: Optional[str], due_time: Optional[str] = None) -> Optional[datetime]:
    """The instant a task becomes overdue: (date, time), or end of the due day."""
    d = parse_date(due_date)
    if d is None:
        return None
    return datetime.combine(d, parse_time(due_time) or END_OF_DAY)


def is_overdue(due_date: Optional[str], due_time: Optional[str] = None,
               now: Optional[datetime] = None) -> bool:
    deadline = due_deadline(due_date, due_time)
    if deadline is None:
        return False
    return deadline < (now or datetime.now())


def is_due_today(due_date: Optional[str], today: Optional[date] = None) -> bool:
    d = parse_date(due_date)
    if d is None:
        return False
    return d == (today or date.today())


def urgency_class(task: Task, now: Optional[datetime] = None) -> str:
    """One of '', 'due-today', 'overdue'. Completed tasks are never urgent.

    Overdue wins over due-today: a task due at 09:00 today is overdue at 10:00.
    """
    if task.completed or parse_date(task.due_date) is None:
        return ''
    now = now or datetime.now()
    if is_overdue(task.due_date, task.due_time, now):
        return OVERDUE
    if is_due_today(task.due_date, now.date()):
        return DUE_TODAY
    return ''


def split_due(due_date: Optional[str], due_time: Optional[str]) -> Tuple[Optional[date], Optional[time]]:
    """Validate raw input strings for a new task.

    Blank strings count as unset. Raises ValueError for malformed values and
    for a time given without a date.
    """
    date_text = (due_date or '').strip()
    time_text = (due_time or '').strip()
    d = parse_date(date_text) if date_text else None
    t = parse_time(time_text) if time_text else None
    if date_text and d is None:
        raise ValueError(f'Invalid due date "{date_text}" (expected YYYY-MM-DD).')
    if time_text and t is None:
        raise ValueError(f'Invalid due time "{time_text}" (expected HH:MM).')
    if t is not None and d is None:
        raise ValueError('A due time needs a due date.')
    return d, t
