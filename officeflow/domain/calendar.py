"""Work-calendar date arithmetic.

The workweek is fixed Monday to Thursday. Every helper works at day
granularity: a ``datetime`` argument is truncated to its calendar day and a
``date`` is returned.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

MONDAY = 0
THURSDAY = 3


def _as_day(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def start_of_day(value: date | datetime) -> datetime:
    return datetime.combine(_as_day(value), time.min)


def is_workday(value: date | datetime) -> bool:
    return MONDAY <= _as_day(value).weekday() <= THURSDAY


def next_monday(value: date | datetime) -> date:
    """First Monday strictly after the given day."""
    day = _as_day(value)
    return day + timedelta(days=7 - day.weekday())


def next_workday(value: date | datetime) -> date:
    """The following day, pushed to Monday when it lands on Fri/Sat/Sun."""
    candidate = _as_day(value) + timedelta(days=1)
    if is_workday(candidate):
        return candidate
    return next_monday(candidate)


def first_monday_of_next_month(value: date | datetime) -> date:
    day = _as_day(value)
    if day.month == 12:
        first = date(day.year + 1, 1, 1)
    else:
        first = date(day.year, day.month + 1, 1)
    return first + timedelta(days=(MONDAY - first.weekday()) % 7)
