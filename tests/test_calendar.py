from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from officeflow.domain.calendar import (
    first_monday_of_next_month,
    is_workday,
    next_monday,
    next_workday,
    start_of_day,
)

MONDAY = date(2026, 1, 5)


def _days(count: int = 400):
    return [MONDAY + timedelta(days=offset) for offset in range(count)]


@pytest.mark.parametrize(
    ("day", "expected"),
    [
        (date(2026, 1, 5), date(2026, 1, 6)),
        (date(2026, 1, 7), date(2026, 1, 8)),
        (date(2026, 1, 8), date(2026, 1, 12)),
        (date(2026, 1, 9), date(2026, 1, 12)),
        (date(2026, 1, 10), date(2026, 1, 12)),
        (date(2026, 1, 11), date(2026, 1, 12)),
    ],
)
def test_next_workday_skips_long_weekend(day: date, expected: date) -> None:
    assert next_workday(day) == expected


@pytest.mark.parametrize(
    "day",
    [date(2026, 1, 5), date(2026, 1, 8), date(2026, 1, 9), date(2026, 1, 10), date(2026, 1, 11)],
)
def test_next_monday_is_strictly_after(day: date) -> None:
    assert next_monday(day) == date(2026, 1, 12)


@pytest.mark.parametrize(
    ("day", "expected"),
    [
        (date(2026, 1, 15), date(2026, 2, 2)),
        (date(2026, 1, 31), date(2026, 2, 2)),
        (date(2026, 5, 20), date(2026, 6, 1)),
        (date(2026, 12, 10), date(2027, 1, 4)),
    ],
)
def test_first_monday_of_next_month(day: date, expected: date) -> None:
    assert first_monday_of_next_month(day) == expected


def test_time_of_day_is_ignored() -> None:
    late_thursday = datetime(2026, 1, 8, 23, 59)
    assert next_workday(late_thursday) == date(2026, 1, 12)
    assert next_monday(late_thursday) == date(2026, 1, 12)
    assert start_of_day(late_thursday) == datetime(2026, 1, 8)


def test_workdays_are_monday_to_thursday() -> None:
    flags = [is_workday(MONDAY + timedelta(days=offset)) for offset in range(7)]
    assert flags == [True, True, True, True, False, False, False]


@pytest.mark.parametrize("primitive", [next_workday, next_monday, first_monday_of_next_month])
def test_results_never_land_on_long_weekend(primitive) -> None:
    for day in _days():
        result = primitive(day)
        assert is_workday(result), (primitive.__name__, day)
        assert result > day


@pytest.mark.parametrize("primitive", [next_workday, next_monday, first_monday_of_next_month])
def test_reapplying_to_own_output_stays_on_workdays(primitive) -> None:
    for day in _days(60):
        first = primitive(day)
        second = primitive(first + timedelta(days=1))
        assert is_workday(second)
        assert second > first
        assert primitive(first + timedelta(days=1)) == second
