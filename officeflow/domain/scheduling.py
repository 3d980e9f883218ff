"""Due-date resolution and urgency ranking for recurring tasks."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional, assert_never

from .calendar import first_monday_of_next_month, next_monday, next_workday, start_of_day
from .entities import TaskEntity
from .enums import TaskFrequency, UrgencyLevel
from .errors import StatePreconditionError

PINNED_SCORE = 1_000_000_000.0
OVERDUE_BASE = 100_000.0
UPCOMING_BASE = 10_000.0

_SECONDS_PER_HOUR = 3600

# hours until due below which a task is (high, medium)
_LEVEL_THRESHOLDS = {
    TaskFrequency.DAILY: (24, 48),
    TaskFrequency.WEEKLY: (48, 96),
    TaskFrequency.MONTHLY: (168, 336),
}


@dataclass(frozen=True)
class ScheduledTask:
    task: TaskEntity
    next_due: datetime
    score: float
    level: UrgencyLevel


def compute_next_due(
    frequency: TaskFrequency | str,
    created_at: Optional[datetime],
    last_completed: Optional[datetime] = None,
) -> datetime:
    """Next due instant (start of a Mon-Thu day) after the last completion.

    Falls back to ``created_at`` for tasks that were never completed.
    """
    reference = last_completed or created_at
    if reference is None:
        raise StatePreconditionError("Task has no creation timestamp to schedule from")

    frequency = TaskFrequency(frequency)
    if frequency is TaskFrequency.DAILY:
        due = next_workday(reference)
    elif frequency is TaskFrequency.WEEKLY:
        due = next_monday(reference)
    elif frequency is TaskFrequency.MONTHLY:
        due = first_monday_of_next_month(reference)
    else:
        assert_never(frequency)
    return start_of_day(due)


def _frequency_bonus(frequency: TaskFrequency) -> float:
    if frequency is TaskFrequency.DAILY:
        return 100.0
    if frequency is TaskFrequency.WEEKLY:
        return 50.0
    if frequency is TaskFrequency.MONTHLY:
        return 0.0
    assert_never(frequency)


def _hours_until(next_due: datetime, now: datetime) -> float:
    return (next_due - now).total_seconds() / _SECONDS_PER_HOUR


def urgency_score(
    frequency: TaskFrequency | str,
    next_due: datetime,
    is_pinned: bool,
    now: datetime | None = None,
) -> float:
    """Sort key for the task list, higher is more urgent.

    Pinned tasks sit above every unpinned score, overdue tasks above every
    upcoming one. Among upcoming tasks the frequency bonus only nudges
    near-ties toward the more frequent task.
    """
    if is_pinned:
        return PINNED_SCORE

    frequency = TaskFrequency(frequency)
    now = now or datetime.now()
    hours = _hours_until(next_due, now)
    if hours < 0:
        return OVERDUE_BASE - hours
    return UPCOMING_BASE - hours + _frequency_bonus(frequency)


def urgency_level(
    frequency: TaskFrequency | str,
    next_due: datetime,
    now: datetime | None = None,
) -> UrgencyLevel:
    frequency = TaskFrequency(frequency)
    now = now or datetime.now()
    hours = _hours_until(next_due, now)
    if hours < 0:
        return UrgencyLevel.HIGH

    high, medium = _LEVEL_THRESHOLDS[frequency]
    if hours < high:
        return UrgencyLevel.HIGH
    if hours < medium:
        return UrgencyLevel.MEDIUM
    return UrgencyLevel.LOW


def schedule_task(task: TaskEntity, now: datetime | None = None) -> ScheduledTask:
    now = now or datetime.now()
    next_due = compute_next_due(task.frequency, task.created_at, task.last_completed)
    return ScheduledTask(
        task=task,
        next_due=next_due,
        score=urgency_score(task.frequency, next_due, task.is_pinned, now),
        level=urgency_level(task.frequency, next_due, now),
    )


def rank_tasks(tasks: Iterable[TaskEntity], now: datetime | None = None) -> list[ScheduledTask]:
    """Schedule every task and sort by descending urgency score.

    The sort is stable, so equal scores keep their input order.
    """
    now = now or datetime.now()
    scheduled = [schedule_task(task, now) for task in tasks]
    return sorted(scheduled, key=lambda item: item.score, reverse=True)


def frequency_label(frequency: TaskFrequency | str) -> str:
    return TaskFrequency(frequency).value.capitalize()


def format_next_due(next_due: datetime, now: datetime | None = None) -> str:
    now = now or datetime.now()
    diff_days = (next_due - now) // timedelta(days=1)

    if diff_days < 0:
        overdue = abs(diff_days)
        return f"Overdue by {overdue} day{'s' if overdue != 1 else ''}"
    if diff_days == 0:
        return "Due today"
    if diff_days == 1:
        return "Due tomorrow"
    if diff_days < 7:
        return f"Due in {diff_days} days"
    return next_due.strftime("%d/%m/%Y")
