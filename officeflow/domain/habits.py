from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, Mapping

from .entities import AuditEntry, CompletionRecord, TaskEntity
from .enums import AuditAction, TaskFrequency, TaskPreference


@dataclass(frozen=True)
class OnTimeMetrics:
    total: int = 0
    on_time: int = 0
    late: int = 0
    on_time_percentage: int = 0


@dataclass(frozen=True)
class AssistantSummary:
    username: str
    total_tasks: int
    daily_tasks: int
    weekly_tasks: int
    monthly_tasks: int
    completed_tasks: int
    on_time_tasks: int
    on_time_percentage: int = 0
    preferences: dict[int, TaskPreference] = field(default_factory=dict)


def completed_on_time(next_due: datetime, completed_at: datetime) -> bool:
    """A completion counts as on time until the end of the due day."""
    return completed_at < next_due + timedelta(days=1)


def completion_records(
    entries: Iterable[AuditEntry],
    tasks: Iterable[TaskEntity],
    username: str,
) -> list[CompletionRecord]:
    by_id = {task.id: task for task in tasks}
    records = []
    for entry in entries:
        if entry.action != AuditAction.COMPLETED or entry.username != username:
            continue
        task = by_id.get(entry.task_id)
        if task is None:
            continue
        records.append(
            CompletionRecord(
                task_id=task.id,
                task_title=task.title,
                frequency=task.frequency,
                completed_at=entry.timestamp,
                completed_on_time=bool(entry.completed_on_time),
            )
        )
    return sorted(records, key=lambda record: record.completed_at, reverse=True)


def _percent(part: int, whole: int) -> int:
    # halves round up, 12.5 shows as 13
    return (part * 200 + whole) // (2 * whole)


def on_time_metrics(records: Iterable[CompletionRecord]) -> OnTimeMetrics:
    records = list(records)
    if not records:
        return OnTimeMetrics()
    on_time = sum(1 for record in records if record.completed_on_time)
    return OnTimeMetrics(
        total=len(records),
        on_time=on_time,
        late=len(records) - on_time,
        on_time_percentage=_percent(on_time, len(records)),
    )


def assistant_summary(
    username: str,
    tasks: Iterable[TaskEntity],
    records: Iterable[CompletionRecord],
    preferences: Mapping[int, TaskPreference] | None = None,
) -> AssistantSummary:
    tasks = list(tasks)
    metrics = on_time_metrics(records)

    def count(frequency: TaskFrequency) -> int:
        return sum(1 for task in tasks if task.frequency == frequency)

    return AssistantSummary(
        username=username,
        total_tasks=len(tasks),
        daily_tasks=count(TaskFrequency.DAILY),
        weekly_tasks=count(TaskFrequency.WEEKLY),
        monthly_tasks=count(TaskFrequency.MONTHLY),
        completed_tasks=metrics.total,
        on_time_tasks=metrics.on_time,
        on_time_percentage=metrics.on_time_percentage,
        preferences=dict(preferences or {}),
    )
