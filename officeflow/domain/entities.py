from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from .enums import AuditAction, TaskFrequency, TaskPreference

MINUTES_PER_HOUR = 60
WORKDAY_MINUTES = 8 * MINUTES_PER_HOUR


@dataclass(frozen=True)
class Actor:
    username: str
    principal: str


@dataclass(frozen=True)
class TaskEntity:
    id: int | None
    title: str
    description: str
    frequency: TaskFrequency
    created_at: datetime
    created_by: str
    last_completed: Optional[datetime] = None
    is_pinned: bool = False
    completion_comment: str | None = None
    completed_by: str | None = None
    completed_by_username: str | None = None
    evidence_ref: str | None = None


@dataclass(frozen=True)
class OvertimeEntry:
    username: str
    date: date
    minutes: int
    comment: str
    is_add: bool
    timestamp: int


@dataclass(frozen=True)
class OvertimeTotals:
    total_days: int = 0
    total_hours: int = 0
    total_minutes: int = 0

    @property
    def balance_minutes(self) -> int:
        return (
            self.total_days * WORKDAY_MINUTES
            + self.total_hours * MINUTES_PER_HOUR
            + self.total_minutes
        )


@dataclass(frozen=True)
class AuditEntry:
    id: int | None
    action: AuditAction
    username: str
    principal: str
    task_id: int
    timestamp: datetime
    summary: str
    completion_comment: str | None = None
    evidence_ref: str | None = None
    completed_on_time: bool | None = None


@dataclass(frozen=True)
class TaskPreferenceEntity:
    username: str
    task_id: int
    preference: TaskPreference


@dataclass(frozen=True)
class CompletionRecord:
    task_id: int
    task_title: str
    frequency: TaskFrequency
    completed_at: datetime
    completed_on_time: bool
