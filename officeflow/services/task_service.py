from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from officeflow.domain import history
from officeflow.domain.entities import Actor, AuditEntry, CompletionRecord, TaskEntity
from officeflow.domain.enums import TaskFrequency, TaskPreference
from officeflow.domain.errors import StatePreconditionError, ValidationError
from officeflow.domain.filters import AuditFilters, TaskFilters
from officeflow.domain.habits import (
    AssistantSummary,
    assistant_summary,
    completed_on_time,
    completion_records,
)
from officeflow.domain.scheduling import ScheduledTask, compute_next_due, rank_tasks
from officeflow.infra.repository import AuditRepository, PreferenceRepository, TaskRepository

logger = logging.getLogger(__name__)


def parse_frequency(value: TaskFrequency | str) -> TaskFrequency:
    try:
        return TaskFrequency(value)
    except ValueError as exc:
        allowed = ", ".join(item.value for item in TaskFrequency)
        raise ValidationError(f"Unknown frequency {value!r}, expected one of: {allowed}") from exc


def parse_preference(value: TaskPreference | str) -> TaskPreference:
    try:
        return TaskPreference(value)
    except ValueError as exc:
        allowed = ", ".join(item.value for item in TaskPreference)
        raise ValidationError(f"Unknown preference {value!r}, expected one of: {allowed}") from exc


def _require_text(value: str | None, field_name: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{field_name} is required")
    return cleaned


class TaskService:
    def __init__(
        self,
        repo: TaskRepository,
        audit_repo: AuditRepository,
        preference_repo: PreferenceRepository,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._repo = repo
        self._audit = audit_repo
        self._preferences = preference_repo
        self._clock = clock

    def list_tasks(self, filters: TaskFilters | None = None) -> list[ScheduledTask]:
        tasks = self._repo.list_tasks(filters or TaskFilters())
        return rank_tasks(tasks, self._clock())

    def get_task(self, task_id: int) -> TaskEntity | None:
        return self._repo.get_task(task_id)

    def create_task(
        self,
        actor: Actor,
        title: str,
        description: str = "",
        frequency: TaskFrequency | str = TaskFrequency.DAILY,
    ) -> TaskEntity:
        data = {
            "title": _require_text(title, "Title"),
            "description": (description or "").strip(),
            "frequency": parse_frequency(frequency).value,
        }
        now = self._clock()
        data.update(created_at=now, created_by=actor.principal, is_pinned=False)

        task = self._repo.create_task(data)
        self._audit.append(history.created_entry(task, actor, now))
        logger.info("Task %s created by %s", task.id, actor.username)
        return task

    def update_task(
        self,
        actor: Actor,
        task_id: int,
        title: str,
        description: str,
        frequency: TaskFrequency | str,
    ) -> TaskEntity:
        data = {
            "title": _require_text(title, "Title"),
            "description": (description or "").strip(),
            "frequency": parse_frequency(frequency).value,
        }
        before = self._require_task(task_id)

        after = self._repo.update_task(task_id, data)
        if after is None:
            raise StatePreconditionError(f"Task {task_id} does not exist")
        self._audit.append(history.updated_entry(before, after, actor, self._clock()))
        logger.info("Task %s updated by %s", task_id, actor.username)
        return after

    def mark_done(
        self,
        actor: Actor,
        task_id: int,
        comment: str | None = None,
        evidence_ref: str | None = None,
    ) -> TaskEntity:
        task = self._require_task(task_id)
        now = self._clock()
        if now < task.created_at:
            raise StatePreconditionError("Completion time precedes task creation")
        if task.last_completed and now < task.last_completed:
            raise StatePreconditionError("Completion time precedes the previous completion")

        due = compute_next_due(task.frequency, task.created_at, task.last_completed)
        on_time = completed_on_time(due, now)
        comment = (comment or "").strip() or None

        done = self._repo.update_task(task_id, {
            "last_completed": now,
            "completion_comment": comment,
            "completed_by": actor.principal,
            "completed_by_username": actor.username,
            "evidence_ref": evidence_ref,
        })
        if done is None:
            raise StatePreconditionError(f"Task {task_id} does not exist")
        self._audit.append(history.completed_entry(done, actor, now, comment, evidence_ref, on_time))
        logger.info("Task %s marked done by %s (on time: %s)", task_id, actor.username, on_time)
        return done

    def set_pinned(self, task_id: int, is_pinned: bool) -> TaskEntity:
        self._require_task(task_id)
        task = self._repo.update_task(task_id, {"is_pinned": bool(is_pinned)})
        if task is None:
            raise StatePreconditionError(f"Task {task_id} does not exist")
        return task

    def get_task_history(self, task_id: int, newest_first: bool = False) -> list[AuditEntry]:
        return history.task_history(self._audit.list_entries(task_id), task_id, newest_first)

    def get_audit_log(self, filters: AuditFilters | None = None) -> list[AuditEntry]:
        titles = {task.id: task.title for task in self._repo.list_tasks(TaskFilters())}
        return history.global_history(self._audit.list_entries(), filters, titles)

    def set_task_preference(
        self,
        username: str,
        task_id: int,
        preference: TaskPreference | str,
    ) -> None:
        username = _require_text(username, "Username")
        preference = parse_preference(preference)
        self._require_task(task_id)
        self._preferences.set_preference(username, task_id, preference)

    def get_task_preferences(self, username: str) -> dict[int, TaskPreference]:
        return self._preferences.list_preferences(username)

    def get_completion_records(self, username: str) -> list[CompletionRecord]:
        tasks = self._repo.list_tasks(TaskFilters())
        return completion_records(self._audit.list_entries(), tasks, username)

    def get_assistant_habits(self, username: str) -> AssistantSummary:
        tasks = self._repo.list_tasks(TaskFilters())
        records = completion_records(self._audit.list_entries(), tasks, username)
        return assistant_summary(username, tasks, records, self.get_task_preferences(username))

    def _require_task(self, task_id: int) -> TaskEntity:
        task = self._repo.get_task(task_id)
        if task is None:
            raise StatePreconditionError(f"Task {task_id} does not exist")
        return task
