from __future__ import annotations

from datetime import date, datetime

import pytest

from officeflow.domain.entities import AuditEntry, OvertimeEntry
from officeflow.domain.enums import AuditAction, TaskFrequency, TaskPreference
from officeflow.domain.filters import TaskFilters
from officeflow.infra.repository import (
    AuditRepository,
    OvertimeRepository,
    PreferenceRepository,
    TaskRepository,
)

pytestmark = pytest.mark.usefixtures("database")


def _create(repo: TaskRepository, title: str, frequency: TaskFrequency, description: str = ""):
    return repo.create_task({
        "title": title,
        "description": description,
        "frequency": frequency.value,
        "created_at": datetime(2026, 1, 5, 9, 0),
        "created_by": "principal-maria",
    })


def test_task_round_trip() -> None:
    repo = TaskRepository()
    task = _create(repo, "Sterilise tools", TaskFrequency.DAILY)

    assert task.id is not None
    assert task.frequency is TaskFrequency.DAILY
    assert task.is_pinned is False
    assert task.last_completed is None

    updated = repo.update_task(task.id, {"is_pinned": True, "last_completed": datetime(2026, 1, 6, 8, 0)})
    assert updated.is_pinned is True
    assert repo.get_task(task.id).last_completed == datetime(2026, 1, 6, 8, 0)
    assert repo.update_task(999, {"is_pinned": True}) is None
    assert repo.get_task(999) is None


def test_task_filters() -> None:
    repo = TaskRepository()
    _create(repo, "Sterilise tools", TaskFrequency.DAILY)
    _create(repo, "Order gloves", TaskFrequency.WEEKLY, "Supplier portal")

    assert [t.title for t in repo.list_tasks(TaskFilters())] == ["Sterilise tools", "Order gloves"]
    assert [t.title for t in repo.list_tasks(TaskFilters(frequency=TaskFrequency.WEEKLY))] == ["Order gloves"]
    assert [t.title for t in repo.list_tasks(TaskFilters(search="portal"))] == ["Order gloves"]


def test_overtime_entries() -> None:
    repo = OvertimeRepository()
    first = OvertimeEntry("anna", date(2026, 3, 9), 60, "late patient", True, 2_000)
    second = OvertimeEntry("anna", date(2026, 3, 10), 30, "left early", False, 3_000)
    repo.add_entry(second)
    repo.add_entry(first)
    repo.add_entry(OvertimeEntry("ben", date(2026, 3, 10), 15, "inventory", True, 1_000))

    assert [e.timestamp for e in repo.list_entries("anna")] == [2_000, 3_000]
    assert repo.list_usernames() == ["anna", "ben"]

    corrected = OvertimeEntry("anna", date(2026, 3, 8), 45, "fixed", True, 3_000)
    assert repo.update_entry(corrected) == corrected
    assert repo.list_entries("anna")[-1] == corrected
    assert repo.update_entry(OvertimeEntry("anna", date(2026, 3, 8), 45, "x", True, 9)) is None


def test_audit_entries_get_sequence_ids() -> None:
    task = _create(TaskRepository(), "Sterilise tools", TaskFrequency.DAILY)
    repo = AuditRepository()
    entry = AuditEntry(
        id=None,
        action=AuditAction.COMPLETED,
        username="anna",
        principal="principal-anna",
        task_id=task.id,
        timestamp=datetime(2026, 1, 6, 10, 0),
        summary="Marked done",
        completed_on_time=True,
    )

    first = repo.append(entry)
    second = repo.append(entry)

    assert second.id > first.id
    stored = repo.list_entries(task.id)
    assert [e.id for e in stored] == [first.id, second.id]
    assert stored[0].action is AuditAction.COMPLETED
    assert stored[0].completed_on_time is True
    assert repo.list_entries(task.id + 1) == []


def test_preferences_are_upserted() -> None:
    task = _create(TaskRepository(), "Sterilise tools", TaskFrequency.DAILY)
    repo = PreferenceRepository()

    repo.set_preference("anna", task.id, TaskPreference.HATED)
    repo.set_preference("anna", task.id, TaskPreference.NEUTRAL)

    assert repo.list_preferences("anna") == {task.id: TaskPreference.NEUTRAL}
    assert repo.list_preferences("ben") == {}
