from __future__ import annotations

from dataclasses import replace
from typing import Optional

from sqlalchemy import or_, select

from officeflow.domain.entities import AuditEntry, OvertimeEntry, TaskEntity
from officeflow.domain.enums import AuditAction, TaskFrequency, TaskPreference
from officeflow.domain.filters import TaskFilters

from .db import SessionLocal
from .models import AuditEntryModel, OvertimeEntryModel, TaskModel, TaskPreferenceModel


def _to_task(model: TaskModel) -> TaskEntity:
    return TaskEntity(
        id=model.id,
        title=model.title,
        description=model.description,
        frequency=TaskFrequency(model.frequency),
        created_at=model.created_at,
        created_by=model.created_by,
        last_completed=model.last_completed,
        is_pinned=model.is_pinned,
        completion_comment=model.completion_comment,
        completed_by=model.completed_by,
        completed_by_username=model.completed_by_username,
        evidence_ref=model.evidence_ref,
    )


def _to_overtime(model: OvertimeEntryModel) -> OvertimeEntry:
    return OvertimeEntry(
        username=model.username,
        date=model.entry_date,
        minutes=model.minutes,
        comment=model.comment,
        is_add=model.is_add,
        timestamp=model.timestamp,
    )


def _to_audit(model: AuditEntryModel) -> AuditEntry:
    return AuditEntry(
        id=model.id,
        action=AuditAction(model.action),
        username=model.username,
        principal=model.principal,
        task_id=model.task_id,
        timestamp=model.timestamp,
        summary=model.summary,
        completion_comment=model.completion_comment,
        evidence_ref=model.evidence_ref,
        completed_on_time=model.completed_on_time,
    )


def _apply_filters(stmt, filters: TaskFilters) -> object:
    if filters.frequency:
        stmt = stmt.where(TaskModel.frequency == TaskFrequency(filters.frequency).value)

    if filters.search:
        pattern = f"%{filters.search}%"
        stmt = stmt.where(
            or_(
                TaskModel.title.ilike(pattern),
                TaskModel.description.ilike(pattern),
            )
        )

    return stmt


class TaskRepository:
    def list_tasks(self, filters: TaskFilters) -> list[TaskEntity]:
        with SessionLocal() as session:
            stmt = select(TaskModel)
            stmt = _apply_filters(stmt, filters)
            stmt = stmt.order_by(TaskModel.created_at.asc(), TaskModel.id.asc())
            return [_to_task(task) for task in session.scalars(stmt)]

    def get_task(self, task_id: int) -> Optional[TaskEntity]:
        with SessionLocal() as session:
            task = session.get(TaskModel, task_id)
            return _to_task(task) if task else None

    def create_task(self, data: dict) -> TaskEntity:
        with SessionLocal() as session:
            task = TaskModel(**data)
            session.add(task)
            session.commit()
            session.refresh(task)
            return _to_task(task)

    def update_task(self, task_id: int, data: dict) -> Optional[TaskEntity]:
        with SessionLocal() as session:
            task = session.get(TaskModel, task_id)
            if not task:
                return None
            for key, value in data.items():
                setattr(task, key, value)
            session.commit()
            session.refresh(task)
            return _to_task(task)


class OvertimeRepository:
    def list_entries(self, username: str) -> list[OvertimeEntry]:
        with SessionLocal() as session:
            stmt = (
                select(OvertimeEntryModel)
                .where(OvertimeEntryModel.username == username)
                .order_by(OvertimeEntryModel.timestamp.asc())
            )
            return [_to_overtime(entry) for entry in session.scalars(stmt)]

    def list_usernames(self) -> list[str]:
        with SessionLocal() as session:
            stmt = select(OvertimeEntryModel.username).distinct().order_by(OvertimeEntryModel.username)
            return list(session.scalars(stmt))

    def add_entry(self, entry: OvertimeEntry) -> OvertimeEntry:
        with SessionLocal() as session:
            model = OvertimeEntryModel(
                username=entry.username,
                entry_date=entry.date,
                minutes=entry.minutes,
                comment=entry.comment,
                is_add=entry.is_add,
                timestamp=entry.timestamp,
            )
            session.add(model)
            session.commit()
            session.refresh(model)
            return _to_overtime(model)

    def update_entry(self, entry: OvertimeEntry) -> Optional[OvertimeEntry]:
        with SessionLocal() as session:
            model = session.scalar(
                select(OvertimeEntryModel).where(
                    OvertimeEntryModel.username == entry.username,
                    OvertimeEntryModel.timestamp == entry.timestamp,
                )
            )
            if not model:
                return None
            model.entry_date = entry.date
            model.minutes = entry.minutes
            model.comment = entry.comment
            model.is_add = entry.is_add
            session.commit()
            session.refresh(model)
            return _to_overtime(model)


class AuditRepository:
    def append(self, entry: AuditEntry) -> AuditEntry:
        with SessionLocal() as session:
            model = AuditEntryModel(
                action=entry.action.value,
                username=entry.username,
                principal=entry.principal,
                task_id=entry.task_id,
                timestamp=entry.timestamp,
                summary=entry.summary,
                completion_comment=entry.completion_comment,
                evidence_ref=entry.evidence_ref,
                completed_on_time=entry.completed_on_time,
            )
            session.add(model)
            session.commit()
            return replace(entry, id=model.id)

    def list_entries(self, task_id: int | None = None) -> list[AuditEntry]:
        with SessionLocal() as session:
            stmt = select(AuditEntryModel)
            if task_id is not None:
                stmt = stmt.where(AuditEntryModel.task_id == task_id)
            stmt = stmt.order_by(AuditEntryModel.id.asc())
            return [_to_audit(entry) for entry in session.scalars(stmt)]


class PreferenceRepository:
    def set_preference(self, username: str, task_id: int, preference: TaskPreference) -> None:
        with SessionLocal() as session:
            model = session.get(TaskPreferenceModel, (username, task_id))
            if model is None:
                model = TaskPreferenceModel(username=username, task_id=task_id)
                session.add(model)
            model.preference = preference.value
            session.commit()

    def list_preferences(self, username: str) -> dict[int, TaskPreference]:
        with SessionLocal() as session:
            stmt = select(TaskPreferenceModel).where(TaskPreferenceModel.username == username)
            return {row.task_id: TaskPreference(row.preference) for row in session.scalars(stmt)}
