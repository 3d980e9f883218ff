"""Audit trail entries for task mutations and the views built from them."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Mapping

from .entities import Actor, AuditEntry, TaskEntity
from .enums import AuditAction
from .filters import AuditFilters


def _entry(action: AuditAction, task: TaskEntity, actor: Actor, at: datetime, summary: str, **extra) -> AuditEntry:
    return AuditEntry(
        id=None,
        action=action,
        username=actor.username,
        principal=actor.principal,
        task_id=task.id,
        timestamp=at,
        summary=summary,
        **extra,
    )


def created_entry(task: TaskEntity, actor: Actor, at: datetime) -> AuditEntry:
    summary = f"Task created: '{task.title}' ({task.frequency.value})"
    return _entry(AuditAction.CREATED, task, actor, at, summary)


def describe_changes(before: TaskEntity, after: TaskEntity) -> str:
    changes = []
    if before.title != after.title:
        changes.append(f"title changed from '{before.title}' to '{after.title}'")
    if before.description != after.description:
        changes.append("description updated")
    if before.frequency != after.frequency:
        changes.append(
            f"frequency changed from {before.frequency.value} to {after.frequency.value}"
        )
    return "; ".join(changes) or "no changes"


def updated_entry(before: TaskEntity, after: TaskEntity, actor: Actor, at: datetime) -> AuditEntry:
    return _entry(AuditAction.UPDATED, after, actor, at, describe_changes(before, after))


def completed_entry(
    task: TaskEntity,
    actor: Actor,
    at: datetime,
    comment: str | None = None,
    evidence_ref: str | None = None,
    on_time: bool | None = None,
) -> AuditEntry:
    summary = f"Marked done with comment: {comment}" if comment else "Marked done"
    return _entry(
        AuditAction.COMPLETED,
        task,
        actor,
        at,
        summary,
        completion_comment=comment,
        evidence_ref=evidence_ref,
        completed_on_time=on_time,
    )


def _insertion_id(entry: AuditEntry) -> int:
    return entry.id if entry.id is not None else 0


def _ordered(entries: list[AuditEntry], newest_first: bool) -> list[AuditEntry]:
    # equal timestamps keep insertion order in both directions
    by_insertion = sorted(entries, key=_insertion_id)
    return sorted(by_insertion, key=lambda entry: entry.timestamp, reverse=newest_first)


def task_history(
    entries: Iterable[AuditEntry],
    task_id: int,
    newest_first: bool = False,
) -> list[AuditEntry]:
    """Entries for one task.

    Oldest first reads as a narrative (ledger dialog); ``newest_first`` is
    the order used by list views. Equal timestamps fall back to insertion id.
    """
    selected = [entry for entry in entries if entry.task_id == task_id]
    return _ordered(selected, newest_first)


def _matches(entry: AuditEntry, filters: AuditFilters, titles: Mapping[int, str]) -> bool:
    if filters.action is not None and entry.action != filters.action:
        return False
    if not filters.search:
        return True
    needle = filters.search.lower()
    title = titles.get(entry.task_id, f"Task #{entry.task_id}")
    return any(needle in text.lower() for text in (entry.username, entry.summary, title))


def global_history(
    entries: Iterable[AuditEntry],
    filters: AuditFilters | None = None,
    titles: Mapping[int, str] | None = None,
) -> list[AuditEntry]:
    """Whole audit log, newest first, optionally filtered by action and text."""
    filters = filters or AuditFilters()
    titles = titles or {}
    selected = [entry for entry in entries if _matches(entry, filters, titles)]
    return _ordered(selected, newest_first=True)
