"""officeflow command line - recurring checklist and overtime time bank."""

from __future__ import annotations

import sys
from dataclasses import replace

import click

from officeflow.config import SETTINGS
from officeflow.domain.entities import Actor
from officeflow.domain.enums import AuditAction, TaskFrequency, TaskPreference
from officeflow.domain.errors import DomainError
from officeflow.domain.filters import AuditFilters, TaskFilters
from officeflow.domain.overtime import format_overtime_date, latest_entry
from officeflow.domain.scheduling import format_next_due, frequency_label, schedule_task
from officeflow.infra.db import create_schema, init_db
from officeflow.infra.logging import setup_logging
from officeflow.infra.repository import (
    AuditRepository,
    OvertimeRepository,
    PreferenceRepository,
    TaskRepository,
)
from officeflow.services.overtime_service import OvertimeService
from officeflow.services.task_service import TaskService

FREQUENCIES = click.Choice([item.value for item in TaskFrequency])


def _task_service() -> TaskService:
    return TaskService(TaskRepository(), AuditRepository(), PreferenceRepository())


def _overtime_service() -> OvertimeService:
    return OvertimeService(OvertimeRepository())


def _fail(exc: DomainError) -> None:
    click.echo(f"Error: {exc}", err=True)
    sys.exit(1)


def _actor(username: str, principal: str | None) -> Actor:
    return Actor(username=username, principal=principal or username)


actor_options = [
    click.option(
        "--user",
        "username",
        default=SETTINGS.default_user,
        required=True,
        help="Acting username (defaults to OFFICEFLOW_USER)",
    ),
    click.option("--principal", default=None, help="Principal id (defaults to username)"),
]


def with_actor(func):
    for option in reversed(actor_options):
        func = option(func)
    return func


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
def main(log_level: str | None):
    """officeflow - recurring tasks and overtime tracking."""
    setup_logging(log_level)


@main.command("init-db")
def init_db_command():
    """Create the database tables."""
    init_db()
    create_schema()
    click.echo("Database ready.")


@main.group()
def tasks():
    """Recurring task checklist."""


@tasks.command("list")
@click.option("--search", default=None)
@click.option("--frequency", type=FREQUENCIES, default=None)
def list_tasks(search: str | None, frequency: str | None):
    """List tasks, most urgent first."""
    filters = TaskFilters(search=search, frequency=TaskFrequency(frequency) if frequency else None)
    ranked = _task_service().list_tasks(filters)
    if not ranked:
        click.echo("No tasks.")
        return
    for item in ranked:
        pin = "*" if item.task.is_pinned else " "
        click.echo(
            f"{pin} #{item.task.id:<4} [{item.level.value:<6}] {item.task.title} "
            f"({frequency_label(item.task.frequency)}, {format_next_due(item.next_due)})"
        )


@tasks.command("show")
@click.argument("task_id", type=int)
def show_task(task_id: int):
    """Print one task and when it is due next."""
    task = _task_service().get_task(task_id)
    if task is None:
        click.echo(f"Error: Task {task_id} does not exist", err=True)
        sys.exit(1)
    item = schedule_task(task)
    click.echo(f"#{task.id} {task.title}")
    if task.description:
        click.echo(task.description)
    click.echo(f"{frequency_label(task.frequency)}, {format_next_due(item.next_due)} [{item.level.value}]")
    if task.last_completed:
        click.echo(f"Last done {task.last_completed:%d/%m/%Y %H:%M} by {task.completed_by_username}")


@tasks.command("add")
@with_actor
@click.argument("title")
@click.option("--description", default="")
@click.option("--frequency", type=FREQUENCIES, default=TaskFrequency.DAILY.value, show_default=True)
def add_task(username, principal, title, description, frequency):
    """Create a recurring task."""
    try:
        task = _task_service().create_task(_actor(username, principal), title, description, frequency)
    except DomainError as exc:
        _fail(exc)
    click.echo(f"Created task #{task.id}.")


@tasks.command("edit")
@with_actor
@click.argument("task_id", type=int)
@click.option("--title", required=True)
@click.option("--description", default="")
@click.option("--frequency", type=FREQUENCIES, required=True)
def edit_task(username, principal, task_id, title, description, frequency):
    """Change title, description or frequency."""
    try:
        _task_service().update_task(_actor(username, principal), task_id, title, description, frequency)
    except DomainError as exc:
        _fail(exc)
    click.echo(f"Updated task #{task_id}.")


@tasks.command("done")
@with_actor
@click.argument("task_id", type=int)
@click.option("--comment", default=None)
@click.option("--evidence", "evidence_ref", default=None, help="Reference to an uploaded photo")
def complete_task(username, principal, task_id, comment, evidence_ref):
    """Mark a task done."""
    try:
        _task_service().mark_done(_actor(username, principal), task_id, comment, evidence_ref)
    except DomainError as exc:
        _fail(exc)
    click.echo(f"Task #{task_id} marked done.")


@tasks.command("pin")
@click.argument("task_id", type=int)
@click.option("--off", is_flag=True, help="Unpin instead")
def pin_task(task_id: int, off: bool):
    """Pin a task to the top of the list."""
    try:
        _task_service().set_pinned(task_id, not off)
    except DomainError as exc:
        _fail(exc)
    click.echo(f"Task #{task_id} {'unpinned' if off else 'pinned'}.")


@tasks.command("history")
@click.argument("task_id", type=int)
@click.option("--newest-first", is_flag=True)
def task_history(task_id: int, newest_first: bool):
    """Show the ledger of one task."""
    entries = _task_service().get_task_history(task_id, newest_first)
    if not entries:
        click.echo("No history available.")
        return
    for entry in entries:
        click.echo(f"{entry.timestamp:%d/%m/%Y %H:%M} {entry.username}: {entry.summary}")


@tasks.command("prefer")
@click.argument("username")
@click.argument("task_id", type=int)
@click.argument("preference", type=click.Choice([item.value for item in TaskPreference]))
def prefer_task(username: str, task_id: int, preference: str):
    """Record how an assistant feels about a task."""
    try:
        _task_service().set_task_preference(username, task_id, preference)
    except DomainError as exc:
        _fail(exc)
    click.echo("Preference saved.")


@tasks.command("habits")
@click.argument("username")
def habits(username: str):
    """Completion summary for an assistant."""
    summary = _task_service().get_assistant_habits(username)
    click.echo(
        f"{summary.username}: {summary.completed_tasks} completions, "
        f"{summary.on_time_tasks} on time ({summary.on_time_percentage}%), {summary.total_tasks} tasks "
        f"({summary.daily_tasks} daily, {summary.weekly_tasks} weekly, {summary.monthly_tasks} monthly)"
    )


@main.command()
@click.option("--action", type=click.Choice([item.value for item in AuditAction]), default=None)
@click.option("--search", default=None)
def audit(action: str | None, search: str | None):
    """Show the audit log, newest first."""
    filters = AuditFilters(action=AuditAction(action) if action else None, search=search)
    for entry in _task_service().get_audit_log(filters):
        click.echo(
            f"{entry.timestamp:%d/%m/%Y %H:%M} [{entry.action.value}] "
            f"#{entry.task_id} {entry.username}: {entry.summary}"
        )


@main.group()
def overtime():
    """Overtime time bank."""


@overtime.command("log")
@click.argument("username")
@click.argument("minutes", type=int)
@click.option("--date", "entry_date", required=True, help="YYYY-MM-DD")
@click.option("--comment", default="")
@click.option("--use", "is_use", is_flag=True, help="Record time taken off instead of added")
def log_overtime(username, minutes, entry_date, comment, is_use):
    """Add (or use) overtime minutes."""
    try:
        _overtime_service().log_overtime(username, entry_date, minutes, comment, not is_use)
    except DomainError as exc:
        _fail(exc)
    click.echo("Overtime used." if is_use else "Overtime added.")


@overtime.command("edit-latest")
@click.argument("username")
@click.option("--minutes", type=int, default=None)
@click.option("--date", "entry_date", default=None, help="YYYY-MM-DD")
@click.option("--comment", default=None)
@click.option("--direction", type=click.Choice(["add", "use"]), default=None)
def edit_latest(username, minutes, entry_date, comment, direction):
    """Correct the most recent entry of a user."""
    service = _overtime_service()
    current = latest_entry(service.get_entries(username))
    if current is None:
        click.echo(f"Error: No overtime entries recorded for {username}", err=True)
        sys.exit(1)

    changes = {}
    if minutes is not None:
        changes["minutes"] = minutes
    if entry_date is not None:
        changes["date"] = entry_date
    if comment is not None:
        changes["comment"] = comment
    if direction is not None:
        changes["is_add"] = direction == "add"
    try:
        service.edit_latest_entry(username, replace(current, **changes))
    except DomainError as exc:
        _fail(exc)
    click.echo("Latest entry updated.")


@overtime.command("show")
@click.argument("username")
def show_overtime(username: str):
    """Print balance and entries of a user."""
    service = _overtime_service()
    totals = service.get_totals(username)
    click.echo(f"{totals.total_days} days {totals.total_hours}h {totals.total_minutes}m")
    for entry in service.get_entries(username):
        sign = "+" if entry.is_add else "-"
        click.echo(f"{format_overtime_date(entry.date)} {sign}{entry.minutes}m {entry.comment}")


if __name__ == "__main__":
    main()
