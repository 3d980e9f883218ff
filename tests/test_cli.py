from __future__ import annotations

from datetime import date, timedelta

import pytest
from click.testing import CliRunner

from officeflow.main import main

pytestmark = pytest.mark.usefixtures("database")

TODAY = date.today().isoformat()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_task_lifecycle(runner: CliRunner) -> None:
    result = runner.invoke(main, ["tasks", "add", "--user", "maria", "Sterilise tools", "--frequency", "weekly"])
    assert result.exit_code == 0, result.output
    assert "Created task #1." in result.output

    result = runner.invoke(main, ["tasks", "done", "--user", "anna", "1", "--comment", "all clean"])
    assert result.exit_code == 0, result.output

    listing = runner.invoke(main, ["tasks", "list"])
    assert "Sterilise tools" in listing.output
    assert "Weekly" in listing.output

    history = runner.invoke(main, ["tasks", "history", "1"])
    lines = history.output.strip().splitlines()
    assert "Task created" in lines[0]
    assert "Marked done with comment: all clean" in lines[1]


def test_unknown_task_reports_error(runner: CliRunner) -> None:
    result = runner.invoke(main, ["tasks", "done", "--user", "anna", "42"])
    assert result.exit_code == 1
    assert "Error: Task 42 does not exist" in result.output


def test_show_task(runner: CliRunner) -> None:
    runner.invoke(main, ["tasks", "add", "--user", "maria", "Order gloves", "--description", "size M"])
    runner.invoke(main, ["tasks", "done", "--user", "anna", "1"])

    result = runner.invoke(main, ["tasks", "show", "1"])
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[:2] == ["#1 Order gloves", "size M"]
    assert lines[2].startswith("Daily, ")
    assert lines[3].startswith("Last done ") and lines[3].endswith(" by anna")

    missing = runner.invoke(main, ["tasks", "show", "42"])
    assert missing.exit_code == 1
    assert "Error: Task 42 does not exist" in missing.output


def test_user_defaults_to_configured_user(runner: CliRunner) -> None:
    result = runner.invoke(main, ["tasks", "add", "Restock paper"])
    assert result.exit_code == 0, result.output

    audit = runner.invoke(main, ["audit", "--action", "created"])
    assert "maria: Task created: 'Restock paper' (daily)" in audit.output


def test_habits_show_on_time_percentage(runner: CliRunner) -> None:
    runner.invoke(main, ["tasks", "add", "Sterilise tools"])
    runner.invoke(main, ["tasks", "done", "--user", "anna", "1"])

    result = runner.invoke(main, ["tasks", "habits", "anna"])
    assert result.exit_code == 0, result.output
    assert "anna: 1 completions, 1 on time (100%), 1 tasks" in result.output


def test_overtime_flow(runner: CliRunner) -> None:
    assert runner.invoke(main, ["overtime", "log", "anna", "600", "--date", TODAY]).exit_code == 0
    assert runner.invoke(
        main, ["overtime", "log", "anna", "100", "--date", TODAY, "--comment", "dentist", "--use"]
    ).exit_code == 0

    shown = runner.invoke(main, ["overtime", "show", "anna"])
    assert shown.output.splitlines()[0] == "1 days 0h 20m"

    edited = runner.invoke(main, ["overtime", "edit-latest", "anna", "--minutes", "120"])
    assert edited.exit_code == 0, edited.output
    shown = runner.invoke(main, ["overtime", "show", "anna"])
    assert shown.output.splitlines()[0] == "1 days 0h 0m"


def test_overtime_rejects_future_date(runner: CliRunner) -> None:
    tomorrow = (date.today() + timedelta(days=1)).isoformat()
    result = runner.invoke(main, ["overtime", "log", "anna", "30", "--date", tomorrow, "--comment", "x"])
    assert result.exit_code == 1
    assert "future" in result.output


def test_edit_latest_without_entries(runner: CliRunner) -> None:
    result = runner.invoke(main, ["overtime", "edit-latest", "nobody", "--minutes", "5"])
    assert result.exit_code == 1
    assert "No overtime entries" in result.output
