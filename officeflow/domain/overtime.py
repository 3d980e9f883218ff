"""Overtime ledger (time bank) rules.

Entries are append-mostly: the only permitted mutation is a correction of
the latest entry of a username, where "latest" means the highest creation
timestamp. Balances are folded from signed minutes and shown in days of a
fixed eight-hour workday.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Iterable

from .entities import MINUTES_PER_HOUR, WORKDAY_MINUTES, OvertimeEntry, OvertimeTotals
from .errors import StatePreconditionError, ValidationError


def parse_entry_date(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (AttributeError, ValueError) as exc:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD") from exc


def format_overtime_date(value: date) -> str:
    return value.strftime("%d %m %Y")


def validate_overtime(
    entry_date: date,
    minutes: int,
    comment: str | None,
    today: date,
    require_comment: bool = False,
) -> str:
    """Check a log or edit payload and return the cleaned comment.

    New entries may go without a comment; corrections must say why.
    """
    if isinstance(minutes, bool) or not isinstance(minutes, int):
        raise ValidationError("Minutes must be a whole number")
    if minutes <= 0:
        raise ValidationError("Minutes must be greater than zero")
    if entry_date > today:
        raise ValidationError("Cannot log overtime for future dates")
    cleaned = (comment or "").strip()
    if require_comment and not cleaned:
        raise ValidationError("Comment is required")
    return cleaned


def latest_entry(entries: Iterable[OvertimeEntry]) -> OvertimeEntry | None:
    return max(entries, key=lambda entry: entry.timestamp, default=None)


@dataclass
class LedgerIndex:
    """Entries keyed by (username, timestamp) with a head timestamp per username."""

    _entries: dict[tuple[str, int], OvertimeEntry] = field(default_factory=dict)
    _heads: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_entries(cls, entries: Iterable[OvertimeEntry]) -> "LedgerIndex":
        index = cls()
        for entry in entries:
            index.append(entry)
        return index

    def append(self, entry: OvertimeEntry) -> None:
        self._entries[(entry.username, entry.timestamp)] = entry
        head = self._heads.get(entry.username)
        if head is None or entry.timestamp > head:
            self._heads[entry.username] = entry.timestamp

    def head(self, username: str) -> OvertimeEntry | None:
        timestamp = self._heads.get(username)
        if timestamp is None:
            return None
        return self._entries[(username, timestamp)]

    def entries_for(self, username: str) -> list[OvertimeEntry]:
        return sorted(
            (entry for (owner, _), entry in self._entries.items() if owner == username),
            key=lambda entry: entry.timestamp,
        )

    def require_head(self, username: str, timestamp: int) -> OvertimeEntry:
        head = self.head(username)
        if head is None:
            raise StatePreconditionError(f"No overtime entries recorded for {username}")
        if head.timestamp != timestamp:
            raise StatePreconditionError("Only the latest overtime entry can be edited")
        return head

    def replace(self, entry: OvertimeEntry) -> OvertimeEntry:
        current = self.require_head(entry.username, entry.timestamp)
        updated = replace(
            current,
            date=entry.date,
            minutes=entry.minutes,
            comment=entry.comment,
            is_add=entry.is_add,
        )
        self._entries[(entry.username, entry.timestamp)] = updated
        return updated


def signed_minutes(entry: OvertimeEntry) -> int:
    return entry.minutes if entry.is_add else -entry.minutes


def balance_minutes(entries: Iterable[OvertimeEntry]) -> int:
    return sum(signed_minutes(entry) for entry in entries)


def split_balance(balance: int) -> OvertimeTotals:
    """Decompose minutes into workdays, hours and minutes.

    Negative balances are split by magnitude and every part carries the
    minus sign, e.g. -500 becomes (-1, 0, -20).
    """
    sign = -1 if balance < 0 else 1
    days, remainder = divmod(abs(balance), WORKDAY_MINUTES)
    hours, minutes = divmod(remainder, MINUTES_PER_HOUR)
    return OvertimeTotals(
        total_days=sign * days,
        total_hours=sign * hours,
        total_minutes=sign * minutes,
    )


def compute_totals(entries: Iterable[OvertimeEntry]) -> OvertimeTotals:
    return split_balance(balance_minutes(entries))


def combine_totals(totals: Iterable[OvertimeTotals]) -> OvertimeTotals:
    return split_balance(sum(item.balance_minutes for item in totals))


def totals_as_hours(totals: OvertimeTotals) -> float:
    return totals.balance_minutes / MINUTES_PER_HOUR
