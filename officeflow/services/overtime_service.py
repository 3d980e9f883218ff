from __future__ import annotations

import logging
import time
from datetime import date, datetime
from typing import Callable, Iterable

from officeflow.domain.entities import OvertimeEntry, OvertimeTotals
from officeflow.domain.errors import StatePreconditionError, ValidationError
from officeflow.domain.overtime import (
    LedgerIndex,
    combine_totals,
    compute_totals,
    parse_entry_date,
    validate_overtime,
)
from officeflow.infra.repository import OvertimeRepository

logger = logging.getLogger(__name__)


class OvertimeService:
    def __init__(
        self,
        repo: OvertimeRepository,
        clock: Callable[[], datetime] = datetime.now,
        timestamp_source: Callable[[], int] = time.time_ns,
    ) -> None:
        self._repo = repo
        self._clock = clock
        self._timestamp_source = timestamp_source

    def get_entries(self, username: str) -> list[OvertimeEntry]:
        """Entries for a username, most recent first."""
        entries = self._repo.list_entries(username)
        return sorted(entries, key=lambda entry: entry.timestamp, reverse=True)

    def get_totals(self, username: str) -> OvertimeTotals:
        return compute_totals(self._repo.list_entries(username))

    def get_team_totals(self, usernames: Iterable[str] | None = None) -> OvertimeTotals:
        if usernames is None:
            usernames = self._repo.list_usernames()
        return combine_totals(self.get_totals(username) for username in usernames)

    def log_overtime(
        self,
        username: str,
        entry_date: date | str,
        minutes: int,
        comment: str,
        is_add: bool = True,
    ) -> OvertimeEntry:
        username = self._require_username(username)
        entry_date = parse_entry_date(entry_date)
        comment = validate_overtime(entry_date, minutes, comment, self._today())

        index = LedgerIndex.from_entries(self._repo.list_entries(username))
        head = index.head(username)
        timestamp = self._timestamp_source()
        if head is not None and timestamp <= head.timestamp:
            timestamp = head.timestamp + 1

        entry = self._repo.add_entry(
            OvertimeEntry(
                username=username,
                date=entry_date,
                minutes=minutes,
                comment=comment,
                is_add=bool(is_add),
                timestamp=timestamp,
            )
        )
        logger.info(
            "Overtime %s %s min for %s on %s",
            "added" if entry.is_add else "used",
            entry.minutes,
            username,
            entry.date.isoformat(),
        )
        return entry

    def edit_latest_entry(self, username: str, updated: OvertimeEntry) -> OvertimeEntry:
        username = self._require_username(username)
        if updated.username and updated.username != username:
            raise ValidationError("Entry belongs to a different user")

        entry_date = parse_entry_date(updated.date)
        comment = validate_overtime(
            entry_date, updated.minutes, updated.comment, self._today(), require_comment=True
        )

        index = LedgerIndex.from_entries(self._repo.list_entries(username))
        corrected = index.replace(
            OvertimeEntry(
                username=username,
                date=entry_date,
                minutes=updated.minutes,
                comment=comment,
                is_add=bool(updated.is_add),
                timestamp=updated.timestamp,
            )
        )

        stored = self._repo.update_entry(corrected)
        if stored is None:
            raise StatePreconditionError("Latest overtime entry no longer exists")
        logger.info("Latest overtime entry of %s corrected", username)
        return stored

    def _today(self) -> date:
        return self._clock().date()

    @staticmethod
    def _require_username(username: str) -> str:
        cleaned = (username or "").strip()
        if not cleaned:
            raise ValidationError("Username is required")
        return cleaned
