from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .enums import AuditAction, TaskFrequency


@dataclass(frozen=True)
class TaskFilters:
    search: str | None = None
    frequency: Optional[TaskFrequency] = None


@dataclass(frozen=True)
class AuditFilters:
    action: Optional[AuditAction] = None
    search: str | None = None
