from __future__ import annotations

from enum import StrEnum


class TaskFrequency(StrEnum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class UrgencyLevel(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AuditAction(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    COMPLETED = "completed"


class TaskPreference(StrEnum):
    PREFERRED = "preferred"
    NEUTRAL = "neutral"
    HATED = "hated"
