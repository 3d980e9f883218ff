from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from .db import Base


def local_now() -> datetime:
    return datetime.now()


class TaskModel(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    frequency = Column(String(20), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=local_now)
    created_by = Column(String(120), nullable=False)
    updated_at = Column(DateTime, nullable=False, default=local_now, onupdate=local_now)
    last_completed = Column(DateTime, nullable=True)
    is_pinned = Column(Boolean, nullable=False, default=False)
    completion_comment = Column(Text, nullable=True)
    completed_by = Column(String(120), nullable=True)
    completed_by_username = Column(String(120), nullable=True)
    evidence_ref = Column(String(500), nullable=True)


class OvertimeEntryModel(Base):
    __tablename__ = "overtime_entries"
    __table_args__ = (UniqueConstraint("username", "timestamp", name="uq_overtime_username_timestamp"),)

    id = Column(Integer, primary_key=True)
    username = Column(String(120), nullable=False, index=True)
    entry_date = Column(Date, nullable=False)
    minutes = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False)
    is_add = Column(Boolean, nullable=False, default=True)
    timestamp = Column(BigInteger, nullable=False)


class AuditEntryModel(Base):
    __tablename__ = "audit_log"

    id = Column(Integer, primary_key=True)
    action = Column(String(20), nullable=False, index=True)
    username = Column(String(120), nullable=False)
    principal = Column(String(200), nullable=False)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    timestamp = Column(DateTime, nullable=False)
    summary = Column(Text, nullable=False)
    completion_comment = Column(Text, nullable=True)
    evidence_ref = Column(String(500), nullable=True)
    completed_on_time = Column(Boolean, nullable=True)


class TaskPreferenceModel(Base):
    __tablename__ = "task_preferences"

    username = Column(String(120), primary_key=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True)
    preference = Column(String(20), nullable=False)
