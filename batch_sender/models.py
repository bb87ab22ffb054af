"""
File: batch_sender/models.py

Project: Batch Sender

Purpose:
SQLAlchemy ORM model for the single append-only attempts table.

Design principles:
- One row per dispatch attempt, written once, never updated or deleted
- No business logic in models
- created_at is assigned by the database at insert time
"""

from __future__ import annotations

from enum import Enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Integer,
    Text,
    func,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class MessageKind(str, Enum):
    TEXT = "text"
    MEDIA = "media"


# ---------------------------------------------------------------------
# Message attempt (immutable)
# ---------------------------------------------------------------------
class MessageAttempt(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    kind = Column(Text, nullable=False)
    success = Column(Boolean, nullable=False)
    duration_ms = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint(
            "kind IN ('text', 'media')",
            name="ck_messages_kind",
        ),
        CheckConstraint(
            "duration_ms >= 0",
            name="ck_messages_duration",
        ),
    )
