"""
File: batch_sender/services/outcome_store.py

Project: Batch Sender

Purpose:
Durable, append-only record of dispatch attempts plus the aggregate
summary computed over them.

Responsibilities:
- Ensure the attempts table exists (idempotent, safe on every startup)
- Append one immutable row per attempt, one transaction per insert
- Compute the Summary from scratch on every call (never cached)

IMPORTANT:
- Every SQLAlchemy failure surfaces as StoreError; nothing is retried here
- Statements are built with the ORM / expression language only
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import case, func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from batch_sender.db import build_engine, build_session_factory
from batch_sender.errors import StoreError
from batch_sender.models import Base, MessageAttempt, MessageKind

logger = logging.getLogger("outcome_store")


@dataclass(frozen=True)
class AttemptRecord:
    kind: MessageKind
    succeeded: bool
    duration_ms: int
    created_at: Optional[datetime]


@dataclass(frozen=True)
class Summary:
    total: int
    text_count: int
    media_count: int
    avg_duration_ms: float
    success_rate_pct: float

    @staticmethod
    def empty() -> "Summary":
        return Summary(
            total=0,
            text_count=0,
            media_count=0,
            avg_duration_ms=0.0,
            success_rate_pct=0.0,
        )


class OutcomeStore:
    def __init__(self, engine: Engine, session_factory: Optional[sessionmaker] = None) -> None:
        self._engine = engine
        self._session_factory = session_factory or build_session_factory(engine)
        self._write_lock = threading.Lock()

    @classmethod
    def from_url(cls, database_url: str) -> "OutcomeStore":
        try:
            engine = build_engine(database_url)
        except (SQLAlchemyError, OSError) as exc:
            raise StoreError(f"Cannot open database {database_url}: {exc}") from exc
        return cls(engine)

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------
    def ensure_schema(self) -> None:
        try:
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as exc:
            raise StoreError(f"Cannot create attempts table: {exc}") from exc
        logger.info("Attempts table verified.")

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def record(self, kind: MessageKind, succeeded: bool, duration_ms: int) -> None:
        if duration_ms < 0:
            raise ValueError(f"duration_ms must be >= 0, got {duration_ms}")

        kind_value = MessageKind(kind).value
        row = MessageAttempt(
            kind=kind_value,
            success=bool(succeeded),
            duration_ms=int(duration_ms),
        )

        with self._write_lock:
            session = self._session_factory()
            try:
                session.add(row)
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                raise StoreError(f"Cannot record {kind_value} attempt: {exc}") from exc
            finally:
                session.close()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def summarize(self) -> Summary:
        session = self._session_factory()
        try:
            total, text_count, media_count, duration_sum, success_count = (
                session.query(
                    func.count(MessageAttempt.id),
                    func.sum(case((MessageAttempt.kind == MessageKind.TEXT.value, 1), else_=0)),
                    func.sum(case((MessageAttempt.kind == MessageKind.MEDIA.value, 1), else_=0)),
                    func.sum(MessageAttempt.duration_ms),
                    func.sum(case((MessageAttempt.success.is_(True), 1), else_=0)),
                ).one()
            )
        except SQLAlchemyError as exc:
            raise StoreError(f"Cannot summarize attempts: {exc}") from exc
        finally:
            session.close()

        total = int(total or 0)
        if total == 0:
            return Summary.empty()

        return Summary(
            total=total,
            text_count=int(text_count or 0),
            media_count=int(media_count or 0),
            avg_duration_ms=round(int(duration_sum or 0) / total, 2),
            success_rate_pct=round(int(success_count or 0) / total * 100, 2),
        )

    def list_attempts(self) -> list[AttemptRecord]:
        session = self._session_factory()
        try:
            rows = session.query(MessageAttempt).order_by(MessageAttempt.id.asc()).all()
        except SQLAlchemyError as exc:
            raise StoreError(f"Cannot read attempts: {exc}") from exc
        finally:
            session.close()

        return [
            AttemptRecord(
                kind=MessageKind(r.kind),
                succeeded=bool(r.success),
                duration_ms=r.duration_ms,
                created_at=r.created_at,
            )
            for r in rows
        ]

    def close(self) -> None:
        self._engine.dispose()
