"""
Batch Sender
Database module (single-file)

Provides:
- SQLAlchemy engine construction for the configured DATABASE_URL
- session factory bound to that engine
"""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker


def build_engine(database_url: str) -> Engine:
    url = make_url(database_url)
    connect_args = {}

    if url.get_backend_name() == "sqlite":
        # store may be written from more than one thread
        connect_args["check_same_thread"] = False
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )
