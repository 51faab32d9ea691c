"""SQLAlchemy engine and sessions for the jobpilot store.

Profiles, jobs and resume generation records live in one database, SQLite
(``jobpilot.db`` at the repository root) unless ``DB_URL`` names another.
The engine is built on first use so the URL can be changed by tests before
anything connects.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker


class Base(DeclarativeBase):
    """Declarative base for the profile, job and resume tables."""


_engine: Engine | None = None
_SessionLocal: sessionmaker[Session] | None = None


def get_database_url() -> str:
    url = os.getenv("DB_URL")
    if url:
        return url
    db_path = Path(__file__).resolve().parents[3] / "jobpilot.db"
    return URL.create("sqlite", database=str(db_path)).render_as_string(hide_password=False)


def _get_engine() -> Engine:
    global _engine
    if _engine is None:
        url = get_database_url()
        # Background generation runs write from a worker thread
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        _engine = create_engine(url, future=True, connect_args=connect_args)

        from jobpilot.data.models import job, profile, resume  # noqa: F401

        Base.metadata.create_all(bind=_engine)
    return _engine


def init_db() -> None:
    """Connect and create any missing tables."""
    _get_engine()


def reset_engine() -> None:
    """Dispose the engine so the next session reconnects using the current ``DB_URL``."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


@contextmanager
def get_session() -> Iterator[Session]:
    """Yield a session that commits on success and rolls back on error."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(bind=_get_engine(), autoflush=False, expire_on_commit=False)
    session = _SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
