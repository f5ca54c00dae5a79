# aiaio_core/db/database.py
from __future__ import annotations

from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from ..config import get_settings
from ..errors import ConfigurationError

"""
aiaio_core.db.database
======================

Direct Postgres access through SQLAlchemy.

Day-to-day scripts go through the REST client (`db.client`). This module is
only for what the REST API cannot do: inspecting `information_schema` and
running DDL (adding columns, creating the playlists table).

Environment variables
---------------------
- DATABASE_URL:
    SQLAlchemy URL of the hosted Postgres instance, e.g.
    postgresql+psycopg2://postgres:<password>@db.<project>.supabase.co:5432/postgres
"""

# Engine and SessionLocal are created lazily
_engine: Engine | None = None
SessionLocal = None


def get_db_engine(echo: bool = False) -> Engine:
    """
    Return (creating it on first use) the global SQLAlchemy engine.

    Raises
    ------
    ConfigurationError
        If DATABASE_URL is not configured.
    """
    global _engine, SessionLocal

    if _engine is None:
        database_url = get_settings().database_url
        if not database_url:
            raise ConfigurationError("DATABASE_URL is not set; schema tools need a direct Postgres connection")

        _engine = create_engine(database_url, echo=echo, future=True, pool_pre_ping=True)
        SessionLocal = sessionmaker(
            bind=_engine,
            autoflush=False,
            autocommit=False,
            future=True,
        )

    return _engine


@contextmanager
def get_db_session():
    """
    Context manager around a session: commit on success, rollback on error,
    always close.

    >>> with get_db_session() as session:
    ...     session.execute(text("SELECT 1"))
    """
    get_db_engine(echo=False)

    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
