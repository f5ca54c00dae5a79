"""Additive schema helpers, run against an in-memory SQLite database."""

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session

from aiaio_core.config import get_settings
from aiaio_core.db import database, schema
from aiaio_core.errors import ConfigurationError


@pytest.fixture
def engine():
    engine = create_engine("sqlite://")
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE children (id VARCHAR(36) PRIMARY KEY, name VARCHAR(100), theme VARCHAR(100))"))
    return engine


def test_ensure_columns_adds_only_missing(engine):
    with Session(engine) as session:
        added = schema.ensure_columns(session, "children", schema.CHILD_PROFILE_COLUMNS, schema="main")
        session.commit()

    assert added == ["icon", "additional_themes"]
    assert {"icon", "additional_themes", "theme"} <= set(schema.table_columns(engine, "children", "main"))

    with Session(engine) as session:
        assert schema.ensure_columns(session, "children", schema.CHILD_PROFILE_COLUMNS, schema="main") == []


def test_identifiers_are_checked(engine):
    with Session(engine) as session:
        with pytest.raises(ValueError):
            schema.ensure_columns(session, "children; DROP TABLE children", {"x": "TEXT"}, schema="main")
        with pytest.raises(ValueError):
            schema.ensure_columns(session, "children", {"bad name": "TEXT"}, schema="main")


def test_existing_playlists_table_is_left_alone(engine):
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE child_playlists (child_id VARCHAR(36) PRIMARY KEY, videos TEXT)"))

    with Session(engine) as session:
        assert schema.ensure_child_playlists_table(session, schema="main") is False
    assert schema.list_tables(engine, "main") == ["child_playlists", "children"]


def test_engine_requires_database_url(monkeypatch):
    monkeypatch.setattr(database, "_engine", None)
    monkeypatch.setenv("DATABASE_URL", "")
    get_settings.cache_clear()
    with pytest.raises(ConfigurationError):
        database.get_db_engine()
