"""
Schema inspection and additive migrations for the hosted database.

Only additive changes live here (new columns, the playlists table). Nothing
in this module drops or rewrites existing data.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

# Columns the child profile form writes that older databases lack
CHILD_PROFILE_COLUMNS: Dict[str, str] = {
    "icon": "VARCHAR(255)",
    "additional_themes": "TEXT",
    "theme": "VARCHAR(100)",
}

CHILD_PLAYLISTS_DDL = """
CREATE TABLE IF NOT EXISTS child_playlists (
    child_id UUID PRIMARY KEY REFERENCES children(id),
    videos JSONB NOT NULL,
    updated_at TIMESTAMP DEFAULT NOW()
)
"""

_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*$")


def _check_identifier(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return name


def list_tables(engine: Engine, schema: str = "public") -> List[str]:
    return sorted(inspect(engine).get_table_names(schema=schema))


def table_columns(engine: Engine, table: str, schema: str = "public") -> Dict[str, str]:
    """Return {column_name: type} for a table."""
    return {
        col["name"]: str(col["type"])
        for col in inspect(engine).get_columns(table, schema=schema)
    }


def ensure_columns(
    session: Session,
    table: str,
    columns: Dict[str, str],
    schema: str = "public",
) -> List[str]:
    """
    Add any missing columns to `table`.

    Returns the names of the columns that did not exist before.
    """
    table = _check_identifier(table)
    existing = set(table_columns(session.get_bind(), table, schema))
    added: List[str] = []

    for name, ddl_type in columns.items():
        name = _check_identifier(name)
        if name in existing:
            continue
        session.execute(text(f"ALTER TABLE {table} ADD COLUMN {name} {ddl_type}"))
        logger.info("Added column %s.%s (%s)", table, name, ddl_type)
        added.append(name)

    return added


def ensure_child_playlists_table(session: Session, schema: str = "public") -> bool:
    """Create `child_playlists` if missing. Returns True when it was created."""
    existed = "child_playlists" in list_tables(session.get_bind(), schema)
    if not existed:
        session.execute(text(CHILD_PLAYLISTS_DDL))
        logger.info("Created table child_playlists")
    return not existed
