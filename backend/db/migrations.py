"""Database initialisation.

``init_db(conn)`` is idempotent: safe to call on an existing database.
"""

from __future__ import annotations

import sqlite3

from backend.config import settings


def _read_schema() -> str:
    """Load schema.sql bundled with the package."""
    return settings.schema_path.read_text(encoding="utf-8")


def init_db(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes.

    Every DDL statement in ``schema.sql`` uses ``IF NOT EXISTS``, so calling
    this on an initialised database changes nothing.

    Args:
        conn: An open, configured SQLite connection.
    """
    # executescript() issues an implicit COMMIT before running.
    conn.executescript(_read_schema())
