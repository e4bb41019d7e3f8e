"""Operations on the ``versions`` table.

A version is an immutable, sequence-numbered snapshot of a project's pages.
The sequence number is assigned inside the INSERT itself so two concurrent
publishes can never receive the same ``seq``.
"""

from __future__ import annotations

import sqlite3
import uuid
from time import time
from typing import Optional

from backend.db.connection import repository_errors
from backend.db.models import Version
from backend.db.projects import get_project
from backend.errors import NotFoundError


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_version(row: sqlite3.Row) -> Version:
    return Version(
        id=row["id"],
        project_id=row["project_id"],
        seq=row["seq"],
        created_at=row["created_at"],
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def create_version(
    conn: sqlite3.Connection, project_id: str, version_id: Optional[str] = None
) -> Version:
    """Append a new version to *project_id* with the next sequence number.

    Pass *version_id* when the version's files were stored under that id
    before the row is created.

    Raises:
        NotFoundError: If the project does not exist.
    """
    get_project(conn, project_id)

    vid = version_id or str(uuid.uuid4())
    now = int(time())
    with repository_errors("create version"), conn:
        conn.execute(
            """
            INSERT INTO versions (id, project_id, seq, created_at)
            SELECT ?, ?, COALESCE(MAX(seq), 0) + 1, ?
            FROM   versions
            WHERE  project_id = ?
            """,
            (vid, project_id, now, project_id),
        )
        conn.execute(
            "UPDATE projects SET updated_at = ? WHERE id = ?", (now, project_id)
        )

    return get_version(conn, vid)


def get_version(conn: sqlite3.Connection, version_id: str) -> Version:
    """Fetch a single version.

    Raises:
        NotFoundError: If *version_id* is unknown.
    """
    with repository_errors("get version"):
        row = conn.execute(
            "SELECT * FROM versions WHERE id = ?", (version_id,)
        ).fetchone()
    if row is None:
        raise NotFoundError(f"Version not found: {version_id!r}")
    return _row_to_version(row)


def get_latest_version(conn: sqlite3.Connection, project_id: str) -> Version:
    """Return the version with the highest ``seq`` in *project_id*.

    Raises:
        NotFoundError: If the project has no versions yet.
    """
    with repository_errors("get latest version"):
        row = conn.execute(
            "SELECT * FROM versions WHERE project_id = ? ORDER BY seq DESC LIMIT 1",
            (project_id,),
        ).fetchone()
    if row is None:
        raise NotFoundError(f"Project {project_id!r} has no versions")
    return _row_to_version(row)


def list_versions(conn: sqlite3.Connection, project_id: str) -> list[Version]:
    """Return every version of *project_id*, newest first."""
    with repository_errors("list versions"):
        rows = conn.execute(
            "SELECT * FROM versions WHERE project_id = ? ORDER BY seq DESC",
            (project_id,),
        ).fetchall()
    return [_row_to_version(r) for r in rows]
