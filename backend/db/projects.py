"""CRUD operations for the ``projects`` table."""

from __future__ import annotations

import sqlite3
import uuid
from time import time
from typing import Optional

from backend.db.connection import repository_errors
from backend.db.models import PROJECT_STATUSES, Project
from backend.errors import NotFoundError, ValidationError


_SELECT_WITH_COUNT = """
    SELECT p.id, p.name, p.status, p.created_at, p.updated_at,
           COUNT(v.id) AS version_count
    FROM   projects p
    LEFT JOIN versions v ON v.project_id = p.id
"""


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_project(row: sqlite3.Row) -> Project:
    return Project(
        id=row["id"],
        name=row["name"],
        status=row["status"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        version_count=row["version_count"],
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def create_project(conn: sqlite3.Connection, name: str) -> Project:
    """Insert a new project in ``draft`` status and return it.

    Raises:
        ValidationError: If *name* is blank or already taken.
    """
    if not name or not name.strip():
        raise ValidationError("project name is required")

    pid = str(uuid.uuid4())
    now = int(time())
    with repository_errors("create project"):
        try:
            with conn:
                conn.execute(
                    """
                    INSERT INTO projects (id, name, status, created_at, updated_at)
                    VALUES (?, ?, 'draft', ?, ?)
                    """,
                    (pid, name, now, now),
                )
        except sqlite3.IntegrityError as exc:
            raise ValidationError(f"project {name!r} already exists") from exc

    return get_project(conn, pid)


def get_project(conn: sqlite3.Connection, project_id: str) -> Project:
    """Fetch a project by id.

    Raises:
        NotFoundError: If no such project exists.
    """
    with repository_errors("get project"):
        row = conn.execute(
            _SELECT_WITH_COUNT + " WHERE p.id = ? GROUP BY p.id", (project_id,)
        ).fetchone()
    if row is None:
        raise NotFoundError(f"Project not found: {project_id!r}")
    return _row_to_project(row)


def get_project_by_name(conn: sqlite3.Connection, name: str) -> Optional[Project]:
    """Fetch a project by its unique name.  Returns ``None`` if not found."""
    with repository_errors("get project"):
        row = conn.execute(
            _SELECT_WITH_COUNT + " WHERE p.name = ? GROUP BY p.id", (name,)
        ).fetchone()
    return _row_to_project(row) if row else None


def list_projects(conn: sqlite3.Connection) -> list[Project]:
    """Return all projects with their version counts, most recently updated first."""
    with repository_errors("list projects"):
        rows = conn.execute(
            _SELECT_WITH_COUNT
            + " GROUP BY p.id ORDER BY p.updated_at DESC, p.created_at DESC"
        ).fetchall()
    return [_row_to_project(r) for r in rows]


def update_project_status(conn: sqlite3.Connection, project_id: str, status: str) -> Project:
    """Move a project to *status* and refresh ``updated_at``.

    Raises:
        ValidationError: If *status* is not one of ``PROJECT_STATUSES``.
        NotFoundError: If the project does not exist.
    """
    if status not in PROJECT_STATUSES:
        raise ValidationError(
            f"invalid status {status!r}: must be one of {', '.join(PROJECT_STATUSES)}"
        )
    with repository_errors("update project status"), conn:
        cur = conn.execute(
            "UPDATE projects SET status = ?, updated_at = ? WHERE id = ?",
            (status, int(time()), project_id),
        )
    if cur.rowcount == 0:
        raise NotFoundError(f"Project not found: {project_id!r}")
    return get_project(conn, project_id)
