"""Annotation repository: the ``comments`` and ``replies`` tables.

These are storage primitives only.  Input validation lives in
:mod:`backend.review.mutations`; the carry-over rule lives in
:mod:`backend.review.carryover`.

Mutations of an existing comment are single SQL statements (the toggle uses
``UPDATE ... RETURNING``) so SQLite serialises concurrent writers and no
read-modify-write happens in Python.
"""

from __future__ import annotations

import sqlite3
import uuid
from time import time
from typing import Optional

from backend.db.connection import repository_errors
from backend.db.models import Comment, Reply
from backend.errors import NotFoundError

_COMMENT_COLUMNS = (
    "c.id, c.version_id, c.page, c.x, c.y, c.author_name, c.author_email, "
    "c.body, c.resolved, c.created_at"
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_comment(row: sqlite3.Row) -> Comment:
    return Comment(
        id=row["id"],
        version_id=row["version_id"],
        page=row["page"],
        x=row["x"],
        y=row["y"],
        author_name=row["author_name"],
        author_email=row["author_email"],
        body=row["body"],
        resolved=bool(row["resolved"]),
        created_at=row["created_at"],
    )


def _row_to_reply(row: sqlite3.Row) -> Reply:
    return Reply(
        id=row["id"],
        comment_id=row["comment_id"],
        author_name=row["author_name"],
        author_email=row["author_email"],
        body=row["body"],
        created_at=row["created_at"],
    )


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

def insert_comment(
    conn: sqlite3.Connection,
    version_id: str,
    page: str,
    x: float,
    y: float,
    author_name: str,
    body: str,
    author_email: str = "",
) -> Comment:
    """Insert an unresolved comment authored on *version_id* and return it."""
    cid = str(uuid.uuid4())
    now = int(time())
    with repository_errors("insert comment"), conn:
        conn.execute(
            """
            INSERT INTO comments
                (id, version_id, page, x, y, author_name, author_email, body, resolved, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, 0, ?)
            """,
            (cid, version_id, page, x, y, author_name, author_email, body, now),
        )
    return require_comment(conn, cid)


def get_comment(conn: sqlite3.Connection, comment_id: str) -> Optional[Comment]:
    """Fetch a single comment by id.  Returns ``None`` if not found."""
    with repository_errors("get comment"):
        row = conn.execute(
            f"SELECT {_COMMENT_COLUMNS} FROM comments c WHERE c.id = ?",
            (comment_id,),
        ).fetchone()
    return _row_to_comment(row) if row else None


def require_comment(conn: sqlite3.Connection, comment_id: str) -> Comment:
    """Fetch a single comment by id.

    Raises:
        NotFoundError: If *comment_id* is unknown.
    """
    comment = get_comment(conn, comment_id)
    if comment is None:
        raise NotFoundError(f"Comment not found: {comment_id!r}")
    return comment


def atomic_toggle_resolved(conn: sqlite3.Connection, comment_id: str) -> Optional[bool]:
    """Flip ``resolved`` in one statement and return the new value.

    Returns ``None`` when no comment has *comment_id*.
    """
    with repository_errors("toggle resolved"), conn:
        row = conn.execute(
            "UPDATE comments SET resolved = NOT resolved WHERE id = ? RETURNING resolved",
            (comment_id,),
        ).fetchone()
    return bool(row[0]) if row else None


def update_position(conn: sqlite3.Connection, comment_id: str, x: float, y: float) -> bool:
    """Set the pin coordinates.  Returns ``False`` when the comment is unknown."""
    with repository_errors("update position"), conn:
        cur = conn.execute(
            "UPDATE comments SET x = ?, y = ? WHERE id = ?",
            (x, y, comment_id),
        )
    return cur.rowcount > 0


def query_unresolved_up_to(
    conn: sqlite3.Connection, project_id: str, seq: int
) -> list[Comment]:
    """Unresolved comments authored on any version of *project_id* with seq <= *seq*."""
    with repository_errors("query unresolved comments"):
        rows = conn.execute(
            f"""
            SELECT {_COMMENT_COLUMNS}
            FROM   comments c
            JOIN   versions v ON v.id = c.version_id
            WHERE  c.resolved = 0
              AND  v.project_id = ?
              AND  v.seq <= ?
            ORDER  BY c.created_at ASC, c.rowid ASC
            """,
            (project_id, seq),
        ).fetchall()
    return [_row_to_comment(r) for r in rows]


def query_by_version(conn: sqlite3.Connection, version_id: str) -> list[Comment]:
    """Every comment authored on *version_id*, resolved or not."""
    with repository_errors("query comments by version"):
        rows = conn.execute(
            f"""
            SELECT {_COMMENT_COLUMNS}
            FROM   comments c
            WHERE  c.version_id = ?
            ORDER  BY c.created_at ASC, c.rowid ASC
            """,
            (version_id,),
        ).fetchall()
    return [_row_to_comment(r) for r in rows]


# ---------------------------------------------------------------------------
# Replies
# ---------------------------------------------------------------------------

def insert_reply(
    conn: sqlite3.Connection,
    comment_id: str,
    author_name: str,
    body: str,
    author_email: str = "",
) -> Reply:
    """Append a reply to *comment_id* and return it."""
    rid = str(uuid.uuid4())
    now = int(time())
    with repository_errors("insert reply"), conn:
        conn.execute(
            """
            INSERT INTO replies (id, comment_id, author_name, author_email, body, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (rid, comment_id, author_name, author_email, body, now),
        )
        row = conn.execute("SELECT * FROM replies WHERE id = ?", (rid,)).fetchone()
    return _row_to_reply(row)


def list_replies(conn: sqlite3.Connection, comment_id: str) -> list[Reply]:
    """Replies to *comment_id*, oldest first (insertion order breaks ties)."""
    with repository_errors("list replies"):
        rows = conn.execute(
            """
            SELECT * FROM replies
            WHERE  comment_id = ?
            ORDER  BY created_at ASC, rowid ASC
            """,
            (comment_id,),
        ).fetchall()
    return [_row_to_reply(r) for r in rows]
