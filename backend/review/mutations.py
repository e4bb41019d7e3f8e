"""Validated write operations on comments and replies."""

from __future__ import annotations

import sqlite3

from backend.db import comments as comments_db
from backend.db.models import Comment, Reply
from backend.db.versions import get_version
from backend.errors import NotFoundError, ValidationError
from backend.logging_config import get_logger

logger = get_logger(__name__)

COORD_MIN = 0.0
COORD_MAX = 100.0


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _require_text(value: str, name: str) -> None:
    if not value or not value.strip():
        raise ValidationError(f"{name} is required")


def validate_position(x: float, y: float) -> None:
    """Reject coordinates outside ``[0, 100]`` (bounds inclusive, NaN rejected)."""
    for name, value in (("x", x), ("y", y)):
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise ValidationError(f"{name} must be a number")
        if not COORD_MIN <= value <= COORD_MAX:
            raise ValidationError("x and y must be between 0 and 100")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def create_comment(
    conn: sqlite3.Connection,
    version_id: str,
    page: str,
    x: float,
    y: float,
    author_name: str,
    body: str,
    author_email: str = "",
) -> Comment:
    """Pin a new, unresolved comment to *page* of *version_id*.

    Raises:
        ValidationError: Empty page or body, or coordinates out of range.
        NotFoundError: Unknown version.
    """
    _require_text(page, "page")
    _require_text(body, "body")
    validate_position(x, y)
    get_version(conn, version_id)

    comment = comments_db.insert_comment(
        conn, version_id, page, float(x), float(y), author_name, body, author_email
    )
    logger.info("Comment %s created on version %s page %r", comment.id, version_id, page)
    return comment


def create_reply(
    conn: sqlite3.Connection,
    comment_id: str,
    author_name: str,
    body: str,
    author_email: str = "",
) -> Reply:
    """Append a reply to *comment_id*.  The comment's ``resolved`` flag is untouched.

    Raises:
        ValidationError: Empty body.
        NotFoundError: Unknown comment.
    """
    _require_text(body, "body")
    comments_db.require_comment(conn, comment_id)

    reply = comments_db.insert_reply(conn, comment_id, author_name, body, author_email)
    logger.info("Reply %s added to comment %s", reply.id, comment_id)
    return reply


def toggle_resolve(conn: sqlite3.Connection, comment_id: str) -> bool:
    """Flip the comment between resolved and open; return the new state.

    Raises:
        NotFoundError: Unknown comment.
    """
    resolved = comments_db.atomic_toggle_resolved(conn, comment_id)
    if resolved is None:
        raise NotFoundError(f"Comment not found: {comment_id!r}")
    logger.info("Comment %s %s", comment_id, "resolved" if resolved else "reopened")
    return resolved


def move_comment(conn: sqlite3.Connection, comment_id: str, x: float, y: float) -> Comment:
    """Reposition a pin.  Only ``x`` and ``y`` change.

    Raises:
        ValidationError: Coordinates out of range.
        NotFoundError: Unknown comment.
    """
    validate_position(x, y)
    if not comments_db.update_position(conn, comment_id, float(x), float(y)):
        raise NotFoundError(f"Comment not found: {comment_id!r}")
    return comments_db.require_comment(conn, comment_id)
