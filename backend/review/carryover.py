"""Which comments a reviewer sees on a given version.

Visible on version V (project P, sequence n)::

    U = unresolved comments authored on any version of P with seq <= n
    R = every comment authored on V itself, resolved or not
    visible(V) = U ∪ R

So an open comment follows the project forward until someone resolves it.
Once resolved it stays visible only on the version it was authored on.
Reopening it brings it back on every later version at the next read,
because nothing is cached or snapshotted.
"""

from __future__ import annotations

import sqlite3
from typing import Dict, List

from backend.db import comments as comments_db
from backend.db.models import Comment, CommentThread
from backend.db.versions import get_version


def visible_comments(unresolved: List[Comment], on_version: List[Comment]) -> List[Comment]:
    """Union the two query results by id, keeping first-seen order."""
    merged: Dict[str, Comment] = {}
    for comment in unresolved + on_version:
        merged.setdefault(comment.id, comment)
    return list(merged.values())


def get_comments(conn: sqlite3.Connection, version_id: str) -> List[CommentThread]:
    """Return every comment visible on *version_id*, each with its replies.

    Carried-over comments come first, then resolved comments authored on
    this version.  ``resolved`` reflects the live value.

    Raises:
        NotFoundError: If the version is unknown.
        RepositoryError: If a database read fails.
    """
    version = get_version(conn, version_id)

    unresolved = comments_db.query_unresolved_up_to(conn, version.project_id, version.seq)
    on_version = comments_db.query_by_version(conn, version.id)

    return [
        CommentThread(comment=c, replies=comments_db.list_replies(conn, c.id))
        for c in visible_comments(unresolved, on_version)
    ]
