"""Dataclass models representing DB rows.

These are plain Python objects – not ORM models.  The DB layer serialises /
deserialises to and from these types.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


PROJECT_STATUSES = ("draft", "in_review", "approved", "handed_off")


@dataclass
class Project:
    id: str
    name: str
    status: str
    created_at: int
    updated_at: int
    version_count: int = 0


@dataclass
class Version:
    id: str
    project_id: str
    seq: int
    created_at: int


@dataclass
class Comment:
    id: str
    version_id: str
    page: str
    x: float
    y: float
    author_name: str
    author_email: str
    body: str
    resolved: bool
    created_at: int


@dataclass
class Reply:
    id: str
    comment_id: str
    author_name: str
    author_email: str
    body: str
    created_at: int


@dataclass
class CommentThread:
    """A comment together with its replies, oldest reply first."""

    comment: Comment
    replies: list[Reply] = field(default_factory=list)

    # ------------------------------------------------------------------
    # Convenience helpers
    # ------------------------------------------------------------------
    def to_dict(self) -> dict[str, Any]:
        """Flatten into the JSON shape served to reviewers."""
        data = asdict(self.comment)
        data["replies"] = [asdict(r) for r in self.replies]
        return data
