"""Comment-scoped endpoints.

Routes
------
POST  /comments/{id}/replies     Add a reply
POST  /comments/{id}/resolve     Toggle resolved / open
PATCH /comments/{id}/position    Drag the pin to new coordinates
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel

from backend.review.mutations import create_reply, move_comment, toggle_resolve

router = APIRouter()


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------

class ReplyCreate(BaseModel):
    author_name: str = ""
    author_email: str = ""
    body: str


class PositionUpdate(BaseModel):
    x: float
    y: float


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/{comment_id}/replies", status_code=201, response_model=dict[str, Any])
def create_reply_endpoint(
    comment_id: str, body: ReplyCreate, request: Request
) -> dict[str, Any]:
    conn = request.app.state.db
    reply = create_reply(
        conn, comment_id, author_name=body.author_name, body=body.body,
        author_email=body.author_email,
    )
    return asdict(reply)


@router.post("/{comment_id}/resolve", response_model=dict[str, bool])
def toggle_resolve_endpoint(comment_id: str, request: Request) -> dict[str, bool]:
    """Flip the resolved flag and report the new value."""
    conn = request.app.state.db
    return {"resolved": toggle_resolve(conn, comment_id)}


@router.patch("/{comment_id}/position", response_model=dict[str, bool])
def move_comment_endpoint(
    comment_id: str, body: PositionUpdate, request: Request
) -> dict[str, bool]:
    conn = request.app.state.db
    move_comment(conn, comment_id, body.x, body.y)
    return {"ok": True}
