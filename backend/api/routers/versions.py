"""Version-scoped review endpoints.

Routes
------
GET  /versions/{id}/comments     Comments visible on the version, with replies
POST /versions/{id}/comments     Pin a new comment on one of its pages
GET  /versions/{id}/flow         Page-flow graph (nodes + edges)
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel

from backend.flow.service import get_flow_graph
from backend.review.carryover import get_comments
from backend.review.mutations import create_comment

router = APIRouter()


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------

class CommentCreate(BaseModel):
    page: str
    x: float
    y: float
    author_name: str = ""
    author_email: str = ""
    body: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/{version_id}/comments", response_model=list[dict[str, Any]])
def list_comments_endpoint(version_id: str, request: Request) -> list[dict[str, Any]]:
    """Return open comments carried over from earlier versions plus this version's own."""
    conn = request.app.state.db
    return [thread.to_dict() for thread in get_comments(conn, version_id)]


@router.post("/{version_id}/comments", status_code=201, response_model=dict[str, Any])
def create_comment_endpoint(
    version_id: str, body: CommentCreate, request: Request
) -> dict[str, Any]:
    conn = request.app.state.db
    comment = create_comment(
        conn,
        version_id,
        page=body.page,
        x=body.x,
        y=body.y,
        author_name=body.author_name,
        body=body.body,
        author_email=body.author_email,
    )
    return {**asdict(comment), "replies": []}


@router.get("/{version_id}/flow", response_model=dict[str, Any])
def flow_graph_endpoint(version_id: str, request: Request) -> dict[str, Any]:
    """Return the navigation graph derived from the manifest and inline markers."""
    conn = request.app.state.db
    store = request.app.state.store
    return get_flow_graph(conn, store, version_id).to_dict()
