"""Project and version listing endpoints.

Routes
------
GET   /projects                          List projects with version counts
POST  /projects                          Create a project
GET   /projects/{id}                     Project detail
PATCH /projects/{id}/status              Change review status
GET   /projects/{id}/versions            Versions (newest first) with their pages
GET   /projects/{id}/versions/latest     Most recent version
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel

from backend.db.projects import (
    create_project,
    get_project,
    list_projects,
    update_project_status,
)
from backend.db.versions import get_latest_version, list_versions

router = APIRouter()


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------

class ProjectCreate(BaseModel):
    name: str


class StatusUpdate(BaseModel):
    status: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("", response_model=list[dict[str, Any]])
def list_projects_endpoint(request: Request) -> list[dict[str, Any]]:
    """Return all projects, most recently updated first."""
    conn = request.app.state.db
    return [asdict(p) for p in list_projects(conn)]


@router.post("", status_code=201, response_model=dict[str, Any])
def create_project_endpoint(body: ProjectCreate, request: Request) -> dict[str, Any]:
    """Create a new project in ``draft`` status and return it."""
    conn = request.app.state.db
    return asdict(create_project(conn, body.name))


@router.get("/{project_id}", response_model=dict[str, Any])
def get_project_endpoint(project_id: str, request: Request) -> dict[str, Any]:
    conn = request.app.state.db
    return asdict(get_project(conn, project_id))


@router.patch("/{project_id}/status", response_model=dict[str, Any])
def update_status_endpoint(
    project_id: str, body: StatusUpdate, request: Request
) -> dict[str, Any]:
    """Move the project to another review status."""
    conn = request.app.state.db
    return asdict(update_project_status(conn, project_id, body.status))


@router.get("/{project_id}/versions", response_model=list[dict[str, Any]])
def list_versions_endpoint(project_id: str, request: Request) -> list[dict[str, Any]]:
    """Return every version of the project with the pages it contains."""
    conn = request.app.state.db
    store = request.app.state.store
    get_project(conn, project_id)
    return [
        {**asdict(v), "pages": store.list_pages(v.id)}
        for v in list_versions(conn, project_id)
    ]


@router.get("/{project_id}/versions/latest", response_model=dict[str, Any])
def latest_version_endpoint(project_id: str, request: Request) -> dict[str, Any]:
    conn = request.app.state.db
    store = request.app.state.store
    get_project(conn, project_id)
    version = get_latest_version(conn, project_id)
    return {**asdict(version), "pages": store.list_pages(version.id)}
