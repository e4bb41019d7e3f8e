"""Version commands: publish a directory as the next version, list versions."""

import uuid
from pathlib import Path
from typing import Optional

import typer

from backend.db import get_connection, init_db
from backend.db.projects import get_project, get_project_by_name
from backend.db.versions import create_version, list_versions
from backend.errors import ReviewError
from backend.storage import VersionStore
from cli.context import exit_on_review_error, load_context

version_app = typer.Typer(help="Publish and list project versions.")


def _resolve_project_id(conn, project: Optional[str]) -> str:
    """Return the id for *project* (name or id), or the active project."""
    if project:
        found = get_project_by_name(conn, project)
        return found.id if found else get_project(conn, project).id

    ctx = load_context()
    if not ctx.active_project_id:
        typer.echo("❌ No project given and no active project selected.")
        raise typer.Exit(code=1)
    return ctx.active_project_id


@version_app.command("push")
def version_push(
    directory: Path = typer.Argument(..., help="Directory holding the HTML/CSS files."),
    project: Optional[str] = typer.Option(None, "--project", "-p", help="Project name or UUID."),
) -> None:
    """Store *directory* as the next version of the project.

    Files are copied first and the version row is created only once the
    copy is complete.  A failed publish leaves neither behind.
    """
    conn = get_connection()
    init_db(conn)

    try:
        with exit_on_review_error():
            project_id = _resolve_project_id(conn, project)
            if not directory.is_dir():
                typer.echo(f"❌ Not a directory: {directory}")
                raise typer.Exit(code=1)

            store = VersionStore()
            version_id = str(uuid.uuid4())
            pages = store.import_directory(version_id, directory)
            try:
                version = create_version(conn, project_id, version_id=version_id)
            except ReviewError:
                store.remove_version(version_id)
                raise

        typer.echo(f"✅ Version v{version.seq} published: {version.id}")
        typer.echo(f"   Pages: {len(pages)}")
        for page in pages:
            typer.echo(f"    - {page}")
    finally:
        conn.close()


@version_app.command("list")
def version_list(
    project: Optional[str] = typer.Option(None, "--project", "-p", help="Project name or UUID."),
) -> None:
    """List the versions of the project, newest first."""
    conn = get_connection()
    init_db(conn)

    try:
        with exit_on_review_error():
            project_id = _resolve_project_id(conn, project)
            versions = list_versions(conn, project_id)
            if not versions:
                typer.echo("No versions yet.")
                return
            store = VersionStore()
            lines = [
                f"  v{v.seq}  {v.id}  ({len(store.list_pages(v.id))} pages)"
                for v in versions
            ]
        for line in lines:
            typer.echo(line)
    finally:
        conn.close()
