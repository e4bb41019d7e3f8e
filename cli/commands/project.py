"""Project management commands."""

import typer

from backend.db import get_connection, init_db
from backend.db.projects import (
    create_project,
    get_project,
    get_project_by_name,
    list_projects,
    update_project_status,
)
from backend.db.versions import list_versions
from cli.context import exit_on_review_error, load_context, require_context, save_context

project_app = typer.Typer(help="Manage design projects.")


@project_app.command("new")
def project_new(
    name: str = typer.Argument(..., help="Name of the new project.")
) -> None:
    """Create a new project and switch to it."""
    conn = get_connection()
    init_db(conn)

    try:
        with exit_on_review_error():
            project = create_project(conn, name)
        typer.echo(f"✅ Project created: {project.name} ({project.id})")

        ctx = load_context()
        ctx.active_project_id = project.id
        ctx.active_project_name = project.name
        save_context(ctx)

        typer.echo(f"📂 Switched to project: {project.name}")
    finally:
        conn.close()


@project_app.command("list")
def project_list() -> None:
    """List all projects with their version counts."""
    conn = get_connection()
    init_db(conn)

    try:
        projects = list_projects(conn)
        if not projects:
            typer.echo("No projects found.")
            return

        active_id = load_context().active_project_id
        typer.echo("Projects:")
        for p in projects:
            marker = "*" if p.id == active_id else " "
            typer.echo(f"{marker} {p.name} \t[{p.status}] \tv{p.version_count} \t[{p.id}]")
    finally:
        conn.close()


@project_app.command("switch")
def project_switch(
    identifier: str = typer.Argument(..., help="Project name or UUID.")
) -> None:
    """Switch the active project context."""
    conn = get_connection()
    init_db(conn)

    try:
        target = get_project_by_name(conn, identifier)
        if target is None:
            with exit_on_review_error():
                target = get_project(conn, identifier)

        ctx = load_context()
        ctx.active_project_id = target.id
        ctx.active_project_name = target.name
        save_context(ctx)

        typer.echo(f"📂 Switched to project: {target.name}")
    finally:
        conn.close()


@project_app.command("status")
@require_context
def project_status(
    set_status: str = typer.Option(
        None, "--set", help="New status: draft | in_review | approved | handed_off."
    ),
) -> None:
    """Show (or change) the status and versions of the current project."""
    ctx = load_context()
    conn = get_connection()
    init_db(conn)

    try:
        with exit_on_review_error():
            if set_status:
                project = update_project_status(conn, ctx.active_project_id, set_status)
            else:
                project = get_project(conn, ctx.active_project_id)
            versions = list_versions(conn, project.id)

        typer.echo(f"\n📊 Project: {project.name}")
        typer.echo(f"   ID: {project.id}")
        typer.echo(f"   Status: {project.status}")
        typer.echo("-" * 40)
        typer.echo(f"   Versions: {len(versions)}")
        for v in versions:
            typer.echo(f"    - v{v.seq}  {v.id}")
        typer.echo("")
    finally:
        conn.close()
