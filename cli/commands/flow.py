"""Command for showing the page-flow graph of a version."""

import json

import typer

from backend.db import get_connection, init_db
from backend.flow import get_flow_graph
from backend.storage import VersionStore
from cli.context import exit_on_review_error
from cli.rendering import render_flow

flow_app = typer.Typer(help="Inspect page-navigation graphs.")


@flow_app.command("show")
def flow_show(
    version_id: str = typer.Argument(..., help="Version UUID."),
    format: str = typer.Option("tree", "--format", help="Output format: tree | json"),
) -> None:
    """Display the flow graph as a text tree or as JSON."""
    if format not in ("tree", "json"):
        typer.echo(f"❌ Unknown format {format!r}. Use: tree | json")
        raise typer.Exit(code=1)

    conn = get_connection()
    init_db(conn)

    try:
        with exit_on_review_error():
            graph = get_flow_graph(conn, VersionStore(), version_id)

        if format == "json":
            typer.echo(json.dumps(graph.to_dict(), indent=2))
        else:
            typer.echo(render_flow(graph))
    finally:
        conn.close()
