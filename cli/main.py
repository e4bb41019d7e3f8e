"""Design Review CLI: entry-point for all backend operations.

Usage:
    python cli/main.py --help

Command groups:
    db        → database setup
    project   → create / list / switch projects, review status
    version   → publish a directory as the next version
    comments  → list, add, reply, resolve and move comments
    flow      → page-navigation graph of a version
    serve     → run the HTTP API
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from backend.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import typer

from backend.config import settings
from backend.db import get_connection, init_db
from backend.logging_config import setup_logging
from cli.commands.comments import comments_app
from cli.commands.flow import flow_app
from cli.commands.project import project_app
from cli.commands.version import version_app

app = typer.Typer(
    name="design-review",
    help="Design Review backend CLI.",
    no_args_is_help=True,
)

app.add_typer(project_app, name="project")
app.add_typer(version_app, name="version")
app.add_typer(comments_app, name="comments")
app.add_typer(flow_app, name="flow")


@app.callback()
def main() -> None:
    """Configure logging before any command runs."""
    setup_logging(stream=sys.stderr)


# ---------------------------------------------------------------------------
# DB commands
# ---------------------------------------------------------------------------
db_app = typer.Typer(help="Database operations.", no_args_is_help=True)
app.add_typer(db_app, name="db")


@db_app.command("init")
def db_init() -> None:
    """Initialise the SQLite database (create tables if they do not exist)."""
    conn = get_connection()
    init_db(conn)
    conn.close()
    typer.echo(f"[db init] Database ready at {settings.db_path}")


# ---------------------------------------------------------------------------
# HTTP API
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(8000, help="Port."),
    reload: bool = typer.Option(False, help="Reload on code changes."),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("backend.api.app:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
