"""Persistent state management for the Design Review CLI.

Tracks the "active project" so version commands can omit ``--project``.
Stored in `~/.design_review_cli/context.json`.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from contextlib import contextmanager
from functools import wraps
from pathlib import Path
from typing import Callable, Iterator

import typer
from backend.config import settings
from backend.errors import ReviewError


@dataclass
class CliContext:
    active_project_id: str | None = None
    active_project_name: str | None = None

    def to_json(self) -> str:
        return json.dumps(asdict(self), indent=2)

    @classmethod
    def from_json(cls, data: str) -> CliContext:
        try:
            raw = json.loads(data)
            return cls(**raw)
        except (json.JSONDecodeError, TypeError):
            return cls()


def _get_context_path() -> Path:
    """Return the path to the context JSON file."""
    return settings.cli_config_dir / "context.json"


def load_context() -> CliContext:
    """Load the CLI context from disk. Returns defaults if missing/corrupt."""
    path = _get_context_path()
    if not path.exists():
        return CliContext()
    try:
        return CliContext.from_json(path.read_text(encoding="utf-8"))
    except OSError:
        return CliContext()


def save_context(ctx: CliContext) -> None:
    """Save the CLI context to disk."""
    settings.cli_config_dir.mkdir(parents=True, exist_ok=True)
    _get_context_path().write_text(ctx.to_json(), encoding="utf-8")


def require_context(func: Callable) -> Callable:
    """Decorator for CLI commands that require an active project.

    Aborts execution if no project is active; the command itself calls
    ``load_context()`` to read it.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        ctx = load_context()
        if not ctx.active_project_id:
            typer.echo("❌ No active project selected.")
            typer.echo("Run 'project new <name>' or 'project switch <name>' first.")
            raise typer.Exit(code=1)
        return func(*args, **kwargs)

    return wrapper


@contextmanager
def exit_on_review_error() -> Iterator[None]:
    """Print a core error as a one-line message and exit with status 1."""
    try:
        yield
    except ReviewError as exc:
        typer.echo(f"❌ {exc}")
        raise typer.Exit(code=1) from exc
