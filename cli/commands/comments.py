"""Comment commands: list what a version shows, add, reply, resolve, move."""

import typer

from backend.db import get_connection, init_db
from backend.review import create_comment, create_reply, get_comments, move_comment, toggle_resolve
from cli.context import exit_on_review_error
from cli.rendering import render_thread

comments_app = typer.Typer(help="Review comments on versions.")


@comments_app.command("list")
def comments_list(
    version_id: str = typer.Argument(..., help="Version UUID."),
) -> None:
    """Show every comment visible on the version, carried-over ones included."""
    conn = get_connection()
    init_db(conn)

    try:
        with exit_on_review_error():
            threads = get_comments(conn, version_id)
        if not threads:
            typer.echo("No comments.")
            return
        for thread in threads:
            typer.echo(render_thread(thread))
    finally:
        conn.close()


@comments_app.command("add")
def comments_add(
    version_id: str = typer.Argument(..., help="Version UUID."),
    page: str = typer.Option(..., help="Page path, e.g. index.html."),
    body: str = typer.Option(..., help="Comment text."),
    x: float = typer.Option(50.0, help="Horizontal position in percent."),
    y: float = typer.Option(50.0, help="Vertical position in percent."),
    author: str = typer.Option("", help="Author name."),
) -> None:
    """Pin a new comment on a page of the version."""
    conn = get_connection()
    init_db(conn)

    try:
        with exit_on_review_error():
            comment = create_comment(conn, version_id, page, x, y, author, body)
        typer.echo(f"✅ Comment created: {comment.id}")
    finally:
        conn.close()


@comments_app.command("reply")
def comments_reply(
    comment_id: str = typer.Argument(..., help="Comment UUID."),
    body: str = typer.Option(..., help="Reply text."),
    author: str = typer.Option("", help="Author name."),
) -> None:
    """Reply to a comment."""
    conn = get_connection()
    init_db(conn)

    try:
        with exit_on_review_error():
            reply = create_reply(conn, comment_id, author, body)
        typer.echo(f"✅ Reply created: {reply.id}")
    finally:
        conn.close()


@comments_app.command("resolve")
def comments_resolve(
    comment_id: str = typer.Argument(..., help="Comment UUID."),
) -> None:
    """Toggle a comment between resolved and open."""
    conn = get_connection()
    init_db(conn)

    try:
        with exit_on_review_error():
            resolved = toggle_resolve(conn, comment_id)
        typer.echo("✔ Resolved" if resolved else "● Reopened")
    finally:
        conn.close()


@comments_app.command("move")
def comments_move(
    comment_id: str = typer.Argument(..., help="Comment UUID."),
    x: float = typer.Option(..., help="Horizontal position in percent."),
    y: float = typer.Option(..., help="Vertical position in percent."),
) -> None:
    """Move a comment pin."""
    conn = get_connection()
    init_db(conn)

    try:
        with exit_on_review_error():
            comment = move_comment(conn, comment_id, x, y)
        typer.echo(f"📍 Moved to ({comment.x:g}, {comment.y:g})")
    finally:
        conn.close()
