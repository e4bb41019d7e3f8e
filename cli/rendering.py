"""Utilities for rendering review data in the CLI."""

from __future__ import annotations

from typing import Dict, List

from backend.db.models import CommentThread
from backend.flow.models import EdgeOrigin, FlowGraph, GraphEdge


def render_flow(graph: FlowGraph) -> str:
    """Render a flow graph as one block per page with its outgoing edges.

    Example::

        Onboarding
        index.html
        └── [Sign In] → login.html
        login.html
        └── [Continue] → dashboard.html  (inline)
        dashboard.html  ⚠ missing

    Declared edges carry no suffix; inline edges are marked ``(inline)``.
    """
    outgoing: Dict[str, List[GraphEdge]] = {}
    for e in graph.edges:
        outgoing.setdefault(e.source, []).append(e)

    lines: List[str] = []
    if graph.title:
        lines.append(graph.title)

    for node in graph.nodes:
        lines.append(f"{node.id}  ⚠ missing" if node.missing else node.id)
        edges = outgoing.get(node.id, [])
        for i, e in enumerate(edges):
            connector = "└── " if i == len(edges) - 1 else "├── "
            label = f"[{e.label}] " if e.label else ""
            suffix = "  (inline)" if e.origin is EdgeOrigin.INLINE else ""
            lines.append(f"{connector}{label}→ {e.target}{suffix}")

    if not graph.nodes:
        lines.append("(no pages)")
    return "\n".join(lines)


def render_thread(thread: CommentThread) -> str:
    """Render one comment and its replies as indented text."""
    c = thread.comment
    state = "✔ resolved" if c.resolved else "● open"
    lines = [
        f"{state}  {c.id}  {c.page} @ ({c.x:g}, {c.y:g})",
        f"    {c.author_name or 'anonymous'}: {c.body}",
    ]
    for r in thread.replies:
        lines.append(f"      ↳ {r.author_name or 'anonymous'}: {r.body}")
    return "\n".join(lines)
