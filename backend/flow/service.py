"""Compute the flow graph of a stored version."""

from __future__ import annotations

import sqlite3
from typing import Dict, List

from backend.db.versions import get_version
from backend.errors import ReviewError
from backend.flow.builder import build_graph
from backend.flow.inline import extract_inline_links
from backend.flow.manifest import parse_manifest
from backend.flow.models import FlowEdge, FlowGraph
from backend.logging_config import get_logger
from backend.storage.files import VersionStore

logger = get_logger(__name__)


def get_flow_graph(
    conn: sqlite3.Connection,
    store: VersionStore,
    version_id: str,
) -> FlowGraph:
    """Build the navigation graph for *version_id* from its current files.

    Nothing is cached; every call re-reads the page list, the manifest and
    each page.

    Raises:
        NotFoundError: If the version is unknown.
        ValidationError: If the manifest is present but malformed.
        RepositoryError: If the page list or the manifest cannot be read.
    """
    version = get_version(conn, version_id)

    pages = store.list_pages(version.id)

    raw_manifest = store.open_manifest(version.id)
    flow_def = parse_manifest(raw_manifest) if raw_manifest is not None else None

    inline: Dict[str, List[FlowEdge]] = {}
    for page in pages:
        try:
            markup = store.open_page(version.id, page)
        except ReviewError as exc:
            logger.warning("Skipping page %r of version %s: %s", page, version.id, exc)
            continue
        edges = extract_inline_links(markup, page=page)
        if edges:
            inline[page] = edges

    graph = build_graph(pages, flow_def, inline)
    logger.debug(
        "Flow graph for version %s: %d nodes, %d edges",
        version.id, len(graph.nodes), len(graph.edges),
    )
    return graph
