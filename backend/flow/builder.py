"""Merge declared and inline edges into one deterministic flow graph.

Each edge source is a stream of candidate :class:`GraphEdge` objects.  The
streams are folded in priority order into a mapping keyed by
``(source, target)``; the first candidate for a key wins.  Declared edges
are folded first, so they replace an inline edge for the same pair, and a
repeated pair inside one source keeps its first occurrence.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from backend.flow.models import EdgeOrigin, FlowDef, FlowEdge, FlowGraph, GraphEdge, GraphNode

EdgeKey = Tuple[str, str]


# ---------------------------------------------------------------------------
# Candidate streams
# ---------------------------------------------------------------------------

def _candidates(
    edges_by_page: Mapping[str, Sequence[FlowEdge]], origin: EdgeOrigin
) -> Iterator[GraphEdge]:
    for source, edges in edges_by_page.items():
        for edge in edges:
            yield GraphEdge(source=source, target=edge.target, label=edge.label, origin=origin)


def merge_edges(streams: Iterable[Iterable[GraphEdge]]) -> Dict[EdgeKey, GraphEdge]:
    """Fold candidate streams, highest priority first, into one edge per pair."""
    merged: Dict[EdgeKey, GraphEdge] = {}
    for stream in streams:
        for edge in stream:
            merged.setdefault((edge.source, edge.target), edge)
    return merged


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_graph(
    pages: Sequence[str],
    flow_def: Optional[FlowDef],
    inline_edges: Mapping[str, Sequence[FlowEdge]],
) -> FlowGraph:
    """Build the navigation graph of one version.

    Args:
        pages: Real page paths of the version.
        flow_def: Parsed manifest, or ``None`` when the version has none.
        inline_edges: Inline edges keyed by the page they were found on.

    Returns:
        A :class:`FlowGraph` with nodes sorted by id and edges sorted by
        ``(source, target)``.  Endpoints that are not real pages appear as
        nodes with ``missing=True``.  Cycles are kept as-is.
    """
    declared = flow_def.flows if flow_def is not None else {}
    merged = merge_edges([
        _candidates(declared, EdgeOrigin.DECLARED),
        _candidates(inline_edges, EdgeOrigin.INLINE),
    ])

    real_pages = set(pages)
    node_ids = set(real_pages)
    for source, target in merged:
        node_ids.add(source)
        node_ids.add(target)

    nodes: List[GraphNode] = [
        GraphNode(id=node_id, label=node_id, missing=node_id not in real_pages)
        for node_id in sorted(node_ids)
    ]
    edges: List[GraphEdge] = [merged[key] for key in sorted(merged)]

    return FlowGraph(
        title=flow_def.title if flow_def is not None else None,
        nodes=nodes,
        edges=edges,
    )
