"""Flow package: page-navigation graph derived from manifests and markup."""

from backend.flow.builder import build_graph
from backend.flow.inline import extract_inline_links
from backend.flow.manifest import parse_manifest
from backend.flow.models import EdgeOrigin, FlowDef, FlowEdge, FlowGraph, GraphEdge, GraphNode
from backend.flow.service import get_flow_graph

__all__ = [
    "build_graph",
    "extract_inline_links",
    "parse_manifest",
    "get_flow_graph",
    "EdgeOrigin",
    "FlowDef",
    "FlowEdge",
    "FlowGraph",
    "GraphEdge",
    "GraphNode",
]
