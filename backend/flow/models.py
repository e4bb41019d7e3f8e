"""Data models for the page-flow graph."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class EdgeOrigin(str, Enum):
    """Which producer an edge came from.  Declared edges outrank inline ones."""

    DECLARED = "declared"
    INLINE = "inline"


@dataclass
class FlowEdge:
    """One outgoing navigation edge, as produced by either parser."""

    target: str
    label: str = ""


@dataclass
class FlowDef:
    """A parsed flow manifest: optional title plus edges per source page."""

    title: Optional[str] = None
    flows: Dict[str, List[FlowEdge]] = field(default_factory=dict)


@dataclass
class GraphNode:
    id: str
    label: str
    missing: bool = False


@dataclass
class GraphEdge:
    source: str
    target: str
    label: str
    origin: EdgeOrigin


@dataclass
class FlowGraph:
    """Pure-data navigation graph for one version.  Never persisted."""

    title: Optional[str] = None
    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "nodes": [asdict(n) for n in self.nodes],
            "edges": [
                {
                    "source": e.source,
                    "target": e.target,
                    "label": e.label,
                    "origin": e.origin.value,
                }
                for e in self.edges
            ],
        }
