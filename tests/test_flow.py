"""Tests for the page-flow graph: manifest parser, inline parser, builder, service.

The service tests write real version directories under ``tmp_path`` and use
an in-memory SQLite database.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest

from backend.db.connection import get_connection
from backend.db.migrations import init_db
from backend.db.projects import create_project
from backend.db.versions import create_version
from backend.errors import NotFoundError, RepositoryError, ValidationError
from backend.flow.builder import build_graph, merge_edges
from backend.flow.inline import extract_inline_links
from backend.flow.manifest import parse_manifest
from backend.flow.models import EdgeOrigin, FlowDef, FlowEdge, GraphEdge
from backend.flow.service import get_flow_graph
from backend.storage.files import VersionStore


# ---------------------------------------------------------------------------
# Fixtures / constants
# ---------------------------------------------------------------------------

_MANIFEST = """\
title: "Onboarding"
flows:
  index.html:
    - target: login.html
      label: "Sign In"
    - target: signup.html
      label: "Register"
  login.html:
    - target: dashboard.html
"""

_LOGIN_HTML = """\
<!DOCTYPE html>
<html>
<body>
  <h1>Login</h1>
  <button data-dr-link="dashboard.html">
      Continue
  </button>
</body>
</html>
"""


@pytest.fixture()
def conn() -> Generator[sqlite3.Connection, None, None]:
    connection = get_connection(db_path=":memory:")  # type: ignore[arg-type]
    init_db(connection)
    yield connection
    connection.close()


@pytest.fixture()
def store(tmp_path: Path) -> VersionStore:
    return VersionStore(root=tmp_path / "versions", manifest_name="flow.yaml")


@pytest.fixture()
def version(conn: sqlite3.Connection):
    project = create_project(conn, "Flows")
    return create_version(conn, project.id)


def _write(store: VersionStore, version_id: str, files: dict[str, str]) -> None:
    base = store.version_dir(version_id)
    for rel, content in files.items():
        path = base / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


# ---------------------------------------------------------------------------
# Manifest parser
# ---------------------------------------------------------------------------

class TestParseManifest:
    def test_valid_manifest(self) -> None:
        flow_def = parse_manifest(_MANIFEST)
        assert flow_def.title == "Onboarding"
        assert [e.target for e in flow_def.flows["index.html"]] == ["login.html", "signup.html"]
        assert flow_def.flows["index.html"][0].label == "Sign In"

    def test_label_defaults_to_empty(self) -> None:
        flow_def = parse_manifest(_MANIFEST)
        assert flow_def.flows["login.html"] == [FlowEdge(target="dashboard.html", label="")]

    def test_accepts_bytes(self) -> None:
        assert parse_manifest(_MANIFEST.encode("utf-8")).title == "Onboarding"

    def test_title_optional(self) -> None:
        flow_def = parse_manifest("flows:\n  a.html:\n    - target: b.html\n")
        assert flow_def.title is None

    def test_empty_flows(self) -> None:
        flow_def = parse_manifest('title: "Empty"\nflows: {}\n')
        assert flow_def.flows == {}

    def test_null_flows_means_no_edges(self) -> None:
        assert parse_manifest('title: "Draft"\nflows:\n').flows == {}

    def test_page_without_edge_list_has_no_edges(self) -> None:
        flow_def = parse_manifest("flows:\n  index.html:\n  login.html:\n    - target: home.html\n")
        assert flow_def.flows["index.html"] == []
        assert [e.target for e in flow_def.flows["login.html"]] == ["home.html"]

    def test_scalar_title_and_label_read_as_text(self) -> None:
        flow_def = parse_manifest(
            "title: 2024\nflows:\n  404.html:\n    - target: index.html\n      label: 1\n"
            "    - target: help.html\n      label: true\n"
        )
        assert flow_def.title == "2024"
        assert [e.label for e in flow_def.flows["404.html"]] == ["1", "true"]

    def test_numeric_page_key_read_as_text(self) -> None:
        flow_def = parse_manifest("flows:\n  404:\n    - target: index.html\n")
        assert list(flow_def.flows) == ["404"]

    def test_empty_target_rejected(self) -> None:
        with pytest.raises(ValidationError, match="empty target"):
            parse_manifest('flows:\n  index.html:\n    - target: ""\n      label: "Bad"\n')

    def test_missing_target_rejected(self) -> None:
        with pytest.raises(ValidationError, match="target"):
            parse_manifest('flows:\n  index.html:\n    - label: "No target"\n')

    def test_malformed_yaml_rejected(self) -> None:
        with pytest.raises(ValidationError, match="invalid flow manifest"):
            parse_manifest("{{invalid yaml")

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            parse_manifest('title: "Test"\nunknown_field: true\nflows: {}\n')

    def test_empty_document_rejected(self) -> None:
        with pytest.raises(ValidationError, match="empty"):
            parse_manifest("")

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(ValidationError, match="mapping"):
            parse_manifest("- index.html\n- login.html\n")


# ---------------------------------------------------------------------------
# Inline parser
# ---------------------------------------------------------------------------

class TestExtractInlineLinks:
    def test_basic(self) -> None:
        html = """<html><body>
<a href="#" data-dr-link="login.html">Sign In</a>
<button data-dr-link="dashboard.html">Continue</button>
<a href="other.html">Not a marker</a>
</body></html>"""
        edges = extract_inline_links(html)
        assert edges == [
            FlowEdge(target="login.html", label="Sign In"),
            FlowEdge(target="dashboard.html", label="Continue"),
        ]

    def test_label_trimmed_and_nested_text_joined(self) -> None:
        edges = extract_inline_links('<div data-dr-link="a.html">\n  <span>Go</span> <b>now</b>\n</div>')
        assert edges == [FlowEdge(target="a.html", label="Go now")]

    def test_empty_label_allowed(self) -> None:
        edges = extract_inline_links('<a data-dr-link="x.html"><img src="i.png"></a>')
        assert edges == [FlowEdge(target="x.html", label="")]

    def test_empty_marker_skipped(self) -> None:
        assert extract_inline_links('<a data-dr-link="">Nowhere</a>') == []

    def test_no_markers(self) -> None:
        assert extract_inline_links("<html><body><p>Hello</p></body></html>") == []

    def test_custom_attribute(self) -> None:
        edges = extract_inline_links('<a data-next="b.html">Next</a>', attribute="data-next")
        assert edges == [FlowEdge(target="b.html", label="Next")]

    def test_unclosed_markup_still_parsed(self) -> None:
        edges = extract_inline_links('<div><a data-dr-link="b.html">Broken <p>')
        assert [e.target for e in edges] == ["b.html"]

    def test_rejected_markup_yields_no_edges(self) -> None:
        from bs4 import ParserRejectedMarkup

        with patch("backend.flow.inline.BeautifulSoup", side_effect=ParserRejectedMarkup("bad")):
            assert extract_inline_links("<a data-dr-link='x.html'>x</a>", page="bad.html") == []


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

class TestBuildGraph:
    def test_declared_and_inline_merge(self) -> None:
        flow_def = FlowDef(flows={"index.html": [FlowEdge("login.html", "Sign In")]})
        inline = {"login.html": [FlowEdge("dashboard.html", "Continue")]}

        graph = build_graph(["index.html", "login.html"], flow_def, inline)

        assert [n.id for n in graph.nodes] == ["dashboard.html", "index.html", "login.html"]
        assert [(e.source, e.target, e.label, e.origin) for e in graph.edges] == [
            ("index.html", "login.html", "Sign In", EdgeOrigin.DECLARED),
            ("login.html", "dashboard.html", "Continue", EdgeOrigin.INLINE),
        ]

    def test_declared_wins_over_inline(self) -> None:
        flow_def = FlowDef(flows={"index.html": [FlowEdge("login.html", "Sign In")]})
        inline = {"index.html": [FlowEdge("login.html", "Log in here")]}

        graph = build_graph(["index.html", "login.html"], flow_def, inline)

        assert len(graph.edges) == 1
        assert graph.edges[0].origin is EdgeOrigin.DECLARED
        assert graph.edges[0].label == "Sign In"

    def test_duplicates_within_one_source_keep_first(self) -> None:
        inline = {"a.html": [FlowEdge("b.html", "first"), FlowEdge("b.html", "second")]}
        graph = build_graph(["a.html", "b.html"], None, inline)
        assert [(e.label) for e in graph.edges] == ["first"]

    def test_missing_nodes_flagged(self) -> None:
        flow_def = FlowDef(flows={"index.html": [FlowEdge("orphan.html", "Lost")]})
        graph = build_graph(["index.html"], flow_def, {})
        nodes = {n.id: n for n in graph.nodes}
        assert nodes["orphan.html"].missing is True
        assert nodes["index.html"].missing is False

    def test_missing_source_node_flagged(self) -> None:
        flow_def = FlowDef(flows={"ghost.html": [FlowEdge("index.html")]})
        graph = build_graph(["index.html"], flow_def, {})
        assert {n.id: n.missing for n in graph.nodes} == {"ghost.html": True, "index.html": False}

    def test_no_edges_gives_isolated_pages(self) -> None:
        graph = build_graph(["b.html", "a.html"], None, {})
        assert graph.title is None
        assert [n.id for n in graph.nodes] == ["a.html", "b.html"]
        assert graph.edges == []
        assert all(n.label == n.id for n in graph.nodes)

    def test_cycles_preserved(self) -> None:
        inline = {
            "a.html": [FlowEdge("b.html")],
            "b.html": [FlowEdge("a.html")],
            "c.html": [FlowEdge("c.html", "self")],
        }
        graph = build_graph(["a.html", "b.html", "c.html"], None, inline)
        assert [(e.source, e.target) for e in graph.edges] == [
            ("a.html", "b.html"),
            ("b.html", "a.html"),
            ("c.html", "c.html"),
        ]

    def test_output_is_deterministic(self) -> None:
        flow_def = FlowDef(
            title="T",
            flows={"z.html": [FlowEdge("a.html")], "a.html": [FlowEdge("z.html")]},
        )
        inline = {"m.html": [FlowEdge("a.html")], "b.html": [FlowEdge("m.html")]}
        pages = ["z.html", "m.html", "a.html", "b.html"]
        first = build_graph(pages, flow_def, inline)
        second = build_graph(list(reversed(pages)), flow_def, inline)
        assert first == second
        assert [(e.source, e.target) for e in first.edges] == sorted(
            (e.source, e.target) for e in first.edges
        )

    def test_merge_edges_priority(self) -> None:
        high = [GraphEdge("a", "b", "high", EdgeOrigin.DECLARED)]
        low = [GraphEdge("a", "b", "low", EdgeOrigin.INLINE), GraphEdge("b", "a", "", EdgeOrigin.INLINE)]
        merged = merge_edges([high, low])
        assert merged[("a", "b")].label == "high"
        assert merged[("b", "a")].origin is EdgeOrigin.INLINE

    def test_to_dict(self) -> None:
        graph = build_graph(["a.html"], FlowDef(title="T", flows={"a.html": [FlowEdge("b.html", "B")]}), {})
        assert graph.to_dict() == {
            "title": "T",
            "nodes": [
                {"id": "a.html", "label": "a.html", "missing": False},
                {"id": "b.html", "label": "b.html", "missing": True},
            ],
            "edges": [
                {"source": "a.html", "target": "b.html", "label": "B", "origin": "declared"},
            ],
        }


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class TestGetFlowGraph:
    def test_manifest_and_markers(self, conn, store, version) -> None:
        _write(store, version.id, {
            "flow.yaml": 'flows:\n  index.html:\n    - target: login.html\n      label: "Sign In"\n',
            "index.html": "<html><body>Home</body></html>",
            "login.html": _LOGIN_HTML,
        })

        graph = get_flow_graph(conn, store, version.id)

        assert [n.id for n in graph.nodes] == ["dashboard.html", "index.html", "login.html"]
        assert [(e.source, e.target, e.label, e.origin.value) for e in graph.edges] == [
            ("index.html", "login.html", "Sign In", "declared"),
            ("login.html", "dashboard.html", "Continue", "inline"),
        ]
        assert {n.id: n.missing for n in graph.nodes}["dashboard.html"] is True

    def test_orphan_reference_is_missing_node(self, conn, store, version) -> None:
        _write(store, version.id, {
            "flow.yaml": "flows:\n  index.html:\n    - target: orphan.html\n",
            "index.html": "<p>Home</p>",
        })
        graph = get_flow_graph(conn, store, version.id)
        assert {"id": "orphan.html", "label": "orphan.html", "missing": True} in graph.to_dict()["nodes"]

    def test_absent_manifest_is_not_an_error(self, conn, store, version) -> None:
        _write(store, version.id, {"a.html": "<p>A</p>", "b.html": "<p>B</p>"})
        graph = get_flow_graph(conn, store, version.id)
        assert graph.title is None
        assert [n.id for n in graph.nodes] == ["a.html", "b.html"]
        assert graph.edges == []

    def test_malformed_manifest_is_an_error(self, conn, store, version) -> None:
        _write(store, version.id, {"flow.yaml": "{{invalid", "a.html": "<p>A</p>"})
        with pytest.raises(ValidationError):
            get_flow_graph(conn, store, version.id)

    def test_page_listed_without_edges(self, conn, store, version) -> None:
        _write(store, version.id, {
            "flow.yaml": "title: 2024\nflows:\n  index.html:\n",
            "index.html": "<p>Home</p>",
        })
        graph = get_flow_graph(conn, store, version.id)
        assert graph.title == "2024"
        assert [n.id for n in graph.nodes] == ["index.html"]
        assert graph.edges == []

    def test_pages_in_subdirectories(self, conn, store, version) -> None:
        _write(store, version.id, {
            "index.html": '<a data-dr-link="account/settings.html">Settings</a>',
            "account/settings.html": "<p>Settings</p>",
            "styles/site.css": "body {}",
        })
        graph = get_flow_graph(conn, store, version.id)
        assert [n.id for n in graph.nodes] == ["account/settings.html", "index.html"]
        assert not any(n.missing for n in graph.nodes)

    def test_unreadable_page_is_skipped(self, conn, store, version) -> None:
        _write(store, version.id, {
            "a.html": '<a data-dr-link="b.html">B</a>',
            "b.html": '<a data-dr-link="a.html">A</a>',
        })
        real_open = store.open_page

        def flaky(version_id: str, path: str) -> bytes:
            if path == "a.html":
                raise RepositoryError("disk hiccup")
            return real_open(version_id, path)

        with patch.object(store, "open_page", side_effect=flaky):
            graph = get_flow_graph(conn, store, version.id)
        assert [(e.source, e.target) for e in graph.edges] == [("b.html", "a.html")]

    def test_repeated_calls_identical(self, conn, store, version) -> None:
        _write(store, version.id, {
            "flow.yaml": _MANIFEST,
            "index.html": '<a data-dr-link="login.html">Log in</a>',
            "login.html": _LOGIN_HTML,
            "signup.html": '<a data-dr-link="index.html">Back</a>',
        })
        assert get_flow_graph(conn, store, version.id) == get_flow_graph(conn, store, version.id)

    def test_unknown_version(self, conn, store) -> None:
        with pytest.raises(NotFoundError):
            get_flow_graph(conn, store, "nope")
