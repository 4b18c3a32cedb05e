#!/usr/bin/env python3
"""Tests for archgraph/export_utils.py"""

import json
from pathlib import Path
from typing import Any, Dict, List, Tuple

import networkx as nx
import pytest

from archgraph.components import ElementTraits, as_metrics_components, component_dependency_graph
from archgraph.constants import ValidationError
from archgraph.cycle_detection import detect_cycles
from archgraph.export_utils import (
    describe_edge,
    export_component_graph,
    serialize_component_dependency_metrics,
    serialize_cycles,
    serialize_lakos_metrics,
    serialize_visibility_metrics,
    write_results_json,
)
from archgraph.graph_model import Edge
from archgraph.lakos_metrics import lakos_metrics
from archgraph.martin_metrics import component_dependency_metrics, summarize_main_sequence
from archgraph.visibility_metrics import visibility_metrics

Components = Tuple[Dict[str, List[str]], List[Tuple[str, str]]]


def public_concrete(element: Any) -> ElementTraits:
    return ElementTraits(visible=True, abstract=False)


@pytest.fixture
def ring_results(ring_components: Components) -> Dict[str, Any]:
    """All analysis results for the ring of three components."""
    components, dependencies = ring_components
    metrics_components = as_metrics_components(components)
    return {
        "graph": component_dependency_graph(metrics_components, dependencies),
        "lakos": lakos_metrics(metrics_components, dependencies),
        "martin": component_dependency_metrics(metrics_components, dependencies, public_concrete),
        "visibility": visibility_metrics(metrics_components, lambda element: True),
        "cycles": detect_cycles(["a", "b", "c"], [("a", "b"), ("b", "c"), ("c", "a")]),
    }


class TestDescribeEdge:
    """Tests for describe_edge()."""

    def test_plain_edge(self) -> None:
        assert describe_edge(Edge("a", "b")) == "a -> b"

    def test_descriptor(self) -> None:
        assert describe_edge(Edge("a", "b", "a calls b")) == "a calls b"

    def test_nested_edges(self) -> None:
        inner = Edge("a.X", "b.Y", "a.X extends b.Y")

        assert describe_edge(Edge("a", "b", inner)) == "a.X extends b.Y"
        assert describe_edge(Edge("a", "b", Edge("a.X", "b.Y"))) == "a.X -> b.Y"


class TestSerialization:
    """Tests for the serialize_* helpers."""

    def test_serialize_cycles(self) -> None:
        edges = [Edge("A", "B", "first"), Edge("A", "B", "second"), Edge("B", "A", "back")]
        cycles = detect_cycles(["A", "B"], edges, max_edges_per_step=1)

        data = serialize_cycles(cycles)

        assert data == {
            "truncated": False,
            "count": 1,
            "cycles": [
                {
                    "description": "A -> B -> A",
                    "steps": [
                        {"origin": "A", "target": "B", "edge_count": 2, "edges": ["first"]},
                        {"origin": "B", "target": "A", "edge_count": 1, "edges": ["back"]},
                    ],
                }
            ],
        }

    def test_serialize_metrics(self, ring_results: Dict[str, Any]) -> None:
        lakos = serialize_lakos_metrics(ring_results["lakos"])
        martin = serialize_component_dependency_metrics(ring_results["martin"], summarize_main_sequence(ring_results["martin"]))
        visibility = serialize_visibility_metrics(ring_results["visibility"])

        assert lakos["ccd"] == 9
        assert lakos["depends_on"] == {"a": 3, "b": 3, "c": 3}
        assert martin["components"]["a"] == {"ce": 1, "ca": 1, "i": 0.5, "a": 0.0, "d": 0.5}
        assert martin["zone_of_pain"] == []
        assert visibility == {"rv": {"a": 1.0, "b": 1.0, "c": 1.0}, "arv": 1.0, "grv": 1.0}

    def test_write_results_json_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        write_results_json({"b": 1, "a": [1, 2]})

        out = capsys.readouterr().out
        assert json.loads(out) == {"a": [1, 2], "b": 1}
        assert out.index('"a"') < out.index('"b"')

    def test_write_results_json_file(self, tmp_path: Path) -> None:
        path = tmp_path / "results.json"

        write_results_json({"a": 1}, str(path))

        assert json.loads(path.read_text(encoding="utf-8")) == {"a": 1}


class TestExportComponentGraph:
    """Tests for export_component_graph()."""

    def _export(self, results: Dict[str, Any], filename: str) -> None:
        export_component_graph(filename, results["graph"], results["lakos"], results["martin"], results["visibility"], results["cycles"])

    def test_graphml(self, tmp_path: Path, ring_results: Dict[str, Any]) -> None:
        path = tmp_path / "components.graphml"

        self._export(ring_results, str(path))

        G = nx.read_graphml(str(path))
        assert set(G.nodes()) == {"a", "b", "c"}
        assert G.number_of_edges() == 3
        assert G.nodes["a"]["depends_on"] == 3
        assert G.nodes["a"]["in_cycle"] is True
        assert G.nodes["a"]["instability"] == pytest.approx(0.5)

    def test_json(self, tmp_path: Path, ring_results: Dict[str, Any]) -> None:
        path = tmp_path / "components.json"

        self._export(ring_results, str(path))

        data = json.loads(path.read_text(encoding="utf-8"))
        nodes = {node["id"]: node for node in data["nodes"]}
        assert len(data["links"]) == 3
        assert nodes["b"]["relative_visibility"] == 1.0
        assert nodes["b"]["ce"] == 1

    def test_gexf(self, tmp_path: Path, ring_results: Dict[str, Any]) -> None:
        path = tmp_path / "components.gexf"

        self._export(ring_results, str(path))

        assert nx.read_gexf(str(path)).number_of_nodes() == 3

    def test_does_not_modify_input_graph(self, tmp_path: Path, ring_results: Dict[str, Any]) -> None:
        self._export(ring_results, str(tmp_path / "components.json"))

        assert dict(ring_results["graph"].nodes["a"]) == {}

    def test_unsupported_format(self, tmp_path: Path, ring_results: Dict[str, Any]) -> None:
        with pytest.raises(ValidationError, match="Unsupported graph format"):
            self._export(ring_results, str(tmp_path / "components.png"))
