#!/usr/bin/env python3
"""Tests for archgraph/graph_model.py"""

import pytest

from archgraph.constants import InvalidGraphError
from archgraph.graph_model import DependencyGraph, Edge, as_edge


class TestDependencyGraphConstruction:
    """Tests for DependencyGraph validation."""

    def test_simple_graph(self) -> None:
        """Test building a graph from tuples."""
        graph = DependencyGraph(["a", "b", "c"], [("a", "b"), ("b", "c")])

        assert graph.nodes == ("a", "b", "c")
        assert graph.number_of_nodes() == 3
        assert graph.number_of_edges() == 2
        assert "a" in graph
        assert "z" not in graph

    def test_empty_graph(self) -> None:
        """Test with no nodes and no edges."""
        graph = DependencyGraph([], [])

        assert graph.number_of_nodes() == 0
        assert graph.number_of_edges() == 0

    def test_unknown_target_rejected(self) -> None:
        """Edges must not reference nodes outside the node set."""
        with pytest.raises(InvalidGraphError, match="unknown node 'x'"):
            DependencyGraph(["a"], [("a", "x")])

    def test_unknown_origin_rejected(self) -> None:
        """Test the origin side of the endpoint check."""
        with pytest.raises(InvalidGraphError):
            DependencyGraph(["a"], [Edge("x", "a")])

    def test_unhashable_node_rejected(self) -> None:
        """Nodes must be hashable to be interned."""
        with pytest.raises(InvalidGraphError, match="not hashable"):
            DependencyGraph([["a"]], [])

    def test_duplicate_nodes_collapsed(self) -> None:
        """Duplicate nodes keep their first position."""
        graph = DependencyGraph(["b", "a", "b"], [])

        assert graph.nodes == ("b", "a")
        assert graph.index_of("b") == 0
        assert graph.node_at(1) == "a"

    def test_self_loop_allowed(self) -> None:
        """A node may depend on itself."""
        graph = DependencyGraph(["a", "b"], [("a", "a"), ("a", "b")])

        assert graph.has_self_loop("a")
        assert not graph.has_self_loop("b")

    def test_tuple_nodes(self) -> None:
        """Any hashable identity works, e.g. tuples."""
        graph = DependencyGraph([("pkg", 1), ("pkg", 2)], [(("pkg", 1), ("pkg", 2))])

        assert graph.successors(("pkg", 1)) == [("pkg", 2)]


class TestAdjacency:
    """Tests for adjacency lookups."""

    def test_parallel_edges_retained(self) -> None:
        """Multigraph keeps parallel edges independently and in input order."""
        first = Edge("a", "b", "call")
        second = Edge("a", "b", "call")
        third = Edge("a", "b", "field")
        graph = DependencyGraph(["a", "b"], [first, second, third])

        between = graph.edges_between("a", "b")
        assert len(between) == 3
        assert between[0] is first
        assert between[1] is second
        assert between[2] is third
        assert graph.edges_between("b", "a") == []

    def test_outgoing_edges_in_input_order(self) -> None:
        """Outgoing edges keep input order across targets."""
        graph = DependencyGraph(["a", "b", "c"], [("a", "c"), ("a", "b"), ("a", "c")])

        targets = [edge.target for edge in graph.outgoing_edges("a")]
        assert targets == ["c", "b", "c"]
        assert graph.outgoing_edges("b") == []

    def test_successors_distinct_by_first_edge(self) -> None:
        """Successors are deduplicated and ordered by first edge."""
        graph = DependencyGraph(["a", "b", "c"], [("a", "c"), ("a", "b"), ("a", "c")])

        assert graph.successors("a") == ["c", "b"]

    def test_lookup_of_unknown_node(self) -> None:
        """Lookups with unknown nodes raise InvalidGraphError."""
        graph = DependencyGraph(["a"], [])

        with pytest.raises(InvalidGraphError):
            graph.outgoing_edges("missing")

    def test_index_graph_is_multigraph(self) -> None:
        """Backing graph counts parallel edges."""
        graph = DependencyGraph(["a", "b"], [("a", "b"), ("a", "b")])

        assert graph.index_graph.number_of_edges(0, 1) == 2

    def test_to_networkx_keeps_descriptors(self) -> None:
        """Labelled export keeps nodes, parallel edges and descriptors."""
        graph = DependencyGraph(["a", "b"], [("a", "b", "x"), ("a", "b", "y")])

        exported = graph.to_networkx()
        assert set(exported.nodes()) == {"a", "b"}
        assert exported.number_of_edges("a", "b") == 2
        descriptors = sorted(data["descriptor"] for _, _, data in exported.edges(data=True))
        assert descriptors == ["x", "y"]


class TestAsEdge:
    """Tests for as_edge conversion."""

    def test_tuple_with_descriptor(self) -> None:
        edge = as_edge(("a", "b", "desc"))

        assert edge.origin == "a"
        assert edge.target == "b"
        assert edge.descriptor == "desc"

    def test_edge_passthrough(self) -> None:
        edge = Edge("a", "b")

        assert as_edge(edge) is edge

    def test_invalid_item(self) -> None:
        with pytest.raises(InvalidGraphError):
            as_edge("a->b")

    def test_edges_compare_by_identity(self) -> None:
        """Equal looking edges stay distinct."""
        assert Edge("a", "b") != Edge("a", "b")
        assert repr(Edge("a", "b")) == "Edge('a' -> 'b')"
