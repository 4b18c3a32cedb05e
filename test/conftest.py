#!/usr/bin/env python3
"""Pytest configuration and shared fixtures for archgraph tests.

Graph fixtures are given as (nodes, edges) with plain string nodes. Component
fixtures map component identifiers to their elements and use one element per
component unless stated otherwise, with element level dependencies as
(origin, target) tuples.

Fixture Complexity Levels:
- simple: 1-6 nodes, literal expected values from the literature
- dense: complete digraphs whose cycle counts are known in closed form
"""

import sys
from itertools import permutations
from pathlib import Path
from typing import Dict, List, Tuple

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from archgraph.components import ElementTraits


@pytest.fixture
def ring_graph() -> Tuple[List[str], List[Tuple[str, str]]]:
    """Ring A->B->C->A."""
    return ["A", "B", "C"], [("A", "B"), ("B", "C"), ("C", "A")]


@pytest.fixture
def acyclic_graph() -> Tuple[List[str], List[Tuple[str, str]]]:
    """Diamond A->B, A->C, B->D, C->D."""
    return ["A", "B", "C", "D"], [("A", "B"), ("A", "C"), ("B", "D"), ("C", "D")]


def complete_digraph(size: int) -> Tuple[List[str], List[Tuple[str, str]]]:
    """Complete digraph without self-loops on nodes n0..n{size-1}."""
    nodes = [f"n{i}" for i in range(size)]
    return nodes, list(permutations(nodes, 2))


@pytest.fixture
def complete_graph_4() -> Tuple[List[str], List[Tuple[str, str]]]:
    """Complete digraph on 4 nodes: 6 + 8 + 6 = 20 elementary cycles."""
    return complete_digraph(4)


@pytest.fixture
def ring_components() -> Tuple[Dict[str, List[str]], List[Tuple[str, str]]]:
    """Three components depending on each other in a ring."""
    components = {"a": ["a.X"], "b": ["b.X"], "c": ["c.X"]}
    dependencies = [("a.X", "b.X"), ("b.X", "c.X"), ("c.X", "a.X")]
    return components, dependencies


@pytest.fixture
def six_components() -> Tuple[Dict[str, List[str]], List[Tuple[str, str]]]:
    """Reference graph: one->two, three->two, two->four, two->five, two->six, five->six."""
    names = ["one", "two", "three", "four", "five", "six"]
    components = {name: [f"{name}.Element"] for name in names}
    pairs = [("one", "two"), ("three", "two"), ("two", "four"), ("two", "five"), ("two", "six"), ("five", "six")]
    dependencies = [(f"{origin}.Element", f"{target}.Element") for origin, target in pairs]
    return components, dependencies


@pytest.fixture
def layered_components() -> Tuple[Dict[str, List[str]], List[Tuple[str, str]], Dict[str, ElementTraits]]:
    """Components with mixed visibility and abstractness.

    Structure:
        app  (2 public concrete)            -> api, core
        api  (1 public interface, 1 hidden abstract)
        core (1 public concrete, 2 hidden concrete)
        util (isolated, 1 hidden concrete)
    """
    components = {
        "app": ["app.Main", "app.Cli"],
        "api": ["api.Service", "api.Base"],
        "core": ["core.Engine", "core.Cache", "core.Pool"],
        "util": ["util.Strings"],
    }
    traits = {
        "app.Main": ElementTraits(visible=True, abstract=False),
        "app.Cli": ElementTraits(visible=True, abstract=False),
        "api.Service": ElementTraits(visible=True, abstract=True),
        "api.Base": ElementTraits(visible=False, abstract=True),
        "core.Engine": ElementTraits(visible=True, abstract=False),
        "core.Cache": ElementTraits(visible=False, abstract=False),
        "core.Pool": ElementTraits(visible=False, abstract=False),
        "util.Strings": ElementTraits(visible=False, abstract=False),
    }
    dependencies = [
        ("app.Main", "api.Service"),
        ("app.Cli", "api.Service"),
        ("app.Main", "core.Engine"),
        ("core.Engine", "core.Cache"),
    ]
    return components, dependencies, traits
