#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# ****************************************************************************************************************************************************
# * BSD 3-Clause License
# *
# * Copyright (c) 2025, Mana Battery
# * All rights reserved.
# *
# * Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
# *
# * 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
# * 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
# *    documentation and/or other materials provided with the distribution.
# * 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
# *    software without specific prior written permission.
# *
# * THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
# * THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
# * CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
# * PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# * LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# * EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
"""Directed multigraph over caller supplied node identities.

Nodes are interned to dense integer indices in input order. A NetworkX
MultiDiGraph over those indices backs the algorithms in cycle_detection.py,
while the public methods translate back to the caller's node identities.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, DefaultDict, Dict, Hashable, Iterable, List, Tuple

import networkx as nx

from .constants import InvalidGraphError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Edge:
    """A directed dependency between two nodes.

    Edges compare by identity so that parallel edges with equal endpoints and
    descriptors stay independent inside the multigraph.

    Attributes:
        origin: Node the dependency starts from
        target: Node the dependency points to
        descriptor: Caller payload, e.g. the relation the edge was derived from
    """

    origin: Any
    target: Any
    descriptor: Any = None

    def __repr__(self) -> str:
        if self.descriptor is None:
            return f"Edge({self.origin!r} -> {self.target!r})"
        return f"Edge({self.origin!r} -> {self.target!r}, {self.descriptor!r})"


def as_edge(item: Any) -> Edge:
    """Convert an (origin, target) or (origin, target, descriptor) tuple into an Edge.

    Edge instances are returned unchanged.

    Raises:
        InvalidGraphError: If item is neither an Edge nor a 2- or 3-tuple
    """
    if isinstance(item, Edge):
        return item
    if isinstance(item, (tuple, list)) and len(item) in (2, 3):
        return Edge(*item)
    raise InvalidGraphError(f"Cannot interpret {item!r} as an edge")


class DependencyGraph:
    """Immutable directed multigraph with a precomputed adjacency index.

    Args:
        nodes: Hashable node identities; duplicates are collapsed keeping the first occurrence
        edges: Edge instances or (origin, target[, descriptor]) tuples

    Raises:
        InvalidGraphError: If a node is unhashable or an edge endpoint is not a node
    """

    def __init__(self, nodes: Iterable[Hashable], edges: Iterable[Any]):
        self._nodes: List[Any] = []
        self._index: Dict[Any, int] = {}
        for node in nodes:
            try:
                if node in self._index:
                    continue
            except TypeError as e:
                raise InvalidGraphError(f"Node {node!r} is not hashable") from e
            self._index[node] = len(self._nodes)
            self._nodes.append(node)

        self._edges: Tuple[Edge, ...] = tuple(as_edge(item) for item in edges)
        self._outgoing: DefaultDict[int, List[Edge]] = defaultdict(list)
        self._between: DefaultDict[Tuple[int, int], List[Edge]] = defaultdict(list)
        self._successors: DefaultDict[int, List[int]] = defaultdict(list)
        self._predecessors: DefaultDict[int, List[int]] = defaultdict(list)

        index_graph: "nx.MultiDiGraph[int]" = nx.MultiDiGraph()
        index_graph.add_nodes_from(range(len(self._nodes)))

        for key, edge in enumerate(self._edges):
            origin = self._lookup(edge.origin, edge)
            target = self._lookup(edge.target, edge)
            if not self._between[(origin, target)]:
                self._successors[origin].append(target)
                self._predecessors[target].append(origin)
            self._outgoing[origin].append(edge)
            self._between[(origin, target)].append(edge)
            index_graph.add_edge(origin, target, key=key)

        self._index_graph = index_graph
        logger.debug("Built dependency graph with %s nodes and %s edges", len(self._nodes), len(self._edges))

    def _lookup(self, node: Any, edge: Edge) -> int:
        try:
            return self._index[node]
        except KeyError:
            raise InvalidGraphError(f"{edge!r} references unknown node {node!r}") from None
        except TypeError as e:
            raise InvalidGraphError(f"{edge!r} references unhashable node {node!r}") from e

    @property
    def nodes(self) -> Tuple[Any, ...]:
        """Nodes in input order."""
        return tuple(self._nodes)

    @property
    def edges(self) -> Tuple[Edge, ...]:
        """Edges in input order."""
        return self._edges

    @property
    def index_graph(self) -> "nx.MultiDiGraph[int]":
        """The backing MultiDiGraph over node indices. Callers must not modify it."""
        return self._index_graph

    def number_of_nodes(self) -> int:
        return len(self._nodes)

    def number_of_edges(self) -> int:
        return len(self._edges)

    def __contains__(self, node: Any) -> bool:
        try:
            return node in self._index
        except TypeError:
            return False

    def index_of(self, node: Any) -> int:
        """Dense index of a node.

        Raises:
            InvalidGraphError: If node is not part of the graph
        """
        if node not in self:
            raise InvalidGraphError(f"Unknown node {node!r}")
        return self._index[node]

    def node_at(self, index: int) -> Any:
        return self._nodes[index]

    def outgoing_edges(self, node: Any) -> List[Edge]:
        """All edges starting at node, in input order."""
        return list(self._outgoing.get(self.index_of(node), ()))

    def edges_between(self, origin: Any, target: Any) -> List[Edge]:
        """All parallel edges from origin to target, in input order."""
        return list(self._between.get((self.index_of(origin), self.index_of(target)), ()))

    def successors(self, node: Any) -> List[Any]:
        """Distinct successors ordered by the first edge leading to them."""
        return [self._nodes[i] for i in self._successors.get(self.index_of(node), ())]

    def has_self_loop(self, node: Any) -> bool:
        index = self.index_of(node)
        return (index, index) in self._between

    # Index level accessors used by the cycle detector

    def successor_indices(self, index: int) -> List[int]:
        return self._successors.get(index, [])

    def predecessor_indices(self, index: int) -> List[int]:
        return self._predecessors.get(index, [])

    def edges_between_indices(self, origin: int, target: int) -> List[Edge]:
        return self._between.get((origin, target), [])

    def has_self_loop_index(self, index: int) -> bool:
        return (index, index) in self._between

    def to_networkx(self) -> "nx.MultiDiGraph[Any]":
        """Return a copy labelled with the caller's node identities.

        Each edge keeps its descriptor under the 'descriptor' attribute.
        """
        graph: "nx.MultiDiGraph[Any]" = nx.MultiDiGraph()
        graph.add_nodes_from(self._nodes)
        for edge in self._edges:
            graph.add_edge(edge.origin, edge.target, descriptor=edge.descriptor)
        return graph
