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
"""Bounded enumeration of elementary cycles in a dependency multigraph.

Detection runs in two phases:

1. The whole graph is decomposed into strongly connected components (SCCs)
   using NetworkX. Trivial SCCs (a single node without a self-loop) are
   discarded. This phase always completes before any cap is applied, so a
   capped result never hides whether the graph is cyclic.

2. Johnson's algorithm enumerates elementary cycles inside each remaining SCC.
   Nodes on the current path are blocked and only unblocked once a cycle
   through them was found, which keeps dense SCCs tractable. Enumeration stops
   as soon as max_cycles cycles were emitted.

Ordering is deterministic for a given input order of nodes and edges:
SCCs are visited by their earliest node, start nodes ascend in input order,
every cycle begins at its earliest node, and successors are explored in the
order of the first edge leading to them. networkx.simple_cycles does not
guarantee this order, so enumeration is implemented here.
"""

import itertools
import logging
import time
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, DefaultDict, Iterable, Iterator, List, Optional, Set, Tuple

import networkx as nx

from .config import validate_cap, validate_time_budget
from .constants import DEFAULT_MAX_CYCLES, DEFAULT_MAX_EDGES_PER_STEP, ResourceExhaustion
from .graph_model import DependencyGraph, Edge

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CycleStep:
    """One hop of a cycle.

    Attributes:
        origin: Node the step starts from
        target: Node the step leads to
        edges: At most max_edges_per_step edges from origin to target, in input order
        edge_count: True number of edges from origin to target
    """

    origin: Any
    target: Any
    edges: Tuple[Edge, ...]
    edge_count: int

    @property
    def suppressed_edge_count(self) -> int:
        """Number of edges left out of the report by the per-step cap."""
        return self.edge_count - len(self.edges)


@dataclass(frozen=True)
class Cycle:
    """An elementary cycle as an ordered sequence of steps."""

    steps: Tuple[CycleStep, ...]

    @property
    def nodes(self) -> Tuple[Any, ...]:
        """Nodes of the cycle starting with its earliest node, without repeating it at the end."""
        return tuple(step.origin for step in self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    def describe(self) -> str:
        """Plain description such as 'a -> b -> a'."""
        names = [str(node) for node in self.nodes]
        return " -> ".join(names + names[:1])


@dataclass(frozen=True)
class Cycles:
    """Result of one detection run.

    Attributes:
        cycles: Detected cycles, never more than the max_cycles cap
        truncated: True if more cycles exist than were reported
    """

    cycles: Tuple[Cycle, ...]
    truncated: bool

    def __iter__(self) -> Iterator[Cycle]:
        return iter(self.cycles)

    def __len__(self) -> int:
        return len(self.cycles)

    def __getitem__(self, position: int) -> Cycle:
        return self.cycles[position]

    def is_empty(self) -> bool:
        return not self.cycles


def detect_cycles(
    nodes: Iterable[Any],
    edges: Iterable[Any],
    max_cycles: int = DEFAULT_MAX_CYCLES,
    max_edges_per_step: int = DEFAULT_MAX_EDGES_PER_STEP,
    time_budget: Optional[float] = None,
) -> Cycles:
    """Detect elementary cycles in the graph formed by nodes and edges.

    Args:
        nodes: Hashable node identities
        edges: Edge instances or (origin, target[, descriptor]) tuples
        max_cycles: Maximum number of cycles to report
        max_edges_per_step: Maximum edges to report per cycle step
        time_budget: Optional limit in seconds for the SCC decomposition

    Returns:
        Cycles with truncated=True if the max_cycles cap stopped enumeration early

    Raises:
        ConfigurationError: If a cap is not a positive integer
        InvalidGraphError: If an edge references an unknown node
        ResourceExhaustion: If the SCC decomposition runs out of memory or time
    """
    return find_cycles(DependencyGraph(nodes, edges), max_cycles, max_edges_per_step, time_budget)


def find_cycles(
    graph: DependencyGraph,
    max_cycles: int = DEFAULT_MAX_CYCLES,
    max_edges_per_step: int = DEFAULT_MAX_EDGES_PER_STEP,
    time_budget: Optional[float] = None,
) -> Cycles:
    """Detect elementary cycles in an already built DependencyGraph.

    See detect_cycles() for arguments and errors.
    """
    validate_cap("max_cycles", max_cycles)
    validate_cap("max_edges_per_step", max_edges_per_step)
    time_budget = validate_time_budget(time_budget)

    components = find_cyclic_components(graph, time_budget)
    logger.debug("Found %s cyclic strongly connected components", len(components))

    paths = itertools.chain.from_iterable(_elementary_cycles(graph, component) for component in components)
    found = list(itertools.islice(paths, max_cycles))
    truncated = len(found) == max_cycles and next(paths, None) is not None
    if truncated:
        logger.warning("Cycle detection stopped after %s cycles; more cycles exist", max_cycles)

    cycles = tuple(_to_cycle(graph, path, max_edges_per_step) for path in found)
    return Cycles(cycles=cycles, truncated=truncated)


def find_cyclic_components(graph: DependencyGraph, time_budget: Optional[float] = None) -> List[List[int]]:
    """Decompose the whole graph into SCCs and keep those that contain a cycle.

    Args:
        graph: Graph to decompose
        time_budget: Optional limit in seconds

    Returns:
        Sorted node index lists, ordered by their smallest index

    Raises:
        ResourceExhaustion: If memory runs out or the time budget is exceeded
    """
    deadline = None if time_budget is None else time.monotonic() + time_budget
    components: List[List[int]] = []
    try:
        for scc in nx.strongly_connected_components(graph.index_graph):
            if deadline is not None and time.monotonic() > deadline:
                raise ResourceExhaustion(f"SCC decomposition of {graph.number_of_nodes()} nodes exceeded {time_budget}s")
            if len(scc) > 1:
                components.append(sorted(scc))
            else:
                index = next(iter(scc))
                if graph.has_self_loop_index(index):
                    components.append([index])
    except MemoryError as e:
        raise ResourceExhaustion(f"SCC decomposition of {graph.number_of_nodes()} nodes ran out of memory") from e

    components.sort(key=lambda component: component[0])
    return components


def _elementary_cycles(graph: DependencyGraph, component: List[int]) -> Iterator[List[int]]:
    """Yield elementary cycles of one SCC as node index paths.

    For each start node s in ascending order, cycles through s are searched
    in the part of the SCC that only contains nodes >= s, so every cycle is
    reported exactly once, starting at its smallest node.
    """
    members = set(component)
    for start in component:
        allowed = {index for index in members if index >= start}
        subcomponent = _component_containing(graph, start, allowed)
        if subcomponent is not None:
            yield from _circuits(graph, start, subcomponent)


def _component_containing(graph: DependencyGraph, start: int, allowed: Set[int]) -> Optional[Set[int]]:
    """SCC of start within the subgraph induced by allowed, or None if it holds no cycle through start."""
    forward = _reachable(start, allowed, graph.successor_indices)
    backward = _reachable(start, allowed, graph.predecessor_indices)
    component = forward & backward
    if len(component) == 1 and not graph.has_self_loop_index(start):
        return None
    return component


def _reachable(start: int, allowed: Set[int], neighbours: Any) -> Set[int]:
    seen = {start}
    stack = [start]
    while stack:
        for neighbour in neighbours(stack.pop()):
            if neighbour in allowed and neighbour not in seen:
                seen.add(neighbour)
                stack.append(neighbour)
    return seen


def _circuits(graph: DependencyGraph, start: int, component: Set[int]) -> Iterator[List[int]]:
    """Johnson's circuit search from start, iterative to avoid recursion limits."""
    successors = {node: [w for w in graph.successor_indices(node) if w in component] for node in component}

    path = [start]
    blocked = {start}
    blocked_by: DefaultDict[int, Set[int]] = defaultdict(set)
    closed = [False]
    stack = [iter(successors[start])]

    while stack:
        for neighbour in stack[-1]:
            if neighbour == start:
                yield list(path)
                closed[-1] = True
            elif neighbour not in blocked:
                path.append(neighbour)
                closed.append(False)
                stack.append(iter(successors[neighbour]))
                blocked.add(neighbour)
                break
        else:
            stack.pop()
            node = path.pop()
            if closed.pop():
                if closed:
                    closed[-1] = True
                _unblock(node, blocked, blocked_by)
            else:
                for neighbour in successors[node]:
                    blocked_by[neighbour].add(node)


def _unblock(node: int, blocked: Set[int], blocked_by: DefaultDict[int, Set[int]]) -> None:
    pending = [node]
    while pending:
        current = pending.pop()
        if current in blocked:
            blocked.remove(current)
            pending.extend(blocked_by[current])
            blocked_by[current].clear()


def _to_cycle(graph: DependencyGraph, path: List[int], max_edges_per_step: int) -> Cycle:
    steps = []
    for position, origin in enumerate(path):
        target = path[(position + 1) % len(path)]
        edges = graph.edges_between_indices(origin, target)
        steps.append(
            CycleStep(
                origin=graph.node_at(origin),
                target=graph.node_at(target),
                edges=tuple(edges[:max_edges_per_step]),
                edge_count=len(edges),
            )
        )
    return Cycle(steps=tuple(steps))
