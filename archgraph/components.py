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
"""Components used as nodes of the metric calculations.

A MetricsComponent groups code elements (classes, modules, ...) under a
unique identifier, e.g. one component per package. The metric modules work
on the component dependency graph derived from element level dependencies:
an edge A -> B exists if any element of A depends on any element of B and
A differs from B.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Tuple, Union

import networkx as nx

from .constants import InvalidGraphError
from .graph_model import Edge, as_edge

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ElementTraits:
    """Traits of a single element as reported by an oracle.

    Attributes:
        visible: Element is visible outside its component (e.g. public)
        abstract: Element is abstract (abstract class, interface, protocol)
    """

    visible: bool
    abstract: bool = False


AbstractnessOracle = Callable[[Any], ElementTraits]
VisibilityOracle = Callable[[Any], bool]


@dataclass(frozen=True)
class MetricsComponent:
    """Named grouping of elements.

    Attributes:
        identifier: Unique, non-empty identifier
        elements: Elements in first-seen order, without duplicates
    """

    identifier: str
    elements: Tuple[Any, ...]

    @staticmethod
    def of(identifier: str, elements: Iterable[Any]) -> "MetricsComponent":
        return MetricsComponent(identifier=identifier, elements=tuple(dict.fromkeys(elements)))

    def __len__(self) -> int:
        return len(self.elements)

    def __contains__(self, element: Any) -> bool:
        return element in self.elements


class MetricsComponents:
    """Ordered, validated collection of MetricsComponent.

    Raises:
        InvalidGraphError: If an identifier is empty, not a string, or used twice
    """

    def __init__(self, components: Iterable[MetricsComponent]):
        self._components: Dict[str, MetricsComponent] = {}
        for component in components:
            identifier = component.identifier
            if not isinstance(identifier, str) or not identifier.strip():
                raise InvalidGraphError(f"Component identifier must be a non-empty string, got {identifier!r}")
            if identifier in self._components:
                raise InvalidGraphError(f"Duplicate component identifier {identifier!r}")
            self._components[identifier] = component

        self._owners: Dict[Any, List[str]] = {}
        for identifier, component in self._components.items():
            for element in component.elements:
                self._owners.setdefault(element, []).append(identifier)

    @property
    def identifiers(self) -> List[str]:
        return list(self._components)

    def __iter__(self) -> Iterator[MetricsComponent]:
        return iter(self._components.values())

    def __len__(self) -> int:
        return len(self._components)

    def __getitem__(self, identifier: str) -> MetricsComponent:
        return self._components[identifier]

    def owners_of(self, element: Any) -> List[str]:
        """Identifiers of the components containing element (empty if none)."""
        return self._owners.get(element, [])


ComponentsInput = Union[MetricsComponents, Iterable[MetricsComponent], Mapping[str, Iterable[Any]]]


def as_metrics_components(components: ComponentsInput) -> MetricsComponents:
    """Accept MetricsComponents, an iterable of MetricsComponent, or a mapping of identifier to elements."""
    if isinstance(components, MetricsComponents):
        return components
    if isinstance(components, Mapping):
        return MetricsComponents(MetricsComponent.of(identifier, elements) for identifier, elements in components.items())
    return MetricsComponents(components)


def component_edges(components: MetricsComponents, dependencies: Iterable[Any]) -> List[Edge]:
    """Lift element dependencies to component edges, one edge per crossing dependency.

    The resulting multigraph keeps every originating element dependency as the
    edge descriptor, which is what cycle detection reports per step.

    Args:
        components: Validated components
        dependencies: Element level Edge instances or (origin, target[, descriptor]) tuples

    Returns:
        Edges between distinct component identifiers, in input order
    """
    edges: List[Edge] = []
    ignored = 0
    for item in dependencies:
        dependency = as_edge(item)
        origins = components.owners_of(dependency.origin)
        targets = components.owners_of(dependency.target)
        if not origins or not targets:
            ignored += 1
            continue
        for origin in origins:
            for target in targets:
                if origin != target:
                    edges.append(Edge(origin, target, dependency))
    if ignored:
        logger.debug("Ignored %s dependencies on elements outside all components", ignored)
    return edges


def component_dependency_graph(components: MetricsComponents, dependencies: Iterable[Any]) -> "nx.DiGraph[str]":
    """Build the derived component dependency graph.

    Nodes are all component identifiers in component order; parallel element
    dependencies collapse into a single edge and self-dependencies are dropped.
    """
    graph: "nx.DiGraph[str]" = nx.DiGraph()
    graph.add_nodes_from(components.identifiers)
    graph.add_edges_from((edge.origin, edge.target) for edge in component_edges(components, dependencies))
    logger.debug("Derived component graph with %s components and %s dependencies", graph.number_of_nodes(), graph.number_of_edges())
    return graph


def traits_lookup(traits: Mapping[Any, ElementTraits]) -> AbstractnessOracle:
    """Build an abstractness oracle from a mapping of element to traits.

    Raises:
        InvalidGraphError: When the oracle is asked about an element missing from the mapping
    """

    def oracle(element: Any) -> ElementTraits:
        try:
            return traits[element]
        except KeyError:
            raise InvalidGraphError(f"No traits known for element {element!r}") from None

    return oracle


def visibility_lookup(traits: Mapping[Any, ElementTraits]) -> VisibilityOracle:
    """Build a visibility oracle from the same mapping used by traits_lookup()."""
    oracle = traits_lookup(traits)
    return lambda element: oracle(element).visible
