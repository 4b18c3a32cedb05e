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
"""Cumulative component dependency metrics after John Lakos.

For every component c, DependsOn(c) counts c itself plus every component that
is transitively reachable from c in the component dependency graph. Components
of one cycle reach each other and therefore share the same value, which is how
cycles inflate the aggregates:

    CCD   = sum of DependsOn(c) over all components
    ACD   = CCD / n
    RACD  = ACD / n
    NCCD  = CCD / CCD of a balanced binary tree with n components

Reachability counts are exact integers; only the ratios are floats.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable

import networkx as nx

from .components import ComponentsInput, as_metrics_components, component_dependency_graph
from .constants import ResourceExhaustion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LakosMetrics:
    """Lakos metrics of one set of components.

    Attributes:
        cumulative_component_dependency: CCD
        average_component_dependency: ACD
        relative_average_component_dependency: RACD
        normalized_cumulative_component_dependency: NCCD
        depends_on: DependsOn per component identifier, in component order
    """

    cumulative_component_dependency: int
    average_component_dependency: float
    relative_average_component_dependency: float
    normalized_cumulative_component_dependency: float
    depends_on: Dict[str, int]

    def get_depends_on(self, identifier: str) -> int:
        return self.depends_on[identifier]


def balanced_binary_tree_ccd(number_of_components: int) -> int:
    """CCD of a balanced binary tree with the given number of components.

    The tree is filled level by level. Each node depends on its whole subtree,
    so the CCD equals the sum of all node depths, counting the root as depth 1.

    Example:
        >>> balanced_binary_tree_ccd(6)  # 1 + 2*2 + 3*3
        14
    """
    if number_of_components < 0:
        raise ValueError(f"number_of_components must not be negative, got {number_of_components}")
    total = 0
    depth = 1
    remaining = number_of_components
    while remaining > 0:
        on_level = min(2 ** (depth - 1), remaining)
        total += on_level * depth
        remaining -= on_level
        depth += 1
    return total


def lakos_metrics(components: ComponentsInput, dependencies: Iterable[Any]) -> LakosMetrics:
    """Calculate CCD, ACD, RACD and NCCD.

    Args:
        components: Components to measure
        dependencies: Element level dependencies, Edge instances or (origin, target[, descriptor]) tuples

    Returns:
        LakosMetrics; all values are zero for an empty component set

    Raises:
        InvalidGraphError: If a component identifier is empty or duplicated
        ResourceExhaustion: If the reachability computation runs out of memory
    """
    metrics_components = as_metrics_components(components)
    graph = component_dependency_graph(metrics_components, dependencies)

    try:
        depends_on = {identifier: len(nx.descendants(graph, identifier)) + 1 for identifier in metrics_components.identifiers}
    except MemoryError as e:
        raise ResourceExhaustion(f"Reachability of {len(metrics_components)} components ran out of memory") from e

    count = len(depends_on)
    ccd = sum(depends_on.values())
    if count == 0:
        return LakosMetrics(0, 0.0, 0.0, 0.0, {})

    acd = ccd / count
    racd = acd / count
    nccd = ccd / balanced_binary_tree_ccd(count)
    logger.debug("Lakos metrics for %s components: CCD=%s ACD=%.3f RACD=%.3f NCCD=%.3f", count, ccd, acd, racd, nccd)
    return LakosMetrics(
        cumulative_component_dependency=ccd,
        average_component_dependency=acd,
        relative_average_component_dependency=racd,
        normalized_cumulative_component_dependency=nccd,
        depends_on=depends_on,
    )
