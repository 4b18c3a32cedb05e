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
"""Component dependency metrics after Robert C. Martin.

Per component c, counting only other components:

    Ce(c) = number of components c depends on (efferent coupling)
    Ca(c) = number of components depending on c (afferent coupling)
    I(c)  = Ce / (Ce + Ca), 0 for an isolated component (instability)
    A(c)  = visible abstract elements / visible elements, 0 without visible elements (abstractness)
    D(c)  = |A + I - 1| (normalized distance from the main sequence)

Abstractness only counts elements visible outside the component. Hidden
elements cannot be depended upon from other components, so they do not take
part in inter-component coupling. This deviates from Martin's original
definition, which counts all classes.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

import numpy as np

from .components import AbstractnessOracle, ComponentsInput, MetricsComponent, as_metrics_components, component_dependency_graph
from .constants import DEFAULT_DISTANCE_THRESHOLD, MAIN_SEQUENCE_MIDPOINT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComponentDependencyMetrics:
    """Martin metrics of a single component.

    Attributes:
        efferent_coupling: Ce, components this component depends on
        afferent_coupling: Ca, components depending on this component
        instability: I, 0=stable, 1=unstable
        abstractness: A, share of abstract elements among visible elements
        normalized_distance_from_main_sequence: D, 0=on the main sequence
    """

    efferent_coupling: int
    afferent_coupling: int
    instability: float
    abstractness: float
    normalized_distance_from_main_sequence: float


@dataclass(frozen=True)
class MainSequenceSummary:
    """Aggregate view over the distance from the main sequence.

    Attributes:
        mean_distance: Arithmetic mean of D over all components
        max_distance: Largest D
        zone_of_pain: Stable, concrete components far from the main sequence
        zone_of_uselessness: Unstable, abstract components far from the main sequence
    """

    mean_distance: float
    max_distance: float
    zone_of_pain: List[str] = field(default_factory=list)
    zone_of_uselessness: List[str] = field(default_factory=list)


def calculate_abstractness(component: MetricsComponent, abstractness_oracle: AbstractnessOracle) -> float:
    visible = 0
    abstract = 0
    for element in component.elements:
        traits = abstractness_oracle(element)
        if traits.visible:
            visible += 1
            if traits.abstract:
                abstract += 1
    return abstract / visible if visible > 0 else 0.0


def component_dependency_metrics(
    components: ComponentsInput, dependencies: Iterable[Any], abstractness_oracle: AbstractnessOracle
) -> Dict[str, ComponentDependencyMetrics]:
    """Calculate Ce, Ca, I, A and D for every component.

    Args:
        components: Components to measure
        dependencies: Element level dependencies, Edge instances or (origin, target[, descriptor]) tuples
        abstractness_oracle: Returns ElementTraits for each element of a component

    Returns:
        Dictionary mapping component identifier to its metrics, in component order

    Raises:
        InvalidGraphError: If a component identifier is empty or duplicated, or the oracle rejects an element
    """
    metrics_components = as_metrics_components(components)
    graph = component_dependency_graph(metrics_components, dependencies)

    # Derived graph has no self-loops and no parallel edges, so degrees count distinct other components
    out_degrees = dict(graph.out_degree())
    in_degrees = dict(graph.in_degree())

    result: Dict[str, ComponentDependencyMetrics] = {}
    for component in metrics_components:
        efferent = out_degrees[component.identifier]
        afferent = in_degrees[component.identifier]
        coupling = efferent + afferent
        instability = efferent / coupling if coupling > 0 else 0.0
        abstractness = calculate_abstractness(component, abstractness_oracle)
        result[component.identifier] = ComponentDependencyMetrics(
            efferent_coupling=efferent,
            afferent_coupling=afferent,
            instability=instability,
            abstractness=abstractness,
            normalized_distance_from_main_sequence=abs(abstractness + instability - 1),
        )

    logger.debug("Calculated component dependency metrics for %s components", len(result))
    return result


def summarize_main_sequence(
    metrics: Dict[str, ComponentDependencyMetrics], distance_threshold: float = DEFAULT_DISTANCE_THRESHOLD
) -> MainSequenceSummary:
    """Summarize how far components are from the main sequence.

    Args:
        metrics: Result of component_dependency_metrics()
        distance_threshold: Minimum D for a component to be placed in a zone

    Returns:
        MainSequenceSummary; zones list component identifiers in input order
    """
    if not metrics:
        return MainSequenceSummary(mean_distance=0.0, max_distance=0.0)

    distances = [m.normalized_distance_from_main_sequence for m in metrics.values()]
    zone_of_pain = []
    zone_of_uselessness = []
    for identifier, m in metrics.items():
        if m.normalized_distance_from_main_sequence < distance_threshold:
            continue
        if m.abstractness < MAIN_SEQUENCE_MIDPOINT and m.instability < MAIN_SEQUENCE_MIDPOINT:
            zone_of_pain.append(identifier)
        elif m.abstractness > MAIN_SEQUENCE_MIDPOINT and m.instability > MAIN_SEQUENCE_MIDPOINT:
            zone_of_uselessness.append(identifier)

    return MainSequenceSummary(
        mean_distance=float(np.mean(distances)),
        max_distance=float(np.max(distances)),
        zone_of_pain=zone_of_pain,
        zone_of_uselessness=zone_of_uselessness,
    )
