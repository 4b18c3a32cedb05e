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
"""Export utilities for writing analysis results to JSON and graph file formats.

All JSON output is deterministic: keys are sorted and collections keep the
order in which the analysis produced them, so results of two runs can be
diffed directly.
"""

import json
import logging
import os
import sys
from typing import Any, Dict, Optional, Set

import networkx as nx
from networkx.readwrite import json_graph

from .color_utils import print_success
from .constants import SUPPORTED_GRAPH_FORMATS, ValidationError
from .cycle_detection import Cycles
from .graph_model import Edge
from .lakos_metrics import LakosMetrics
from .martin_metrics import ComponentDependencyMetrics, MainSequenceSummary
from .visibility_metrics import VisibilityMetrics

logger = logging.getLogger(__name__)


def describe_edge(edge: Edge) -> str:
    """Describe an edge by its innermost descriptor, e.g. the element dependency a component edge was lifted from."""
    while isinstance(edge.descriptor, Edge):
        edge = edge.descriptor
    if edge.descriptor is None:
        return f"{edge.origin} -> {edge.target}"
    return str(edge.descriptor)


def serialize_cycles(cycles: Cycles) -> Dict[str, Any]:
    """Serialize cycles with every step's reported edges and true edge count."""
    return {
        "truncated": cycles.truncated,
        "count": len(cycles),
        "cycles": [
            {
                "description": cycle.describe(),
                "steps": [
                    {
                        "origin": str(step.origin),
                        "target": str(step.target),
                        "edge_count": step.edge_count,
                        "edges": [describe_edge(edge) for edge in step.edges],
                    }
                    for step in cycle.steps
                ],
            }
            for cycle in cycles
        ],
    }


def serialize_lakos_metrics(metrics: LakosMetrics) -> Dict[str, Any]:
    return {
        "ccd": metrics.cumulative_component_dependency,
        "acd": metrics.average_component_dependency,
        "racd": metrics.relative_average_component_dependency,
        "nccd": metrics.normalized_cumulative_component_dependency,
        "depends_on": dict(metrics.depends_on),
    }


def serialize_component_dependency_metrics(metrics: Dict[str, ComponentDependencyMetrics], summary: MainSequenceSummary) -> Dict[str, Any]:
    return {
        "components": {
            identifier: {
                "ce": m.efferent_coupling,
                "ca": m.afferent_coupling,
                "i": m.instability,
                "a": m.abstractness,
                "d": m.normalized_distance_from_main_sequence,
            }
            for identifier, m in metrics.items()
        },
        "mean_distance": summary.mean_distance,
        "max_distance": summary.max_distance,
        "zone_of_pain": list(summary.zone_of_pain),
        "zone_of_uselessness": list(summary.zone_of_uselessness),
    }


def serialize_visibility_metrics(metrics: VisibilityMetrics) -> Dict[str, Any]:
    return {
        "rv": dict(metrics.relative_visibility),
        "arv": metrics.average_relative_visibility,
        "grv": metrics.global_relative_visibility,
    }


def write_results_json(document: Dict[str, Any], filename: Optional[str] = None) -> None:
    """Write a results document as sorted, indented JSON.

    Args:
        document: JSON serializable results
        filename: Output file; stdout when None
    """
    text = json.dumps(document, indent=2, sort_keys=True)
    if filename is None:
        sys.stdout.write(text + "\n")
        return
    with open(filename, "w", encoding="utf-8") as f:
        f.write(text + "\n")
    logger.info("Wrote results to %s", filename)
    print_success(f"Wrote results to {filename}")


def export_component_graph(
    filename: str,
    graph: "nx.DiGraph[str]",
    lakos: LakosMetrics,
    martin: Dict[str, ComponentDependencyMetrics],
    visibility: VisibilityMetrics,
    cycles: Cycles,
) -> None:
    """Export the component dependency graph with metrics as node attributes.

    Supports: GraphML (.graphml), DOT (.dot), GEXF (.gexf), JSON (.json)

    Node attributes:
        - depends_on: Lakos DependsOn
        - ce, ca, instability, abstractness, distance: Martin metrics
        - relative_visibility: Dowalil RV
        - in_cycle: Whether the component is part of a reported cycle

    Args:
        filename: Output filename (extension determines format)
        graph: Component dependency graph
        lakos: Lakos metrics of the same components
        martin: Martin metrics of the same components
        visibility: Visibility metrics of the same components
        cycles: Detected cycles

    Raises:
        ValidationError: If the file extension is not a supported format
    """
    ext = os.path.splitext(filename)[1].lower()
    if ext not in SUPPORTED_GRAPH_FORMATS:
        raise ValidationError(f"Unsupported graph format '{ext}', use one of {', '.join(SUPPORTED_GRAPH_FORMATS)}")

    components_in_cycles: Set[str] = set()
    for cycle in cycles:
        components_in_cycles.update(str(node) for node in cycle.nodes)

    G = graph.copy()
    for node in G.nodes():
        m = martin[node]
        G.nodes[node]["depends_on"] = lakos.depends_on[node]
        G.nodes[node]["ce"] = m.efferent_coupling
        G.nodes[node]["ca"] = m.afferent_coupling
        G.nodes[node]["instability"] = m.instability
        G.nodes[node]["abstractness"] = m.abstractness
        G.nodes[node]["distance"] = m.normalized_distance_from_main_sequence
        G.nodes[node]["relative_visibility"] = visibility.relative_visibility[node]
        G.nodes[node]["in_cycle"] = node in components_in_cycles

    if ext == ".graphml":
        nx.write_graphml(G, filename)
    elif ext == ".dot":
        nx.drawing.nx_pydot.write_dot(G, filename)
    elif ext == ".gexf":
        nx.write_gexf(G, filename)
    else:
        data = json_graph.node_link_data(G, edges="links")
        with open(filename, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)

    logger.info("Exported component graph to %s", filename)
    print_success(f"Exported component graph to {filename}")
