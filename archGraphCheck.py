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
"""Architecture metrics and cycle detection for a dependency snapshot.

Version: 1.0.0

PURPOSE:
    Evaluates the component structure of a codebase from a dependency snapshot
    produced by an importer. Reports cycles between components and three
    families of architecture metrics as deterministic JSON, so results of two
    runs can be diffed for regression tracking.

WHAT IT DOES:
    - Lifts element dependencies to a component multigraph (one edge per
      crossing element dependency)
    - Detects elementary cycles between components (bounded by
      --max-cycles and --max-edges-per-step)
    - Calculates Lakos metrics: CCD, ACD, RACD, NCCD
    - Calculates Martin metrics per component: Ce, Ca, I, A, D
    - Calculates visibility metrics: RV per component, ARV, GRV
    - Optionally exports the component graph with metrics as node attributes

CONFIGURATION:
    Caps are resolved once from an optional properties file (--config) and
    explicit arguments, which take precedence:
        cycles.maxNumberToDetect=100
        cycles.maxNumberOfDependenciesPerEdge=20
        cycles.sccTimeBudgetSeconds=30

EXIT CODES:
    0  analysis completed
    1  invalid arguments, configuration, or snapshot
    2  analysis failed (e.g. resource exhaustion)
    3  --fail-on-cycles given and cycles were found
"""
__version__ = "1.0.0"

import sys
import argparse
import logging
from typing import Any, Dict, List, Optional

from archgraph.color_utils import Colors, print_error, print_info, print_success, print_warning
from archgraph.components import component_dependency_graph, component_edges
from archgraph.config import AnalysisConfig, load_properties
from archgraph.constants import EXIT_CYCLES_FOUND, EXIT_KEYBOARD_INTERRUPT, EXIT_RUNTIME_ERROR, EXIT_SUCCESS, ArchGraphError
from archgraph.cycle_detection import Cycles, detect_cycles
from archgraph.export_utils import (
    export_component_graph,
    serialize_component_dependency_metrics,
    serialize_cycles,
    serialize_lakos_metrics,
    serialize_visibility_metrics,
    write_results_json,
)
from archgraph.lakos_metrics import lakos_metrics
from archgraph.martin_metrics import component_dependency_metrics, summarize_main_sequence
from archgraph.package_verification import check_all_packages, require_package
from archgraph.snapshot import Snapshot, load_snapshot
from archgraph.visibility_metrics import visibility_metrics

logger = logging.getLogger(__name__)


def resolve_config(args: argparse.Namespace) -> AnalysisConfig:
    """Resolve caps from --config and explicit arguments (arguments win)."""
    config = AnalysisConfig.from_properties(load_properties(args.config)) if args.config else AnalysisConfig()
    return config.with_overrides(
        max_cycles=args.max_cycles,
        max_edges_per_step=args.max_edges_per_step,
        scc_time_budget=args.scc_time_budget,
    )


def run_analysis(snapshot: Snapshot, config: AnalysisConfig, export_graph: Optional[str] = None) -> Dict[str, Any]:
    """Run cycle detection and all metric families on a snapshot.

    Args:
        snapshot: Loaded snapshot
        config: Resolved caps
        export_graph: Optional graph export filename

    Returns:
        JSON serializable results document
    """
    components = snapshot.components
    edges = component_edges(components, snapshot.dependencies)
    cycles: Cycles = detect_cycles(components.identifiers, edges, config.max_cycles, config.max_edges_per_step, config.scc_time_budget)
    lakos = lakos_metrics(components, snapshot.dependencies)
    martin = component_dependency_metrics(components, snapshot.dependencies, snapshot.traits_of)
    visibility = visibility_metrics(components, snapshot.is_visible)

    if export_graph:
        graph = component_dependency_graph(components, snapshot.dependencies)
        export_component_graph(export_graph, graph, lakos, martin, visibility, cycles)

    return {
        "version": __version__,
        "config": {
            "max_cycles": config.max_cycles,
            "max_edges_per_step": config.max_edges_per_step,
            "scc_time_budget": config.scc_time_budget,
        },
        "cycles": serialize_cycles(cycles),
        "lakos": serialize_lakos_metrics(lakos),
        "martin": serialize_component_dependency_metrics(martin, summarize_main_sequence(martin)),
        "visibility": serialize_visibility_metrics(visibility),
    }


def print_status(document: Dict[str, Any]) -> None:
    """Print a short colored summary to stderr."""
    cycles = document["cycles"]
    if cycles["count"] == 0:
        print_success("No cycles between components")
    else:
        suffix = " (truncated, more cycles exist)" if cycles["truncated"] else ""
        print_warning(f"{cycles['count']} cycle(s) between components{suffix}", prefix=False)
        for cycle in cycles["cycles"][:5]:
            print_info(f"  {cycle['description']}")

    lakos = document["lakos"]
    print_info(f"CCD={lakos['ccd']} ACD={lakos['acd']:.2f} RACD={lakos['racd']:.2f} NCCD={lakos['nccd']:.2f}")

    martin = document["martin"]
    if martin["zone_of_pain"]:
        print_warning(f"Zone of pain: {', '.join(martin['zone_of_pain'])}", prefix=False)
    if martin["zone_of_uselessness"]:
        print_warning(f"Zone of uselessness: {', '.join(martin['zone_of_uselessness'])}", prefix=False)

    visibility = document["visibility"]
    print_info(f"ARV={visibility['arv']:.2f} GRV={visibility['grv']:.2f}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Cycle detection and architecture metrics for a dependency snapshot.",
        epilog="""
The snapshot is a JSON (or .json.gz) document with 'components',
'elements' and 'dependencies'. Results are written as JSON to stdout
unless --output is given; status lines go to stderr.
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}", help="Show version and exit")

    parser.add_argument("snapshot", metavar="SNAPSHOT", nargs="?", help="Path to the snapshot file (.json or .json.gz)")

    parser.add_argument("--config", type=str, metavar="FILE.properties", help="Properties file with cycles.* settings")

    parser.add_argument("--max-cycles", type=int, metavar="N", help="Maximum number of cycles to report (default: 100)")

    parser.add_argument("--max-edges-per-step", type=int, metavar="N", help="Maximum dependencies to report per cycle step (default: 20)")

    parser.add_argument("--scc-time-budget", type=float, metavar="SECONDS", help="Abort when the SCC decomposition takes longer")

    parser.add_argument("--output", "-o", type=str, metavar="FILE.json", help="Write results to file instead of stdout")

    parser.add_argument("--export-graph", type=str, metavar="FILE", help="Export component graph (formats: .graphml, .dot, .gexf, .json)")

    parser.add_argument("--fail-on-cycles", action="store_true", help=f"Exit with {EXIT_CYCLES_FOUND} if any cycle was found")

    parser.add_argument("--check-packages", action="store_true", help="Verify installed package versions and exit")

    parser.add_argument("--no-color", action="store_true", help="Disable colored status lines")

    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, non-zero for errors or cycles with --fail-on-cycles)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.no_color:
        Colors.disable()

    if args.check_packages:
        return EXIT_SUCCESS if check_all_packages() else EXIT_RUNTIME_ERROR

    if not args.snapshot:
        parser.error("SNAPSHOT is required unless --check-packages is given")

    try:
        require_package("networkx", "cycle detection and metrics")
        config = resolve_config(args)
        snapshot = load_snapshot(args.snapshot)
        document = run_analysis(snapshot, config, export_graph=args.export_graph)
        write_results_json(document, args.output)
        print_status(document)

        if args.fail_on_cycles and document["cycles"]["count"] > 0:
            return EXIT_CYCLES_FOUND
        return EXIT_SUCCESS

    except ArchGraphError as e:
        logger.error("%s: %s", type(e).__name__, e)
        print_error(str(e))
        return e.exit_code

    except OSError as e:
        logger.error("I/O error: %s", e)
        print_error(f"I/O error: {e}")
        return EXIT_RUNTIME_ERROR


def entry_point() -> None:
    """Console script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        print_warning("Interrupted by user", prefix=False)
        sys.exit(EXIT_KEYBOARD_INTERRUPT)


if __name__ == "__main__":
    entry_point()
