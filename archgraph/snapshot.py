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
"""Loading of dependency snapshots for archGraphCheck.py.

A snapshot is a JSON document (optionally gzip compressed) produced by an
external importer:

    {
      "_schema_version": "1.0",
      "components": {"one": ["one.A", "one.B"], "two": ["two.C"]},
      "elements": {"one.A": {"visible": true, "abstract": true}},
      "dependencies": [
        {"origin": "one.A", "target": "two.C", "description": "one.A calls two.C.run()"},
        ["one.B", "two.C"]
      ]
    }

"components" may also be a list of {"id": ..., "elements": [...]} objects.
Elements without an entry in "elements" are treated as visible and concrete.
"""

import gzip
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from .components import ElementTraits, MetricsComponent, MetricsComponents
from .constants import SNAPSHOT_SCHEMA_VERSION, InvalidGraphError, SnapshotError
from .graph_model import Edge

logger = logging.getLogger(__name__)

DEFAULT_TRAITS = ElementTraits(visible=True, abstract=False)


@dataclass(frozen=True)
class Snapshot:
    """Components, element traits and element dependencies of one analysis run.

    Attributes:
        components: Validated components in file order
        traits: Traits per element; elements missing here use DEFAULT_TRAITS
        dependencies: Element level dependencies in file order
    """

    components: MetricsComponents
    traits: Dict[Any, ElementTraits]
    dependencies: Tuple[Edge, ...]

    def traits_of(self, element: Any) -> ElementTraits:
        return self.traits.get(element, DEFAULT_TRAITS)

    def is_visible(self, element: Any) -> bool:
        return self.traits_of(element).visible


def load_snapshot(filename: str) -> Snapshot:
    """Load a snapshot from a .json or .json.gz file.

    Args:
        filename: Snapshot path; gzip is used when it ends with '.gz'

    Returns:
        Parsed Snapshot

    Raises:
        SnapshotError: If the file cannot be read, is not valid JSON, or has an unexpected shape
    """
    logger.info("Loading snapshot from %s", filename)
    opener = gzip.open if filename.endswith(".gz") else open
    try:
        with opener(filename, "rt", encoding="utf-8") as f:  # type: ignore[operator]
            data = json.load(f)
    except (IOError, OSError) as e:
        raise SnapshotError(f"Failed to read snapshot {filename}: {e}") from e
    except UnicodeDecodeError as e:
        raise SnapshotError(f"Snapshot {filename} is not valid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Invalid JSON in {filename}: {e}") from e

    return parse_snapshot(data)


def parse_snapshot(data: Any) -> Snapshot:
    """Build a Snapshot from already decoded JSON data.

    Raises:
        SnapshotError: If the data has an unexpected shape or schema version
    """
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a JSON object")

    version = data.get("_schema_version", SNAPSHOT_SCHEMA_VERSION)
    if version != SNAPSHOT_SCHEMA_VERSION:
        raise SnapshotError(f"Unsupported snapshot schema v{version}, expected v{SNAPSHOT_SCHEMA_VERSION}")

    try:
        components = MetricsComponents(_parse_components(data.get("components", {})))
    except InvalidGraphError as e:
        raise SnapshotError(f"Invalid components: {e}") from e

    snapshot = Snapshot(
        components=components,
        traits=_parse_traits(data.get("elements", {})),
        dependencies=tuple(_parse_dependencies(data.get("dependencies", []))),
    )
    logger.info("Snapshot: %d components, %d dependencies", len(snapshot.components), len(snapshot.dependencies))
    return snapshot


def _parse_components(raw: Any) -> List[MetricsComponent]:
    if isinstance(raw, dict):
        items = list(raw.items())
    elif isinstance(raw, list):
        items = []
        for entry in raw:
            if not isinstance(entry, dict) or "id" not in entry:
                raise SnapshotError(f"Component entry must be an object with an 'id', got {entry!r}")
            items.append((entry["id"], entry.get("elements", [])))
    else:
        raise SnapshotError("'components' must be an object or a list")

    components = []
    for identifier, elements in items:
        if not isinstance(elements, list) or not all(isinstance(element, str) for element in elements):
            raise SnapshotError(f"Elements of component {identifier!r} must be a list of strings")
        components.append(MetricsComponent.of(identifier, elements))
    return components


def _parse_traits(raw: Any) -> Dict[Any, ElementTraits]:
    if not isinstance(raw, dict):
        raise SnapshotError("'elements' must be an object")
    traits = {}
    for element, flags in raw.items():
        if not isinstance(flags, dict):
            raise SnapshotError(f"Traits of element {element!r} must be an object")
        traits[element] = ElementTraits(
            visible=_parse_flag(element, flags, "visible", DEFAULT_TRAITS.visible),
            abstract=_parse_flag(element, flags, "abstract", DEFAULT_TRAITS.abstract),
        )
    return traits


def _parse_flag(element: Any, flags: Dict[str, Any], name: str, default: bool) -> bool:
    value = flags.get(name, default)
    if not isinstance(value, bool):
        raise SnapshotError(f"Trait '{name}' of element {element!r} must be true or false, got {value!r}")
    return value


def _parse_dependencies(raw: Any) -> List[Edge]:
    if not isinstance(raw, list):
        raise SnapshotError("'dependencies' must be a list")
    dependencies = []
    for entry in raw:
        if isinstance(entry, dict) and "origin" in entry and "target" in entry:
            origin, target = entry["origin"], entry["target"]
            description = entry.get("description", f"{origin} -> {target}")
        elif isinstance(entry, list) and len(entry) == 2:
            origin, target = entry
            description = f"{origin} -> {target}"
        else:
            raise SnapshotError(f"Dependency must be {{origin, target}} or [origin, target], got {entry!r}")
        if not isinstance(origin, str) or not isinstance(target, str):
            raise SnapshotError(f"Dependency endpoints must be strings, got {entry!r}")
        dependencies.append(Edge(origin, target, description))
    return dependencies
