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
"""Analysis configuration for archgraph.

The analytics core never reads configuration on its own. Callers resolve an
AnalysisConfig once, usually from a properties file, and pass its values
explicitly to every entry point.

Example usage:
    from archgraph.config import AnalysisConfig, load_properties

    config = AnalysisConfig.from_properties(load_properties("archgraph.properties"))
    cycles = detect_cycles(nodes, edges, config.max_cycles, config.max_edges_per_step, config.scc_time_budget)

Properties file format (Java style):
    # comment
    cycles.maxNumberToDetect=50
    cycles.maxNumberOfDependenciesPerEdge: 5
"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .constants import (
    DEFAULT_MAX_CYCLES,
    DEFAULT_MAX_EDGES_PER_STEP,
    MAX_CYCLES_PROPERTY,
    MAX_EDGES_PER_STEP_PROPERTY,
    SCC_TIME_BUDGET_PROPERTY,
    ConfigurationError,
)

logger = logging.getLogger(__name__)

_COMMENT_PREFIXES = ("#", "!")


def validate_cap(name: str, value: Any) -> int:
    """Validate that a cap is a positive integer.

    Args:
        name: Name of the cap, used in the error message
        value: Value to validate

    Returns:
        The value as int

    Raises:
        ConfigurationError: If value is not an integer or not positive
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value


def validate_time_budget(value: Any) -> Optional[float]:
    """Validate an optional time budget in seconds."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"scc_time_budget must be a number of seconds, got {value!r}")
    if value <= 0:
        raise ConfigurationError(f"scc_time_budget must be positive, got {value}")
    return float(value)


@dataclass(frozen=True)
class AnalysisConfig:
    """Immutable caps for one analysis run.

    Attributes:
        max_cycles: Maximum number of cycles reported by cycle detection
        max_edges_per_step: Maximum edges reported per cycle step
        scc_time_budget: Optional wall clock limit in seconds for the SCC decomposition
    """

    max_cycles: int = DEFAULT_MAX_CYCLES
    max_edges_per_step: int = DEFAULT_MAX_EDGES_PER_STEP
    scc_time_budget: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate cap values."""
        validate_cap("max_cycles", self.max_cycles)
        validate_cap("max_edges_per_step", self.max_edges_per_step)
        object.__setattr__(self, "scc_time_budget", validate_time_budget(self.scc_time_budget))

    @staticmethod
    def from_properties(properties: Mapping[str, str]) -> "AnalysisConfig":
        """Create a configuration from properties, falling back to defaults for missing keys.

        Args:
            properties: Mapping of property name to raw string value

        Returns:
            Validated AnalysisConfig

        Raises:
            ConfigurationError: If a value cannot be parsed or is not positive
        """
        max_cycles = _parse_number(properties, MAX_CYCLES_PROPERTY, int, DEFAULT_MAX_CYCLES)
        max_edges = _parse_number(properties, MAX_EDGES_PER_STEP_PROPERTY, int, DEFAULT_MAX_EDGES_PER_STEP)
        budget = _parse_number(properties, SCC_TIME_BUDGET_PROPERTY, float, None)
        return AnalysisConfig(max_cycles=max_cycles, max_edges_per_step=max_edges, scc_time_budget=budget)

    def with_overrides(self, **overrides: Any) -> "AnalysisConfig":
        """Return a copy with the given non-None fields replaced.

        Used by the command line tool to layer explicit arguments over a properties file.
        """
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self


def _parse_number(properties: Mapping[str, str], key: str, kind: Any, default: Any) -> Any:
    raw = properties.get(key)
    if raw is None or not str(raw).strip():
        return default
    try:
        return kind(str(raw).strip())
    except ValueError as e:
        raise ConfigurationError(f"Property {key} has invalid value {raw!r}") from e


def load_properties(path: Union[str, Path]) -> Dict[str, str]:
    """Parse a Java style properties file.

    Supports 'key=value' and 'key: value' lines and '#' or '!' comments.
    Later keys override earlier ones.

    Args:
        path: Path to the properties file

    Returns:
        Dictionary of property name to string value

    Raises:
        ConfigurationError: If the file cannot be read or a line has no separator
    """
    properties: Dict[str, str] = {}
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read properties file {path}: {e}") from e

    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith(_COMMENT_PREFIXES):
            continue
        separators = [pos for pos in (line.find("="), line.find(":")) if pos >= 0]
        if not separators:
            raise ConfigurationError(f"{path}:{line_number}: expected 'key=value', got {line!r}")
        split_at = min(separators)
        key = line[:split_at].strip()
        if not key:
            raise ConfigurationError(f"{path}:{line_number}: missing property name")
        properties[key] = line[split_at + 1 :].strip()

    logger.debug("Loaded %s properties from %s", len(properties), path)
    return properties


def sub_properties(properties: Mapping[str, str], prefix: str) -> Dict[str, str]:
    """Return all properties below a prefix with the prefix removed.

    Example:
        >>> sub_properties({"cycles.maxNumberToDetect": "5", "other": "x"}, "cycles")
        {'maxNumberToDetect': '5'}
    """
    full_prefix = prefix + "."
    return {key[len(full_prefix) :]: value for key, value in properties.items() if key.startswith(full_prefix)}
