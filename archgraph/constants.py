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
"""Shared constants and exception classes for archgraph.

This module provides the defaults used by the analytics core and the command line
tool, the exit codes of archGraphCheck.py, and the exception hierarchy raised by
every archgraph module.
"""

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_SUCCESS = 0
EXIT_INVALID_ARGS = 1
EXIT_RUNTIME_ERROR = 2
EXIT_CYCLES_FOUND = 3
EXIT_KEYBOARD_INTERRUPT = 130

# =============================================================================
# Cycle Detection Defaults
# =============================================================================

DEFAULT_MAX_CYCLES = 100  # Maximum number of cycles reported by one detection run
DEFAULT_MAX_EDGES_PER_STEP = 20  # Maximum edges reported per step of a cycle

# Properties keys understood by AnalysisConfig.from_properties()
MAX_CYCLES_PROPERTY = "cycles.maxNumberToDetect"
MAX_EDGES_PER_STEP_PROPERTY = "cycles.maxNumberOfDependenciesPerEdge"
SCC_TIME_BUDGET_PROPERTY = "cycles.sccTimeBudgetSeconds"

# =============================================================================
# Martin Metrics Thresholds
# =============================================================================

MAIN_SEQUENCE_MIDPOINT = 0.5  # Splits abstractness/instability into low and high halves
DEFAULT_DISTANCE_THRESHOLD = 0.7  # Distance above which a component lies in a zone

# =============================================================================
# Snapshot / Export Constants
# =============================================================================

SNAPSHOT_SCHEMA_VERSION = "1.0"
SUPPORTED_GRAPH_FORMATS = [".graphml", ".dot", ".gexf", ".json"]

# =============================================================================
# Exception Classes
# =============================================================================


class ArchGraphError(Exception):
    """Base exception for all archgraph errors.

    Every archgraph exception carries an exit_code attribute that tells the
    command line entry point which exit code to use when the error reaches it.
    """

    def __init__(self, message: str, exit_code: int = EXIT_RUNTIME_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


# Validation errors (EXIT_INVALID_ARGS)
class ValidationError(ArchGraphError):
    """Raised when caller supplied input is rejected."""

    def __init__(self, message: str):
        super().__init__(message, EXIT_INVALID_ARGS)


class InvalidGraphError(ValidationError):
    """Raised when an edge references an unknown node or a component identifier is empty or duplicated."""


class ConfigurationError(ValidationError):
    """Raised when a cap or budget value is not a positive number."""


class SnapshotError(ValidationError):
    """Raised when a snapshot file cannot be read or has an unexpected shape."""


# Analysis errors (EXIT_RUNTIME_ERROR)
class AnalysisError(ArchGraphError):
    """Raised when an analysis cannot complete."""


class ResourceExhaustion(AnalysisError):
    """Raised when strongly connected component decomposition exceeds its memory or time bounds.

    The input of a decomposition is deterministic, so callers should not retry.
    """
