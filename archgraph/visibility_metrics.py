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
"""Visibility metrics after Herbert Dowalil.

    RV(c) = visible elements of c / all elements of c
    ARV   = unweighted mean of RV over all components
    GRV   = visible elements of all components / all elements of all components

GRV weights every component by its size while ARV does not, so the two differ
as soon as components have different element counts.
"""

import logging
from dataclasses import dataclass
from typing import Dict

import numpy as np

from .components import ComponentsInput, VisibilityOracle, as_metrics_components

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VisibilityMetrics:
    """Visibility metrics of one set of components.

    Attributes:
        relative_visibility: RV per component identifier, in component order
        average_relative_visibility: ARV
        global_relative_visibility: GRV
    """

    relative_visibility: Dict[str, float]
    average_relative_visibility: float
    global_relative_visibility: float

    def get_relative_visibility(self, identifier: str) -> float:
        return self.relative_visibility[identifier]


def visibility_metrics(components: ComponentsInput, visibility_oracle: VisibilityOracle) -> VisibilityMetrics:
    """Calculate RV, ARV and GRV.

    A component without elements has RV 0; ARV and GRV are 0 when there is
    nothing to average over.

    Args:
        components: Components to measure
        visibility_oracle: Returns True for elements visible outside their component

    Raises:
        InvalidGraphError: If a component identifier is empty or duplicated, or the oracle rejects an element
    """
    metrics_components = as_metrics_components(components)

    relative_visibility: Dict[str, float] = {}
    total_visible = 0
    total_elements = 0
    for component in metrics_components:
        visible = sum(1 for element in component.elements if visibility_oracle(element))
        size = len(component)
        relative_visibility[component.identifier] = visible / size if size > 0 else 0.0
        total_visible += visible
        total_elements += size

    average = float(np.mean(list(relative_visibility.values()))) if relative_visibility else 0.0
    global_visibility = total_visible / total_elements if total_elements > 0 else 0.0

    logger.debug("Visibility of %s components: ARV=%.3f GRV=%.3f", len(relative_visibility), average, global_visibility)
    return VisibilityMetrics(
        relative_visibility=relative_visibility,
        average_relative_visibility=average,
        global_relative_visibility=global_visibility,
    )
