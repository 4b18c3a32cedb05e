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
"""Runtime dependency verification for archgraph.

Checks that the installed third-party packages meet the minimum versions
archgraph is tested with. archGraphCheck.py calls require_package() before
running an analysis and exposes check_all_packages() via --check-packages.
"""

import logging
from importlib.metadata import PackageNotFoundError, version
from typing import Dict, Optional, Tuple

from packaging.version import parse

from .color_utils import print_error, print_success
from .constants import ArchGraphError

logger = logging.getLogger(__name__)

# Minimum versions of runtime packages
PACKAGE_REQUIREMENTS: Dict[str, str] = {
    "networkx": "3.4",  # node_link_data(edges=...)
    "numpy": "1.24.0",
    "packaging": "24.0",  # required for this module itself
    "colorama": "0.4.6",
    "pydot": "1.4.2",  # DOT export only
}


class MissingPackageError(ArchGraphError):
    """Raised when a required package is missing or older than its minimum version."""


def check_package_version(package_name: str, min_version: Optional[str] = None) -> Tuple[bool, bool, Optional[str]]:
    """Check if a package is installed and meets its minimum version.

    Args:
        package_name: Distribution name (e.g., 'networkx')
        min_version: Minimum version; defaults to PACKAGE_REQUIREMENTS

    Returns:
        Tuple of (is_installed, meets_version, installed_version)

    Raises:
        ValueError: If no minimum version is known for the package
    """
    if min_version is None:
        min_version = PACKAGE_REQUIREMENTS.get(package_name)
        if min_version is None:
            raise ValueError(f"No version requirement specified for {package_name}")

    try:
        installed_version = version(package_name)
    except PackageNotFoundError:
        return False, False, None
    return True, parse(installed_version) >= parse(min_version), installed_version


def require_package(package_name: str, context: str = "archgraph") -> None:
    """Ensure a package is installed in a sufficient version.

    Raises:
        MissingPackageError: If the package is missing or too old
        ValueError: If no minimum version is known for the package
    """
    min_version = PACKAGE_REQUIREMENTS.get(package_name)
    installed, meets_version, installed_version = check_package_version(package_name, min_version)
    if not installed:
        raise MissingPackageError(f"{package_name} is required for {context}. Install with: pip install '{package_name}>={min_version}'")
    if not meets_version:
        raise MissingPackageError(
            f"{package_name} {installed_version} is too old for {context}. Upgrade with: pip install --upgrade '{package_name}>={min_version}'"
        )
    logger.debug("%s %s satisfies >=%s", package_name, installed_version, min_version)


def check_all_packages() -> bool:
    """Check every package in PACKAGE_REQUIREMENTS and print its status.

    Returns:
        True if all packages are installed in a sufficient version
    """
    all_ok = True
    for package_name, min_version in PACKAGE_REQUIREMENTS.items():
        installed, meets_version, installed_version = check_package_version(package_name, min_version)
        if installed and meets_version:
            print_success(f"{package_name} {installed_version}")
        elif installed:
            print_error(f"{package_name} {installed_version} (need >={min_version})", prefix=False)
            all_ok = False
        else:
            print_error(f"{package_name} not installed (need >={min_version})", prefix=False)
            all_ok = False
    return all_ok
