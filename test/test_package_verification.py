#!/usr/bin/env python3
"""Tests for archgraph/package_verification.py"""

import pytest

from archgraph import package_verification
from archgraph.package_verification import MissingPackageError, check_all_packages, check_package_version, require_package


class TestCheckPackageVersion:
    """Tests for check_package_version()."""

    def test_installed_package(self) -> None:
        installed, meets_version, installed_version = check_package_version("networkx")

        assert installed
        assert meets_version
        assert installed_version

    def test_missing_package(self) -> None:
        assert check_package_version("archgraph-no-such-package", "1.0") == (False, False, None)

    def test_too_old(self) -> None:
        installed, meets_version, _ = check_package_version("networkx", "999.0")

        assert installed
        assert not meets_version

    def test_unknown_requirement(self) -> None:
        with pytest.raises(ValueError, match="No version requirement"):
            check_package_version("archgraph-no-such-package")


class TestRequirePackage:
    """Tests for require_package() and check_all_packages()."""

    def test_satisfied(self) -> None:
        require_package("networkx")

    def test_too_old(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setitem(package_verification.PACKAGE_REQUIREMENTS, "networkx", "999.0")

        with pytest.raises(MissingPackageError, match="too old"):
            require_package("networkx", "cycle detection")

    def test_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setitem(package_verification.PACKAGE_REQUIREMENTS, "archgraph-no-such-package", "1.0")

        with pytest.raises(MissingPackageError, match="pip install"):
            require_package("archgraph-no-such-package")

    def test_check_all_packages(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert check_all_packages()

        err = capsys.readouterr().err
        for package_name in package_verification.PACKAGE_REQUIREMENTS:
            assert package_name in err

    def test_check_all_packages_reports_failure(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        monkeypatch.setitem(package_verification.PACKAGE_REQUIREMENTS, "archgraph-no-such-package", "1.0")

        assert not check_all_packages()
        assert "archgraph-no-such-package not installed" in capsys.readouterr().err
