#!/usr/bin/env python3
"""Tests for archgraph/config.py"""

from pathlib import Path

import pytest

from archgraph.config import AnalysisConfig, load_properties, sub_properties, validate_cap, validate_time_budget
from archgraph.constants import ConfigurationError, ValidationError


class TestValidation:
    """Tests for validate_cap and validate_time_budget."""

    def test_valid_cap(self) -> None:
        assert validate_cap("max_cycles", 1) == 1

    @pytest.mark.parametrize("value", [0, -5, True, False, 1.5, "10", None])
    def test_invalid_cap(self, value: object) -> None:
        with pytest.raises(ConfigurationError, match="max_cycles"):
            validate_cap("max_cycles", value)

    def test_configuration_error_is_validation_error(self) -> None:
        with pytest.raises(ValidationError) as excinfo:
            validate_cap("max_cycles", 0)
        assert excinfo.value.exit_code == 1

    def test_time_budget(self) -> None:
        assert validate_time_budget(None) is None
        assert validate_time_budget(2) == 2.0
        assert validate_time_budget(0.5) == 0.5

    @pytest.mark.parametrize("value", [0, -1.0, True, "5"])
    def test_invalid_time_budget(self, value: object) -> None:
        with pytest.raises(ConfigurationError):
            validate_time_budget(value)


class TestAnalysisConfig:
    """Tests for AnalysisConfig."""

    def test_defaults(self) -> None:
        config = AnalysisConfig()

        assert config.max_cycles == 100
        assert config.max_edges_per_step == 20
        assert config.scc_time_budget is None

    def test_is_frozen(self) -> None:
        config = AnalysisConfig()

        with pytest.raises(AttributeError):
            config.max_cycles = 5  # type: ignore[misc]

    def test_rejects_invalid_caps(self) -> None:
        with pytest.raises(ConfigurationError):
            AnalysisConfig(max_cycles=0)
        with pytest.raises(ConfigurationError):
            AnalysisConfig(max_edges_per_step=-1)

    def test_from_properties(self) -> None:
        config = AnalysisConfig.from_properties(
            {
                "cycles.maxNumberToDetect": "50",
                "cycles.maxNumberOfDependenciesPerEdge": " 5 ",
                "cycles.sccTimeBudgetSeconds": "2.5",
                "unrelated.key": "x",
            }
        )

        assert config == AnalysisConfig(max_cycles=50, max_edges_per_step=5, scc_time_budget=2.5)

    def test_from_properties_missing_keys_use_defaults(self) -> None:
        assert AnalysisConfig.from_properties({"cycles.maxNumberToDetect": ""}) == AnalysisConfig()

    @pytest.mark.parametrize("raw", ["ten", "2.5", "0"])
    def test_from_properties_invalid_value(self, raw: str) -> None:
        with pytest.raises(ConfigurationError):
            AnalysisConfig.from_properties({"cycles.maxNumberToDetect": raw})

    def test_with_overrides(self) -> None:
        config = AnalysisConfig(max_cycles=50)

        assert config.with_overrides(max_cycles=None, max_edges_per_step=None) is config
        assert config.with_overrides(max_edges_per_step=3) == AnalysisConfig(max_cycles=50, max_edges_per_step=3)

    def test_with_overrides_validates(self) -> None:
        with pytest.raises(ConfigurationError):
            AnalysisConfig().with_overrides(max_cycles=0)


class TestProperties:
    """Tests for load_properties and sub_properties."""

    def test_load_properties(self, tmp_path: Path) -> None:
        path = tmp_path / "archgraph.properties"
        path.write_text(
            "# cycle detection\n"
            "cycles.maxNumberToDetect=50\n"
            "! other comment style\n"
            "\n"
            "cycles.maxNumberOfDependenciesPerEdge : 5\n"
            "url=http://example.com:8080\n"
            "cycles.maxNumberToDetect=60\n",
            encoding="utf-8",
        )

        properties = load_properties(path)

        assert properties == {
            "cycles.maxNumberToDetect": "60",
            "cycles.maxNumberOfDependenciesPerEdge": "5",
            "url": "http://example.com:8080",
        }

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_properties(tmp_path / "missing.properties")

    def test_line_without_separator(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.properties"
        path.write_text("cycles.maxNumberToDetect\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match=":1:"):
            load_properties(path)

    def test_sub_properties(self) -> None:
        properties = {"cycles.maxNumberToDetect": "5", "cycles.x.y": "1", "cyclesOther": "2", "other": "3"}

        assert sub_properties(properties, "cycles") == {"maxNumberToDetect": "5", "x.y": "1"}
