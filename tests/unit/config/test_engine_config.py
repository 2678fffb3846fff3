"""
Tests for engine configuration models and the YAML loader.
"""

import copy
from datetime import timedelta

import pytest
import yaml
from pydantic import ValidationError

from fuzzysig.config import (
    DefuzzificationMethod,
    EngineConfig,
    OutputConfig,
    RuleConfig,
    load_engine_config,
    parse_engine_config,
)
from fuzzysig.errors import (
    ConfigurationError,
    ConfigurationFileError,
    ErrorCodes,
    InvalidConfigurationError,
)


class TestEngineConfigModel:
    """Tests for EngineConfig validation."""

    def test_minimal_config(self, minimal_config_dict):
        """A minimal configuration validates with defaults."""
        config = EngineConfig.model_validate(minimal_config_dict)

        assert config.indicator_ids() == ["rsi_5"]
        assert config.inference.firing_threshold == 0.0
        assert config.inference.defuzzification is DefuzzificationMethod.CENTROID
        assert config.output.neutral_label == "neutral"
        assert config.series.interval_timedelta is None
        assert config.series.skip_weekends is True

    def test_duplicate_indicator_ids(self, minimal_config_dict):
        """Indicator ids must be unique."""
        minimal_config_dict["indicators"].append({"id": "rsi_5", "type": "sma"})
        with pytest.raises(ConfigurationError) as exc_info:
            EngineConfig.model_validate(minimal_config_dict)
        assert exc_info.value.error_code == ErrorCodes.CONFIG_DUPLICATE_INDICATOR

    def test_rules_required(self, minimal_config_dict):
        """A configuration needs at least one rule."""
        minimal_config_dict["rules"] = []
        with pytest.raises(ValidationError):
            EngineConfig.model_validate(minimal_config_dict)

    def test_unknown_section(self, minimal_config_dict):
        """Unknown top-level keys are rejected."""
        minimal_config_dict["strategy"] = {}
        with pytest.raises(ValidationError):
            EngineConfig.model_validate(minimal_config_dict)

    @pytest.mark.parametrize("threshold", [-0.1, 1.0])
    def test_threshold_range(self, minimal_config_dict, threshold):
        """The firing threshold lies in [0, 1)."""
        minimal_config_dict["inference"] = {"firing_threshold": threshold}
        with pytest.raises(ValidationError):
            EngineConfig.model_validate(minimal_config_dict)

    def test_area_centroid_needs_shapes(self, minimal_config_dict):
        """area_centroid requires a membership function per output term."""
        minimal_config_dict["inference"] = {"defuzzification": "area_centroid"}
        with pytest.raises(ConfigurationError) as exc_info:
            EngineConfig.model_validate(minimal_config_dict)
        assert exc_info.value.details["terms_without_membership"] == ["sell", "buy"]

    def test_series_interval(self, minimal_config_dict):
        """The series interval is parsed into a timedelta."""
        minimal_config_dict["series"] = {"interval": "4h"}
        config = EngineConfig.model_validate(minimal_config_dict)
        assert config.series.interval_timedelta == timedelta(hours=4)


class TestOutputConfig:
    """Tests for the output variable configuration."""

    def test_range_must_increase(self):
        """The range must be increasing."""
        with pytest.raises(ValidationError, match="increasing"):
            OutputConfig.model_validate({"range": [1, -1], "terms": {"buy": {"value": 0}}})

    def test_values_inside_range(self):
        """Representative values lie inside the range."""
        with pytest.raises(ValidationError, match="outside range"):
            OutputConfig.model_validate({"terms": {"buy": {"value": 2.0}}})

    def test_neutral_inside_range(self):
        """The neutral score lies inside the range."""
        with pytest.raises(ValidationError, match="Neutral score"):
            OutputConfig.model_validate(
                {"neutral_score": 5.0, "terms": {"buy": {"value": 1.0}}}
            )

    def test_terms_required(self):
        """At least one output term is needed."""
        with pytest.raises(ValidationError):
            OutputConfig.model_validate({"terms": {}})


class TestRuleConfig:
    """Tests for the rule configuration."""

    def test_exactly_one_antecedent(self):
        """Either ``when`` or ``if``, never both or neither."""
        with pytest.raises(ValidationError, match="exactly one"):
            RuleConfig.model_validate({"id": "r", "then": "buy"})
        with pytest.raises(ValidationError, match="exactly one"):
            RuleConfig.model_validate(
                {
                    "id": "r",
                    "when": {"rsi": "low"},
                    "if": {"indicator": "rsi", "is": "low"},
                    "then": "buy",
                }
            )

    def test_empty_when(self):
        """An empty ``when`` clause is rejected."""
        with pytest.raises(ValidationError, match="empty"):
            RuleConfig.model_validate({"id": "r", "when": {}, "then": "buy"})


class TestLoader:
    """Tests for loading configuration files."""

    def test_load_default_config(self, default_config_path):
        """The shipped configuration loads."""
        config = load_engine_config(default_config_path)

        assert "rsi_14" in config.indicator_ids()
        assert config.output.neutral_label == "hold"
        assert config.series.interval == "1h"
        assert len(config.rules) == 6

    def test_missing_file(self, tmp_path):
        """Missing files raise ConfigurationFileError."""
        with pytest.raises(ConfigurationFileError) as exc_info:
            load_engine_config(tmp_path / "missing.yaml")
        assert exc_info.value.error_code == ErrorCodes.CONFIG_FILE_NOT_FOUND

    def test_invalid_yaml(self, tmp_path):
        """Malformed YAML raises InvalidConfigurationError."""
        path = tmp_path / "bad.yaml"
        path.write_text("indicators: [unclosed\n")
        with pytest.raises(InvalidConfigurationError) as exc_info:
            load_engine_config(path)
        assert exc_info.value.error_code == ErrorCodes.CONFIG_INVALID_YAML

    def test_non_mapping(self, tmp_path):
        """A YAML list is not a configuration."""
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(InvalidConfigurationError):
            load_engine_config(path)

    def test_validation_errors_collected(self, tmp_path, minimal_config_dict):
        """Validation failures list every offending field."""
        broken = copy.deepcopy(minimal_config_dict)
        del broken["output"]
        broken["rules"][0]["weight"] = "heavy"
        path = tmp_path / "broken.yaml"
        path.write_text(yaml.safe_dump(broken))

        with pytest.raises(InvalidConfigurationError) as exc_info:
            load_engine_config(path)

        error = exc_info.value
        fields = [entry["field"] for entry in error.details["validation_errors"]]
        assert error.error_code == ErrorCodes.CONFIG_VALIDATION_FAILED
        assert error.context["file"] == str(path)
        assert "output" in fields
        assert "rules.0.weight" in fields

    def test_semantic_errors_carry_file(self, minimal_config_dict):
        """Semantic configuration errors are tagged with their source."""
        minimal_config_dict["indicators"].append({"id": "rsi_5", "type": "sma"})
        with pytest.raises(ConfigurationError) as exc_info:
            parse_engine_config(minimal_config_dict, source="inline.yaml")
        assert exc_info.value.context["file"] == "inline.yaml"
