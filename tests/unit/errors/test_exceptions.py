"""
Tests for the exception hierarchy and error code registry.
"""

import pytest

from fuzzysig.errors import (
    ConfigurationError,
    ConfigurationFileError,
    DataValidationError,
    EngineError,
    ErrorCodes,
    EvaluationCancelled,
    FuzzysigError,
    InsufficientHistory,
    InvalidConfigurationError,
    RuleEvaluationError,
    UnknownIndicator,
    UnknownTerm,
)


class TestFuzzysigError:
    """Tests for the base error."""

    def test_str_includes_code(self):
        error = FuzzysigError("Something failed", error_code="ENGINE-Test")
        assert str(error) == "[ENGINE-Test] Something failed"

    def test_str_without_code(self):
        assert str(FuzzysigError("Something failed")) == "Something failed"

    def test_to_dict(self):
        error = InsufficientHistory(
            "Not enough bars",
            error_code=ErrorCodes.SERIES_INSUFFICIENT_HISTORY,
            details={"required": 15, "available": 3},
        )
        assert error.to_dict() == {
            "type": "InsufficientHistory",
            "message": "Not enough bars",
            "error_code": "SERIES-InsufficientHistory",
            "details": {"required": 15, "available": 3},
        }

    def test_details_default_to_empty(self):
        assert FuzzysigError("x").details == {}


class TestConfigurationError:
    """Tests for configuration errors."""

    def test_context_and_suggestion(self):
        error = ConfigurationError(
            message="Rule 'r1' references undefined term 'rsi.very_low'",
            error_code=ErrorCodes.CONFIG_UNDEFINED_TERM,
            context={"file": "engine.yaml", "section": "rules[0]"},
            details={"indicator": "rsi", "term": "very_low"},
            suggestion="Define the term under fuzzy_sets.rsi",
        )

        data = error.to_dict()
        assert data["context"] == {"file": "engine.yaml", "section": "rules[0]"}
        assert data["suggestion"] == "Define the term under fuzzy_sets.rsi"

        message = error.format_user_message()
        assert "Error: Rule 'r1' references undefined term 'rsi.very_low'" in message
        assert "Code: CONFIG-UndefinedTerm" in message
        assert "Location: File: engine.yaml, Section: rules[0]" in message
        assert message.endswith("Suggestion: Define the term under fuzzy_sets.rsi")

    def test_minimal_user_message(self):
        assert ConfigurationError("Bad").format_user_message() == "Error: Bad"


class TestHierarchy:
    """Tests for the exception hierarchy."""

    @pytest.mark.parametrize(
        "error_class", [InvalidConfigurationError, ConfigurationFileError]
    )
    def test_configuration_family(self, error_class):
        assert issubclass(error_class, ConfigurationError)
        assert not issubclass(error_class, EngineError)

    @pytest.mark.parametrize(
        "error_class",
        [
            DataValidationError,
            InsufficientHistory,
            UnknownIndicator,
            UnknownTerm,
            RuleEvaluationError,
            EvaluationCancelled,
        ],
    )
    def test_engine_family(self, error_class):
        assert issubclass(error_class, EngineError)
        assert issubclass(error_class, FuzzysigError)
        assert not issubclass(error_class, ConfigurationError)

    def test_not_value_errors(self):
        """Errors raised inside pydantic validators must not be re-wrapped."""
        assert not issubclass(ConfigurationError, ValueError)


class TestErrorCodes:
    """Tests for the error code registry."""

    def test_codes_follow_pattern(self):
        for name, code in ErrorCodes.get_all_codes().items():
            category, _, label = code.partition("-")
            assert name.startswith(category), name
            assert label and label[0].isupper(), code

    def test_codes_unique(self):
        codes = list(ErrorCodes.get_all_codes().values())
        assert len(codes) == len(set(codes))

    def test_by_category(self):
        rule_codes = ErrorCodes.get_codes_by_category("RULE")
        assert set(rule_codes.values()) == {"RULE-MissingReading", "RULE-InvalidReading"}

    def test_validate_code(self):
        assert ErrorCodes.validate_code("ENGINE-Cancelled")
        assert not ErrorCodes.validate_code("ENGINE-Exploded")
