"""
Error handling framework for fuzzysig.

This module provides the exception hierarchy and the central registry of
error codes.
"""

from fuzzysig.errors.error_codes import ErrorCodes
from fuzzysig.errors.exceptions import (
    ConfigurationError,
    ConfigurationFileError,
    DataError,
    DataValidationError,
    EngineError,
    EvaluationCancelled,
    FuzzysigError,
    InsufficientHistory,
    InvalidConfigurationError,
    RuleEvaluationError,
    UnknownIndicator,
    UnknownTerm,
)

__all__ = [
    "ErrorCodes",
    # Base exception
    "FuzzysigError",
    # Configuration (fatal at startup)
    "ConfigurationError",
    "InvalidConfigurationError",
    "ConfigurationFileError",
    # Per-evaluation
    "EngineError",
    "DataError",
    "DataValidationError",
    "InsufficientHistory",
    "UnknownIndicator",
    "UnknownTerm",
    "RuleEvaluationError",
    "EvaluationCancelled",
]
