"""
Exception hierarchy for fuzzysig.

Two families of errors exist:

- ``ConfigurationError`` and its subclasses are raised while loading indicator
  parameters, membership functions and rules. They are fatal: the engine
  refuses to start with a partially valid configuration.
- ``EngineError`` and its subclasses are raised by a single evaluation. Batch
  evaluation reports them per instrument so that one failure never aborts its
  siblings.
"""

from typing import Any, Optional


class FuzzysigError(Exception):
    """
    Base exception class for all fuzzysig errors.

    Attributes:
        message: Human-readable error message
        error_code: Optional error code for reference and documentation
        details: Optional dictionary with additional error details
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize error to dictionary for API responses.

        Returns:
            Dictionary with all error information
        """
        return {
            "type": type(self).__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


# --- Configuration Errors ---


class ConfigurationError(FuzzysigError):
    """
    Configuration error detected at load time.

    Use for malformed indicator, membership function or rule definitions.
    The fix requires **editing the configuration file**, retrying never helps.

    Attributes:
        context: Where the error occurred (file, section, field)
        suggestion: How to fix the error

    Examples:
        >>> raise ConfigurationError(
        ...     message="Rule 'buy_dip' references undefined term 'rsi_14.very_low'",
        ...     error_code="CONFIG-UndefinedTerm",
        ...     context={"section": "rules[0]"},
        ...     details={"indicator": "rsi_14", "term": "very_low"},
        ...     suggestion="Define the term under fuzzy_sets.rsi_14",
        ... )
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[dict[str, Any]] = None,
        details: Optional[dict[str, Any]] = None,
        suggestion: str = "",
    ) -> None:
        super().__init__(message, error_code, details)
        self.context = context or {}
        self.suggestion = suggestion

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["context"] = self.context
        result["suggestion"] = self.suggestion
        return result

    def format_user_message(self) -> str:
        """
        Format a user-friendly error message with all context.

        Returns:
            Formatted error message string
        """
        parts = [f"Error: {self.message}"]

        if self.error_code:
            parts.append(f"Code: {self.error_code}")

        if self.context:
            context_parts = []
            if "file" in self.context:
                context_parts.append(f"File: {self.context['file']}")
            if "section" in self.context:
                context_parts.append(f"Section: {self.context['section']}")
            if context_parts:
                parts.append("Location: " + ", ".join(context_parts))

        if self.suggestion:
            parts.append(f"\nSuggestion: {self.suggestion}")

        return "\n".join(parts)


class InvalidConfigurationError(ConfigurationError):
    """Exception raised when configuration content fails validation."""

    pass


class ConfigurationFileError(ConfigurationError):
    """Exception raised when a configuration file cannot be found or read."""

    pass


# --- Per-evaluation Errors ---


class EngineError(FuzzysigError):
    """
    Base class for errors produced by a single evaluation.

    Apart from provider failures these errors are deterministic: evaluating
    the same series with the same configuration reproduces them, so nothing
    inside the engine retries.
    """

    pass


class DataError(EngineError):
    """Base class for errors in the price series supplied by the provider."""

    pass


class DataValidationError(DataError):
    """Exception raised when bars are duplicated, unordered or malformed."""

    pass


class InsufficientHistory(EngineError):
    """
    Raised when a window holds fewer bars than an indicator requires.

    Details always carry ``required`` and ``available`` bar counts.
    """

    pass


class UnknownIndicator(EngineError):
    """Raised when an indicator identifier is not registered."""

    pass


class UnknownTerm(EngineError):
    """Raised when a linguistic term is not defined for an indicator."""

    pass


class RuleEvaluationError(EngineError):
    """
    Raised when a rule references a reading that could not be produced.

    Details carry the ``indicator`` that was missing so configuration bugs are
    visible instead of being masked as a zero degree.
    """

    pass


class EvaluationCancelled(EngineError):
    """Raised for batch units abandoned before they produced an output."""

    pass
