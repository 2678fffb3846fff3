"""
Central registry of error codes for fuzzysig.

Error codes follow the pattern: CATEGORY-ErrorName

Categories:
- CONFIG: Configuration loading and validation errors (fatal at startup)
- DATA: Price series validation errors
- SERIES: Window resolution errors
- INDICATOR: Indicator lookup and computation errors
- FUZZY: Fuzzification errors
- RULE: Rule evaluation errors
- ENGINE: Evaluation orchestration errors

Usage:
    from fuzzysig.errors.error_codes import ErrorCodes

    raise ConfigurationError(
        message="Rule 'r1' references undefined term",
        error_code=ErrorCodes.CONFIG_UNDEFINED_TERM,
        ...
    )
"""


class ErrorCodes:
    """Central registry of error codes for consistent error handling."""

    # Configuration errors
    CONFIG_FILE_NOT_FOUND = "CONFIG-FileNotFound"
    CONFIG_INVALID_YAML = "CONFIG-InvalidYaml"
    CONFIG_VALIDATION_FAILED = "CONFIG-ValidationFailed"
    CONFIG_INVALID_PARAMETERS = "CONFIG-InvalidParameters"
    CONFIG_UNKNOWN_INDICATOR_TYPE = "CONFIG-UnknownIndicatorType"
    CONFIG_DUPLICATE_INDICATOR = "CONFIG-DuplicateIndicator"
    CONFIG_UNKNOWN_MEMBERSHIP_TYPE = "CONFIG-UnknownMembershipType"
    CONFIG_INVALID_MEMBERSHIP_PARAMETERS = "CONFIG-InvalidMembershipParameters"
    CONFIG_EMPTY_FUZZY_SET = "CONFIG-EmptyFuzzySet"
    CONFIG_UNDEFINED_INDICATOR = "CONFIG-UndefinedIndicator"
    CONFIG_UNDEFINED_TERM = "CONFIG-UndefinedTerm"
    CONFIG_UNKNOWN_OUTPUT = "CONFIG-UnknownOutput"
    CONFIG_DUPLICATE_RULE = "CONFIG-DuplicateRule"
    CONFIG_INVALID_RULE = "CONFIG-InvalidRule"
    CONFIG_ALREADY_INITIALIZED = "CONFIG-AlreadyInitialized"
    CONFIG_NOT_INITIALIZED = "CONFIG-NotInitialized"

    # Data errors
    DATA_NOT_FOUND = "DATA-NotFound"
    DATA_DUPLICATE_TIMESTAMP = "DATA-DuplicateTimestamp"
    DATA_UNORDERED = "DATA-Unordered"
    DATA_MISSING_COLUMN = "DATA-MissingColumn"
    DATA_PROVIDER_FAILED = "DATA-ProviderFailed"

    # Window errors
    SERIES_INSUFFICIENT_HISTORY = "SERIES-InsufficientHistory"

    # Indicator errors
    INDICATOR_UNKNOWN = "INDICATOR-Unknown"
    INDICATOR_UNKNOWN_OUTPUT = "INDICATOR-UnknownOutput"

    # Fuzzification errors
    FUZZY_UNKNOWN_INDICATOR = "FUZZY-UnknownIndicator"
    FUZZY_UNKNOWN_TERM = "FUZZY-UnknownTerm"

    # Rule evaluation errors
    RULE_MISSING_READING = "RULE-MissingReading"
    RULE_INVALID_READING = "RULE-InvalidReading"

    # Orchestration errors
    ENGINE_CANCELLED = "ENGINE-Cancelled"

    @classmethod
    def get_all_codes(cls) -> dict[str, str]:
        """
        Get all error codes as a dictionary.

        Returns:
            Dictionary mapping constant names to error code strings
        """
        return {
            name: value
            for name, value in vars(cls).items()
            if not name.startswith("_") and isinstance(value, str)
        }

    @classmethod
    def get_codes_by_category(cls, category: str) -> dict[str, str]:
        """
        Get all error codes for a specific category.

        Args:
            category: The category prefix (e.g., "CONFIG", "RULE")

        Returns:
            Dictionary of error codes in that category
        """
        return {
            name: code
            for name, code in cls.get_all_codes().items()
            if code.startswith(f"{category}-")
        }

    @classmethod
    def validate_code(cls, code: str) -> bool:
        """Check if an error code exists in the registry."""
        return code in cls.get_all_codes().values()
