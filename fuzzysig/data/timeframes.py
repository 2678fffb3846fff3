"""
Bar interval definitions.

Intervals are used by SeriesWindow to detect missing periods. They are given
in configuration either as a timeframe label ("1h", "1d") or as any string
pandas accepts as a Timedelta ("90min").
"""

from datetime import timedelta

import pandas as pd

from fuzzysig.errors import ConfigurationError, ErrorCodes

# Timeframe to timedelta mapping
TIMEFRAME_TIMEDELTAS = {
    "1m": timedelta(minutes=1),
    "5m": timedelta(minutes=5),
    "15m": timedelta(minutes=15),
    "30m": timedelta(minutes=30),
    "1h": timedelta(hours=1),
    "4h": timedelta(hours=4),
    "1d": timedelta(days=1),
    "1w": timedelta(weeks=1),
}


def parse_interval(value: str) -> timedelta:
    """
    Convert a timeframe label or Timedelta string to a timedelta.

    Raises:
        ConfigurationError: If the value cannot be parsed or is not positive
    """
    if value in TIMEFRAME_TIMEDELTAS:
        return TIMEFRAME_TIMEDELTAS[value]

    try:
        interval = pd.Timedelta(value).to_pytimedelta()
    except ValueError as e:
        raise ConfigurationError(
            message=f"Invalid bar interval '{value}'",
            error_code=ErrorCodes.CONFIG_VALIDATION_FAILED,
            details={"interval": value, "error": str(e)},
            suggestion=f"Use one of {', '.join(TIMEFRAME_TIMEDELTAS)} or a value like '90min'",
        ) from e

    if interval <= timedelta(0):
        raise ConfigurationError(
            message=f"Bar interval must be positive, got '{value}'",
            error_code=ErrorCodes.CONFIG_VALIDATION_FAILED,
            details={"interval": value},
        )
    return interval
