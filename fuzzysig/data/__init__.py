"""
Price series access for fuzzysig.

This module provides the bar model, the read-only SeriesWindow used by all
indicators and the providers that supply bar history.
"""

from fuzzysig.data.models import Bar, validate_series
from fuzzysig.data.provider import (
    InMemorySeriesProvider,
    SeriesProvider,
    bars_from_frame,
    load_bars_csv,
)
from fuzzysig.data.timeframes import parse_interval
from fuzzysig.data.window import SeriesWindow

__all__ = [
    "Bar",
    "validate_series",
    "SeriesWindow",
    "SeriesProvider",
    "InMemorySeriesProvider",
    "bars_from_frame",
    "load_bars_csv",
    "parse_interval",
]
