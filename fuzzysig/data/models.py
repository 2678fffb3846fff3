"""
Price bar model and series validation.

A bar is immutable once created. A series handed to the engine must be
ordered strictly by timestamp; duplicates and out-of-order bars are rejected
instead of being silently sorted or merged.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from fuzzysig.errors import DataValidationError, ErrorCodes

PRICE_COLUMNS = ("open", "high", "low", "close", "volume")


@dataclass(frozen=True, slots=True)
class Bar:
    """One OHLCV bar."""

    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0


def validate_series(bars: Sequence[Bar]) -> None:
    """
    Check that bars are ordered strictly by timestamp.

    Args:
        bars: Bars as delivered by a series provider

    Raises:
        DataValidationError: On the first duplicate or out-of-order timestamp
    """
    for index in range(1, len(bars)):
        previous, current = bars[index - 1].timestamp, bars[index].timestamp
        if current == previous:
            raise DataValidationError(
                message=f"Duplicate bar timestamp {current}",
                error_code=ErrorCodes.DATA_DUPLICATE_TIMESTAMP,
                details={"index": index, "timestamp": str(current)},
            )
        if current < previous:
            raise DataValidationError(
                message=f"Bar at {current} is older than preceding bar at {previous}",
                error_code=ErrorCodes.DATA_UNORDERED,
                details={
                    "index": index,
                    "timestamp": str(current),
                    "previous": str(previous),
                },
            )
