"""
Time-series providers.

The engine reads history through the ``SeriesProvider`` protocol; storage is
an external collaborator. ``InMemorySeriesProvider`` serves tests and the CLI,
``load_bars_csv`` reads the OHLCV CSV layout used across the project.
"""

from datetime import datetime
from pathlib import Path
from typing import Mapping, Protocol, Sequence, Union

import pandas as pd

from fuzzysig import get_logger
from fuzzysig.data.models import PRICE_COLUMNS, Bar, validate_series
from fuzzysig.errors import DataError, DataValidationError, ErrorCodes

logger = get_logger(__name__)


class SeriesProvider(Protocol):
    """Supplies strictly ordered bars for an instrument."""

    def get_bars(self, instrument_id: str, end_timestamp: datetime) -> Sequence[Bar]:
        """Return bars for ``instrument_id`` up to and including ``end_timestamp``."""
        ...


class InMemorySeriesProvider:
    """
    Provider over series held in memory.

    Series are validated once at construction and stored as tuples, so the
    provider is safe to share between evaluation threads.
    """

    def __init__(self, series: Mapping[str, Sequence[Bar]]):
        self._series: dict[str, tuple[Bar, ...]] = {}
        for instrument_id, bars in series.items():
            validate_series(bars)
            self._series[instrument_id] = tuple(bars)
        logger.debug(f"In-memory provider holds {len(self._series)} instruments")

    def get_bars(self, instrument_id: str, end_timestamp: datetime) -> Sequence[Bar]:
        try:
            # The window slices at end_timestamp itself
            return self._series[instrument_id]
        except KeyError:
            raise DataError(
                message=f"No series available for instrument '{instrument_id}'",
                error_code=ErrorCodes.DATA_NOT_FOUND,
                details={
                    "instrument_id": instrument_id,
                    "available": sorted(self._series),
                },
            ) from None

    @property
    def instruments(self) -> list[str]:
        return sorted(self._series)


def bars_from_frame(df: pd.DataFrame) -> list[Bar]:
    """
    Convert an OHLCV DataFrame indexed by timestamp to bars.

    Raises:
        DataValidationError: If a price column is missing or the index is not
            strictly increasing
    """
    missing = [column for column in PRICE_COLUMNS if column not in df.columns]
    if "volume" in missing:
        df = df.assign(volume=0.0)
        missing.remove("volume")
    if missing:
        raise DataValidationError(
            message=f"Missing required columns: {missing}",
            error_code=ErrorCodes.DATA_MISSING_COLUMN,
            details={
                "missing_columns": missing,
                "available_columns": df.columns.tolist(),
            },
        )

    bars = [
        Bar(
            timestamp=timestamp.to_pydatetime(),
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=float(row.volume),
        )
        for timestamp, row in zip(pd.DatetimeIndex(df.index), df.itertuples(index=False))
    ]
    validate_series(bars)
    return bars


def load_bars_csv(path: Union[str, Path]) -> list[Bar]:
    """
    Load bars from a CSV file whose first column holds timestamps.

    Column names are matched case-insensitively.
    """
    df = pd.read_csv(path, index_col=0, parse_dates=True)
    df.columns = [str(column).strip().lower() for column in df.columns]
    df.index = pd.to_datetime(df.index)
    logger.debug(f"Loaded {len(df)} rows from {path}")
    return bars_from_frame(df)
