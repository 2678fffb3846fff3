"""
Bounded, read-only window over a bar series.

A SeriesWindow is the only view of history indicators ever see. It never
reorders bars and never fills missing periods: when the expected bar interval
is known, gaps are reported through ``gaps`` and ``stale`` so indicators keep
exact period counts.

For daily or longer intervals Saturday and Sunday are expected closures by
default: a Friday bar followed by a Monday bar is not a gap, and a Monday
evaluation of a series ending on Friday is not stale.
"""

from bisect import bisect_right
from datetime import datetime, timedelta
from typing import Iterator, Optional, Sequence

import numpy as np
import pandas as pd

from fuzzysig import get_logger
from fuzzysig.data.models import PRICE_COLUMNS, Bar, validate_series
from fuzzysig.errors import ErrorCodes, InsufficientHistory

logger = get_logger(__name__)

DAY = timedelta(days=1)
WEEKEND_DAYS = (5, 6)  # Saturday, Sunday


def _readonly(values: list[float]) -> np.ndarray:
    array = np.asarray(values, dtype=np.float64)
    array.flags.writeable = False
    return array


def weekend_days_between(start: datetime, end: datetime) -> int:
    """Number of Saturday/Sunday calendar dates in ``(start, end]``."""
    count = 0
    current = start.date() + DAY
    last = end.date()
    while current <= last:
        if current.weekday() in WEEKEND_DAYS:
            count += 1
        current += DAY
    return count


class SeriesWindow:
    """
    Contiguous, strictly ordered slice of bars ending at or before a timestamp.

    Attributes:
        end_timestamp: Evaluation timestamp the window was resolved for
        interval: Expected spacing between bars, None if unknown
        skip_weekends: Treat weekends as expected closures for daily or
            longer intervals
    """

    __slots__ = ("_bars", "end_timestamp", "interval", "skip_weekends", "_columns", "_gaps")

    def __init__(
        self,
        bars: Sequence[Bar],
        end_timestamp: Optional[datetime] = None,
        interval: Optional[timedelta] = None,
        skip_weekends: bool = True,
    ):
        validate_series(bars)
        self._bars: tuple[Bar, ...] = tuple(bars)
        self.end_timestamp = (
            end_timestamp
            if end_timestamp is not None
            else (self._bars[-1].timestamp if self._bars else None)
        )
        self.interval = interval
        self.skip_weekends = skip_weekends
        self._columns = {
            column: _readonly([getattr(bar, column) for bar in self._bars])
            for column in PRICE_COLUMNS
        }
        self._gaps = self._find_gaps()

    @classmethod
    def slice(
        cls,
        series: Sequence[Bar],
        end_timestamp: datetime,
        length: int,
        interval: Optional[timedelta] = None,
        skip_weekends: bool = True,
    ) -> "SeriesWindow":
        """
        Return the last ``length`` bars at or before ``end_timestamp``.

        Args:
            series: Full bar history for one instrument, strictly ordered
            end_timestamp: Inclusive upper bound of the window
            length: Number of bars required
            interval: Expected bar spacing used for gap detection
            skip_weekends: Treat weekends as expected closures for daily or
                longer intervals

        Returns:
            A window holding exactly ``length`` bars

        Raises:
            InsufficientHistory: If fewer than ``length`` bars exist
            DataValidationError: If the series is not strictly ordered
            ValueError: If ``length`` is not positive
        """
        if length < 1:
            raise ValueError(f"Window length must be positive, got {length}")
        validate_series(series)
        end = bisect_right(series, end_timestamp, key=lambda bar: bar.timestamp)
        if end < length:
            raise InsufficientHistory(
                message=f"Need {length} bars at or before {end_timestamp}, {end} available",
                error_code=ErrorCodes.SERIES_INSUFFICIENT_HISTORY,
                details={
                    "required": length,
                    "available": end,
                    "end_timestamp": str(end_timestamp),
                },
            )
        return cls(series[end - length : end], end_timestamp, interval, skip_weekends)

    def tail(self, length: int) -> "SeriesWindow":
        """
        Return the trailing ``length`` bars as a new window.

        Raises:
            InsufficientHistory: If the window is shorter than ``length``
            ValueError: If ``length`` is not positive
        """
        if length < 1:
            raise ValueError(f"Window length must be positive, got {length}")
        if length > len(self._bars):
            raise InsufficientHistory(
                message=f"Window holds {len(self._bars)} bars, {length} required",
                error_code=ErrorCodes.SERIES_INSUFFICIENT_HISTORY,
                details={"required": length, "available": len(self._bars)},
            )
        if length == len(self._bars):
            return self
        return SeriesWindow(
            self._bars[-length:], self.end_timestamp, self.interval, self.skip_weekends
        )

    def _elapsed(self, start: datetime, end: datetime) -> timedelta:
        """Time from ``start`` to ``end`` minus expected weekend closures."""
        elapsed = end - start
        if self.skip_weekends and self.interval is not None and self.interval >= DAY:
            elapsed -= weekend_days_between(start, end) * DAY
        return elapsed

    def _find_gaps(self) -> tuple[tuple[datetime, datetime], ...]:
        if self.interval is None:
            return ()
        return tuple(
            (previous.timestamp, current.timestamp)
            for previous, current in zip(self._bars, self._bars[1:])
            if self._elapsed(previous.timestamp, current.timestamp) > self.interval
        )

    @property
    def bars(self) -> tuple[Bar, ...]:
        return self._bars

    @property
    def gaps(self) -> tuple[tuple[datetime, datetime], ...]:
        """
        Pairs of consecutive timestamps further apart than ``interval``.

        Weekends do not count towards the distance when ``skip_weekends`` is
        set and the interval is at least one day.
        """
        return self._gaps

    @property
    def stale(self) -> bool:
        """
        True when the last bar does not represent the evaluation period.

        That is the case when the last bar is more than one interval older than
        ``end_timestamp`` or when it directly follows a gap. Always False when
        the interval is unknown.
        """
        if self.interval is None or not self._bars:
            return False
        last = self._bars[-1].timestamp
        if (
            self.end_timestamp is not None
            and self._elapsed(last, self.end_timestamp) > self.interval
        ):
            return True
        return bool(self._gaps) and self._gaps[-1][1] == last

    @property
    def last_timestamp(self) -> Optional[datetime]:
        return self._bars[-1].timestamp if self._bars else None

    @property
    def opens(self) -> np.ndarray:
        return self._columns["open"]

    @property
    def highs(self) -> np.ndarray:
        return self._columns["high"]

    @property
    def lows(self) -> np.ndarray:
        return self._columns["low"]

    @property
    def closes(self) -> np.ndarray:
        return self._columns["close"]

    @property
    def volumes(self) -> np.ndarray:
        return self._columns["volume"]

    def column(self, name: str) -> np.ndarray:
        """Read-only array for one of open/high/low/close/volume."""
        return self._columns[name]

    def to_frame(self) -> pd.DataFrame:
        """Copy of the window as an OHLCV DataFrame indexed by timestamp."""
        return pd.DataFrame(
            {column: np.array(values) for column, values in self._columns.items()},
            index=pd.DatetimeIndex([bar.timestamp for bar in self._bars], name="timestamp"),
        )

    def __len__(self) -> int:
        return len(self._bars)

    def __iter__(self) -> Iterator[Bar]:
        return iter(self._bars)

    def __getitem__(self, index: int) -> Bar:
        return self._bars[index]

    def __repr__(self) -> str:
        if not self._bars:
            return "SeriesWindow(empty)"
        return (
            f"SeriesWindow({len(self._bars)} bars, {self._bars[0].timestamp} .. "
            f"{self._bars[-1].timestamp}, stale={self.stale})"
        )
