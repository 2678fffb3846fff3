"""
Aroon indicator implementation.

Aroon identifies trend changes by measuring how many periods have passed
since the highest high and the lowest low within the lookback.
"""

import numpy as np
from pydantic import Field

from fuzzysig import get_logger
from fuzzysig.data.window import SeriesWindow
from fuzzysig.indicators.base_indicator import (
    INDICATOR_REGISTRY,
    BaseIndicator,
    IndicatorParams,
)

logger = get_logger(__name__)


def _bars_since_last(values: np.ndarray, target: float) -> int:
    # Most recent occurrence wins on ties
    return int(len(values) - 1 - np.flatnonzero(values == target)[-1])


@INDICATOR_REGISTRY.registered("aroon")
class AroonIndicator(BaseIndicator):
    """
    Aroon Up, Aroon Down and the Aroon Oscillator.

    Aroon Up = 100 * (period - bars since highest high) / period over the last
    ``period + 1`` bars, Aroon Down likewise for the lowest low. Both lie in
    [0, 100]; the oscillator (up - down) lies in [-100, 100].
    """

    outputs = ("up", "down", "oscillator")
    family = "trend"

    class Params(IndicatorParams):
        period: int = Field(default=25, ge=1, le=500)

    def minimum_window_length(self) -> int:
        return self.params.period + 1

    def _calculate(self, window: SeriesWindow) -> tuple[float, ...]:
        period = self.params.period
        highs, lows = window.highs, window.lows

        up = 100.0 * (period - _bars_since_last(highs, highs.max())) / period
        down = 100.0 * (period - _bars_since_last(lows, lows.min())) / period
        return up, down, up - down
