"""
Stochastic Oscillator indicator implementation.

The stochastic oscillator compares a closing price to the price range over a
given period. It returns %K and its simple moving average %D.
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
from fuzzysig.indicators.smoothing import simple_average

logger = get_logger(__name__)


@INDICATOR_REGISTRY.registered("stochastic", aliases=["stoch"])
class StochasticIndicator(BaseIndicator):
    """
    Stochastic Oscillator (%K and %D).

    %K = 100 * (close - lowest low) / (highest high - lowest low) over
    ``k_period`` bars, 50 when the range is flat. %D is the simple average of
    the last ``d_period`` %K values. Both stay within [0, 100].
    """

    outputs = ("k", "d")
    family = "momentum"

    class Params(IndicatorParams):
        k_period: int = Field(default=14, ge=1, le=100)
        d_period: int = Field(default=3, ge=1, le=20)

    def minimum_window_length(self) -> int:
        return self.params.k_period + self.params.d_period - 1

    def _calculate(self, window: SeriesWindow) -> tuple[float, ...]:
        k_period = self.params.k_period
        highs, lows, closes = window.highs, window.lows, window.closes

        k_values = np.empty(self.params.d_period)
        for i in range(self.params.d_period):
            end = k_period + i
            highest = highs[end - k_period : end].max()
            lowest = lows[end - k_period : end].min()
            price_range = highest - lowest
            if price_range == 0:
                k_values[i] = 50.0
            else:
                k_values[i] = 100.0 * (closes[end - 1] - lowest) / price_range

        k_values = np.clip(k_values, 0.0, 100.0)
        return float(k_values[-1]), simple_average(k_values)
