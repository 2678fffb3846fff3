"""
Relative Strength Index (RSI) indicator implementation.

This module provides the RSIIndicator class which computes the RSI technical
indicator, a momentum oscillator that measures the speed and change of price movements.
"""

import numpy as np
from pydantic import Field

from fuzzysig import get_logger
from fuzzysig.data.window import SeriesWindow
from fuzzysig.indicators.base_indicator import (
    INDICATOR_REGISTRY,
    BaseIndicator,
    IndicatorParams,
    PriceSource,
)
from fuzzysig.indicators.smoothing import wilder_series

logger = get_logger(__name__)


@INDICATOR_REGISTRY.registered("rsi", aliases=["relativestrengthindex"])
class RSIIndicator(BaseIndicator):
    """
    Relative Strength Index (RSI) technical indicator.

    RSI measures the magnitude of recent price changes to evaluate overbought
    or oversold conditions. Average gains and losses use Wilder's smoothing;
    ``warmup`` extra bars (default 0) are smoothed before the reading.

    The result always lies within [0, 100]. A window without any price change
    reads 50, a window without losses reads 100.
    """

    family = "momentum"

    class Params(IndicatorParams):
        period: int = Field(default=14, ge=2, le=100)
        source: PriceSource = "close"
        warmup: int = Field(default=0, ge=0)

    def minimum_window_length(self) -> int:
        return self.params.period + 1 + self.params.warmup

    def _calculate(self, window: SeriesWindow) -> tuple[float, ...]:
        deltas = np.diff(window.column(self.params.source))
        gains = np.where(deltas > 0, deltas, 0.0)
        losses = np.where(deltas < 0, -deltas, 0.0)

        avg_gain = float(wilder_series(gains, self.params.period)[-1])
        avg_loss = float(wilder_series(losses, self.params.period)[-1])

        if avg_loss == 0.0:
            return (100.0 if avg_gain > 0.0 else 50.0,)
        rs = avg_gain / avg_loss
        rsi = 100.0 - (100.0 / (1.0 + rs))
        return (min(100.0, max(0.0, rsi)),)
