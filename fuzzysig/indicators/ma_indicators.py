"""
Moving average indicators.

This module provides the simple (SMA) and exponential (EMA) moving averages.
"""

from typing import Optional

from pydantic import Field

from fuzzysig import get_logger
from fuzzysig.data.window import SeriesWindow
from fuzzysig.indicators.base_indicator import (
    INDICATOR_REGISTRY,
    BaseIndicator,
    IndicatorParams,
    PriceSource,
)
from fuzzysig.indicators.smoothing import exponential_series, simple_average

logger = get_logger(__name__)


@INDICATOR_REGISTRY.registered("sma", aliases=["simplemovingaverage"])
class SimpleMovingAverage(BaseIndicator):
    """
    Simple Moving Average (SMA).

    The arithmetic mean of the last ``period`` source prices, summed with an
    exactly rounded sum.
    """

    class Params(IndicatorParams):
        period: int = Field(default=20, ge=1, le=1000)
        source: PriceSource = "close"

    def minimum_window_length(self) -> int:
        return self.params.period

    def _calculate(self, window: SeriesWindow) -> tuple[float, ...]:
        return (simple_average(window.column(self.params.source)),)


@INDICATOR_REGISTRY.registered("ema", aliases=["exponentialmovingaverage"])
class ExponentialMovingAverage(BaseIndicator):
    """
    Exponential Moving Average (EMA).

    Uses ``alpha = 2 / (period + 1)``, seeded with the SMA of the first
    ``period`` prices of the lookback. ``warmup`` extra bars are run through
    the recurrence before the reading so that the seed has decayed; it
    defaults to twice the period.
    """

    class Params(IndicatorParams):
        period: int = Field(default=20, ge=1, le=1000)
        source: PriceSource = "close"
        warmup: Optional[int] = Field(default=None, ge=0)

    @property
    def warmup(self) -> int:
        if self.params.warmup is None:
            return 2 * self.params.period
        return self.params.warmup

    def minimum_window_length(self) -> int:
        return self.params.period + self.warmup

    def _calculate(self, window: SeriesWindow) -> tuple[float, ...]:
        ema = exponential_series(window.column(self.params.source), self.params.period)
        return (ema[-1],)
