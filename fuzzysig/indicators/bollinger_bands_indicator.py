"""
Bollinger Bands indicator implementation.

Bollinger Bands place bands a number of standard deviations above and below
a simple moving average.
"""

import math

import numpy as np
from pydantic import Field

from fuzzysig import get_logger
from fuzzysig.data.window import SeriesWindow
from fuzzysig.indicators.base_indicator import (
    INDICATOR_REGISTRY,
    BaseIndicator,
    IndicatorParams,
    PriceSource,
    safe_ratio,
)
from fuzzysig.indicators.smoothing import simple_average

logger = get_logger(__name__)


@INDICATOR_REGISTRY.registered("bollinger", aliases=["bollingerbands", "bbands"])
class BollingerBandsIndicator(BaseIndicator):
    """
    Bollinger Bands.

    Outputs:
        middle: SMA of the source price
        upper: middle + multiplier * population standard deviation
        lower: middle - multiplier * population standard deviation
        percent_b: position of the last price between the bands, 0.5 when the
            bands collapse
        width: upper - lower, never negative
    """

    outputs = ("middle", "upper", "lower", "percent_b", "width")
    family = "volatility"

    class Params(IndicatorParams):
        period: int = Field(default=20, ge=2, le=500)
        multiplier: float = Field(default=2.0, gt=0, le=10)
        source: PriceSource = "close"

    def minimum_window_length(self) -> int:
        return self.params.period

    def _calculate(self, window: SeriesWindow) -> tuple[float, ...]:
        prices = window.column(self.params.source)
        middle = simple_average(prices)
        std = math.sqrt(simple_average(np.square(prices - middle)))
        offset = self.params.multiplier * std

        upper = middle + offset
        lower = middle - offset
        width = upper - lower
        percent_b = safe_ratio(float(prices[-1]) - lower, width, default=0.5)
        return middle, upper, lower, percent_b, width
