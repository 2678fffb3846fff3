"""
Average True Range (ATR) indicator implementation.

ATR measures volatility as the Wilder-smoothed average of the true range.
"""

from pydantic import Field

from fuzzysig import get_logger
from fuzzysig.data.window import SeriesWindow
from fuzzysig.indicators.base_indicator import (
    INDICATOR_REGISTRY,
    BaseIndicator,
    IndicatorParams,
)
from fuzzysig.indicators.smoothing import true_range, wilder_series

logger = get_logger(__name__)


@INDICATOR_REGISTRY.registered("atr", aliases=["averagetruerange"])
class ATRIndicator(BaseIndicator):
    """
    Average True Range technical indicator.

    True range needs the previous close, so the first bar of the lookback only
    contributes its close. The result is never negative.
    """

    family = "volatility"

    class Params(IndicatorParams):
        period: int = Field(default=14, ge=1, le=100)
        warmup: int = Field(default=0, ge=0)

    def minimum_window_length(self) -> int:
        return self.params.period + 1 + self.params.warmup

    def _calculate(self, window: SeriesWindow) -> tuple[float, ...]:
        ranges = true_range(window.highs, window.lows, window.closes)
        return (max(0.0, float(wilder_series(ranges, self.params.period)[-1])),)
