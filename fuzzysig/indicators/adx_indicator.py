"""
Average Directional Index (ADX) indicator implementation.

ADX measures trend strength regardless of direction, together with the
positive and negative directional indicators (+DI, -DI).
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
from fuzzysig.indicators.smoothing import true_range, wilder_series

logger = get_logger(__name__)


@INDICATOR_REGISTRY.registered("adx", aliases=["averagedirectionalindex"])
class ADXIndicator(BaseIndicator):
    """
    Average Directional Index technical indicator.

    Directional movement and true range are Wilder-smoothed over ``period``
    bars; DX values are Wilder-smoothed again into ADX. All outputs lie in
    [0, 100].
    """

    outputs = ("adx", "plus_di", "minus_di")
    family = "trend"

    class Params(IndicatorParams):
        period: int = Field(default=14, ge=2, le=100)
        warmup: int = Field(default=0, ge=0)

    def minimum_window_length(self) -> int:
        return 2 * self.params.period + self.params.warmup

    def _calculate(self, window: SeriesWindow) -> tuple[float, ...]:
        period = self.params.period
        highs, lows = window.highs, window.lows

        up_move = np.diff(highs)
        down_move = -np.diff(lows)
        plus_dm = np.where((up_move > down_move) & (up_move > 0), up_move, 0.0)
        minus_dm = np.where((down_move > up_move) & (down_move > 0), down_move, 0.0)

        smoothed_tr = wilder_series(true_range(highs, lows, window.closes), period)
        smoothed_plus = wilder_series(plus_dm, period)
        smoothed_minus = wilder_series(minus_dm, period)

        with np.errstate(divide="ignore", invalid="ignore"):
            plus_di = np.where(smoothed_tr > 0, 100.0 * smoothed_plus / smoothed_tr, 0.0)
            minus_di = np.where(smoothed_tr > 0, 100.0 * smoothed_minus / smoothed_tr, 0.0)
            di_sum = plus_di + minus_di
            dx = np.where(di_sum > 0, 100.0 * np.abs(plus_di - minus_di) / di_sum, 0.0)

        adx = wilder_series(dx[period - 1 :], period)
        return (
            float(np.clip(adx[-1], 0.0, 100.0)),
            float(plus_di[-1]),
            float(minus_di[-1]),
        )
