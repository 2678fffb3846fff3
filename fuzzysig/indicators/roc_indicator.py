"""
Rate of Change (ROC) indicator implementation.
"""

import math

from pydantic import Field

from fuzzysig import get_logger
from fuzzysig.data.window import SeriesWindow
from fuzzysig.indicators.base_indicator import (
    INDICATOR_REGISTRY,
    BaseIndicator,
    IndicatorParams,
    PriceSource,
)

logger = get_logger(__name__)


@INDICATOR_REGISTRY.registered("roc", aliases=["rateofchange"])
class ROCIndicator(BaseIndicator):
    """
    Rate of Change: percentage change of the source price over ``period`` bars.

    A zero reference price has no defined rate of change and reads NaN.
    """

    family = "momentum"

    class Params(IndicatorParams):
        period: int = Field(default=10, ge=1, le=1000)
        source: PriceSource = "close"

    def minimum_window_length(self) -> int:
        return self.params.period + 1

    def _calculate(self, window: SeriesWindow) -> tuple[float, ...]:
        prices = window.column(self.params.source)
        reference = prices[0]
        if reference == 0:
            logger.warning(f"ROC '{self.indicator_id}' reference price is zero")
            return (math.nan,)
        return (100.0 * (prices[-1] - reference) / reference,)
