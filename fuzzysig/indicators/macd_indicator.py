"""
Moving Average Convergence Divergence (MACD) indicator implementation.
"""

from typing import Optional

import numpy as np
from pydantic import Field

from fuzzysig import get_logger
from fuzzysig.data.window import SeriesWindow
from fuzzysig.errors import ConfigurationError, ErrorCodes
from fuzzysig.indicators.base_indicator import (
    INDICATOR_REGISTRY,
    BaseIndicator,
    IndicatorParams,
    PriceSource,
)
from fuzzysig.indicators.smoothing import exponential_series

logger = get_logger(__name__)


@INDICATOR_REGISTRY.registered("macd")
class MACDIndicator(BaseIndicator):
    """
    MACD technical indicator.

    The MACD line is the fast EMA minus the slow EMA, the signal line is an
    EMA of the MACD line and the histogram is their difference. Both price
    EMAs are seeded at the start of the lookback, ``warmup`` bars (default:
    the slow period) before the signal line is first defined.

    Outputs:
        macd, signal, histogram
    """

    outputs = ("macd", "signal", "histogram")
    family = "momentum"

    class Params(IndicatorParams):
        fast_period: int = Field(default=12, ge=1, le=500)
        slow_period: int = Field(default=26, ge=2, le=500)
        signal_period: int = Field(default=9, ge=1, le=500)
        source: PriceSource = "close"
        warmup: Optional[int] = Field(default=None, ge=0)

    def _check_params(self, params) -> None:
        if params.fast_period >= params.slow_period:
            raise ConfigurationError(
                message=(
                    f"MACD '{self.indicator_id}' fast period must be shorter than the slow period"
                ),
                error_code=ErrorCodes.CONFIG_INVALID_PARAMETERS,
                context={"indicator": self.indicator_id},
                details={
                    "fast_period": params.fast_period,
                    "slow_period": params.slow_period,
                },
            )

    @property
    def warmup(self) -> int:
        if self.params.warmup is None:
            return self.params.slow_period
        return self.params.warmup

    def minimum_window_length(self) -> int:
        return self.params.slow_period + self.params.signal_period - 1 + self.warmup

    def _calculate(self, window: SeriesWindow) -> tuple[float, ...]:
        prices = window.column(self.params.source)
        slow = self.params.slow_period

        macd_line = (
            exponential_series(prices, self.params.fast_period)
            - exponential_series(prices, slow)
        )[slow - 1 :]
        signal_line = exponential_series(macd_line, self.params.signal_period)

        macd = float(macd_line[-1])
        signal = float(signal_line[-1])
        if np.isnan(signal):
            logger.warning(f"MACD '{self.indicator_id}' signal line undefined")
        return macd, signal, macd - signal
