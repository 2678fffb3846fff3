"""
Accumulation/Distribution Line (A/D Line) indicator implementation.

The A/D Line weights each bar's volume by where the close sits within the
bar's range:

    Money Flow Multiplier = ((Close - Low) - (High - Close)) / (High - Low)
    Money Flow Volume = Money Flow Multiplier * Volume
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


@INDICATOR_REGISTRY.registered("accumdist", aliases=["ad", "adline", "ad_line"])
class ADLineIndicator(BaseIndicator):
    """
    Accumulation/Distribution over the last ``period`` bars.

    A close at the high counts the full volume as accumulation, a close at the
    low as distribution. Bars whose high equals their low contribute nothing.

    Outputs:
        value: Sum of money flow volume over the lookback
        normalized: ``value`` divided by the total volume, in [-1, 1];
            0 when no volume traded
    """

    outputs = ("value", "normalized")
    family = "volume"

    class Params(IndicatorParams):
        period: int = Field(default=14, ge=1, le=1000)

    def minimum_window_length(self) -> int:
        return self.params.period

    def _calculate(self, window: SeriesWindow) -> tuple[float, ...]:
        highs, lows, closes = window.highs, window.lows, window.closes
        ranges = highs - lows
        multiplier = np.divide(
            (closes - lows) - (highs - closes),
            ranges,
            out=np.zeros_like(ranges),
            where=ranges > 0,
        )
        flow = float((multiplier * window.volumes).sum())
        total = float(window.volumes.sum())
        if total <= 0:
            logger.debug(f"A/D '{self.indicator_id}' window has no volume")
            return (flow, 0.0)
        return (flow, flow / total)
