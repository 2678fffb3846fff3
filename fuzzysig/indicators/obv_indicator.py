"""
On-Balance Volume (OBV) indicator implementation.

On-Balance Volume is a momentum indicator that uses volume flow to anticipate
price changes: volume on up bars is added, volume on down bars subtracted.
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

# Create module-level logger
logger = get_logger(__name__)


@INDICATOR_REGISTRY.registered("obv", aliases=["onbalancevolume"])
class OBVIndicator(BaseIndicator):
    """
    On-Balance Volume over the last ``period`` bar-to-bar moves.

    For every move:
    - close above the previous close: volume is added
    - close below the previous close: volume is subtracted
    - unchanged close: no contribution

    The classic OBV line is cumulative over the whole history, so its level
    depends on where the series happens to start. This indicator accumulates
    over a fixed lookback instead, which keeps readings independent of older
    history.

    Outputs:
        value: Signed volume flow over the lookback
        normalized: ``value`` divided by the total volume of the same moves,
            in [-1, 1]; 0 when no volume traded
    """

    outputs = ("value", "normalized")
    family = "volume"

    class Params(IndicatorParams):
        period: int = Field(default=14, ge=1, le=1000)

    def minimum_window_length(self) -> int:
        # One extra bar provides the reference close of the first move
        return self.params.period + 1

    def _calculate(self, window: SeriesWindow) -> tuple[float, ...]:
        direction = np.sign(np.diff(window.closes))
        volumes = window.volumes[1:]
        flow = float((direction * volumes).sum())
        total = float(volumes.sum())
        if total <= 0:
            logger.debug(f"OBV '{self.indicator_id}' window has no volume")
            return (flow, 0.0)
        return (flow, flow / total)
