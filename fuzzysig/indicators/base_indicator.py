"""
Base class for all technical indicators in fuzzysig.

Every indicator implements two operations:

- ``minimum_window_length()``: the number of trailing bars the indicator
  reads (its effective lookback, warm-up included);
- ``compute(window)``: the reading at the last bar of the window.

An indicator never looks further back than its minimum window length, so a
reading only depends on those trailing bars. Extending a window with older
history therefore never changes a reading, and identical windows always give
bit-identical readings.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar, Literal, Optional

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, ValidationError

from fuzzysig import get_logger
from fuzzysig.core import TypeRegistry
from fuzzysig.data.window import SeriesWindow
from fuzzysig.errors import (
    ConfigurationError,
    ErrorCodes,
    InsufficientHistory,
    UnknownIndicator,
)

logger = get_logger(__name__)

PriceSource = Literal["open", "high", "low", "close", "volume"]

INDICATOR_REGISTRY: TypeRegistry["BaseIndicator"] = TypeRegistry(
    "indicator", error_code=ErrorCodes.CONFIG_UNKNOWN_INDICATOR_TYPE
)


@dataclass(frozen=True)
class IndicatorReading:
    """
    Indicator values at one bar.

    Attributes:
        indicator_id: Configured identifier of the indicator
        timestamp: Timestamp of the bar the reading belongs to
        values: Ordered output values
        outputs: Output names, aligned with ``values``
    """

    indicator_id: str
    timestamp: datetime
    values: tuple[float, ...]
    outputs: tuple[str, ...]

    @property
    def primary(self) -> float:
        """The first output value."""
        return self.values[0]

    def value(self, output: Optional[str] = None) -> float:
        """
        Value of a named output, the primary value if ``output`` is None.

        Raises:
            UnknownIndicator: If the indicator has no such output
        """
        if output is None:
            return self.primary
        try:
            return self.values[self.outputs.index(output)]
        except ValueError:
            raise UnknownIndicator(
                message=f"Indicator '{self.indicator_id}' has no output '{output}'",
                error_code=ErrorCodes.INDICATOR_UNKNOWN_OUTPUT,
                details={
                    "indicator": self.indicator_id,
                    "output": output,
                    "available_outputs": list(self.outputs),
                },
            ) from None

    def as_dict(self) -> dict[str, float]:
        return dict(zip(self.outputs, self.values))


class IndicatorParams(BaseModel):
    """Base for indicator parameter schemas."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class BaseIndicator(ABC):
    """
    Abstract base class for all technical indicators.

    Subclasses declare a nested ``Params`` pydantic model, the names of their
    outputs and a family, and implement ``minimum_window_length`` and
    ``_calculate``.

    Attributes:
        indicator_id: Identifier the indicator is registered under in a bank
        params: Validated parameters
    """

    Params: ClassVar[type[IndicatorParams]] = IndicatorParams
    outputs: ClassVar[tuple[str, ...]] = ("value",)
    family: ClassVar[str] = "trend"

    def __init__(self, indicator_id: str, **params: Any):
        self.indicator_id = indicator_id
        self.params = self._validate_params(params)
        logger.debug(
            f"Initialized {type(self).__name__} '{indicator_id}' with parameters: "
            f"{self.params.model_dump()}"
        )

    def _validate_params(self, params: dict[str, Any]) -> IndicatorParams:
        """
        Validate parameters against the indicator's ``Params`` schema.

        Raises:
            ConfigurationError: If any parameter is unknown or invalid
        """
        try:
            validated = self.Params(**params)
        except ValidationError as e:
            raise ConfigurationError(
                message=f"Invalid parameters for indicator '{self.indicator_id}'",
                error_code=ErrorCodes.CONFIG_INVALID_PARAMETERS,
                context={"indicator": self.indicator_id},
                details={
                    "indicator_type": type(self).__name__,
                    "errors": [
                        {"field": ".".join(map(str, err["loc"])), "message": err["msg"]}
                        for err in e.errors()
                    ],
                },
            ) from e
        self._check_params(validated)
        return validated

    def _check_params(self, params: IndicatorParams) -> None:
        """Cross-field parameter checks, overridden where needed."""

    @abstractmethod
    def minimum_window_length(self) -> int:
        """Number of trailing bars the indicator reads."""

    @abstractmethod
    def _calculate(self, window: SeriesWindow) -> tuple[float, ...]:
        """
        Compute the outputs at the last bar.

        ``window`` holds exactly ``minimum_window_length()`` bars.
        """

    def compute(self, window: SeriesWindow) -> IndicatorReading:
        """
        Compute the reading at the last bar of ``window``.

        Raises:
            InsufficientHistory: If the window is shorter than the indicator's
                minimum window length
        """
        required = self.minimum_window_length()
        if len(window) < required:
            raise InsufficientHistory(
                message=(
                    f"Indicator '{self.indicator_id}' requires {required} bars, "
                    f"window holds {len(window)}"
                ),
                error_code=ErrorCodes.SERIES_INSUFFICIENT_HISTORY,
                details={
                    "indicator": self.indicator_id,
                    "required": required,
                    "available": len(window),
                },
            )

        values = tuple(float(v) for v in self._calculate(window.tail(required)))
        return IndicatorReading(
            indicator_id=self.indicator_id,
            timestamp=window.last_timestamp,
            values=values,
            outputs=self.outputs,
        )

    def compute_series(self, window: SeriesWindow) -> pd.DataFrame:
        """
        Compute one reading per bar across the whole window.

        Each row equals ``compute`` on the window ending at that bar; rows
        without enough history are NaN.

        Returns:
            DataFrame indexed by timestamp with one column per output
        """
        required = self.minimum_window_length()
        bars = window.bars
        rows = np.full((len(bars), len(self.outputs)), np.nan)
        for end in range(required, len(bars) + 1):
            sub_window = SeriesWindow(
                bars[end - required : end],
                interval=window.interval,
                skip_weekends=window.skip_weekends,
            )
            rows[end - 1] = self._calculate(sub_window)

        return pd.DataFrame(
            rows,
            index=pd.DatetimeIndex([bar.timestamp for bar in bars], name="timestamp"),
            columns=[f"{self.indicator_id}_{output}" for output in self.outputs],
        )

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={v}" for k, v in self.params.model_dump().items())
        return f"{type(self).__name__}('{self.indicator_id}', {params})"


def safe_ratio(numerator: float, denominator: float, default: float) -> float:
    """Divide, returning ``default`` when the denominator is zero."""
    if denominator == 0 or math.isnan(denominator):
        return default
    return numerator / denominator
