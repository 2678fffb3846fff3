"""
Indicator bank.

Registry of configured indicator instances keyed by identifier. The bank is
built once at startup and is read-only afterwards; indicators hold no mutable
state, so one bank serves concurrent evaluations.
"""

from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional, Sequence

import pandas as pd

from fuzzysig import get_logger
from fuzzysig.config.models import IndicatorConfig
from fuzzysig.data.window import SeriesWindow
from fuzzysig.errors import ErrorCodes, UnknownIndicator
from fuzzysig.indicators.base_indicator import BaseIndicator, IndicatorReading
from fuzzysig.indicators.indicator_factory import IndicatorFactory

logger = get_logger(__name__)


class IndicatorBank:
    """
    Configured indicators keyed by identifier.

    Example:
        ```python
        bank = IndicatorBank.from_config(config.indicators)
        window = SeriesWindow.slice(bars, as_of, bank.required_window_length())
        reading = bank.compute("rsi_14", window)
        ```
    """

    def __init__(self, indicators: Mapping[str, BaseIndicator]):
        self._indicators = MappingProxyType(dict(indicators))

    @classmethod
    def from_config(cls, configs: Sequence[IndicatorConfig]) -> "IndicatorBank":
        """
        Build a bank from indicator configurations.

        Raises:
            ConfigurationError: If a type is unknown, an id is duplicated or
                parameters are invalid
        """
        return cls(IndicatorFactory(configs).build())

    def get(self, indicator_id: str) -> BaseIndicator:
        """
        Return the indicator registered under ``indicator_id``.

        Raises:
            UnknownIndicator: If no indicator has that identifier
        """
        try:
            return self._indicators[indicator_id]
        except KeyError:
            raise UnknownIndicator(
                message=f"Unknown indicator '{indicator_id}'",
                error_code=ErrorCodes.INDICATOR_UNKNOWN,
                details={
                    "indicator": indicator_id,
                    "available_indicators": list(self._indicators),
                },
            ) from None

    def compute(self, indicator_id: str, window: SeriesWindow) -> IndicatorReading:
        """
        Compute one indicator at the last bar of ``window``.

        Raises:
            UnknownIndicator: If no indicator has that identifier
            InsufficientHistory: If the window is shorter than the indicator's
                minimum window length
        """
        return self.get(indicator_id).compute(window)

    def compute_many(
        self, indicator_ids: Iterable[str], window: SeriesWindow
    ) -> dict[str, IndicatorReading]:
        """Compute several indicators over the same window."""
        return {indicator_id: self.compute(indicator_id, window) for indicator_id in indicator_ids}

    def compute_series(self, indicator_id: str, window: SeriesWindow) -> pd.DataFrame:
        """Per-bar readings of one indicator across the whole window."""
        return self.get(indicator_id).compute_series(window)

    def required_window_length(self, indicator_ids: Optional[Iterable[str]] = None) -> int:
        """
        Largest minimum window length among ``indicator_ids``.

        Args:
            indicator_ids: Identifiers to consider, every indicator if None

        Raises:
            UnknownIndicator: If an identifier is not registered
        """
        ids = list(self._indicators) if indicator_ids is None else list(indicator_ids)
        return max((self.get(i).minimum_window_length() for i in ids), default=0)

    @property
    def ids(self) -> list[str]:
        return list(self._indicators)

    def __contains__(self, indicator_id: str) -> bool:
        return indicator_id in self._indicators

    def __iter__(self) -> Iterator[str]:
        return iter(self._indicators)

    def __len__(self) -> int:
        return len(self._indicators)
