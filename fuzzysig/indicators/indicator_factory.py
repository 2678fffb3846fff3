"""
Factory for creating indicators from configuration.

This module provides the IndicatorFactory class which creates indicator
instances from ``IndicatorConfig`` entries. Types are resolved through the
case-insensitive ``INDICATOR_REGISTRY``.
"""

from typing import Sequence

from fuzzysig import get_logger
from fuzzysig.config.models import IndicatorConfig
from fuzzysig.errors import ConfigurationError, ErrorCodes
from fuzzysig.indicators.base_indicator import INDICATOR_REGISTRY, BaseIndicator

logger = get_logger(__name__)


class IndicatorFactory:
    """
    Factory class for creating indicator instances based on configuration.

    Example:
        ```python
        factory = IndicatorFactory([
            IndicatorConfig(id="rsi_14", type="rsi", params={"period": 14}),
            IndicatorConfig(id="macd", type="macd"),
        ])
        indicators = factory.build()
        ```
    """

    def __init__(self, configs: Sequence[IndicatorConfig]):
        self.configs = list(configs)
        logger.debug(f"IndicatorFactory initialized with {len(self.configs)} indicator configs")

    def build(self) -> dict[str, BaseIndicator]:
        """
        Build all configured indicators.

        Returns:
            Indicator identifiers mapped to indicator instances, in
            configuration order

        Raises:
            ConfigurationError: If a type is unknown, an id is duplicated or
                parameters are invalid
        """
        indicators: dict[str, BaseIndicator] = {}

        for position, config in enumerate(self.configs):
            if config.id in indicators:
                raise ConfigurationError(
                    message=f"Duplicate indicator id '{config.id}'",
                    error_code=ErrorCodes.CONFIG_DUPLICATE_INDICATOR,
                    context={"section": f"indicators[{position}]"},
                    details={"indicator": config.id},
                )

            indicator_class = INDICATOR_REGISTRY.get_or_raise(config.type)
            indicators[config.id] = indicator_class(config.id, **config.params)
            logger.debug(f"Created indicator '{config.id}' of type {indicator_class.__name__}")

        logger.info(f"Built {len(indicators)} indicators")
        return indicators
