"""
Technical indicators module for fuzzysig.

Importing this package registers every built-in indicator type in
``INDICATOR_REGISTRY``.
"""

from fuzzysig.indicators.ad_line import ADLineIndicator
from fuzzysig.indicators.adx_indicator import ADXIndicator
from fuzzysig.indicators.aroon_indicator import AroonIndicator
from fuzzysig.indicators.atr_indicator import ATRIndicator
from fuzzysig.indicators.base_indicator import (
    INDICATOR_REGISTRY,
    BaseIndicator,
    IndicatorParams,
    IndicatorReading,
)
from fuzzysig.indicators.bollinger_bands_indicator import BollingerBandsIndicator
from fuzzysig.indicators.indicator_bank import IndicatorBank
from fuzzysig.indicators.indicator_factory import IndicatorFactory
from fuzzysig.indicators.ma_indicators import ExponentialMovingAverage, SimpleMovingAverage
from fuzzysig.indicators.macd_indicator import MACDIndicator
from fuzzysig.indicators.obv_indicator import OBVIndicator
from fuzzysig.indicators.roc_indicator import ROCIndicator
from fuzzysig.indicators.rsi_indicator import RSIIndicator
from fuzzysig.indicators.stochastic_indicator import StochasticIndicator

__all__ = [
    "INDICATOR_REGISTRY",
    "BaseIndicator",
    "IndicatorParams",
    "IndicatorReading",
    "IndicatorBank",
    "IndicatorFactory",
    "SimpleMovingAverage",
    "ExponentialMovingAverage",
    "MACDIndicator",
    "RSIIndicator",
    "StochasticIndicator",
    "ROCIndicator",
    "AroonIndicator",
    "ATRIndicator",
    "BollingerBandsIndicator",
    "ADXIndicator",
    "OBVIndicator",
    "ADLineIndicator",
]
