"""
fuzzysig configuration package.

Engine configuration models, the YAML loader and process settings.
"""

from fuzzysig.config.loader import load_engine_config, parse_engine_config
from fuzzysig.config.models import (
    DefuzzificationMethod,
    EngineConfig,
    IndicatorConfig,
    InferenceConfig,
    OutputConfig,
    OutputTermConfig,
    RuleConfig,
    SeriesConfig,
)
from fuzzysig.config.settings import FuzzysigSettings, clear_settings_cache, get_settings

__all__ = [
    "load_engine_config",
    "parse_engine_config",
    "DefuzzificationMethod",
    "EngineConfig",
    "IndicatorConfig",
    "InferenceConfig",
    "OutputConfig",
    "OutputTermConfig",
    "RuleConfig",
    "SeriesConfig",
    "FuzzysigSettings",
    "get_settings",
    "clear_settings_cache",
]
