"""
Process-wide signal engine.

The engine is initialized once per process from a configuration and a
series provider; afterwards ``evaluate`` and ``evaluate_many`` delegate to
the shared SignalAggregator. The configuration is write-once: a second
``initialize`` call is a configuration error.

Example:
    ```python
    from fuzzysig import engine
    from fuzzysig.config import load_engine_config

    engine.initialize(load_engine_config("config/signal_engine.yaml"), provider)
    output = engine.evaluate("EURUSD", as_of)
    ```
"""

import threading
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Union

from fuzzysig import get_logger
from fuzzysig.config.loader import load_engine_config
from fuzzysig.config.models import EngineConfig
from fuzzysig.data.provider import SeriesProvider
from fuzzysig.errors import ConfigurationError, ErrorCodes
from fuzzysig.signals.aggregator import (
    EvaluationRequest,
    EvaluationResult,
    SignalAggregator,
    SignalOutput,
)

logger = get_logger(__name__)

_ENGINE: Optional[SignalAggregator] = None
_LOCK = threading.Lock()


def initialize(
    config: Union[EngineConfig, str, Path], provider: Optional[SeriesProvider] = None
) -> SignalAggregator:
    """
    Build the process-wide aggregator.

    Args:
        config: Validated configuration or path to a YAML configuration file
        provider: Default series provider for evaluations

    Raises:
        ConfigurationError: If the configuration is invalid or the engine is
            already initialized
    """
    global _ENGINE
    with _LOCK:
        if _ENGINE is not None:
            raise ConfigurationError(
                message="Signal engine is already initialized",
                error_code=ErrorCodes.CONFIG_ALREADY_INITIALIZED,
                suggestion="Initialize the engine once at process startup",
            )
        if not isinstance(config, EngineConfig):
            config = load_engine_config(config)
        _ENGINE = SignalAggregator.from_config(config, provider)
        logger.info("Signal engine initialized")
        return _ENGINE


def is_initialized() -> bool:
    return _ENGINE is not None


def get_engine() -> SignalAggregator:
    """
    Return the process-wide aggregator.

    Raises:
        ConfigurationError: If ``initialize`` has not been called
    """
    if _ENGINE is None:
        raise ConfigurationError(
            message="Signal engine is not initialized",
            error_code=ErrorCodes.CONFIG_NOT_INITIALIZED,
            suggestion="Call fuzzysig.engine.initialize(config, provider) first",
        )
    return _ENGINE


def evaluate(
    instrument_id: str,
    as_of: datetime,
    series_source: Optional[SeriesProvider] = None,
) -> SignalOutput:
    """Evaluate one instrument at one timestamp with the shared engine."""
    return get_engine().evaluate(instrument_id, as_of, series_source)


def evaluate_many(
    requests: Iterable[Union[EvaluationRequest, tuple[str, datetime]]],
    max_workers: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
    series_source: Optional[SeriesProvider] = None,
) -> list[EvaluationResult]:
    """Evaluate independent units concurrently with the shared engine."""
    return get_engine().evaluate_many(
        requests,
        max_workers=max_workers,
        cancel_event=cancel_event,
        series_source=series_source,
    )
