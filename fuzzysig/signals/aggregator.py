"""
Signal aggregation.

The SignalAggregator runs one full evaluation for one instrument at one
timestamp: it resolves the series window, computes the indicators the rule
base needs, runs inference and assembles a SignalOutput. Batches of
independent evaluations run on a thread pool.

All collaborators are built once and only read afterwards, so evaluations
never share mutable state.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from fuzzysig import get_logger, log_error, log_performance
from fuzzysig.config.models import EngineConfig
from fuzzysig.data.models import Bar
from fuzzysig.data.provider import SeriesProvider
from fuzzysig.data.window import SeriesWindow
from fuzzysig.errors import (
    ConfigurationError,
    DataError,
    EngineError,
    ErrorCodes,
    EvaluationCancelled,
)
from fuzzysig.fuzzy.library import FuzzySetLibrary
from fuzzysig.indicators.indicator_bank import IndicatorBank
from fuzzysig.inference.defuzzify import OutputVariable
from fuzzysig.inference.engine import InferenceEngine
from fuzzysig.inference.rules import RuleBase

logger = get_logger(__name__)


@dataclass(frozen=True)
class SignalOutput:
    """
    Final result of one evaluation.

    Attributes:
        instrument_id: Instrument evaluated
        timestamp: Evaluation timestamp (``as_of``)
        score: Crisp score within the output range
        confidence: Confidence in [0, 1], exactly 0 when no rule fired
        contributing_rule_ids: Fired rules in rule base order
        label: Winning output term, or the neutral label
        term_strengths: Aggregated strength per output term
        stale: Whether the last bar does not represent the evaluation period
    """

    instrument_id: str
    timestamp: datetime
    score: float
    confidence: float
    contributing_rule_ids: tuple[str, ...]
    label: str
    term_strengths: Mapping[str, float] = field(default_factory=dict)
    stale: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "instrument_id": self.instrument_id,
            "timestamp": self.timestamp.isoformat(),
            "score": self.score,
            "confidence": self.confidence,
            "label": self.label,
            "contributing_rule_ids": list(self.contributing_rule_ids),
            "term_strengths": dict(self.term_strengths),
            "stale": self.stale,
        }


@dataclass(frozen=True)
class EvaluationRequest:
    """One ``(instrument_id, as_of)`` evaluation unit."""

    instrument_id: str
    as_of: datetime

    @classmethod
    def coerce(cls, request: Union["EvaluationRequest", tuple[str, datetime]]) -> "EvaluationRequest":
        if isinstance(request, EvaluationRequest):
            return request
        instrument_id, as_of = request
        return cls(instrument_id, as_of)


@dataclass(frozen=True)
class EvaluationResult:
    """
    Outcome of one unit of a batch: either an output or an engine error.
    """

    instrument_id: str
    as_of: datetime
    output: Optional[SignalOutput] = None
    error: Optional[EngineError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> SignalOutput:
        """Return the output, raising the stored error if the unit failed."""
        if self.error is not None:
            raise self.error
        return self.output  # type: ignore[return-value]


class SignalAggregator:
    """
    Orchestrates IndicatorBank, FuzzySetLibrary and InferenceEngine.

    Example:
        ```python
        aggregator = SignalAggregator.from_config(config, provider)
        output = aggregator.evaluate("EURUSD", datetime(2024, 3, 1, 16))

        results = aggregator.evaluate_many(
            [("EURUSD", as_of), ("GBPUSD", as_of)], max_workers=4
        )
        ```
    """

    def __init__(
        self,
        bank: IndicatorBank,
        inference: InferenceEngine,
        provider: Optional[SeriesProvider] = None,
        interval: Optional[timedelta] = None,
        skip_weekends: bool = True,
    ):
        self.bank = bank
        self.inference = inference
        self.provider = provider
        self.interval = interval
        self.skip_weekends = skip_weekends
        self.required_indicators = tuple(inference.rule_base.referenced_indicators())
        for indicator_id in self.required_indicators:
            if indicator_id not in bank:
                raise ConfigurationError(
                    message=f"Rules reference indicator '{indicator_id}' that is not configured",
                    error_code=ErrorCodes.CONFIG_UNDEFINED_INDICATOR,
                    context={"section": "indicators"},
                    details={"indicator": indicator_id, "configured": bank.ids},
                )
        self.window_length = bank.required_window_length(self.required_indicators)
        logger.info(
            f"SignalAggregator ready: {len(self.required_indicators)} indicators in use, "
            f"window length {self.window_length}"
        )

    @classmethod
    def from_config(
        cls, config: EngineConfig, provider: Optional[SeriesProvider] = None
    ) -> "SignalAggregator":
        """
        Build every component from a validated configuration.

        Raises:
            ConfigurationError: If the configuration is inconsistent
        """
        bank = IndicatorBank.from_config(config.indicators)
        _check_fuzzy_sets(config, bank)
        library = FuzzySetLibrary.from_config(config.fuzzy_sets)
        output = OutputVariable.from_config(config.output)
        rule_base = RuleBase.from_config(config.rules, output.terms, library)
        inference = InferenceEngine(
            rule_base,
            library,
            output,
            firing_threshold=config.inference.firing_threshold,
            method=config.inference.defuzzification,
            resolution=config.inference.resolution,
        )
        return cls(
            bank,
            inference,
            provider,
            config.series.interval_timedelta,
            config.series.skip_weekends,
        )

    def evaluate(
        self,
        instrument_id: str,
        as_of: datetime,
        series_source: Optional[SeriesProvider] = None,
    ) -> SignalOutput:
        """
        Evaluate one instrument at one timestamp.

        Args:
            instrument_id: Instrument to evaluate
            as_of: Evaluation timestamp; only bars at or before it are used
            series_source: Provider overriding the aggregator's own

        Raises:
            EngineError: InsufficientHistory, UnknownIndicator, UnknownTerm,
                RuleEvaluationError or DataError for this evaluation
            ConfigurationError: If no series provider is available
        """
        source = series_source if series_source is not None else self.provider
        if source is None:
            raise ConfigurationError(
                message="No series provider configured",
                error_code=ErrorCodes.CONFIG_NOT_INITIALIZED,
                details={"instrument_id": instrument_id},
            )

        bars = self._fetch_bars(source, instrument_id, as_of)
        window = SeriesWindow.slice(
            bars, as_of, self.window_length, self.interval, self.skip_weekends
        )
        readings = self.bank.compute_many(self.required_indicators, window)
        result = self.inference.infer(readings)

        logger.debug(
            f"{instrument_id} @ {as_of}: score={result.score:.4f} "
            f"confidence={result.confidence:.4f} label={result.label}"
        )
        return SignalOutput(
            instrument_id=instrument_id,
            timestamp=as_of,
            score=result.score,
            confidence=result.confidence,
            contributing_rule_ids=result.contributing_rule_ids,
            label=result.label,
            term_strengths=MappingProxyType(dict(result.term_strengths)),
            stale=window.stale,
        )

    @staticmethod
    def _fetch_bars(
        source: SeriesProvider, instrument_id: str, as_of: datetime
    ) -> Sequence[Bar]:
        """
        Read bars from the provider.

        Raises:
            DataError: DATA-ProviderFailed when the provider itself fails
        """
        try:
            return source.get_bars(instrument_id, as_of)
        except EngineError:
            raise
        except Exception as e:
            raise DataError(
                message=f"Series provider failed for '{instrument_id}': {e}",
                error_code=ErrorCodes.DATA_PROVIDER_FAILED,
                details={
                    "instrument_id": instrument_id,
                    "as_of": str(as_of),
                    "cause": type(e).__name__,
                },
            ) from e

    def _evaluate_unit(
        self,
        request: EvaluationRequest,
        cancel_event: Optional[threading.Event],
        series_source: Optional[SeriesProvider],
    ) -> EvaluationResult:
        try:
            if cancel_event is not None and cancel_event.is_set():
                raise EvaluationCancelled(
                    message=f"Evaluation of '{request.instrument_id}' was cancelled",
                    error_code=ErrorCodes.ENGINE_CANCELLED,
                    details={
                        "instrument_id": request.instrument_id,
                        "as_of": str(request.as_of),
                    },
                )
            output = self.evaluate(request.instrument_id, request.as_of, series_source)
        except EngineError as e:
            e.details.setdefault("instrument_id", request.instrument_id)
            if not isinstance(e, EvaluationCancelled):
                log_error(e, logger=logger, level=logging.WARNING)
            return EvaluationResult(request.instrument_id, request.as_of, error=e)
        return EvaluationResult(request.instrument_id, request.as_of, output=output)

    @log_performance(logger=logger, threshold_ms=0, log_level=logging.DEBUG)
    def evaluate_many(
        self,
        requests: Iterable[Union[EvaluationRequest, tuple[str, datetime]]],
        max_workers: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
        series_source: Optional[SeriesProvider] = None,
    ) -> list[EvaluationResult]:
        """
        Evaluate independent units concurrently.

        Args:
            requests: ``(instrument_id, as_of)`` pairs or EvaluationRequests
            max_workers: Thread pool size (None for the executor default)
            cancel_event: When set, units that have not started yet are
                reported as EvaluationCancelled
            series_source: Provider overriding the aggregator's own

        Returns:
            One EvaluationResult per request, in request order. A failing
            unit never affects its siblings.
        """
        units: Sequence[EvaluationRequest] = [EvaluationRequest.coerce(r) for r in requests]
        if not units:
            return []

        results: list[Optional[EvaluationResult]] = [None] * len(units)
        with ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="fuzzysig-eval"
        ) as executor:
            futures = {
                executor.submit(self._evaluate_unit, unit, cancel_event, series_source): index
                for index, unit in enumerate(units)
            }
            for future in as_completed(futures):
                results[futures[future]] = future.result()

        failed = sum(1 for result in results if result is not None and not result.ok)
        logger.info(f"Evaluated {len(units)} units, {failed} failed")
        return results  # type: ignore[return-value]


def _check_fuzzy_sets(config: EngineConfig, bank: IndicatorBank) -> None:
    """
    Every fuzzy set must belong to a configured indicator and select one of
    its outputs.

    Raises:
        ConfigurationError: If a fuzzy set names an unknown indicator or output
    """
    for indicator_id, fuzzy_set in config.fuzzy_sets.root.items():
        if indicator_id not in bank:
            raise ConfigurationError(
                message=f"Fuzzy sets defined for unknown indicator '{indicator_id}'",
                error_code=ErrorCodes.CONFIG_UNDEFINED_INDICATOR,
                context={"section": f"fuzzy_sets.{indicator_id}"},
                details={"indicator": indicator_id, "configured": bank.ids},
            )
        outputs = bank.get(indicator_id).outputs
        if fuzzy_set.output is not None and fuzzy_set.output not in outputs:
            raise ConfigurationError(
                message=f"Indicator '{indicator_id}' has no output '{fuzzy_set.output}'",
                error_code=ErrorCodes.CONFIG_UNKNOWN_OUTPUT,
                context={"section": f"fuzzy_sets.{indicator_id}.output"},
                details={
                    "indicator": indicator_id,
                    "output": fuzzy_set.output,
                    "available_outputs": list(outputs),
                },
            )
