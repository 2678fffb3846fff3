"""
Tests for the SignalAggregator: single evaluations, batches and cancellation.
"""

import threading
from datetime import timedelta

import pytest

from fuzzysig.config import EngineConfig
from fuzzysig.data import InMemorySeriesProvider
from fuzzysig.errors import (
    ConfigurationError,
    DataError,
    ErrorCodes,
    EvaluationCancelled,
    InsufficientHistory,
)
from fuzzysig.signals import EvaluationRequest, SignalAggregator, SignalOutput



class UnreachableProvider(InMemorySeriesProvider):
    """Provider whose storage is down for one instrument."""

    def get_bars(self, instrument_id, end_timestamp):
        if instrument_id == "OFFLINE":
            raise ConnectionError("storage unavailable")
        return super().get_bars(instrument_id, end_timestamp)

@pytest.fixture
def provider(rising_bars, falling_bars):
    return InMemorySeriesProvider({"UP": rising_bars, "DOWN": falling_bars})


@pytest.fixture
def aggregator(minimal_config_dict, provider):
    return SignalAggregator.from_config(EngineConfig.model_validate(minimal_config_dict), provider)


class TestConstruction:
    """Tests for building an aggregator from configuration."""

    def test_required_indicators(self, minimal_config_dict):
        """Only indicators referenced by rules are computed."""
        minimal_config_dict["indicators"].append(
            {"id": "sma_50", "type": "sma", "params": {"period": 50}}
        )
        aggregator = SignalAggregator.from_config(EngineConfig.model_validate(minimal_config_dict))

        assert aggregator.required_indicators == ("rsi_5",)
        assert aggregator.window_length == 6
        assert aggregator.provider is None

    def test_fuzzy_sets_for_unknown_indicator(self, minimal_config_dict):
        """Fuzzy sets must belong to a configured indicator."""
        minimal_config_dict["fuzzy_sets"]["adx"] = {
            "weak": {"type": "triangular", "parameters": [0, 0, 25]}
        }
        with pytest.raises(ConfigurationError) as exc_info:
            SignalAggregator.from_config(EngineConfig.model_validate(minimal_config_dict))
        assert exc_info.value.error_code == ErrorCodes.CONFIG_UNDEFINED_INDICATOR
        assert exc_info.value.details["indicator"] == "adx"

    def test_unknown_selected_output(self, minimal_config_dict):
        """The selected output must be produced by the indicator."""
        minimal_config_dict["fuzzy_sets"]["rsi_5"]["output"] = "histogram"
        with pytest.raises(ConfigurationError) as exc_info:
            SignalAggregator.from_config(EngineConfig.model_validate(minimal_config_dict))
        assert exc_info.value.error_code == ErrorCodes.CONFIG_UNKNOWN_OUTPUT
        assert exc_info.value.details["available_outputs"] == ["value"]

    def test_unknown_consequent(self, minimal_config_dict):
        """Rule consequents must be output terms."""
        minimal_config_dict["rules"][0]["then"] = "strong_buy"
        with pytest.raises(ConfigurationError) as exc_info:
            SignalAggregator.from_config(EngineConfig.model_validate(minimal_config_dict))
        assert exc_info.value.error_code == ErrorCodes.CONFIG_UNKNOWN_OUTPUT

    def test_default_config(self, default_config):
        """The shipped configuration builds; the unused ATR is skipped."""
        aggregator = SignalAggregator.from_config(default_config)

        assert "atr_14" not in aggregator.required_indicators
        assert set(aggregator.required_indicators) == {"rsi_14", "macd", "stoch", "adx_14", "bbands"}
        assert aggregator.window_length == 60
        assert aggregator.interval == timedelta(hours=1)


class TestEvaluate:
    """Tests for single evaluations."""

    def test_falling_series_buys(self, aggregator, falling_bars):
        """A steady decline reads oversold and fires the buy rule."""
        as_of = falling_bars[-1].timestamp
        output = aggregator.evaluate("DOWN", as_of)

        assert isinstance(output, SignalOutput)
        assert output.instrument_id == "DOWN"
        assert output.timestamp == as_of
        assert output.score == 1.0
        assert output.confidence == 1.0
        assert output.label == "buy"
        assert output.contributing_rule_ids == ("buy_low",)
        assert dict(output.term_strengths) == {"sell": 0.0, "buy": 1.0}
        assert output.stale is False

    def test_rising_series_sells(self, aggregator, rising_bars):
        output = aggregator.evaluate("UP", rising_bars[-1].timestamp)

        assert output.score == -1.0
        assert output.label == "sell"
        assert output.contributing_rule_ids == ("sell_high",)

    def test_future_bars_ignored(self, aggregator, rising_bars, bar_factory):
        """Bars after ``as_of`` never influence the result."""
        as_of = rising_bars[59].timestamp
        crash = bar_factory(
            [160.0 - i for i in range(60)], start=rising_bars[60].timestamp
        )
        with_future = InMemorySeriesProvider({"UP": rising_bars[:60] + crash})
        truncated = InMemorySeriesProvider({"UP": rising_bars[:60]})

        assert aggregator.evaluate("UP", as_of, with_future) == aggregator.evaluate(
            "UP", as_of, truncated
        )

    def test_series_source_override(self, minimal_config_dict, falling_bars):
        """A per-call source is used when the aggregator has none."""
        aggregator = SignalAggregator.from_config(EngineConfig.model_validate(minimal_config_dict))
        source = InMemorySeriesProvider({"DOWN": falling_bars})

        assert aggregator.evaluate("DOWN", falling_bars[-1].timestamp, source).label == "buy"

    def test_no_provider(self, minimal_config_dict, falling_bars):
        aggregator = SignalAggregator.from_config(EngineConfig.model_validate(minimal_config_dict))
        with pytest.raises(ConfigurationError) as exc_info:
            aggregator.evaluate("DOWN", falling_bars[-1].timestamp)
        assert exc_info.value.error_code == ErrorCodes.CONFIG_NOT_INITIALIZED

    def test_insufficient_history(self, aggregator, rising_bars):
        with pytest.raises(InsufficientHistory) as exc_info:
            aggregator.evaluate("UP", rising_bars[3].timestamp)
        assert exc_info.value.details["required"] == 6
        assert exc_info.value.details["available"] == 4

    def test_unknown_instrument(self, aggregator, rising_bars):
        with pytest.raises(DataError) as exc_info:
            aggregator.evaluate("XAUUSD", rising_bars[-1].timestamp)
        assert exc_info.value.error_code == ErrorCodes.DATA_NOT_FOUND

    def test_provider_failure(self, minimal_config_dict, rising_bars):
        """Provider failures surface as DataError chained to their cause."""
        aggregator = SignalAggregator.from_config(
            EngineConfig.model_validate(minimal_config_dict),
            UnreachableProvider({"UP": rising_bars}),
        )
        with pytest.raises(DataError) as exc_info:
            aggregator.evaluate("OFFLINE", rising_bars[-1].timestamp)

        error = exc_info.value
        assert error.error_code == ErrorCodes.DATA_PROVIDER_FAILED
        assert error.details["cause"] == "ConnectionError"
        assert isinstance(error.__cause__, ConnectionError)

    def test_stale_output(self, minimal_config_dict, provider, falling_bars):
        """With a known interval, evaluating past the last bar marks the output stale."""
        minimal_config_dict["series"] = {"interval": "1h"}
        aggregator = SignalAggregator.from_config(
            EngineConfig.model_validate(minimal_config_dict), provider
        )
        last = falling_bars[-1].timestamp

        assert aggregator.evaluate("DOWN", last).stale is False
        late = aggregator.evaluate("DOWN", last + timedelta(hours=3))
        assert late.stale is True
        assert late.label == "buy"

    def test_to_dict(self, aggregator, falling_bars):
        as_of = falling_bars[-1].timestamp
        data = aggregator.evaluate("DOWN", as_of).to_dict()

        assert data["instrument_id"] == "DOWN"
        assert data["timestamp"] == as_of.isoformat()
        assert data["contributing_rule_ids"] == ["buy_low"]
        assert data["term_strengths"] == {"sell": 0.0, "buy": 1.0}


class TestEvaluateMany:
    """Tests for batch evaluation."""

    def test_results_in_request_order(self, aggregator, rising_bars, falling_bars):
        requests = [
            ("UP", rising_bars[-1].timestamp),
            EvaluationRequest("DOWN", falling_bars[-1].timestamp),
            ("UP", rising_bars[50].timestamp),
        ]
        results = aggregator.evaluate_many(requests, max_workers=3)

        assert [r.instrument_id for r in results] == ["UP", "DOWN", "UP"]
        assert [r.as_of for r in results] == [
            rising_bars[-1].timestamp,
            falling_bars[-1].timestamp,
            rising_bars[50].timestamp,
        ]
        assert all(r.ok for r in results)
        assert [r.unwrap().label for r in results] == ["sell", "buy", "sell"]

    def test_failures_are_isolated(self, aggregator, rising_bars, falling_bars):
        """One failing unit never affects its siblings."""
        results = aggregator.evaluate_many(
            [
                ("UP", rising_bars[-1].timestamp),
                ("MISSING", rising_bars[-1].timestamp),
                ("UP", rising_bars[2].timestamp),
                ("DOWN", falling_bars[-1].timestamp),
            ],
            max_workers=2,
        )

        assert [r.ok for r in results] == [True, False, False, True]
        assert results[1].error.error_code == ErrorCodes.DATA_NOT_FOUND
        assert isinstance(results[2].error, InsufficientHistory)
        assert results[2].error.details["instrument_id"] == "UP"
        with pytest.raises(InsufficientHistory):
            results[2].unwrap()

    def test_provider_failure_is_isolated(self, minimal_config_dict, rising_bars):
        """A provider failure for one unit keeps the sibling results."""
        aggregator = SignalAggregator.from_config(
            EngineConfig.model_validate(minimal_config_dict),
            UnreachableProvider({"UP": rising_bars}),
        )
        as_of = rising_bars[-1].timestamp

        results = aggregator.evaluate_many([("UP", as_of), ("OFFLINE", as_of)], max_workers=2)

        assert [r.ok for r in results] == [True, False]
        assert results[0].output.label == "sell"
        assert results[1].error.error_code == ErrorCodes.DATA_PROVIDER_FAILED
        assert results[1].error.details["instrument_id"] == "OFFLINE"

    def test_matches_sequential(self, aggregator, rising_bars, falling_bars):
        """Concurrent results equal one-by-one evaluation."""
        requests = [("UP", bar.timestamp) for bar in rising_bars[10:]] + [
            ("DOWN", bar.timestamp) for bar in falling_bars[10:]
        ]
        expected = [aggregator.evaluate(instrument, as_of) for instrument, as_of in requests]

        concurrent = aggregator.evaluate_many(requests, max_workers=8)

        assert [r.unwrap() for r in concurrent] == expected

    def test_empty_batch(self, aggregator):
        assert aggregator.evaluate_many([]) == []

    def test_cancelled_before_start(self, aggregator, rising_bars):
        """A set cancel event reports every pending unit as cancelled."""
        cancel = threading.Event()
        cancel.set()

        results = aggregator.evaluate_many(
            [("UP", rising_bars[-1].timestamp), ("DOWN", rising_bars[-1].timestamp)],
            cancel_event=cancel,
        )

        for result in results:
            assert isinstance(result.error, EvaluationCancelled)
            assert result.error.error_code == ErrorCodes.ENGINE_CANCELLED
            assert result.output is None

    def test_unset_cancel_event(self, aggregator, rising_bars):
        results = aggregator.evaluate_many(
            [("UP", rising_bars[-1].timestamp)], cancel_event=threading.Event()
        )
        assert results[0].ok
