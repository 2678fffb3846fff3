"""
Signal aggregation for fuzzysig.
"""

from fuzzysig.signals.aggregator import (
    EvaluationRequest,
    EvaluationResult,
    SignalAggregator,
    SignalOutput,
)

__all__ = [
    "EvaluationRequest",
    "EvaluationResult",
    "SignalAggregator",
    "SignalOutput",
]
