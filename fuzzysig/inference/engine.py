"""
Fuzzy inference engine.

The InferenceEngine fuzzifies indicator readings, evaluates every rule of
the rule base, aggregates rule strengths per output term with max and
defuzzifies the result into a score. It holds no state between calls; the
stage reached by a call is only reported in the details of the error that
interrupted it.
"""

import math
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from fuzzysig import get_logger
from fuzzysig.config.models import DefuzzificationMethod
from fuzzysig.errors import EngineError, ErrorCodes, RuleEvaluationError
from fuzzysig.fuzzy.library import FuzzySetLibrary
from fuzzysig.indicators.base_indicator import IndicatorReading
from fuzzysig.inference.defuzzify import OutputVariable, defuzzify
from fuzzysig.inference.rules import RuleBase

logger = get_logger(__name__)


class InferenceStage(Enum):
    """Stages of one inference call."""

    IDLE = "idle"
    FUZZIFYING = "fuzzifying"
    EVALUATING = "evaluating"
    DEFUZZIFYING = "defuzzifying"
    DONE = "done"


@dataclass(frozen=True)
class RuleFiringResult:
    """
    Outcome of one rule.

    Attributes:
        rule_id: Rule identifier
        consequent: Output term the rule concludes
        degree: Antecedent degree
        strength: ``degree * weight``
        fired: Whether the strength exceeded the firing threshold
    """

    rule_id: str
    consequent: str
    degree: float
    strength: float
    fired: bool


@dataclass(frozen=True)
class InferenceResult:
    """
    Outcome of one inference call.

    Attributes:
        score: Crisp score within the output range
        confidence: Strongest firing among rules concluding a winning term,
            0 when no rule fired
        label: Winning output term, the neutral label when no rule fired
        contributing_rule_ids: Fired rules in rule base order
        term_strengths: Aggregated strength per output term
        firings: Per-rule results in rule base order
    """

    score: float
    confidence: float
    label: str
    contributing_rule_ids: tuple[str, ...]
    term_strengths: Mapping[str, float]
    firings: tuple[RuleFiringResult, ...]


class InferenceEngine:
    """
    Evaluates a rule base over indicator readings.

    Example:
        ```python
        engine = InferenceEngine(rule_base, library, output)
        result = engine.infer({"rsi_14": reading})
        print(result.score, result.label, result.confidence)
        ```
    """

    def __init__(
        self,
        rule_base: RuleBase,
        library: FuzzySetLibrary,
        output: OutputVariable,
        firing_threshold: float = 0.0,
        method: DefuzzificationMethod = DefuzzificationMethod.CENTROID,
        resolution: int = 201,
    ):
        self.rule_base = rule_base
        self.library = library
        self.output = output
        self.firing_threshold = firing_threshold
        self.method = method
        self.resolution = resolution
        self._indicators = tuple(rule_base.referenced_indicators())
        logger.debug(
            f"InferenceEngine initialized: {len(rule_base)} rules, method={method.value}, "
            f"threshold={firing_threshold}"
        )

    def infer(self, readings: Mapping[str, IndicatorReading]) -> InferenceResult:
        """
        Run fuzzification, rule evaluation and defuzzification.

        Args:
            readings: Indicator readings keyed by indicator id

        Raises:
            RuleEvaluationError: If a referenced indicator has no reading or
                its reading is NaN
        """
        stage = InferenceStage.IDLE
        try:
            stage = InferenceStage.FUZZIFYING
            degrees = self._fuzzify(readings)

            stage = InferenceStage.EVALUATING
            firings = tuple(self._evaluate_rules(degrees))

            stage = InferenceStage.DEFUZZIFYING
            result = self._defuzzify(firings)

            stage = InferenceStage.DONE
            return result
        except EngineError as e:
            e.details.setdefault("stage", stage.value)
            raise

    def _fuzzify(self, readings: Mapping[str, IndicatorReading]) -> dict[tuple[str, str], float]:
        degrees: dict[tuple[str, str], float] = {}
        for indicator_id in self._indicators:
            reading = readings.get(indicator_id)
            if reading is None:
                raise RuleEvaluationError(
                    message=f"No reading available for indicator '{indicator_id}'",
                    error_code=ErrorCodes.RULE_MISSING_READING,
                    details={
                        "indicator": indicator_id,
                        "available_readings": list(readings),
                    },
                )

            variable = self.library.variable(indicator_id)
            value = reading.value(variable.output)
            if math.isnan(value):
                raise RuleEvaluationError(
                    message=f"Reading of indicator '{indicator_id}' is NaN",
                    error_code=ErrorCodes.RULE_INVALID_READING,
                    details={
                        "indicator": indicator_id,
                        "output": variable.output or reading.outputs[0],
                        "timestamp": str(reading.timestamp),
                    },
                )

            for term, degree in self.library.fuzzify(indicator_id, value).items():
                degrees[(indicator_id, term)] = degree
        return degrees

    def _evaluate_rules(self, degrees: Mapping[tuple[str, str], float]):
        def degree_of(indicator_id: str, term: str) -> float:
            return degrees[(indicator_id, term)]

        for rule in self.rule_base:
            degree = rule.degree(degree_of)
            strength = degree * rule.weight
            yield RuleFiringResult(
                rule_id=rule.rule_id,
                consequent=rule.consequent,
                degree=degree,
                strength=strength,
                fired=strength > self.firing_threshold,
            )

    def _defuzzify(self, firings: tuple[RuleFiringResult, ...]) -> InferenceResult:
        term_strengths = {term: 0.0 for term in self.output.terms}
        fired = [firing for firing in firings if firing.fired]
        for firing in fired:
            term_strengths[firing.consequent] = max(
                term_strengths[firing.consequent], firing.strength
            )

        if not fired:
            logger.debug("No rule fired, returning neutral result")
            return InferenceResult(
                score=self.output.neutral_score,
                confidence=0.0,
                label=self.output.neutral_label,
                contributing_rule_ids=(),
                term_strengths=MappingProxyType(term_strengths),
                firings=firings,
            )

        peak = max(term_strengths.values())
        winners = [term for term, s in term_strengths.items() if s == peak]
        confidence = max(firing.strength for firing in fired if firing.consequent in winners)
        score = defuzzify(term_strengths, self.output, self.method, self.resolution)

        return InferenceResult(
            score=score,
            confidence=confidence,
            label=winners[0],
            contributing_rule_ids=tuple(firing.rule_id for firing in fired),
            term_strengths=MappingProxyType(term_strengths),
            firings=firings,
        )
