"""
Output variable and defuzzification methods.

Every method receives the aggregated strength of each output term (only
terms with a strength above zero take part) and returns a crisp score
within the output range.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping, Optional

import numpy as np

from fuzzysig import get_logger
from fuzzysig.config.models import DefuzzificationMethod, OutputConfig
from fuzzysig.fuzzy.membership import MembershipFunction

logger = get_logger(__name__)


@dataclass(frozen=True)
class OutputTerm:
    """Output term: representative value and optional shape over the range."""

    name: str
    value: float
    membership: Optional[MembershipFunction] = None


@dataclass(frozen=True)
class OutputVariable:
    """
    The signal variable rules conclude on.

    Attributes:
        name: Variable name
        low: Lower bound of the score range
        high: Upper bound of the score range
        terms: Output terms in configuration order
        neutral_score: Score reported when no rule fires
        neutral_label: Label reported when no rule fires
    """

    name: str
    low: float
    high: float
    terms: Mapping[str, OutputTerm]
    neutral_score: float = 0.0
    neutral_label: str = "neutral"

    @classmethod
    def from_config(cls, config: OutputConfig) -> "OutputVariable":
        terms = {
            name: OutputTerm(
                name=name,
                value=term.value,
                membership=term.membership.build() if term.membership is not None else None,
            )
            for name, term in config.terms.items()
        }
        low, high = config.range
        return cls(
            name=config.name,
            low=low,
            high=high,
            terms=MappingProxyType(terms),
            neutral_score=config.neutral_score,
            neutral_label=config.neutral_label,
        )

    def clamp(self, score: float) -> float:
        return min(self.high, max(self.low, score))


Defuzzifier = Callable[[Mapping[str, float], OutputVariable, int], float]


def _active(strengths: Mapping[str, float]) -> dict[str, float]:
    return {term: s for term, s in strengths.items() if s > 0.0}


def _maxima(strengths: Mapping[str, float], output: OutputVariable) -> list[float]:
    active = _active(strengths)
    peak = max(active.values())
    return [output.terms[term].value for term, s in active.items() if s == peak]


def centroid(strengths: Mapping[str, float], output: OutputVariable, resolution: int = 0) -> float:
    """Strength-weighted average of the representative values."""
    active = _active(strengths)
    total = sum(active.values())
    return sum(s * output.terms[term].value for term, s in active.items()) / total


def first_of_maxima(
    strengths: Mapping[str, float], output: OutputVariable, resolution: int = 0
) -> float:
    """Smallest representative value among the strongest terms."""
    return min(_maxima(strengths, output))


def mean_of_maxima(
    strengths: Mapping[str, float], output: OutputVariable, resolution: int = 0
) -> float:
    """Mean representative value of the strongest terms."""
    values = _maxima(strengths, output)
    return sum(values) / len(values)


def bisector(strengths: Mapping[str, float], output: OutputVariable, resolution: int = 0) -> float:
    """
    Representative value splitting the total strength in half.

    Terms are ordered by representative value; the first value at which the
    cumulative strength reaches half of the total is returned.
    """
    active = sorted(
        ((output.terms[term].value, s) for term, s in _active(strengths).items()),
        key=lambda pair: pair[0],
    )
    half = sum(s for _, s in active) / 2.0
    cumulative = 0.0
    for value, s in active:
        cumulative += s
        if cumulative >= half:
            return value
    return active[-1][0]


def area_centroid(
    strengths: Mapping[str, float], output: OutputVariable, resolution: int = 201
) -> float:
    """
    Centroid of the aggregated output shape.

    Each term's membership function is clipped at its strength, the clipped
    shapes are combined with max and the centroid of the result is taken over
    ``resolution`` evenly spaced samples of the output range. When the
    combined shape has no area inside the range the point centroid is used.
    """
    xs = np.linspace(output.low, output.high, resolution)
    aggregated = np.zeros_like(xs)
    for term, s in _active(strengths).items():
        membership = output.terms[term].membership
        aggregated = np.maximum(aggregated, np.minimum(s, membership.evaluate(xs)))

    area = float(aggregated.sum())
    if area == 0.0:
        logger.debug("Aggregated output shape has no area, using point centroid")
        return centroid(strengths, output)
    return float((xs * aggregated).sum() / area)


DEFUZZIFIERS: dict[DefuzzificationMethod, Defuzzifier] = {
    DefuzzificationMethod.CENTROID: centroid,
    DefuzzificationMethod.FIRST_OF_MAXIMA: first_of_maxima,
    DefuzzificationMethod.MEAN_OF_MAXIMA: mean_of_maxima,
    DefuzzificationMethod.BISECTOR: bisector,
    DefuzzificationMethod.AREA_CENTROID: area_centroid,
}


def defuzzify(
    strengths: Mapping[str, float],
    output: OutputVariable,
    method: DefuzzificationMethod = DefuzzificationMethod.CENTROID,
    resolution: int = 201,
) -> float:
    """
    Crisp score for aggregated term strengths, clamped to the output range.

    Returns the neutral score when no term has a positive strength.
    """
    if not _active(strengths):
        return output.neutral_score
    return output.clamp(DEFUZZIFIERS[method](strengths, output, resolution))
