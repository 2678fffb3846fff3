"""
Tests for the output variable and the defuzzification methods.
"""

import pytest

from fuzzysig.config import DefuzzificationMethod, OutputConfig
from fuzzysig.inference import DEFUZZIFIERS, OutputVariable, defuzzify
from fuzzysig.inference.defuzzify import (
    area_centroid,
    bisector,
    centroid,
    first_of_maxima,
    mean_of_maxima,
)


@pytest.fixture
def output():
    """Four-term signal variable over [-1, 1]."""
    return OutputVariable.from_config(
        OutputConfig.model_validate(
            {
                "range": [-1.0, 1.0],
                "neutral_score": 0.0,
                "neutral_label": "hold",
                "terms": {
                    "strong_sell": {
                        "value": -1.0,
                        "membership": {"type": "triangular", "parameters": [-1.0, -1.0, -0.5]},
                    },
                    "sell": {
                        "value": -0.5,
                        "membership": {"type": "triangular", "parameters": [-1.0, -0.5, 0.0]},
                    },
                    "buy": {
                        "value": 0.5,
                        "membership": {"type": "triangular", "parameters": [0.0, 0.5, 1.0]},
                    },
                    "strong_buy": {
                        "value": 1.0,
                        "membership": {"type": "triangular", "parameters": [0.5, 1.0, 1.0]},
                    },
                },
            }
        )
    )


def strengths(**values):
    base = {"strong_sell": 0.0, "sell": 0.0, "buy": 0.0, "strong_buy": 0.0}
    base.update(values)
    return base


class TestOutputVariable:
    """Tests for OutputVariable construction."""

    def test_from_config(self, output):
        """Terms keep configuration order and build their shapes."""
        assert list(output.terms) == ["strong_sell", "sell", "buy", "strong_buy"]
        assert output.terms["buy"].value == 0.5
        assert output.terms["buy"].membership.evaluate(0.5) == 1.0
        assert output.neutral_label == "hold"

    def test_clamp(self, output):
        """Scores are clamped into the range."""
        assert output.clamp(3.0) == 1.0
        assert output.clamp(-3.0) == -1.0
        assert output.clamp(0.25) == 0.25


class TestPointMethods:
    """Tests for the methods based on representative values."""

    def test_centroid(self, output):
        """Strength-weighted average of the representative values."""
        assert centroid(strengths(sell=0.2, buy=0.8), output) == pytest.approx(0.3)

    def test_first_of_maxima(self, output):
        """Smallest value among the strongest terms."""
        assert first_of_maxima(strengths(sell=0.2, buy=0.8), output) == 0.5
        assert first_of_maxima(strengths(sell=0.5, buy=0.5), output) == -0.5

    def test_mean_of_maxima(self, output):
        """Mean value of the strongest terms."""
        assert mean_of_maxima(strengths(sell=0.5, buy=0.5), output) == 0.0
        assert mean_of_maxima(strengths(buy=0.5, strong_buy=0.5), output) == 0.75

    def test_bisector(self, output):
        """First value where the cumulative strength reaches half the total."""
        assert bisector(strengths(strong_sell=0.2, sell=0.2, buy=0.5), output) == 0.5
        assert bisector(strengths(sell=0.5, buy=0.5), output) == -0.5


class TestAreaCentroid:
    """Tests for the shape-based centroid."""

    def test_single_symmetric_shape(self, output):
        """A single symmetric shape has its centroid at the peak."""
        assert area_centroid(strengths(buy=1.0), output) == pytest.approx(0.5)

    def test_symmetric_union(self, output):
        """Mirror-image shapes balance at zero."""
        assert area_centroid(strengths(sell=0.7, buy=0.7), output) == pytest.approx(0.0, abs=1e-12)

    def test_clipping_shifts_centroid(self, output):
        """A weaker term pulls the centroid less."""
        score = area_centroid(strengths(sell=0.2, buy=0.8), output)
        assert 0.0 < score < 0.5

    def test_no_area_uses_point_centroid(self):
        """A shape invisible at the sampling resolution falls back to values."""
        narrow = OutputVariable.from_config(
            OutputConfig.model_validate(
                {
                    "terms": {
                        "buy": {
                            "value": 0.3,
                            "membership": {"type": "triangular", "parameters": [0.01, 0.02, 0.03]},
                        }
                    }
                }
            )
        )
        assert area_centroid({"buy": 1.0}, narrow, resolution=11) == 0.3


class TestDefuzzify:
    """Tests for the defuzzify dispatcher."""

    def test_every_method_registered(self):
        """Each configured method has an implementation."""
        assert set(DEFUZZIFIERS) == set(DefuzzificationMethod)

    def test_no_active_terms(self, output):
        """Without any strength the neutral score is returned."""
        for method in DefuzzificationMethod:
            assert defuzzify(strengths(), output, method) == 0.0

    @pytest.mark.parametrize("method", list(DefuzzificationMethod))
    def test_within_range(self, output, method):
        """Every method stays within the output range."""
        score = defuzzify(strengths(strong_sell=0.3, buy=0.9, strong_buy=0.1), output, method)
        assert -1.0 <= score <= 1.0
