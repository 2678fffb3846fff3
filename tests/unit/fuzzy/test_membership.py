"""
Tests for fuzzy logic membership function implementations.
"""

import math

import numpy as np
import pandas as pd
import pytest

from fuzzysig.errors import ConfigurationError, ErrorCodes
from fuzzysig.fuzzy import (
    GaussianMF,
    MembershipFunctionFactory,
    SigmoidMF,
    TrapezoidalMF,
    TriangularMF,
)

INF = math.inf


class TestTriangularMF:
    """Tests for triangular membership function implementation."""

    def test_valid_initialization(self):
        """Degenerate corners a = b, b = c and a = b = c are allowed."""
        for params in ([0, 50, 100], [0, 0, 100], [0, 100, 100], [50, 50, 50]):
            mf = TriangularMF(params)
            assert [mf.a, mf.b, mf.c] == params

    def test_invalid_initialization(self):
        """Wrong parameter counts and orderings are rejected."""
        with pytest.raises(ConfigurationError, match="requires exactly 3 parameters"):
            TriangularMF([0, 50])

        with pytest.raises(ConfigurationError, match="a <= b <= c") as exc_info:
            TriangularMF([50, 0, 100])
        assert exc_info.value.error_code == ErrorCodes.CONFIG_INVALID_MEMBERSHIP_PARAMETERS

        with pytest.raises(ConfigurationError, match="must be finite"):
            TriangularMF([0, 50, INF])

    def test_exact_control_points(self):
        """Control points return exactly 0 or 1."""
        mf = TriangularMF([0, 50, 100])
        assert mf.evaluate(0) == 0.0
        assert mf.evaluate(50) == 1.0
        assert mf.evaluate(100) == 0.0
        assert mf.evaluate(25) == 0.5
        assert mf.evaluate(75) == 0.5

    def test_out_of_range_clamped(self):
        """Values outside the support read 0, they are never rejected."""
        mf = TriangularMF([0, 50, 100])
        assert mf.evaluate(-1e9) == 0.0
        assert mf.evaluate(1e9) == 0.0

    def test_degenerate_point(self):
        """a = b = c peaks only at that point."""
        mf = TriangularMF([50, 50, 50])
        assert mf.evaluate(50) == 1.0
        assert mf.evaluate(49.999) == 0.0

    def test_left_corner(self):
        """a = b reads 1 at a and falls to c."""
        mf = TriangularMF([0, 0, 100])
        assert mf.evaluate(0) == 1.0
        assert mf.evaluate(50) == 0.5

    def test_vectorized_evaluation(self):
        """Series and arrays evaluate element-wise and keep the index."""
        mf = TriangularMF([0, 50, 100])
        series = pd.Series([0, 25, 50, 75, 100], index=list("abcde"))

        result = mf.evaluate(series)
        assert isinstance(result, pd.Series)
        assert list(result.index) == list("abcde")
        assert result.tolist() == [0.0, 0.5, 1.0, 0.5, 0.0]

        array_result = mf.evaluate(np.array([0.0, 50.0]))
        assert np.array_equal(array_result, [0.0, 1.0])

    def test_nan_propagates(self):
        """NaN inputs give NaN degrees."""
        mf = TriangularMF([0, 50, 100])
        assert math.isnan(mf.evaluate(float("nan")))
        result = mf.evaluate(np.array([50.0, np.nan]))
        assert result[0] == 1.0
        assert math.isnan(result[1])

    def test_unsupported_type(self):
        """Non-numeric inputs raise TypeError."""
        with pytest.raises(TypeError, match="Unsupported input type"):
            TriangularMF([0, 50, 100]).evaluate("50")


class TestTrapezoidalMF:
    """Tests for trapezoidal membership functions and open shoulders."""

    def test_plateau_and_slopes(self):
        """The plateau reads 1, the slopes are linear."""
        mf = TrapezoidalMF([0, 10, 20, 30])
        assert mf.evaluate(0) == 0.0
        assert mf.evaluate(5) == 0.5
        assert mf.evaluate(10) == 1.0
        assert mf.evaluate(20) == 1.0
        assert mf.evaluate(25) == 0.5
        assert mf.evaluate(30) == 0.0

    def test_left_shoulder(self):
        """-inf corners keep the degree at 1 towards -inf."""
        mf = TrapezoidalMF([-INF, -INF, 25, 35])
        assert mf.evaluate(-1e12) == 1.0
        assert mf.evaluate(25) == 1.0
        assert mf.evaluate(30) == 0.5
        assert mf.evaluate(35) == 0.0

    def test_right_shoulder(self):
        """+inf corners keep the degree at 1 towards +inf."""
        mf = TrapezoidalMF([65, 75, INF, INF])
        assert mf.evaluate(65) == 0.0
        assert mf.evaluate(70) == 0.5
        assert mf.evaluate(1e12) == 1.0

    def test_half_open_shoulder_rejected(self):
        """A single infinite corner has no defined slope."""
        with pytest.raises(ConfigurationError, match="shoulders"):
            TrapezoidalMF([-INF, 0, 10, 20])
        with pytest.raises(ConfigurationError, match="shoulders"):
            TrapezoidalMF([0, 10, 20, INF])

    def test_invalid_ordering(self):
        """Parameters must be non-decreasing."""
        with pytest.raises(ConfigurationError, match="a <= b <= c <= d"):
            TrapezoidalMF([0, 20, 10, 30])


class TestGaussianMF:
    """Tests for Gaussian membership functions."""

    def test_peak_and_symmetry(self):
        """Exactly 1 at mu, symmetric around it."""
        mf = GaussianMF([0, 1])
        assert mf.evaluate(0) == 1.0
        assert mf.evaluate(1) == pytest.approx(math.exp(-0.5))
        assert mf.evaluate(-1) == mf.evaluate(1)

    def test_sigma_positive(self):
        """sigma must be positive."""
        with pytest.raises(ConfigurationError, match="sigma"):
            GaussianMF([0, 0])


class TestSigmoidMF:
    """Tests for sigmoid membership functions."""

    def test_center_and_direction(self):
        """Half the height at the center; the slope sign sets the direction."""
        rising = SigmoidMF([0, 8])
        falling = SigmoidMF([0, -8])

        assert rising.evaluate(0) == 0.5
        assert rising.evaluate(1) > 0.99
        assert falling.evaluate(1) < 0.01

    def test_extreme_inputs(self):
        """Overflow in exp still gives degrees in [0, 1]."""
        mf = SigmoidMF([0, 8])
        assert mf.evaluate(-1e6) == 0.0
        assert mf.evaluate(1e6) == 1.0

    def test_zero_slope(self):
        """A zero slope is rejected."""
        with pytest.raises(ConfigurationError, match="slope"):
            SigmoidMF([0, 0])


class TestHeight:
    """Tests for scaled membership functions."""

    def test_peak_equals_height(self):
        """The peak reads ``height`` and every degree scales with it."""
        mf = TriangularMF([0, 50, 100], height=0.8)
        assert mf.evaluate(50) == 0.8
        assert mf.evaluate(25) == pytest.approx(0.4)
        assert mf.evaluate(0) == 0.0

    @pytest.mark.parametrize("height", [0.0, -0.5, 1.5])
    def test_invalid_height(self, height):
        """Heights outside (0, 1] are rejected."""
        with pytest.raises(ConfigurationError, match="height"):
            GaussianMF([0, 1], height=height)


class TestMembershipFunctionFactory:
    """Tests for the membership function factory."""

    def test_create(self):
        """Types resolve case-insensitively and through aliases."""
        assert isinstance(MembershipFunctionFactory.create("Triangular", [0, 1, 2]), TriangularMF)
        assert isinstance(MembershipFunctionFactory.create("trapezoid", [0, 1, 2, 3]), TrapezoidalMF)
        assert isinstance(MembershipFunctionFactory.create("gauss", [0, 1]), GaussianMF)

    def test_unknown_type(self):
        """Unknown shapes are configuration errors."""
        with pytest.raises(ConfigurationError) as exc_info:
            MembershipFunctionFactory.create("bell", [0, 1, 2])
        assert exc_info.value.error_code == ErrorCodes.CONFIG_UNKNOWN_MEMBERSHIP_TYPE

    def test_supported_types(self):
        """Canonical names are listed."""
        assert MembershipFunctionFactory.get_supported_types() == [
            "gaussian",
            "sigmoid",
            "trapezoidal",
            "triangular",
        ]
