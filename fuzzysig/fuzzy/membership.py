"""
Membership function definitions for fuzzy logic.

This module defines the abstract base class for membership functions and the
triangular, trapezoidal, Gaussian and sigmoid shapes. Every shape accepts a
``height`` (the degree at its peak, 1.0 by default) and every degree is
clamped to [0, 1].
"""

import math
from abc import ABC, abstractmethod
from typing import Union

import numpy as np
import pandas as pd

from fuzzysig import get_logger
from fuzzysig.core import TypeRegistry
from fuzzysig.errors import ConfigurationError, ErrorCodes

# Set up module-level logger
logger = get_logger(__name__)

MEMBERSHIP_REGISTRY: TypeRegistry["MembershipFunction"] = TypeRegistry(
    "membership function", error_code=ErrorCodes.CONFIG_UNKNOWN_MEMBERSHIP_TYPE
)

Numeric = Union[float, pd.Series, np.ndarray]


def _invalid(message: str, **details) -> ConfigurationError:
    logger.error(f"{message}: {details}")
    return ConfigurationError(
        message=message,
        error_code=ErrorCodes.CONFIG_INVALID_MEMBERSHIP_PARAMETERS,
        details=details,
    )


class MembershipFunction(ABC):
    """
    Abstract base class for fuzzy membership functions.

    Subclasses implement ``_shape``, the unit-height shape over a numpy array.
    ``evaluate`` scales it by ``height``, clamps it to [0, 1] and propagates
    NaN inputs as NaN degrees.
    """

    type_name: str = ""
    parameter_count: int = 0

    def __init__(self, parameters: list[float], height: float = 1.0):
        if len(parameters) != self.parameter_count:
            raise _invalid(
                f"{type(self).__name__} requires exactly {self.parameter_count} parameters",
                expected=self.parameter_count,
                actual=len(parameters),
            )
        if not (0.0 < height <= 1.0):
            raise _invalid(
                "Membership function height must lie in (0, 1]", height=height
            )
        self.parameters = [float(p) for p in parameters]
        self.height = float(height)

    @abstractmethod
    def _shape(self, x: np.ndarray) -> np.ndarray:
        """Unit-height membership degrees for ``x`` (no NaN values)."""

    def evaluate(self, x: Numeric) -> Numeric:
        """
        Evaluate the membership function for given input value(s).

        This method supports scalar values and vectorized inputs (pandas Series
        or numpy arrays).

        Args:
            x: Input value(s) to evaluate

        Returns:
            Membership degree(s) in the range [0, 1]
        """
        if isinstance(x, pd.Series):
            return pd.Series(self._evaluate_array(x.to_numpy(dtype=float)), index=x.index)
        elif isinstance(x, np.ndarray):
            return self._evaluate_array(x.astype(float))
        elif isinstance(x, (int, float, np.number)):
            if math.isnan(x):
                logger.debug(f"NaN value encountered in {type(self).__name__} evaluation")
                return math.nan
            return float(self._evaluate_array(np.array([float(x)]))[0])
        else:
            logger.error(f"Unsupported input type for {type(self).__name__}: {type(x)}")
            raise TypeError(
                f"Unsupported input type: {type(x)}. Expected float, pd.Series, or np.ndarray."
            )

    def __call__(self, x: Numeric) -> Numeric:
        return self.evaluate(x)

    def _evaluate_array(self, x: np.ndarray) -> np.ndarray:
        nan_mask = np.isnan(x)
        result = np.zeros_like(x, dtype=float)
        valid = ~nan_mask
        if valid.any():
            with np.errstate(over="ignore", invalid="ignore"):
                result[valid] = self._shape(x[valid])
        if self.height != 1.0:
            result = result * self.height
        result = np.clip(result, 0.0, 1.0)
        if nan_mask.any():
            logger.warning(f"NaN values encountered in input to {type(self).__name__}")
            result[nan_mask] = np.nan
        return result

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.parameters}, height={self.height})"


@MEMBERSHIP_REGISTRY.registered("triangular", aliases=["triangle"])
class TriangularMF(MembershipFunction):
    """
    Triangular membership function implementation.

    A triangular membership function is defined by three parameters [a, b, c]:
    - a: start point (membership degree = 0)
    - b: peak point (membership degree = height)
    - c: end point (membership degree = 0)

    Special cases:
    - If a = b, the degree is at its peak at x = a and falls linearly to 0 at c
    - If b = c, the degree rises linearly from 0 at a to the peak at c
    - If a = b = c, the degree is at its peak only at that point
    """

    type_name = "triangular"
    parameter_count = 3

    def __init__(self, parameters: list[float], height: float = 1.0):
        super().__init__(parameters, height)
        self.a, self.b, self.c = self.parameters

        if not all(math.isfinite(p) for p in self.parameters):
            raise _invalid(
                "Triangular membership function parameters must be finite",
                parameters=self.parameters,
            )
        if not (self.a <= self.b <= self.c):
            raise _invalid(
                "Triangular membership function parameters must satisfy: a <= b <= c",
                parameters={"a": self.a, "b": self.b, "c": self.c},
            )

        logger.debug(
            f"Initialized triangular MF with parameters: a={self.a}, b={self.b}, c={self.c}"
        )

    def _shape(self, x: np.ndarray) -> np.ndarray:
        result = np.zeros_like(x)

        rising = (x > self.a) & (x < self.b)
        result[rising] = (x[rising] - self.a) / (self.b - self.a)

        falling = (x > self.b) & (x < self.c)
        result[falling] = (self.c - x[falling]) / (self.c - self.b)

        result[x == self.b] = 1.0
        return result


@MEMBERSHIP_REGISTRY.registered("trapezoidal", aliases=["trapezoid"])
class TrapezoidalMF(MembershipFunction):
    """
    Trapezoidal membership function implementation.

    Defined by four parameters [a, b, c, d]: the degree rises from 0 at a to
    the peak at b, stays there until c and falls back to 0 at d. ``a = b =
    -inf`` or ``c = d = inf`` give open shoulders that stay at the peak
    towards the corresponding infinity.
    """

    type_name = "trapezoidal"
    parameter_count = 4

    def __init__(self, parameters: list[float], height: float = 1.0):
        super().__init__(parameters, height)
        self.a, self.b, self.c, self.d = self.parameters

        if any(math.isnan(p) for p in self.parameters):
            raise _invalid(
                "Trapezoidal membership function parameters must not be NaN",
                parameters=self.parameters,
            )
        if not (self.a <= self.b <= self.c <= self.d):
            raise _invalid(
                "Trapezoidal membership function parameters must satisfy: a <= b <= c <= d",
                parameters={"a": self.a, "b": self.b, "c": self.c, "d": self.d},
            )
        if self.b == math.inf or self.c == -math.inf:
            raise _invalid(
                "Trapezoidal membership function plateau must intersect the real line",
                parameters=self.parameters,
            )
        # An infinite slope has no defined degree
        if (self.a == -math.inf) != (self.b == -math.inf) or (self.c == math.inf) != (
            self.d == math.inf
        ):
            raise _invalid(
                "Trapezoidal membership function shoulders must be open on both corners",
                parameters=self.parameters,
            )

        logger.debug(
            f"Initialized trapezoidal MF with parameters: "
            f"a={self.a}, b={self.b}, c={self.c}, d={self.d}"
        )

    def _shape(self, x: np.ndarray) -> np.ndarray:
        result = np.zeros_like(x)

        # Finite slopes only; infinite corners collapse these masks to empty
        rising = (x > self.a) & (x < self.b)
        result[rising] = (x[rising] - self.a) / (self.b - self.a)

        result[(x >= self.b) & (x <= self.c)] = 1.0

        falling = (x > self.c) & (x < self.d)
        result[falling] = (self.d - x[falling]) / (self.d - self.c)
        return result


@MEMBERSHIP_REGISTRY.registered("gaussian", aliases=["gauss"])
class GaussianMF(MembershipFunction):
    """
    Gaussian membership function implementation.

    Defined by two parameters [mu, sigma]; the degree is
    ``exp(-0.5 * ((x - mu) / sigma) ** 2)``, exactly the peak at mu.
    """

    type_name = "gaussian"
    parameter_count = 2

    def __init__(self, parameters: list[float], height: float = 1.0):
        super().__init__(parameters, height)
        self.mu, self.sigma = self.parameters

        if not all(math.isfinite(p) for p in self.parameters):
            raise _invalid(
                "Gaussian membership function parameters must be finite",
                parameters=self.parameters,
            )
        if self.sigma <= 0:
            raise _invalid(
                "Gaussian membership function sigma must be greater than 0",
                sigma=self.sigma,
            )

        logger.debug(f"Initialized Gaussian MF with parameters: mu={self.mu}, sigma={self.sigma}")

    def _shape(self, x: np.ndarray) -> np.ndarray:
        z = (x - self.mu) / self.sigma
        return np.exp(-0.5 * z * z)


@MEMBERSHIP_REGISTRY.registered("sigmoid", aliases=["sigmoidal"])
class SigmoidMF(MembershipFunction):
    """
    Sigmoid membership function implementation.

    Defined by two parameters [center, slope]; the degree is
    ``1 / (1 + exp(-slope * (x - center)))``. A positive slope opens to the
    right, a negative slope to the left. The degree at the center is half the
    height.
    """

    type_name = "sigmoid"
    parameter_count = 2

    def __init__(self, parameters: list[float], height: float = 1.0):
        super().__init__(parameters, height)
        self.center, self.slope = self.parameters

        if not all(math.isfinite(p) for p in self.parameters):
            raise _invalid(
                "Sigmoid membership function parameters must be finite",
                parameters=self.parameters,
            )
        if self.slope == 0:
            raise _invalid("Sigmoid membership function slope must not be 0", slope=self.slope)

        logger.debug(
            f"Initialized sigmoid MF with parameters: center={self.center}, slope={self.slope}"
        )

    def _shape(self, x: np.ndarray) -> np.ndarray:
        return 1.0 / (1.0 + np.exp(-self.slope * (x - self.center)))


class MembershipFunctionFactory:
    """
    Factory class for creating membership function instances.

    Shapes are resolved through ``MEMBERSHIP_REGISTRY`` so the lookup is
    case-insensitive and accepts aliases.
    """

    @staticmethod
    def create(mf_type: str, parameters: list[float], height: float = 1.0) -> MembershipFunction:
        """
        Create a membership function instance based on type and parameters.

        Raises:
            ConfigurationError: If the type is unknown or the parameters invalid
        """
        mf_class = MEMBERSHIP_REGISTRY.get_or_raise(mf_type)
        return mf_class(parameters, height=height)

    @staticmethod
    def get_supported_types() -> list[str]:
        """Canonical names of the supported membership function types."""
        return MEMBERSHIP_REGISTRY.list_types()
