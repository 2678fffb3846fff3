"""
Fuzzy logic module for fuzzysig.

This module converts indicator values into fuzzy membership degrees using
configurable membership functions.
"""

from fuzzysig.fuzzy.config import (
    FuzzyConfigModel,
    FuzzySetConfigModel,
    GaussianMFConfig,
    MembershipFunctionConfig,
    SigmoidMFConfig,
    TrapezoidalMFConfig,
    TriangularMFConfig,
)
from fuzzysig.fuzzy.library import FuzzyDegree, FuzzySetLibrary, FuzzyVariable
from fuzzysig.fuzzy.membership import (
    MEMBERSHIP_REGISTRY,
    GaussianMF,
    MembershipFunction,
    MembershipFunctionFactory,
    SigmoidMF,
    TrapezoidalMF,
    TriangularMF,
)

__all__ = [
    "FuzzyConfigModel",
    "FuzzySetConfigModel",
    "MembershipFunctionConfig",
    "TriangularMFConfig",
    "TrapezoidalMFConfig",
    "GaussianMFConfig",
    "SigmoidMFConfig",
    "FuzzySetLibrary",
    "FuzzyVariable",
    "FuzzyDegree",
    "MEMBERSHIP_REGISTRY",
    "MembershipFunction",
    "MembershipFunctionFactory",
    "TriangularMF",
    "TrapezoidalMF",
    "GaussianMF",
    "SigmoidMF",
]
