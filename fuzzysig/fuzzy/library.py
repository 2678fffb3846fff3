"""
Fuzzy set library.

The FuzzySetLibrary holds the membership functions of every
``(indicator_id, term)`` pair and turns indicator values into membership
degrees. It is built once from configuration and never mutated afterwards,
so it can be shared by concurrent evaluations.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Union

import numpy as np
import pandas as pd

from fuzzysig import get_logger
from fuzzysig.errors import ConfigurationError, ErrorCodes, UnknownIndicator, UnknownTerm
from fuzzysig.fuzzy.config import FuzzyConfigModel, FuzzySetConfigModel
from fuzzysig.fuzzy.membership import MembershipFunction

# Set up module-level logger
logger = get_logger(__name__)


@dataclass(frozen=True)
class FuzzyVariable:
    """
    Linguistic variable over one indicator output.

    Attributes:
        indicator_id: Indicator the variable reads
        output: Reading output consumed, None for the primary output
        terms: Term names mapped to membership functions
    """

    indicator_id: str
    output: Optional[str]
    terms: Mapping[str, MembershipFunction]


@dataclass(frozen=True)
class FuzzyDegree:
    """Membership degree of one indicator value in one term."""

    indicator_id: str
    term: str
    degree: float


class FuzzySetLibrary:
    """
    Named membership functions per indicator and linguistic term.

    Example:
        ```python
        library = FuzzySetLibrary.from_config(config.fuzzy_sets)

        degrees = library.fuzzify("rsi_14", 28.0)
        # {"oversold": 0.7, "neutral": 0.0, "overbought": 0.0}

        library.degree("rsi_14", "oversold", 28.0)  # 0.7
        ```
    """

    def __init__(self, variables: Mapping[str, FuzzyVariable]):
        self._variables = MappingProxyType(dict(variables))
        logger.info(f"FuzzySetLibrary initialized with {len(self._variables)} indicators")

    @classmethod
    def from_config(
        cls, config: Union[FuzzyConfigModel, Mapping[str, FuzzySetConfigModel]]
    ) -> "FuzzySetLibrary":
        """
        Build the library from validated fuzzy set configuration.

        Raises:
            ConfigurationError: If a membership function cannot be built
        """
        fuzzy_sets = config.root if isinstance(config, FuzzyConfigModel) else config
        variables: dict[str, FuzzyVariable] = {}

        for indicator_id, fuzzy_set in fuzzy_sets.items():
            logger.debug(f"Initializing membership functions for indicator: {indicator_id}")
            terms: dict[str, MembershipFunction] = {}
            for term, mf_config in fuzzy_set.get_membership_functions().items():
                try:
                    terms[term] = mf_config.build()
                except ConfigurationError as e:
                    raise ConfigurationError(
                        message=f"Failed to initialize membership function for {indicator_id}.{term}",
                        error_code=e.error_code,
                        context={"section": f"fuzzy_sets.{indicator_id}.{term}"},
                        details={**e.details, "indicator": indicator_id, "term": term},
                    ) from e
            variables[indicator_id] = FuzzyVariable(
                indicator_id=indicator_id,
                output=fuzzy_set.output,
                terms=MappingProxyType(terms),
            )

        return cls(variables)

    def _variable(self, indicator_id: str) -> FuzzyVariable:
        try:
            return self._variables[indicator_id]
        except KeyError:
            logger.error(f"Unknown indicator: {indicator_id}")
            raise UnknownIndicator(
                message=f"No fuzzy sets defined for indicator '{indicator_id}'",
                error_code=ErrorCodes.FUZZY_UNKNOWN_INDICATOR,
                details={
                    "indicator": indicator_id,
                    "available_indicators": list(self._variables),
                },
            ) from None

    @property
    def indicators(self) -> list[str]:
        return list(self._variables)

    def variable(self, indicator_id: str) -> FuzzyVariable:
        return self._variable(indicator_id)

    def terms(self, indicator_id: str) -> list[str]:
        """
        Term names defined for an indicator.

        Raises:
            UnknownIndicator: If the indicator has no fuzzy sets
        """
        return list(self._variable(indicator_id).terms)

    def has_term(self, indicator_id: str, term: str) -> bool:
        variable = self._variables.get(indicator_id)
        return variable is not None and term in variable.terms

    def membership_function(self, indicator_id: str, term: str) -> MembershipFunction:
        """
        Membership function of one term.

        Raises:
            UnknownIndicator: If the indicator has no fuzzy sets
            UnknownTerm: If the term is not defined for the indicator
        """
        variable = self._variable(indicator_id)
        try:
            return variable.terms[term]
        except KeyError:
            raise UnknownTerm(
                message=f"Term '{term}' is not defined for indicator '{indicator_id}'",
                error_code=ErrorCodes.FUZZY_UNKNOWN_TERM,
                details={
                    "indicator": indicator_id,
                    "term": term,
                    "available_terms": list(variable.terms),
                },
            ) from None

    def degree(self, indicator_id: str, term: str, value: float) -> float:
        """Membership degree of ``value`` in one term, within [0, 1]."""
        return float(self.membership_function(indicator_id, term).evaluate(value))

    def fuzzify(
        self, indicator_id: str, value: Union[float, pd.Series, np.ndarray]
    ) -> Union[dict[str, float], pd.DataFrame]:
        """
        Fuzzify indicator values using the configured membership functions.

        Degrees are independent per term and need not sum to 1.

        Args:
            indicator_id: Indicator identifier
            value: Scalar, pandas Series or numpy array of indicator values

        Returns:
            For scalar input: term names mapped to degrees
            For Series/array input: a DataFrame with one ``{indicator}_{term}``
            column per term

        Raises:
            UnknownIndicator: If the indicator has no fuzzy sets
        """
        variable = self._variable(indicator_id)

        if isinstance(value, (pd.Series, np.ndarray)):
            series = value if isinstance(value, pd.Series) else pd.Series(value)
            logger.debug(
                f"Fuzzifying {len(series)} values for indicator {indicator_id}"
            )
            return pd.DataFrame(
                {
                    f"{indicator_id}_{term}": mf.evaluate(series)
                    for term, mf in variable.terms.items()
                },
                index=series.index,
            )

        return {term: float(mf.evaluate(value)) for term, mf in variable.terms.items()}

    def fuzzy_degrees(self, indicator_id: str, value: float) -> list[FuzzyDegree]:
        """Scalar fuzzification as a list of FuzzyDegree records."""
        return [
            FuzzyDegree(indicator_id, term, degree)
            for term, degree in self.fuzzify(indicator_id, value).items()
        ]

    def __contains__(self, indicator_id: str) -> bool:
        return indicator_id in self._variables

    def __len__(self) -> int:
        return len(self._variables)
