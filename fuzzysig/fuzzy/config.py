"""
Configuration models for fuzzy sets and membership functions.

This module defines Pydantic models for validating the ``fuzzy_sets`` section
of an engine configuration:

    fuzzy_sets:
      rsi_14:
        oversold: {type: trapezoidal, parameters: [-.inf, -.inf, 25, 35]}
        neutral: {type: triangular, parameters: [30, 50, 70]}
      macd:
        output: histogram
        bullish: {type: sigmoid, parameters: [0, 4], height: 0.9}

Every key of a fuzzy set other than ``output`` names a linguistic term.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    RootModel,
    TypeAdapter,
    ValidationError,
    model_validator,
)

from fuzzysig import get_logger
from fuzzysig.errors import ConfigurationError, ErrorCodes
from fuzzysig.fuzzy.membership import (
    MEMBERSHIP_REGISTRY,
    MembershipFunction,
    MembershipFunctionFactory,
)

# Set up module-level logger
logger = get_logger(__name__)


class BaseMFConfig(BaseModel):
    """Fields shared by every membership function configuration."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    parameters: list[float]
    height: float = Field(default=1.0, gt=0.0, le=1.0, description="Degree at the peak")

    @model_validator(mode="after")
    def validate_shape(self) -> "BaseMFConfig":
        """
        Validate the parameters by building the membership function.

        Raises:
            ConfigurationError: If the parameters are invalid for the shape
        """
        self.build()
        logger.debug(f"Validated {self.type} MF parameters: {self.parameters}")
        return self

    def build(self) -> MembershipFunction:
        return MembershipFunctionFactory.create(self.type, self.parameters, self.height)


class TriangularMFConfig(BaseMFConfig):
    """
    Configuration for a triangular membership function.

    Parameters [a, b, c] must be finite and satisfy a <= b <= c.
    """

    type: Literal["triangular"] = "triangular"
    parameters: list[float] = Field(
        ...,
        min_length=3,
        max_length=3,
        description="Three parameters [a, b, c] defining the triangular membership function",
    )


class TrapezoidalMFConfig(BaseMFConfig):
    """
    Configuration for a trapezoidal membership function.

    Parameters [a, b, c, d] must satisfy a <= b <= c <= d. Use ``-.inf`` for
    a and b, or ``.inf`` for c and d, to get an open shoulder.
    """

    type: Literal["trapezoidal"] = "trapezoidal"
    parameters: list[float] = Field(
        ...,
        min_length=4,
        max_length=4,
        description="Four parameters [a, b, c, d] defining the trapezoidal membership function",
    )


class GaussianMFConfig(BaseMFConfig):
    """Configuration for a Gaussian membership function with parameters [mu, sigma]."""

    type: Literal["gaussian"] = "gaussian"
    parameters: list[float] = Field(
        ...,
        min_length=2,
        max_length=2,
        description="Two parameters [mu, sigma] defining the Gaussian membership function",
    )


class SigmoidMFConfig(BaseMFConfig):
    """Configuration for a sigmoid membership function with parameters [center, slope]."""

    type: Literal["sigmoid"] = "sigmoid"
    parameters: list[float] = Field(
        ...,
        min_length=2,
        max_length=2,
        description="Two parameters [center, slope] defining the sigmoid membership function",
    )


# Union type for all membership function configurations with discriminator
MembershipFunctionConfig = Annotated[
    Union[TriangularMFConfig, TrapezoidalMFConfig, GaussianMFConfig, SigmoidMFConfig],
    Field(discriminator="type"),
]

_MF_ADAPTER: TypeAdapter = TypeAdapter(MembershipFunctionConfig)


def parse_membership_function(name: str, value: Any) -> BaseMFConfig:
    """
    Parse one membership function definition.

    Args:
        name: Term name, used in error messages
        value: Raw mapping with ``type``, ``parameters`` and optional ``height``

    Raises:
        ConfigurationError: If the type is unknown or the definition invalid
    """
    if isinstance(value, BaseMFConfig):
        return value
    if not isinstance(value, dict):
        raise ConfigurationError(
            message=f"Membership function for term '{name}' must be a mapping",
            error_code=ErrorCodes.CONFIG_VALIDATION_FAILED,
            details={"term": name, "received": type(value).__name__},
        )

    mf_type = str(value.get("type", ""))
    if mf_type not in MEMBERSHIP_REGISTRY:
        raise ConfigurationError(
            message=f"Unknown membership function type '{mf_type}' for term '{name}'",
            error_code=ErrorCodes.CONFIG_UNKNOWN_MEMBERSHIP_TYPE,
            details={"term": name, "type": mf_type},
            suggestion=f"Use one of: {', '.join(MEMBERSHIP_REGISTRY.list_types())}",
        )

    value = {**value, "type": MEMBERSHIP_REGISTRY.get_or_raise(mf_type).type_name}
    try:
        return _MF_ADAPTER.validate_python(value)
    except ValidationError as e:
        raise ConfigurationError(
            message=f"Invalid membership function for term '{name}'",
            error_code=ErrorCodes.CONFIG_INVALID_MEMBERSHIP_PARAMETERS,
            details={
                "term": name,
                "errors": [
                    {"field": ".".join(map(str, err["loc"])), "message": err["msg"]}
                    for err in e.errors()
                ],
            },
        ) from e


class FuzzySetConfigModel(BaseModel):
    """
    Linguistic terms defined over one indicator.

    ``output`` selects the reading output the terms apply to (the first
    output when omitted); every other key is a term name mapped to its
    membership function.
    """

    output: Optional[str] = Field(
        default=None, description="Indicator output consumed by this variable"
    )

    # Allow extra fields for term names (oversold, neutral, overbought, etc.)
    model_config = ConfigDict(extra="allow")

    @model_validator(mode="after")
    def validate_and_parse_membership_functions(self) -> "FuzzySetConfigModel":
        """
        Validate that at least one term is defined and parse each of them.

        Raises:
            ConfigurationError: If no term is defined or a term is invalid
        """
        extra_fields = self.__pydantic_extra__ or {}

        if not extra_fields:
            raise ConfigurationError(
                message="At least one fuzzy set (membership function) must be defined",
                error_code=ErrorCodes.CONFIG_EMPTY_FUZZY_SET,
                details={},
            )

        for name, value in list(extra_fields.items()):
            extra_fields[name] = parse_membership_function(name, value)

        logger.debug(f"Validated fuzzy terms: {list(extra_fields)}")
        return self

    def get_membership_functions(self) -> dict[str, BaseMFConfig]:
        """Term names mapped to membership function configurations."""
        return dict(self.__pydantic_extra__ or {})


class FuzzyConfigModel(RootModel[dict[str, FuzzySetConfigModel]]):
    """
    Fuzzy sets of every indicator, keyed by indicator identifier.
    """

    @model_validator(mode="after")
    def validate_indicators(self) -> "FuzzyConfigModel":
        if not self.root:
            raise ConfigurationError(
                message="At least one indicator must have fuzzy sets",
                error_code=ErrorCodes.CONFIG_EMPTY_FUZZY_SET,
                details={},
            )
        logger.debug(f"Validated fuzzy indicators: {list(self.root.keys())}")
        return self
