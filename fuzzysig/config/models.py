"""
Pydantic models for configuration validation.

This module defines the structure and validation rules of an engine
configuration file: indicators, fuzzy sets, the output variable, rules,
inference settings and series settings.
"""

from datetime import timedelta
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from fuzzysig import get_logger
from fuzzysig.data.timeframes import parse_interval
from fuzzysig.errors import ConfigurationError, ErrorCodes
from fuzzysig.fuzzy.config import FuzzyConfigModel, MembershipFunctionConfig

logger = get_logger(__name__)


class IndicatorConfig(BaseModel):
    """Configuration for a technical indicator."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., description="Identifier rules and fuzzy sets refer to")
    type: str = Field(..., description="Registered indicator type, e.g. 'rsi'")
    params: dict[str, Any] = Field(
        default_factory=dict, description="Parameters for indicator initialization"
    )

    @field_validator("id", "type")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Indicator id and type cannot be empty")
        return v


class OutputTermConfig(BaseModel):
    """
    One term of the output variable.

    ``value`` is the representative score used by the point-based
    defuzzification methods; ``membership`` is the term's shape over the
    output range, required by ``area_centroid``.
    """

    model_config = ConfigDict(extra="forbid")

    value: float
    membership: Optional[MembershipFunctionConfig] = None


class OutputConfig(BaseModel):
    """The output (signal) variable."""

    model_config = ConfigDict(extra="forbid")

    name: str = "signal"
    range: tuple[float, float] = (-1.0, 1.0)
    terms: dict[str, OutputTermConfig] = Field(..., min_length=1)
    neutral_score: float = 0.0
    neutral_label: str = "neutral"

    @model_validator(mode="after")
    def validate_range(self) -> "OutputConfig":
        low, high = self.range
        if not low < high:
            raise ValueError(f"Output range must be increasing, got {list(self.range)}")
        outside = {
            term: cfg.value
            for term, cfg in self.terms.items()
            if not low <= cfg.value <= high
        }
        if outside:
            raise ValueError(f"Output term values outside range {list(self.range)}: {outside}")
        if not low <= self.neutral_score <= high:
            raise ValueError(
                f"Neutral score {self.neutral_score} outside range {list(self.range)}"
            )
        return self


class DefuzzificationMethod(str, Enum):
    """Supported defuzzification methods."""

    CENTROID = "centroid"
    FIRST_OF_MAXIMA = "first_of_maxima"
    MEAN_OF_MAXIMA = "mean_of_maxima"
    BISECTOR = "bisector"
    AREA_CENTROID = "area_centroid"


class InferenceConfig(BaseModel):
    """Inference settings."""

    model_config = ConfigDict(extra="forbid")

    firing_threshold: float = Field(
        0.0, ge=0.0, lt=1.0, description="A rule fires when its strength exceeds this"
    )
    defuzzification: DefuzzificationMethod = DefuzzificationMethod.CENTROID
    resolution: int = Field(
        201, ge=11, le=100_001, description="Sample count for area_centroid"
    )


class RuleConfig(BaseModel):
    """
    A fuzzy rule as written in configuration.

    The antecedent is either ``when`` (an AND over ``indicator: term`` pairs)
    or ``if`` (an explicit tree of ``all``, ``any``, ``not`` and
    ``{indicator, is}`` nodes).
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    id: str
    when: Optional[dict[str, str]] = None
    if_: Optional[dict[str, Any]] = Field(default=None, alias="if")
    then: str
    weight: float = 1.0
    description: str = ""

    @model_validator(mode="after")
    def validate_antecedent(self) -> "RuleConfig":
        if (self.when is None) == (self.if_ is None):
            raise ValueError(f"Rule '{self.id}' needs exactly one of 'when' or 'if'")
        if self.when is not None and not self.when:
            raise ValueError(f"Rule '{self.id}' has an empty 'when' clause")
        return self


class SeriesConfig(BaseModel):
    """Series settings."""

    model_config = ConfigDict(extra="forbid")

    interval: Optional[str] = Field(
        None, description="Expected bar spacing, enables gap and staleness detection"
    )
    skip_weekends: bool = Field(
        True,
        description="Treat Saturday and Sunday as expected closures for daily or longer intervals",
    )

    @field_validator("interval")
    @classmethod
    def validate_interval(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            parse_interval(v)
        return v

    @property
    def interval_timedelta(self) -> Optional[timedelta]:
        return parse_interval(self.interval) if self.interval is not None else None


class EngineConfig(BaseModel):
    """Root configuration model for a signal engine."""

    model_config = ConfigDict(extra="forbid")

    indicators: list[IndicatorConfig] = Field(..., min_length=1)
    fuzzy_sets: FuzzyConfigModel
    output: OutputConfig
    rules: list[RuleConfig] = Field(..., min_length=1)
    inference: InferenceConfig = Field(default_factory=InferenceConfig)
    series: SeriesConfig = Field(default_factory=SeriesConfig)

    @model_validator(mode="after")
    def validate_indicator_ids(self) -> "EngineConfig":
        """
        Reject duplicate indicator identifiers.

        Raises:
            ConfigurationError: If an identifier is declared twice
        """
        seen: set[str] = set()
        for indicator in self.indicators:
            if indicator.id in seen:
                raise ConfigurationError(
                    message=f"Duplicate indicator id '{indicator.id}'",
                    error_code=ErrorCodes.CONFIG_DUPLICATE_INDICATOR,
                    context={"section": "indicators"},
                    details={"indicator": indicator.id},
                )
            seen.add(indicator.id)
        return self

    @model_validator(mode="after")
    def validate_output_shapes(self) -> "EngineConfig":
        """
        ``area_centroid`` needs a membership function for every output term.

        Raises:
            ConfigurationError: If an output term has no membership function
        """
        if self.inference.defuzzification is not DefuzzificationMethod.AREA_CENTROID:
            return self
        missing = [term for term, cfg in self.output.terms.items() if cfg.membership is None]
        if missing:
            raise ConfigurationError(
                message="area_centroid defuzzification needs a membership function for every output term",
                error_code=ErrorCodes.CONFIG_VALIDATION_FAILED,
                context={"section": "output.terms"},
                details={"terms_without_membership": missing},
                suggestion="Add 'membership: {type: ..., parameters: [...]}' to each output term",
            )
        return self

    def indicator_ids(self) -> list[str]:
        return [indicator.id for indicator in self.indicators]
