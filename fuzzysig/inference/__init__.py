"""
Fuzzy inference for fuzzysig.

Rules, the rule base, defuzzification and the inference engine.
"""

from fuzzysig.inference.defuzzify import (
    DEFUZZIFIERS,
    OutputTerm,
    OutputVariable,
    defuzzify,
)
from fuzzysig.inference.engine import (
    InferenceEngine,
    InferenceResult,
    InferenceStage,
    RuleFiringResult,
)
from fuzzysig.inference.rules import (
    Antecedent,
    CompiledAntecedent,
    Operator,
    Rule,
    RuleBase,
    parse_antecedent,
    rule_from_config,
)

__all__ = [
    "Antecedent",
    "CompiledAntecedent",
    "Operator",
    "Rule",
    "RuleBase",
    "parse_antecedent",
    "rule_from_config",
    "OutputTerm",
    "OutputVariable",
    "DEFUZZIFIERS",
    "defuzzify",
    "InferenceEngine",
    "InferenceResult",
    "InferenceStage",
    "RuleFiringResult",
]
