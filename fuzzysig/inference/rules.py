"""
Fuzzy rules and the rule base.

An antecedent is a tree of ``Antecedent`` nodes tagged with an ``Operator``:

- ``TERM``: the degree of one ``(indicator_id, term)`` pair
- ``AND``: minimum of its operands
- ``OR``: maximum of its operands
- ``NOT``: one minus its single operand

Trees are compiled once into a flat postfix program that is evaluated with a
value stack, so evaluating a rule never recurses.

Configuration accepts two spellings:

    # AND over the listed pairs
    when: {rsi_14: oversold, macd: bullish}

    # explicit tree
    if:
      all:
        - {indicator: rsi_14, is: oversold}
        - any:
            - {indicator: macd, is: bullish}
            - not: {indicator: adx, is: weak}
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional, Sequence

from fuzzysig import get_logger
from fuzzysig.config.models import RuleConfig
from fuzzysig.errors import ConfigurationError, ErrorCodes
from fuzzysig.fuzzy.library import FuzzySetLibrary

logger = get_logger(__name__)

DegreeLookup = Callable[[str, str], float]


class Operator(Enum):
    """Antecedent node tags."""

    TERM = "term"
    AND = "and"
    OR = "or"
    NOT = "not"


@dataclass(frozen=True)
class Antecedent:
    """
    Node of an antecedent tree.

    ``TERM`` nodes carry ``indicator_id`` and ``term``; ``AND``/``OR`` nodes
    carry one or more operands; ``NOT`` nodes carry exactly one.
    """

    operator: Operator
    indicator_id: Optional[str] = None
    term: Optional[str] = None
    operands: tuple["Antecedent", ...] = ()

    def __post_init__(self) -> None:
        if self.operator is Operator.TERM:
            if not self.indicator_id or not self.term or self.operands:
                raise ValueError("TERM nodes need an indicator and a term and no operands")
        elif self.operator is Operator.NOT:
            if len(self.operands) != 1:
                raise ValueError("NOT nodes need exactly one operand")
        elif not self.operands:
            raise ValueError(f"{self.operator.name} nodes need at least one operand")

    @classmethod
    def is_(cls, indicator_id: str, term: str) -> "Antecedent":
        return cls(Operator.TERM, indicator_id=indicator_id, term=term)

    @classmethod
    def all_of(cls, *operands: "Antecedent") -> "Antecedent":
        return cls(Operator.AND, operands=tuple(operands))

    @classmethod
    def any_of(cls, *operands: "Antecedent") -> "Antecedent":
        return cls(Operator.OR, operands=tuple(operands))

    @classmethod
    def negate(cls, operand: "Antecedent") -> "Antecedent":
        return cls(Operator.NOT, operands=(operand,))

    def pairs(self) -> Iterator[tuple[str, str]]:
        """Every ``(indicator_id, term)`` pair in the tree, depth first."""
        stack = [self]
        while stack:
            node = stack.pop()
            if node.operator is Operator.TERM:
                yield node.indicator_id, node.term  # type: ignore[misc]
            else:
                stack.extend(reversed(node.operands))

    def compile(self) -> "CompiledAntecedent":
        """Compile the tree into a postfix program."""
        program: list[Instruction] = []
        # Iterative post-order walk: (node, operands_emitted)
        stack: list[tuple[Antecedent, bool]] = [(self, False)]
        while stack:
            node, expanded = stack.pop()
            if node.operator is Operator.TERM:
                program.append(Instruction(Operator.TERM, node.indicator_id, node.term))
            elif expanded:
                program.append(Instruction(node.operator, arity=len(node.operands)))
            else:
                stack.append((node, True))
                stack.extend((operand, False) for operand in reversed(node.operands))
        return CompiledAntecedent(tuple(program))

    def __str__(self) -> str:
        if self.operator is Operator.TERM:
            return f"{self.indicator_id} is {self.term}"
        if self.operator is Operator.NOT:
            return f"not ({self.operands[0]})"
        joiner = f" {self.operator.value} "
        return "(" + joiner.join(str(op) for op in self.operands) + ")"


@dataclass(frozen=True)
class Instruction:
    """One postfix instruction."""

    opcode: Operator
    indicator_id: Optional[str] = None
    term: Optional[str] = None
    arity: int = 0


@dataclass(frozen=True)
class CompiledAntecedent:
    """Postfix program of an antecedent tree."""

    program: tuple[Instruction, ...]

    def evaluate(self, degree_of: DegreeLookup) -> float:
        """
        Evaluate the program.

        Args:
            degree_of: Returns the degree of an ``(indicator_id, term)`` pair

        Returns:
            Antecedent degree in [0, 1]
        """
        stack: list[float] = []
        for instruction in self.program:
            opcode = instruction.opcode
            if opcode is Operator.TERM:
                stack.append(degree_of(instruction.indicator_id, instruction.term))  # type: ignore[arg-type]
            elif opcode is Operator.NOT:
                stack.append(1.0 - stack.pop())
            else:
                operands = stack[-instruction.arity :]
                del stack[-instruction.arity :]
                stack.append(min(operands) if opcode is Operator.AND else max(operands))
        return stack[0]


@dataclass(frozen=True)
class Rule:
    """
    A weighted fuzzy rule: IF antecedent THEN consequent.

    Attributes:
        rule_id: Unique identifier within the rule base
        antecedent: Antecedent tree
        consequent: Output term the rule supports
        weight: Multiplier applied to the antecedent degree, in [0, 1]
    """

    rule_id: str
    antecedent: Antecedent
    consequent: str
    weight: float = 1.0
    description: str = ""
    compiled: CompiledAntecedent = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "compiled", self.antecedent.compile())

    def degree(self, degree_of: DegreeLookup) -> float:
        return self.compiled.evaluate(degree_of)

    def __str__(self) -> str:
        return f"{self.rule_id}: IF {self.antecedent} THEN {self.consequent} (w={self.weight})"


def _invalid_rule(rule_id: str, message: str, **details: Any) -> ConfigurationError:
    return ConfigurationError(
        message=f"Rule '{rule_id}': {message}",
        error_code=ErrorCodes.CONFIG_INVALID_RULE,
        context={"section": f"rules.{rule_id}"},
        details={"rule_id": rule_id, **details},
    )


def parse_antecedent(node: Any, rule_id: str = "<rule>") -> Antecedent:
    """
    Parse an antecedent tree written with ``all``/``any``/``not`` and
    ``{indicator, is}`` leaves.

    Raises:
        ConfigurationError: If the tree is malformed
    """
    if not isinstance(node, Mapping):
        raise _invalid_rule(rule_id, "antecedent nodes must be mappings", node=repr(node))

    keys = set(node)
    if keys == {"indicator", "is"}:
        return Antecedent.is_(str(node["indicator"]), str(node["is"]))
    if len(keys) != 1:
        raise _invalid_rule(rule_id, "cannot interpret antecedent node", keys=sorted(keys))

    (key,) = keys
    value = node[key]
    if key == "not":
        return Antecedent.negate(parse_antecedent(value, rule_id))
    if key in ("all", "any"):
        if not isinstance(value, Sequence) or isinstance(value, str) or not value:
            raise _invalid_rule(rule_id, f"'{key}' needs a non-empty list of nodes")
        operands = tuple(parse_antecedent(child, rule_id) for child in value)
        return Antecedent.all_of(*operands) if key == "all" else Antecedent.any_of(*operands)

    raise _invalid_rule(
        rule_id, f"unknown antecedent operator '{key}'", allowed=["all", "any", "not"]
    )


def rule_from_config(config: RuleConfig) -> Rule:
    """Build a Rule from its configuration form."""
    if config.when is not None:
        leaves = [Antecedent.is_(indicator, term) for indicator, term in config.when.items()]
        antecedent = leaves[0] if len(leaves) == 1 else Antecedent.all_of(*leaves)
    else:
        antecedent = parse_antecedent(config.if_, config.id)
    return Rule(
        rule_id=config.id,
        antecedent=antecedent,
        consequent=config.then,
        weight=config.weight,
        description=config.description,
    )


class RuleBase:
    """
    Ordered, validated collection of rules.

    Validation happens once at construction; a rule base that exists is
    consistent with its fuzzy set library and output terms.
    """

    def __init__(
        self,
        rules: Sequence[Rule],
        output_terms: Iterable[str],
        library: FuzzySetLibrary,
    ):
        self._rules = tuple(rules)
        self._output_terms = tuple(output_terms)
        self._validate(library)
        self._by_id = {rule.rule_id: rule for rule in self._rules}
        logger.info(f"RuleBase loaded with {len(self._rules)} rules")

    @classmethod
    def from_config(
        cls,
        configs: Sequence[RuleConfig],
        output_terms: Iterable[str],
        library: FuzzySetLibrary,
    ) -> "RuleBase":
        return cls([rule_from_config(config) for config in configs], output_terms, library)

    def _validate(self, library: FuzzySetLibrary) -> None:
        """
        Raises:
            ConfigurationError: On duplicate ids, weights outside [0, 1],
                unknown consequents or undefined (indicator, term) pairs
        """
        seen: set[str] = set()
        for rule in self._rules:
            if rule.rule_id in seen:
                raise ConfigurationError(
                    message=f"Duplicate rule id '{rule.rule_id}'",
                    error_code=ErrorCodes.CONFIG_DUPLICATE_RULE,
                    context={"section": "rules"},
                    details={"rule_id": rule.rule_id},
                )
            seen.add(rule.rule_id)

            if not (0.0 <= rule.weight <= 1.0) or math.isnan(rule.weight):
                raise _invalid_rule(rule.rule_id, "weight must lie in [0, 1]", weight=rule.weight)

            if rule.consequent not in self._output_terms:
                raise ConfigurationError(
                    message=f"Rule '{rule.rule_id}' concludes undefined output term '{rule.consequent}'",
                    error_code=ErrorCodes.CONFIG_UNKNOWN_OUTPUT,
                    context={"section": f"rules.{rule.rule_id}"},
                    details={
                        "rule_id": rule.rule_id,
                        "consequent": rule.consequent,
                        "output_terms": list(self._output_terms),
                    },
                )

            for indicator_id, term in rule.antecedent.pairs():
                if indicator_id not in library:
                    raise ConfigurationError(
                        message=f"Rule '{rule.rule_id}' references indicator '{indicator_id}' without fuzzy sets",
                        error_code=ErrorCodes.CONFIG_UNDEFINED_INDICATOR,
                        context={"section": f"rules.{rule.rule_id}"},
                        details={"rule_id": rule.rule_id, "indicator": indicator_id},
                        suggestion=f"Define fuzzy_sets.{indicator_id}",
                    )
                if not library.has_term(indicator_id, term):
                    raise ConfigurationError(
                        message=f"Rule '{rule.rule_id}' references undefined term '{indicator_id}.{term}'",
                        error_code=ErrorCodes.CONFIG_UNDEFINED_TERM,
                        context={"section": f"rules.{rule.rule_id}"},
                        details={
                            "rule_id": rule.rule_id,
                            "indicator": indicator_id,
                            "term": term,
                            "available_terms": library.terms(indicator_id),
                        },
                        suggestion=f"Define the term under fuzzy_sets.{indicator_id}",
                    )

    def referenced_indicators(self) -> list[str]:
        """Indicator ids used by any rule, in first-use order."""
        ordered: dict[str, None] = {}
        for rule in self._rules:
            for indicator_id, _ in rule.antecedent.pairs():
                ordered.setdefault(indicator_id, None)
        return list(ordered)

    def referenced_pairs(self) -> list[tuple[str, str]]:
        ordered: dict[tuple[str, str], None] = {}
        for rule in self._rules:
            for pair in rule.antecedent.pairs():
                ordered.setdefault(pair, None)
        return list(ordered)

    @property
    def output_terms(self) -> tuple[str, ...]:
        return self._output_terms

    def get(self, rule_id: str) -> Rule:
        return self._by_id[rule_id]

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)
