"""
Rules Engine - Rule model and pattern matching
==============================================

This module implements the rule record and the matcher that maps
normalized input to at most one rule. Matching is plain case-insensitive
substring containment: the first rule (in collection order) with any
matching pattern wins.
"""

from typing import Optional, Tuple, Dict, Any, Sequence
from dataclasses import dataclass, field

from core.exceptions import MalformedRules

RULE_FIELDS = ("intent", "patterns", "responses")


def normalize(text: str) -> str:
    """
    Normalize raw user input for matching.

    Lowercases the whole string, then trims surrounding whitespace.
    Normalizing an already normalized string returns it unchanged.
    """
    return text.lower().strip()


@dataclass(frozen=True)
class Rule:
    """
    A single intent rule.

    Attributes:
        intent (str): Display label for the rule (not required to be unique)
        patterns (tuple): Substring triggers, checked in declared order
        responses (tuple): Response templates; only the selected one is rendered
    """
    intent: str
    patterns: Tuple[str, ...] = field(default_factory=tuple)
    responses: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Accept lists from callers while keeping the record immutable
        object.__setattr__(self, "patterns", tuple(self.patterns))
        object.__setattr__(self, "responses", tuple(self.responses))

    def matching_pattern(self, normalized_input: str) -> Optional[str]:
        """
        Return the first pattern contained in the input, or None.

        Args:
            normalized_input: Input already passed through normalize()
        """
        for pattern in self.patterns:
            if pattern.lower() in normalized_input:
                return pattern
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert rule to dictionary."""
        return {
            "intent": self.intent,
            "patterns": list(self.patterns),
            "responses": list(self.responses),
        }

    @classmethod
    def from_dict(cls, data: Any, index: Optional[int] = None) -> "Rule":
        """
        Create a rule from a decoded record.

        Args:
            data: Decoded record (expected to be a mapping)
            index: Position of the record in its source, for error details

        Raises:
            MalformedRules: If the record does not have the rule shape
        """
        details = {} if index is None else {"index": index}

        if not isinstance(data, dict):
            raise MalformedRules(
                f"Rule record must be a mapping, got {type(data).__name__}",
                details
            )

        for name in RULE_FIELDS:
            if name not in data:
                raise MalformedRules(
                    f"Rule record is missing field '{name}'",
                    {**details, "field": name}
                )

        intent = data["intent"]
        if not isinstance(intent, str):
            raise MalformedRules(
                "Field 'intent' must be a string",
                {**details, "field": "intent"}
            )

        return cls(
            intent=intent,
            patterns=_string_list(data["patterns"], "patterns", details),
            responses=_string_list(data["responses"], "responses", details),
        )


def _string_list(value: Any, name: str, details: Dict[str, Any]) -> Tuple[str, ...]:
    if not isinstance(value, list):
        raise MalformedRules(
            f"Field '{name}' must be a list of strings",
            {**details, "field": name}
        )
    for position, item in enumerate(value):
        if not isinstance(item, str):
            raise MalformedRules(
                f"Field '{name}' must contain only strings",
                {**details, "field": name, "position": position}
            )
    return tuple(value)


# An ordered, immutable rule set. Replaced as a whole on reload.
RuleCollection = Tuple[Rule, ...]


def match_rule(normalized_input: str, rules: Sequence[Rule]) -> Optional[Rule]:
    """
    Select the rule for a normalized input.

    Rules are scanned in collection order and each rule's patterns in
    declared order. The first rule with a pattern contained in the input
    is returned; later rules are never examined. There is no word-boundary
    check, so "hi" matches "this is great".

    Args:
        normalized_input: Input already passed through normalize()
        rules: Rule collection to scan

    Returns:
        Matching Rule, or None when nothing matches or rules is empty
    """
    for rule in rules:
        if rule.matching_pattern(normalized_input) is not None:
            return rule
    return None
