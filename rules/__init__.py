"""
Rules Module - Pattern matching and template responses
======================================================

This module provides the rule-based response system:
- Rule records and substring pattern matching
- Loading and hot-reloading rule collections
- Response template rendering
"""

from .engine import Rule, RuleCollection, normalize, match_rule
from .store import RuleStore, load_rules, reload_rules, write_default_rules
from .templates import (
    ResponseRenderer,
    ResponseSelector,
    FirstResponseSelector,
    RandomResponseSelector,
    RoundRobinResponseSelector,
    create_selector,
    format_time,
)

__all__ = [
    "Rule",
    "RuleCollection",
    "normalize",
    "match_rule",
    "RuleStore",
    "load_rules",
    "reload_rules",
    "write_default_rules",
    "ResponseRenderer",
    "ResponseSelector",
    "FirstResponseSelector",
    "RandomResponseSelector",
    "RoundRobinResponseSelector",
    "create_selector",
    "format_time",
]
