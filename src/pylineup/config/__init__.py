"""Configuration helpers for position classes."""

from .positions import DEFAULT_RULES, PositionRules, load_rules, rules_from_env

__all__ = [
    "DEFAULT_RULES",
    "PositionRules",
    "load_rules",
    "rules_from_env",
]
