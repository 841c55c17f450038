"""Validation layer — the rule-evaluation delegate used by DTO construction.

The construction engine only composes rule strings; everything that knows
what ``required`` or ``max:255`` means lives here.
"""

from dtokit.validation.protocol import ValidationOutcome, Validator
from dtokit.validation.rules import RULE_REGISTRY, RuleContext, register_rule
from dtokit.validation.validator import (
    RuleValidator,
    configure,
    get_default_validator,
    set_default_validator,
)

__all__ = [
    "RULE_REGISTRY",
    "RuleContext",
    "RuleValidator",
    "ValidationOutcome",
    "Validator",
    "configure",
    "get_default_validator",
    "register_rule",
    "set_default_validator",
]
