"""Validation delegate contract.

The construction engine composes rule strings and hands them to a
:class:`Validator` together with the raw input. Any object satisfying the
protocol can replace the built-in :class:`~dtokit.validation.validator.RuleValidator`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field


class ValidationOutcome(BaseModel):
    """Result of validating one input mapping against a rule set.

    Attributes:
        ok: Whether every rule passed.
        validated: Normalized values keyed by input name (only when ``ok``).
        errors: Messages per failing key, in rule set order.
    """

    model_config = {"frozen": True}

    ok: bool
    validated: dict[str, Any] = Field(default_factory=dict)
    errors: dict[str, list[str]] = Field(default_factory=dict)


@runtime_checkable
class Validator(Protocol):
    """Evaluates a rule set against an input mapping."""

    def validate(self, data: Mapping[str, Any], rules: Mapping[str, str]) -> ValidationOutcome:
        """Validate *data* against *rules*.

        On success ``validated`` holds one entry per non-wildcard rule key.
        On failure ``errors`` holds at least one message per failing key.
        """
        ...
