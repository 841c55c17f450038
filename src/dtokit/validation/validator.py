"""Built-in validation delegate.

:class:`RuleValidator` evaluates composed rule sets with the rules in
:mod:`dtokit.validation.rules`. Before rules run, top-level string values
are trimmed and blank strings become ``None`` (both configurable). After
an attribute passes, its value is cast to match its type rules
(``"12"`` becomes ``12`` under ``integer``).

A process-wide default validator backs ``BaseDto.create``; the CLI
replaces it once at startup via :func:`configure`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from contextvars import ContextVar
from typing import Any

from dtokit.config.models import ValidationConfig
from dtokit.domain.rules import WILDCARD_SUFFIX
from dtokit.validation.protocol import ValidationOutcome, Validator
from dtokit.validation.rules import (
    MARKER_RULES,
    RuleContext,
    get_rule,
    is_boolean,
    is_empty,
    is_integer,
    is_numeric,
    parse_rule_string,
)

logger = logging.getLogger(__name__)


class RuleValidator:
    """Evaluates pipe-delimited rule strings against an input mapping."""

    def __init__(self, config: ValidationConfig | None = None) -> None:
        self._config = config or ValidationConfig()

    @property
    def config(self) -> ValidationConfig:
        return self._config

    def validate(self, data: Mapping[str, Any], rules: Mapping[str, str]) -> ValidationOutcome:
        """Validate *data* against *rules*; see :class:`Validator`."""
        normalized = {key: self._normalize(value) for key, value in data.items()}
        validated: dict[str, Any] = {}
        errors: dict[str, list[str]] = {}

        for key, rule_string in rules.items():
            if key.endswith(WILDCARD_SUFFIX):
                parent = key.removesuffix(WILDCARD_SUFFIX)
                items = validated.get(parent, normalized.get(parent))
                if isinstance(items, (list, tuple)):
                    checked = self._validate_items(parent, items, rule_string, normalized, errors)
                    if parent in validated:
                        validated[parent] = checked
                continue

            present = key in data
            value = normalized.get(key)
            messages, value = self._validate_attribute(
                key, value, rule_string, present=present, data=normalized
            )
            if messages:
                errors[key] = messages
            else:
                validated[key] = value

        if errors:
            logger.debug("Validation failed for %d key(s): %s", len(errors), list(errors))
            return ValidationOutcome(ok=False, errors=errors)
        return ValidationOutcome(ok=True, validated=validated)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _normalize(self, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        if self._config.trim_strings:
            value = value.strip()
        if self._config.empty_strings_as_null and value == "":
            return None
        return value

    def _validate_items(
        self,
        parent: str,
        items: list[Any] | tuple[Any, ...],
        rule_string: str,
        data: Mapping[str, Any],
        errors: dict[str, list[str]],
    ) -> list[Any]:
        checked: list[Any] = []
        for index, item in enumerate(items):
            attribute = f"{parent}.{index}"
            messages, value = self._validate_attribute(
                attribute, self._normalize(item), rule_string, present=True, data=data
            )
            if messages:
                errors[attribute] = messages
            checked.append(value)
        return checked

    def _validate_attribute(
        self,
        attribute: str,
        value: Any,
        rule_string: str,
        *,
        present: bool,
        data: Mapping[str, Any],
    ) -> tuple[list[str], Any]:
        """Run every rule on one attribute; return ``(messages, cast_value)``."""
        parsed = parse_rule_string(rule_string)
        names = frozenset(name for name, _ in parsed)

        if "sometimes" in names and not present:
            return [], value

        bail = self._config.bail or "bail" in names
        messages: list[str] = []
        for name, params in parsed:
            if name in MARKER_RULES:
                continue
            rule = get_rule(name)
            if not rule.implicit and not self._is_validatable(value, present, names):
                continue
            ctx = RuleContext(
                attribute=attribute,
                value=value,
                params=params,
                present=present,
                data=data,
                rule_names=names,
            )
            message = rule.check(ctx)
            if message is None:
                continue
            messages.append(message)
            # A failed implicit rule means the value is missing; stop here.
            if bail or rule.implicit:
                break

        if messages:
            return messages, value
        return [], self._cast(value, names)

    @staticmethod
    def _is_validatable(value: Any, present: bool, names: frozenset[str]) -> bool:
        if not present:
            return False
        if value is None and "nullable" in names:
            return False
        return not (isinstance(value, str) and value.strip() == "")

    @staticmethod
    def _cast(value: Any, names: frozenset[str]) -> Any:
        if is_empty(value) or not isinstance(value, (str, int, float)):
            return value
        if "boolean" in names and is_boolean(value):
            if isinstance(value, str):
                return value.lower() in ("1", "true")
            return bool(value)
        if "integer" in names and isinstance(value, str) and is_integer(value):
            return int(value)
        if "numeric" in names and isinstance(value, str) and is_numeric(value):
            number = float(value)
            return int(number) if is_integer(value) else number
        return value


# ---------------------------------------------------------------------------
# Default validator
# ---------------------------------------------------------------------------

_fallback_validator = RuleValidator()
_default_validator: ContextVar[Validator | None] = ContextVar("_default_validator", default=None)


def get_default_validator() -> Validator:
    """The validator ``BaseDto.create`` uses when none is passed."""
    return _default_validator.get() or _fallback_validator


def set_default_validator(validator: Validator | None) -> None:
    """Install *validator* as the default (None restores the built-in one)."""
    _default_validator.set(validator)


def configure(config: ValidationConfig | None = None) -> Validator:
    """Install a :class:`RuleValidator` built from *config* as the default."""
    validator = RuleValidator(config)
    set_default_validator(validator)
    return validator
