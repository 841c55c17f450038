"""Implicit rule derivation and rule set composition.

Implicit rules are validation rules applied to a field purely because of
its type signature:

- ``?string`` implies ``nullable|string``
- ``?int`` implies ``nullable|numeric``
- ``string`` implies ``required|string``
- ``array<string>`` implies ``required|array``

Explicit rules always come first in the composed rule string.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from dtokit.domain.fields import FieldMeta
from dtokit.domain.signatures import (
    BOOLEAN_KINDS,
    NUMERIC_KINDS,
    STRING_KINDS,
    generic_argument,
    is_generic_array,
    is_nullable,
    scalar_kinds,
)

RULE_SEPARATOR = "|"
WILDCARD_SUFFIX = ".*"

# Evaluated independently, in this order.
_IMPLICIT_RULES: tuple[tuple[str, Callable[[str], bool]], ...] = (
    ("required", lambda sig: not is_nullable(sig)),
    ("nullable", is_nullable),
    ("numeric", lambda sig: bool(scalar_kinds(sig) & NUMERIC_KINDS)),
    ("string", lambda sig: bool(scalar_kinds(sig) & STRING_KINDS)),
    ("boolean", lambda sig: bool(scalar_kinds(sig) & BOOLEAN_KINDS)),
    ("array", lambda sig: "array" in sig),
)


def derive_implicit_rules(type_signature: str) -> str:
    """Return the pipe-prefixed implicit rules for *type_signature*.

    Examples:
        >>> derive_implicit_rules("?string")
        '|nullable|string'
        >>> derive_implicit_rules("array<int>")
        '|required|array'
        >>> derive_implicit_rules("app.dtos.Address")
        '|required'
    """
    names = [rule for rule, applies in _IMPLICIT_RULES if applies(type_signature)]
    return RULE_SEPARATOR + RULE_SEPARATOR.join(names)


def merge_rules(explicit: str | None, implicit: str) -> str:
    """Concatenate explicit rules with the pipe-prefixed implicit ones."""
    return f"{explicit or ''}{implicit}"


def compose_rules(fields: Iterable[FieldMeta]) -> dict[str, str]:
    """Build the rule set keyed by input name.

    Arrays of primitives also register ``<input_name>.*`` with the item
    primitive name, validated against every element.
    """
    rules: dict[str, str] = {}
    for meta in fields:
        rules[meta.input_name] = merge_rules(meta.rules, derive_implicit_rules(meta.type))
        item = generic_argument(meta.type) if is_generic_array(meta.type) else None
        if item:
            rules[f"{meta.input_name}{WILDCARD_SUFFIX}"] = item
    return rules
