"""Rule parsing and the built-in rule registry.

Rule strings are pipe-separated segments of the form ``name`` or
``name:arg1,arg2`` (``regex:`` keeps its argument verbatim)::

    "required_with:building_number|max:255|string"

Each rule is a function taking a :class:`RuleContext` and returning an
error message, or None when the value passes. Implicit rules run even
when the value is missing or empty; every other rule is skipped for a
missing key, an empty string, or a ``None`` value on a ``nullable`` field.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any
from urllib.parse import urlparse

from dtokit.domain.errors import SchemaConfigurationError

# Bare primitive names used as per-item rules for ``array<T>`` fields.
RULE_ALIASES: dict[str, str] = {
    "str": "string",
    "int": "integer",
    "float": "numeric",
    "double": "numeric",
    "bool": "boolean",
}

# Flags consumed by the validator itself.
MARKER_RULES = frozenset({"nullable", "sometimes", "bail", "mixed"})

_NUMERIC = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")
_INTEGER = re.compile(r"^\s*[+-]?\d+\s*$")
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_ALPHA_DASH = re.compile(r"^[\w-]+$")
_REGEX_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL, "x": re.VERBOSE}


@dataclass(frozen=True)
class RuleContext:
    """Everything a rule needs to judge one value.

    Attributes:
        attribute: Input key being validated (``groups.0`` for array items).
        value: Normalized value under test.
        params: Rule arguments from the rule string.
        present: Whether the key exists in the input.
        data: The whole normalized input mapping.
        rule_names: Names of every rule on this attribute.
    """

    attribute: str
    value: Any
    params: tuple[str, ...] = ()
    present: bool = True
    data: Mapping[str, Any] | None = None
    rule_names: frozenset[str] = frozenset()

    @property
    def label(self) -> str:
        return humanize(self.attribute)

    def other(self, key: str) -> Any:
        return (self.data or {}).get(key)


RuleFunc = Callable[[RuleContext], str | None]


@dataclass(frozen=True)
class Rule:
    """A registered rule."""

    name: str
    check: RuleFunc
    implicit: bool = False


def humanize(attribute: str) -> str:
    """Display name for *attribute* in messages."""
    return attribute.replace("_", " ")


def parse_rule_string(rules: str) -> list[tuple[str, tuple[str, ...]]]:
    """Split a rule string into ``(name, params)`` pairs.

    Empty segments are ignored, so ``"|required|string"`` and
    ``"max:3|"`` are both well-formed.

    Examples:
        >>> parse_rule_string("|required|in:a,b")
        [('required', ()), ('in', ('a', 'b'))]
        >>> parse_rule_string("int")
        [('integer', ())]
    """
    parsed: list[tuple[str, tuple[str, ...]]] = []
    for segment in rules.split("|"):
        segment = segment.strip()
        if not segment:
            continue
        name, _, raw = segment.partition(":")
        name = name.strip()
        name = RULE_ALIASES.get(name, name)
        if name in ("regex", "not_regex"):
            params: tuple[str, ...] = (raw,) if raw else ()
        else:
            params = tuple(p.strip() for p in raw.split(",")) if raw else ()
        parsed.append((name, params))
    return parsed


# ---------------------------------------------------------------------------
# Value predicates
# ---------------------------------------------------------------------------


def is_empty(value: Any) -> bool:
    """Missing-equivalent: None, blank string, or empty container."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return isinstance(value, str) and _NUMERIC.match(value) is not None


def is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return value.is_integer()
    return isinstance(value, str) and _INTEGER.match(value) is not None


def is_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return True
    if isinstance(value, int) and not isinstance(value, bool):
        return value in (0, 1)
    return isinstance(value, str) and value.lower() in ("0", "1", "true", "false")


def as_text(value: Any) -> str:
    """Text form used when comparing against rule parameters."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def _require_params(ctx: RuleContext, rule: str, count: int) -> None:
    if len(ctx.params) < count:
        msg = f"Rule {rule!r} on {ctx.attribute!r} requires at least {count} parameter(s)"
        raise SchemaConfigurationError(msg)


def _number_param(ctx: RuleContext, rule: str, index: int = 0) -> float:
    _require_params(ctx, rule, index + 1)
    raw = ctx.params[index]
    if not is_numeric(raw):
        msg = f"Rule {rule!r} on {ctx.attribute!r} requires a numeric parameter, got {raw!r}"
        raise SchemaConfigurationError(msg)
    return float(raw)


def _fmt(number: float) -> str:
    return str(int(number)) if float(number).is_integer() else str(number)


def _size_kind(ctx: RuleContext) -> str:
    value = ctx.value
    if isinstance(value, (list, tuple, dict)):
        return "array"
    if ctx.rule_names & {"numeric", "integer"} and is_numeric(value):
        return "numeric"
    if isinstance(value, str):
        return "string"
    if is_numeric(value):
        return "numeric"
    return "string"


def _size_of(ctx: RuleContext) -> float:
    kind = _size_kind(ctx)
    if kind == "array":
        return len(ctx.value)
    if kind == "numeric":
        return float(ctx.value)
    return len(str(ctx.value))


# ---------------------------------------------------------------------------
# Implicit rules
# ---------------------------------------------------------------------------


def _required(ctx: RuleContext) -> str | None:
    if is_empty(ctx.value):
        return f"The {ctx.label} field is required."
    return None


def _required_with(ctx: RuleContext) -> str | None:
    _require_params(ctx, "required_with", 1)
    if any(not is_empty(ctx.other(key)) for key in ctx.params) and is_empty(ctx.value):
        values = " / ".join(humanize(p) for p in ctx.params)
        return f"The {ctx.label} field is required when {values} is present."
    return None


def _required_without(ctx: RuleContext) -> str | None:
    _require_params(ctx, "required_without", 1)
    if any(is_empty(ctx.other(key)) for key in ctx.params) and is_empty(ctx.value):
        values = " / ".join(humanize(p) for p in ctx.params)
        return f"The {ctx.label} field is required when {values} is not present."
    return None


def _required_if(ctx: RuleContext) -> str | None:
    _require_params(ctx, "required_if", 2)
    other, *values = ctx.params
    if as_text(ctx.other(other)) in values and is_empty(ctx.value):
        return (
            f"The {ctx.label} field is required when {humanize(other)} "
            f"is {', '.join(values)}."
        )
    return None


def _required_unless(ctx: RuleContext) -> str | None:
    _require_params(ctx, "required_unless", 2)
    other, *values = ctx.params
    if as_text(ctx.other(other)) not in values and is_empty(ctx.value):
        return (
            f"The {ctx.label} field is required unless {humanize(other)} "
            f"is in {', '.join(values)}."
        )
    return None


def _present(ctx: RuleContext) -> str | None:
    if not ctx.present:
        return f"The {ctx.label} field must be present."
    return None


def _filled(ctx: RuleContext) -> str | None:
    if ctx.present and is_empty(ctx.value):
        return f"The {ctx.label} field must have a value."
    return None


# ---------------------------------------------------------------------------
# Type rules
# ---------------------------------------------------------------------------


def _string(ctx: RuleContext) -> str | None:
    if not isinstance(ctx.value, str):
        return f"The {ctx.label} must be a string."
    return None


def _numeric(ctx: RuleContext) -> str | None:
    if not is_numeric(ctx.value):
        return f"The {ctx.label} must be a number."
    return None


def _integer(ctx: RuleContext) -> str | None:
    if not is_integer(ctx.value):
        return f"The {ctx.label} must be an integer."
    return None


def _boolean(ctx: RuleContext) -> str | None:
    if not is_boolean(ctx.value):
        return f"The {ctx.label} field must be true or false."
    return None


def _array(ctx: RuleContext) -> str | None:
    if not isinstance(ctx.value, (list, tuple, dict)):
        return f"The {ctx.label} must be an array."
    return None


# ---------------------------------------------------------------------------
# Format rules
# ---------------------------------------------------------------------------


def _email(ctx: RuleContext) -> str | None:
    if not isinstance(ctx.value, str) or _EMAIL.match(ctx.value) is None:
        return f"The {ctx.label} must be a valid email address."
    return None


def _url(ctx: RuleContext) -> str | None:
    if isinstance(ctx.value, str):
        parsed = urlparse(ctx.value)
        if parsed.scheme in ("http", "https", "ftp", "ftps") and parsed.netloc:
            return None
    return f"The {ctx.label} format is invalid."


def _uuid(ctx: RuleContext) -> str | None:
    try:
        uuid.UUID(str(ctx.value))
    except ValueError:
        return f"The {ctx.label} must be a valid UUID."
    return None


def _alpha(ctx: RuleContext) -> str | None:
    if not (isinstance(ctx.value, str) and ctx.value.isalpha()):
        return f"The {ctx.label} may only contain letters."
    return None


def _alpha_num(ctx: RuleContext) -> str | None:
    if not (isinstance(ctx.value, str) and ctx.value.isalnum()):
        return f"The {ctx.label} may only contain letters and numbers."
    return None


def _alpha_dash(ctx: RuleContext) -> str | None:
    if not (isinstance(ctx.value, str) and _ALPHA_DASH.match(ctx.value)):
        return f"The {ctx.label} may only contain letters, numbers, dashes and underscores."
    return None


def _date(ctx: RuleContext) -> str | None:
    if isinstance(ctx.value, (date, datetime)):
        return None
    if isinstance(ctx.value, str):
        try:
            datetime.fromisoformat(ctx.value)
        except ValueError:
            pass
        else:
            return None
    return f"The {ctx.label} is not a valid date."


def compile_pattern(raw: str) -> re.Pattern[str]:
    """Compile a ``/pattern/flags`` or bare pattern rule argument."""
    flags = 0
    pattern = raw
    if len(raw) > 1 and raw.startswith("/") and raw.rfind("/") > 0:
        end = raw.rfind("/")
        pattern = raw[1:end]
        for flag in raw[end + 1 :]:
            flags |= _REGEX_FLAGS.get(flag, 0)
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        msg = f"Invalid regex rule argument {raw!r}: {exc}"
        raise SchemaConfigurationError(msg) from exc


def _regex(ctx: RuleContext) -> str | None:
    _require_params(ctx, "regex", 1)
    pattern = compile_pattern(ctx.params[0])
    if not isinstance(ctx.value, (str, int, float)) or pattern.search(str(ctx.value)) is None:
        return f"The {ctx.label} format is invalid."
    return None


def _not_regex(ctx: RuleContext) -> str | None:
    _require_params(ctx, "not_regex", 1)
    pattern = compile_pattern(ctx.params[0])
    if not isinstance(ctx.value, (str, int, float)) or pattern.search(str(ctx.value)) is not None:
        return f"The {ctx.label} format is invalid."
    return None


# ---------------------------------------------------------------------------
# Size rules
# ---------------------------------------------------------------------------

_MIN_MESSAGES = {
    "numeric": "The {label} must be at least {n}.",
    "string": "The {label} must be at least {n} characters.",
    "array": "The {label} must have at least {n} items.",
}
_MAX_MESSAGES = {
    "numeric": "The {label} may not be greater than {n}.",
    "string": "The {label} may not be greater than {n} characters.",
    "array": "The {label} may not have more than {n} items.",
}
_SIZE_MESSAGES = {
    "numeric": "The {label} must be {n}.",
    "string": "The {label} must be {n} characters.",
    "array": "The {label} must contain {n} items.",
}
_BETWEEN_MESSAGES = {
    "numeric": "The {label} must be between {a} and {b}.",
    "string": "The {label} must be between {a} and {b} characters.",
    "array": "The {label} must have between {a} and {b} items.",
}


def _min(ctx: RuleContext) -> str | None:
    bound = _number_param(ctx, "min")
    if _size_of(ctx) < bound:
        return _MIN_MESSAGES[_size_kind(ctx)].format(label=ctx.label, n=_fmt(bound))
    return None


def _max(ctx: RuleContext) -> str | None:
    bound = _number_param(ctx, "max")
    if _size_of(ctx) > bound:
        return _MAX_MESSAGES[_size_kind(ctx)].format(label=ctx.label, n=_fmt(bound))
    return None


def _size(ctx: RuleContext) -> str | None:
    expected = _number_param(ctx, "size")
    if _size_of(ctx) != expected:
        return _SIZE_MESSAGES[_size_kind(ctx)].format(label=ctx.label, n=_fmt(expected))
    return None


def _between(ctx: RuleContext) -> str | None:
    low = _number_param(ctx, "between", 0)
    high = _number_param(ctx, "between", 1)
    if not low <= _size_of(ctx) <= high:
        return _BETWEEN_MESSAGES[_size_kind(ctx)].format(
            label=ctx.label, a=_fmt(low), b=_fmt(high)
        )
    return None


# ---------------------------------------------------------------------------
# Comparison rules
# ---------------------------------------------------------------------------


def _in(ctx: RuleContext) -> str | None:
    values = ctx.value if isinstance(ctx.value, (list, tuple)) else [ctx.value]
    if not all(as_text(v) in ctx.params for v in values):
        return f"The selected {ctx.label} is invalid."
    return None


def _not_in(ctx: RuleContext) -> str | None:
    values = ctx.value if isinstance(ctx.value, (list, tuple)) else [ctx.value]
    if any(as_text(v) in ctx.params for v in values):
        return f"The selected {ctx.label} is invalid."
    return None


def _same(ctx: RuleContext) -> str | None:
    _require_params(ctx, "same", 1)
    if ctx.value != ctx.other(ctx.params[0]):
        return f"The {ctx.label} and {humanize(ctx.params[0])} must match."
    return None


def _different(ctx: RuleContext) -> str | None:
    _require_params(ctx, "different", 1)
    if ctx.value == ctx.other(ctx.params[0]):
        return f"The {ctx.label} and {humanize(ctx.params[0])} must be different."
    return None


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

# Populated by _register_builtin_rules() at module load time.
RULE_REGISTRY: dict[str, Rule] = {}


def _builtin_rules() -> dict[str, Rule]:
    """Return the built-in rule table."""
    implicit = {
        "required": _required,
        "required_with": _required_with,
        "required_without": _required_without,
        "required_if": _required_if,
        "required_unless": _required_unless,
        "present": _present,
        "filled": _filled,
    }
    regular = {
        "string": _string,
        "numeric": _numeric,
        "integer": _integer,
        "boolean": _boolean,
        "array": _array,
        "email": _email,
        "url": _url,
        "uuid": _uuid,
        "alpha": _alpha,
        "alpha_num": _alpha_num,
        "alpha_dash": _alpha_dash,
        "date": _date,
        "regex": _regex,
        "not_regex": _not_regex,
        "min": _min,
        "max": _max,
        "size": _size,
        "between": _between,
        "in": _in,
        "not_in": _not_in,
        "same": _same,
        "different": _different,
    }
    table = {name: Rule(name, check, implicit=True) for name, check in implicit.items()}
    table.update({name: Rule(name, check) for name, check in regular.items()})
    return table


_BUILTIN_NAMES = frozenset(_builtin_rules()) | MARKER_RULES | frozenset(RULE_ALIASES)


def get_rule(name: str) -> Rule:
    """Look up a registered rule.

    Raises:
        SchemaConfigurationError: If no rule is registered under *name*.
    """
    rule = RULE_REGISTRY.get(name)
    if rule is None:
        msg = f"Unknown validation rule {name!r}"
        raise SchemaConfigurationError(msg)
    return rule


def register_rule(name: str, check: RuleFunc, *, implicit: bool = False) -> None:
    """Register a custom rule.

    Built-in names are reserved and cannot be overridden. Registering the
    same function twice under one name is a no-op.
    """
    normalized = name.strip()
    if not normalized or "|" in normalized or ":" in normalized:
        msg = f"Invalid rule name {name!r}"
        raise ValueError(msg)
    if not callable(check):
        msg = f"Rule {normalized!r} must be callable"
        raise TypeError(msg)
    if normalized in _BUILTIN_NAMES:
        msg = f"Rule {normalized!r} conflicts with a built-in rule"
        raise ValueError(msg)

    existing = RULE_REGISTRY.get(normalized)
    if existing is not None and existing.check is not check:
        msg = f"Rule {normalized!r} is already registered"
        raise ValueError(msg)
    RULE_REGISTRY[normalized] = Rule(normalized, check, implicit=implicit)


def unregister_rule(name: str) -> None:
    """Remove a custom rule. Built-in rules cannot be removed."""
    if name in _BUILTIN_NAMES:
        msg = f"Rule {name!r} is built-in"
        raise ValueError(msg)
    RULE_REGISTRY.pop(name, None)


def _register_builtin_rules() -> None:
    """Populate :data:`RULE_REGISTRY` with the built-in rules."""
    RULE_REGISTRY.update(_builtin_rules())


_register_builtin_rules()
