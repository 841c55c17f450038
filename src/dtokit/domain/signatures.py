"""Type signature classification.

A type signature is the textual form of a field's declared type:

- ``string`` / ``int`` / ``float`` / ``bool`` / ``array``: primitives
- ``?string`` or ``string|null``: nullable
- ``app.dtos.Address``: a reference to another DTO class
- ``array<string>``: an array of a primitive
- ``Collection<app.dtos.Address>``: an ordered collection of DTOs

Generics nest exactly one level. A ``Collection<...>`` argument is an opaque
class identifier (it may contain ``<locals>``); anything it names that is
not a DTO is a schema error, never a silent downgrade.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from enum import StrEnum

_NULLABLE = re.compile(r"^\?|null\||\|null")
_GENERIC_ARGUMENT = re.compile(r"\w+<(.*)>")
_GENERIC_COLLECTION = re.compile(r"Collection<(.+)>")
_GENERIC_ARRAY = re.compile(r"array<([^<>]+)>")

NUMERIC_KINDS = frozenset({"int", "integer", "float", "double"})
STRING_KINDS = frozenset({"string", "str"})
BOOLEAN_KINDS = frozenset({"bool", "boolean"})
PRIMITIVE_KINDS = NUMERIC_KINDS | STRING_KINDS | BOOLEAN_KINDS | {"array", "mixed"}


class FieldShape(StrEnum):
    """How the hydrator treats a field's validated value."""

    PRIMITIVE = "primitive"
    NESTED_DTO = "nested_dto"
    PRIMITIVE_ARRAY = "primitive_array"
    DTO_COLLECTION = "dto_collection"


def is_nullable(signature: str) -> bool:
    """Whether *signature* has a leading ``?`` or a ``null`` union member.

    Examples:
        >>> is_nullable("?string")
        True
        >>> is_nullable("int|null")
        True
        >>> is_nullable("string")
        False
    """
    return _NULLABLE.search(signature) is not None


def strip_nullable(signature: str) -> str:
    """Remove the nullable marker and any ``null`` union member."""
    stripped = signature.strip().removeprefix("?")
    members = [m.strip() for m in stripped.split("|") if m.strip() != "null"]
    return "|".join(members)


def is_generic_collection(signature: str) -> bool:
    """Whether *signature* is exactly ``Collection<...>`` (case-sensitive)."""
    return _GENERIC_COLLECTION.fullmatch(strip_nullable(signature)) is not None


def is_generic_array(signature: str) -> bool:
    """Whether *signature* is exactly ``array<...>``."""
    return _GENERIC_ARRAY.fullmatch(strip_nullable(signature)) is not None


def generic_argument(signature: str) -> str | None:
    """Return the text between ``<`` and its matching ``>``, if any.

    Examples:
        >>> generic_argument("Collection<app.dtos.Address>")
        'app.dtos.Address'
        >>> generic_argument("string") is None
        True
    """
    match = _GENERIC_ARGUMENT.fullmatch(strip_nullable(signature))
    if match is None:
        return None
    return match.group(1).strip()


def scalar_kinds(signature: str) -> frozenset[str]:
    """Primitive kinds named by a non-generic signature.

    Generic signatures never contribute scalar kinds: ``array<int>`` is an
    array, not a number.
    """
    if "<" in signature:
        return frozenset()
    return frozenset(m for m in strip_nullable(signature).split("|") if m)


def classify(
    signature: str,
    resolve: Callable[[str], type | None],
) -> tuple[FieldShape, str | None]:
    """Classify *signature* into a :class:`FieldShape` and its reference.

    *resolve* maps a class identifier to a DTO class, or None when the
    identifier does not name one. A collection argument is kept even when
    it does not resolve; the hydrator reports that as a schema error.
    """
    base = strip_nullable(signature)
    if is_generic_array(base):
        return FieldShape.PRIMITIVE_ARRAY, generic_argument(base)
    if is_generic_collection(base):
        return FieldShape.DTO_COLLECTION, generic_argument(base)
    if base and base not in PRIMITIVE_KINDS and "|" not in base and resolve(base) is not None:
        return FieldShape.NESTED_DTO, base
    return FieldShape.PRIMITIVE, None
