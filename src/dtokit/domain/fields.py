"""Field declarations and the per-field metadata record.

A DTO field is declared with a class annotation and, optionally, a
:func:`dto_field` default carrying the external input key, explicit rules,
and a type signature override::

    class Person(BaseDto):
        first_name: str = dto_field(input_name="firstName", rules="max:255")
        company: str

``company`` maps to the ``company`` input key because ``input_name``
defaults to the attribute name.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

from dtokit.domain.signatures import FieldShape


@dataclass(frozen=True)
class FieldSpec:
    """Declaration-time marker placed as a class attribute by :func:`dto_field`."""

    input_name: str | None = None
    rules: str | None = None
    type: str | None = None


def dto_field(
    *,
    input_name: str | None = None,
    rules: str | None = None,
    type: str | None = None,  # noqa: A002
) -> Any:
    """Declare field metadata for a DTO attribute.

    Args:
        input_name: Key read from the input mapping. Defaults to the
            attribute name.
        rules: Explicit pipe-delimited rule string (e.g. ``"max:255"``).
            Implicit rules derived from the type are appended to it.
        type: Type signature override (e.g. ``"?string"``). Defaults to
            the signature derived from the annotation.
    """
    return FieldSpec(input_name=input_name, rules=rules, type=type)


class FieldMeta(BaseModel):
    """Immutable metadata for one DTO field.

    Attributes:
        name: Attribute name on the DTO instance.
        input_name: Key in the input mapping.
        rules: Explicit rule string, or None.
        type: Type signature text.
        shape: Classification of ``type`` used by the hydrator.
        ref: DTO identifier (nested/collection) or item primitive (arrays).
        dto_class: The nested or item DTO class itself when the annotation
            named one. Left out of dumps.
    """

    model_config = {"frozen": True}

    name: str = Field(min_length=1)
    input_name: str = Field(min_length=1)
    rules: str | None = None
    type: str = Field(min_length=1)
    shape: FieldShape = FieldShape.PRIMITIVE
    ref: str | None = None
    dto_class: Any = Field(default=None, exclude=True, repr=False)
