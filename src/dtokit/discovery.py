"""Field metadata discovery from class annotations.

Reads a DTO class's annotated attributes (base classes first, declaration
order) and turns each one into a :class:`FieldMeta`. The type signature
comes from ``dto_field(type=...)`` when given, otherwise from the
annotation:

    ==========================  ==============================
    annotation                  signature
    ==========================  ==============================
    ``str``                     ``string``
    ``int`` / ``float``         ``int`` / ``float``
    ``bool``                    ``bool``
    ``list`` / ``dict``         ``array``
    ``X | None``                ``?X``
    ``list[str]``               ``array<string>``
    ``list[Address]``           ``Collection<pkg.mod.Address>``
    ``Address``                 ``pkg.mod.Address``
    ``Any``                     ``mixed``
    ==========================  ==============================

When the signature comes from the annotation, nested and collection
shapes are decided from the annotated class objects themselves, so DTOs
declared inside functions hydrate like module-level ones. Attribute names
that collide with the public ``BaseDto`` API are rejected.

A class's metadata never changes, so results are cached per class.
"""

from __future__ import annotations

import threading
import types
import typing
from collections.abc import Sequence
from typing import Any, ClassVar, Union

from pydantic import ValidationError as PydanticValidationError

from dtokit.domain.errors import SchemaConfigurationError
from dtokit.domain.fields import FieldMeta, FieldSpec
from dtokit.domain.signatures import FieldShape, classify
from dtokit.registry import dto_identifier, resolve_dto

_PRIMITIVE_SIGNATURES: dict[Any, str] = {
    str: "string",
    int: "int",
    float: "float",
    bool: "bool",
    list: "array",
    tuple: "array",
    dict: "array",
}

_SEQUENCE_ORIGINS = (list, tuple, Sequence)

_cache: dict[type, tuple[FieldMeta, ...]] = {}
_cache_lock = threading.Lock()


def discover_fields(dto_cls: type) -> tuple[FieldMeta, ...]:
    """Return the ordered field records for *dto_cls* (cached)."""
    cached = _cache.get(dto_cls)
    if cached is not None:
        return cached
    fields = _build_fields(dto_cls)
    with _cache_lock:
        return _cache.setdefault(dto_cls, fields)


def clear_cache() -> None:
    """Forget every cached field collection."""
    with _cache_lock:
        _cache.clear()


def signature_from_annotation(hint: Any) -> str:
    """Translate a resolved annotation into a type signature.

    Raises:
        SchemaConfigurationError: For nested generics or annotations that
            have no signature equivalent.
    """
    origin = typing.get_origin(hint)
    args = typing.get_args(hint)

    if origin in (Union, types.UnionType):
        members = [a for a in args if a is not type(None)]
        parts = [signature_from_annotation(m) for m in members]
        if len(members) == len(args):
            return "|".join(parts)
        if len(parts) == 1:
            return f"?{parts[0]}"
        return "|".join([*parts, "null"])

    if hint is Any:
        return "mixed"
    if hint in _PRIMITIVE_SIGNATURES:
        return _PRIMITIVE_SIGNATURES[hint]

    if origin in _SEQUENCE_ORIGINS:
        if not args or args[0] is Any:
            return "array"
        item = args[0]
        if item in _PRIMITIVE_SIGNATURES:
            return f"array<{_PRIMITIVE_SIGNATURES[item]}>"
        if isinstance(item, type) and typing.get_origin(item) is None:
            return f"Collection<{dto_identifier(item)}>"
        msg = f"Nested generic annotations are not supported: {hint!r}"
        raise SchemaConfigurationError(msg)

    if origin is dict:
        return "array"
    if isinstance(hint, type):
        return dto_identifier(hint)

    msg = f"Annotation {hint!r} has no type signature equivalent"
    raise SchemaConfigurationError(msg)


def shape_from_annotation(hint: Any) -> tuple[FieldShape, str | None, type | None]:
    """Classify *hint* as ``(shape, ref, dto_class)`` from its class objects.

    A sequence of any non-primitive class is a DTO collection; hydration
    rejects the item class later when it is not a DTO.
    """
    from dtokit.dto import BaseDto

    origin = typing.get_origin(hint)
    args = typing.get_args(hint)

    if origin in (Union, types.UnionType):
        members = [a for a in args if a is not type(None)]
        if len(members) != 1:
            return FieldShape.PRIMITIVE, None, None
        return shape_from_annotation(members[0])

    if origin in _SEQUENCE_ORIGINS:
        item = args[0] if args else Any
        if item in _PRIMITIVE_SIGNATURES:
            return FieldShape.PRIMITIVE_ARRAY, _PRIMITIVE_SIGNATURES[item], None
        if item is Any or not isinstance(item, type) or typing.get_origin(item) is not None:
            return FieldShape.PRIMITIVE, None, None
        dto_cls = item if issubclass(item, BaseDto) else None
        return FieldShape.DTO_COLLECTION, dto_identifier(item), dto_cls

    if isinstance(hint, type) and hint is not Any and issubclass(hint, BaseDto):
        return FieldShape.NESTED_DTO, dto_identifier(hint), hint
    return FieldShape.PRIMITIVE, None, None


def _reserved_names() -> frozenset[str]:
    from dtokit.dto import BaseDto

    return frozenset(name for name in dir(BaseDto) if not name.startswith("_"))


def _annotated_attributes(dto_cls: type) -> dict[str, Any]:
    """Resolved annotations, base classes first, ClassVars and privates dropped."""
    try:
        hints = typing.get_type_hints(dto_cls)
    except NameError as exc:
        msg = f"Cannot resolve annotations of {dto_identifier(dto_cls)}: {exc}"
        raise SchemaConfigurationError(msg) from exc
    return {
        name: hint
        for name, hint in hints.items()
        if not name.startswith("_") and typing.get_origin(hint) is not ClassVar
    }


def _build_fields(dto_cls: type) -> tuple[FieldMeta, ...]:
    owner = dto_identifier(dto_cls)
    fields: list[FieldMeta] = []
    seen_inputs: dict[str, str] = {}

    reserved = _reserved_names()

    for name, hint in _annotated_attributes(dto_cls).items():
        if name in reserved:
            msg = f"Field {owner}.{name} shadows the reserved BaseDto attribute {name!r}"
            raise SchemaConfigurationError(msg, details={"field": name})

        spec = getattr(dto_cls, name, None)
        if not isinstance(spec, FieldSpec):
            spec = FieldSpec()

        input_name = spec.input_name if spec.input_name is not None else name
        dto_class: type | None = None
        if spec.type:
            signature = spec.type
            shape, ref = classify(signature, resolve_dto)
        else:
            signature = signature_from_annotation(hint)
            shape, ref, dto_class = shape_from_annotation(hint)

        try:
            meta = FieldMeta(
                name=name,
                input_name=input_name,
                rules=spec.rules,
                type=signature,
                shape=shape,
                ref=ref,
                dto_class=dto_class,
            )
        except PydanticValidationError as exc:
            msg = f"Invalid field declaration {owner}.{name}: {exc.errors()[0]['msg']}"
            raise SchemaConfigurationError(msg) from exc

        if meta.input_name in seen_inputs:
            msg = (
                f"Fields {seen_inputs[meta.input_name]!r} and {name!r} of {owner} "
                f"share the input name {meta.input_name!r}"
            )
            raise SchemaConfigurationError(msg)
        seen_inputs[meta.input_name] = name
        fields.append(meta)

    return tuple(fields)
