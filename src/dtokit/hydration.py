"""Hydration — turn a validated value set into a DTO instance.

Each validated key is matched to its field record by input name, then:

- nested DTO fields are constructed recursively from the value mapping;
- DTO collection fields construct every element, preserving order;
- everything else is assigned unchanged.

INVARIANT: Only values that already passed validation reach this module.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from dtokit.domain.errors import (
    MetadataLookupError,
    SchemaConfigurationError,
    ValidationError,
)
from dtokit.domain.signatures import FieldShape
from dtokit.registry import dto_identifier, resolve_dto

if TYPE_CHECKING:
    from dtokit.domain.fields import FieldMeta
    from dtokit.dto import BaseDto
    from dtokit.validation.protocol import Validator

logger = logging.getLogger(__name__)

D = TypeVar("D", bound="BaseDto")


def hydrate(
    dto_cls: type[D],
    validated: Mapping[str, Any],
    fields: Sequence[FieldMeta],
    *,
    validator: Validator | None = None,
) -> D:
    """Build an instance of *dto_cls* from *validated* values.

    Raises:
        MetadataLookupError: A validated key has no field record.
        SchemaConfigurationError: A collection field names a non-DTO class.
    """
    by_input = {meta.input_name: meta for meta in fields}
    instance = dto_cls.__new__(dto_cls)
    assigned: set[str] = set()

    for key, value in validated.items():
        meta = by_input.get(key)
        if meta is None:
            msg = f"No field metadata for input key {key!r} on {dto_identifier(dto_cls)}"
            raise MetadataLookupError(msg)
        object.__setattr__(instance, meta.name, _hydrate_value(dto_cls, meta, value, validator))
        assigned.add(meta.name)

    # Validators may omit absent optional keys; those fields stay None.
    for meta in fields:
        if meta.name not in assigned:
            object.__setattr__(instance, meta.name, _hydrate_value(dto_cls, meta, None, validator))

    return instance


def _hydrate_value(
    owner: type,
    meta: FieldMeta,
    value: Any,
    validator: Validator | None,
) -> Any:
    if meta.shape is FieldShape.NESTED_DTO:
        if value is None:
            return None
        nested_cls = _require_dto(owner, meta)
        return nested_cls.create(value, validator=validator)

    if meta.shape is FieldShape.DTO_COLLECTION:
        item_cls = _require_dto(owner, meta)
        if value is None:
            return None
        if not isinstance(value, (list, tuple)):
            message = f"The {meta.input_name.replace('_', ' ')} must be an array."
            raise ValidationError(dto_identifier(owner), meta.input_name, message)
        logger.debug("Hydrating %d %s item(s) for %s", len(value), meta.ref, meta.name)
        return [item_cls.create(item, validator=validator) for item in value]

    return value


def _require_dto(owner: type, meta: FieldMeta) -> type[BaseDto]:
    dto_cls = meta.dto_class or resolve_dto(meta.ref or "")
    if dto_cls is None:
        from dtokit.dto import BaseDto

        msg = (
            f"Collection item type should be a subclass of {dto_identifier(BaseDto)}: "
            f"{dto_identifier(owner)}.{meta.name} declares {meta.type!r}"
        )
        raise SchemaConfigurationError(msg, details={"field": meta.name, "type": meta.type})
    return dto_cls
