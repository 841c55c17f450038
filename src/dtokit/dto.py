"""BaseDto — typed data transfer objects built from untrusted input.

Declare fields with annotations (plus :func:`~dtokit.dto_field` where the
input key or rules differ from the defaults), then build instances with
:meth:`BaseDto.create`::

    class Address(BaseDto):
        address_one: str
        building_number: str | None
        floor: str | None = dto_field(rules="required_with:building_number")

    class Customer(BaseDto):
        name: str = dto_field(input_name="full_name")
        addresses: list[Address]

    customer = Customer.create(payload)

If ``create`` returns, every field satisfied its composed rules, and so did
every nested DTO. Otherwise it raises and nothing is returned.

Arrays and collections follow two rules:

1. ``array<T>`` (``list[str]``) takes a primitive ``T``; every item is
   validated against ``T``.
2. ``Collection<T>`` (``list[Address]``) takes a ``BaseDto`` subclass;
   every item is constructed with ``T.create``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Self

from dtokit.discovery import discover_fields
from dtokit.domain.errors import ValidationError
from dtokit.domain.fields import FieldMeta
from dtokit.domain.rules import compose_rules
from dtokit.hydration import hydrate
from dtokit.registry import dto_identifier, register_dto
from dtokit.validation.protocol import Validator
from dtokit.validation.validator import get_default_validator

logger = logging.getLogger(__name__)


class BaseDto:
    """Base class for all DTOs.

    Instances are immutable once ``create`` returns them.
    """

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        register_dto(cls)

    @classmethod
    def create(cls, data: Mapping[str, Any], *, validator: Validator | None = None) -> Self:
        """Validate *data* and build an instance.

        Args:
            data: Input mapping keyed by input names.
            validator: Validation delegate; defaults to the process-wide one.

        Raises:
            ValidationError: *data* failed a rule (first failure reported).
            SchemaConfigurationError: The DTO declarations are invalid.
        """
        owner = dto_identifier(cls)
        fields = discover_fields(cls)
        rules = compose_rules(fields)

        if not isinstance(data, Mapping):
            message = f"The input for {cls.__name__} must be an object."
            logger.debug("Rejected non-mapping input for %s", owner)
            raise ValidationError(owner, "*", message)

        delegate = validator or get_default_validator()
        outcome = delegate.validate(data, rules)
        if not outcome.ok:
            key, messages = next(iter(outcome.errors.items()))
            logger.debug("Validation failed for %s on %r: %s", owner, key, messages[0])
            raise ValidationError(owner, key, messages[0], errors=outcome.errors)

        instance = hydrate(cls, outcome.validated, fields, validator=validator)
        logger.debug("Created %s", owner)
        return instance

    @classmethod
    def fields(cls) -> tuple[FieldMeta, ...]:
        """Field records in declaration order."""
        return discover_fields(cls)

    @classmethod
    def rules(cls) -> dict[str, str]:
        """The composed rule set used to validate input for this class."""
        return compose_rules(discover_fields(cls))

    def to_dict(self, *, by_input: bool = False) -> dict[str, Any]:
        """Convert back to plain data, recursing into nested DTOs.

        Args:
            by_input: Key by input name instead of attribute name.
        """
        result: dict[str, Any] = {}
        for meta in discover_fields(type(self)):
            key = meta.input_name if by_input else meta.name
            result[key] = _plain(getattr(self, meta.name, None), by_input)
        return result

    def __setattr__(self, name: str, value: Any) -> None:
        msg = f"{type(self).__name__} is immutable; cannot set {name!r}"
        raise AttributeError(msg)

    def __delattr__(self, name: str) -> None:
        msg = f"{type(self).__name__} is immutable; cannot delete {name!r}"
        raise AttributeError(msg)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.to_dict() == other.to_dict()  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        values = ", ".join(
            f"{meta.name}={getattr(self, meta.name, None)!r}"
            for meta in discover_fields(type(self))
        )
        return f"{type(self).__name__}({values})"


def _plain(value: Any, by_input: bool) -> Any:
    if isinstance(value, BaseDto):
        return value.to_dict(by_input=by_input)
    if isinstance(value, list):
        return [_plain(item, by_input) for item in value]
    return value
