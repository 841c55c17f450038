"""Error kinds raised by DTO construction.

Three kinds, all raised to the immediate caller of ``BaseDto.create``:

- :class:`ValidationError`: the input failed one or more composed rules.
  Recoverable by the caller (fix the input and call again).
- :class:`SchemaConfigurationError`: the DTO declarations themselves are
  wrong (for example ``Collection<str>``). Non-recoverable.
- :class:`MetadataLookupError`: a validated key has no field record.
  An invariant violation between rule composition and hydration.

INVARIANT: Construction is all-or-nothing. No partial instance is returned.
"""

from __future__ import annotations

from typing import Any


class DtoError(Exception):
    """Base class for recoverable and configuration errors.

    Args:
        message: Human-readable error message.
        details: Optional machine-readable diagnostic payload.
    """

    code: str = "DTO_ERROR"

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = details or {}

    def __str__(self) -> str:
        return self.message


class ValidationError(DtoError):
    """Raised when input does not satisfy the composed rule set of a DTO.

    Only the first message of the first failing field ends up in the
    error message. Every collected message stays available on ``errors``.
    """

    code = "VALIDATION_FAILED"

    def __init__(
        self,
        dto_class: str,
        field: str,
        first_error: str,
        *,
        errors: dict[str, list[str]] | None = None,
    ) -> None:
        self.dto_class = dto_class
        self.field = field
        self.first_error = first_error
        self.errors: dict[str, list[str]] = errors or {field: [first_error]}
        super().__init__(
            f"Validation for {dto_class} failed. Error: {first_error}",
            details={"dto": dto_class, "field": field, "errors": self.errors},
        )


class SchemaConfigurationError(DtoError):
    """Raised when a DTO declares a field the engine cannot honor."""

    code = "SCHEMA_CONFIGURATION"


class MetadataLookupError(AssertionError):
    """A validated key has no matching field record.

    Unreachable as long as rule composition and hydration consult the
    same field collection.
    """
