"""HydrateService — build or describe a DTO named by ``module:Class``.

Translates the construction error kinds into ServiceError codes:

- ``VALIDATION_FAILED``: the payload failed a rule
- ``SCHEMA_CONFIGURATION``: the DTO declarations are invalid
- ``DTO_NOT_FOUND``: the target does not name a DTO class
- ``INVALID_INPUT``: the payload is not a JSON object

``MetadataLookupError`` is an invariant violation and propagates.
"""

from __future__ import annotations

from typing import Any

import structlog

from dtokit.domain.errors import SchemaConfigurationError, ValidationError
from dtokit.registry import dto_identifier
from dtokit.services._helpers import TargetNotFound, load_dto
from dtokit.services.base import BaseService
from dtokit.services.result import ServiceResult

log = structlog.get_logger(__name__)


class HydrateService(BaseService):
    """Service-layer entry points for DTO construction."""

    def hydrate(self, target: str, payload: Any) -> ServiceResult:
        """Validate *payload* and build the DTO named by *target*."""
        op = "hydrate"
        try:
            dto_cls = load_dto(target)
        except TargetNotFound as exc:
            return ServiceResult.failure(op, "DTO_NOT_FOUND", str(exc), target=target)

        if not isinstance(payload, dict):
            return ServiceResult.failure(
                op,
                "INVALID_INPUT",
                f"Input must be a JSON object, got {type(payload).__name__}",
                target=target,
            )

        try:
            instance = dto_cls.create(payload, validator=self._validator)
        except ValidationError as exc:
            log.info("hydrate.rejected", dto=exc.dto_class, field=exc.field)
            return ServiceResult.failure(op, exc.code, exc.message, **exc.details)
        except SchemaConfigurationError as exc:
            log.warning("hydrate.schema_error", dto=target, error=exc.message)
            return ServiceResult.failure(op, exc.code, exc.message, dto=target, **exc.details)

        return ServiceResult(
            ok=True,
            op=op,
            data={"dto": dto_identifier(dto_cls), "instance": instance.to_dict()},
        )

    def describe(self, target: str) -> ServiceResult:
        """Report the field records and composed rule set of *target*."""
        op = "describe"
        try:
            dto_cls = load_dto(target)
            fields = dto_cls.fields()
            rules = dto_cls.rules()
        except TargetNotFound as exc:
            return ServiceResult.failure(op, "DTO_NOT_FOUND", str(exc), target=target)
        except SchemaConfigurationError as exc:
            return ServiceResult.failure(op, exc.code, exc.message, dto=target)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "dto": dto_identifier(dto_cls),
                "fields": [meta.model_dump(mode="json") for meta in fields],
                "rules": rules,
            },
        )
