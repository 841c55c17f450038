"""BaseService — foundation for dtokit services.

Every service receives :class:`DtokitSettings` at construction time and
validates with a :class:`RuleValidator` built from its ``[validation]``
section, so services never depend on the process-wide default validator.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dtokit.validation.validator import RuleValidator

if TYPE_CHECKING:
    from dtokit.config.settings import DtokitSettings
    from dtokit.validation.protocol import Validator


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class HydrateService(BaseService):
            def hydrate(self, target: str, payload: object) -> ServiceResult:
                dto_cls.create(payload, validator=self._validator)
    """

    def __init__(self, settings: DtokitSettings | None = None) -> None:
        if settings is None:
            from dtokit.config.settings import DtokitSettings

            settings = DtokitSettings()
        self._settings = settings
        self._validator: Validator = RuleValidator(settings.validation)

    @property
    def settings(self) -> DtokitSettings:
        return self._settings
