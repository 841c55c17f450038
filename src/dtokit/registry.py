"""DTO class registry.

Every ``BaseDto`` subclass registers itself under its fully-qualified
identifier (``module.QualName``) when the class is created. Type
signatures reference DTOs by that identifier, or by the bare class name
when exactly one registered DTO carries it.
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dtokit.dto import BaseDto

logger = logging.getLogger(__name__)

# Populated by BaseDto.__init_subclass__.
DTO_REGISTRY: dict[str, type[BaseDto]] = {}


def dto_identifier(cls: type) -> str:
    """Fully-qualified identifier used in type signatures."""
    return f"{cls.__module__}.{cls.__qualname__}"


def register_dto(cls: type[BaseDto]) -> None:
    """Register *cls* under its identifier.

    Re-registering the same identifier replaces the previous class, which
    happens when a module is reloaded.
    """
    identifier = dto_identifier(cls)
    existing = DTO_REGISTRY.get(identifier)
    if existing is not None and existing is not cls:
        logger.debug("Replacing registered DTO %s", identifier)
    DTO_REGISTRY[identifier] = cls


def resolve_dto(name: str) -> type[BaseDto] | None:
    """Return the DTO class named by *name*, or None.

    Resolution order: exact identifier, unique bare class name, then an
    import of the module part of a dotted identifier.
    """
    name = name.strip()
    if not name:
        return None

    cls = DTO_REGISTRY.get(name)
    if cls is not None:
        return cls

    matches = [c for c in DTO_REGISTRY.values() if name in (c.__name__, c.__qualname__)]
    if len(matches) == 1:
        return matches[0]

    module_name, _, _attr = name.rpartition(".")
    if not module_name:
        return None
    try:
        importlib.import_module(module_name)
    except ImportError:
        return None
    return DTO_REGISTRY.get(name)
