"""Shared service-layer helper functions."""

from __future__ import annotations

import importlib

from dtokit.dto import BaseDto
from dtokit.registry import dto_identifier


class TargetNotFound(LookupError):
    """A ``module:Class`` target does not name a DTO class."""


def load_dto(target: str) -> type[BaseDto]:
    """Import the DTO class named by *target*.

    Accepts ``package.module:ClassName`` or ``package.module.ClassName``.

    Raises:
        TargetNotFound: If the module cannot be imported or the attribute
            is not a BaseDto subclass.
    """
    if ":" in target:
        module_name, _, attr = target.partition(":")
    else:
        module_name, _, attr = target.rpartition(".")
    if not module_name or not attr:
        msg = f"Expected 'module:Class', got {target!r}"
        raise TargetNotFound(msg)

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        msg = f"Cannot import {module_name!r}: {exc}"
        raise TargetNotFound(msg) from exc

    obj: object = module
    for part in attr.split("."):
        obj = getattr(obj, part, None)
        if obj is None:
            msg = f"{module_name!r} has no attribute {attr!r}"
            raise TargetNotFound(msg)

    if obj is BaseDto:
        msg = f"{target} is BaseDto itself, not a DTO"
        raise TargetNotFound(msg)
    if not isinstance(obj, type) or not issubclass(obj, BaseDto):
        msg = f"{target} is not a {dto_identifier(BaseDto)} subclass"
        raise TargetNotFound(msg)
    return obj
