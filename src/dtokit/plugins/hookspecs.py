"""Pluggy hook specifications for dtokit extensions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from dtokit.validation.rules import RuleFunc

hookspec = pluggy.HookspecMarker("dtokit")


class DtokitHookSpec:
    """Hook specifications for the dtokit plugin system."""

    @hookspec
    def register_rules(self) -> dict[str, RuleFunc] | None:
        """Return rule name -> check function mappings to extend RULE_REGISTRY."""

    @hookspec
    def register_implicit_rules(self) -> dict[str, RuleFunc] | None:
        """Like ``register_rules``, but the rules also run on missing or empty values."""
