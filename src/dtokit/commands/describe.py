"""Command: show a DTO's field records and composed rule set."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from dtokit.commands._base import DtoCommand

if TYPE_CHECKING:
    from dtokit.commands._context import AppContext


@click.command(
    cls=DtoCommand,
    examples="""\
  dtokit describe app.dtos:Customer
  dtokit --json describe app.dtos:Address""",
)
@click.argument("target")
@click.pass_obj
def describe(app: AppContext, target: str) -> None:
    """Show the fields and validation rules of TARGET (module:Class)."""
    from dtokit.services.hydrate import HydrateService

    app.emit(HydrateService(app.settings).describe(target))
