"""Command: validate a JSON document and build a DTO from it."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, TextIO

import click

from dtokit.commands._base import DtoCommand
from dtokit.services.result import ServiceResult

if TYPE_CHECKING:
    from dtokit.commands._context import AppContext


@click.command(
    cls=DtoCommand,
    examples="""\
  dtokit hydrate app.dtos:Customer customer.json
  cat customer.json | dtokit hydrate app.dtos:Customer
  dtokit --json hydrate app.dtos:Customer customer.json
  dtokit -q hydrate app.dtos:Customer customer.json""",
)
@click.argument("target")
@click.argument("input_file", type=click.File("r", encoding="utf-8"), default="-")
@click.pass_obj
def hydrate(app: AppContext, target: str, input_file: TextIO) -> None:
    """Validate INPUT_FILE (JSON, default stdin) against TARGET (module:Class)."""
    from dtokit.services.hydrate import HydrateService

    try:
        payload = json.load(input_file)
    except json.JSONDecodeError as exc:
        app.emit(
            ServiceResult.failure("hydrate", "INVALID_INPUT", f"Invalid JSON input: {exc}")
        )
        return

    app.emit(HydrateService(app.settings).hydrate(target, payload))
