"""Click command class with an ``--examples`` flag.

``--help`` stays short; ``--examples`` prints ready-to-paste invocations
and exits before any argument is required.
"""

from __future__ import annotations

from typing import Any

import click


class DtoCommand(click.Command):
    """Command accepting ``examples=`` text, shown by ``--examples``."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._show_examples,
                    help="Show usage examples.",
                )
            )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or not self.examples:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)
