"""Subcommand modules for dtokit.

Provides register_commands() which uses deferred imports to keep
``dtokit --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from dtokit.commands.describe import describe
    from dtokit.commands.hydrate import hydrate

    cli.add_command(hydrate)
    cli.add_command(describe)
