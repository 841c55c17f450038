"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Configures logging, loads plugins, installs the
configured default validator, and centralizes result emission
(stdout/stderr routing + exit codes).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click

from dtokit.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from dtokit.config.settings import DtokitSettings
    from dtokit.services.result import ServiceResult

logger = logging.getLogger(__name__)


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: DtokitSettings) -> None:
        self.settings = settings
        self.plugins: list[str] = []

        from dtokit.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        from dtokit.validation.validator import configure

        configure(settings.validation)

        if settings.plugins.enabled:
            from dtokit.plugins.manager import PluginManager

            self.plugins = PluginManager().discover_and_load(
                group=settings.plugins.entry_point_group
            )
            logger.debug("Loaded plugins: %s", self.plugins)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
