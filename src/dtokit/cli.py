"""Root CLI group for dtokit with global flags and command registration."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from dtokit import __version__
from dtokit.commands import register_commands
from dtokit.commands._context import AppContext
from dtokit.config.discovery import ConfigFileError
from dtokit.config.settings import DtokitSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="dtokit")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--app-dir",
    default=".",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory prepended to sys.path before importing targets.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    app_dir: Path,
) -> None:
    """dtokit — build validated DTOs from JSON input."""
    app_path = str(app_dir.resolve())
    if app_path not in sys.path:
        sys.path.insert(0, app_path)

    try:
        settings = DtokitSettings.from_cli(
            config_path=config_path,
            json_output=json_output,
            quiet=quiet,
            verbose=verbose,
            log_json=log_json,
        )
    except ConfigFileError as exc:
        raise click.ClickException(str(exc)) from exc
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
