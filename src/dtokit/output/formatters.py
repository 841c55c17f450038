"""Human/JSON output helpers.

The CLI renders ServiceResult for humans (key-value text) or machines
(--json). The formatter layer adapts ServiceResult to the requested mode.
"""

from __future__ import annotations

import json as _json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from dtokit.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """Rendering flags taken from the global CLI options."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def _format_data_human(data: dict[str, Any]) -> str:
    """Format result data as indented key-value pairs."""
    lines: list[str] = []
    for key, value in data.items():
        if isinstance(value, (dict, list)):
            lines.append(f"  {key}: {_json.dumps(value, separators=(',', ':'), default=str)}")
        else:
            lines.append(f"  {key}: {value}")
    return "\n".join(lines)


def _format_error_detail(detail: dict[str, Any]) -> str:
    errors = detail.get("errors")
    if not isinstance(errors, dict):
        return ""
    lines = [f"  {key}: {message}" for key, messages in errors.items() for message in messages]
    return "\n".join(lines)


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display.

    * JSON mode: the full result as indented JSON.
    * Quiet mode: the payload only (success) or the message only (failure).
    * Verbose mode: failures also list every collected field error.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)

    if result.ok:
        if settings.quiet:
            return _json.dumps(result.data.get("instance", result.data), default=str)
        parts = [f"OK: {result.op}"]
        if result.data:
            parts.append(_format_data_human(result.data))
        return "\n".join(parts)

    error_msg = result.error.message if result.error else "Unknown error"
    if settings.quiet:
        return error_msg
    lines = [f"ERROR: {result.op} - {error_msg}"]
    if settings.verbose and result.error is not None:
        detail = _format_error_detail(result.error.detail)
        if detail:
            lines.append(detail)
    return "\n".join(lines)
