"""Locate and read ``dtokit.toml``.

Lookup order: the ``DTOKIT_CONFIG`` env var, then a walk up from the
working directory (the way git finds ``.git/``). The CLI's ``--config``
flag bypasses both.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from dtokit.config.models import DtokitConfig
from dtokit.domain.errors import DtoError

CONFIG_FILENAME = "dtokit.toml"
CONFIG_ENV_VAR = "DTOKIT_CONFIG"


class ConfigFileError(DtoError):
    """Raised when dtokit.toml cannot be parsed or holds invalid values."""

    code = "CONFIG_INVALID"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that applies to *start* (default: cwd), or None.

    A ``DTOKIT_CONFIG`` naming a missing file disables discovery.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        candidate = Path(override)
        return candidate if candidate.is_file() else None

    directory = (start or Path.cwd()).resolve()
    for folder in (directory, *directory.parents):
        candidate = folder / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_toml(path: Path) -> dict[str, Any]:
    """Parse *path*, wrapping syntax errors in :class:`ConfigFileError`."""
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigFileError(msg, details={"path": str(path)}) from exc


def load_config(path: Path | None = None, cwd: Path | None = None) -> DtokitConfig:
    """Load the ``[validation]`` and ``[plugins]`` sections.

    Falls back to :func:`find_config` when *path* is None and to code
    defaults when no file exists.
    """
    path = path or find_config(cwd)
    if path is None:
        return DtokitConfig()

    try:
        return DtokitConfig.model_validate(read_toml(path))
    except PydanticValidationError as exc:
        msg = f"Invalid configuration in {path}: {exc.errors()[0]['msg']}"
        raise ConfigFileError(msg, details={"path": str(path)}) from exc
