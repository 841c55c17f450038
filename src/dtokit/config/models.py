"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, dtokit.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- dtokit.toml sections ---


class ValidationConfig(BaseModel):
    """[validation] section."""

    model_config = {"frozen": True}

    trim_strings: bool = True
    empty_strings_as_null: bool = True
    bail: bool = False


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    entry_point_group: str = "dtokit.plugins"


class DtokitConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
