"""Shared pytest fixtures for dtokit tests."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from dtokit.validation.validator import set_default_validator


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo handler and level changes made by CLI startup."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    dtokit_level = logging.getLogger("dtokit").level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("dtokit").setLevel(dtokit_level)


@pytest.fixture(autouse=True)
def _reset_default_validator() -> Generator[None]:
    """Restore the built-in default validator after each test."""
    yield
    set_default_validator(None)


@pytest.fixture
def address_payload() -> dict[str, Any]:
    """Minimal valid Address input."""
    return {"address_one": "Main St", "city": "Town", "phone": "+10000000000"}


@pytest.fixture
def write_json(tmp_path: Path):
    """Write a payload to a JSON file and return its path."""

    def _write(payload: Any, name: str = "input.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write
