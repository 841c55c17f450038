"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from dtokit.config.logging import configure_logging


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("dtokit").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False)
        assert logging.getLogger("dtokit").level == logging.WARNING

    def test_json_mode_structlog_event(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("dtokit.services.hydrate").info("hydrate.rejected", field="city")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "hydrate.rejected"
        assert parsed["field"] == "city"
        assert parsed["level"] == "info"
        assert parsed["logger"] == "dtokit.services.hydrate"
        assert "timestamp" in parsed

    def test_stdlib_logger_gets_structured_fields(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("dtokit.dto").debug("Created tests.dtos.Address")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Created tests.dtos.Address"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "dtokit.dto"

    def test_debug_hidden_without_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        logging.getLogger("dtokit.dto").debug("quiet please")
        assert capfd.readouterr().err == ""

    def test_third_party_debug_is_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("pluggy").debug("hook noise")
        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        configure_logging(verbose=True, log_json=False)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1
