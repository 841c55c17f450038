"""Tests for DtokitSettings — unified settings with TOML source."""

from pathlib import Path

import pytest

from dtokit.config.discovery import CONFIG_ENV_VAR, ConfigFileError
from dtokit.config.settings import DtokitSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    for name in ("DTOKIT_VALIDATION__BAIL", "DTOKIT_VERBOSE", "DTOKIT_QUIET"):
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = DtokitSettings.from_cli(start=tmp_path)
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.quiet is False
        assert settings.verbose is False
        assert settings.log_json is False
        assert settings.validation.trim_strings is True
        assert settings.plugins.enabled is True

    def test_frozen(self, tmp_path: Path) -> None:
        settings = DtokitSettings.from_cli(start=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        toml = tmp_path / "dtokit.toml"
        toml.write_text("[validation]\nbail = true\n[plugins]\nenabled = false\n")
        settings = DtokitSettings.from_cli(start=tmp_path)
        assert settings.config_path == toml
        assert settings.validation.bail is True
        assert settings.validation.trim_strings is True
        assert settings.plugins.enabled is False

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text("[validation]\nempty_strings_as_null = false\n")
        settings = DtokitSettings.from_cli(config_path=str(custom), start=tmp_path)
        assert settings.validation.empty_strings_as_null is False
        assert settings.config_path == custom

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigFileError, match="not found"):
            DtokitSettings.from_cli(config_path=str(tmp_path / "nope.toml"))

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "dtokit.toml").write_text("bail = = true\n")
        with pytest.raises(ConfigFileError, match="Invalid TOML"):
            DtokitSettings.from_cli(start=tmp_path)

    def test_invalid_value(self, tmp_path: Path) -> None:
        (tmp_path / "dtokit.toml").write_text('[validation]\nbail = "often"\n')
        with pytest.raises(ConfigFileError, match="Invalid configuration"):
            DtokitSettings.from_cli(start=tmp_path)


class TestPriority:
    def test_cli_flags_override(self, tmp_path: Path) -> None:
        settings = DtokitSettings.from_cli(
            start=tmp_path, json_output=True, quiet=True, verbose=True, log_json=True
        )
        assert settings.json_output is True
        assert settings.quiet is True
        assert settings.verbose is True
        assert settings.log_json is True

    def test_cli_flags_override_toml(self, tmp_path: Path) -> None:
        (tmp_path / "dtokit.toml").write_text("verbose = true\n")
        settings = DtokitSettings.from_cli(start=tmp_path, verbose=False)
        assert settings.verbose is False

    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "dtokit.toml").write_text("[validation]\nbail = false\n")
        monkeypatch.setenv("DTOKIT_VALIDATION__BAIL", "true")
        settings = DtokitSettings.from_cli(start=tmp_path)
        assert settings.validation.bail is True
