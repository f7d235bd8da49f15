"""Unit tests for the TOML configuration loader."""

import tomllib
from collections.abc import Callable
from pathlib import Path

import pytest

from agentforms.config.loader import (
    deep_merge,
    get_config_dir,
    get_environment,
    load_config,
    load_toml,
)
from agentforms.config.settings import Settings, set_toml_config


class TestDeepMerge:
    """Tests for deep_merge."""

    def test_nested_sections_merge(self) -> None:
        """Nested tables merge key by key."""
        base = {"admission": {"abuse_action": "reject", "key_prefix": "rl"}, "debug": False}
        override = {"admission": {"abuse_action": "warn"}}
        assert deep_merge(base, override) == {
            "admission": {"abuse_action": "warn", "key_prefix": "rl"},
            "debug": False,
        }

    def test_scalar_replaces_table(self) -> None:
        assert deep_merge({"turn": {"history_limit": 50}}, {"turn": "off"}) == {"turn": "off"}

    def test_inputs_unmodified(self) -> None:
        base = {"a": {"b": 1}}
        override = {"a": {"c": 2}}
        deep_merge(base, override)
        assert base == {"a": {"b": 1}}
        assert override == {"a": {"c": 2}}


class TestLoadToml:
    """Tests for load_toml."""

    def test_valid(self, tmp_path: Path) -> None:
        path = tmp_path / "x.toml"
        path.write_text('[storage]\nbackend = "redis"')
        assert load_toml(path) == {"storage": {"backend": "redis"}}

    def test_missing(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_toml(tmp_path / "missing.toml")

    def test_invalid(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("limits = [unclosed")
        with pytest.raises(tomllib.TOMLDecodeError):
            load_toml(path)


class TestEnvironment:
    """Tests for environment and config directory resolution."""

    def test_environment_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AGENTFORMS_ENV", "production")
        assert get_environment() == "production"

    def test_environment_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("AGENTFORMS_ENV", raising=False)
        assert get_environment() == "development"

    def test_config_dir_from_env(self, config_dir: Path) -> None:
        assert get_config_dir() == config_dir

    def test_config_dir_missing(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AGENTFORMS_CONFIG_DIR", str(tmp_path / "nope"))
        with pytest.raises(FileNotFoundError):
            get_config_dir()


class TestLoadConfig:
    """Tests for load_config."""

    def test_environment_file_overrides_default(
        self, write_config: Callable[..., None]
    ) -> None:
        write_config(
            default="[turn]\nhistory_limit = 50\nmax_message_length = 100",
            test="[turn]\nhistory_limit = 10",
        )
        assert load_config() == {"turn": {"history_limit": 10, "max_message_length": 100}}

    def test_other_environment_files_ignored(
        self, write_config: Callable[..., None]
    ) -> None:
        write_config(default="debug = true", production="debug = false")
        assert load_config() == {"debug": True}

    def test_missing_default_raises(self, config_dir: Path) -> None:
        with pytest.raises(FileNotFoundError, match="default.toml"):
            load_config()

    def test_shipped_default_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The repository's config/default.toml parses into valid settings."""
        config_dir = Path(__file__).resolve().parents[3] / "config"
        monkeypatch.setenv("AGENTFORMS_CONFIG_DIR", str(config_dir))
        monkeypatch.setenv("AGENTFORMS_ENV", "nonexistent")

        set_toml_config(load_config())
        try:
            settings = Settings()
        finally:
            set_toml_config({})

        assert settings.admission.limits["messages"].max_requests == 30
        assert settings.admission.abuse.short_message_length == 3
        assert settings.turn.max_message_length == 10000
