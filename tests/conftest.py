"""Shared fixtures: isolated config directories and a clean settings cache."""

from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from agentforms.config import get_settings


@pytest.fixture
def config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty config directory the loader is pointed at.

    AGENTFORMS_ENV is 'test', so a test.toml written here is layered over
    default.toml.
    """
    path = tmp_path / "config"
    path.mkdir()
    monkeypatch.setenv("AGENTFORMS_CONFIG_DIR", str(path))
    monkeypatch.setenv("AGENTFORMS_ENV", "test")
    return path


@pytest.fixture
def write_config(config_dir: Path) -> Callable[..., None]:
    """Write one TOML file per keyword into config_dir.

    Usage:
        write_config(default="debug = true", test="[turn]\\nhistory_limit = 5")
    """

    def _write(**files: str) -> None:
        for env, content in files.items():
            (config_dir / f"{env}.toml").write_text(content)

    return _write


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
