"""Layered TOML configuration.

Files are read from the config directory in this order, later files winning
key by key:

    default.toml        shipped defaults, required
    {AGENTFORMS_ENV}.toml   per-environment overrides, optional
"""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR_VAR = "AGENTFORMS_CONFIG_DIR"
ENV_VAR = "AGENTFORMS_ENV"
DEFAULT_ENV = "development"
_SEARCH_DEPTH = 5


def get_config_dir() -> Path:
    """Return the directory holding the TOML files.

    AGENTFORMS_CONFIG_DIR wins when set and must exist. Otherwise the first
    'config/' found from the working directory upwards is used.

    Raises:
        FileNotFoundError: If AGENTFORMS_CONFIG_DIR points nowhere
    """
    explicit = os.environ.get(CONFIG_DIR_VAR)
    if explicit:
        path = Path(explicit)
        if not path.is_dir():
            raise FileNotFoundError(f"{CONFIG_DIR_VAR} does not exist: {explicit}")
        return path

    here = Path.cwd()
    for candidate in [here, *here.parents][:_SEARCH_DEPTH]:
        if (candidate / "config").is_dir():
            return candidate / "config"
    return Path("config")


def get_environment() -> str:
    return os.environ.get(ENV_VAR, DEFAULT_ENV)


def load_toml(file_path: Path) -> dict[str, Any]:
    """Parse one TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the file is not valid TOML
    """
    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return base updated with override; nested tables merge recursively."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_config() -> dict[str, Any]:
    """Read default.toml and layer the environment file over it.

    Raises:
        FileNotFoundError: If default.toml is missing
    """
    config_dir = get_config_dir()
    default_path = config_dir / "default.toml"
    if not default_path.is_file():
        raise FileNotFoundError(
            f"Missing {default_path}; set {CONFIG_DIR_VAR} or create config/default.toml"
        )

    config = load_toml(default_path)
    env_path = config_dir / f"{get_environment()}.toml"
    if env_path.is_file():
        config = deep_merge(config, load_toml(env_path))
    return config
