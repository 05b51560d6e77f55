"""Configuration I/O utilities for reading and writing TOML config files.

This module handles serialization/deserialization of RepoStateConfig to/from
TOML format.
"""

import os
import platform
import tomllib  # Built-in Python 3.11+
from pathlib import Path
from typing import Any

import tomli_w

from repostate.domain.config import RepoStateConfig


def get_global_config_path() -> Path:
    """Get the path to the global config file.

    The location is platform-dependent:
    - Linux/macOS: $XDG_CONFIG_HOME/repostate/config.toml or ~/.config/repostate/config.toml
    - Windows: %APPDATA%/repostate/config.toml

    Returns:
        Path to the global config file (may not exist)
    """
    if platform.system() == "Windows":
        appdata = os.environ.get("APPDATA", "")
        if appdata:
            return Path(appdata) / "repostate" / "config.toml"
        return Path.home() / ".config" / "repostate" / "config.toml"
    else:
        xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
        if xdg_config:
            return Path(xdg_config) / "repostate" / "config.toml"
        return Path.home() / ".config" / "repostate" / "config.toml"


def load_config_data(path: Path) -> dict[str, Any]:
    """Load raw TOML data from a config file.

    Args:
        path: Path to config.toml file

    Returns:
        Dictionary with parsed TOML data

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in config file: {e}") from e


def config_to_data(config: RepoStateConfig) -> dict[str, Any]:
    """Convert a RepoStateConfig into TOML-serializable data."""
    return {
        "upstream": {
            "candidates": list(config.upstream.candidates),
            "override": config.upstream.override,
        },
        "watcher": {
            "settle_interval": config.watcher.settle_interval,
        },
    }


def dump_config(config: RepoStateConfig) -> str:
    """Render a config as TOML text."""
    return tomli_w.dumps(config_to_data(config))


def save_config(config: RepoStateConfig, path: Path) -> None:
    """Save configuration to a TOML file.

    Args:
        config: RepoStateConfig to save
        path: Destination path for config.toml
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("wb") as f:
        tomli_w.dump(config_to_data(config), f)
