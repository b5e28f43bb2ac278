"""Configuration loader for hashfile."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from hashfile.config.models import HashfileConfig

SECTIONS = ("limits", "paths", "output", "logging")


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        raw_config = tomllib.load(f)

    # TOML structure: [hashfile] for top-level keys, then one table per sub-model
    config_dict: dict[str, Any] = {}
    if "hashfile" in raw_config:
        for key, value in raw_config["hashfile"].items():
            config_dict[key] = value
    for section in SECTIONS:
        if section in raw_config:
            config_dict[section] = dict(raw_config[section])
    return config_dict


def _apply_override(config_dict: dict[str, Any], key: str, value: Any) -> None:
    if "." not in key:
        config_dict[key] = value
        return
    # Handle nested keys like "paths.roots"
    parts = key.split(".")
    current = config_dict
    for part in parts[:-1]:
        if part not in current:
            current[part] = {}
        current = current[part]
    current[parts[-1]] = value


def load_config_from_file(path: Path) -> HashfileConfig:
    """Load configuration from a TOML file.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValueError: If the config file is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    return HashfileConfig(**_read_toml(path))


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[dict[str, Any]] = None,
) -> HashfileConfig:
    """Load configuration with optional overrides.

    Args:
        config_path: Optional path to a TOML config file.
        overrides: Optional dictionary of configuration overrides; dotted keys
            address sub-models (``"output.mode"``).

    Returns:
        HashfileConfig instance.
    """
    config_dict: dict[str, Any] = {}

    if config_path and config_path.exists():
        config_dict = _read_toml(config_path)

    for key, value in (overrides or {}).items():
        _apply_override(config_dict, key, value)

    return HashfileConfig(**config_dict)


def find_config_file() -> Optional[Path]:
    """Find the configuration file in standard locations.

    Searches in order:
    1. ./hashfile.toml
    2. ./.hashfile.toml
    3. ~/.config/hashfile/config.toml

    Returns:
        Path to the config file if found, None otherwise.
    """
    search_paths = [
        Path.cwd() / "hashfile.toml",
        Path.cwd() / ".hashfile.toml",
        Path.home() / ".config" / "hashfile" / "config.toml",
    ]

    for path in search_paths:
        if path.exists():
            return path

    return None
