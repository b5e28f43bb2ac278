"""Configuration for hashfile."""

from hashfile.config.loader import find_config_file, load_config, load_config_from_file
from hashfile.config.models import HashfileConfig, OutputMode

__all__ = [
    "HashfileConfig",
    "OutputMode",
    "find_config_file",
    "load_config",
    "load_config_from_file",
]
