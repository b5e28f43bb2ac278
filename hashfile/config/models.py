"""Pydantic models for hashfile configuration."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class OutputMode(str, Enum):
    """Output mode for the CLI."""

    HUMAN = "human"
    JSON = "json"


class LimitsConfig(BaseModel):
    """Limits applied to reads and edit batches."""

    max_file_size: int = Field(default=10 * 1024 * 1024, description="Maximum file size in bytes")
    max_operations: int = Field(default=100, description="Maximum operations per edit batch")


class OutputConfig(BaseModel):
    """Configuration for output formatting."""

    mode: OutputMode = Field(default=OutputMode.HUMAN, description="Output mode")
    colors: bool = Field(default=True, description="Enable colored output")


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="WARNING", description="Log level name")
    file: str = Field(default="", description="Optional log file path")

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


class PathsConfig(BaseModel):
    """Configuration for file paths and permitted roots."""

    cwd: str = Field(default="", validate_default=True, description="Working directory")
    roots: list[str] = Field(
        default=[], description="Permitted root directories (paths or file:// URIs)"
    )
    enforce_roots: bool = Field(default=True, description="Reject paths outside the roots")

    @field_validator("cwd", mode="before")
    @classmethod
    def resolve_cwd(cls, v: str) -> str:
        """Resolve empty cwd to current directory."""
        if not v:
            return os.getcwd()
        return str(Path(v).resolve())


class HashfileConfig(BaseModel):
    """Main configuration for hashfile."""

    encoding: str = Field(default="utf-8", description="Text encoding of edited files")

    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def working_directory(self) -> Path:
        """Get the working directory as a Path object."""
        return Path(self.paths.cwd or os.getcwd())

    def root_entries(self) -> list[str]:
        """Configured roots, falling back to the working directory."""
        return list(self.paths.roots) or [str(self.working_directory)]
