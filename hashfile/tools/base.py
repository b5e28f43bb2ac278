"""Base tool class for hashfile tools."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from hashfile.config.models import HashfileConfig
from hashfile.core.errors import HashfileError, IOFailure
from hashfile.core.hashline import Snapshot, build_snapshot
from hashfile.core.locks import PathLocks
from hashfile.tools.guards import RootsGuard
from hashfile.utils.files import read_file_bytes, resolve_path


@dataclass
class ToolMetadata:
    """Metadata about a tool execution."""

    duration_ms: int = 0
    files_modified: List[str] = field(default_factory=list)
    data: Optional[Dict[str, Any]] = None


@dataclass
class ToolResult:
    """Result of a tool execution."""

    success: bool
    output: str
    error: Optional[str] = None
    code: Optional[str] = None  # error kind, e.g. "stale_file"
    data: Optional[dict[str, Any]] = None
    metadata: Optional[ToolMetadata] = None

    @classmethod
    def ok(cls, output: str, data: Optional[dict[str, Any]] = None) -> "ToolResult":
        """Create a successful result."""
        return cls(success=True, output=output, data=data)

    @classmethod
    def fail(cls, error: str, output: str = "", code: Optional[str] = None) -> "ToolResult":
        """Create a failed result."""
        return cls(success=False, output=output, error=error, code=code)

    @classmethod
    def from_error(cls, exc: HashfileError) -> "ToolResult":
        return cls.fail(exc.message, code=exc.code)

    def with_metadata(self, metadata: ToolMetadata) -> "ToolResult":
        """Add metadata to this result."""
        self.metadata = metadata
        return self

    def to_message(self) -> str:
        """Convert to the text returned to the caller."""
        if self.success:
            return self.output
        else:
            return f"Error: {self.error}\n{self.output}" if self.output else f"Error: {self.error}"

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"success": self.success, "output": self.output}
        if self.error is not None:
            result["error"] = {"code": self.code, "message": self.error}
        if self.data:
            result["data"] = self.data
        return result


class BaseTool(ABC):
    """Base class for all tools."""

    name: str
    description: str

    def __init__(
        self,
        cwd: Path,
        config: Optional[HashfileConfig] = None,
        guard: Optional[RootsGuard] = None,
        locks: Optional[PathLocks] = None,
    ):
        """Initialize the tool.

        Args:
            cwd: Current working directory for the tool
            config: Shared configuration (defaults to HashfileConfig())
            guard: Path authorization boundary; None disables the check
            locks: Per-path locks shared by every mutating tool
        """
        self.cwd = cwd
        self.config = config or HashfileConfig(paths={"cwd": str(cwd)})
        self.guard = guard
        self.locks = locks or PathLocks()

    @abstractmethod
    def execute(self, **kwargs: Any) -> ToolResult:
        """Execute the tool with the given arguments.

        Args:
            **kwargs: Tool-specific arguments

        Returns:
            ToolResult with success status and output
        """
        pass

    def resolve_path(self, path: str) -> Path:
        """Resolve *path* against the working directory and authorize it.

        Raises:
            PathNotAllowed: If a guard is configured and rejects the path.
        """
        p = resolve_path(path, self.cwd)
        if self.guard is not None:
            return self.guard.require_allowed(p)
        return p.resolve()

    def read_snapshot(self, path: Path) -> Snapshot:
        """Read *path* fresh from storage and build its snapshot."""
        data = read_file_bytes(path, max_size=self.config.limits.max_file_size)
        try:
            return build_snapshot(data, encoding=self.config.encoding)
        except UnicodeDecodeError as e:
            raise IOFailure(f"File is not valid {self.config.encoding} text: {path}") from e

    @classmethod
    def get_spec(cls) -> dict[str, Any]:
        """Get the tool specification for the caller.

        Returns:
            Tool specification dict
        """
        raise NotImplementedError("Subclasses must implement get_spec()")
