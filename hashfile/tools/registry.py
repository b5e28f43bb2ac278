"""Tool registry for hashfile - manages and dispatches tool calls."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from hashfile.config.models import HashfileConfig
from hashfile.core.locks import PathLocks
from hashfile.tools.base import BaseTool, ToolResult
from hashfile.tools.edit_file import EditTextFileTool
from hashfile.tools.guards import RootsGuard, RootsProvider
from hashfile.tools.read_file import ReadTextFileTool
from hashfile.tools.specs import get_all_tools, validate_tool_arguments
from hashfile.tools.write_file import WriteTextFileTool

logger = logging.getLogger(__name__)


@dataclass
class ToolStats:
    """Per-tool execution statistics."""

    executions: int = 0
    successes: int = 0
    total_ms: int = 0

    def success_rate(self) -> float:
        """Get the success rate for this tool."""
        if self.executions == 0:
            return 0.0
        return self.successes / self.executions


@dataclass
class ExecutorStats:
    """Aggregate execution statistics."""

    total_executions: int = 0
    successful_executions: int = 0
    failed_executions: int = 0
    total_duration_ms: int = 0
    by_tool: Dict[str, ToolStats] = field(default_factory=dict)

    def success_rate(self) -> float:
        """Get overall success rate."""
        if self.total_executions == 0:
            return 0.0
        return self.successful_executions / self.total_executions


class ToolRegistry:
    """Registry for managing and dispatching tool calls.

    All tools share one roots guard and one set of per-path locks, so edits
    and writes to the same path are serialized no matter which tool runs
    them.
    """

    def __init__(
        self,
        config: Optional[HashfileConfig] = None,
        roots_provider: Optional[RootsProvider] = None,
    ):
        """Initialize the registry.

        Args:
            config: Configuration (optional, uses defaults)
            roots_provider: Callable returning the permitted roots; defaults
                to the roots in *config*
        """
        self.config = config or HashfileConfig()
        self.cwd = self.config.working_directory.resolve()
        self._roots_override: Optional[list[str]] = None
        self.guard = RootsGuard(
            roots_provider or self._configured_roots,
            base=self.cwd,
            enabled=self.config.paths.enforce_roots,
        )
        self.locks = PathLocks()
        self._stats = ExecutorStats()
        self._stats_lock = threading.Lock()
        self._tools: Dict[str, BaseTool] = {}
        for tool_cls in (ReadTextFileTool, EditTextFileTool, WriteTextFileTool):
            self.register(tool_cls(self.cwd, config=self.config, guard=self.guard, locks=self.locks))

    def _configured_roots(self) -> list[str]:
        if self._roots_override is not None:
            return list(self._roots_override)
        return self.config.root_entries()

    # -----------------------------------------------------------------
    # Roots
    # -----------------------------------------------------------------

    def set_roots(self, roots: Iterable[str]) -> None:
        """Replace the permitted roots supplied by the caller."""
        self._roots_override = list(roots)
        self.guard.invalidate()

    def notify_roots_changed(self) -> None:
        """Roots changed on the caller's side; refetch on next use."""
        self.guard.invalidate()

    # -----------------------------------------------------------------
    # Registration and dispatch
    # -----------------------------------------------------------------

    def register(self, tool: BaseTool) -> None:
        self._tools[tool.name] = tool

    def get_tool(self, name: str) -> Optional[BaseTool]:
        return self._tools.get(name)

    @staticmethod
    def get_specs() -> list[dict[str, Any]]:
        return get_all_tools()

    def execute(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        """Execute a tool by name.

        Args:
            name: Tool name
            arguments: Tool arguments

        Returns:
            ToolResult from the tool execution
        """
        start_time = time.time()

        tool = self._tools.get(name)
        if tool is None:
            result = ToolResult.fail(f"Unknown tool: {name}", code="unknown_tool")
        else:
            error = validate_tool_arguments(name, arguments)
            if error:
                result = ToolResult.fail(error, code="invalid_operation")
            else:
                try:
                    result = tool.execute(**arguments)
                except Exception as e:
                    logger.exception("Tool %s failed", name)
                    result = ToolResult.fail(f"Tool {name} failed: {e}", code="internal_error")

        duration_ms = int((time.time() - start_time) * 1000)
        self._record_execution(name, duration_ms, success=result.success)
        return result

    # -----------------------------------------------------------------
    # Stats
    # -----------------------------------------------------------------

    def _record_execution(self, name: str, duration_ms: int, success: bool) -> None:
        with self._stats_lock:
            self._update_stats(name, duration_ms, success)

    def _update_stats(self, name: str, duration_ms: int, success: bool) -> None:
        stats = self._stats
        stats.total_executions += 1
        stats.total_duration_ms += duration_ms
        if success:
            stats.successful_executions += 1
        else:
            stats.failed_executions += 1

        tool_stats = stats.by_tool.setdefault(name, ToolStats())
        tool_stats.executions += 1
        tool_stats.total_ms += duration_ms
        if success:
            tool_stats.successes += 1

    def get_stats(self) -> ExecutorStats:
        """Get execution statistics."""
        return self._stats

    # Convenience wrappers

    def read(self, path: str | Path) -> ToolResult:
        return self.execute("read_text_file", {"path": str(path)})

    def edit(self, path: str | Path, file_hash: str, operations: list[dict[str, Any]]) -> ToolResult:
        return self.execute(
            "edit_text_file",
            {"path": str(path), "file_hash": file_hash, "operations": operations},
        )

    def write(self, path: str | Path, content: str) -> ToolResult:
        return self.execute("write_text_file", {"path": str(path), "content": content})
