"""Read text file tool for hashfile."""

from __future__ import annotations

import time
from typing import Any

from hashfile.core.errors import HashfileError

from .base import BaseTool, ToolMetadata, ToolResult
from .specs import READ_TEXT_FILE_SPEC


class ReadTextFileTool(BaseTool):
    """Tool to read a file as hashline-tagged content."""

    name = "read_text_file"
    description = "Read a file and return hashline-tagged content for reliable editing"

    def execute(self, path: str, **kwargs: Any) -> ToolResult:
        """Read a file and tag every line with its position and hash.

        Args:
            path: Path to the file to read

        Returns:
            ToolResult whose output is the tagged rendering followed by the
            ``total_lines`` / ``file_hash`` trailer
        """
        start_time = time.time()

        try:
            resolved_path = self.resolve_path(path)
            snapshot = self.read_snapshot(resolved_path)
        except HashfileError as e:
            return ToolResult.from_error(e)

        data = {
            "path": str(resolved_path),
            "total_lines": len(snapshot),
            "file_hash": snapshot.file_hash,
        }
        duration_ms = int((time.time() - start_time) * 1000)
        result = ToolResult.ok(snapshot.render(), data=data)
        return result.with_metadata(ToolMetadata(duration_ms=duration_ms, data=data))

    @classmethod
    def get_spec(cls) -> dict[str, Any]:
        """Get the tool specification for the caller."""
        return READ_TEXT_FILE_SPEC
