"""Write text file tool for hashfile."""

from __future__ import annotations

import logging
import time
from typing import Any

from hashfile.core.applier import write_atomic
from hashfile.core.errors import HashfileError, IOFailure, InvalidOperation
from hashfile.core.hashline import file_hash

from .base import BaseTool, ToolMetadata, ToolResult
from .specs import WRITE_TEXT_FILE_SPEC

logger = logging.getLogger(__name__)


class WriteTextFileTool(BaseTool):
    """Tool to overwrite a file with new content."""

    name = "write_text_file"
    description = "Write content to a file, creating parent directories if needed"

    def execute(self, path: str, content: str, **kwargs: Any) -> ToolResult:
        """Write content to a file.

        Args:
            path: Path to the file to write
            content: Content to write to the file

        Returns:
            ToolResult with write status and the new ``file_hash``
        """
        start_time = time.time()

        try:
            if not isinstance(content, str):
                raise InvalidOperation("content must be a string")
            resolved_path = self.resolve_path(path)
            try:
                data = content.encode(self.config.encoding)
            except UnicodeEncodeError as e:
                raise IOFailure(f"Cannot encode content as {self.config.encoding}: {e}") from e
            with self.locks.hold(resolved_path):
                try:
                    # Create parent directories if they don't exist
                    resolved_path.parent.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    raise IOFailure(f"Cannot create {resolved_path.parent}: {e}") from e
                write_atomic(resolved_path, data)
        except HashfileError as e:
            return ToolResult.from_error(e)

        new_hash = file_hash(data)
        logger.info("Wrote %d bytes to %s (file_hash %s)", len(data), resolved_path, new_hash)

        duration_ms = int((time.time() - start_time) * 1000)
        result_data = {
            "path": str(resolved_path),
            "size": len(data),
            "file_hash": new_hash,
        }
        metadata = ToolMetadata(
            duration_ms=duration_ms,
            files_modified=[str(resolved_path)],
            data=result_data,
        )
        result = ToolResult.ok(
            f"Successfully wrote {len(data)} bytes to {path} (file_hash: {new_hash})",
            data=result_data,
        )
        return result.with_metadata(metadata)

    @classmethod
    def get_spec(cls) -> dict[str, Any]:
        """Get the tool specification for the caller."""
        return WRITE_TEXT_FILE_SPEC
