"""Edit text file tool for hashfile - hash-anchored batch edits."""

from __future__ import annotations

import logging
import time
from typing import Any

from hashfile.core.applier import commit
from hashfile.core.errors import HashfileError, InvalidOperation, StaleFile
from hashfile.core.planner import plan_edits

from .base import BaseTool, ToolMetadata, ToolResult
from .specs import EDIT_TEXT_FILE_SPEC

logger = logging.getLogger(__name__)


class EditTextFileTool(BaseTool):
    """Tool to edit a file using hash-anchored operations."""

    name = "edit_text_file"
    description = "Edit a file using hash-anchored operations"

    def execute(
        self,
        path: str,
        file_hash: str,
        operations: list[dict[str, Any]],
        **kwargs: Any,
    ) -> ToolResult:
        """Apply a batch of operations to a file atomically.

        The file is re-read under the path's lock and its ``file_hash``
        compared with the caller's before any anchor is resolved.  Either every
        operation is applied in one write or nothing is written.

        Args:
            path: Path to the file to edit
            file_hash: ``file_hash`` reported by the caller's last read
            operations: List of ``{op_type, anchor, end_anchor, content}`` dicts

        Returns:
            ToolResult with the new tagged content and ``file_hash``
        """
        start_time = time.time()

        try:
            self._validate_request(file_hash, operations)
            resolved_path = self.resolve_path(path)
            with self.locks.hold(resolved_path):
                snapshot = self.read_snapshot(resolved_path)
                if snapshot.file_hash != file_hash:
                    raise StaleFile(path, file_hash, snapshot.file_hash)
                plan = plan_edits(snapshot, operations)
                new_snapshot = commit(plan, resolved_path, encoding=self.config.encoding)
        except HashfileError as e:
            logger.warning("Edit of %s rejected: %s", path, e.message)
            return ToolResult.from_error(e)

        logger.info(
            "Edited %s: %d operation(s), file_hash %s -> %s",
            resolved_path,
            len(operations),
            file_hash,
            new_snapshot.file_hash,
        )
        data = {
            "path": str(resolved_path),
            "file_hash": new_snapshot.file_hash,
            "total_lines": len(new_snapshot),
            "operations_applied": len(operations),
        }
        duration_ms = int((time.time() - start_time) * 1000)
        metadata = ToolMetadata(
            duration_ms=duration_ms,
            files_modified=[str(resolved_path)],
            data=data,
        )
        return ToolResult.ok(new_snapshot.render(), data=data).with_metadata(metadata)

    def _validate_request(self, file_hash: Any, operations: Any) -> None:
        if not isinstance(file_hash, str) or not file_hash:
            raise InvalidOperation("No file_hash provided; read the file first")
        if not isinstance(operations, list) or not operations:
            raise InvalidOperation("No operations provided (expected a non-empty array)")
        limit = self.config.limits.max_operations
        if len(operations) > limit:
            raise InvalidOperation(
                f"Too many operations in one call ({len(operations)}, max {limit}). "
                f"Split into multiple calls."
            )

    @classmethod
    def get_spec(cls) -> dict[str, Any]:
        """Get the tool specification for the caller."""
        return EDIT_TEXT_FILE_SPEC
