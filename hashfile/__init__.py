"""hashfile - hash-anchored line editing for text files."""

__version__ = "1.0.0"

from hashfile.core.errors import HashfileError
from hashfile.core.hashline import Snapshot, build_snapshot, file_hash, line_hash
from hashfile.core.planner import Operation, OperationType, plan_edits

__all__ = [
    "HashfileError",
    "Operation",
    "OperationType",
    "Snapshot",
    "__version__",
    "build_snapshot",
    "file_hash",
    "line_hash",
    "plan_edits",
]
