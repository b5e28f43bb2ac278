"""Error taxonomy for hash-anchored editing.

Every failure is reported back to the caller as a structured result; none of
them is fatal to the process and none of them leaves a partially written file.
"""

from __future__ import annotations

from typing import Optional


class HashfileError(Exception):
    """Base class for all editing failures."""

    code = "hashfile_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


class StaleFile(HashfileError):
    """The file changed since the caller last read it."""

    code = "stale_file"

    def __init__(self, path: str, expected: str, actual: str):
        super().__init__(
            f"File {path} has been modified since it was last read "
            f"(expected file_hash {expected}, current {actual}). Please re-read the file."
        )
        self.expected = expected
        self.actual = actual


class AnchorNotFound(HashfileError):
    """No line in the current snapshot carries the anchor's hash."""

    code = "anchor_not_found"


class AmbiguousAnchor(HashfileError):
    """More than one line carries the anchor's hash."""

    code = "ambiguous_anchor"

    def __init__(self, message: str, matches: Optional[list[int]] = None):
        super().__init__(message)
        self.matches = list(matches or [])


class InvalidRange(HashfileError):
    """A range resolved with its start after its end."""

    code = "invalid_range"


class ConflictingOperations(HashfileError):
    """Two consuming operations claim the same line."""

    code = "conflicting_operations"

    def __init__(self, message: str, first: int = 0, second: int = 0):
        super().__init__(message)
        self.first = first
        self.second = second


class OutOfBounds(HashfileError):
    """A resolved span lies outside the lines of the file."""

    code = "out_of_bounds"


class InvalidOperation(HashfileError):
    """The edit request is malformed."""

    code = "invalid_operation"


class PathNotAllowed(HashfileError):
    """The target path is outside every permitted root."""

    code = "path_not_allowed"


class IOFailure(HashfileError):
    """Reading or writing the file failed."""

    code = "io_failure"
