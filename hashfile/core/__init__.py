"""Anchor resolution and batch-edit engine."""

from hashfile.core.applier import apply_plan, commit, render_lines, write_atomic
from hashfile.core.errors import (
    AmbiguousAnchor,
    AnchorNotFound,
    ConflictingOperations,
    HashfileError,
    InvalidOperation,
    InvalidRange,
    IOFailure,
    OutOfBounds,
    PathNotAllowed,
    StaleFile,
)
from hashfile.core.hashline import (
    LineAnchor,
    LineRecord,
    Snapshot,
    build_snapshot,
    file_hash,
    line_hash,
    parse_anchor,
    parse_tagged,
    render_tagged,
)
from hashfile.core.locks import PathLocks
from hashfile.core.planner import Operation, OperationType, RewritePlan, plan_edits
from hashfile.core.resolver import resolve_anchor, resolve_span

__all__ = [
    "AmbiguousAnchor",
    "AnchorNotFound",
    "ConflictingOperations",
    "HashfileError",
    "InvalidOperation",
    "InvalidRange",
    "IOFailure",
    "LineAnchor",
    "LineRecord",
    "Operation",
    "OperationType",
    "OutOfBounds",
    "PathLocks",
    "PathNotAllowed",
    "RewritePlan",
    "Snapshot",
    "StaleFile",
    "apply_plan",
    "build_snapshot",
    "commit",
    "file_hash",
    "line_hash",
    "parse_anchor",
    "parse_tagged",
    "plan_edits",
    "render_lines",
    "render_tagged",
    "resolve_anchor",
    "resolve_span",
    "write_atomic",
]
