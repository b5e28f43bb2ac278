"""Batch edit planning.

Every operation in a batch is resolved against the same unmodified snapshot,
so an anchor always means "the line that had this content when the file was
read".  The resolved operations are merged into a :class:`RewritePlan`, one
slot per original line, which the applier walks in order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Sequence

from hashfile.core.errors import ConflictingOperations, InvalidOperation, OutOfBounds
from hashfile.core.hashline import LineAnchor, Snapshot, parse_anchor, split_lines
from hashfile.core.resolver import resolve_span

logger = logging.getLogger(__name__)


class OperationType(str, Enum):
    """Kinds of edit operation."""

    REPLACE = "replace"
    REPLACE_RANGE = "replace_range"
    INSERT_AFTER = "insert_after"
    INSERT_BEFORE = "insert_before"
    DELETE = "delete"
    DELETE_RANGE = "delete_range"

    @property
    def is_range(self) -> bool:
        return self in (OperationType.REPLACE_RANGE, OperationType.DELETE_RANGE)

    @property
    def is_consuming(self) -> bool:
        """Consuming operations own every line of their span exclusively."""
        return self not in (OperationType.INSERT_AFTER, OperationType.INSERT_BEFORE)

    @property
    def takes_content(self) -> bool:
        return self not in (OperationType.DELETE, OperationType.DELETE_RANGE)


_RANGE_PROMOTION = {
    OperationType.REPLACE: OperationType.REPLACE_RANGE,
    OperationType.DELETE: OperationType.DELETE_RANGE,
}


@dataclass(frozen=True)
class Operation:
    """One requested edit, anchored to the snapshot the caller read."""

    op_type: OperationType
    anchor: LineAnchor
    end_anchor: Optional[LineAnchor] = None
    content: Optional[str] = None

    def __post_init__(self) -> None:
        if self.op_type.is_range and self.end_anchor is None:
            raise InvalidOperation(f"'{self.op_type.value}' requires 'end_anchor'")
        if not self.op_type.is_range and self.end_anchor is not None:
            raise InvalidOperation(f"'{self.op_type.value}' does not take 'end_anchor'")
        if self.op_type.takes_content:
            if self.content is None:
                raise InvalidOperation(f"'{self.op_type.value}' requires 'content'")
            if not isinstance(self.content, str):
                raise InvalidOperation(f"'{self.op_type.value}' content must be a string")

    @property
    def new_lines(self) -> list[str]:
        if not self.op_type.takes_content or self.content is None:
            return []
        return split_lines(self.content)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Operation":
        """Build an operation from its wire form.

        ``{"op_type": ..., "anchor": "12:a3", "end_anchor": ..., "content": ...}``.
        ``replace`` and ``delete`` with an ``end_anchor`` become their range
        variants.
        """
        if not isinstance(raw, dict):
            raise InvalidOperation("operation must be an object")
        op_name = raw.get("op_type")
        try:
            op_type = OperationType(op_name)
        except ValueError:
            valid = ", ".join(t.value for t in OperationType)
            raise InvalidOperation(
                f"Invalid operation type: {op_name!r} (expected one of {valid})"
            ) from None

        if "anchor" not in raw:
            raise InvalidOperation(f"'{op_type.value}' requires 'anchor'")
        anchor = parse_anchor(raw["anchor"])
        end_raw = raw.get("end_anchor")
        end_anchor = parse_anchor(end_raw) if end_raw else None
        if end_anchor is not None and op_type in _RANGE_PROMOTION:
            op_type = _RANGE_PROMOTION[op_type]

        content = raw.get("content") if op_type.takes_content else None
        return cls(op_type=op_type, anchor=anchor, end_anchor=end_anchor, content=content)


@dataclass(frozen=True)
class ResolvedOperation:
    """An operation with its anchors pinned to snapshot positions."""

    number: int  # 1-based index in the request
    operation: Operation
    start: int
    end: int

    @property
    def is_consuming(self) -> bool:
        return self.operation.op_type.is_consuming


@dataclass
class PositionPlan:
    """What to emit at one original position."""

    before: list[str] = field(default_factory=list)
    consumed_by: Optional[int] = None
    replacement: Optional[list[str]] = None
    after: list[str] = field(default_factory=list)


@dataclass
class RewritePlan:
    """Per-position rewrite instructions for one snapshot."""

    snapshot: Snapshot
    slots: list[PositionPlan]
    operations: list[ResolvedOperation] = field(default_factory=list)

    def slot(self, position: int) -> PositionPlan:
        return self.slots[position - 1]


def _parse_operations(operations: Sequence[Any]) -> list[Operation]:
    parsed: list[Operation] = []
    for number, op in enumerate(operations, 1):
        if isinstance(op, Operation):
            parsed.append(op)
            continue
        try:
            parsed.append(Operation.from_dict(op))
        except InvalidOperation as e:
            raise InvalidOperation(f"Operation #{number}: {e.message}") from e
    return parsed


def resolve_operations(snapshot: Snapshot, operations: Sequence[Operation]) -> list[ResolvedOperation]:
    """Resolve every operation against *snapshot*, failing on the first error."""
    resolved: list[ResolvedOperation] = []
    for number, op in enumerate(operations, 1):
        start, end = resolve_span(snapshot, op.anchor, op.end_anchor)
        if start < 1 or end > len(snapshot):
            raise OutOfBounds(
                f"Operation #{number}: lines {start}-{end} outside file "
                f"(file has {len(snapshot)} lines)"
            )
        resolved.append(ResolvedOperation(number=number, operation=op, start=start, end=end))
    return resolved


def check_conflicts(resolved: Sequence[ResolvedOperation]) -> None:
    """Reject the batch if two consuming operations share a line."""
    consuming = sorted((r for r in resolved if r.is_consuming), key=lambda r: (r.start, r.number))
    for prev, cur in zip(consuming, consuming[1:]):
        if cur.start <= prev.end:
            first, second = sorted((prev.number, cur.number))
            raise ConflictingOperations(
                f"Operations #{first} and #{second} overlap "
                f"(lines {prev.start}-{prev.end} and {cur.start}-{cur.end})",
                first=first,
                second=second,
            )


def plan_edits(snapshot: Snapshot, operations: Sequence[Any]) -> RewritePlan:
    """Resolve, conflict-check and merge a batch of operations.

    Args:
        snapshot: The freshly read file.
        operations: :class:`Operation` instances or their wire-form dicts,
            in request order.

    Returns:
        RewritePlan covering every original position.

    Raises:
        HashfileError: Any resolution, validation or conflict failure.
            Nothing is planned partially.
    """
    parsed = _parse_operations(operations)
    resolved = resolve_operations(snapshot, parsed)
    check_conflicts(resolved)

    slots = [PositionPlan() for _ in range(len(snapshot))]
    # Request order is preserved within each side of a position.
    for r in resolved:
        op_type = r.operation.op_type
        if op_type == OperationType.INSERT_BEFORE:
            slots[r.start - 1].before.extend(r.operation.new_lines)
        elif op_type == OperationType.INSERT_AFTER:
            slots[r.start - 1].after.extend(r.operation.new_lines)
        else:
            for position in range(r.start, r.end + 1):
                slots[position - 1].consumed_by = r.number
            if op_type.takes_content:
                slots[r.start - 1].replacement = r.operation.new_lines

    logger.debug(
        "Planned %d operation(s) over %d line(s) of %s",
        len(resolved),
        len(snapshot),
        snapshot.file_hash,
    )
    return RewritePlan(snapshot=snapshot, slots=slots, operations=resolved)
