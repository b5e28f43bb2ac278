"""Anchor resolution against a snapshot.

An anchor is a claim, not a location.  It resolves to its stated position
when the line there still carries the stated hash; otherwise the whole
snapshot is searched and the anchor follows the line only if exactly one
line carries that hash.
"""

from __future__ import annotations

import logging
from typing import Optional

from hashfile.core.errors import AmbiguousAnchor, AnchorNotFound, InvalidRange
from hashfile.core.hashline import LineAnchor, Snapshot

logger = logging.getLogger(__name__)


def resolve_anchor(snapshot: Snapshot, anchor: LineAnchor) -> int:
    """Resolve *anchor* to a 1-based position in *snapshot*.

    Raises:
        AnchorNotFound: No line carries the anchor's hash.
        AmbiguousAnchor: The stated position does not match and several
            lines carry the hash.
    """
    record = snapshot.line_at(anchor.position)
    if record is not None and record.hash == anchor.hash:
        return anchor.position

    matches = snapshot.positions_with_hash(anchor.hash)
    if len(matches) == 1:
        logger.debug("Anchor %s moved to line %d", anchor, matches[0])
        return matches[0]
    if not matches:
        raise AnchorNotFound(f"Anchor {anchor} not found")
    raise AmbiguousAnchor(
        f"Anchor {anchor} is ambiguous ({len(matches)} matches found at lines "
        f"{', '.join(str(m) for m in matches)})",
        matches=matches,
    )


def resolve_span(
    snapshot: Snapshot,
    anchor: LineAnchor,
    end_anchor: Optional[LineAnchor] = None,
) -> tuple[int, int]:
    """Resolve an anchor, or a closed ``[anchor, end_anchor]`` range.

    Both ends are resolved independently.  Returns ``(start, end)``; a single
    anchor yields ``start == end``.
    """
    start = resolve_anchor(snapshot, anchor)
    if end_anchor is None:
        return start, start
    end = resolve_anchor(snapshot, end_anchor)
    if start > end:
        raise InvalidRange(
            f"End anchor {end_anchor} (line {end}) is before start anchor {anchor} (line {start})"
        )
    return start, end
