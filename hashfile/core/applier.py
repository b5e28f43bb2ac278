"""Edit application: turn a rewrite plan into new content and write it durably."""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterator

from hashfile.core.errors import IOFailure
from hashfile.core.hashline import Snapshot, build_snapshot
from hashfile.core.planner import RewritePlan

logger = logging.getLogger(__name__)


def _render_terminated(plan: RewritePlan) -> list[tuple[str, str]]:
    snapshot = plan.snapshot
    out: list[tuple[str, str]] = []
    for record, slot in zip(snapshot.lines, plan.slots):
        # New lines take the terminator of the line they attach to
        eol = record.eol if record.eol.endswith("\n") else snapshot.eol
        out.extend((line, eol) for line in slot.before)
        if slot.consumed_by is None:
            out.append((record.content, record.eol))
        elif slot.replacement is not None:
            out.extend((line, eol) for line in slot.replacement)
        out.extend((line, eol) for line in slot.after)
    return out


def render_lines(plan: RewritePlan) -> list[str]:
    """Walk the plan's positions in order and collect the resulting lines.

    At each position: ``insert_before`` lines, then the original line, its
    replacement (first position of the span only) or nothing, then
    ``insert_after`` lines.
    """
    return [line for line, _ in _render_terminated(plan)]


def apply_plan(plan: RewritePlan) -> str:
    """Return the new file content described by *plan*.

    Untouched lines keep their own terminators; new lines take the
    terminator of the line they were anchored to.  A trailing newline is kept
    only when the original had one, and a result with no lines is the empty
    string.
    """
    pairs = _render_terminated(plan)
    if not pairs:
        return ""
    snapshot = plan.snapshot
    last = len(pairs) - 1
    parts: list[str] = []
    for i, (line, eol) in enumerate(pairs):
        if i < last and not eol.endswith("\n"):
            eol = snapshot.eol
        elif i == last and not snapshot.trailing_newline and eol.endswith("\n"):
            eol = ""
        parts.append(line + eol)
    return "".join(parts)


@contextlib.contextmanager
def _temp_sibling(path: Path) -> Iterator[tuple[int, str]]:
    """Yield an open temp file descriptor next to *path*; unlink it unless moved."""
    fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        yield fd, tmp_path
    finally:
        with contextlib.suppress(OSError):
            os.close(fd)
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_path)


def write_atomic(path: Path, data: bytes) -> None:
    """Replace *path* with *data* so readers never observe a partial file.

    The bytes go to a temporary file in the same directory, are flushed to
    disk, and the temporary file is renamed over the target.  The original
    file mode is preserved when the target exists.

    Raises:
        IOFailure: If any step fails; the target is left untouched.
    """
    try:
        original_mode = path.stat().st_mode if path.exists() else None
        with _temp_sibling(path) as (fd, tmp_path):
            if original_mode is not None:
                os.fchmod(fd, original_mode)
            view = memoryview(data)
            while view:
                written = os.write(fd, view)
                view = view[written:]
            os.fsync(fd)
            os.replace(tmp_path, path)
    except OSError as e:
        raise IOFailure(f"Failed to write {path}: {e}") from e
    _fsync_dir(path.parent)


def _fsync_dir(directory: Path) -> None:
    """Flush *directory* so a completed rename survives a crash."""
    try:
        fd = os.open(directory, os.O_RDONLY)
    except OSError as e:
        logger.warning("Cannot open %s to sync the rename: %s", directory, e)
        return
    try:
        os.fsync(fd)
    except OSError as e:
        # The content is already in place; only durability is in doubt
        logger.warning("Failed to sync directory %s: %s", directory, e)
    finally:
        os.close(fd)


def commit(plan: RewritePlan, path: Path, encoding: str = "utf-8") -> Snapshot:
    """Apply *plan*, write the result to *path* and return the new snapshot.

    The returned snapshot's ``file_hash`` anchors the caller's next edit.
    """
    content = apply_plan(plan)
    try:
        data = content.encode(encoding)
    except UnicodeEncodeError as e:
        raise IOFailure(f"Cannot encode new content as {encoding}: {e}") from e
    write_atomic(path, data)
    logger.debug("Wrote %d bytes to %s", len(data), path)
    return build_snapshot(data, encoding=encoding)
