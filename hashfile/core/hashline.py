"""Hashline utilities for line-level addressing with integrity hashes.

Each line is tagged as ``position:hash|content`` where *hash* is a short
(2-char hex) fingerprint of the line's content with trailing whitespace
removed.  The whole file additionally carries a 6-char ``file_hash`` computed
over its exact bytes, so that any change (including whitespace the line hash
ignores) marks a previous read as stale.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Optional, Union

from hashfile.core.errors import InvalidOperation

HASHLINE_VERSION = 1

LINE_HASH_BITS = 8
FILE_HASH_BITS = 24

_FNV_OFFSET = 0xCBF29CE484222325
_FNV_PRIME = 0x100000001B3
_MASK_64 = 0xFFFFFFFFFFFFFFFF

_ANCHOR_RE = re.compile(r"^(\d+):([0-9a-f]+)$")
_TAGGED_RE = re.compile(r"^(\d+):([0-9a-f]+)\|")

TRAILER_MARKER = "---"


def fnv1a_64(data: bytes) -> int:
    """Return the 64-bit FNV-1a digest of *data*."""
    h = _FNV_OFFSET
    for byte in data:
        h ^= byte
        h = (h * _FNV_PRIME) & _MASK_64
    return h


def _short_code(data: bytes, bits: int) -> str:
    width = (bits + 3) // 4
    return f"{fnv1a_64(data) & ((1 << bits) - 1):0{width}x}"


def line_hash(content: str) -> str:
    """Return the 2-char hex hash for a line of content.

    Trailing whitespace is stripped before hashing; leading whitespace
    (indentation) is part of the hash.
    """
    return _short_code(content.rstrip().encode("utf-8"), LINE_HASH_BITS)


def file_hash(data: Union[bytes, str]) -> str:
    """Return the 6-char hex hash of a whole file's raw content."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return _short_code(data, FILE_HASH_BITS)


def split_terminated(content: str) -> list[tuple[str, str]]:
    """Split *content* into ``(line, terminator)`` pairs.

    The terminator is ``"\\r\\n"`` or ``"\\n"``; an unterminated last line
    gets ``""`` (or ``"\\r"`` when it ends in a bare carriage return).
    """
    if not content:
        return []
    pieces = content.split("\n")
    last = pieces.pop()
    pairs = [(p[:-1], "\r\n") if p.endswith("\r") else (p, "\n") for p in pieces]
    if last:
        pairs.append((last[:-1], "\r") if last.endswith("\r") else (last, ""))
    return pairs


def split_lines(content: str) -> list[str]:
    """Split *content* into lines without their terminators.

    ``"a\\nb\\n"`` and ``"a\\nb"`` both give ``["a", "b"]``; ``""`` gives no
    lines and ``"\\n"`` one empty line.  A ``\\r`` before each ``\\n`` is
    dropped.
    """
    return [line for line, _ in split_terminated(content)]


def detect_eol(content: str) -> str:
    return "\r\n" if "\r\n" in content else "\n"


@dataclass(frozen=True)
class LineRecord:
    """One line of a snapshot."""

    position: int
    hash: str
    content: str
    eol: str = ""  # this line's own terminator

    def tagged(self) -> str:
        return f"{self.position}:{self.hash}|{self.content}"


@dataclass(frozen=True)
class Snapshot:
    """Immutable view of a file's lines plus its whole-file hash."""

    lines: tuple[LineRecord, ...]
    file_hash: str
    eol: str = "\n"  # terminator for lines that have none of their own
    trailing_newline: bool = False

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[LineRecord]:
        return iter(self.lines)

    def line_at(self, position: int) -> Optional[LineRecord]:
        """Return the record at 1-based *position*, or None when out of bounds."""
        if 1 <= position <= len(self.lines):
            return self.lines[position - 1]
        return None

    def positions_with_hash(self, hash_code: str) -> list[int]:
        return [record.position for record in self.lines if record.hash == hash_code]

    def contents(self) -> list[str]:
        return [record.content for record in self.lines]

    def render(self) -> str:
        return render_tagged(self)


def build_snapshot(raw: Union[bytes, str], encoding: str = "utf-8") -> Snapshot:
    """Build a snapshot from a file's raw content.

    Args:
        raw: The file content, either as read from disk or already decoded.
        encoding: Used to decode *raw* when it is bytes.

    Returns:
        Snapshot with 1-based contiguous positions.

    Raises:
        UnicodeDecodeError: If *raw* is not valid text in *encoding*.
    """
    if isinstance(raw, bytes):
        data = raw
        content = raw.decode(encoding)
    else:
        content = raw
        data = raw.encode(encoding)

    records = tuple(
        LineRecord(position=i, hash=line_hash(line), content=line, eol=eol)
        for i, (line, eol) in enumerate(split_terminated(content), start=1)
    )
    return Snapshot(
        lines=records,
        file_hash=file_hash(data),
        eol=detect_eol(content),
        trailing_newline=content.endswith("\n"),
    )


def render_tagged(snapshot: Snapshot) -> str:
    """Render a snapshot as tagged lines followed by the metadata trailer."""
    parts = [record.tagged() for record in snapshot.lines]
    parts.extend(
        [
            TRAILER_MARKER,
            f"hashline_version: {HASHLINE_VERSION}",
            f"total_lines: {len(snapshot)}",
            f"file_hash: {snapshot.file_hash}",
        ]
    )
    return "\n".join(parts) + "\n"


def parse_tagged(text: str) -> list[str]:
    """Recover the plain line list from :func:`render_tagged` output.

    Parsing stops at the trailer.  Raises ``ValueError`` on a line that does
    not carry a hashline tag.
    """
    lines: list[str] = []
    for raw in text.split("\n"):
        if raw == TRAILER_MARKER:
            break
        match = _TAGGED_RE.match(raw)
        if match is None:
            if raw == "":
                continue
            raise ValueError(f"Line is not hashline-tagged: {raw!r}")
        lines.append(raw[match.end():])
    return lines


@dataclass(frozen=True)
class LineAnchor:
    """A claimed ``(position, hash)`` reference to a line."""

    position: int
    hash: str

    def __str__(self) -> str:
        return f"{self.position}:{self.hash}"


def parse_anchor(ref: str) -> LineAnchor:
    """Parse a ``'position:hash'`` anchor string.

    Raises ``InvalidOperation`` on malformed input.
    """
    if not isinstance(ref, str):
        raise InvalidOperation(f"Anchor must be a string, got {type(ref).__name__}")
    # Hashes are case-insensitive on input
    match = _ANCHOR_RE.match(ref.strip().lower())
    if match is None:
        raise InvalidOperation(
            f"Invalid anchor format {ref!r}. Expected 'line_num:hash' (e.g. '12:a3')"
        )
    return LineAnchor(position=int(match.group(1)), hash=match.group(2))
