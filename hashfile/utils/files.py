"""File system utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from hashfile.core.errors import IOFailure


def resolve_path(path: Union[str, Path], cwd: Optional[Path] = None) -> Path:
    """Resolve a path relative to CWD.

    Args:
        path: Path to resolve
        cwd: Current working directory (defaults to os.getcwd())

    Returns:
        Absolute path; symlinks are not resolved here
    """
    if cwd is None:
        cwd = Path.cwd()

    p = Path(path).expanduser()
    if p.is_absolute():
        return p

    return cwd / p


def is_binary(data: bytes) -> bool:
    """Check whether raw file content looks binary."""
    return b"\0" in data[:8192]


def read_file_bytes(path: Path, max_size: int = 10 * 1024 * 1024) -> bytes:
    """Read a text file's raw bytes with a size limit.

    Raises:
        IOFailure: If the file is missing, not a regular file, too large,
            binary, or unreadable.
    """
    if not path.exists():
        raise IOFailure(f"File not found: {path}")

    if not path.is_file():
        raise IOFailure(f"Not a file: {path}")

    try:
        size = path.stat().st_size
        if size > max_size:
            raise IOFailure(f"File too large: {size} bytes (max {max_size})")
        data = path.read_bytes()
    except PermissionError as e:
        raise IOFailure(f"Permission denied: {path}") from e
    except OSError as e:
        raise IOFailure(f"Failed to read {path}: {e}") from e

    if is_binary(data):
        raise IOFailure(f"File appears to be binary: {path}")
    return data
