"""Path authorization against a set of permitted roots.

The set of roots belongs to the caller.  :func:`is_path_allowed` checks a
path against an explicit root list; :class:`RootsGuard` caches the list
obtained from a provider and drops the cache when told the roots changed.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Iterable, Optional
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

from hashfile.core.errors import PathNotAllowed

logger = logging.getLogger(__name__)

RootsProvider = Callable[[], Iterable[str]]


def root_to_path(root: str) -> Optional[Path]:
    """Convert a root entry (plain path or ``file://`` URI) to a Path.

    Returns None for URIs with any other scheme.
    """
    if "://" not in root:
        return Path(root).expanduser()
    parsed = urlparse(root)
    if parsed.scheme != "file":
        return None
    return Path(url2pathname(unquote(parsed.path)))


def _normalize_roots(roots: Iterable[str], base: Path) -> list[Path]:
    resolved: list[Path] = []
    for root in roots:
        p = root_to_path(root)
        if p is None:
            logger.debug("Ignoring non-file root %s", root)
            continue
        if not p.is_absolute():
            p = base / p
        resolved.append(p.resolve())
    return resolved


def canonicalize(path: Path) -> Path:
    """Resolve symlinks and ``..`` in an absolute *path*.

    A path that does not exist yet is resolved through its nearest existing
    ancestor, so a symlinked ancestor cannot smuggle it outside a root.
    """
    if path.exists():
        return path.resolve()
    missing: list[str] = []
    ancestor = path
    while not ancestor.exists() and ancestor.parent != ancestor:
        missing.append(ancestor.name)
        ancestor = ancestor.parent
    resolved = ancestor.resolve()
    for name in reversed(missing):
        if name == "..":
            resolved = resolved.parent
        elif name not in ("", "."):
            resolved = resolved / name
    return resolved


def _is_within(path: Path, roots: list[Path]) -> bool:
    for root in roots:
        try:
            path.relative_to(root)
            return True
        except ValueError:
            continue
    return False


def is_path_allowed(path: Path, roots: Iterable[str], base: Optional[Path] = None) -> bool:
    """Return True when *path* lies under one of *roots* after canonicalization."""
    if not path.is_absolute():
        raise ValueError(f"Path must be absolute: {path}")
    canonical = canonicalize(path)
    return _is_within(canonical, _normalize_roots(roots, base or Path.cwd()))


class RootsGuard:
    """Validates paths against the caller's permitted roots.

    The roots are fetched from *provider* on first use and cached until
    :meth:`invalidate` is called.  A provider failure or an empty root set
    denies every path.
    """

    def __init__(
        self,
        provider: RootsProvider,
        base: Optional[Path] = None,
        enabled: bool = True,
    ):
        self._provider = provider
        self._base = (base or Path.cwd()).resolve()
        self.enabled = enabled
        self._lock = threading.Lock()
        self._roots: Optional[list[Path]] = None

    @classmethod
    def from_roots(
        cls,
        roots: Iterable[str],
        base: Optional[Path] = None,
        enabled: bool = True,
    ) -> "RootsGuard":
        fixed = list(roots)
        return cls(lambda: fixed, base=base, enabled=enabled)

    def invalidate(self) -> None:
        """Drop the cached roots; the next check fetches them again."""
        with self._lock:
            self._roots = None
        logger.debug("Roots cache invalidated")

    def roots(self) -> list[Path]:
        with self._lock:
            if self._roots is None:
                try:
                    entries = list(self._provider())
                except Exception as e:
                    logger.warning("Roots provider failed: %s", e)
                    raise PathNotAllowed(f"Permitted roots unavailable: {e}") from e
                self._roots = _normalize_roots(entries, self._base)
                logger.debug("Loaded %d permitted root(s)", len(self._roots))
            return list(self._roots)

    def require_allowed(self, path: Path) -> Path:
        """Return the canonical form of *path* if it is permitted.

        Raises:
            PathNotAllowed: If the path is outside every root or the roots
                cannot be obtained.
        """
        if not path.is_absolute():
            path = self._base / path
        if not self.enabled:
            return path.resolve()
        canonical = canonicalize(path)
        roots = self.roots()
        if not roots:
            raise PathNotAllowed(f"Access denied: no permitted roots configured for {canonical}")
        if not _is_within(canonical, roots):
            raise PathNotAllowed(f"Access denied: {canonical} is outside the permitted roots")
        return canonical
