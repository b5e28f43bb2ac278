"""
JSONL output format for structured tool events.

Emits events to stdout in JSONL format for machine consumption.

Event Types:
- file.read: A file was read and tagged
- file.edited: An edit batch was applied
- file.written: A file was overwritten
- error: A tool call failed
"""

from __future__ import annotations

import json
import threading
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, Optional

# Thread-local storage for event callbacks.
# When set, emit() routes events to the callback instead of stdout.
_tls = threading.local()


def set_event_callback(callback: Callable[[Dict[str, Any]], None] | None) -> None:
    """Set an event callback for the current thread.

    When set, :func:`emit` will call *callback(event_dict)* instead of
    printing to stdout.  Pass ``None`` to clear.
    """
    _tls.event_callback = callback


def get_event_callback() -> Callable[[Dict[str, Any]], None] | None:
    """Return the event callback for the current thread, or ``None``."""
    return getattr(_tls, "event_callback", None)


@dataclass
class FileReadEvent:
    """Emitted after a file is read."""

    path: str
    total_lines: int
    file_hash: str
    content: str
    type: str = field(default="file.read", init=False)


@dataclass
class FileEditedEvent:
    """Emitted after an edit batch is written."""

    path: str
    operations_applied: int
    total_lines: int
    file_hash: str
    content: str
    type: str = field(default="file.edited", init=False)


@dataclass
class FileWrittenEvent:
    """Emitted after a file is overwritten."""

    path: str
    size: int
    file_hash: str
    type: str = field(default="file.written", init=False)


@dataclass
class ErrorEvent:
    """Emitted when a tool call fails."""

    message: str
    code: Optional[str] = None
    type: str = field(default="error", init=False)


def emit(event) -> None:
    """
    Emit a single JSONL event.

    If a thread-local event callback has been registered via
    :func:`set_event_callback`, the event dict is passed to it.
    Otherwise the event is printed to stdout as a JSON line.

    Args:
        event: Dataclass event to emit
    """
    data = asdict(event)
    cb = get_event_callback()
    if cb is not None:
        cb(data)
    else:
        print(json.dumps(data, ensure_ascii=False), flush=True)
