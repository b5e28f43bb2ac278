"""Output formatting for hashfile."""

from hashfile.output.jsonl import (
    ErrorEvent,
    FileEditedEvent,
    FileReadEvent,
    FileWrittenEvent,
    emit,
    get_event_callback,
    set_event_callback,
)
from hashfile.output.processor import OutputProcessor

__all__ = [
    "ErrorEvent",
    "FileEditedEvent",
    "FileReadEvent",
    "FileWrittenEvent",
    "OutputProcessor",
    "emit",
    "get_event_callback",
    "set_event_callback",
]
