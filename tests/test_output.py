import io

from hashfile.config.models import HashfileConfig
from hashfile.core.errors import StaleFile
from hashfile.output.jsonl import ErrorEvent, FileWrittenEvent, emit, set_event_callback
from hashfile.output.processor import OutputProcessor
from hashfile.tools.base import ToolResult


def test_emit_routes_to_callback():
    events = []
    set_event_callback(events.append)
    try:
        emit(FileWrittenEvent(path="/w/f.txt", size=2, file_hash="abcdef"))
    finally:
        set_event_callback(None)

    assert events == [
        {"path": "/w/f.txt", "size": 2, "file_hash": "abcdef", "type": "file.written"}
    ]


def test_error_event_from_tool_failure():
    events = []
    processor = OutputProcessor(HashfileConfig(output={"mode": "json"}))
    set_event_callback(events.append)
    try:
        processor.error(ToolResult.from_error(StaleFile("f.txt", "000000", "04c167")))
    finally:
        set_event_callback(None)

    assert events[0]["type"] == "error"
    assert events[0]["code"] == "stale_file"
    assert "expected file_hash 000000, current 04c167" in events[0]["message"]


def test_human_mode_splits_streams():
    out, err = io.StringIO(), io.StringIO()
    processor = OutputProcessor(HashfileConfig(output={"colors": False}), stdout=out, stderr=err)

    processor.file_read(ToolResult.ok("1:8c|a\n---\n"))
    processor.error(ToolResult.fail("boom", code="io_failure"))

    assert out.getvalue() == "1:8c|a\n---\n"
    assert "Error (io_failure): boom" in err.getvalue()


def test_error_event_defaults():
    assert ErrorEvent(message="x").code is None
