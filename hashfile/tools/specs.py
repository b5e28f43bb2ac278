"""Tool specifications for hashfile - defines JSON schemas for all tools."""

from __future__ import annotations

from typing import Any

# Read text file tool
READ_TEXT_FILE_SPEC: dict[str, Any] = {
    "name": "read_text_file",
    "description": """Reads a text file and tags every line as '{line}:{hash}|{content}'.
The output ends with a trailer reporting total_lines and file_hash.
Keep the file_hash: edit_text_file requires it to detect concurrent changes.""",
    "parameters": {
        "type": "object",
        "properties": {
            "path": {
                "type": "string",
                "description": "Absolute path to the file to read",
            },
        },
        "required": ["path"],
    },
}

# Edit text file tool
EDIT_TEXT_FILE_SPEC: dict[str, Any] = {
    "name": "edit_text_file",
    "description": """Edits a file using hash-anchored operations.
Each operation references lines by the 'line:hash' anchors returned by read_text_file.
All operations are resolved against the file as it was read, so anchors never shift
within one call. Either every operation applies or none does.""",
    "parameters": {
        "type": "object",
        "properties": {
            "path": {
                "type": "string",
                "description": "Absolute path to the file to edit",
            },
            "file_hash": {
                "type": "string",
                "description": "file_hash of the entire file content from the last read",
            },
            "operations": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "op_type": {
                            "type": "string",
                            "enum": [
                                "replace",
                                "replace_range",
                                "insert_after",
                                "insert_before",
                                "delete",
                                "delete_range",
                            ],
                            "description": "Type of operation",
                        },
                        "anchor": {
                            "type": "string",
                            "description": "Anchor in lineNum:hash format",
                        },
                        "end_anchor": {
                            "type": "string",
                            "description": "End anchor in lineNum:hash format for range operations",
                        },
                        "content": {
                            "type": "string",
                            "description": "New content for replace or insert operations",
                        },
                    },
                    "required": ["op_type", "anchor"],
                },
            },
        },
        "required": ["path", "file_hash", "operations"],
    },
}

# Write text file tool
WRITE_TEXT_FILE_SPEC: dict[str, Any] = {
    "name": "write_text_file",
    "description": """Writes content to a file, replacing it entirely.
Parent directories are created if needed. Returns the new file_hash.""",
    "parameters": {
        "type": "object",
        "properties": {
            "path": {
                "type": "string",
                "description": "Absolute path to the file to write",
            },
            "content": {
                "type": "string",
                "description": "Content to write to the file",
            },
        },
        "required": ["path", "content"],
    },
}

TOOL_SPECS: dict[str, dict[str, Any]] = {
    "read_text_file": READ_TEXT_FILE_SPEC,
    "edit_text_file": EDIT_TEXT_FILE_SPEC,
    "write_text_file": WRITE_TEXT_FILE_SPEC,
}


def get_all_tools() -> list[dict[str, Any]]:
    """Get all tool specifications as a list.

    Returns:
        List of tool specification dicts
    """
    return list(TOOL_SPECS.values())


def get_tool_spec(name: str) -> dict[str, Any] | None:
    """Get a specific tool specification.

    Args:
        name: Name of the tool

    Returns:
        Tool specification dict or None if not found
    """
    return TOOL_SPECS.get(name)


def validate_tool_arguments(name: str, arguments: dict[str, Any]) -> str | None:
    """Check required arguments are present.

    Returns None if valid, otherwise an error message.
    """
    spec = get_tool_spec(name)
    if spec is None:
        return f"Unknown tool: {name}"
    if not isinstance(arguments, dict):
        return f"Arguments for {name} must be an object"
    missing = [key for key in spec["parameters"].get("required", []) if key not in arguments]
    if missing:
        return f"Missing required argument(s) for {name}: {', '.join(missing)}"
    return None
