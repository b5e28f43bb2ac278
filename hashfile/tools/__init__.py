"""Tools exposing the hashline engine: read, edit and write text files."""

from hashfile.tools.base import BaseTool, ToolMetadata, ToolResult
from hashfile.tools.edit_file import EditTextFileTool
from hashfile.tools.guards import RootsGuard, is_path_allowed
from hashfile.tools.read_file import ReadTextFileTool
from hashfile.tools.registry import ToolRegistry
from hashfile.tools.write_file import WriteTextFileTool

__all__ = [
    "BaseTool",
    "EditTextFileTool",
    "ReadTextFileTool",
    "RootsGuard",
    "ToolMetadata",
    "ToolRegistry",
    "ToolResult",
    "WriteTextFileTool",
    "is_path_allowed",
]
