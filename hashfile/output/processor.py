"""Output processor for hashfile - handles JSON and human-readable output."""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from rich.console import Console
from rich.panel import Panel

from hashfile.config.models import HashfileConfig, OutputMode
from hashfile.output.jsonl import (
    ErrorEvent,
    FileEditedEvent,
    FileReadEvent,
    FileWrittenEvent,
    emit,
)
from hashfile.tools.base import ToolResult


class OutputProcessor:
    """Processes and formats tool results for the command line.

    In JSON mode every result becomes one JSONL event on stdout.  In human
    mode tagged content goes to stdout untouched (so it can be piped) while
    status lines go to stderr through rich.
    """

    def __init__(
        self,
        config: HashfileConfig,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ):
        """Initialize the output processor.

        Args:
            config: Configuration
            stdout: Standard output stream (defaults to the current sys.stdout)
            stderr: Standard error stream (defaults to the current sys.stderr)
        """
        self.config = config
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

        # Rich console for human-readable output
        self.console = Console(
            file=self.stderr,
            force_terminal=config.output.colors,
            no_color=not config.output.colors,
            highlight=False,
        )

        self.json_mode = config.output.mode == OutputMode.JSON

    def _emit_json(self, event) -> None:
        emit(event)

    def _print_content(self, content: str) -> None:
        self.stdout.write(content)
        self.stdout.flush()

    def error(self, result: ToolResult) -> None:
        """Report a failed tool result."""
        if self.json_mode:
            self._emit_json(ErrorEvent(message=result.error or "Unknown error", code=result.code))
            return
        label = f" ({result.code})" if result.code else ""
        self.console.print(f"[red]Error{label}: {result.error}[/red]")

    def file_read(self, result: ToolResult) -> None:
        data = result.data or {}
        if self.json_mode:
            self._emit_json(
                FileReadEvent(
                    path=data.get("path", ""),
                    total_lines=data.get("total_lines", 0),
                    file_hash=data.get("file_hash", ""),
                    content=result.output,
                )
            )
            return
        self._print_content(result.output)

    def file_edited(self, result: ToolResult) -> None:
        data = result.data or {}
        if self.json_mode:
            self._emit_json(
                FileEditedEvent(
                    path=data.get("path", ""),
                    operations_applied=data.get("operations_applied", 0),
                    total_lines=data.get("total_lines", 0),
                    file_hash=data.get("file_hash", ""),
                    content=result.output,
                )
            )
            return
        self.console.print(
            f"[green]Applied {data.get('operations_applied', 0)} operation(s) to "
            f"{data.get('path', '')}[/green] [dim](file_hash: {data.get('file_hash', '')})[/dim]"
        )
        self._print_content(result.output)

    def file_written(self, result: ToolResult) -> None:
        data = result.data or {}
        if self.json_mode:
            self._emit_json(
                FileWrittenEvent(
                    path=data.get("path", ""),
                    size=data.get("size", 0),
                    file_hash=data.get("file_hash", ""),
                )
            )
            return
        self.console.print(f"[green]{result.output}[/green]")

    def show_config(self, rendered: str, source: Optional[str]) -> None:
        """Display the effective configuration."""
        if self.json_mode:
            self._print_content(rendered + "\n")
            return
        title = f"Configuration ({source})" if source else "Configuration (defaults)"
        self.console.print(Panel(rendered, title=title, border_style="blue"))
