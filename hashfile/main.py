"""Main CLI entry point for hashfile."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

import typer
from rich.console import Console

from hashfile import __version__
from hashfile.config.loader import find_config_file, load_config
from hashfile.config.models import HashfileConfig, OutputMode
from hashfile.output.processor import OutputProcessor
from hashfile.tools.registry import ToolRegistry

app = typer.Typer(
    name="hashfile",
    help="Hash-anchored line editing for text files",
    add_completion=False,
)

console = Console(stderr=True)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def version_callback(value: bool):
    if value:
        console.print(f"hashfile v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
):
    """hashfile - read files as tagged lines and edit them by anchor."""
    pass


def configure_logging(config: HashfileConfig, verbose: bool = False) -> None:
    """Route log records to stderr and, if configured, to a log file."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.logging.file:
        handlers.append(logging.FileHandler(config.logging.file))
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, config.logging.level),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def _load(
    config_file: Optional[Path],
    roots: Optional[List[str]],
    json_mode: bool,
    verbose: bool,
) -> HashfileConfig:
    config_path = config_file or find_config_file()

    overrides: dict[str, Any] = {}
    if roots:
        overrides["paths.roots"] = list(roots)
    if json_mode:
        overrides["output.mode"] = OutputMode.JSON

    try:
        config = load_config(config_path, overrides)
    except Exception as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        raise typer.Exit(1)

    configure_logging(config, verbose)
    return config


def _read_input(source: Optional[Path], what: str) -> str:
    """Read text from *source*, or stdin when it is None or ``-``.

    Bytes are decoded without newline translation so ``\\r\\n`` survives.
    """
    try:
        if source is None or str(source) == "-":
            data = sys.stdin.buffer.read()
        else:
            data = source.read_bytes()
    except OSError as e:
        console.print(f"[red]Cannot read {what} from {source or 'stdin'}: {e}[/red]")
        raise typer.Exit(1)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        console.print(f"[red]The {what} is not valid UTF-8: {e}[/red]")
        raise typer.Exit(1)


def _parse_operations(text: str) -> list[dict[str, Any]]:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        console.print(f"[red]Operations are not valid JSON: {e}[/red]")
        raise typer.Exit(1)
    if isinstance(payload, dict):
        payload = payload.get("operations")
    if not isinstance(payload, list):
        console.print("[red]Expected a JSON array of operations[/red]")
        raise typer.Exit(1)
    return payload


# Options shared by every file command
ConfigOption = typer.Option(None, "--config", "-c", help="Path to config file")
RootOption = typer.Option(
    None, "--root", "-r", help="Permitted root directory (repeatable)"
)
JsonOption = typer.Option(False, "--json", help="Output in JSONL format")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Verbose logging")


@app.command("read")
def read_command(
    path: str = typer.Argument(..., help="File to read"),
    config_file: Optional[Path] = ConfigOption,
    roots: Optional[List[str]] = RootOption,
    json_mode: bool = JsonOption,
    verbose: bool = VerboseOption,
):
    """Print a file as hashline-tagged lines."""
    config = _load(config_file, roots, json_mode, verbose)
    output = OutputProcessor(config)

    result = ToolRegistry(config).read(path)
    if not result.success:
        output.error(result)
        raise typer.Exit(1)
    output.file_read(result)


@app.command("edit")
def edit_command(
    path: str = typer.Argument(..., help="File to edit"),
    file_hash: str = typer.Option(..., "--file-hash", help="file_hash from the last read"),
    ops_file: Optional[Path] = typer.Option(
        None, "--ops", help="JSON file with the operations ('-' for stdin)"
    ),
    config_file: Optional[Path] = ConfigOption,
    roots: Optional[List[str]] = RootOption,
    json_mode: bool = JsonOption,
    verbose: bool = VerboseOption,
):
    """Apply a batch of hash-anchored operations to a file."""
    config = _load(config_file, roots, json_mode, verbose)
    output = OutputProcessor(config)

    operations = _parse_operations(_read_input(ops_file, "operations"))
    result = ToolRegistry(config).edit(path, file_hash, operations)
    if not result.success:
        output.error(result)
        raise typer.Exit(1)
    output.file_edited(result)


@app.command("write")
def write_command(
    path: str = typer.Argument(..., help="File to write"),
    content_file: Optional[Path] = typer.Option(
        None, "--content-file", help="File holding the new content ('-' for stdin)"
    ),
    config_file: Optional[Path] = ConfigOption,
    roots: Optional[List[str]] = RootOption,
    json_mode: bool = JsonOption,
    verbose: bool = VerboseOption,
):
    """Replace a file's content entirely."""
    config = _load(config_file, roots, json_mode, verbose)
    output = OutputProcessor(config)

    content = _read_input(content_file, "content")
    result = ToolRegistry(config).write(path, content)
    if not result.success:
        output.error(result)
        raise typer.Exit(1)
    output.file_written(result)


@app.command("config")
def show_config(
    config_file: Optional[Path] = ConfigOption,
    json_mode: bool = JsonOption,
):
    """Show current configuration."""
    path = config_file or find_config_file()
    config = _load(path, None, json_mode, False)
    output = OutputProcessor(config)
    output.show_config(config.model_dump_json(indent=2), str(path) if path else None)


if __name__ == "__main__":
    app()
