"""
Human-readable output formatting.

Centralizes all CLI output formatting so CLI commands stay thin and focused.
"""
from __future__ import annotations

from typing import Iterable, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..storage.base import FileInfo, FileType
from ..storage.metadata import MetadataRecord

_console = Console(highlight=False)

_TYPE_LABELS = {
    FileType.FILE: "file",
    FileType.DIRECTORY: "dir",
    FileType.NOT_FOUND: "missing",
}


def print_file_info(info: FileInfo, metadata: Optional[MetadataRecord] = None) -> None:
    """
    Print what a path refers to and, for files, its metadata.

    Args:
        info: File info returned by get_file_info
        metadata: Normalized blob properties, if the path is a file
    """
    _console.print(f"[bold]Path:[/] {escape(info.path or '/')}")
    _console.print(f"[bold]Type:[/] {_TYPE_LABELS[info.type]}")
    if info.size is not None:
        _console.print(f"[bold]Size:[/] {_format_bytes(info.size)} ({info.size} bytes)")
    if info.mtime is not None:
        _console.print(f"[bold]Modified:[/] {info.mtime.isoformat()}")

    if metadata:
        table = Table(title="Metadata")
        table.add_column("Property", style="cyan", no_wrap=True)
        table.add_column("Value", style="yellow", overflow="fold")
        for key, value in metadata.items:
            table.add_row(key, escape(value))
        _console.print(table)


def print_listing(entries: Iterable[FileInfo]) -> None:
    """
    Print one line per entry: type, size and path.

    Directories are shown with a trailing '/'.
    """
    count = 0
    for info in entries:
        count += 1
        if info.type is FileType.DIRECTORY:
            typer.echo(f"{'dir':<4} {'-':>10}  {info.path}/")
        else:
            size = _format_bytes(info.size or 0)
            typer.echo(f"{'file':<4} {size:>10}  {info.path}")
    if count == 0:
        typer.echo("(empty)")


def _format_bytes(size_bytes: int) -> str:
    """
    Format byte count as human-readable string.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted string (e.g., "1.5 MB", "42 KB")
    """
    if size_bytes == 0:
        return "0 B"
    elif size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f} MB"
    else:
        return f"{size_bytes / (1024 * 1024 * 1024):.1f} GB"
