"""
blobfs CLI

Read-only commands over an Azure storage account:
- cat: Write an object's bytes (or a byte range) to stdout
- stat: Show what a path refers to, with blob metadata for files
- ls: List containers, or the entries under a container/prefix
"""
from __future__ import annotations

import logging
from typing import Optional

import typer

from .cli_context import CLIContext
from .operations import run_and_exit
from .operations.printers import print_file_info, print_listing

app = typer.Typer(name="blobfs", help="Read-only filesystem view of Azure Blob Storage")

CHUNK_SIZE = 4 * 1024 * 1024


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        )


@app.command()
def cat(
    path: str = typer.Argument(..., help="Object path: container/key"),
    offset: int = typer.Option(0, "--offset", min=0, help="Start reading at this byte"),
    length: Optional[int] = typer.Option(None, "--length", min=0, help="Read at most this many bytes"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """Write an object's bytes to stdout."""
    _configure_logging(verbose)

    def _cat() -> None:
        context = CLIContext.from_env()
        try:
            fs = context.filesystem
            if offset or length is not None:
                with fs.open_input_file(path) as f:
                    f.seek(offset)
                    typer.echo(f.read(-1 if length is None else length), nl=False)
                return

            with fs.open_input_stream(path) as stream:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    typer.echo(chunk, nl=False)
        finally:
            context.close()

    run_and_exit(_cat)


@app.command()
def stat(
    path: str = typer.Argument(..., help="Path: container, container/prefix or container/key"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """Show file info and metadata for a path."""
    _configure_logging(verbose)

    def _stat() -> None:
        context = CLIContext.from_env()
        try:
            fs = context.filesystem
            info = fs.get_file_info(path)
            metadata = None
            if info.is_file:
                with fs.open_input_file(info) as f:
                    metadata = f.read_metadata()
            print_file_info(info, metadata)
        finally:
            context.close()

    run_and_exit(_stat)


@app.command()
def ls(
    path: str = typer.Argument("", help="Container or container/prefix; empty lists containers"),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="List all entries below path"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """List entries under a path."""
    _configure_logging(verbose)

    def _ls() -> None:
        context = CLIContext.from_env()
        try:
            print_listing(context.filesystem.list_dir(path, recursive=recursive))
        finally:
            context.close()

    run_and_exit(_ls)


if __name__ == "__main__":
    app()
