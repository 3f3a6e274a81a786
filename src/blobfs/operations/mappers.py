"""
Error mapping and CLI utilities.

Provides centralized exception-to-exit-code mapping and CLI command wrappers
to ensure consistent error handling across all Typer commands.
"""
from __future__ import annotations

import logging
from typing import Callable, TypeVar

import typer

from ..storage.errors import InvalidArgument, InvalidState, ObjectNotFound, StorageIOError

T = TypeVar('T')

logger = logging.getLogger(__name__)

# Checked in order; the first matching type wins
EXIT_CODES: tuple[tuple[type[BaseException], int], ...] = (
    (ObjectNotFound, 1),
    (InvalidArgument, 2),
    (InvalidState, 2),
    (ValueError, 2),
    (StorageIOError, 3),
)

FALLBACK_EXIT_CODE = 3


def exit_code_for(exc: BaseException) -> int:
    """
    Map exception to standardized exit code.

    Returns:
    - 1: Path does not exist (ObjectNotFound)
    - 2: Invalid path, argument or state (InvalidArgument, InvalidState, ValueError)
    - 3: Storage/network error (StorageIOError) or unknown error

    Args:
        exc: Exception to map

    Returns:
        Exit code (1-3, with 3 as fallback for unknown exceptions)
    """
    for exc_type, code in EXIT_CODES:
        if isinstance(exc, exc_type):
            return code
    return FALLBACK_EXIT_CODE


def run_and_exit(func: Callable[[], T]) -> T:
    """
    Unified error wrapper for CLI commands.

    Executes the given function and maps any exceptions to appropriate
    exit codes using typer.Exit. The error message goes to stderr so
    stdout stays clean for object bytes.

    Args:
        func: Function to execute

    Returns:
        Function result if successful

    Raises:
        typer.Exit: With appropriate exit code if function raises exception
    """
    try:
        return func()
    except Exception as e:
        logger.debug("Command failed", exc_info=True)
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=exit_code_for(e)) from e
