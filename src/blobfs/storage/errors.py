"""
Error taxonomy for blobfs and translation of Azure failures into it.

Callers only ever see four error kinds, whatever went wrong underneath:
ObjectNotFound, InvalidArgument, InvalidState and StorageIOError. Azure SDK
and transport exceptions are translated at the boundary and chained as
``__cause__`` so the original diagnostic is never lost.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from azure.core.exceptions import (
    AzureError,
    ClientAuthenticationError,
    HttpResponseError,
    ResourceNotFoundError,
)

__all__ = [
    "BlobFsError",
    "ObjectNotFound",
    "InvalidArgument",
    "InvalidState",
    "StorageIOError",
    "translate_error",
    "translate_errors",
]

logger = logging.getLogger(__name__)

# Storage service error codes that mean "nothing lives at this name"
NOT_FOUND_CODES = frozenset({"BlobNotFound", "ContainerNotFound", "ResourceNotFound"})
INVALID_RANGE_CODES = frozenset({"InvalidRange"})


class BlobFsError(Exception):
    """Base class for every error raised by blobfs."""
    pass


class ObjectNotFound(BlobFsError, FileNotFoundError):
    """
    Object or container does not exist.

    Also a FileNotFoundError, so it belongs to the OSError (I/O) category
    for callers that only catch builtin exceptions.
    """
    pass


class InvalidArgument(BlobFsError, ValueError):
    """
    Request is malformed.

    Raised when:
    - Path is scheme-qualified (``abfss://...``), empty or otherwise malformed
    - A container or directory-shaped path is used where a file is required
    - A seek or read position is out of range
    """
    pass


class InvalidState(BlobFsError, ValueError):
    """Operation attempted on a closed stream or filesystem."""
    pass


class StorageIOError(BlobFsError, OSError):
    """
    Any other backend or transport failure.

    Carries the backend's HTTP status and service error code (when known)
    for diagnostics. Never branch on the message text.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code

    def __str__(self) -> str:
        return self.message


def _describe(exc: BaseException) -> str:
    message = getattr(exc, "message", None) or str(exc)
    # Azure messages can span several lines of request diagnostics
    return message.splitlines()[0] if message else type(exc).__name__


def translate_error(exc: BaseException, *, path: Optional[str] = None) -> BlobFsError:
    """
    Map a backend or transport exception onto the blobfs taxonomy.

    Args:
        exc: Exception raised by the backend client
        path: Path being operated on, used in the message

    Returns:
        The equivalent BlobFsError (``exc`` itself if it already is one)
    """
    if isinstance(exc, BlobFsError):
        return exc

    where = f" for {path}" if path else ""
    status_code = getattr(exc, "status_code", None)
    error_code = getattr(exc, "error_code", None)
    if error_code is not None:
        error_code = str(error_code)

    if (
        isinstance(exc, ResourceNotFoundError)
        or status_code == 404
        or error_code in NOT_FOUND_CODES
    ):
        return ObjectNotFound(f"Path does not exist{where}: {_describe(exc)}")

    if status_code == 416 or error_code in INVALID_RANGE_CODES:
        return InvalidArgument(f"Requested range not satisfiable{where}: {_describe(exc)}")

    if isinstance(exc, ClientAuthenticationError):
        summary = "Azure authentication failed"
    elif isinstance(exc, HttpResponseError):
        summary = f"Azure request failed with status {status_code}"
    elif isinstance(exc, AzureError):
        summary = "Azure transport error"
    else:
        summary = "I/O error"

    return StorageIOError(
        f"{summary}{where}: {_describe(exc)}",
        status_code=status_code,
        error_code=error_code,
    )


@contextmanager
def translate_errors(path: Optional[str] = None) -> Iterator[None]:
    """
    Translate any backend failure raised inside the block.

    Usage:
        with translate_errors("container/key"):
            backend.get_blob_properties("container", "key")
    """
    try:
        yield
    except BlobFsError:
        raise
    except (AzureError, OSError) as e:
        translated = translate_error(e, path=path)
        if isinstance(translated, StorageIOError):
            logger.warning(f"{translated} (status={translated.status_code}, code={translated.error_code})")
        raise translated from e
