"""
Storage interfaces for blobfs.

These protocols define the boundary between the filesystem adapter and the
blob service client, enabling clean dependency injection and testing with
fakes.
"""
from __future__ import annotations

import enum
from concurrent.futures import Executor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Optional, Protocol, runtime_checkable

__all__ = [
    "FileType",
    "FileInfo",
    "IOContext",
    "default_io_context",
    "BlobListing",
    "BlobBackend",
]


class FileType(enum.Enum):
    """Kind of entry a path resolves to."""
    NOT_FOUND = "not_found"
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class FileInfo:
    """
    Information about a path in the filesystem.

    Invariants:
    - size and mtime are only populated for files
    - path uses the ``container/key`` form, "" for the root
    """
    path: str
    type: FileType
    size: Optional[int] = None
    mtime: Optional[datetime] = None

    @property
    def is_file(self) -> bool:
        return self.type is FileType.FILE

    @property
    def base_name(self) -> str:
        return self.path.rstrip("/").rsplit("/", 1)[-1]


@dataclass(frozen=True)
class IOContext:
    """
    Scheduling context a filesystem hands to every stream it opens.

    Two contexts compare equal when their external ids match, which lets
    callers verify that a stream came from a given filesystem.
    """
    external_id: Optional[int] = None
    executor: Optional[Executor] = field(default=None, compare=False, repr=False)


_DEFAULT_IO_CONTEXT = IOContext()


def default_io_context() -> IOContext:
    return _DEFAULT_IO_CONTEXT


@dataclass(frozen=True)
class BlobListing:
    """
    One entry returned when listing a container.

    ``is_prefix`` entries stand for virtual directories (their name ends with
    ``/``); size and last_modified are None for them.
    """
    name: str
    is_prefix: bool = False
    size: Optional[int] = None
    last_modified: Optional[datetime] = None


@runtime_checkable
class BlobBackend(Protocol):
    """
    Primitive operations of the blob service.

    Implementations raise the service's native exceptions (for Azure,
    ``azure.core.exceptions``); the filesystem translates them.
    """

    def container_exists(self, container: str) -> bool:
        """Return True if the container exists."""
        ...

    def get_blob_properties(self, container: str, key: str) -> Any:
        """
        Fetch blob properties without content.

        Returns:
            Object shaped like ``azure.storage.blob.BlobProperties``
            (at least ``size`` and ``last_modified``)

        Raises:
            ResourceNotFoundError: If the blob or container does not exist
        """
        ...

    def download_range(self, container: str, key: str, offset: int, length: int) -> bytes:
        """
        Fetch ``length`` bytes of a blob starting at ``offset``.

        Callers never request bytes past the end of the blob.
        """
        ...

    def list_containers(self) -> Iterable[str]:
        """Yield container names."""
        ...

    def list_blobs(
        self,
        container: str,
        prefix: str = "",
        delimiter: Optional[str] = None,
    ) -> Iterable[BlobListing]:
        """
        Yield blobs whose name starts with ``prefix``.

        With a delimiter, names are rolled up at the first delimiter after
        the prefix into ``is_prefix`` entries.

        Raises:
            ResourceNotFoundError: If the container does not exist
        """
        ...

    def close(self) -> None:
        """Release network resources."""
        ...
