"""
Filesystem facade over Azure Blob Storage.

AzureFileSystem resolves ``container/key`` paths, checks objects exist when
they are opened, and hands out ObjectInputFile streams that share one
service client. Directories are simulated from key prefixes; nothing here
creates, renames or deletes anything.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Union

from .settings import AzureOptions
from .storage.azure_backend import AzureBlobBackend
from .storage.base import BlobBackend, FileInfo, FileType, IOContext, default_io_context
from .storage.client import SharedServiceClient
from .storage.errors import BlobFsError, InvalidArgument, InvalidState, ObjectNotFound, translate_errors
from .storage.path import SEPARATOR, StoragePath, require_object, resolve_path
from .streams import ObjectInputFile

__all__ = ["AzureFileSystem", "PathOrInfo"]

logger = logging.getLogger(__name__)

PathOrInfo = Union[str, FileInfo]


class AzureFileSystem:
    """
    Read-only filesystem view of one Azure storage account.

    Filesystems compare equal when their options do, so callers can cache
    them by configuration.
    """

    def __init__(
        self,
        options: AzureOptions,
        *,
        backend: Optional[BlobBackend] = None,
        io_context: Optional[IOContext] = None,
    ) -> None:
        """
        Initialize the filesystem and its service client.

        Args:
            options: Validated account and transport configuration
            backend: Service client to use instead of building an
                AzureBlobBackend from options (tests, custom transports)
            io_context: Context propagated to every stream opened

        Raises:
            InvalidArgument: If options is not an AzureOptions, or the SDK
                rejects them when building the service client
        """
        if not isinstance(options, AzureOptions):
            raise InvalidArgument(f"Expected AzureOptions, got {type(options).__name__}")

        self._options = options
        self._io_context = io_context or default_io_context()
        if backend is None:
            try:
                with translate_errors():
                    backend = AzureBlobBackend(options)
            except BlobFsError:
                raise
            except (TypeError, ValueError) as e:
                raise InvalidArgument(f"Cannot build a service client from options: {e}") from e
        self._client = SharedServiceClient(backend)
        logger.debug(f"AzureFileSystem ready for {options.account_blob_url}")

    @classmethod
    def make(cls, options: AzureOptions, *, io_context: Optional[IOContext] = None) -> AzureFileSystem:
        """Create a filesystem with an Azure SDK service client built from options."""
        return cls(options, io_context=io_context)

    @property
    def options(self) -> AzureOptions:
        return self._options

    @property
    def io_context(self) -> IOContext:
        return self._io_context

    @property
    def type_name(self) -> str:
        return "abfs"

    @property
    def closed(self) -> bool:
        return self._client.close_requested

    def _backend(self) -> BlobBackend:
        if self._client.close_requested:
            raise InvalidState("Filesystem is closed")
        return self._client.backend

    # Opening streams

    def open_input_stream(self, target: PathOrInfo) -> ObjectInputFile:
        """
        Open a blob for sequential reading.

        Reads are served from read-ahead chunks of
        ``options.stream_buffer_size`` bytes.

        Args:
            target: ``container/key`` path or a FileInfo for it

        Returns:
            Open stream positioned at 0

        Raises:
            InvalidArgument: For URIs, container paths, paths ending in '/'
                and FileInfo of type DIRECTORY
            ObjectNotFound: If the blob does not exist
            StorageIOError: For other backend failures
        """
        return self._open(target, buffer_size=self._options.stream_buffer_size)

    def open_input_file(self, target: PathOrInfo) -> ObjectInputFile:
        """
        Open a blob for random access.

        Same validation as open_input_stream; reads are not buffered.
        """
        return self._open(target, buffer_size=0)

    def _resolve_target(self, target: PathOrInfo) -> StoragePath:
        if isinstance(target, FileInfo):
            if target.type is FileType.DIRECTORY:
                raise InvalidArgument(f"Cannot open a directory as a file: {target.path}")
            if target.type is FileType.NOT_FOUND:
                raise ObjectNotFound(f"Path does not exist: {target.path}")
            raw = target.path
        elif isinstance(target, str):
            raw = target
        else:
            raise InvalidArgument(f"Expected a path or FileInfo, got {type(target).__name__}")
        return require_object(resolve_path(raw))

    def _open(self, target: PathOrInfo, *, buffer_size: int) -> ObjectInputFile:
        path = self._resolve_target(target)
        backend = self._backend()

        with translate_errors(str(path)):
            properties = backend.get_blob_properties(path.container, path.key)
        logger.debug(f"Opened {path} ({properties.size} bytes)")

        return ObjectInputFile(
            path=path,
            client=self._client,
            properties=properties,
            io_context=self._io_context,
            buffer_size=buffer_size,
        )

    # Metadata and listing

    def get_file_info(self, path: str) -> FileInfo:
        """
        Describe what a path refers to.

        - "" is the root directory
        - A container path is a DIRECTORY if the container exists
        - An object path is a FILE (with size and mtime) if the blob exists,
          otherwise a DIRECTORY if any blob lives under ``path/``
        - Anything else is NOT_FOUND

        Raises:
            InvalidArgument: If the path is malformed
            StorageIOError: For backend failures other than not-found
        """
        backend = self._backend()
        if path == "":
            return FileInfo(path="", type=FileType.DIRECTORY)

        resolved = resolve_path(path)
        if resolved.is_container:
            with translate_errors(path):
                exists = backend.container_exists(resolved.container)
            file_type = FileType.DIRECTORY if exists else FileType.NOT_FOUND
            return FileInfo(path=resolved.container, type=file_type)

        key = resolved.key.rstrip(SEPARATOR)
        normalized = str(StoragePath(resolved.container, key))
        if not resolved.is_prefix:
            try:
                with translate_errors(path):
                    properties = backend.get_blob_properties(resolved.container, key)
                return FileInfo(
                    path=normalized,
                    type=FileType.FILE,
                    size=properties.size,
                    mtime=properties.last_modified,
                )
            except ObjectNotFound:
                pass

        if self._has_entries(resolved.container, key + SEPARATOR):
            return FileInfo(path=normalized, type=FileType.DIRECTORY)
        return FileInfo(path=normalized, type=FileType.NOT_FOUND)

    def _has_entries(self, container: str, prefix: str) -> bool:
        backend = self._backend()
        try:
            with translate_errors(f"{container}/{prefix}"):
                for _ in backend.list_blobs(container, prefix, delimiter=SEPARATOR):
                    return True
        except ObjectNotFound:
            pass
        return False

    def list_dir(self, path: str = "", *, recursive: bool = False) -> List[FileInfo]:
        """
        List the entries under a directory, sorted by path.

        Args:
            path: "" for the account root (lists containers), a container or
                a ``container/prefix`` path
            recursive: Descend into subdirectories; implied directories are
                included

        Returns:
            FileInfo for each entry

        Raises:
            ObjectNotFound: If the container or directory does not exist
            InvalidArgument: If the path names a file
        """
        backend = self._backend()
        if path == "":
            with translate_errors():
                containers = sorted(backend.list_containers())
            infos = [FileInfo(path=name, type=FileType.DIRECTORY) for name in containers]
            if recursive:
                for name in containers:
                    infos.extend(self.list_dir(name, recursive=True))
            return infos

        resolved = resolve_path(path)
        container = resolved.container
        key = resolved.key.rstrip(SEPARATOR)
        prefix = key + SEPARATOR if key else ""

        with translate_errors(path):
            if not backend.container_exists(container):
                raise ObjectNotFound(f"Container does not exist: {container}")
            listing = list(backend.list_blobs(
                container, prefix, delimiter=None if recursive else SEPARATOR
            ))

        entries: Dict[str, FileInfo] = {}
        for item in listing:
            relative = item.name[len(prefix):]
            if not relative:
                # Marker blob of the directory being listed
                continue
            if item.is_prefix or relative.endswith(SEPARATOR):
                # Virtual directory, or a zero-length directory marker blob
                relative = relative.rstrip(SEPARATOR)
                if relative:
                    full = f"{container}{SEPARATOR}{prefix}{relative}"
                    entries[full] = FileInfo(path=full, type=FileType.DIRECTORY)
                continue
            full = f"{container}{SEPARATOR}{item.name}"
            entries[full] = FileInfo(
                path=full,
                type=FileType.FILE,
                size=item.size,
                mtime=item.last_modified,
            )
            if recursive:
                self._add_implied_directories(entries, container, prefix, relative)

        if not listing and key:
            if self.get_file_info(str(resolved)).is_file:
                raise InvalidArgument(f"Path is a file, not a directory: {path}")
            raise ObjectNotFound(f"Directory does not exist: {path}")

        return [entries[name] for name in sorted(entries)]

    @staticmethod
    def _add_implied_directories(
        entries: Dict[str, FileInfo], container: str, prefix: str, relative: str
    ) -> None:
        parts = relative.split(SEPARATOR)[:-1]
        for depth in range(1, len(parts) + 1):
            full = f"{container}{SEPARATOR}{prefix}{SEPARATOR.join(parts[:depth])}"
            if full not in entries:
                entries[full] = FileInfo(path=full, type=FileType.DIRECTORY)

    # Lifecycle

    def close(self) -> None:
        """
        Close the filesystem.

        Streams that are still open keep working; the service client is
        closed when the last of them is closed.
        """
        self._client.close()

    def __enter__(self) -> AzureFileSystem:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AzureFileSystem):
            return NotImplemented
        return self._options == other._options

    def __hash__(self) -> int:
        return hash(self._options)

    def __repr__(self) -> str:
        return f"AzureFileSystem(account={self._options.account_name!r}, backend={self._options.backend!r})"
