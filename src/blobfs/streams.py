"""
Readable streams over remote blobs.

ObjectInputFile serves both sequential reads (``read``, ``seek``, ``tell``)
and positional reads (``read_at``) with ranged downloads. The blob size is
snapshotted from the properties fetched when the stream was opened; every
read is clamped to that snapshot, so a blob growing or shrinking underneath
an open stream does not change what the stream considers end-of-object.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Optional

from .storage.base import IOContext
from .storage.client import SharedServiceClient
from .storage.errors import InvalidArgument, InvalidState, translate_errors
from .storage.metadata import MetadataRecord, normalize_properties
from .storage.path import StoragePath

__all__ = ["ObjectInputFile"]

logger = logging.getLogger(__name__)

_default_executor: Optional[ThreadPoolExecutor] = None
_default_executor_lock = threading.Lock()


def _get_default_executor() -> Executor:
    global _default_executor
    with _default_executor_lock:
        if _default_executor is None:
            _default_executor = ThreadPoolExecutor(thread_name_prefix="blobfs-io")
        return _default_executor


class ObjectInputFile:
    """
    Random-access, read-only view of one blob.

    Sequential state (position and read-ahead buffer) is guarded by a lock.
    ``read_at`` never touches that state, so positional reads may run
    concurrently with each other and with ``read``. Several threads calling
    ``read`` on one stream get individually correct reads but no particular
    interleaving; open one stream per reader for independent cursors.
    """

    def __init__(
        self,
        *,
        path: StoragePath,
        client: SharedServiceClient,
        properties: Any,
        io_context: IOContext,
        buffer_size: int = 0,
    ) -> None:
        """
        Bind a stream to an existing blob.

        Args:
            path: Resolved object path
            client: Shared service client; a lease is held until close()
            properties: Blob properties fetched at open time
            io_context: Context of the filesystem that opened the stream
            buffer_size: Read-ahead chunk size for ``read`` (0 disables)
        """
        self._path = path
        self._properties = properties
        self._size = int(properties.size or 0)
        self._io_context = io_context
        self._buffer_size = buffer_size
        self._lock = threading.Lock()
        self._position = 0
        self._buffer = b""
        self._buffer_start = 0
        self._client = client
        self._backend = client.acquire()
        self._closed = False

    @property
    def path(self) -> str:
        return str(self._path)

    @property
    def io_context(self) -> IOContext:
        return self._io_context

    @property
    def closed(self) -> bool:
        return self._closed

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def _check_closed(self) -> None:
        if self._closed:
            raise InvalidState(f"Operation on closed stream: {self._path}")

    def size(self) -> int:
        """Size of the blob in bytes, as of when the stream was opened."""
        self._check_closed()
        return self._size

    def tell(self) -> int:
        self._check_closed()
        return self._position

    def seek(self, position: int) -> int:
        """
        Move the read cursor to an absolute position.

        Raises:
            InvalidArgument: If position is outside [0, size]
            InvalidState: If the stream is closed
        """
        self._check_closed()
        if position < 0 or position > self._size:
            raise InvalidArgument(
                f"Cannot seek to {position} in {self._path}: valid range is [0, {self._size}]"
            )
        with self._lock:
            self._position = position
        return position

    def read(self, nbytes: int = -1) -> bytes:
        """
        Read up to ``nbytes`` from the current position and advance it.

        Returns fewer bytes only at end of object; ``b""`` means end of
        stream. A negative ``nbytes`` reads everything that is left.
        """
        self._check_closed()
        with self._lock:
            self._check_closed()
            remaining = self._size - self._position
            if nbytes is None or nbytes < 0:
                nbytes = remaining
            nbytes = min(nbytes, remaining)
            if nbytes <= 0:
                return b""

            if self._buffer_size > 0:
                data = self._read_buffered(nbytes)
            else:
                data = self._fetch(self._position, nbytes)
            self._position += len(data)
            return data

    def _read_buffered(self, nbytes: int) -> bytes:
        offset = self._position - self._buffer_start
        if 0 <= offset < len(self._buffer):
            chunk = self._buffer[offset:offset + nbytes]
        else:
            chunk = b""

        missing = nbytes - len(chunk)
        if missing > 0:
            start = self._position + len(chunk)
            length = min(max(missing, self._buffer_size), self._size - start)
            fetched = self._fetch(start, length)
            self._buffer = fetched
            self._buffer_start = start
            chunk += fetched[:missing]
        return chunk

    def read_at(self, position: int, nbytes: int) -> bytes:
        """
        Read up to ``nbytes`` starting at ``position`` without moving the cursor.

        Raises:
            InvalidArgument: If position is outside [0, size] or nbytes is negative
            InvalidState: If the stream is closed
        """
        self._check_closed()
        self._check_range(position, nbytes)
        nbytes = min(nbytes, self._size - position)
        if nbytes == 0:
            return b""
        return self._fetch(position, nbytes)

    def _check_range(self, position: int, nbytes: int) -> None:
        if nbytes < 0:
            raise InvalidArgument(f"Cannot read a negative number of bytes: {nbytes}")
        if position < 0 or position > self._size:
            raise InvalidArgument(
                f"Cannot read at {position} in {self._path}: valid range is [0, {self._size}]"
            )

    def read_async(self, position: int, nbytes: int) -> Future[bytes]:
        """
        Run ``read_at`` on the I/O context's executor.

        Argument and state errors are raised immediately; backend errors are
        delivered through the returned future.
        """
        self._check_closed()
        self._check_range(position, nbytes)
        executor = self._io_context.executor or _get_default_executor()
        return executor.submit(self.read_at, position, nbytes)

    def read_metadata(self) -> MetadataRecord:
        """Normalized properties of the blob, as of when the stream was opened."""
        self._check_closed()
        return normalize_properties(self._properties)

    def _fetch(self, offset: int, length: int) -> bytes:
        with translate_errors(str(self._path)):
            data = self._backend.download_range(
                self._path.container, self._path.key, offset, length
            )
        if len(data) > length:
            data = data[:length]
        return bytes(data)

    def close(self) -> None:
        """Close the stream and release its lease on the service client. Idempotent."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._buffer = b""
        logger.debug(f"Closed stream {self._path}")
        self._client.release()

    def __enter__(self) -> ObjectInputFile:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __del__(self):
        if not getattr(self, "_closed", True):
            self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else f"position={self._position}"
        return f"ObjectInputFile(path={str(self._path)!r}, size={self._size}, {state})"
