"""
Shared ownership of a backend service client.

A filesystem and every stream it opens share one backend. Streams take a
lease when opened and release it when closed; the backend is only closed
once the filesystem has been closed and the last lease released.
"""
from __future__ import annotations

import logging
import threading

from .base import BlobBackend
from .errors import InvalidState

__all__ = ["SharedServiceClient"]

logger = logging.getLogger(__name__)


class SharedServiceClient:
    """Reference-counted wrapper around a BlobBackend."""

    def __init__(self, backend: BlobBackend) -> None:
        self._backend = backend
        self._lock = threading.Lock()
        self._leases = 0
        self._close_requested = False
        self._closed = False

    @property
    def backend(self) -> BlobBackend:
        return self._backend

    @property
    def leases(self) -> int:
        return self._leases

    @property
    def close_requested(self) -> bool:
        return self._close_requested

    @property
    def closed(self) -> bool:
        return self._closed

    def acquire(self) -> BlobBackend:
        """
        Take a lease on the backend for a new stream.

        Raises:
            InvalidState: If the owning filesystem was already closed
        """
        with self._lock:
            if self._close_requested:
                raise InvalidState("Filesystem is closed")
            self._leases += 1
            return self._backend

    def release(self) -> None:
        """Return a lease taken with acquire()."""
        with self._lock:
            if self._leases == 0:
                raise InvalidState("release() without a matching acquire()")
            self._leases -= 1
            should_close = self._close_requested and self._leases == 0
        if should_close:
            self._close_backend()

    def close(self) -> None:
        """Request closure; the backend closes once no lease is outstanding."""
        with self._lock:
            if self._close_requested:
                return
            self._close_requested = True
            should_close = self._leases == 0
        if should_close:
            self._close_backend()
        else:
            logger.debug(f"Deferring backend close until {self._leases} open stream(s) are closed")

    def _close_backend(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._backend.close()
