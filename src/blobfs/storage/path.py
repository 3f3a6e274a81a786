"""
Path resolution for blob storage.

Filesystem paths take the form ``container/key`` where the key may contain
further ``/`` separated segments. The store itself is flat, so a key ending
in ``/`` can only ever be a prefix, never a readable object.
"""
from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidArgument

__all__ = ["SEPARATOR", "StoragePath", "resolve_path", "require_object"]

SEPARATOR = "/"


@dataclass(frozen=True)
class StoragePath:
    """
    A filesystem path split into container and object key.

    Attributes:
        container: Container name (never empty)
        key: Object key within the container, "" for the container itself
    """
    container: str
    key: str = ""

    @property
    def is_container(self) -> bool:
        return not self.key

    @property
    def is_prefix(self) -> bool:
        """True when the key names a directory-like prefix (``dir/``)."""
        return self.key.endswith(SEPARATOR)

    def __str__(self) -> str:
        if not self.key:
            return self.container
        return f"{self.container}{SEPARATOR}{self.key}"


def resolve_path(raw: str) -> StoragePath:
    """
    Parse a filesystem path into container and key.

    Validation:
    - Rejects scheme-qualified paths (``abfss://container/key``)
    - Rejects empty paths, backslashes and leading ``/``
    - ``"container"`` and ``"container/"`` both name the container itself

    Args:
        raw: Path as supplied by the caller

    Returns:
        StoragePath with validated components

    Raises:
        InvalidArgument: If the path is malformed

    Examples:
        >>> resolve_path("data/models/model.pkl")
        StoragePath(container='data', key='models/model.pkl')

        >>> resolve_path("data")
        StoragePath(container='data', key='')
    """
    if not raw:
        raise InvalidArgument("Path cannot be empty")

    if "://" in raw:
        raise InvalidArgument(f"Expected a container/key path, got a URI: {raw}")

    if "\\" in raw:
        raise InvalidArgument(f"Path contains backslashes (use forward slashes): {raw}")

    if raw.startswith(SEPARATOR):
        raise InvalidArgument(f"Path cannot start with '{SEPARATOR}': {raw}")

    container, _, key = raw.partition(SEPARATOR)
    return StoragePath(container=container, key=key)


def require_object(path: StoragePath) -> StoragePath:
    """
    Ensure a path can address an object.

    Raises:
        InvalidArgument: If the path names a container or a prefix
    """
    if path.is_container:
        raise InvalidArgument(f"Path names a container, not a file: {path}")
    if path.is_prefix:
        raise InvalidArgument(f"Path ends with '{SEPARATOR}' and cannot be a file: {path}")
    return path
