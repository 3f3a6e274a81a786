"""
Normalization of blob properties into key-value metadata.

The Azure SDK exposes blob properties as nested objects with backend-specific
names and value types. Readers expose them instead as an ordered record of
canonical keys and plain string values, built from an explicit allow-list.
Properties missing from the backend object are dropped; values that fail to
parse are passed through verbatim.
"""
from __future__ import annotations

import base64
import binascii
import enum
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Callable, Iterator, Optional, Tuple

__all__ = ["MetadataRecord", "METADATA_FIELDS", "normalize_properties", "format_timestamp"]

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_MISSING = object()

_HEX_DIGEST = re.compile(r"[0-9a-fA-F]{32}")


@dataclass(frozen=True)
class MetadataRecord:
    """Ordered, read-only mapping of canonical property names to strings."""
    items: Tuple[Tuple[str, str], ...] = ()

    def keys(self) -> list[str]:
        return [k for k, _ in self.items]

    def values(self) -> list[str]:
        return [v for _, v in self.items]

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        for k, v in self.items:
            if k == key:
                return v
        return default

    def to_dict(self) -> dict[str, str]:
        return dict(self.items)

    def __getitem__(self, key: str) -> str:
        value = self.get(key, _MISSING)  # type: ignore[arg-type]
        if value is _MISSING:
            raise KeyError(key)
        return value

    def __contains__(self, key: object) -> bool:
        return any(k == key for k, _ in self.items)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self.items)

    def __str__(self) -> str:
        return "\n".join(f"{k}: {v}" for k, v in self.items)


def _plain(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, enum.Enum):
        return str(value.value)
    return str(value)


def format_timestamp(value: Any) -> str:
    """
    Render a timestamp as ISO-8601 UTC with second precision.

    Accepts datetimes (naive ones are taken as UTC) and ISO-8601 or RFC 1123
    strings. Anything else is returned unchanged.
    """
    if value is None:
        return ""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = _parse_timestamp(value)
        if parsed is None:
            return value
    else:
        return _plain(value)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def _parse_timestamp(text: str) -> Optional[datetime]:
    candidate = text.strip()
    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(candidate)
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None


def format_content_hash(value: Any) -> str:
    """
    Render a content digest as lowercase hex.

    Binary digests are hex-encoded directly. A string already in 32-digit hex
    form is lowercased; other strings are taken as base64 (the
    ``Content-MD5`` wire form). Undecodable values pass through.
    """
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    if isinstance(value, str):
        if _HEX_DIGEST.fullmatch(value):
            return value.lower()
        try:
            return base64.b64decode(value, validate=True).hex()
        except (binascii.Error, ValueError):
            return value
    return _plain(value)


# Canonical key -> (dotted attribute path on the native properties, formatter)
METADATA_FIELDS: Tuple[Tuple[str, str, Callable[[Any], str]], ...] = (
    ("Content-Type", "content_settings.content_type", _plain),
    ("Content-Encoding", "content_settings.content_encoding", _plain),
    ("Content-Language", "content_settings.content_language", _plain),
    ("Content-Hash", "content_settings.content_md5", format_content_hash),
    ("Content-Disposition", "content_settings.content_disposition", _plain),
    ("Cache-Control", "content_settings.cache_control", _plain),
    ("Last-Modified", "last_modified", format_timestamp),
    ("Created-On", "creation_time", format_timestamp),
    ("Blob-Type", "blob_type", _plain),
    ("Lease-State", "lease.state", _plain),
    ("Lease-Status", "lease.status", _plain),
    ("Content-Length", "size", _plain),
    ("ETag", "etag", _plain),
    ("IsServerEncrypted", "server_encrypted", _plain),
    ("Access-Tier", "blob_tier", _plain),
    ("Is-Access-Tier-Inferred", "blob_tier_inferred", _plain),
    ("Access-Tier-Changed-On", "blob_tier_change_time", format_timestamp),
    ("Has-Legal-Hold", "has_legal_hold", _plain),
)


def _lookup(properties: Any, dotted: str) -> Any:
    value = properties
    for name in dotted.split("."):
        if value is None:
            return None
        if isinstance(value, dict):
            value = value.get(name, _MISSING)
        else:
            value = getattr(value, name, _MISSING)
        if value is _MISSING:
            return _MISSING
    return value


def normalize_properties(properties: Any) -> MetadataRecord:
    """
    Build a MetadataRecord from backend blob properties.

    Args:
        properties: ``azure.storage.blob.BlobProperties`` or any object (or
            nested dict) with the same attribute shape

    Returns:
        MetadataRecord with canonical keys in fixed order
    """
    items = []
    for canonical, dotted, formatter in METADATA_FIELDS:
        raw = _lookup(properties, dotted)
        if raw is _MISSING:
            continue
        items.append((canonical, formatter(raw)))
    return MetadataRecord(items=tuple(items))
