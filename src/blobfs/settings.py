"""
Settings and configuration for blobfs.

Centralizes configuration values and provides validation with fail-fast behavior.
Options are plain frozen dataclasses, so two filesystems built from equal
options compare equal and can be cached by callers.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal, Optional
from urllib.parse import urlparse

from .credentials import (
    AccountKeyCredentials,
    CredentialProvider,
    DefaultCredentials,
    ManagedIdentityCredentials,
    ServicePrincipalCredentials,
)
from .storage.errors import InvalidArgument

__all__ = ["AzureOptions", "Backend", "create_options_from_env"]

Backend = Literal["azure", "azurite"]

AZURITE_BLOB_ENDPOINT = "http://127.0.0.1:10000"
DEFAULT_STREAM_BUFFER_SIZE = 1024 * 1024


@dataclass(frozen=True)
class AzureOptions:
    """
    Configuration for an AzureFileSystem.

    Account Settings:
        account_name: Storage account name (required)
        credentials: One of the credential variants in blobfs.credentials
        backend: "azure" for the public cloud, "azurite" for the local emulator
        blob_endpoint: Custom blob endpoint (private clouds, remote Azurite)

    Transport Settings (handed to the Azure SDK):
        timeout_s: Connection timeout in seconds
        retry_total: Number of SDK retries for failed requests (0=no retry)
        retry_backoff_factor: SDK retry backoff factor in seconds

    Stream Settings:
        stream_buffer_size: Read-ahead chunk size for sequential input
            streams (0 disables buffering)
    """
    account_name: str
    credentials: CredentialProvider
    backend: Backend = "azure"
    blob_endpoint: Optional[str] = None
    timeout_s: float = 60.0
    retry_total: int = 5
    retry_backoff_factor: float = 0.4
    stream_buffer_size: int = DEFAULT_STREAM_BUFFER_SIZE

    def __post_init__(self):
        """Validate options on construction."""
        if not self.account_name:
            raise ValueError("account_name is required")

        if self.backend not in ("azure", "azurite"):
            raise ValueError(f"Unknown backend: {self.backend}. Supported values: azure, azurite")

        if not isinstance(self.credentials, CredentialProvider):
            raise ValueError(f"credentials must provide build(), got {type(self.credentials).__name__}")

        if self.blob_endpoint is not None:
            _validate_endpoint(self.blob_endpoint)

        if self.timeout_s <= 0:
            raise ValueError(f"timeout_s must be positive, got {self.timeout_s}")

        if self.retry_total < 0:
            raise ValueError(f"retry_total must be non-negative, got {self.retry_total}")

        if self.retry_backoff_factor < 0:
            raise ValueError(f"retry_backoff_factor must be non-negative, got {self.retry_backoff_factor}")

        if self.stream_buffer_size < 0:
            raise ValueError(f"stream_buffer_size must be non-negative, got {self.stream_buffer_size}")

    @property
    def account_blob_url(self) -> str:
        """
        Blob service URL for the account.

        Examples:
            azure:   https://myaccount.blob.core.windows.net/
            azurite: http://127.0.0.1:10000/devstoreaccount1/
            custom:  {blob_endpoint}/myaccount/
        """
        if self.blob_endpoint:
            return f"{self.blob_endpoint.rstrip('/')}/{self.account_name}/"
        if self.backend == "azurite":
            return f"{AZURITE_BLOB_ENDPOINT}/{self.account_name}/"
        return f"https://{self.account_name}.blob.core.windows.net/"

    @classmethod
    def with_account_key(
        cls,
        account_name: str,
        account_key: str,
        *,
        backend: Backend = "azure",
        **kwargs,
    ) -> AzureOptions:
        """Build options authenticating with the storage account key."""
        return cls(
            account_name=account_name,
            credentials=AccountKeyCredentials(account_name, account_key),
            backend=backend,
            **kwargs,
        )


def _validate_endpoint(endpoint: str) -> None:
    if "://" not in endpoint:
        raise InvalidArgument(f"blob_endpoint must include a scheme, got {endpoint}")
    try:
        parsed = urlparse(endpoint)
        parsed.port  # raises for a malformed port
    except ValueError as e:
        raise InvalidArgument(f"Invalid blob_endpoint format: {endpoint}") from e
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidArgument(f"Invalid blob_endpoint format: {endpoint}")


def create_options_from_env() -> AzureOptions:
    """
    Load options from environment variables.

    Environment Variables:
        Account:
        - AZURE_STORAGE_ACCOUNT (required)
        - BLOBFS_BACKEND (default: azure)
        - BLOBFS_BLOB_ENDPOINT (optional, for Azurite/custom endpoints)

        Credentials:
        - BLOBFS_CREDENTIAL: account_key | managed_identity | service_principal | default
          (inferred when unset: account_key if AZURE_STORAGE_KEY is set,
          service_principal if AZURE_CLIENT_SECRET is set, otherwise default)
        - AZURE_STORAGE_KEY
        - AZURE_TENANT_ID, AZURE_CLIENT_ID, AZURE_CLIENT_SECRET

        Transport:
        - BLOBFS_TIMEOUT (default: 60.0)
        - BLOBFS_RETRY_TOTAL (default: 5)
        - BLOBFS_STREAM_BUFFER_SIZE (default: 1048576)

    Returns:
        AzureOptions with validated configuration

    Raises:
        ValueError: If configuration is invalid or required values missing

    Note:
        Creates a fresh AzureOptions instance every time (no caching).
    """
    def get_float(key: str, default: float) -> float:
        value = os.getenv(key)
        return float(value) if value else default

    def get_int(key: str, default: int) -> int:
        value = os.getenv(key)
        return int(value) if value else default

    account_name = os.getenv("AZURE_STORAGE_ACCOUNT")
    if not account_name:
        raise ValueError("AZURE_STORAGE_ACCOUNT environment variable is required")

    return AzureOptions(
        account_name=account_name,
        credentials=_credentials_from_env(account_name),
        backend=os.getenv("BLOBFS_BACKEND", "azure").lower(),  # type: ignore[arg-type]
        blob_endpoint=os.getenv("BLOBFS_BLOB_ENDPOINT") or None,
        timeout_s=get_float("BLOBFS_TIMEOUT", 60.0),
        retry_total=get_int("BLOBFS_RETRY_TOTAL", 5),
        stream_buffer_size=get_int("BLOBFS_STREAM_BUFFER_SIZE", DEFAULT_STREAM_BUFFER_SIZE),
    )


def _credentials_from_env(account_name: str) -> CredentialProvider:
    account_key = os.getenv("AZURE_STORAGE_KEY")
    tenant_id = os.getenv("AZURE_TENANT_ID")
    client_id = os.getenv("AZURE_CLIENT_ID")
    client_secret = os.getenv("AZURE_CLIENT_SECRET")

    kind = os.getenv("BLOBFS_CREDENTIAL", "").lower()
    if not kind:
        if account_key:
            kind = "account_key"
        elif client_secret:
            kind = "service_principal"
        else:
            kind = "default"

    if kind == "account_key":
        if not account_key:
            raise ValueError("BLOBFS_CREDENTIAL=account_key but AZURE_STORAGE_KEY is missing")
        return AccountKeyCredentials(account_name, account_key)
    elif kind == "service_principal":
        return ServicePrincipalCredentials(
            tenant_id=tenant_id or "",
            client_id=client_id or "",
            client_secret=client_secret or "",
        )
    elif kind == "managed_identity":
        return ManagedIdentityCredentials(client_id=client_id)
    elif kind == "default":
        return DefaultCredentials()
    else:
        raise ValueError(
            f"Unknown BLOBFS_CREDENTIAL: {kind}. "
            f"Supported values: account_key, managed_identity, service_principal, default"
        )
