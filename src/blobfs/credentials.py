"""
Credential variants for Azure Blob Storage.

Each variant is a frozen dataclass that knows how to build the credential
object the Azure SDK expects. The filesystem never branches on which variant
it was given; it only calls ``build()`` once, when the service client is
constructed.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, runtime_checkable

__all__ = [
    "CredentialProvider",
    "AccountKeyCredentials",
    "ManagedIdentityCredentials",
    "ServicePrincipalCredentials",
    "DefaultCredentials",
]


@runtime_checkable
class CredentialProvider(Protocol):
    """Protocol for objects that produce request-signing credentials."""

    def build(self) -> Any:
        """Return a credential accepted by ``BlobServiceClient(credential=...)``."""
        ...


@dataclass(frozen=True)
class AccountKeyCredentials:
    """Shared key authentication with a storage account name and key."""
    account_name: str
    account_key: str = field(repr=False)

    def __post_init__(self):
        if not self.account_name:
            raise ValueError("account_name is required for account key credentials")
        if not self.account_key:
            raise ValueError("account_key is required for account key credentials")

    def build(self) -> Any:
        from azure.core.credentials import AzureNamedKeyCredential

        return AzureNamedKeyCredential(self.account_name, self.account_key)


@dataclass(frozen=True)
class ManagedIdentityCredentials:
    """
    Managed identity of the host (VM, App Service, AKS pod).

    client_id selects a user-assigned identity; None uses the system identity.
    """
    client_id: Optional[str] = None

    def build(self) -> Any:
        from azure.identity import ManagedIdentityCredential

        if self.client_id:
            return ManagedIdentityCredential(client_id=self.client_id)
        return ManagedIdentityCredential()


@dataclass(frozen=True)
class ServicePrincipalCredentials:
    """Microsoft Entra application authenticating with a client secret."""
    tenant_id: str
    client_id: str
    client_secret: str = field(repr=False)

    def __post_init__(self):
        missing = [
            name for name in ("tenant_id", "client_id", "client_secret")
            if not getattr(self, name)
        ]
        if missing:
            raise ValueError(f"Service principal credentials missing: {', '.join(missing)}")

    def build(self) -> Any:
        from azure.identity import ClientSecretCredential

        return ClientSecretCredential(self.tenant_id, self.client_id, self.client_secret)


@dataclass(frozen=True)
class DefaultCredentials:
    """Azure default credential chain (environment, managed identity, CLI...)."""

    def build(self) -> Any:
        from azure.identity import DefaultAzureCredential

        return DefaultAzureCredential()
