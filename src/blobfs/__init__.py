"""
blobfs - read-only filesystem adapter for Azure Blob Storage.
"""
from .credentials import (
    AccountKeyCredentials,
    CredentialProvider,
    DefaultCredentials,
    ManagedIdentityCredentials,
    ServicePrincipalCredentials,
)
from .filesystem import AzureFileSystem
from .settings import AzureOptions, create_options_from_env
from .storage.base import FileInfo, FileType, IOContext
from .storage.errors import BlobFsError, InvalidArgument, InvalidState, ObjectNotFound, StorageIOError
from .storage.metadata import MetadataRecord
from .streams import ObjectInputFile

__all__ = [
    "AccountKeyCredentials",
    "AzureFileSystem",
    "AzureOptions",
    "BlobFsError",
    "CredentialProvider",
    "DefaultCredentials",
    "FileInfo",
    "FileType",
    "IOContext",
    "InvalidArgument",
    "InvalidState",
    "ManagedIdentityCredentials",
    "MetadataRecord",
    "ObjectInputFile",
    "ObjectNotFound",
    "ServicePrincipalCredentials",
    "StorageIOError",
    "create_options_from_env",
]
