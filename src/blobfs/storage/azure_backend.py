"""
Azure Blob Storage implementation of the BlobBackend protocol.

Thin layer over ``azure-storage-blob``: it performs no error translation and
no retries of its own. Transport retry and timeouts are configured on the SDK
client from AzureOptions.
"""
from __future__ import annotations

import logging
from typing import Any, Iterator, Optional

from azure.storage.blob import BlobPrefix, BlobServiceClient

from ..settings import AzureOptions
from .base import BlobBackend, BlobListing

__all__ = ["AzureBlobBackend"]

logger = logging.getLogger(__name__)


class AzureBlobBackend(BlobBackend):
    """
    BlobBackend backed by ``BlobServiceClient``.

    One instance owns one service client; container and blob clients are
    derived per call and never cached, so the instance holds no per-object
    state and is safe to share across threads.
    """

    def __init__(self, options: AzureOptions) -> None:
        """
        Initialize the service client from options.

        Args:
            options: Account, credential and transport configuration
        """
        self._options = options
        # Log configuration (without secrets)
        logger.debug(
            f"Azure backend for account {options.account_name} at {options.account_blob_url} "
            f"using {type(options.credentials).__name__}"
        )
        logger.debug(
            f"Azure backend timeout: {options.timeout_s}s, retry_total: {options.retry_total}, "
            f"retry_backoff_factor: {options.retry_backoff_factor}"
        )
        self._service_client = BlobServiceClient(
            account_url=options.account_blob_url,
            credential=options.credentials.build(),
            connection_timeout=options.timeout_s,
            retry_total=options.retry_total,
            retry_backoff_factor=options.retry_backoff_factor,
        )

    @property
    def service_client(self) -> BlobServiceClient:
        return self._service_client

    def container_exists(self, container: str) -> bool:
        return self._service_client.get_container_client(container).exists()

    def get_blob_properties(self, container: str, key: str) -> Any:
        blob_client = self._service_client.get_blob_client(container=container, blob=key)
        return blob_client.get_blob_properties()

    def download_range(self, container: str, key: str, offset: int, length: int) -> bytes:
        logger.debug(f"Ranged fetch {container}/{key} [{offset}, {offset + length})")
        blob_client = self._service_client.get_blob_client(container=container, blob=key)
        return blob_client.download_blob(offset=offset, length=length).readall()

    def list_containers(self) -> Iterator[str]:
        for container in self._service_client.list_containers():
            yield container.name

    def list_blobs(
        self,
        container: str,
        prefix: str = "",
        delimiter: Optional[str] = None,
    ) -> Iterator[BlobListing]:
        container_client = self._service_client.get_container_client(container)
        if delimiter:
            items = container_client.walk_blobs(name_starts_with=prefix or None, delimiter=delimiter)
        else:
            items = container_client.list_blobs(name_starts_with=prefix or None)

        for item in items:
            if isinstance(item, BlobPrefix):
                yield BlobListing(name=item.name, is_prefix=True)
            else:
                yield BlobListing(
                    name=item.name,
                    size=item.size,
                    last_modified=item.last_modified,
                )

    def close(self) -> None:
        logger.debug(f"Closing Azure backend for account {self._options.account_name}")
        self._service_client.close()
