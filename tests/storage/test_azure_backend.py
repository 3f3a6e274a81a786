"""
Conformance tests for the Azure blob backend.

Tests AzureBlobBackend with a patched BlobServiceClient to verify correct
SDK usage without real network calls.
"""
from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import Mock, patch

import pytest
from azure.core.credentials import AzureNamedKeyCredential

from blobfs.filesystem import AzureFileSystem
from blobfs.settings import AzureOptions
from blobfs.storage.azure_backend import AzureBlobBackend
from blobfs.storage.base import BlobBackend, BlobListing
from blobfs.storage.errors import InvalidArgument


class FakeBlobPrefix:
    """Stand-in for azure.storage.blob.BlobPrefix in walk_blobs results."""

    def __init__(self, name: str):
        self.name = name


@pytest.fixture
def mock_service_class():
    with patch("blobfs.storage.azure_backend.BlobServiceClient") as mock_class:
        yield mock_class


@pytest.fixture
def mock_service(mock_service_class):
    service = Mock()
    mock_service_class.return_value = service
    return service


def _options(**overrides):
    defaults = dict(account_name="testaccount", account_key="dGVzdGtleQ==")
    defaults.update(overrides)
    return AzureOptions.with_account_key(defaults.pop("account_name"), defaults.pop("account_key"), **defaults)


class TestAzureBlobBackend:
    """Test AzureBlobBackend contract compliance."""

    def test_implements_protocol(self, mock_service):
        assert isinstance(AzureBlobBackend(_options()), BlobBackend)

    def test_service_client_construction(self, mock_service_class, mock_service):
        """Test account URL, credential and transport settings handed to the SDK."""
        backend = AzureBlobBackend(_options(timeout_s=15.0, retry_total=2, retry_backoff_factor=0.1))

        mock_service_class.assert_called_once()
        kwargs = mock_service_class.call_args[1]
        assert kwargs["account_url"] == "https://testaccount.blob.core.windows.net/"
        assert isinstance(kwargs["credential"], AzureNamedKeyCredential)
        assert kwargs["credential"].named_key.name == "testaccount"
        assert kwargs["connection_timeout"] == 15.0
        assert kwargs["retry_total"] == 2
        assert kwargs["retry_backoff_factor"] == 0.1
        assert backend.service_client is mock_service

    def test_azurite_account_url(self, mock_service_class, mock_service):
        AzureBlobBackend(_options(account_name="devstoreaccount1", backend="azurite"))

        kwargs = mock_service_class.call_args[1]
        assert kwargs["account_url"] == "http://127.0.0.1:10000/devstoreaccount1/"

    def test_get_blob_properties(self, mock_service):
        properties = SimpleNamespace(size=1024)
        blob_client = Mock()
        blob_client.get_blob_properties.return_value = properties
        mock_service.get_blob_client.return_value = blob_client

        backend = AzureBlobBackend(_options())
        assert backend.get_blob_properties("container", "blob.txt") is properties

        mock_service.get_blob_client.assert_called_once_with(container="container", blob="blob.txt")
        blob_client.get_blob_properties.assert_called_once()

    def test_download_range(self, mock_service):
        downloader = Mock()
        downloader.readall.return_value = b"quick"
        blob_client = Mock()
        blob_client.download_blob.return_value = downloader
        mock_service.get_blob_client.return_value = blob_client

        backend = AzureBlobBackend(_options())
        assert backend.download_range("c", "obj", 4, 5) == b"quick"

        mock_service.get_blob_client.assert_called_once_with(container="c", blob="obj")
        blob_client.download_blob.assert_called_once_with(offset=4, length=5)
        downloader.readall.assert_called_once()

    def test_container_exists(self, mock_service):
        container_client = Mock()
        container_client.exists.return_value = False
        mock_service.get_container_client.return_value = container_client

        backend = AzureBlobBackend(_options())
        assert backend.container_exists("missing") is False
        mock_service.get_container_client.assert_called_once_with("missing")

    def test_list_containers(self, mock_service):
        first, second = Mock(), Mock()
        first.name, second.name = "alpha", "beta"
        mock_service.list_containers.return_value = [first, second]

        backend = AzureBlobBackend(_options())
        assert list(backend.list_containers()) == ["alpha", "beta"]

    def test_list_blobs_with_delimiter_walks(self, mock_service):
        """Test that delimited listings use walk_blobs and report prefixes."""
        modified = datetime(2023, 10, 31, tzinfo=timezone.utc)
        blob = SimpleNamespace(name="dir/file.txt", size=12, last_modified=modified)
        container_client = Mock()
        container_client.walk_blobs.return_value = [FakeBlobPrefix("dir/sub/"), blob]
        mock_service.get_container_client.return_value = container_client

        with patch("blobfs.storage.azure_backend.BlobPrefix", FakeBlobPrefix):
            backend = AzureBlobBackend(_options())
            result = list(backend.list_blobs("c", "dir/", delimiter="/"))

        container_client.walk_blobs.assert_called_once_with(name_starts_with="dir/", delimiter="/")
        assert result == [
            BlobListing(name="dir/sub/", is_prefix=True),
            BlobListing(name="dir/file.txt", size=12, last_modified=modified),
        ]

    def test_list_blobs_without_delimiter(self, mock_service):
        container_client = Mock()
        container_client.list_blobs.return_value = [
            SimpleNamespace(name="a/b/c.txt", size=1, last_modified=None),
        ]
        mock_service.get_container_client.return_value = container_client

        backend = AzureBlobBackend(_options())
        result = list(backend.list_blobs("c"))

        container_client.list_blobs.assert_called_once_with(name_starts_with=None)
        assert result == [BlobListing(name="a/b/c.txt", size=1)]

    def test_close(self, mock_service):
        backend = AzureBlobBackend(_options())
        backend.close()
        mock_service.close.assert_called_once()


class TestFilesystemMake:
    """Test AzureFileSystem.make builds exactly one Azure service client."""

    def test_make_builds_one_client(self, mock_service_class, mock_service):
        options = _options()
        fs = AzureFileSystem.make(options)

        mock_service_class.assert_called_once()
        assert fs.options is options

    def test_filesystems_with_equal_options_compare_equal(self, mock_service):
        assert AzureFileSystem.make(_options()) == AzureFileSystem.make(_options())
        assert AzureFileSystem.make(_options()) != AzureFileSystem.make(_options(account_name="other"))

    def test_close_closes_service_client(self, mock_service):
        fs = AzureFileSystem.make(_options())
        fs.close()
        mock_service.close.assert_called_once()

    def test_sdk_rejecting_options_raises_invalid_argument(self, mock_service_class):
        """Test that a ValueError from client construction is translated."""
        sdk_error = ValueError("Invalid IPv6 URL")
        mock_service_class.side_effect = sdk_error

        with pytest.raises(InvalidArgument) as exc_info:
            AzureFileSystem.make(_options())

        assert exc_info.value.__cause__ is sdk_error

    def test_malformed_endpoint_rejected_before_sdk(self, mock_service_class):
        with pytest.raises(InvalidArgument):
            AzureFileSystem.make(_options(blob_endpoint="http://[::1"))
        mock_service_class.assert_not_called()
