"""Root pytest configuration for blobfs tests."""
import pytest

from blobfs.filesystem import AzureFileSystem
from blobfs.settings import AzureOptions
from blobfs.storage.base import IOContext

from .helpers.data import LOREM_IPSUM, OBJECT_PATH
from .storage.fakes.fake_backend import FakeBlobBackend


# Set up test environment variables
@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    """Keep real Azure settings from leaking into tests."""
    for name in (
        "AZURE_STORAGE_ACCOUNT", "AZURE_STORAGE_KEY", "AZURE_TENANT_ID",
        "AZURE_CLIENT_ID", "AZURE_CLIENT_SECRET", "BLOBFS_CREDENTIAL",
        "BLOBFS_BACKEND", "BLOBFS_BLOB_ENDPOINT", "BLOBFS_TIMEOUT",
        "BLOBFS_RETRY_TOTAL", "BLOBFS_STREAM_BUFFER_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)


# Standardized test fixtures
@pytest.fixture
def options():
    """Standard test options pointing at the Azurite emulator account."""
    return AzureOptions.with_account_key(
        "devstoreaccount1",
        "Eby8vdM02xNOcqFlqUwJPLlmEtlCDXJ1OUzFT50uSRZ6IFsuFq2UVErCz4I6tq/K1SZFPTOtr/KBHBeksoGMGw==",
        backend="azurite",
        stream_buffer_size=64,
    )


@pytest.fixture
def backend():
    """Fake backend seeded with the lorem ipsum object."""
    fake = FakeBlobBackend()
    fake.put(OBJECT_PATH, LOREM_IPSUM)
    return fake


@pytest.fixture
def io_context():
    return IOContext(external_id=42)


@pytest.fixture
def fs(options, backend, io_context):
    """Standard filesystem over the fake backend."""
    filesystem = AzureFileSystem(options, backend=backend, io_context=io_context)
    yield filesystem
    filesystem.close()
