"""
Tests for SharedServiceClient lease counting.
"""
from __future__ import annotations

import pytest

from blobfs.storage.client import SharedServiceClient
from blobfs.storage.errors import InvalidState
from tests.storage.fakes.fake_backend import FakeBlobBackend


@pytest.fixture
def client():
    return SharedServiceClient(FakeBlobBackend())


def test_acquire_returns_backend(client):
    assert client.acquire() is client.backend
    assert client.leases == 1


def test_close_without_leases(client):
    client.close()

    assert client.close_requested
    assert client.closed
    assert client.backend.closed


def test_close_deferred_until_last_release(client):
    client.acquire()
    client.acquire()
    client.close()

    assert client.close_requested
    assert not client.closed

    client.release()
    assert not client.backend.closed
    client.release()
    assert client.closed
    assert client.backend.closed


def test_acquire_after_close(client):
    client.close()
    with pytest.raises(InvalidState):
        client.acquire()


def test_release_without_acquire(client):
    with pytest.raises(InvalidState):
        client.release()


def test_backend_closed_once(client):
    client.close()
    client.close()
    assert client.backend.calls_to("close") == [("close",)]
