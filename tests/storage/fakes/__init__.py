# Fake implementations for testing

from .fake_backend import FakeBlobBackend

__all__ = ["FakeBlobBackend"]
