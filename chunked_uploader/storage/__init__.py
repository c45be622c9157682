"""Object store clients used by the chunked uploader."""

from .object_store_client import CreateOptions, ObjectHandle, ObjectStoreClient

__all__ = ["CreateOptions", "ObjectHandle", "ObjectStoreClient"]
