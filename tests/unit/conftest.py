from __future__ import annotations

import threading
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, BinaryIO

import pytest

from chunked_uploader.const import COMPOSE_REQUEST_LIMIT
from chunked_uploader.storage.object_store_client import (
    CreateOptions,
    ObjectStoreClient,
)
from chunked_uploader.upload_management.buffering_uploader import BufferingUploader
from chunked_uploader.upload_management.cleanup_scheduler import CleanupScheduler


@dataclass
class FakeBlob:
    bucket: str
    name: str
    size: int


class InMemoryObjectStore(ObjectStoreClient):
    """Object store keeping objects in a dict and logging every call."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}
        self.calls: list[tuple[Any, ...]] = []
        self.create_options: list[CreateOptions] = []
        self.fail_create_keys: set[str] = set()
        self.fail_compose = False
        self.fail_delete_keys: set[str] = set()
        self.stream_block_size = 16
        self._lock = threading.Lock()

    def create(
        self,
        bucket: str,
        key: str,
        data: bytes | bytearray | memoryview,
        offset: int,
        length: int,
        options: CreateOptions,
    ) -> FakeBlob:
        with self._lock:
            self.calls.append(("create", key, length))
            self.create_options.append(options)
            if key in self.fail_create_keys:
                raise RuntimeError(f"create failed for {key}")
            self.objects[(bucket, key)] = bytes(
                memoryview(data)[offset : offset + length]
            )
        return FakeBlob(bucket, key, length)

    def create_from_stream(self, bucket: str, key: str, stream: BinaryIO) -> FakeBlob:
        # like a resumable upload: bounded reads, a short read ends the object
        blocks: list[bytes] = []
        while True:
            block = stream.read(self.stream_block_size)
            blocks.append(block)
            if len(block) < self.stream_block_size:
                break
        payload = b"".join(blocks)
        with self._lock:
            self.calls.append(("create_from_stream", key, len(payload)))
            if key in self.fail_create_keys:
                raise RuntimeError(f"create failed for {key}")
            self.objects[(bucket, key)] = payload
        return FakeBlob(bucket, key, len(payload))

    def compose(
        self, bucket: str, source_keys: list[str], destination: str
    ) -> FakeBlob:
        if len(source_keys) > COMPOSE_REQUEST_LIMIT:
            raise ValueError("too many compose sources")
        with self._lock:
            self.calls.append(("compose", tuple(source_keys), destination))
            if self.fail_compose:
                raise RuntimeError("compose failed")
            payload = b"".join(self.objects[(bucket, key)] for key in source_keys)
            self.objects[(bucket, destination)] = payload
        return FakeBlob(bucket, destination, len(payload))

    def delete(self, bucket: str, key: str) -> bool:
        with self._lock:
            self.calls.append(("delete", key))
            if key in self.fail_delete_keys:
                raise RuntimeError(f"delete failed for {key}")
            return self.objects.pop((bucket, key), None) is not None

    def calls_named(self, name: str) -> list[tuple[Any, ...]]:
        with self._lock:
            return [call for call in self.calls if call[0] == name]

    def keys(self, bucket: str) -> set[str]:
        with self._lock:
            return {key for (b, key) in self.objects if b == bucket}


@pytest.fixture
def object_store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def cleanup_scheduler() -> Iterator[CleanupScheduler]:
    scheduler = CleanupScheduler(thread_name="test-cleanup")
    try:
        yield scheduler
    finally:
        scheduler.shutdown(wait=True, timeout=5)


@pytest.fixture
def uploader(cleanup_scheduler: CleanupScheduler) -> BufferingUploader:
    """Uploader with a 5 byte chunk size."""
    return BufferingUploader(chunk_size=5, cleanup_scheduler=cleanup_scheduler)
