"""Google Cloud Storage implementation of ``ObjectStoreClient``."""

from __future__ import annotations

import gzip
import logging
from typing import BinaryIO

from google.api_core.exceptions import NotFound
from google.cloud import storage

from chunked_uploader.const import COMPOSE_REQUEST_LIMIT, DEFAULT_CONTENT_TYPE

from .object_store_client import CreateOptions, ObjectStoreClient

logger = logging.getLogger(__name__)


class GcsObjectStoreClient(ObjectStoreClient):
    """Object store backed by a ``google.cloud.storage.Client``.

    Returned handles are ``google.cloud.storage.Blob`` instances.
    """

    def __init__(
        self,
        client: storage.Client | None = None,
        content_type: str = DEFAULT_CONTENT_TYPE,
    ) -> None:
        """Initialize the client.

        Args:
            client: An initialized storage client. A default client using
                application default credentials is created when omitted.
            content_type: MIME type for objects created from streams and for
                composed objects.
        """
        self._client = client or storage.Client()
        self._content_type = content_type

    def create(
        self,
        bucket: str,
        key: str,
        data: bytes | bytearray | memoryview,
        offset: int,
        length: int,
        options: CreateOptions,
    ) -> storage.Blob:
        """Upload ``length`` bytes of ``data`` starting at ``offset``.

        When ``options.disable_gzip_content`` is False the payload is stored
        gzip-compressed with ``content_encoding`` set to ``gzip``.

        Raises:
            ValueError: If the requested range lies outside ``data``.
        """
        view = memoryview(data)
        if offset < 0 or length < 0 or offset + length > len(view):
            raise ValueError(
                f"Range offset={offset} length={length} outside buffer of "
                f"{len(view)} bytes"
            )

        payload = bytes(view[offset : offset + length])
        blob = self._client.bucket(bucket).blob(key)
        if not options.disable_gzip_content:
            payload = gzip.compress(payload)
            blob.content_encoding = "gzip"

        blob.upload_from_string(payload, content_type=options.content_type)
        return blob

    def create_from_stream(
        self, bucket: str, key: str, stream: BinaryIO
    ) -> storage.Blob:
        """Upload the rest of ``stream`` as one object.

        The size is unknown, so the client performs a resumable upload that
        reads until end-of-stream.
        """
        blob = self._client.bucket(bucket).blob(key)
        blob.upload_from_file(stream, content_type=self._content_type)
        return blob

    def compose(
        self, bucket: str, source_keys: list[str], destination: str
    ) -> storage.Blob:
        """Compose ``source_keys`` into ``destination`` with one request.

        Raises:
            ValueError: If more than ``COMPOSE_REQUEST_LIMIT`` sources are given.
        """
        if len(source_keys) > COMPOSE_REQUEST_LIMIT:
            raise ValueError(
                f"Compose accepts at most {COMPOSE_REQUEST_LIMIT} sources, "
                f"got {len(source_keys)}"
            )

        gcs_bucket = self._client.bucket(bucket)
        target = gcs_bucket.blob(destination)
        target.content_type = self._content_type
        target.compose([gcs_bucket.blob(key) for key in source_keys])
        return target

    def delete(self, bucket: str, key: str) -> bool:
        """Delete ``key``; an already absent object is not an error."""
        try:
            self._client.bucket(bucket).blob(key).delete()
        except NotFound:
            logger.debug(f"Object {key} in bucket {bucket} already deleted")
            return False
        return True
