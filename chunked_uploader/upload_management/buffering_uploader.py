"""Buffered, chunked upload of streams of unknown length.

The stream is cut into parts of ``chunk_size`` bytes which are stored as
separate objects and then composed server-side into the destination object.
A compose request accepts at most ``COMPOSE_REQUEST_LIMIT`` sources, so once
that many parts would be needed the rest of the stream is written as one
final, unbounded part.
"""

from __future__ import annotations

import logging
import threading
from typing import BinaryIO

from chunked_uploader.config_manager.uploader_config import UploaderConfig
from chunked_uploader.const import (
    CHUNK_SIZE_ENV_VAR,
    COMPOSE_REQUEST_LIMIT,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_CONTENT_TYPE,
)
from chunked_uploader.exceptions import BlobStoreError
from chunked_uploader.storage.object_store_client import (
    CreateOptions,
    ObjectHandle,
    ObjectStoreClient,
)

from .chunk_namer import to_chunk_name
from .chunk_reader import PrefixedStream, buffer_chunk
from .cleanup_scheduler import CleanupScheduler
from .upload_state import MultipleParts, NoParts, SinglePart, UploadState

logger = logging.getLogger(__name__)


class BufferingUploader:
    """Upload streams as chunks and compose them into a single object.

    Uploads run synchronously on the calling thread, one part at a time.
    Intermediate parts are deleted afterwards by a background
    ``CleanupScheduler``, whether the upload succeeded or failed.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        content_type: str = DEFAULT_CONTENT_TYPE,
        cleanup_scheduler: CleanupScheduler | None = None,
    ) -> None:
        """Initialize the uploader.

        Args:
            chunk_size: Size in bytes of every part except an overflow tail.
            content_type: MIME type of created parts.
            cleanup_scheduler: Scheduler deleting intermediate parts. A new
                one with its own worker thread is started when omitted.

        Raises:
            ValueError: If ``chunk_size`` is not positive.
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self._chunk_size = chunk_size
        self._create_options = CreateOptions(
            content_type=content_type, disable_gzip_content=True
        )
        self._cleanup_scheduler = cleanup_scheduler or CleanupScheduler()

        self._compose_limit_hit = 0
        self._compose_limit_lock = threading.Lock()

    @classmethod
    def from_config(cls, config: UploaderConfig) -> BufferingUploader:
        """Build an uploader from a resolved ``UploaderConfig``."""
        return cls(chunk_size=config.chunk_size, content_type=config.content_type)

    @property
    def chunk_size(self) -> int:
        """The configured part size in bytes."""
        return self._chunk_size

    @property
    def number_of_times_compose_limit_hit(self) -> int:
        """How many uploads have hit the multipart-compose limit."""
        with self._compose_limit_lock:
            return self._compose_limit_hit

    @property
    def cleanup_scheduler(self) -> CleanupScheduler:
        return self._cleanup_scheduler

    def upload(
        self,
        storage: ObjectStoreClient,
        bucket: str,
        destination: str,
        contents: BinaryIO,
    ) -> ObjectHandle:
        """Upload ``contents`` to ``destination`` in ``bucket``.

        ``contents`` is closed before this method returns, on every path.

        Args:
            storage: An initialized object store client.
            bucket: The name of the bucket.
            destination: The destination key, relative to the bucket.
            contents: The stream of data to store. Must be a blocking stream.

        Returns:
            The stored object, named ``destination``.

        Raises:
            BlobStoreError: If reading the stream or any store call failed.
        """
        logger.debug(
            f"Starting multipart upload for destination {destination} "
            f"in bucket {bucket}"
        )
        # bucket-relative names of the parts, in order of composition
        chunk_names: list[str] = []

        try:
            with contents:
                state = self._upload_chunks(
                    storage, bucket, destination, contents, chunk_names
                )
                return self._finalize(storage, bucket, destination, state, chunk_names)
        except Exception as e:
            raise BlobStoreError(
                "Error uploading blob", destination=destination, bucket=bucket
            ) from e
        finally:
            # the first part carries the destination name and is never deleted
            self._cleanup_scheduler.submit(storage, bucket, destination, chunk_names)

    def _upload_chunks(
        self,
        storage: ObjectStoreClient,
        bucket: str,
        destination: str,
        contents: BinaryIO,
        chunk_names: list[str],
    ) -> UploadState:
        """Write the stream as parts, appending each part name as it is created.

        Returns:
            The state after the last part was written.
        """
        buffer = bytearray(self._chunk_size)
        state: UploadState = NoParts()

        # MUST respect the hard limit on sources per compose request
        for part_number in range(1, COMPOSE_REQUEST_LIMIT + 1):
            length = buffer_chunk(contents, buffer)

            # an empty stream still produces a zero-length part 1
            if length == 0 and part_number > 1:
                break

            chunk_name = to_chunk_name(destination, part_number)
            chunk_names.append(chunk_name)

            if part_number < COMPOSE_REQUEST_LIMIT:
                logger.debug(
                    f"Uploading chunk {part_number} for {destination} "
                    f"of {length} bytes"
                )
                blob = storage.create(
                    bucket, chunk_name, buffer, 0, length, self._create_options
                )
                state = SinglePart(blob) if part_number == 1 else MultipleParts()
            else:
                self._record_compose_limit_hit(destination)
                logger.debug(
                    f"Uploading final chunk {part_number} for {destination} "
                    "of unknown remaining bytes"
                )
                # size is unknown, so the rest of the stream cannot be chunked
                tail = PrefixedStream(memoryview(buffer)[:length], contents)
                storage.create_from_stream(bucket, chunk_name, tail)
                state = MultipleParts()

        return state

    def _finalize(
        self,
        storage: ObjectStoreClient,
        bucket: str,
        destination: str,
        state: UploadState,
        chunk_names: list[str],
    ) -> ObjectHandle:
        if isinstance(state, SinglePart):
            return state.handle
        if isinstance(state, MultipleParts):
            final_blob = storage.compose(bucket, list(chunk_names), destination)
            logger.debug(
                f"Multipart upload of {destination} complete "
                f"({len(chunk_names)} parts)"
            )
            return final_blob
        raise RuntimeError(f"No parts were written for {destination}")

    def _record_compose_limit_hit(self, destination: str) -> None:
        with self._compose_limit_lock:
            self._compose_limit_hit += 1
        logger.debug(
            f"Upload for {destination} has hit multipart-compose limits; "
            f"consider increasing '{CHUNK_SIZE_ENV_VAR}' beyond current value "
            f"of {self._chunk_size}"
        )

    def shutdown(self, wait: bool = True) -> None:
        """Stop the cleanup worker.

        Args:
            wait: If True, wait for queued part deletions to finish.
        """
        self._cleanup_scheduler.shutdown(wait=wait)


_uploader: BufferingUploader | None = None
_uploader_lock = threading.Lock()


def get_uploader(config: UploaderConfig | None = None) -> BufferingUploader:
    """Return the process-wide uploader, creating it on first use.

    Args:
        config: Configuration used only when the uploader is first created.
            Defaults to ``UploaderConfig()``.

    Returns:
        The shared ``BufferingUploader``.
    """
    global _uploader
    with _uploader_lock:
        if _uploader is None:
            _uploader = BufferingUploader.from_config(config or UploaderConfig())
        return _uploader


def shutdown_uploader(wait: bool = True) -> None:
    """Shut down and discard the process-wide uploader, if any."""
    global _uploader
    with _uploader_lock:
        uploader = _uploader
        _uploader = None
    if uploader is not None:
        uploader.shutdown(wait=wait)
