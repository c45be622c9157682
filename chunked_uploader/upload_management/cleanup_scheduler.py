"""Background deletion of intermediate upload parts.

A single worker thread drains a FIFO queue of deletion batches, so callers
never wait on housekeeping. Deletion is best-effort: failures are logged and
not retried.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Sequence
from dataclasses import dataclass

from chunked_uploader.const import CLEANUP_THREAD_NAME
from chunked_uploader.storage.object_store_client import ObjectStoreClient

from .chunk_namer import is_chunk_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CleanupBatch:
    """Part names of one upload, queued for deletion."""

    storage: ObjectStoreClient
    bucket: str
    destination: str
    part_names: tuple[str, ...]


class CleanupScheduler:
    """Deletes the '.chunkN' parts of finished uploads off-thread."""

    def __init__(self, thread_name: str = CLEANUP_THREAD_NAME) -> None:
        """Initialize the scheduler and start its worker thread.

        Args:
            thread_name: Name of the worker thread.
        """
        self._queue: queue.Queue[CleanupBatch | None] = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False
        self._thread = threading.Thread(
            target=self._cleanup_loop, name=thread_name, daemon=True
        )
        self._thread.start()

    @property
    def is_running(self) -> bool:
        """Whether the worker thread is alive."""
        return self._thread.is_alive()

    def submit(
        self,
        storage: ObjectStoreClient,
        bucket: str,
        destination: str,
        part_names: Sequence[str],
    ) -> None:
        """Queue the parts of an upload for deletion and return immediately.

        Only intermediate part names are deleted; the bare destination name is
        the final object and is always kept.

        Args:
            storage: Store holding the parts.
            bucket: Bucket holding the parts.
            destination: Destination key of the upload.
            part_names: Every part name the upload committed, in order.
        """
        batch = CleanupBatch(storage, bucket, destination, tuple(part_names))
        with self._lock:
            if self._closed:
                logger.warning(
                    f"Cleanup scheduler is shut down; not deleting "
                    f"{len(batch.part_names)} parts of {destination}"
                )
                return
            self._queue.put(batch)

    def _cleanup_loop(self) -> None:
        """Delete queued batches in submission order until the poison pill."""
        while True:
            batch = self._queue.get()
            try:
                if batch is None:
                    break
                self._delete_parts(batch)
            finally:
                self._queue.task_done()

    def _delete_parts(self, batch: CleanupBatch) -> None:
        for name in batch.part_names:
            if not is_chunk_name(name, batch.destination):
                continue
            try:
                batch.storage.delete(batch.bucket, name)
            except Exception as exc:
                logger.warning(
                    f"Failed to delete part {name} in bucket {batch.bucket}: {exc}"
                )

    def wait_until_idle(self) -> None:
        """Block until every batch submitted so far has been processed."""
        self._queue.join()

    def shutdown(self, wait: bool = True, timeout: float | None = None) -> None:
        """Stop accepting batches and stop the worker once the queue drains.

        Args:
            wait: If True, wait for queued deletions to finish.
            timeout: Maximum seconds to wait for the worker thread.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(None)  # poison pill: worker exits after pending batches

        if wait:
            self._thread.join(timeout=timeout)
