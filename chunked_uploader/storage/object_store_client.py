"""Abstract object store interface used by the chunked uploader.

The uploader only needs four primitives from a store: bounded create from a
buffer, unbounded create from a stream, server-side compose and delete.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, Protocol

from chunked_uploader.const import DEFAULT_CONTENT_TYPE


class ObjectHandle(Protocol):
    """A stored object as returned by an ``ObjectStoreClient``."""

    name: str


@dataclass(frozen=True)
class CreateOptions:
    """Options for a bounded ``create`` call.

    Attributes:
        content_type: MIME type of the stored object.
        disable_gzip_content: Store the bytes exactly as given. When False the
            object is stored gzip-compressed with ``Content-Encoding: gzip``,
            which changes the stored bytes; parts that are later composed must
            keep this True so the concatenated object is byte-exact.
    """

    content_type: str = DEFAULT_CONTENT_TYPE
    disable_gzip_content: bool = True


class ObjectStoreClient(ABC):
    """Strategy interface for the object store holding uploaded parts."""

    @abstractmethod
    def create(
        self,
        bucket: str,
        key: str,
        data: bytes | bytearray | memoryview,
        offset: int,
        length: int,
        options: CreateOptions,
    ) -> ObjectHandle:
        """Store exactly ``length`` bytes of ``data`` starting at ``offset``."""
        ...

    @abstractmethod
    def create_from_stream(
        self, bucket: str, key: str, stream: BinaryIO
    ) -> ObjectHandle:
        """Store the entire remaining content of ``stream``, of unknown length."""
        ...

    @abstractmethod
    def compose(
        self, bucket: str, source_keys: list[str], destination: str
    ) -> ObjectHandle:
        """Concatenate ``source_keys``, in order, into ``destination``.

        Implementations raise ``ValueError`` when more sources are given than
        the store accepts in one request.
        """
        ...

    @abstractmethod
    def delete(self, bucket: str, key: str) -> bool:
        """Delete an object.

        Returns:
            True if the object was deleted, False if it did not exist.
        """
        ...
