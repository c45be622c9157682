"""Per-upload part state.

An upload has written no part yet, exactly one part (which is already the
final object, stored under the destination name), or several parts that must
be composed.
"""

from __future__ import annotations

from dataclasses import dataclass

from chunked_uploader.storage.object_store_client import ObjectHandle


@dataclass(frozen=True)
class NoParts:
    """Nothing has been written yet."""


@dataclass(frozen=True)
class SinglePart:
    """Exactly one part was written; it is the final object."""

    handle: ObjectHandle


@dataclass(frozen=True)
class MultipleParts:
    """More than one part was written; a compose request is required."""


UploadState = NoParts | SinglePart | MultipleParts
