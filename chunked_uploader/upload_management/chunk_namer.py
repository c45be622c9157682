"""Deterministic names for the parts of a chunked upload."""

from chunked_uploader.const import CHUNK_NAME_PART


def to_chunk_name(destination: str, chunk_number: int) -> str:
    """Return the name to store a part under.

    The name of the first chunk matches the desired end destination, so a
    single-part upload needs no copy. For any chunk index 2 or greater this
    returns the destination plus the chunk name suffix, e.g.
    ``'blob.bytes.chunk2'``.

    Args:
        destination: Destination key, relative to the bucket.
        chunk_number: 1-based part index.

    Returns:
        The name to store this chunk.

    Raises:
        ValueError: If ``chunk_number`` is less than 1.
    """
    if chunk_number < 1:
        raise ValueError(f"chunk_number must be >= 1, got {chunk_number}")
    if chunk_number == 1:
        return destination
    return f"{destination}{CHUNK_NAME_PART}{chunk_number}"


def is_chunk_name(name: str, destination: str) -> bool:
    """Whether ``name`` is an intermediate part of an upload to ``destination``."""
    return name != destination and name.startswith(destination + CHUNK_NAME_PART)
