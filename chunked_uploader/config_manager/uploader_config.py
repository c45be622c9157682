"""Pydantic models for chunked uploader configuration."""

from pydantic import BaseModel, Field

from chunked_uploader.const import DEFAULT_CHUNK_SIZE, DEFAULT_CONTENT_TYPE


class UploaderConfig(BaseModel):
    """Configuration options for a chunked uploader instance.

    Attributes:
        chunk_size: size in bytes of every part except an overflow tail.
        bucket: default bucket uploads are written to.
        content_type: MIME type set on created objects.
    """

    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, gt=0)
    bucket: str | None = None
    content_type: str = DEFAULT_CONTENT_TYPE
