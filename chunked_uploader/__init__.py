"""Chunked upload of streams into object stores with a compose operation."""

from .config_manager.uploader_config import UploaderConfig
from .exceptions import BlobStoreError, ConfigLoadError, UploaderError
from .storage.object_store_client import CreateOptions, ObjectStoreClient
from .upload_management.buffering_uploader import (
    BufferingUploader,
    get_uploader,
    shutdown_uploader,
)

__version__ = "0.1.0"

__all__ = [
    "BlobStoreError",
    "BufferingUploader",
    "ConfigLoadError",
    "CreateOptions",
    "ObjectStoreClient",
    "UploaderConfig",
    "UploaderError",
    "get_uploader",
    "shutdown_uploader",
]
