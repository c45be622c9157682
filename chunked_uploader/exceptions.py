"""Exception classes for the chunked uploader."""


class UploaderError(Exception):
    """Base error for the chunked uploader."""


class BlobStoreError(UploaderError):
    """Raised when any part of a chunked upload fails.

    The original failure (stream read, create or compose) is chained as
    ``__cause__``.
    """

    def __init__(
        self, message: str, destination: str | None = None, bucket: str | None = None
    ):
        """Initialize BlobStoreError.

        Args:
            message: Description of the failure.
            destination: Destination key of the failed upload.
            bucket: Bucket of the failed upload.
        """
        super().__init__(message)
        self.destination = destination
        self.bucket = bucket


class ConfigLoadError(UploaderError):
    """Raised when uploader configuration cannot be loaded."""
