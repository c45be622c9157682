"""Constants for the chunked uploader."""

# Use this environment variable (or the ``chunk_size`` config field) to control
# how large each multipart part is. Default is 5 MB.
CHUNK_SIZE_ENV_VAR = "CHUNKED_UPLOAD_CHUNK_SIZE"
DEFAULT_CHUNK_SIZE = 5242880  # (5mb)

# Hard limit on the number of source objects in one compose request, enforced
# by Google Cloud Storage.
COMPOSE_REQUEST_LIMIT = 32

# While an upload is in-flight, parts 2..N are stored as 'destination.chunkN',
# e.g. 'content/vol-01/UUID.bytes.chunk2'. Part 1 is stored under the
# destination name itself.
CHUNK_NAME_PART = ".chunk"

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CLEANUP_THREAD_NAME = "chunked-upload-cleanup"
