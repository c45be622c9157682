"""Main entry point for the chunked-upload CLI."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import BinaryIO

from google.auth.exceptions import DefaultCredentialsError

from chunked_uploader.config_manager.config import ConfigManager
from chunked_uploader.config_manager.helpers import parse_bytes
from chunked_uploader.exceptions import UploaderError
from chunked_uploader.storage.gcs_object_store_client import GcsObjectStoreClient
from chunked_uploader.upload_management.buffering_uploader import BufferingUploader

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO) -> None:
    """Configure root logging with a concise, consistent format."""
    if logging.getLogger().handlers:
        logging.getLogger().setLevel(level)
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(level=level, handlers=[handler])


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for ``chunked-upload``."""
    parser = argparse.ArgumentParser(
        prog="chunked-upload",
        description="Upload a stream to Google Cloud Storage in composed chunks.",
    )
    parser.add_argument("source", help="File to upload, or '-' for stdin.")
    parser.add_argument("destination", help="Destination key in the bucket.")
    parser.add_argument("--bucket", help="Bucket to upload to.")
    parser.add_argument(
        "--chunk-size",
        "--chunk_size",
        dest="chunk_size",
        type=parse_bytes,
        help="Part size in bytes, e.g. 5242880 or 5mb.",
    )
    parser.add_argument(
        "--content-type",
        "--content_type",
        dest="content_type",
        help="MIME type of the uploaded object.",
    )
    parser.add_argument("--config", type=Path, help="YAML file with uploader settings.")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging."
    )
    return parser


def _open_source(source: str) -> BinaryIO:
    if source == "-":
        return sys.stdin.buffer
    return open(source, "rb")


def main(argv: list[str] | None = None) -> int:
    """Run the ``chunked-upload`` command.

    Args:
        argv: Command line arguments, defaulting to ``sys.argv[1:]``.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = ConfigManager(args.config).resolve_effective_config({
            "chunk_size": args.chunk_size,
            "bucket": args.bucket,
            "content_type": args.content_type,
        })
    except UploaderError as e:
        logger.error(str(e))
        return 1

    if not config.bucket:
        parser.error("a bucket is required (--bucket, config file or env)")

    try:
        storage = GcsObjectStoreClient(content_type=config.content_type)
    except DefaultCredentialsError as e:
        logger.error(f"Cannot create Google Cloud Storage client: {e}")
        return 1

    uploader = BufferingUploader.from_config(config)
    try:
        contents = _open_source(args.source)
        blob = uploader.upload(storage, config.bucket, args.destination, contents)
    except OSError as e:
        logger.error(f"Cannot read {args.source}: {e}")
        return 1
    except UploaderError as e:
        logger.error(f"{e}: {e.__cause__}")
        return 1
    finally:
        uploader.shutdown(wait=True)

    logger.info(
        f"Uploaded {args.source} to gs://{config.bucket}/{blob.name} "
        f"(compose limit hit {uploader.number_of_times_compose_limit_hit} times)"
    )
    print(blob.name)
    return 0


if __name__ == "__main__":
    sys.exit(main())
