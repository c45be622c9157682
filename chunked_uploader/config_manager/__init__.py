"""Configuration for the chunked uploader."""
