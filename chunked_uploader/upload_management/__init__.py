"""Chunked upload and compose of streams into an object store."""
