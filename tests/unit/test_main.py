"""Tests for the chunked-upload CLI."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from google.auth.exceptions import DefaultCredentialsError

from chunked_uploader import main as cli
from chunked_uploader.const import CHUNK_SIZE_ENV_VAR


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        CHUNK_SIZE_ENV_VAR,
        "CHUNKED_UPLOAD_BUCKET",
        "CHUNKED_UPLOAD_CONTENT_TYPE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def patched_store(object_store):
    with patch.object(
        cli, "GcsObjectStoreClient", return_value=object_store
    ) as mock_client:
        yield mock_client


def test_uploads_file(tmp_path: Path, object_store, patched_store, capsys) -> None:
    source = tmp_path / "blob.bytes"
    data = bytes(range(100))
    source.write_bytes(data)

    exit_code = cli.main(
        [str(source), "content/blob.bytes", "--bucket", "b", "--chunk-size", "16"]
    )

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == "content/blob.bytes"
    assert object_store.objects[("b", "content/blob.bytes")] == data
    # cleanup is drained before the command exits
    assert object_store.keys("b") == {"content/blob.bytes"}
    patched_store.assert_called_once_with(content_type="application/octet-stream")


def test_bucket_from_environment(
    tmp_path: Path, object_store, patched_store, monkeypatch
) -> None:
    monkeypatch.setenv("CHUNKED_UPLOAD_BUCKET", "env-bucket")
    source = tmp_path / "blob.bytes"
    source.write_bytes(b"abc")

    assert cli.main([str(source), "dest"]) == 0
    assert object_store.objects[("env-bucket", "dest")] == b"abc"


def test_missing_bucket_exits(tmp_path: Path, patched_store) -> None:
    source = tmp_path / "blob.bytes"
    source.write_bytes(b"abc")

    with pytest.raises(SystemExit) as exc_info:
        cli.main([str(source), "dest"])
    assert exc_info.value.code == 2


def test_missing_source_file_fails(tmp_path: Path, patched_store) -> None:
    exit_code = cli.main([str(tmp_path / "missing"), "dest", "--bucket", "b"])

    assert exit_code == 1


def test_upload_failure_returns_error(
    tmp_path: Path, object_store, patched_store
) -> None:
    object_store.fail_compose = True
    source = tmp_path / "blob.bytes"
    source.write_bytes(bytes(40))

    exit_code = cli.main([str(source), "dest", "--bucket", "b", "--chunk-size", "16"])

    assert exit_code == 1
    assert object_store.keys("b") == {"dest"}


def test_invalid_chunk_size_rejected(patched_store) -> None:
    with pytest.raises(SystemExit):
        cli.main(["-", "dest", "--bucket", "b", "--chunk-size", "lots"])


def test_missing_credentials_returns_error(tmp_path: Path) -> None:
    source = tmp_path / "blob.bytes"
    source.write_bytes(b"abc")

    with patch.object(
        cli,
        "GcsObjectStoreClient",
        side_effect=DefaultCredentialsError("no credentials"),
    ):
        exit_code = cli.main([str(source), "dest", "--bucket", "b"])

    assert exit_code == 1
