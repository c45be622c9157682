import pytest

from chunked_uploader.upload_management.chunk_namer import is_chunk_name, to_chunk_name


def test_first_chunk_is_destination() -> None:
    assert to_chunk_name("content/vol-01/chap-01/UUID.bytes", 1) == (
        "content/vol-01/chap-01/UUID.bytes"
    )


@pytest.mark.parametrize("index", [2, 3, 31, 32])
def test_later_chunks_carry_marker(index: int) -> None:
    assert to_chunk_name("a/b.bytes", index) == f"a/b.bytes.chunk{index}"


@pytest.mark.parametrize("index", [0, -1])
def test_invalid_index_raises(index: int) -> None:
    with pytest.raises(ValueError):
        to_chunk_name("a/b.bytes", index)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("a/b.bytes", False),
        ("a/b.bytes.chunk2", True),
        ("a/b.bytes.chunk32", True),
        ("other/b.bytes.chunk2", False),
    ],
)
def test_is_chunk_name(name: str, expected: bool) -> None:
    assert is_chunk_name(name, "a/b.bytes") is expected


def test_destination_containing_marker_is_not_a_chunk() -> None:
    destination = "archive.chunky/blob"
    assert not is_chunk_name(destination, destination)
    assert is_chunk_name(to_chunk_name(destination, 2), destination)
