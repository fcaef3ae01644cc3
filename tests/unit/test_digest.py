"""Unit tests for the streaming file digest."""

import hashlib
import io

import pytest

from dilikey import config
from dilikey.lib.digest import DIGEST_SIZE, digest_bytes, digest_file, digest_stream
from dilikey.lib.errors import KeyIOError


def test_digest_matches_sha256(message_file):
    expected = hashlib.sha256(message_file.read_bytes()).digest()
    assert digest_file(message_file) == expected
    assert digest_file(str(message_file)) == expected
    assert len(expected) == DIGEST_SIZE


@pytest.mark.parametrize("chunk_size", [1, 7, 4096, 1 << 20])
def test_chunk_size_does_not_change_digest(message_file, chunk_size):
    assert digest_file(message_file, chunk_size) == digest_bytes(message_file.read_bytes())


def test_default_chunk_size_is_4096():
    assert config.DIGEST_CHUNK_SIZE == 4096


def test_reads_in_chunks():
    """Every read asks for at most one chunk."""
    sizes = []

    class Recorder(io.BytesIO):
        def read(self, size=-1):
            sizes.append(size)
            return super().read(size)

    data = b"x" * 10000
    assert digest_stream(Recorder(data)) == digest_bytes(data)
    assert set(sizes) == {4096}
    assert len(sizes) == 4  # three data chunks and the EOF read


def test_empty_file(tmp_path):
    path = tmp_path / "empty"
    path.write_bytes(b"")
    assert digest_file(path) == hashlib.sha256(b"").digest()


def test_open_handle(message_file):
    with open(message_file, "rb") as f:
        assert digest_file(f) == digest_bytes(message_file.read_bytes())


def test_missing_file(tmp_path):
    with pytest.raises(KeyIOError):
        digest_file(tmp_path / "missing")


def test_read_error_is_io_error():
    class Broken(io.BytesIO):
        def read(self, size=-1):
            raise OSError("disk on fire")

    with pytest.raises(KeyIOError, match="disk on fire"):
        digest_stream(Broken(b"data"))
