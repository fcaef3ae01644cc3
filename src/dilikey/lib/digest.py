"""SHA-256 digests of files, read in fixed-size chunks."""

import hashlib
from pathlib import Path
from typing import BinaryIO, Union

from dilikey import config
from dilikey.lib.errors import KeyIOError

DIGEST_SIZE = 32


def digest_bytes(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def digest_stream(handle: BinaryIO, chunk_size: int = 0) -> bytes:
    """
    Digest everything left in an open binary handle.

    The value depends only on the byte sequence; chunk_size bounds memory.
    """
    chunk_size = chunk_size or config.DIGEST_CHUNK_SIZE
    hasher = hashlib.sha256()
    try:
        while True:
            chunk = handle.read(chunk_size)
            if not chunk:
                break
            hasher.update(chunk)
    except OSError as e:
        raise KeyIOError(f"Failed to read data to digest: {e}") from e
    return hasher.digest()


def digest_file(source: Union[str, Path, BinaryIO], chunk_size: int = 0) -> bytes:
    """Digest a file given by path or open binary handle."""
    if hasattr(source, "read"):
        return digest_stream(source, chunk_size)
    try:
        with open(source, "rb") as f:
            return digest_stream(f, chunk_size)
    except OSError as e:
        raise KeyIOError(f"Failed to open {source}: {e}") from e
