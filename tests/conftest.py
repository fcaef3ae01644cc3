import hashlib
import os
import sys

import pytest

# Add the src directory to the Python path so tests run without installing
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from dilikey.lib import registry  # noqa: E402
from dilikey.lib.registry import SecurityLevel  # noqa: E402


def _expand(*parts: bytes, length: int) -> bytes:
    return hashlib.shake_256(b"|".join(parts)).digest(length)


class FakePrimitive:
    """
    Deterministic stand-in for the Dilithium adapter.

    Honors the registry byte lengths and the ``public || secret`` layout. The
    first 32 bytes of the secret key repeat the first 32 bytes of the public
    key so that a signature made with one can be checked with the other.
    """

    def __init__(self):
        self.seeds = []

    def keypair(self, level: SecurityLevel, seed: bytes) -> bytes:
        self.seeds.append(seed)
        params = registry.lengths_for(level)
        tag = bytes([level.value])
        pk = _expand(b"pk", tag, seed, length=params.public_len)
        sk = pk[:32] + _expand(b"sk", tag, seed, length=params.secret_len - 32)
        return pk + sk

    def sign(self, level: SecurityLevel, secret_key: bytes, message: bytes) -> bytes:
        params = registry.lengths_for(level)
        return _expand(b"sig", secret_key[:32], message, length=params.signature_len)

    def verify(self, level, public_key, message, signature) -> bool:
        params = registry.lengths_for(level)
        return signature == _expand(
            b"sig", public_key[:32], message, length=params.signature_len
        )


@pytest.fixture
def fake_primitive(monkeypatch):
    """Routes every command through FakePrimitive."""
    primitive = FakePrimitive()
    monkeypatch.setattr("dilikey.lib.commands.get_primitive", lambda: primitive)
    return primitive


@pytest.fixture(params=registry.levels(), ids=lambda level: level.name)
def level(request):
    return request.param


@pytest.fixture
def keypair_for():
    """Builds a fake key pair of the right size for a level."""

    def build(level: SecurityLevel, seed: bytes = b"\x01" * 32) -> bytes:
        return FakePrimitive().keypair(level, seed)

    return build


@pytest.fixture
def message_file(tmp_path):
    path = tmp_path / "message.txt"
    path.write_bytes(b"The quick brown fox jumps over the lazy dog\n" * 500)
    return path
