"""
Signature primitive adapter.

The commands never touch the Dilithium implementation directly; they go
through an object with ``keypair``/``sign``/``verify`` over raw bytes. The
default implementation wraps dilithium-py. Tests substitute a fake with the
same byte-length contracts.
"""

import copy
from typing import Protocol

from dilithium_py.dilithium import Dilithium2, Dilithium3, Dilithium5

from dilikey import config
from dilikey.lib import registry
from dilikey.lib.errors import LengthMismatch
from dilikey.lib.log import get_logger, log
from dilikey.lib.registry import SecurityLevel

logger = get_logger("primitive")


class SignaturePrimitive(Protocol):
    """Digital signature contract, parameterized by security level."""

    def keypair(self, level: SecurityLevel, seed: bytes) -> bytes: ...
    def sign(self, level: SecurityLevel, secret_key: bytes, message: bytes) -> bytes: ...
    def verify(
        self, level: SecurityLevel, public_key: bytes, message: bytes, signature: bytes
    ) -> bool: ...


def public_half(level: SecurityLevel, keypair: bytes) -> bytes:
    params = registry.lengths_for(level)
    if len(keypair) != params.keypair_len:
        raise LengthMismatch("keypair", params.keypair_len, len(keypair))
    return keypair[: params.public_len]


def secret_half(level: SecurityLevel, keypair: bytes) -> bytes:
    params = registry.lengths_for(level)
    if len(keypair) != params.keypair_len:
        raise LengthMismatch("keypair", params.keypair_len, len(keypair))
    return keypair[params.public_len :]


class _SeedReader:
    """Stands in for os.urandom during key generation, serving the seed once."""

    def __init__(self, seed: bytes):
        self._seed = bytes(seed)
        self._offset = 0

    def __call__(self, n: int) -> bytes:
        if self._offset + n > len(self._seed):
            raise ValueError("Key generation requested more randomness than the seed holds")
        out = self._seed[self._offset : self._offset + n]
        self._offset += n
        return out


class DilithiumPrimitive:
    """Round 3 Dilithium via dilithium-py."""

    _SCHEMES = {
        SecurityLevel.LEVEL2: Dilithium2,
        SecurityLevel.LEVEL3: Dilithium3,
        SecurityLevel.LEVEL5: Dilithium5,
    }

    def keypair(self, level: SecurityLevel, seed: bytes) -> bytes:
        """Derives ``public || secret`` deterministically from a 32-byte seed."""
        if len(seed) != config.SEED_SIZE:
            raise LengthMismatch("seed", config.SEED_SIZE, len(seed))

        # Work on a copy so the module-level scheme keeps using os.urandom
        scheme = copy.copy(self._SCHEMES[level])
        scheme.random_bytes = _SeedReader(seed)
        pk, sk = scheme.keygen()

        params = registry.lengths_for(level)
        if len(pk) != params.public_len:
            raise LengthMismatch("public", params.public_len, len(pk))
        if len(sk) != params.secret_len:
            raise LengthMismatch("secret", params.secret_len, len(sk))
        log(logger, "debug", "Generated key pair", alg=level.name)
        return pk + sk

    def sign(self, level: SecurityLevel, secret_key: bytes, message: bytes) -> bytes:
        params = registry.lengths_for(level)
        if len(secret_key) != params.secret_len:
            raise LengthMismatch("secret", params.secret_len, len(secret_key))
        return self._SCHEMES[level].sign(secret_key, message)

    def verify(
        self, level: SecurityLevel, public_key: bytes, message: bytes, signature: bytes
    ) -> bool:
        params = registry.lengths_for(level)
        if len(public_key) != params.public_len:
            raise LengthMismatch("public", params.public_len, len(public_key))
        if len(signature) != params.signature_len:
            raise LengthMismatch("signature", params.signature_len, len(signature))
        try:
            return bool(self._SCHEMES[level].verify(public_key, message, signature))
        except ValueError as e:
            log(logger, "debug", "Signature rejected while unpacking", error=e)
            return False


_default = None


def get_primitive() -> SignaturePrimitive:
    global _default
    if _default is None:
        _default = DilithiumPrimitive()
    return _default
