"""
Static algorithm table for the three Dilithium security levels.

Each level carries its algorithm identifier (OID) and the byte lengths of every
piece of key material the signature primitive produces. The key pair is laid
out as ``public || secret``, so ``keypair_len == public_len + secret_len``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict

from dilikey.lib.errors import LengthMismatch, UnsupportedAlgorithm


class SecurityLevel(Enum):
    LEVEL2 = 2
    LEVEL3 = 3
    LEVEL5 = 5


@dataclass(frozen=True)
class LevelParams:
    level: SecurityLevel
    name: str
    oid: str
    public_len: int
    secret_len: int
    signature_len: int

    @property
    def keypair_len(self) -> int:
        return self.public_len + self.secret_len

    def length_of(self, role: str) -> int:
        try:
            return {
                "keypair": self.keypair_len,
                "secret": self.secret_len,
                "public": self.public_len,
                "signature": self.signature_len,
            }[role]
        except KeyError:
            raise ValueError(f"Unknown key material role: {role}")


_PARAMS: Dict[SecurityLevel, LevelParams] = {
    SecurityLevel.LEVEL2: LevelParams(
        level=SecurityLevel.LEVEL2,
        name="Dilithium2",
        oid="1.3.6.1.4.1.2.267.7.4.4",
        public_len=1312,
        secret_len=2528,
        signature_len=2420,
    ),
    SecurityLevel.LEVEL3: LevelParams(
        level=SecurityLevel.LEVEL3,
        name="Dilithium3",
        oid="1.3.6.1.4.1.2.267.7.6.5",
        public_len=1952,
        secret_len=4000,
        signature_len=3293,
    ),
    SecurityLevel.LEVEL5: LevelParams(
        level=SecurityLevel.LEVEL5,
        name="Dilithium5",
        oid="1.3.6.1.4.1.2.267.7.8.7",
        public_len=2592,
        secret_len=4864,
        signature_len=4595,
    ),
}

_BY_OID = {params.oid: level for level, params in _PARAMS.items()}

# Second type tag carried in front of the key pair inside the private key
# octets. Fixed per level; not derived.
_NESTED_PREFIX: Dict[SecurityLevel, bytes] = {
    SecurityLevel.LEVEL2: b"\x04\x82\x0f\x00",
    SecurityLevel.LEVEL3: b"\x04\x82\x17\x40",
    SecurityLevel.LEVEL5: b"\x04\x82\x1d\x20",
}

_BY_NESTED_PREFIX = {prefix: level for level, prefix in _NESTED_PREFIX.items()}

NESTED_PREFIX_LEN = 4

_TOKENS = {
    "2": SecurityLevel.LEVEL2,
    "dil2": SecurityLevel.LEVEL2,
    "dilithium2": SecurityLevel.LEVEL2,
    "3": SecurityLevel.LEVEL3,
    "dil3": SecurityLevel.LEVEL3,
    "dilithium3": SecurityLevel.LEVEL3,
    "5": SecurityLevel.LEVEL5,
    "dil5": SecurityLevel.LEVEL5,
    "dilithium5": SecurityLevel.LEVEL5,
}


def levels():
    """All levels in ascending order."""
    return sorted(SecurityLevel, key=lambda level: level.value)


def lengths_for(level: SecurityLevel) -> LevelParams:
    return _PARAMS[level]


def oid_for(level: SecurityLevel) -> str:
    return _PARAMS[level].oid


def level_for(oid: str) -> SecurityLevel:
    try:
        return _BY_OID[oid]
    except KeyError:
        raise UnsupportedAlgorithm(f"Unsupported algorithm identifier: {oid}")


def level_for_length(n: int, role: str = "keypair") -> SecurityLevel:
    """
    Find the level whose key material of the given role is exactly n bytes.

    Used for legacy inputs that carry no OID. Ties resolve to the lowest level.
    """
    for level in levels():
        if _PARAMS[level].length_of(role) == n:
            return level
    expected = sorted(_PARAMS[level].length_of(role) for level in levels())
    raise LengthMismatch(role, " or ".join(str(e) for e in expected), n)


def nested_prefix_for(level: SecurityLevel) -> bytes:
    return _NESTED_PREFIX[level]


def level_for_nested_prefix(prefix: bytes) -> SecurityLevel:
    """Returns the level owning the prefix, or raises KeyError."""
    return _BY_NESTED_PREFIX[bytes(prefix)]


def parse_level(token) -> SecurityLevel:
    """Parses a CLI algorithm token: 2, dil2, dilithium2, ..."""
    if isinstance(token, SecurityLevel):
        return token
    key = str(token).strip().lower()
    if key not in _TOKENS:
        raise UnsupportedAlgorithm(
            f"The application does not support this algorithm: {token}"
        )
    return _TOKENS[key]
