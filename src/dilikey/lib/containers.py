"""
Key containers for Dilithium keys.

Private keys travel as a PKCS#8 ``OneAsymmetricKey`` and public keys as an
X.509 ``SubjectPublicKeyInfo``, both tagged with the level's algorithm
identifier. Either container is written as DER (the BINARY envelope) or as
the PEM armor of the same DER (the TEXT envelope). PEM bodies are wrapped
at 64 columns as RFC 7468 and common tooling expect, not at 80; decoding
accepts any line width.

The ``privateKey`` octets are not the bare key pair: they start with a
four-byte prefix (``04 82`` plus a per-level sub-tag, see the registry)
followed by the key pair. Decoding checks that the OID, the prefix and the
remaining length all name the same level.
"""

from enum import Enum
from typing import Optional, Tuple, Union

from asn1crypto import core, pem

from dilikey.lib import registry
from dilikey.lib.errors import FormatError, LengthMismatch
from dilikey.lib.log import get_logger, log
from dilikey.lib.registry import SecurityLevel

logger = get_logger("containers")

PRIVATE_KEY_LABEL = "PRIVATE KEY"
PUBLIC_KEY_LABEL = "PUBLIC KEY"


class Envelope(Enum):
    BINARY = "BIN"
    TEXT = "TEXT"
    RAW = "RAW"

    @classmethod
    def parse(cls, token) -> "Envelope":
        """Accepts BIN/DER, TEXT/PEM and RAW, case-insensitive."""
        if isinstance(token, Envelope):
            return token
        aliases = {
            "BIN": cls.BINARY,
            "DER": cls.BINARY,
            "TEXT": cls.TEXT,
            "PEM": cls.TEXT,
            "RAW": cls.RAW,
        }
        try:
            return aliases[str(token).strip().upper()]
        except KeyError:
            raise FormatError(f"The application does not support this format: {token}")


class AlgorithmIdentifier(core.Sequence):
    _fields = [
        ("algorithm", core.ObjectIdentifier),
        ("parameters", core.Any, {"optional": True}),
    ]


class OneAsymmetricKey(core.Sequence):
    _fields = [
        ("version", core.Integer),
        ("private_key_algorithm", AlgorithmIdentifier),
        ("private_key", core.OctetString),
    ]


class SubjectPublicKeyInfo(core.Sequence):
    _fields = [
        ("algorithm", AlgorithmIdentifier),
        ("subject_public_key", core.OctetBitString),
    ]


def _as_bytes(data: Union[bytes, str]) -> bytes:
    if isinstance(data, str):
        return data.encode("ascii", errors="replace")
    return bytes(data)


def _check_length(level: SecurityLevel, role: str, material: bytes):
    expected = registry.lengths_for(level).length_of(role)
    if len(material) != expected:
        raise LengthMismatch(role, expected, len(material))


def _algorithm_identifier(level: SecurityLevel) -> AlgorithmIdentifier:
    return AlgorithmIdentifier({"algorithm": registry.oid_for(level)})


def _wrap(der: bytes, label: str, envelope: Envelope) -> bytes:
    if envelope == Envelope.BINARY:
        return der
    if envelope == Envelope.TEXT:
        return pem.armor(label, der)
    raise FormatError(f"Cannot encode a container as {envelope.value}")


def _unwrap(data: bytes, label: str, envelope: Optional[Envelope]) -> bytes:
    """Returns the DER bytes, removing PEM armor when present or requested."""
    is_text = pem.detect(data)
    if envelope is None:
        envelope = Envelope.TEXT if is_text else Envelope.BINARY
        log(logger, "debug", "Detected envelope", envelope=envelope.value)

    if envelope == Envelope.BINARY:
        return data
    if envelope != Envelope.TEXT:
        raise FormatError(f"Cannot decode a container from {envelope.value}")
    if not is_text:
        raise FormatError("Expected PEM text but found no BEGIN boundary")

    try:
        object_type, _headers, der = pem.unarmor(data)
    except ValueError as e:
        raise FormatError(f"Malformed PEM envelope: {e}") from e
    if object_type != label:
        raise FormatError(f"Expected PEM label '{label}', found '{object_type}'")
    return der


def _nested_blob(level: SecurityLevel, keypair: bytes) -> bytes:
    return registry.nested_prefix_for(level) + keypair


def _split_nested_blob(level: SecurityLevel, blob: bytes) -> bytes:
    """Checks the nested prefix against the OID level and returns the key pair."""
    prefix = blob[: registry.NESTED_PREFIX_LEN]
    if len(prefix) < registry.NESTED_PREFIX_LEN or prefix[:2] != b"\x04\x82":
        raise FormatError("Private key octets do not start with a key pair tag")
    try:
        blob_level = registry.level_for_nested_prefix(prefix)
    except KeyError:
        raise FormatError(f"Unknown private key sub-tag: {prefix[2:].hex()}")

    keypair = blob[registry.NESTED_PREFIX_LEN :]
    if blob_level != level:
        raise LengthMismatch(
            "keypair", registry.lengths_for(level).keypair_len, len(keypair)
        )
    _check_length(level, "keypair", keypair)
    return keypair


def encode_private(
    level: SecurityLevel, keypair: bytes, envelope: Envelope = Envelope.TEXT
) -> bytes:
    """
    Encodes a key pair as a version 0 OneAsymmetricKey.

    Args:
        level: Security level that produced the key pair.
        keypair: Raw ``public || secret`` bytes.
        envelope: BINARY for DER, TEXT for PEM.

    Returns:
        The serialized container. Identical inputs give identical output.
    """
    _check_length(level, "keypair", keypair)
    container = OneAsymmetricKey(
        {
            "version": 0,
            "private_key_algorithm": _algorithm_identifier(level),
            "private_key": _nested_blob(level, keypair),
        }
    )
    return _wrap(container.dump(), PRIVATE_KEY_LABEL, envelope)


def decode_private(
    data: Union[bytes, str], envelope: Optional[Envelope] = None
) -> Tuple[SecurityLevel, bytes]:
    """
    Decodes a private key container and recovers its level.

    Args:
        data: DER or PEM bytes.
        envelope: Expected envelope, or None to detect it from the PEM boundary.

    Returns:
        (level, keypair bytes)

    Raises:
        FormatError: malformed DER/PEM, wrong version or unknown sub-tag.
        UnsupportedAlgorithm: the OID names no known level.
        LengthMismatch: the OID level disagrees with the key pair octets.
    """
    der = _unwrap(_as_bytes(data), PRIVATE_KEY_LABEL, envelope)
    try:
        container = OneAsymmetricKey.load(der, strict=True)
        version = container["version"].native
        oid = container["private_key_algorithm"]["algorithm"].dotted
        blob = container["private_key"].native
    except (ValueError, TypeError) as e:
        raise FormatError(f"Malformed private key container: {e}") from e

    if version != 0:
        raise FormatError(f"Unsupported private key container version: {version}")
    if blob is None:
        raise FormatError("Private key container has no key octets")

    level = registry.level_for(oid)
    keypair = _split_nested_blob(level, blob)
    log(logger, "debug", "Decoded private key", alg=level.name, oid=oid)
    return level, keypair


def encode_public(
    level: SecurityLevel, public_key: bytes, envelope: Envelope = Envelope.TEXT
) -> bytes:
    """Encodes a raw public key as a SubjectPublicKeyInfo."""
    _check_length(level, "public", public_key)
    container = SubjectPublicKeyInfo(
        {
            "algorithm": _algorithm_identifier(level),
            "subject_public_key": public_key,
        }
    )
    return _wrap(container.dump(), PUBLIC_KEY_LABEL, envelope)


def decode_public(
    data: Union[bytes, str], envelope: Optional[Envelope] = None
) -> Tuple[SecurityLevel, bytes]:
    """Decodes a public key container; returns (level, public key bytes)."""
    der = _unwrap(_as_bytes(data), PUBLIC_KEY_LABEL, envelope)
    try:
        container = SubjectPublicKeyInfo.load(der, strict=True)
        oid = container["algorithm"]["algorithm"].dotted
        public_key = container["subject_public_key"].native
    except (ValueError, TypeError) as e:
        raise FormatError(f"Malformed public key container: {e}") from e

    if public_key is None:
        raise FormatError("Public key container has no key bits")

    level = registry.level_for(oid)
    _check_length(level, "public", public_key)
    log(logger, "debug", "Decoded public key", alg=level.name, oid=oid)
    return level, public_key


def decode_raw_keypair(data: bytes) -> Tuple[SecurityLevel, bytes]:
    """Legacy bare key pair file; the level comes from its exact length."""
    data = _as_bytes(data)
    return registry.level_for_length(len(data), "keypair"), data


def decode_raw_public(data: bytes) -> Tuple[SecurityLevel, bytes]:
    """Legacy bare public key file; the level comes from its exact length."""
    data = _as_bytes(data)
    return registry.level_for_length(len(data), "public"), data


def load_private(data: bytes, inform: Optional[Envelope] = None):
    """decode_private, or the legacy RAW reader when inform is RAW."""
    if inform == Envelope.RAW:
        return decode_raw_keypair(data)
    return decode_private(data, inform)


def load_public(data: bytes, inform: Optional[Envelope] = None):
    """decode_public, or the legacy RAW reader when inform is RAW."""
    if inform == Envelope.RAW:
        return decode_raw_public(data)
    return decode_public(data, inform)
