"""
The four key-management commands.

Each command is one straight pass: read inputs, decode, compute, then emit.
Any failure raises a DilikeyError before the output step, so nothing partial
is ever written. The CLI in dilikey.cli is a thin layer over these functions.
"""

from pathlib import Path
from typing import Optional, Union

from dilikey.lib import containers, entropy, output, registry
from dilikey.lib.containers import Envelope
from dilikey.lib.digest import digest_file
from dilikey.lib.errors import LengthMismatch
from dilikey.lib.log import get_logger, log
from dilikey.lib.primitive import (
    SignaturePrimitive,
    get_primitive,
    public_half,
    secret_half,
)
from dilikey.lib.registry import SecurityLevel

logger = get_logger("commands")

PathLike = Union[str, Path]


def generate(
    level: SecurityLevel,
    outform: Envelope = Envelope.TEXT,
    out_path: Optional[PathLike] = None,
    entropy_b64: Optional[str] = None,
    qrng_url: Optional[str] = None,
    primitive: Optional[SignaturePrimitive] = None,
) -> bytes:
    """
    Generates a key pair and emits it as a private key container.

    Returns:
        The encoded container.
    """
    primitive = primitive or get_primitive()
    seed = entropy.obtain_seed(entropy_b64, qrng_url)
    keypair = primitive.keypair(level, seed)
    encoded = containers.encode_private(level, keypair, outform)
    log(logger, "info", "Generated key pair", alg=level.name, outform=outform.value)
    output.emit(encoded, out_path, output.SECRET_KEY, text=outform == Envelope.TEXT)
    return encoded


def public(
    in_path: PathLike,
    inform: Optional[Envelope] = None,
    outform: Envelope = Envelope.TEXT,
    out_path: Optional[PathLike] = None,
) -> bytes:
    """Extracts the public key from a private key container."""
    level, keypair = containers.load_private(output.read_file(in_path), inform)
    encoded = containers.encode_public(level, public_half(level, keypair), outform)
    log(logger, "info", "Extracted public key", alg=level.name, source=in_path)
    output.emit(encoded, out_path, output.PUBLIC_KEY, text=outform == Envelope.TEXT)
    return encoded


def sign(
    sec_path: PathLike,
    file_path: PathLike,
    inform: Optional[Envelope] = None,
    out_path: Optional[PathLike] = None,
    primitive: Optional[SignaturePrimitive] = None,
) -> bytes:
    """Signs the SHA-256 digest of a file; returns the raw signature."""
    primitive = primitive or get_primitive()
    level, keypair = containers.load_private(output.read_file(sec_path), inform)
    message = digest_file(file_path)
    signature = primitive.sign(level, secret_half(level, keypair), message)

    expected = registry.lengths_for(level).signature_len
    if len(signature) != expected:
        raise LengthMismatch("signature", expected, len(signature))

    log(logger, "info", "Signed file", alg=level.name, file=file_path)
    output.emit(signature, out_path, output.SIGNATURE)
    return signature


def read_signature(sig_path: PathLike) -> bytes:
    """Raw signature bytes, also accepting a printed SIGNATURE block."""
    data = output.read_file(sig_path)
    if output.is_block(data, output.SIGNATURE):
        return output.read_block(data, output.SIGNATURE)
    return data


def verify(
    pub_path: PathLike,
    sig_path: PathLike,
    file_path: PathLike,
    inform: Optional[Envelope] = None,
    primitive: Optional[SignaturePrimitive] = None,
) -> bool:
    """Verifies a signature over the SHA-256 digest of a file."""
    primitive = primitive or get_primitive()
    level, public_key = containers.load_public(output.read_file(pub_path), inform)
    signature = read_signature(sig_path)
    message = digest_file(file_path)

    expected = registry.lengths_for(level).signature_len
    if len(signature) != expected:
        raise LengthMismatch("signature", expected, len(signature))

    result = primitive.verify(level, public_key, message, signature)
    log(logger, "info", "Verified file", alg=level.name, file=file_path, result=result)
    return result
