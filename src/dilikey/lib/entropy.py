"""
Seed material for key generation.

Three sources, in order of precedence:
  1. Explicit base64 entropy from the caller.
  2. The legacy QRNG web service (GET <base>/qrng/base64?size=32).
  3. The operating system CSPRNG.

Seeds are always SEED_SIZE bytes. Decoded entropy shorter than that is padded
on the right with zero bytes; longer entropy is cut to SEED_SIZE. The padding
is long-standing behaviour that callers rely on, so supplying 16 bytes leaves
the last 16 bytes of the seed zero.
"""

import base64
import binascii
import secrets
from typing import Optional

import requests

from dilikey import config
from dilikey.lib.errors import EntropySourceError
from dilikey.lib.log import get_logger, log

logger = get_logger("entropy")


def fit_seed(material: bytes) -> bytes:
    """Zero-pads or truncates material to exactly SEED_SIZE bytes."""
    size = config.SEED_SIZE
    if len(material) < size:
        log(
            logger,
            "warning",
            "Entropy shorter than seed size, padding with zeros",
            supplied=len(material),
            seed_size=size,
        )
        return bytes(material) + bytes(size - len(material))
    if len(material) > size:
        log(
            logger,
            "warning",
            "Entropy longer than seed size, truncating",
            supplied=len(material),
            seed_size=size,
        )
    return bytes(material[:size])


def decode_entropy(entropy_b64: str) -> bytes:
    """Decodes caller-supplied base64 entropy into a seed."""
    try:
        material = base64.b64decode(entropy_b64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EntropySourceError(f"Entropy is not valid base64: {e}") from e
    if not material:
        raise EntropySourceError("Entropy decodes to zero bytes")
    return fit_seed(material)


def fetch_qrng(base_url: str, size: Optional[int] = None) -> bytes:
    """
    Fetches seed material from the legacy QRNG service.

    Args:
        base_url: Service root, e.g. https://qrng.example.com
        size: Number of bytes to request (defaults to SEED_SIZE).

    Returns:
        SEED_SIZE bytes of seed material.

    Raises:
        EntropySourceError: on network, HTTP, JSON or base64 failures.
    """
    size = size or config.SEED_SIZE
    url = f"{base_url.rstrip('/')}{config.QRNG_PATH}"
    log(logger, "info", "Requesting entropy from QRNG", url=url, size=size)
    try:
        response = requests.get(
            url, params={"size": size}, timeout=config.QRNG_TIMEOUT
        )
        response.raise_for_status()
        encoded = response.json()["result"]
        material = base64.b64decode(encoded, validate=True)
    except requests.exceptions.RequestException as e:
        raise EntropySourceError(f"Request to QRNG failed: {e}") from e
    except (KeyError, TypeError, ValueError, binascii.Error) as e:
        raise EntropySourceError(f"Unexpected QRNG response: {e}") from e
    if not material:
        raise EntropySourceError("QRNG returned no entropy")
    return fit_seed(material)


def system_seed() -> bytes:
    return secrets.token_bytes(config.SEED_SIZE)


def obtain_seed(
    entropy_b64: Optional[str] = None, qrng_url: Optional[str] = None
) -> bytes:
    """Picks the seed source by precedence and returns SEED_SIZE bytes."""
    if entropy_b64 is not None:
        return decode_entropy(entropy_b64)
    if qrng_url:
        return fetch_qrng(qrng_url)
    return system_seed()
