"""
Output sink for command results.

With a path the bytes are written to a temporary file beside the target and
renamed into place, so a failure never leaves a partial file behind. Without a
path, PEM text is printed as-is and binary data is printed as a delimited
base64 block:

    ================================ BEGIN SIGNATURE ===============================
    <base64, wrapped at 80 columns>
    ================================= END SIGNATURE ================================
"""

import base64
import binascii
import os
import tempfile
import textwrap
from pathlib import Path
from typing import Optional, Union

import click

from dilikey import config
from dilikey.lib.errors import FormatError, KeyIOError

SECRET_KEY = "SECRET KEY"
PUBLIC_KEY = "PUBLIC KEY"
SIGNATURE = "SIGNATURE"


def _marker(kind: str, role: str) -> str:
    return f" {kind} {role} ".center(config.BLOCK_WIDTH, config.BLOCK_FILL)


def format_block(data: bytes, role: str) -> str:
    body = base64.b64encode(data).decode("ascii")
    lines = [_marker("BEGIN", role)]
    lines.extend(textwrap.wrap(body, config.BLOCK_WIDTH) or [""])
    lines.append(_marker("END", role))
    return "\n".join(lines)


def is_block(data: Union[bytes, str], role: str) -> bool:
    if isinstance(data, bytes):
        data = data.decode("ascii", errors="replace")
    return data.lstrip().startswith(_marker("BEGIN", role))


def read_block(data: Union[bytes, str], role: str) -> bytes:
    """Parses a block written by format_block back into bytes."""
    if isinstance(data, bytes):
        data = data.decode("ascii", errors="replace")
    lines = [line.strip() for line in data.strip().splitlines()]
    if len(lines) < 2:
        raise FormatError(f"Invalid {role} block: too few lines")
    if lines[0] != _marker("BEGIN", role).strip():
        raise FormatError(f"Invalid {role} block: missing BEGIN marker")
    if lines[-1] != _marker("END", role).strip():
        raise FormatError(f"Invalid {role} block: missing END marker")
    try:
        return base64.b64decode("".join(lines[1:-1]), validate=True)
    except (binascii.Error, ValueError) as e:
        raise FormatError(f"Invalid {role} block body: {e}") from e


def write_file(path: Union[str, Path], data: bytes):
    """Atomically replaces path with data."""
    target = Path(path)
    directory = target.parent if str(target.parent) else Path(".")
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=directory
        )
    except OSError as e:
        raise KeyIOError(f"Failed to write {path}: {e}") from e
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, target)
    except OSError as e:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise KeyIOError(f"Failed to write {path}: {e}") from e


def read_file(path: Union[str, Path]) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise KeyIOError(f"Failed to read {path}: {e}") from e


def emit(data: bytes, out_path: Optional[Union[str, Path]], role: str, text: bool = False):
    """
    Sends command output to a file or to stdout.

    Args:
        data: Bytes to emit.
        out_path: Destination file, or None for stdout.
        role: SECRET_KEY, PUBLIC_KEY or SIGNATURE; names the stdout block.
        text: True when data is already PEM text.
    """
    if out_path is not None:
        write_file(out_path, data)
        return
    if text:
        click.echo(data.decode("ascii").rstrip("\n"))
    else:
        click.echo(format_block(data, role))
