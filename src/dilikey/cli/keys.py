import click

from dilikey.lib import commands, registry
from dilikey.lib.containers import Envelope
from dilikey.lib.errors import DilikeyError


def _inform(value):
    return None if value is None else Envelope.parse(value)


@click.command("generate")
@click.option(
    "--algorithm",
    "-a",
    "--alg",
    required=True,
    metavar="2|3|5",
    help="Security level (2, 3, 5 or dilithium2/dil2 style names).",
)
@click.option(
    "--outform",
    default="TEXT",
    show_default=True,
    metavar="BIN|TEXT",
    help="Output envelope: BIN (DER) or TEXT (PEM).",
)
@click.option(
    "--out",
    "-o",
    "out_path",
    type=click.Path(dir_okay=False, writable=True),
    help="Output file. Prints to stdout when omitted.",
)
@click.option("--entropy", help="Base64 seed material; shorter input is zero-padded to 32 bytes.")
@click.option(
    "--qrng-url",
    envvar="DILIKEY_QRNG_URL",
    help="Base URL of a QRNG service to draw the seed from.",
)
def generate(algorithm, outform, out_path, entropy, qrng_url):
    """Generates a key pair."""
    try:
        level = registry.parse_level(algorithm)
        envelope = Envelope.parse(outform)
        if entropy is None and qrng_url:
            click.echo(f"Fetching entropy from {qrng_url}...", err=True)
        click.echo(f"Generating {registry.lengths_for(level).name} key pair...", err=True)
        commands.generate(
            level,
            envelope,
            out_path=out_path,
            entropy_b64=entropy,
            qrng_url=qrng_url,
        )
        if out_path:
            click.echo(f"Secret key saved to {out_path}", err=True)
    except DilikeyError as e:
        raise click.ClickException(f"Failed to generate key pair: {e}")


@click.command("public")
@click.option(
    "--in",
    "-i",
    "in_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Private key file.",
)
@click.option(
    "--inform",
    metavar="BIN|TEXT|RAW",
    help="Input envelope. Detected from the file when omitted.",
)
@click.option(
    "--outform",
    default="TEXT",
    show_default=True,
    metavar="BIN|TEXT",
    help="Output envelope: BIN (DER) or TEXT (PEM).",
)
@click.option(
    "--out",
    "-o",
    "out_path",
    type=click.Path(dir_okay=False, writable=True),
    help="Output file. Prints to stdout when omitted.",
)
def public(in_path, inform, outform, out_path):
    """Extracts the public key from the private key."""
    try:
        click.echo(f"Loading private key from {in_path}...", err=True)
        commands.public(
            in_path,
            inform=_inform(inform),
            outform=Envelope.parse(outform),
            out_path=out_path,
        )
        if out_path:
            click.echo(f"Public key saved to {out_path}", err=True)
    except DilikeyError as e:
        raise click.ClickException(f"Failed to extract public key: {e}")


@click.command("sign")
@click.option(
    "--sec",
    "sec_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Private key file.",
)
@click.option(
    "--inform",
    metavar="BIN|TEXT|RAW",
    help="Private key envelope. Detected from the file when omitted.",
)
@click.option(
    "--file",
    "-f",
    "file_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="File to sign.",
)
@click.option(
    "--out",
    "-o",
    "out_path",
    type=click.Path(dir_okay=False, writable=True),
    help="Signature file. Prints to stdout when omitted.",
)
def sign(sec_path, inform, file_path, out_path):
    """Signs a file."""
    try:
        click.echo(f"Loading private key from {sec_path}...", err=True)
        commands.sign(sec_path, file_path, inform=_inform(inform), out_path=out_path)
        if out_path:
            click.echo(f"Signature saved to {out_path}", err=True)
    except DilikeyError as e:
        raise click.ClickException(f"Failed to sign {file_path}: {e}")


@click.command("verify")
@click.option(
    "--pub",
    "pub_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Public key file.",
)
@click.option(
    "--inform",
    metavar="BIN|TEXT|RAW",
    help="Public key envelope. Detected from the file when omitted.",
)
@click.option(
    "--sig",
    "sig_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Signature file.",
)
@click.option(
    "--file",
    "-f",
    "file_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="File the signature covers.",
)
def verify(pub_path, inform, sig_path, file_path):
    """Verifies a file signature."""
    try:
        click.echo(f"Loading public key from {pub_path}...", err=True)
        result = commands.verify(
            pub_path, sig_path, file_path, inform=_inform(inform)
        )
    except DilikeyError as e:
        raise click.ClickException(f"Failed to verify {file_path}: {e}")
    click.echo(f"Verification: {result}")


@click.command("algorithms")
def algorithms():
    """Lists the supported security levels."""
    click.echo("Supported algorithms:", err=True)
    for level in registry.levels():
        params = registry.lengths_for(level)
        click.echo(
            f"  - {params.name} (level {level.value}) oid={params.oid} "
            f"pk={params.public_len} sk={params.secret_len} "
            f"sig={params.signature_len}"
        )
