import click

from dilikey import __version__
from dilikey.lib import log

# Import individual commands from modules
from dilikey.cli.keys import generate, public, sign, verify, algorithms


@click.group()
@click.version_option(__version__, prog_name="dilikey")
@click.option(
    "--log-level",
    envvar="DILIKEY_LOG_LEVEL",
    default="WARNING",
    show_default=True,
    help="Logging level for diagnostics written to stderr.",
)
def cli(log_level):
    """Utility for generating, signing and verifying with Dilithium keys."""
    log.set_level(log_level)


# Add key commands
cli.add_command(generate)
cli.add_command(public)
cli.add_command(sign)
cli.add_command(verify)
cli.add_command(algorithms)


if __name__ == "__main__":
    cli()
