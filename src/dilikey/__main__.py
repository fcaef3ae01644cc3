# Usage:
#   python -m dilikey generate --algorithm 3 --out sec.pem
from dilikey.cli.main import cli

if __name__ == "__main__":
    cli()
