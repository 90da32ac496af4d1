"""Run the pagetran CLI with ``python -m cli.commands``."""

from .main import cli

if __name__ == "__main__":
    cli()
