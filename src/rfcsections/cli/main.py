"""Entry point for the rfcsections command line."""

import click

from rfcsections import __version__
from rfcsections.cli.commands.extract import extract


@click.group()
@click.version_option(__version__, prog_name="rfcsections")
def main() -> None:
    """Extract numbered sections from RFC HTML documents into CSV."""


main.add_command(extract)


if __name__ == "__main__":
    main()
