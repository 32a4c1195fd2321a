"""CLI command for extracting RFC sections to CSV.

Implements the 'rfcsections extract' command, which fetches one or more
RFC HTML documents and writes one CSV file per document.
"""

import asyncio
import sys

import click

from rfcsections.config.loader import ConfigLoader
from rfcsections.lib.errors import ConfigError, OutputError
from rfcsections.lib.logging_config import get_logger, setup_logging
from rfcsections.lib.pipeline import BatchResult, SectionPipeline, process_documents

logger = get_logger(__name__)

# Exit codes
EXIT_OK = 0
EXIT_DOCUMENT_FAILED = 1
EXIT_CONFIG_ERROR = 2
EXIT_OUTPUT_ERROR = 3


@click.command(name="extract")
@click.argument("documents", nargs=-1, required=True)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to rfcsections.yaml (default: ./rfcsections.yml|yaml if present)",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for the generated CSV files",
)
@click.option(
    "--base-url",
    default=None,
    help="URL prefix for bare RFC numbers",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="HTTP timeout in seconds",
)
@click.option(
    "--include-all",
    is_flag=True,
    help="Keep boilerplate categories (Introduction, References, ...)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output with debug information",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Only print errors",
)
def extract(
    documents: tuple[str, ...],
    config_path: str | None,
    output_dir: str | None,
    base_url: str | None,
    timeout: float | None,
    include_all: bool,
    verbose: bool,
    quiet: bool,
) -> None:
    """Extract numbered sections from RFC documents into CSV files.

    DOCUMENTS are RFC numbers (looked up under the base URL) or full URLs.
    Each document produces <name>.csv with the columns
    Category, Name, Title, Description, Notes.

    \b
    EXAMPLES:

        rfcsections extract 5280

        rfcsections extract 7540 9110 -o out/
    """
    setup_logging(verbose=verbose, quiet=quiet)
    logger.debug(f"Extract command invoked: documents={list(documents)}")

    try:
        config = ConfigLoader().load(
            config_path,
            overrides={
                "retrieval": {"base_url": base_url, "timeout": timeout},
                "output": {"output_dir": output_dir},
            },
        )
    except ConfigError as e:
        logger.error(f"Configuration error: {e}", exc_info=True)
        click.echo(f"Configuration Error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    pipeline = SectionPipeline(config, include_all=include_all)
    try:
        batch = asyncio.run(process_documents(documents, pipeline))
    except OutputError as e:
        logger.error(f"Output error: {e}", exc_info=True)
        click.echo(f"Output Error: {e}", err=True)
        sys.exit(EXIT_OUTPUT_ERROR)
    finally:
        pipeline.client.close()

    _report(batch, quiet)
    sys.exit(EXIT_DOCUMENT_FAILED if batch.failed else EXIT_OK)


def _report(batch: BatchResult, quiet: bool) -> None:
    """Echo one line per document."""
    for result in batch.results:
        if result.error is not None:
            message = f"{result.identifier}: {result.error}"
            if result.partial:
                message += (
                    f" (partial file {result.output_path}, "
                    f"{result.written} sections)"
                )
            click.echo(message, err=True)
        elif not quiet:
            click.echo(
                f"{result.identifier} -> {result.output_path} "
                f"({result.written} sections)"
            )
