import logging
import sys
from collections.abc import Sequence
from datetime import date, datetime
from typing import NoReturn

import click
import structlog

from iofxml.constants import DATE_FORMAT
from iofxml.exceptions import ArgumentError, IofXmlError, UserCancellation
from iofxml.merger import merge_files
from iofxml.models import CatalogEntry
from iofxml.scraper import Scraper
from iofxml.sources.winsplits import ResultFetcher, WinsplitsCatalog
from iofxml.workflow import DownloadWorkflow

logger = structlog.get_logger(__name__)


def configure_logging(verbose: bool = False) -> None:
    """Routes structlog through stdlib logging on stderr.

    Prompts and results are printed on stdout, so logs never interleave
    with the selection menus.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def parse_date(value: str | None) -> date:
    """Parses the --date option, defaulting to today."""
    if not value:
        return date.today()
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as e:
        raise ArgumentError(
            f"Invalid date '{value}'",
            parameter="date",
            expected_format="YYYY-MM-DD",
            example="2025-09-01",
        ) from e


def prompt_select(message: str, entries: Sequence[CatalogEntry]) -> CatalogEntry | None:
    """Numbered selection menu. Returns None when the operator aborts."""
    click.echo(message)
    for number, entry in enumerate(entries, start=1):
        click.echo(f"  {number:>3}. {entry.name}")

    try:
        choice = click.prompt("Number", type=click.IntRange(1, len(entries)))
    except click.Abort:
        return None
    return entries[choice - 1]


def _fail(error: IofXmlError) -> NoReturn:
    if isinstance(error, UserCancellation):
        click.echo("Cancelled.", err=True)
    else:
        logger.error("command_failed", **error.to_dict())
        click.echo(f"Error: {error}", err=True)
    sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose):
    """IOF XML split time tools."""
    configure_logging(verbose)


@main.command()
@click.option("--date", "date_str", help="Event date (YYYY-MM-DD), default today.")
@click.option(
    "--output-dir",
    default=".",
    type=click.Path(file_okay=False),
    help="Directory for the downloaded file.",
)
def winsplits(date_str, output_dir):
    """Interactively download split times from WinSplits."""
    try:
        day = parse_date(date_str)
    except ArgumentError as e:
        raise click.BadParameter(e.message, param_hint="--date") from e

    click.echo(f"Fetching events from WinSplits on {day:%a %b %d %Y}")

    scraper = Scraper()
    workflow = DownloadWorkflow(
        WinsplitsCatalog(scraper=scraper),
        ResultFetcher(scraper=scraper),
        prompt_select,
        output_dir,
    )
    try:
        path = workflow.run(day)
    except IofXmlError as e:
        _fail(e)

    click.echo(f"IOF XML split times file downloaded to {path}.")


@main.command()
@click.argument("paths", nargs=-1, type=click.Path())
def merge(paths):
    """Merge split times files: merge INPUT1 INPUT2 [INPUT3...] OUTPUT.

    PersonResult records of every input after the first are appended to the
    ClassResult of the first input.
    """
    if len(paths) < 3:
        raise click.UsageError(
            "merge command requires at least 2 input files and 1 output file"
        )

    *inputs, output = paths
    try:
        merged = merge_files(inputs, output)
    except IofXmlError as e:
        _fail(e)

    count = len(merged.find_person_result_records())
    click.echo(f"Merged {len(inputs)} files ({count} results) into {output}.")


if __name__ == "__main__":
    main()
