"""configdiff CLI entry point."""

from __future__ import annotations

import logging
import sys

import click

from configdiff import __version__
from configdiff.engine.pipeline import generate_diff
from configdiff.formatters import FORMAT_NAMES, get_formatter
from configdiff.schema import export_json_schema
from configdiff.sources import (
    DEFAULT_METADATA_ENTRY,
    FileSnapshotSource,
    SnapshotSource,
    TemplateSnapshotSource,
)

logger = logging.getLogger(__name__)

# Exit codes
EXIT_SUCCESS = 0  # No differences
EXIT_CHANGES = 1  # Differences found
EXIT_ERROR = 2  # Something went wrong


def _make_source(source_template: str | None, metadata_entry: str) -> SnapshotSource:
    """Create the snapshot source the version arguments are resolved against."""
    files = FileSnapshotSource(entry=metadata_entry)
    if source_template is None:
        return files
    return TemplateSnapshotSource(source_template, delegate=files)


@click.group()
@click.version_option(__version__, "--version", "-v")
def main() -> None:
    """configdiff: changelog of configuration properties between two releases."""


@main.command("diff")
@click.argument("left")
@click.argument("right")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(list(FORMAT_NAMES)),
    default="text",
    help="Output format (default: text).",
)
@click.option(
    "--encoding",
    default="utf-8",
    help="Character encoding of the metadata documents (default: utf-8).",
)
@click.option(
    "--source-template",
    default=None,
    help="Path template the versions are substituted into, e.g. 'dist/{version}/app.jar'.",
)
@click.option(
    "--metadata-entry",
    default=DEFAULT_METADATA_ENTRY,
    help=f"Metadata location inside archives and directories (default: {DEFAULT_METADATA_ENTRY}).",
)
@click.option("--verbose", is_flag=True, default=False, help="Log debug output to stderr.")
def diff_command(
    left: str,
    right: str,
    fmt: str,
    encoding: str,
    source_template: str | None,
    metadata_entry: str,
    verbose: bool,
) -> None:
    """Compare the configuration metadata of two releases.

    LEFT is the older release and RIGHT the newer one. Each is a path to a
    metadata JSON file, a jar/zip archive or a directory, or a version label
    when --source-template is given.

    \b
    Exit codes:
      0  No differences
      1  Differences found
      2  Error
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        source = _make_source(source_template, metadata_entry)
        result = generate_diff(source, left, right, encoding=encoding)
        click.echo(get_formatter(fmt).format_diff(result))
    except Exception as exc:
        logger.debug("CLI error", exc_info=True)
        click.echo(f"Error: {exc}", err=True)
        sys.exit(EXIT_ERROR)

    sys.exit(EXIT_SUCCESS if result.is_empty else EXIT_CHANGES)


@main.command()
def schema() -> None:
    """Print the JSON schema of the diff output."""
    click.echo(export_json_schema())
