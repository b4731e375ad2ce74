"""CLI command for importing wiki dump files."""

import os
from pathlib import Path
from typing import TYPE_CHECKING

import click
import structlog
from dotenv import load_dotenv

from wiki_importer.cli.utils import database_session, resolve_dump_paths
from wiki_importer.common.constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_KEY_CORRELATION,
    DEFAULT_USER_COUNT,
    KEY_CORRELATION_CHOICES,
)
from wiki_importer.ingestion.batch_writer import KeyCorrelation
from wiki_importer.ingestion.pipeline import DumpImportPipeline
from wiki_importer.utils.logger import LOG_FORMAT_CHOICES, LOG_FORMAT_CONSOLE, configure_logging

# Load environment variables from .env file
load_dotenv()

if TYPE_CHECKING:
    from wiki_importer.ingestion.pipeline import ImportStatistics

logger = structlog.get_logger(__name__)


def _display_configuration(
    paths: list[str], batch_size: int, key_correlation: str, create_schema: bool
) -> None:
    """Display import configuration to user."""
    click.echo(f"Dump Files: {len(paths)}")
    for path in paths:
        click.echo(f"   - {path}")
    click.echo(f"Batch Size: {batch_size}")
    click.echo(f"Key Correlation: {key_correlation}")
    click.echo(f"Create Schema: {create_schema}")
    click.echo()


def _display_summary(stats: "ImportStatistics") -> None:
    """Display import summary."""
    click.echo()
    click.echo("=" * 80)
    if stats.skipped:
        click.echo("Import Skipped: posts table already contains data")
        click.echo("=" * 80)
        click.echo()
        return

    click.echo("Import Complete!")
    click.echo("=" * 80)
    click.echo(f"  Files Processed: {stats.files_processed}")
    click.echo(f"  Pages Imported: {stats.pages_imported:,}")
    click.echo(f"  Redirects Skipped: {stats.redirects_skipped:,}")
    click.echo(f"  Pages Dropped: {stats.pages_dropped:,}")
    click.echo(f"  Categories Created: {stats.categories_created:,}")
    click.echo(f"  Tags Created: {stats.tags_created:,}")
    click.echo(f"  Post Tags Written: {stats.post_tags_created:,}")
    click.echo(f"  Batches Flushed: {stats.batches_flushed:,}")
    click.echo(f"  Duration: {int(stats.duration_seconds)}s")
    click.echo()


@click.command()
@click.argument(
    "dump_paths",
    nargs=-1,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--database-url",
    envvar="DATABASE_URL",
    required=True,
    help="SQLAlchemy database URL (default: $DATABASE_URL)",
)
@click.option(
    "--batch-size",
    type=click.IntRange(min=1),
    default=DEFAULT_BATCH_SIZE,
    help=f"Number of posts per bulk insert (default: {DEFAULT_BATCH_SIZE})",
)
@click.option(
    "--key-correlation",
    type=click.Choice(KEY_CORRELATION_CHOICES),
    default=DEFAULT_KEY_CORRELATION,
    help="How generated post ids are matched to tags (default: returning)",
)
@click.option(
    "--user-count",
    type=click.IntRange(min=1),
    default=DEFAULT_USER_COUNT,
    help=f"Random author_id upper bound (default: {DEFAULT_USER_COUNT})",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Random seed for author_id and missing timestamps",
)
@click.option(
    "--create-schema",
    is_flag=True,
    help="Create missing tables before importing",
)
@click.option(
    "--log-level",
    default="INFO",
    help="Logging level (default: INFO)",
)
@click.option(
    "--log-format",
    type=click.Choice(LOG_FORMAT_CHOICES),
    default=LOG_FORMAT_CONSOLE,
    help="Log line format (default: console)",
)
def import_dumps(  # noqa: PLR0913
    dump_paths: tuple[Path, ...],
    database_url: str,
    batch_size: int,
    key_correlation: str,
    user_count: int,
    seed: int | None,
    create_schema: bool,
    log_level: str,
    log_format: str,
) -> None:
    """Import wiki dump files (MediaWiki XML or NamuWiki JSON) into the posts tables.

    Files are imported in the given order. Files ending in .json are parsed
    as NamuWiki JSON, everything else as MediaWiki XML. Without arguments the
    comma-separated WIKI_IMPORT_PATH is used.

    The import is skipped entirely when the posts table already has rows.

    Examples:

        \b
        # Import a Korean Wikipedia dump into SQLite
        wiki-import --database-url sqlite:///data/wiki.db --create-schema kowiki.xml

        \b
        # Import two dumps in order
        wiki-import kowiki.xml namuwiki.json
    """
    configure_logging(log_level, log_format)

    click.echo("=" * 80)
    click.echo("Wiki Dump Importer")
    click.echo("=" * 80)
    click.echo()

    try:
        paths = resolve_dump_paths(dump_paths, os.getenv("WIKI_IMPORT_PATH"))
    except ValueError as e:
        click.echo(f"  {e}", err=True)
        raise click.Abort() from e

    _display_configuration(paths, batch_size, key_correlation, create_schema)

    try:
        with database_session(database_url, ensure_schema=create_schema) as session:
            pipeline = DumpImportPipeline(
                session,
                batch_size=batch_size,
                key_correlation=KeyCorrelation(key_correlation),
                user_count=user_count,
                random_seed=seed,
                show_progress=True,
            )
            stats = pipeline.import_dumps(paths)

        _display_summary(stats)

    except KeyboardInterrupt:
        click.echo()
        click.echo("  Import interrupted by user", err=True)
        raise click.Abort() from None

    except Exception as e:
        click.echo()
        click.echo(f"  Import failed: {e}", err=True)
        logger.error("import_failed", error=str(e), exc_info=True)
        raise click.Abort() from e


if __name__ == "__main__":
    import_dumps()
