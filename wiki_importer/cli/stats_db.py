"""CLI command for destination table statistics."""

import click
import structlog
from dotenv import load_dotenv

from wiki_importer.cli.utils import database_session
from wiki_importer.models.category import Category
from wiki_importer.models.tag import Tag
from wiki_importer.repositories.post_repository import PostRepository
from wiki_importer.repositories.post_tag_repository import PostTagRepository
from wiki_importer.repositories.taxonomy_repository import TaxonomyRepository

load_dotenv()
logger = structlog.get_logger(__name__)


@click.command()
@click.option(
    "--database-url",
    envvar="DATABASE_URL",
    required=True,
    help="SQLAlchemy database URL (default: $DATABASE_URL)",
)
def stats_db(database_url: str) -> None:
    """Display row counts of the posts, categories, tags and post_tags tables."""
    click.echo("=" * 80)
    click.echo("Wiki Dump Importer - Database Statistics")
    click.echo("=" * 80)
    click.echo()

    try:
        with database_session(database_url) as session:
            posts = PostRepository(session)
            counts = {
                "Posts": posts.count(),
                "Categories": TaxonomyRepository(session, Category).count(),
                "Tags": TaxonomyRepository(session, Tag).count(),
                "Post Tags": PostTagRepository(session).count(),
            }
            max_post_id = posts.max_id()

        click.echo("-" * 80)
        click.echo("Row Counts")
        click.echo("-" * 80)
        for label, count in counts.items():
            click.echo(f"  {label}: {count:,}")
        click.echo(f"  Max Post ID: {max_post_id:,}")
        click.echo()

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        raise click.Abort() from None
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        logger.error("stats_db_failed", error=str(e), exc_info=True)
        raise click.Abort() from e


if __name__ == "__main__":
    stats_db()
