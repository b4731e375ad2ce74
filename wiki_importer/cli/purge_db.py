"""CLI command for deleting imported posts so a dump can be re-imported."""

import click
import structlog
from dotenv import load_dotenv
from sqlalchemy import delete
from sqlalchemy.orm import Session

from wiki_importer.cli.utils import database_session
from wiki_importer.models.post import Post
from wiki_importer.models.post_tag import PostTag
from wiki_importer.repositories.post_repository import PostRepository
from wiki_importer.repositories.post_tag_repository import PostTagRepository

load_dotenv()
logger = structlog.get_logger(__name__)


def _confirm_deletion(force: bool) -> bool:
    """Prompt for deletion confirmation."""
    click.echo("-" * 80)
    click.echo("WARNING: This will permanently delete ALL posts and post tags!")
    click.echo("-" * 80)
    click.echo()

    if force:
        return True

    confirmation: str = click.prompt(
        'Type "DELETE ALL" to confirm (or Ctrl+C to cancel)', default="", show_default=False
    )
    return confirmation == "DELETE ALL"


def _perform_purge(session: Session) -> tuple[int, int]:
    """Delete post_tags then posts; return rows deleted from each."""
    post_tags_deleted = session.execute(delete(PostTag)).rowcount
    posts_deleted = session.execute(delete(Post)).rowcount
    session.commit()
    return posts_deleted, post_tags_deleted


@click.command()
@click.option(
    "--database-url",
    envvar="DATABASE_URL",
    required=True,
    help="SQLAlchemy database URL (default: $DATABASE_URL)",
)
@click.option(
    "--force",
    is_flag=True,
    default=False,
    help="Skip confirmation prompt (requires typing DELETE ALL otherwise)",
)
def purge_db(database_url: str, force: bool) -> None:
    """Delete all posts and post tags.

    Categories and tags are kept; the next import reuses them.

    WARNING: This is a destructive operation that cannot be undone!
    """
    click.echo("=" * 80)
    click.echo("Wiki Dump Importer - Purge Imported Posts")
    click.echo("=" * 80)
    click.echo()

    try:
        with database_session(database_url) as session:
            post_count = PostRepository(session).count()
            post_tag_count = PostTagRepository(session).count()
            click.echo(f"  Posts: {post_count:,}")
            click.echo(f"  Post Tags: {post_tag_count:,}")
            click.echo()

            if post_count == 0 and post_tag_count == 0:
                click.echo("No data to delete - posts and post_tags are empty.")
                return

            if not _confirm_deletion(force):
                click.echo("\nDeletion cancelled - confirmation text did not match")
                return

            posts_deleted, post_tags_deleted = _perform_purge(session)

        click.echo("\n" + "=" * 80)
        click.echo("Purge Complete!")
        click.echo("=" * 80)
        click.echo(f"  Posts Deleted: {posts_deleted:,}")
        click.echo(f"  Post Tags Deleted: {post_tags_deleted:,}")
        click.echo()

        logger.warning(
            "database_purged", posts_deleted=posts_deleted, post_tags_deleted=post_tags_deleted
        )

    except KeyboardInterrupt:
        click.echo("\nPurge cancelled by user", err=True)
        raise click.Abort() from None
    except click.Abort:
        raise
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        logger.error("purge_db_failed", error=str(e), exc_info=True)
        raise click.Abort() from e


if __name__ == "__main__":
    purge_db()
