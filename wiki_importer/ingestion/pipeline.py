"""Dump import orchestration: parse, derive taxonomy, batch-write posts."""

import random
import time
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from tqdm import tqdm

from wiki_importer.common.constants import (
    CATEGORY_NAME_MAX_LENGTH,
    DEFAULT_BATCH_SIZE,
    DEFAULT_USER_COUNT,
    PROGRESS_LOG_INTERVAL,
    TAG_NAME_MAX_LENGTH,
)
from wiki_importer.ingestion.batch_writer import BatchWriter, KeyCorrelation
from wiki_importer.ingestion.markup import extract_taxonomy_labels
from wiki_importer.ingestion.models import DecodedPage, PendingPost
from wiki_importer.ingestion.namespace_categories import NamespaceCategoryResolver
from wiki_importer.ingestion.parsers import DumpDialect, detect_dialect, parser_for
from wiki_importer.ingestion.taxonomy_cache import TaxonomyCache
from wiki_importer.models.category import Category
from wiki_importer.models.tag import Tag
from wiki_importer.repositories.post_repository import PostRepository
from wiki_importer.repositories.taxonomy_repository import TaxonomyRepository
from wiki_importer.utils.exceptions import DatabaseError, IngestionError, WikiImporterError
from wiki_importer.utils.logger import bind_run_context, clear_run_context

logger = structlog.get_logger(__name__)


class RunState(str, Enum):
    """Lifecycle of one import run."""

    NOT_STARTED = "not_started"
    SKIPPED = "skipped"
    SEEDING = "seeding"
    IMPORTING = "importing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ImportStatistics:
    """Statistics for one import run.

    Attributes:
        files_processed: Dump files fully imported
        pages_imported: Posts written
        redirects_skipped: Redirect pages filtered out
        pages_dropped: Records dropped by the parsers for missing required fields
        categories_created: Category rows created by this run
        tags_created: Tag rows created by this run
        post_tags_created: Post-tag rows submitted (duplicates are ignored by the store)
        batches_flushed: Bulk insert batches written
        run_id: Short random id bound to every log event of the run
        skipped: True when the run was a no-op because posts already existed
        start_time: Start time as unix timestamp
        end_time: End time as unix timestamp
        duration_seconds: Total processing duration
    """

    files_processed: int = 0
    pages_imported: int = 0
    redirects_skipped: int = 0
    pages_dropped: int = 0
    categories_created: int = 0
    tags_created: int = 0
    post_tags_created: int = 0
    batches_flushed: int = 0
    run_id: str = ""
    skipped: bool = False
    start_time: float = 0.0
    end_time: float = 0.0
    duration_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert statistics to dictionary for JSON serialization."""
        return {
            "files_processed": self.files_processed,
            "pages_imported": self.pages_imported,
            "redirects_skipped": self.redirects_skipped,
            "pages_dropped": self.pages_dropped,
            "categories_created": self.categories_created,
            "tags_created": self.tags_created,
            "post_tags_created": self.post_tags_created,
            "batches_flushed": self.batches_flushed,
            "run_id": self.run_id,
            "skipped": self.skipped,
            "duration_seconds": int(self.duration_seconds),
            "start_time": time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(self.start_time)),
            "end_time": time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(self.end_time)),
        }


class DumpImportPipeline:
    """Imports wiki dump files into the posts/categories/tags tables.

    For each file, in the order given:
    1. Pick the parser from the file extension
    2. Stream pages, dropping redirects
    3. Resolve the namespace category (JSON dumps share one umbrella category)
    4. Resolve [[분류:...]] / [[Category:...]] labels to tag ids
    5. Batch posts and flush them with their post_tags rows

    A run is a no-op when the posts table already holds rows. Category and
    tag caches live for the whole run and are seeded from the store first.
    The pipeline assumes it is the only writer of these tables.
    """

    def __init__(
        self,
        session: Session,
        batch_size: int = DEFAULT_BATCH_SIZE,
        key_correlation: KeyCorrelation = KeyCorrelation.RETURNING,
        user_count: int = DEFAULT_USER_COUNT,
        random_seed: int | None = None,
        show_progress: bool = False,
    ) -> None:
        """Initialize pipeline components.

        Args:
            session: SQLAlchemy session bound to the destination database
            batch_size: Posts per bulk insert
            key_correlation: Strategy for matching generated post ids to tags
            user_count: Upper bound of the random author_id range
            random_seed: Seed for author_id/created_at sampling (None = random)
            show_progress: Show a tqdm progress bar per file
        """
        self.logger = logger.bind(component="import_pipeline")
        self.session = session
        self.batch_size = batch_size
        self.key_correlation = key_correlation
        self.user_count = user_count
        self.rng = random.Random(random_seed)
        self.show_progress = show_progress

        self.posts = PostRepository(session)
        self.category_cache = TaxonomyCache(
            TaxonomyRepository(session, Category), CATEGORY_NAME_MAX_LENGTH, "category"
        )
        self.tag_cache = TaxonomyCache(
            TaxonomyRepository(session, Tag), TAG_NAME_MAX_LENGTH, "tag"
        )
        self.namespace_categories = NamespaceCategoryResolver(self.category_cache)

        self.state = RunState.NOT_STARTED
        self.stats = ImportStatistics()
        self._run_start = 0.0
        self._writer: BatchWriter | None = None

    def import_dumps(self, file_paths: Sequence[str | Path]) -> ImportStatistics:
        """Import dump files in order.

        Args:
            file_paths: Dump files; ".json" files are NamuWiki JSON, all others XML

        Returns:
            ImportStatistics for the run

        Raises:
            DumpParseError: If a dump is structurally malformed
            DatabaseError: If a store read or write fails
            IngestionError: If a dump cannot be read
        """
        paths = [str(path).strip() for path in file_paths]
        self._writer = None
        self.stats = ImportStatistics(run_id=uuid.uuid4().hex[:12])
        self.stats.start_time = time.time()
        self._run_start = time.monotonic()

        bind_run_context(import_run_id=self.stats.run_id)
        try:
            return self._run(paths)
        finally:
            clear_run_context()

    def _run(self, paths: list[str]) -> ImportStatistics:
        self.logger.info(
            "import_run_started",
            files=paths,
            batch_size=self.batch_size,
            key_correlation=self.key_correlation.value,
        )

        try:
            existing_posts = self.posts.count()
            if existing_posts > 0:
                self.state = RunState.SKIPPED
                self.stats.skipped = True
                self.logger.info("import_run_skipped_posts_exist", existing_posts=existing_posts)
                self._finish_stats()
                return self.stats

            self.state = RunState.SEEDING
            self._seed_caches(paths)

            self._writer = writer = BatchWriter(
                self.session,
                batch_size=self.batch_size,
                key_correlation=self.key_correlation,
                user_count=self.user_count,
                rng=self.rng,
            )

            self.state = RunState.IMPORTING
            for path in paths:
                self._import_file(path, writer)

        except WikiImporterError as e:
            self._fail(e)
            raise
        except SQLAlchemyError as e:
            self._fail(e)
            raise DatabaseError(f"Database operation failed: {e}") from e

        self._finish_stats()
        self.state = RunState.COMPLETED
        self.logger.info("import_run_completed", **self.stats.to_dict())
        return self.stats

    def _seed_caches(self, paths: list[str]) -> None:
        """Warm the caches from the store and make sure namespace categories exist."""
        self.category_cache.seed()
        self.tag_cache.seed()
        has_json = any(detect_dialect(path) is DumpDialect.JSON for path in paths)
        self.namespace_categories.preload(include_synthetic=has_json)

    def _import_file(self, path: str, writer: BatchWriter) -> None:
        """Stream one dump file through the batch writer.

        Raises:
            DumpParseError: If the dump is malformed
            DatabaseError: If a write fails
            IngestionError: If the dump cannot be opened
        """
        dialect = detect_dialect(path)
        parser = parser_for(path)
        file_logger = self.logger.bind(path=path, dialect=dialect.value)
        file_logger.info("file_import_started")

        file_start = time.monotonic()
        imported_before = self.stats.pages_imported
        tags_before = self.tag_cache.created_count
        umbrella_category_id = (
            self.namespace_categories.synthetic_category_id()
            if dialect is DumpDialect.JSON
            else None
        )

        try:
            with tqdm(
                desc=Path(path).name,
                unit="page",
                disable=not self.show_progress,
            ) as pbar:
                for page in parser.iter_pages(path):
                    pending = self._prepare(page, umbrella_category_id)
                    if pending is None:
                        continue
                    self._record_written(writer.add(pending), pbar)

                self._record_written(writer.flush(), pbar)

        except SQLAlchemyError as e:
            raise DatabaseError(f"Database write failed while importing {path}: {e}") from e
        except DatabaseError as e:
            file_logger.error("file_import_failed", error=e.message)
            raise DatabaseError(
                f"Database write failed while importing {path}: {e.message}",
                is_retryable=e.is_retryable,
            ) from e
        except OSError as e:
            raise IngestionError(f"Cannot read dump {path}: {e}") from e
        finally:
            self.stats.pages_dropped += parser.pages_dropped

        self.stats.files_processed += 1
        file_logger.info(
            "file_import_completed",
            pages_imported=self.stats.pages_imported - imported_before,
            tags_created=self.tag_cache.created_count - tags_before,
            duration_seconds=int(time.monotonic() - file_start),
        )

    def _prepare(self, page: DecodedPage, umbrella_category_id: int | None) -> PendingPost | None:
        """Resolve category and tags for a page; None for redirects."""
        if page.is_redirect:
            self.stats.redirects_skipped += 1
            return None

        if umbrella_category_id is not None:
            category_id = umbrella_category_id
        else:
            category_id = self.namespace_categories.resolve(page.namespace)

        # A label repeated on one page yields one post_tags row
        tag_ids = list(
            dict.fromkeys(
                self.tag_cache.lookup_or_create(label)
                for label in extract_taxonomy_labels(page.content)
            )
        )
        return PendingPost(page=page, category_id=category_id, tag_ids=tag_ids)

    def _record_written(self, count: int, pbar: tqdm) -> None:
        """Account for a flushed batch and log progress at each interval crossing."""
        if not count:
            return
        before = self.stats.pages_imported
        self.stats.pages_imported += count
        pbar.update(count)

        if before // PROGRESS_LOG_INTERVAL != self.stats.pages_imported // PROGRESS_LOG_INTERVAL:
            elapsed = max(time.monotonic() - self._run_start, 1.0)
            self.logger.info(
                "import_progress",
                pages_imported=self.stats.pages_imported,
                tags_created=self.tag_cache.created_count,
                pages_per_second=int(self.stats.pages_imported / elapsed),
            )

    def _finish_stats(self) -> None:
        self.stats.categories_created = self.category_cache.created_count
        self.stats.tags_created = self.tag_cache.created_count
        if self._writer is not None:
            self.stats.post_tags_created = self._writer.post_tags_written
            self.stats.batches_flushed = self._writer.flush_count
        self.stats.end_time = time.time()
        self.stats.duration_seconds = self.stats.end_time - self.stats.start_time

    def _fail(self, error: Exception) -> None:
        """Roll back the unflushed batch and record the failure."""
        self.state = RunState.FAILED
        self.session.rollback()
        self._finish_stats()
        self.logger.error(
            "import_run_failed",
            error=str(error),
            error_type=type(error).__name__,
            pages_imported=self.stats.pages_imported,
        )
