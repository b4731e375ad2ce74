"""Batched post inserts with tag association."""

import random
from datetime import UTC, datetime
from enum import Enum
from typing import Any

import structlog
from sqlalchemy.orm import Session

from wiki_importer.common.constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_USER_COUNT,
    KEY_CORRELATION_MAX_ID,
    KEY_CORRELATION_RETURNING,
    POST_TITLE_MAX_LENGTH,
    RANDOM_CREATED_AT_END,
    RANDOM_CREATED_AT_START,
)
from wiki_importer.ingestion.markup import truncate
from wiki_importer.ingestion.models import PendingPost
from wiki_importer.repositories.post_repository import PostRepository
from wiki_importer.repositories.post_tag_repository import PostTagRepository
from wiki_importer.utils.exceptions import DatabaseError

logger = structlog.get_logger(__name__)


class KeyCorrelation(str, Enum):
    """How post ids are matched to batch entries after a bulk insert.

    RETURNING reads the generated ids back from the insert itself.
    MAX_ID reads max(id) before the insert and assumes the batch received
    max_id+1 .. max_id+N in order; it is only correct while this process is
    the sole writer of the posts table and ids have no gaps.
    """

    RETURNING = KEY_CORRELATION_RETURNING
    MAX_ID = KEY_CORRELATION_MAX_ID


class BatchWriter:
    """Accumulates pending posts and writes them in fixed-size batches.

    Each flush performs one multi-row posts insert followed by one
    multi-row post_tags insert, then commits. Batch order is insertion
    order, which the MAX_ID strategy relies on.
    """

    def __init__(
        self,
        session: Session,
        batch_size: int = DEFAULT_BATCH_SIZE,
        key_correlation: KeyCorrelation = KeyCorrelation.RETURNING,
        user_count: int = DEFAULT_USER_COUNT,
        rng: random.Random | None = None,
        post_repository: PostRepository | None = None,
        post_tag_repository: PostTagRepository | None = None,
    ) -> None:
        """Initialize the writer.

        Args:
            session: Session used for writes and per-batch commits
            batch_size: Number of posts per flush
            key_correlation: Strategy for recovering generated post ids
            user_count: author_id is drawn uniformly from 1..user_count
            rng: Random source for author_id and missing created_at
            post_repository: Override for the posts repository
            post_tag_repository: Override for the post_tags repository
        """
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")

        self.session = session
        self.batch_size = batch_size
        self.user_count = user_count
        self.rng = rng or random.Random()
        self.posts = post_repository or PostRepository(session)
        self.post_tags = post_tag_repository or PostTagRepository(session)
        self.logger = logger.bind(component="batch_writer")

        if key_correlation is KeyCorrelation.RETURNING and not self.posts.supports_returning_ids:
            self.logger.warning(
                "returning_ids_unsupported_falling_back",
                fallback=KeyCorrelation.MAX_ID.value,
            )
            key_correlation = KeyCorrelation.MAX_ID
        self.key_correlation = key_correlation

        self._pending: list[PendingPost] = []
        self.posts_written = 0
        self.post_tags_written = 0
        self.flush_count = 0

    def __len__(self) -> int:
        return len(self._pending)

    def add(self, pending: PendingPost) -> int:
        """Queue a post, flushing when the batch is full.

        Returns:
            Number of posts written by this call (0 unless a flush happened)
        """
        self._pending.append(pending)
        if len(self._pending) >= self.batch_size:
            return self.flush()
        return 0

    def flush(self) -> int:
        """Write all queued posts and their tag associations.

        Returns:
            Number of posts written

        Raises:
            DatabaseError: If the store returns a different number of ids than rows
        """
        if not self._pending:
            return 0

        batch = self._pending
        self._pending = []
        rows = [self._build_row(pending) for pending in batch]

        post_ids = self._insert_posts(rows)
        if len(post_ids) != len(batch):
            raise DatabaseError(
                f"Inserted {len(batch)} posts but received {len(post_ids)} ids"
            )

        pairs = [
            (post_id, tag_id)
            for post_id, pending in zip(post_ids, batch, strict=True)
            for tag_id in pending.tag_ids
        ]
        self.post_tags.bulk_insert_ignore(pairs)
        self.session.commit()

        self.posts_written += len(batch)
        self.post_tags_written += len(pairs)
        self.flush_count += 1
        self.logger.debug(
            "batch_flushed",
            posts=len(batch),
            post_tags=len(pairs),
            first_post_id=post_ids[0],
            last_post_id=post_ids[-1],
        )
        return len(batch)

    def _insert_posts(self, rows: list[dict[str, Any]]) -> list[int]:
        """Insert rows and return their ids in row order."""
        if self.key_correlation is KeyCorrelation.RETURNING:
            return self.posts.bulk_insert_returning_ids(rows)

        before_max_id = self.posts.max_id()
        self.posts.bulk_insert(rows)
        return list(range(before_max_id + 1, before_max_id + 1 + len(rows)))

    def _build_row(self, pending: PendingPost) -> dict[str, Any]:
        page = pending.page
        return {
            "title": truncate(page.title, POST_TITLE_MAX_LENGTH),
            "content": page.content,
            "author_id": self.rng.randint(1, self.user_count),
            "category_id": pending.category_id,
            "view_count": 0,
            "like_count": 0,
            "created_at": page.created_at or self._random_created_at(),
        }

    def _random_created_at(self) -> datetime:
        start = int(RANDOM_CREATED_AT_START.timestamp())
        end = int(RANDOM_CREATED_AT_END.timestamp())
        return datetime.fromtimestamp(self.rng.randrange(start, end), tz=UTC)
