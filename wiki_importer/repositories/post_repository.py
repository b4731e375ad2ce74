"""Repository for bulk Post writes."""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import func, insert, select
from sqlalchemy.orm import Session

from wiki_importer.models.post import Post


class PostRepository:
    """Repository for the posts table.

    Only the operations the bulk importer needs: emptiness check, max id,
    and multi-row inserts with or without generated ids.
    """

    def __init__(self, session: Session) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session
        """
        self.session = session

    def count(self) -> int:
        """Return the number of posts."""
        stmt = select(func.count()).select_from(Post)
        return self.session.execute(stmt).scalar_one()

    def max_id(self) -> int:
        """Return the highest assigned post id, 0 for an empty table."""
        stmt = select(func.coalesce(func.max(Post.id), 0))
        return int(self.session.execute(stmt).scalar_one())

    @property
    def supports_returning_ids(self) -> bool:
        """Whether a multi-row insert can return ids in parameter order."""
        dialect = self.session.get_bind().dialect
        return bool(getattr(dialect, "insert_executemany_returning_sort_by_parameter_order", False))

    def bulk_insert(self, rows: Sequence[dict[str, Any]]) -> None:
        """Insert rows in one executemany, without reading back ids.

        Args:
            rows: Column dicts in insertion order
        """
        if not rows:
            return
        self.session.execute(insert(Post), list(rows))

    def bulk_insert_returning_ids(self, rows: Sequence[dict[str, Any]]) -> list[int]:
        """Insert rows and return their generated ids.

        Args:
            rows: Column dicts in insertion order

        Returns:
            Generated ids, index-aligned with rows
        """
        if not rows:
            return []
        stmt = insert(Post).returning(Post.id, sort_by_parameter_order=True)
        result = self.session.execute(stmt, list(rows))
        return [int(post_id) for post_id in result.scalars().all()]
