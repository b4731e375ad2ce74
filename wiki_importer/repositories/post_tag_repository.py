"""Repository for post x tag association rows."""

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from wiki_importer.models.post_tag import PostTag
from wiki_importer.utils.database import insert_ignore


class PostTagRepository:
    """Bulk writes for the post_tags table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def count(self) -> int:
        stmt = select(func.count()).select_from(PostTag)
        return self.session.execute(stmt).scalar_one()

    def bulk_insert_ignore(self, pairs: Sequence[tuple[int, int]]) -> None:
        """Insert (post_id, tag_id) pairs, skipping pairs that already exist.

        Args:
            pairs: (post_id, tag_id) tuples
        """
        if not pairs:
            return
        stmt = insert_ignore(self.session, PostTag.__table__)
        self.session.execute(
            stmt, [{"post_id": post_id, "tag_id": tag_id} for post_id, tag_id in pairs]
        )
