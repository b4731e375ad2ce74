"""Post model: one imported wiki page."""

from datetime import UTC, datetime

from sqlalchemy import BigInteger, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wiki_importer.common.constants import POST_TITLE_MAX_LENGTH
from wiki_importer.models.base import Base
from wiki_importer.models.types import BigIntegerKey


class Post(Base):
    """A board post created from a wiki page.

    Attributes:
        id: Auto-increment identifier, assigned in insertion order
        title: Page title (truncated to 512 characters)
        content: Raw wiki markup
        author_id: Owning user id (randomly assigned for dump imports)
        category_id: Category derived from the page namespace
        view_count: Number of views
        like_count: Number of likes
        created_at: Revision timestamp, or a random instant when the dump has none
        updated_at: Last edit time (None for imported posts)
    """

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(BigIntegerKey, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(POST_TITLE_MAX_LENGTH), nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    author_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    category_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True, index=True)
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title}')>"
