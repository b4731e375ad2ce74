"""Tag model: flat hashtag-style label."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from wiki_importer.common.constants import TAG_NAME_MAX_LENGTH
from wiki_importer.models.base import Base
from wiki_importer.models.types import BigIntegerKey


class Tag(Base):
    """Tag extracted from [[Category:...]] / [[분류:...]] markup."""

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(BigIntegerKey, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(TAG_NAME_MAX_LENGTH), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name='{self.name}')>"
