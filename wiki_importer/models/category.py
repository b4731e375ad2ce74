"""Category model: hierarchical board category."""

from sqlalchemy import BigInteger, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from wiki_importer.common.constants import CATEGORY_NAME_MAX_LENGTH
from wiki_importer.models.base import Base
from wiki_importer.models.types import BigIntegerKey


class Category(Base):
    """Category identified by its unique name.

    Imported pages get one category per wiki namespace.
    """

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(BigIntegerKey, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(
        String(CATEGORY_NAME_MAX_LENGTH), unique=True, nullable=False
    )
    parent_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    post_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"
