"""Repository for name-keyed taxonomy tables (categories, tags)."""

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from wiki_importer.models.category import Category
from wiki_importer.models.tag import Tag
from wiki_importer.utils.database import insert_ignore

TaxonomyModel = type[Category] | type[Tag]


class TaxonomyRepository:
    """Name-keyed lookups and idempotent creation for Category or Tag."""

    def __init__(self, session: Session, model: TaxonomyModel) -> None:
        """Initialize repository.

        Args:
            session: SQLAlchemy session
            model: Category or Tag
        """
        self.session = session
        self.model = model

    def count(self) -> int:
        stmt = select(func.count()).select_from(self.model)
        return self.session.execute(stmt).scalar_one()

    def load_all_names(self) -> list[tuple[str, int]]:
        """Return every (name, id) pair in the table."""
        stmt = select(self.model.name, self.model.id)
        return [(name, int(row_id)) for name, row_id in self.session.execute(stmt)]

    def insert_if_absent(self, name: str) -> bool:
        """Insert a row named name unless one already exists.

        The row is committed immediately so concurrent lookups by name see it.

        Returns:
            True if a row was inserted, False if the name already existed
        """
        stmt = insert_ignore(self.session, self.model.__table__).values(name=name)
        result = self.session.execute(stmt)
        self.session.commit()
        return bool(result.rowcount)

    def find_id_by_name(self, name: str) -> int | None:
        stmt = select(self.model.id).where(self.model.name == name)
        row_id = self.session.execute(stmt).scalar_one_or_none()
        return int(row_id) if row_id is not None else None
