"""Engine/session factories and dialect-aware insert helpers."""

from sqlalchemy import Insert, Table, create_engine, insert
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from wiki_importer.models.base import Base
from wiki_importer.utils.exceptions import DatabaseError


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create a synchronous SQLAlchemy engine.

    Args:
        database_url: SQLAlchemy URL, e.g. "sqlite:///data/wiki.db"
        echo: Log every statement (debugging only)

    Returns:
        Engine instance
    """
    return create_engine(database_url, echo=echo)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a session factory bound to engine."""
    return sessionmaker(engine, expire_on_commit=False)


def create_schema(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(engine)


def dialect_name(session: Session) -> str:
    """Return the dialect name of the session's bind ("sqlite", "postgresql", ...)."""
    return session.get_bind().dialect.name


def insert_ignore(session: Session, table: Table) -> Insert:
    """Build an INSERT that silently skips rows violating a unique constraint.

    Args:
        session: Session whose bind decides the SQL dialect
        table: Target table

    Returns:
        Insert statement for the active dialect

    Raises:
        DatabaseError: If the dialect has no conflict-tolerant insert
    """
    name = dialect_name(session)
    if name == "sqlite":
        return sqlite_insert(table).on_conflict_do_nothing()
    if name == "postgresql":
        return postgresql_insert(table).on_conflict_do_nothing()
    if name in ("mysql", "mariadb"):
        return insert(table).prefix_with("IGNORE")
    raise DatabaseError(f"Dialect {name!r} does not support insert-or-ignore")
