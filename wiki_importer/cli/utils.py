"""Shared utilities for CLI commands."""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy.orm import Session

from wiki_importer.utils.config import parse_import_paths
from wiki_importer.utils.database import (
    create_db_engine,
    create_schema,
    create_session_factory,
)


def resolve_dump_paths(dump_paths: tuple[Path, ...], env_value: str | None) -> list[str]:
    """Return dump paths from the command line, else from WIKI_IMPORT_PATH.

    Args:
        dump_paths: Positional paths given on the command line
        env_value: Raw WIKI_IMPORT_PATH value

    Returns:
        Ordered list of dump paths

    Raises:
        ValueError: If neither source names a file
    """
    if dump_paths:
        return [str(path) for path in dump_paths]

    paths = parse_import_paths(env_value)
    if not paths:
        raise ValueError("No dump files given and WIKI_IMPORT_PATH is not set")
    return paths


@contextmanager
def database_session(database_url: str, ensure_schema: bool = False) -> Iterator[Session]:
    """Open a session on database_url, disposing the engine afterwards.

    Args:
        database_url: SQLAlchemy database URL
        ensure_schema: Create missing tables before yielding
    """
    engine = create_db_engine(database_url)
    try:
        if ensure_schema:
            create_schema(engine)
        session_factory = create_session_factory(engine)
        with session_factory() as session:
            yield session
    finally:
        engine.dispose()
