"""Pytest configuration and shared fixtures."""

from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from tests.dump_builders import XML_FOOTER, XML_HEADER
from wiki_importer.utils.database import create_db_engine, create_schema, create_session_factory


@pytest.fixture
def write_xml_dump(tmp_path: Path) -> Callable[..., Path]:
    """Write a MediaWiki XML dump made of rendered <page> elements."""

    def _write(pages: list[str], name: str = "dump.xml") -> Path:
        path = tmp_path / name
        path.write_text(XML_HEADER + "".join(pages) + XML_FOOTER, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_json_dump(tmp_path: Path) -> Callable[..., Path]:
    """Write a NamuWiki JSON dump from raw JSON text."""

    def _write(content: str, name: str = "namuwiki.json") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Return path to temporary test database."""
    return tmp_path / "test.db"


@pytest.fixture
def db_engine(temp_db_path: Path) -> Generator[Engine, None, None]:
    """Create a SQLite engine with the full schema."""
    engine = create_db_engine(f"sqlite:///{temp_db_path}")
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine: Engine) -> Generator[Session, None, None]:
    """Create a session for testing."""
    session_factory = create_session_factory(db_engine)
    with session_factory() as session:
        yield session
        session.rollback()
