"""Unit tests for stats-db CLI command."""

from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from wiki_importer.cli.stats_db import stats_db
from wiki_importer.models import Category, Post, PostTag, Tag


class TestStatsDbCLI:
    """Test stats-db CLI command."""

    def test_stats_db_help_shows_options(self) -> None:
        """Test that --help shows expected options."""
        result = CliRunner().invoke(stats_db, ["--help"])

        assert result.exit_code == 0
        assert "--database-url" in result.output

    def test_stats_db_counts_rows(self, db_engine: Engine, temp_db_path: Path) -> None:
        """Test that row counts and max post id are printed."""
        with Session(db_engine) as session:
            session.add_all([Category(name="일반 문서"), Tag(name="Foo")])
            session.add_all([Post(title="A", author_id=1), Post(title="B", author_id=2)])
            session.flush()
            session.add(PostTag(post_id=1, tag_id=1))
            session.commit()

        result = CliRunner().invoke(stats_db, ["--database-url", f"sqlite:///{temp_db_path}"])

        assert result.exit_code == 0, result.output
        assert "Posts: 2" in result.output
        assert "Categories: 1" in result.output
        assert "Tags: 1" in result.output
        assert "Post Tags: 1" in result.output
        assert "Max Post ID: 2" in result.output

    def test_stats_db_database_error_aborts(self) -> None:
        """Test that a failing store aborts with the error message."""
        with patch("wiki_importer.cli.stats_db.database_session") as mock_session:
            mock_session.side_effect = RuntimeError("connection refused")

            result = CliRunner().invoke(stats_db, ["--database-url", "sqlite:///x.db"])

        assert result.exit_code != 0
        assert "Error: connection refused" in result.output
