"""Unit tests for the import-dumps CLI command."""

from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from tests.dump_builders import xml_page
from wiki_importer.cli.import_dumps import import_dumps
from wiki_importer.cli.utils import resolve_dump_paths
from wiki_importer.utils.exceptions import DumpParseError


@pytest.fixture(autouse=True)
def no_env_paths(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("WIKI_IMPORT_PATH", raising=False)


class TestImportDumpsCLI:
    """Test import-dumps CLI command."""

    def test_help_shows_options(self) -> None:
        """Test that --help shows expected options."""
        result = CliRunner().invoke(import_dumps, ["--help"])

        assert result.exit_code == 0
        assert "--database-url" in result.output
        assert "--batch-size" in result.output
        assert "--key-correlation" in result.output
        assert "--create-schema" in result.output

    def test_no_paths_aborts(self, temp_db_path: Path) -> None:
        """Test that a run without files or WIKI_IMPORT_PATH aborts."""
        result = CliRunner().invoke(import_dumps, ["--database-url", f"sqlite:///{temp_db_path}"])

        assert result.exit_code != 0
        assert "WIKI_IMPORT_PATH is not set" in result.output

    def test_missing_file_rejected(self, temp_db_path: Path, tmp_path: Path) -> None:
        """Test that click rejects a dump path that does not exist."""
        result = CliRunner().invoke(
            import_dumps,
            ["--database-url", f"sqlite:///{temp_db_path}", str(tmp_path / "missing.xml")],
        )

        assert result.exit_code == 2

    def test_invalid_key_correlation_rejected(
        self, temp_db_path: Path, write_xml_dump: Callable[..., Path]
    ) -> None:
        dump = write_xml_dump([xml_page(1, "A", 0, "text")])

        result = CliRunner().invoke(
            import_dumps,
            ["--database-url", f"sqlite:///{temp_db_path}", "--key-correlation", "x", str(dump)],
        )

        assert result.exit_code == 2

    def test_imports_into_sqlite(
        self, temp_db_path: Path, write_xml_dump: Callable[..., Path]
    ) -> None:
        """Test a full run that creates the schema and writes posts."""
        dump = write_xml_dump(
            [
                xml_page(1, "A", 0, "[[Category:Foo]]"),
                xml_page(2, "B", 0, "#REDIRECT [[A]]"),
            ]
        )

        result = CliRunner().invoke(
            import_dumps,
            [
                "--database-url",
                f"sqlite:///{temp_db_path}",
                "--create-schema",
                "--seed",
                "1",
                str(dump),
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Import Complete!" in result.output
        assert "Pages Imported: 1" in result.output
        assert "Redirects Skipped: 1" in result.output
        assert "Tags Created: 1" in result.output

    def test_second_run_reports_skip(
        self, temp_db_path: Path, write_xml_dump: Callable[..., Path]
    ) -> None:
        """Test that rerunning against a populated store reports a skip."""
        dump = write_xml_dump([xml_page(1, "A", 0, "text")])
        args = ["--database-url", f"sqlite:///{temp_db_path}", "--create-schema", str(dump)]
        runner = CliRunner()

        runner.invoke(import_dumps, args)
        result = runner.invoke(import_dumps, args)

        assert result.exit_code == 0
        assert "Import Skipped" in result.output

    def test_paths_from_environment(
        self,
        temp_db_path: Path,
        write_xml_dump: Callable[..., Path],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that WIKI_IMPORT_PATH is used when no arguments are given."""
        dump = write_xml_dump([xml_page(1, "A", 0, "text")])
        monkeypatch.setenv("WIKI_IMPORT_PATH", f"{dump}, ")

        result = CliRunner().invoke(
            import_dumps, ["--database-url", f"sqlite:///{temp_db_path}", "--create-schema"]
        )

        assert result.exit_code == 0, result.output
        assert "Pages Imported: 1" in result.output

    def test_pipeline_failure_aborts(
        self, temp_db_path: Path, write_xml_dump: Callable[..., Path]
    ) -> None:
        """Test that an import error is reported and the command aborts."""
        dump = write_xml_dump([xml_page(1, "A", 0, "text")])

        with patch("wiki_importer.cli.import_dumps.DumpImportPipeline") as mock_pipeline_class:
            mock_pipeline = MagicMock()
            mock_pipeline_class.return_value = mock_pipeline
            mock_pipeline.import_dumps.side_effect = DumpParseError("broken dump", str(dump))

            result = CliRunner().invoke(
                import_dumps, ["--database-url", f"sqlite:///{temp_db_path}", str(dump)]
            )

        assert result.exit_code != 0
        assert "Import failed: broken dump" in result.output

    def test_options_passed_to_pipeline(
        self, temp_db_path: Path, write_xml_dump: Callable[..., Path]
    ) -> None:
        """Test that CLI options reach the pipeline constructor."""
        dump = write_xml_dump([xml_page(1, "A", 0, "text")])

        with patch("wiki_importer.cli.import_dumps.DumpImportPipeline") as mock_pipeline_class:
            mock_pipeline_class.return_value.import_dumps.return_value = MagicMock(skipped=True)

            result = CliRunner().invoke(
                import_dumps,
                [
                    "--database-url",
                    f"sqlite:///{temp_db_path}",
                    "--batch-size",
                    "50",
                    "--key-correlation",
                    "max_id",
                    "--user-count",
                    "9",
                    "--seed",
                    "5",
                    str(dump),
                ],
            )

        assert result.exit_code == 0, result.output
        kwargs = mock_pipeline_class.call_args.kwargs
        assert kwargs["batch_size"] == 50
        assert kwargs["key_correlation"].value == "max_id"
        assert kwargs["user_count"] == 9
        assert kwargs["random_seed"] == 5
        mock_pipeline_class.return_value.import_dumps.assert_called_once_with([str(dump)])


class TestResolveDumpPaths:
    """Test command line / environment path resolution."""

    def test_arguments_win(self) -> None:
        paths = resolve_dump_paths((Path("a.xml"), Path("b.json")), "c.xml")

        assert paths == ["a.xml", "b.json"]

    def test_environment_fallback(self) -> None:
        assert resolve_dump_paths((), " c.xml , d.json") == ["c.xml", "d.json"]

    def test_nothing_given(self) -> None:
        with pytest.raises(ValueError):
            resolve_dump_paths((), "  ")
