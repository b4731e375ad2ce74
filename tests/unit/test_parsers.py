"""Unit tests for dump dialect selection."""

from collections.abc import Callable
from pathlib import Path

import pytest

from tests.dump_builders import xml_page
from wiki_importer.ingestion.json_dump_parser import NamuWikiJsonDumpParser
from wiki_importer.ingestion.parsers import (
    DumpDialect,
    detect_dialect,
    parser_for,
)
from wiki_importer.ingestion.xml_dump_parser import WikiXMLDumpParser
from wiki_importer.utils.exceptions import DumpParseError


class TestDetectDialect:
    """Test extension-based dialect detection."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("namuwiki.json", DumpDialect.JSON),
            ("/data/NAMUWIKI.JSON", DumpDialect.JSON),
            ("  dump.json  ", DumpDialect.JSON),
            ("kowiki-latest-pages-articles.xml", DumpDialect.XML),
            ("dump.txt", DumpDialect.XML),
            ("dump.json.bak", DumpDialect.XML),
        ],
    )
    def test_suffix(self, path: str, expected: DumpDialect) -> None:
        """Test that only a .json suffix selects the JSON dialect."""
        assert detect_dialect(path) is expected

    def test_parser_for_returns_fresh_instances(self) -> None:
        """Test that each call returns a new parser of the right type."""
        assert isinstance(parser_for("a.json"), NamuWikiJsonDumpParser)
        assert isinstance(parser_for("a.xml"), WikiXMLDumpParser)
        assert parser_for("a.xml") is not parser_for("a.xml")


class TestParserForStreaming:
    """Test streaming through the parser chosen for each file."""

    def test_xml(self, write_xml_dump: Callable[..., Path]) -> None:
        """Test streaming an XML dump."""
        path = write_xml_dump([xml_page(1, "X", 0, "x")])

        assert [p.title for p in parser_for(path).iter_pages(path)] == ["X"]

    def test_json(self, write_json_dump: Callable[..., Path]) -> None:
        """Test streaming a JSON dump."""
        path = write_json_dump('[{"title": "J", "text": "j"}]')

        assert [p.title for p in parser_for(path).iter_pages(path)] == ["J"]

    def test_misnamed_file_fails_structurally(self, write_json_dump: Callable[..., Path]) -> None:
        """Test that JSON content in a non-.json file is parsed as XML and fails."""
        path = write_json_dump('[{"title": "J"}]', name="namuwiki.txt")

        with pytest.raises(DumpParseError):
            list(parser_for(path).iter_pages(path))
