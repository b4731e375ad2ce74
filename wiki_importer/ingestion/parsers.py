"""Dump dialect detection and parser selection."""

from enum import Enum
from pathlib import Path

from wiki_importer.ingestion.json_dump_parser import NamuWikiJsonDumpParser
from wiki_importer.ingestion.xml_dump_parser import WikiXMLDumpParser


class DumpDialect(str, Enum):
    """Supported dump file dialects."""

    XML = "xml"
    JSON = "json"


def detect_dialect(path: str | Path) -> DumpDialect:
    """Pick the dialect from the file name: ".json" means JSON, anything else XML.

    There is no content sniffing; a misnamed file fails to parse.
    """
    if str(path).strip().lower().endswith(".json"):
        return DumpDialect.JSON
    return DumpDialect.XML


def parser_for(path: str | Path) -> WikiXMLDumpParser | NamuWikiJsonDumpParser:
    """Return a fresh parser for the dump's dialect."""
    if detect_dialect(path) is DumpDialect.JSON:
        return NamuWikiJsonDumpParser()
    return WikiXMLDumpParser()

