"""Streaming parser for NamuWiki JSON dumps."""

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import ijson  # type: ignore[import-untyped]
import structlog

from wiki_importer.ingestion.markup import find_plain_redirect_target
from wiki_importer.ingestion.models import DecodedPage
from wiki_importer.utils.exceptions import DumpParseError

logger = structlog.get_logger(__name__)

# Fields read from each array element; any other field is skipped
KNOWN_FIELDS = {"item.namespace", "item.title", "item.text"}


class NamuWikiJsonDumpParser:
    """Parser for NamuWiki JSON dumps with streaming support.

    Reads ijson parse events instead of building objects, so unknown fields
    (for example the "contributors" array) are walked over without ever
    being materialized. Expected structure::

        [
          {"namespace": 0, "title": "...", "text": "...", "contributors": [...]},
          ...
        ]

    The dump has no page ids or timestamps: pages get a 1-based sequence
    number as source_id and created_at is always None.
    """

    def __init__(self) -> None:
        """Initialize the NamuWikiJsonDumpParser."""
        self.logger = logger.bind(component="namuwiki_json_dump_parser")
        self.pages_emitted = 0
        self.pages_dropped = 0

    def iter_pages(self, json_path: str | Path) -> Iterator[DecodedPage]:
        """Parse a NamuWiki JSON dump and yield DecodedPage objects in file order.

        Objects without a title are dropped without error. A missing
        namespace defaults to 0.

        Args:
            json_path: Path to the JSON dump

        Yields:
            DecodedPage for each titled object

        Raises:
            FileNotFoundError: If the dump doesn't exist
            DumpParseError: If the JSON is malformed or not an array of objects
        """
        json_path = Path(json_path)
        if not json_path.exists():
            raise FileNotFoundError(f"JSON dump not found: {json_path}")

        self.pages_emitted = 0
        self.pages_dropped = 0
        self.logger.info("parsing_json_dump", path=str(json_path))

        try:
            with json_path.open("rb") as f:
                yield from self._iter_events(ijson.parse(f), json_path)
        except (ijson.JSONError, ValueError) as e:
            self.logger.error("json_dump_parsing_failed", path=str(json_path), error=str(e))
            raise DumpParseError(f"Failed to parse JSON dump {json_path}: {e}", json_path) from e

        self.logger.info(
            "json_dump_parsing_complete",
            path=str(json_path),
            pages_emitted=self.pages_emitted,
            pages_dropped=self.pages_dropped,
        )

    def _iter_events(
        self, events: Iterator[tuple[str, str, Any]], json_path: Path
    ) -> Iterator[DecodedPage]:
        """Turn a flat ijson event stream into pages."""
        first = next(events, None)
        if first is None or first[:2] != ("", "start_array"):
            raise DumpParseError(f"JSON dump does not start with an array: {json_path}", json_path)

        fields: dict[str, Any] = {}
        for prefix, event, value in events:
            if prefix == "item":
                if event == "start_map":
                    fields = {}
                elif event == "end_map":
                    page = self._build_page(fields)
                    if page is None:
                        self.pages_dropped += 1
                        continue
                    self.pages_emitted += 1
                    yield page
                elif event != "map_key":
                    raise DumpParseError(
                        f"JSON dump array element is not an object ({event}): {json_path}",
                        json_path,
                    )
            elif prefix in KNOWN_FIELDS and event in ("string", "number", "null"):
                fields[prefix] = value

    def _build_page(self, fields: dict[str, Any]) -> DecodedPage | None:
        """Assemble a DecodedPage, or None if the object has no title."""
        title = fields.get("item.title")
        if title is None:
            return None

        raw_namespace = fields.get("item.namespace")
        namespace = int(raw_namespace) if raw_namespace is not None else 0
        text = fields.get("item.text")

        return DecodedPage(
            source_id=self.pages_emitted + 1,
            title=str(title),
            namespace=namespace,
            content=text,
            redirect_target=find_plain_redirect_target(text),
            created_at=None,
        )
