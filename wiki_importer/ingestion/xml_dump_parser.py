"""Streaming parser for MediaWiki XML dumps."""

from collections.abc import Iterator
from datetime import datetime
from pathlib import Path

import structlog
from lxml import etree

from wiki_importer.ingestion.markup import find_redirect_target
from wiki_importer.ingestion.models import DecodedPage
from wiki_importer.utils.exceptions import DumpParseError

logger = structlog.get_logger(__name__)


def _local_name(tag: str) -> str:
    """Strip the "{namespace}" prefix lxml puts on qualified tags."""
    return tag.rsplit("}", 1)[-1]


class WikiXMLDumpParser:
    """Parser for MediaWiki XML dumps with streaming support.

    Uses lxml iterparse so multi-gigabyte dumps are decoded one page at a
    time. Text is read on element end, when lxml has already joined every
    character chunk of the node, so markers split across read buffers still
    match. Expected structure::

        <mediawiki>
          <page>
            <title>...</title>
            <ns>0</ns>
            <id>12345</id>
            <revision>
              <id>67890</id>
              <timestamp>2024-01-01T00:00:00Z</timestamp>
              <text>...</text>
            </revision>
          </page>
        </mediawiki>

    The export namespace URI is ignored, so every export schema version parses.
    """

    def __init__(self) -> None:
        """Initialize the WikiXMLDumpParser."""
        self.logger = logger.bind(component="wiki_xml_dump_parser")
        self.pages_emitted = 0
        self.pages_dropped = 0

    def iter_pages(self, xml_path: str | Path) -> Iterator[DecodedPage]:
        """Parse a MediaWiki XML dump and yield DecodedPage objects in file order.

        Only the page-level <id> (not revision or contributor ids) and the
        first revision's <timestamp> are kept. Pages lacking a title,
        namespace or id by </page> are dropped without error.

        Args:
            xml_path: Path to the XML dump

        Yields:
            DecodedPage for each complete page

        Raises:
            FileNotFoundError: If the dump doesn't exist
            DumpParseError: If the XML or a numeric/timestamp field is malformed
        """
        xml_path = Path(xml_path)
        if not xml_path.exists():
            raise FileNotFoundError(f"XML dump not found: {xml_path}")

        self.pages_emitted = 0
        self.pages_dropped = 0
        self.logger.info("parsing_xml_dump", path=str(xml_path))

        context = etree.iterparse(
            str(xml_path),
            events=("start", "end"),
            huge_tree=True,
            remove_comments=True,
        )

        in_page = False
        in_revision = False
        page_id: int | None = None
        title: str | None = None
        namespace: int | None = None
        text: str | None = None
        timestamp: str | None = None

        try:
            for event, elem in context:
                tag = _local_name(elem.tag)

                if event == "start":
                    if tag == "page":
                        in_page = True
                        page_id = None
                        title = None
                        namespace = None
                        text = None
                        timestamp = None
                    elif tag == "revision":
                        in_revision = True
                    continue

                if not in_page:
                    continue

                value = elem.text
                if tag == "title":
                    if value is not None:
                        title = value
                elif tag == "ns":
                    if value is not None:
                        namespace = int(value.strip())
                elif tag == "id":
                    if not in_revision and page_id is None and value is not None:
                        page_id = int(value.strip())
                elif tag == "timestamp":
                    if in_revision and timestamp is None and value is not None:
                        timestamp = value
                elif tag == "text":
                    if value is not None:
                        text = value
                elif tag == "revision":
                    in_revision = False
                elif tag == "page":
                    in_page = False
                    page = self._build_page(page_id, title, namespace, text, timestamp)
                    # Free the finished page and everything before it
                    elem.clear()
                    while elem.getprevious() is not None:
                        del elem.getparent()[0]
                    if page is None:
                        self.pages_dropped += 1
                        continue
                    self.pages_emitted += 1
                    yield page

        except (etree.XMLSyntaxError, ValueError) as e:
            self.logger.error("xml_dump_parsing_failed", path=str(xml_path), error=str(e))
            raise DumpParseError(f"Failed to parse XML dump {xml_path}: {e}", xml_path) from e

        self.logger.info(
            "xml_dump_parsing_complete",
            path=str(xml_path),
            pages_emitted=self.pages_emitted,
            pages_dropped=self.pages_dropped,
        )

    def _build_page(
        self,
        page_id: int | None,
        title: str | None,
        namespace: int | None,
        text: str | None,
        timestamp: str | None,
    ) -> DecodedPage | None:
        """Assemble a DecodedPage, or None if a required field is missing."""
        if page_id is None or title is None or namespace is None:
            self.logger.debug("page_missing_required_field", page_id=page_id, title=title)
            return None

        created_at = datetime.fromisoformat(timestamp.strip()) if timestamp else None

        return DecodedPage(
            source_id=page_id,
            title=title,
            namespace=namespace,
            content=text,
            redirect_target=find_redirect_target(text),
            created_at=created_at,
        )
