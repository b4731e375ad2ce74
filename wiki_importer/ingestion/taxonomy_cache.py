"""In-process name -> id cache over a taxonomy table."""

from typing import Protocol

import structlog

from wiki_importer.ingestion.markup import truncate
from wiki_importer.utils.exceptions import DatabaseError

logger = structlog.get_logger(__name__)


class NameKeyedStore(Protocol):
    """Store operations the cache needs; implemented by TaxonomyRepository."""

    def load_all_names(self) -> list[tuple[str, int]]: ...

    def insert_if_absent(self, name: str) -> bool: ...

    def find_id_by_name(self, name: str) -> int | None: ...


class TaxonomyCache:
    """Maps taxonomy names to store ids, creating rows on first use.

    Names are truncated to the column limit before lookup so that two
    names differing only past the limit share one row. The cache is seeded
    from the store at the start of a run, grows monotonically and never
    evicts.
    """

    def __init__(self, store: NameKeyedStore, max_name_length: int, kind: str) -> None:
        """Initialize the cache.

        Args:
            store: Name-keyed store for the table
            max_name_length: Persisted length limit of the name column
            kind: Label used in log events ("category" or "tag")
        """
        self.store = store
        self.max_name_length = max_name_length
        self.kind = kind
        self.logger = logger.bind(component="taxonomy_cache", kind=kind)
        self._ids: dict[str, int] = {}
        self.created_count = 0

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return truncate(name, self.max_name_length) in self._ids

    def seed(self) -> int:
        """Load every existing (name, id) pair from the store.

        Returns:
            Number of cached names after seeding
        """
        for name, row_id in self.store.load_all_names():
            self._ids[name] = row_id
        self.logger.info("taxonomy_cache_seeded", cached=len(self._ids))
        return len(self._ids)

    def lookup_or_create(self, name: str) -> int:
        """Return the id for name, creating the row if needed.

        On a miss the row is created with an insert-if-absent write, then
        read back by name: the insert is a no-op when another run already
        created the row and does not report the existing id.

        Raises:
            DatabaseError: If the row cannot be found after the insert
        """
        key = truncate(name, self.max_name_length)
        cached = self._ids.get(key)
        if cached is not None:
            return cached

        inserted = self.store.insert_if_absent(key)
        row_id = self.store.find_id_by_name(key)
        if row_id is None:
            raise DatabaseError(f"{self.kind} {key!r} missing after insert-if-absent")

        self._ids[key] = row_id
        if inserted:
            self.created_count += 1
            self.logger.debug("taxonomy_row_created", name=key, id=row_id)
        return row_id
