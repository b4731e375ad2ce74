"""Resolves wiki namespace numbers to category ids."""

import structlog

from wiki_importer.common.constants import (
    NAMESPACE_CATEGORY_NAMES,
    SYNTHETIC_NAMESPACE_CATEGORY_NAME,
    UNMAPPED_NAMESPACE_CATEGORY_TEMPLATE,
)
from wiki_importer.ingestion.taxonomy_cache import TaxonomyCache

logger = structlog.get_logger(__name__)


def category_name_for_namespace(namespace: int) -> str:
    """Return the category name for a namespace number.

    Well-known MediaWiki namespaces have fixed names; any other number gets
    "기타 (ns=N)", including -1. JSON dump pages bypass this mapping.
    """
    name = NAMESPACE_CATEGORY_NAMES.get(namespace)
    if name is not None:
        return name
    return UNMAPPED_NAMESPACE_CATEGORY_TEMPLATE.format(namespace=namespace)


class NamespaceCategoryResolver:
    """Memoized namespace -> category id mapping backed by the category cache."""

    def __init__(self, categories: TaxonomyCache) -> None:
        self.categories = categories
        self.logger = logger.bind(component="namespace_category_resolver")
        self._category_ids: dict[int, int] = {}
        self._synthetic_id: int | None = None

    def preload(self, include_synthetic: bool = False) -> None:
        """Create or load the categories of all well-known namespaces.

        Args:
            include_synthetic: Also create the JSON dump umbrella category
                (created first, so it gets the lowest new id)
        """
        if include_synthetic:
            self.synthetic_category_id()
        for namespace in NAMESPACE_CATEGORY_NAMES:
            self.resolve(namespace)
        self.logger.info("namespace_categories_loaded", count=len(self._category_ids))

    def resolve(self, namespace: int) -> int:
        """Return the category id for namespace, creating the category on first use."""
        category_id = self._category_ids.get(namespace)
        if category_id is None:
            category_id = self.categories.lookup_or_create(category_name_for_namespace(namespace))
            self._category_ids[namespace] = category_id
        return category_id

    def synthetic_category_id(self) -> int:
        """Return the umbrella category id used for every JSON dump page."""
        if self._synthetic_id is None:
            self._synthetic_id = self.categories.lookup_or_create(
                SYNTHETIC_NAMESPACE_CATEGORY_NAME
            )
        return self._synthetic_id
