"""Data models for dump ingestion."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class DecodedPage:
    """A page record decoded from a dump file.

    Attributes:
        source_id: Page id from the dump (synthetic sequence for JSON dumps)
        title: Page title
        namespace: Namespace number (0 = main namespace)
        content: Raw wiki markup, None when the dump has no body
        redirect_target: Target title when the page is a redirect
        created_at: Revision timestamp, None when the dump has none
    """

    source_id: int | None
    title: str
    namespace: int
    content: str | None
    redirect_target: str | None = None
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate page data after initialization.

        Raises:
            ValueError: If the title is missing
        """
        if self.title is None:
            raise ValueError("Title cannot be None")

    @property
    def is_redirect(self) -> bool:
        return self.redirect_target is not None


@dataclass
class PendingPost:
    """A decoded page with resolved taxonomy, waiting in a batch.

    Attributes:
        page: The decoded page
        category_id: Resolved category id
        tag_ids: Resolved tag ids, in extraction order
    """

    page: DecodedPage
    category_id: int
    tag_ids: list[int] = field(default_factory=list)
