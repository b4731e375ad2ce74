"""Repositories wrapping the destination store."""

from wiki_importer.repositories.post_repository import PostRepository
from wiki_importer.repositories.post_tag_repository import PostTagRepository
from wiki_importer.repositories.taxonomy_repository import TaxonomyRepository

__all__ = ["PostRepository", "PostTagRepository", "TaxonomyRepository"]
