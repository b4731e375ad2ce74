"""Domain models for the application."""

from wiki_importer.models.base import Base
from wiki_importer.models.category import Category
from wiki_importer.models.post import Post
from wiki_importer.models.post_tag import PostTag
from wiki_importer.models.tag import Tag

__all__ = ["Base", "Category", "Post", "PostTag", "Tag"]
