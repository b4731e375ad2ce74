"""Bulk importer for wiki dump files."""

__version__ = "0.1.0"
