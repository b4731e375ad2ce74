"""Custom exception hierarchy for the application."""

from pathlib import Path


class WikiImporterError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, is_retryable: bool = False) -> None:
        """Initialize exception.

        Args:
            message: Error message
            is_retryable: Whether the operation can be retried
        """
        super().__init__(message)
        self.message = message
        self.is_retryable = is_retryable


class ConfigurationError(WikiImporterError):
    """Configuration or environment setup error."""

    pass


class DatabaseError(WikiImporterError):
    """Database operation error."""

    pass


class IngestionError(WikiImporterError):
    """Data ingestion pipeline error."""

    pass


class DumpParseError(IngestionError):
    """Structural syntax error in a dump file."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        """Initialize exception.

        Args:
            message: Error message
            path: Dump file that failed to parse
        """
        super().__init__(message)
        self.path = str(path) if path is not None else None
