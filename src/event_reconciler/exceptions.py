"""Custom exceptions for the Event Link Reconciler.

Provides a hierarchy of exceptions for the conditions that abort a run:
- ReconcilerError: Base exception for all reconciler errors
- CatalogReadError: Catalog file missing or unreadable
- CatalogParseError: Catalog JSON unparsable after repair heuristics
- CorpusNotFoundError: Raw corpus directory missing
- BackupError: Backup snapshot missing or not restorable

Per-entry conditions (inaccessible pages, unextractable names, broken
references) are reported as findings, never raised. ``CorpusReadError`` is
raised by corpus sources for a single entry and is always caught by the
reference index builder.
"""

from pathlib import Path


class ReconcilerError(Exception):
    """Base exception for reconciler errors."""


class CatalogReadError(ReconcilerError):
    """Catalog file could not be read.

    Attributes:
        path: The catalog path that failed.
    """

    def __init__(self, path: Path, message: str) -> None:
        """Initialize CatalogReadError.

        Args:
            path: The catalog path that failed.
            message: Description of what went wrong.
        """
        self.path = path
        super().__init__(f"Cannot read catalog {path}: {message}")


class CatalogParseError(ReconcilerError):
    """Catalog content is not valid JSON even after repair attempts.

    Attributes:
        path: The catalog path, if the content came from a file.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        """Initialize CatalogParseError.

        Args:
            message: Description of the parse failure.
            path: Catalog path, if known.
        """
        self.path = path
        location = f" {path}" if path else ""
        super().__init__(f"Failed to parse catalog{location}: {message}")


class CorpusNotFoundError(ReconcilerError):
    """Raw corpus directory does not exist.

    Attributes:
        path: The directory that was expected.
    """

    def __init__(self, path: Path) -> None:
        """Initialize CorpusNotFoundError.

        Args:
            path: The directory that was expected.
        """
        self.path = path
        super().__init__(f"Raw corpus directory not found at {path}")


class CorpusReadError(ReconcilerError):
    """A single raw entry could not be read.

    Attributes:
        entry_id: Identifier of the raw entry.
    """

    def __init__(self, entry_id: str, message: str) -> None:
        """Initialize CorpusReadError.

        Args:
            entry_id: Identifier of the raw entry.
            message: Description of what went wrong.
        """
        self.entry_id = entry_id
        super().__init__(f"Cannot read raw entry {entry_id}: {message}")


class BackupError(ReconcilerError):
    """Backup snapshot could not be restored."""
