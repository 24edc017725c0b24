"""Raw corpus sources.

The link harvester leaves one ``<id>.txt`` snapshot per event page in a
directory. Any id -> text mapping satisfies the same contract, which keeps
the engine independent of how the corpus was produced.
"""

from collections.abc import Iterable, Mapping
from pathlib import Path
import re
from typing import Protocol

from event_reconciler.exceptions import CorpusNotFoundError, CorpusReadError
from event_reconciler.models.catalog import RawEntry

RAW_FILE_PATTERN = re.compile(r"^(\d+)\.txt$")


class CorpusSource(Protocol):
    """Supplies raw page text by event id."""

    def ids(self) -> list[str]:
        """Return every entry id, sorted ascending."""
        ...

    def read(self, entry_id: str) -> str:
        """Return the raw text for an id.

        Raises:
            CorpusReadError: If the entry cannot be read.
        """
        ...


class DirectoryCorpus:
    """Corpus backed by ``<id>.txt`` files in a directory.

    Files not matching the pattern are ignored.
    """

    def __init__(self, directory: Path) -> None:
        """Initialize the corpus.

        Args:
            directory: Directory holding the raw files.

        Raises:
            CorpusNotFoundError: If the directory does not exist.
        """
        if not directory.is_dir():
            raise CorpusNotFoundError(directory)
        self.directory = directory

    def ids(self) -> list[str]:
        """Return every entry id, sorted ascending."""
        found = []
        for path in self.directory.iterdir():
            match = RAW_FILE_PATTERN.match(path.name)
            if match and path.is_file():
                found.append(match.group(1))
        return sorted(found)

    def read(self, entry_id: str) -> str:
        """Read the raw file for an id.

        Raises:
            CorpusReadError: On a missing file, I/O or decoding error.
        """
        path = self.directory / f"{entry_id}.txt"
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise CorpusReadError(entry_id, str(e)) from e


class MappingCorpus:
    """Corpus backed by an in-memory id -> text mapping."""

    def __init__(self, entries: Mapping[str, str]) -> None:
        self._entries = dict(entries)

    @classmethod
    def from_entries(cls, entries: Iterable[RawEntry]) -> "MappingCorpus":
        """Build a corpus from raw entries; a later duplicate id wins."""
        return cls({entry.id: entry.blob for entry in entries})

    def ids(self) -> list[str]:
        """Return every entry id, sorted ascending."""
        return sorted(self._entries)

    def read(self, entry_id: str) -> str:
        """Return the text for an id.

        Raises:
            CorpusReadError: If the id is unknown.
        """
        try:
            return self._entries[entry_id]
        except KeyError:
            raise CorpusReadError(entry_id, "no such entry") from None
