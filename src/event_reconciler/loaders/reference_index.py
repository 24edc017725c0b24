"""Reference index builder for the raw event corpus.

This module builds, once per run, the lookup from event id to the name
extracted from its raw page. Every corpus entry lands in exactly one
bucket:
- facts: a name was extracted
- access_denied: the page is a login wall
- unnamed: the page was readable but no name was found
- unreadable: the entry could not be read at all

The index is read-only after construction and can be shared between
reconciliation passes.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

import structlog

from event_reconciler.exceptions import CorpusReadError
from event_reconciler.extraction.text_extractor import (
    ExtractionResult,
    ExtractionStatus,
    HeuristicTextExtractor,
    TextExtractor,
)
from event_reconciler.loaders.corpus import CorpusSource
from event_reconciler.models.catalog import ExtractedFact

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ReferenceIndex:
    """Index of extracted facts over a raw corpus.

    Attributes:
        facts: Event id -> fact, for entries with an extracted name.
        access_denied: Event id -> detail, for login-walled entries.
        unnamed: Event id -> fact (date only), when no name was found.
        unreadable: Event id -> error message, for entries that failed to read.
        entry_ids: Every corpus id, sorted ascending, whatever its outcome.
    """

    facts: Mapping[str, ExtractedFact] = field(default_factory=dict)
    access_denied: Mapping[str, str] = field(default_factory=dict)
    unnamed: Mapping[str, ExtractedFact] = field(default_factory=dict)
    unreadable: Mapping[str, str] = field(default_factory=dict)
    entry_ids: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Freeze the buckets behind read-only views."""
        for name in ("facts", "access_denied", "unnamed", "unreadable"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    @property
    def total_entries(self) -> int:
        """Total number of corpus entries seen."""
        return len(self.entry_ids)

    def get(self, entry_id: str) -> ExtractedFact | None:
        """Get the extracted fact for an id.

        Args:
            entry_id: Event id.

        Returns:
            ExtractedFact with a name, or None.
        """
        return self.facts.get(entry_id)

    def status_of(self, entry_id: str) -> ExtractionStatus | None:
        """Get the extraction outcome for an id.

        Args:
            entry_id: Event id.

        Returns:
            ExtractionStatus, or None if the id is not in the corpus.
        """
        if entry_id in self.facts:
            return ExtractionStatus.EXTRACTED
        if entry_id in self.access_denied:
            return ExtractionStatus.ACCESS_DENIED
        if entry_id in self.unnamed:
            return ExtractionStatus.NO_NAME
        if entry_id in self.unreadable:
            return ExtractionStatus.UNREADABLE
        return None

    def candidates(self) -> Iterator[tuple[str, str]]:
        """Yield ``(id, normalized_name)`` for every named entry, ids ascending."""
        for entry_id in sorted(self.facts):
            yield entry_id, self.facts[entry_id].normalized_name

    def __contains__(self, entry_id: object) -> bool:
        """Check if an id has an extracted name.

        Args:
            entry_id: Event id.

        Returns:
            True if the id is a match candidate.
        """
        return entry_id in self.facts


def build_reference_index(
    corpus: CorpusSource,
    extractor: TextExtractor | None = None,
) -> ReferenceIndex:
    """Build the reference index from a raw corpus.

    Read failures are recorded per entry and never abort the build.

    Args:
        corpus: Source of raw entries.
        extractor: Text extractor; the heuristic extractor by default.

    Returns:
        ReferenceIndex over every entry of the corpus.

    Example:
        >>> corpus = DirectoryCorpus(Path("raw_events"))
        >>> index = build_reference_index(corpus)
        >>> index.get("1200537458509104").name
        'Dhaka Dash 30K'
    """
    extractor = extractor or HeuristicTextExtractor()

    facts: dict[str, ExtractedFact] = {}
    access_denied: dict[str, str] = {}
    unnamed: dict[str, ExtractedFact] = {}
    unreadable: dict[str, str] = {}

    entry_ids = tuple(corpus.ids())
    for entry_id in entry_ids:
        try:
            blob = corpus.read(entry_id)
        except CorpusReadError as e:
            result = ExtractionResult.unreadable(entry_id, str(e))
        else:
            result = extractor.extract(entry_id, blob)

        if result.status is ExtractionStatus.UNREADABLE:
            unreadable[entry_id] = result.detail
            logger.warning("Could not read raw entry", entry_id=entry_id, error=result.detail)
        elif result.status is ExtractionStatus.ACCESS_DENIED:
            access_denied[entry_id] = result.detail
        elif result.fact is not None and result.fact.has_name:
            facts[entry_id] = result.fact
            logger.debug("Indexed raw entry", entry_id=entry_id, name=result.fact.name)
        else:
            unnamed[entry_id] = result.fact or ExtractedFact(id=entry_id)

    index = ReferenceIndex(
        facts=facts,
        access_denied=access_denied,
        unnamed=unnamed,
        unreadable=unreadable,
        entry_ids=entry_ids,
    )

    logger.info(
        "Built reference index",
        total_entries=index.total_entries,
        named=len(facts),
        access_denied=len(access_denied),
        unnamed=len(unnamed),
        unreadable=len(unreadable),
    )

    return index
