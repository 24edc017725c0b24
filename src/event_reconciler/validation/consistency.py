"""Consistency check between catalog references and the raw corpus.

Computes the two set differences (raw entries the catalog never references,
catalog references with no raw entry) and the ids referenced more than once,
and renders them as a human-readable summary, a JSON-ready dict or findings.
"""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import structlog

from event_reconciler.models.findings import Finding, FindingKind

logger = structlog.get_logger(__name__)


@dataclass
class DuplicateReference:
    """An event id referenced by more than one catalog record."""

    id: str
    count: int


@dataclass
class ConsistencyReport:
    """Structured consistency report.

    All id lists are sorted lexically so repeated runs print identically.

    Attributes:
        timestamp: When the check was run.
        total_raw_entries: Number of corpus ids.
        total_catalog_references: Linked catalog records (repeats included).
        unique_catalog_references: Distinct ids referenced by the catalog.
        missing_in_catalog: Corpus ids no catalog record references.
        missing_raw_source: Catalog ids with no corpus entry.
        duplicates: Ids referenced by more than one record.
    """

    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    total_raw_entries: int = 0
    total_catalog_references: int = 0
    unique_catalog_references: int = 0
    missing_in_catalog: list[str] = field(default_factory=list)
    missing_raw_source: list[str] = field(default_factory=list)
    duplicates: list[DuplicateReference] = field(default_factory=list)

    @property
    def consistent(self) -> bool:
        """True iff no set difference or duplicate was found."""
        return not (self.missing_in_catalog or self.missing_raw_source or self.duplicates)

    def findings(self) -> list[Finding]:
        """Convert the report into findings.

        Returns:
            ORPHAN, MISSING_REFERENCE and DUPLICATE findings, in that order.
        """
        findings = [
            Finding(
                kind=FindingKind.ORPHAN,
                reference_id=entry_id,
                message="Raw entry is not referenced by any catalog record",
            )
            for entry_id in self.missing_in_catalog
        ]
        findings.extend(
            Finding(
                kind=FindingKind.MISSING_REFERENCE,
                reference_id=entry_id,
                message="Catalog references an id with no raw entry",
            )
            for entry_id in self.missing_raw_source
        )
        findings.extend(
            Finding(
                kind=FindingKind.DUPLICATE,
                reference_id=dup.id,
                count=dup.count,
                message=f"Referenced by {dup.count} catalog records",
            )
            for dup in self.duplicates
        )
        return findings

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dictionary.

        Returns:
            Dictionary with ``summary``, the two id lists and ``duplicates``.
        """
        return {
            "summary": {
                "generatedAt": self.timestamp.isoformat(),
                "totalRawEntries": self.total_raw_entries,
                "totalCatalogReferences": self.total_catalog_references,
                "uniqueCatalogReferences": self.unique_catalog_references,
                "missingInCatalogCount": len(self.missing_in_catalog),
                "missingRawSourceCount": len(self.missing_raw_source),
                "duplicateIdCount": len(self.duplicates),
                "consistent": self.consistent,
            },
            "missingInCatalog": list(self.missing_in_catalog),
            "missingRawSource": list(self.missing_raw_source),
            "duplicates": [{"id": d.id, "count": d.count} for d in self.duplicates],
        }

    def to_text(self) -> str:
        """Generate the human-readable summary.

        Returns:
            Plain-text report.
        """
        lines = [
            "Event ID Consistency Report",
            "===========================",
            f"Raw entries (unique ids):          {self.total_raw_entries}",
            f"Catalog link references:           {self.total_catalog_references}",
            f"Unique ids referenced by catalog:  {self.unique_catalog_references}",
            "",
        ]

        if not self.missing_in_catalog:
            lines.append("✅ All raw entry ids are present in the catalog.")
        else:
            lines.append("❌ Raw entries not represented in the catalog:")
            lines.append("   " + ", ".join(self.missing_in_catalog))

        lines.append("")
        if not self.missing_raw_source:
            lines.append("✅ All catalog ids have a corresponding raw entry.")
        else:
            lines.append("❌ Catalog ids missing a raw entry:")
            lines.append("   " + ", ".join(self.missing_raw_source))

        lines.append("")
        if not self.duplicates:
            lines.append("✅ No duplicate ids in the catalog.")
        else:
            lines.append("⚠️ Duplicate ids (id -> count):")
            for dup in self.duplicates:
                lines.append(f"   {dup.id} -> {dup.count} occurrences")

        lines.append("")
        lines.append("RESULT: OK" if self.consistent else "RESULT: INCONSISTENCIES FOUND")
        return "\n".join(lines)


def check_consistency(
    catalog_reference_ids: Iterable[str],
    corpus_ids: Iterable[str],
) -> ConsistencyReport:
    """Compare catalog references against corpus ids.

    Args:
        catalog_reference_ids: Ids referenced by the catalog, one per linked
            record (repeats are what duplicate detection counts).
        corpus_ids: Ids present in the raw corpus.

    Returns:
        ConsistencyReport with both set differences and duplicates.

    Example:
        >>> report = check_consistency(["1", "2", "3"], ["2", "3", "4"])
        >>> report.missing_in_catalog, report.missing_raw_source
        (['4'], ['1'])
    """
    occurrences = Counter(catalog_reference_ids)
    catalog_ids = set(occurrences)
    raw_ids = set(corpus_ids)

    report = ConsistencyReport(
        total_raw_entries=len(raw_ids),
        total_catalog_references=sum(occurrences.values()),
        unique_catalog_references=len(catalog_ids),
        missing_in_catalog=sorted(raw_ids - catalog_ids),
        missing_raw_source=sorted(catalog_ids - raw_ids),
        duplicates=[
            DuplicateReference(id=entry_id, count=count)
            for entry_id, count in sorted(occurrences.items())
            if count > 1
        ],
    )

    logger.info(
        "Consistency check complete",
        consistent=report.consistent,
        missing_in_catalog=len(report.missing_in_catalog),
        missing_raw_source=len(report.missing_raw_source),
        duplicates=len(report.duplicates),
    )

    return report
