"""Catalog-to-corpus link reconciliation.

For every catalog record the reconciler decides whether its current link
points at the right raw event page and, if not, which page it should point
at instead:

1. Manual override rules are consulted first.
2. Records whose link resolves to no usable raw entry are reported
   (missing, access-denied, or unextractable).
3. A current link whose page name is similar enough is accepted.
4. Otherwise every named raw entry is searched, in ascending id order, for
   the most similar name above the threshold; ties go to the lowest id.

The reconciler is pure: it never mutates records or the index, and the same
inputs always produce the same findings.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog

from event_reconciler.config import DEFAULT_SIMILARITY_THRESHOLD
from event_reconciler.loaders.reference_index import ReferenceIndex
from event_reconciler.matching.normalizer import normalize_event_name
from event_reconciler.matching.similarity import best_match, similarity
from event_reconciler.models.catalog import CatalogRecord
from event_reconciler.models.findings import CorrectionAction, Finding, FindingKind
from event_reconciler.reconciliation.overrides import OverrideRule, first_matching_rule

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AcceptedLink:
    """A record whose current link was confirmed.

    Attributes:
        record_index: 0-based catalog position.
        record_name: Catalog event name.
        reference_id: Confirmed event id.
        raw_name: Name extracted from the raw page (None when pinned by a rule
            for an entry without a name).
        similarity: Score of the confirmation (None when pinned by a rule).
        pinned: Whether an override rule confirmed the link.
    """

    record_index: int
    record_name: str
    reference_id: str
    raw_name: str | None
    similarity: float | None
    pinned: bool = False


@dataclass
class ReconciliationResult:
    """Outcome of one reconciliation pass.

    Attributes:
        findings: Every non-accepted outcome, in catalog order.
        accepted: Links confirmed as correct.
        records_checked: Number of records examined.
    """

    findings: list[Finding] = field(default_factory=list)
    accepted: list[AcceptedLink] = field(default_factory=list)
    records_checked: int = 0

    def of_kind(self, kind: FindingKind) -> list[Finding]:
        """Findings of one kind, in catalog order."""
        return [f for f in self.findings if f.kind is kind]

    @property
    def corrections(self) -> list[Finding]:
        """CORRECTED findings (relinks and explicit clears)."""
        return self.of_kind(FindingKind.CORRECTED)

    @property
    def mismatches(self) -> list[Finding]:
        """MISMATCH findings (no confident replacement)."""
        return self.of_kind(FindingKind.MISMATCH)

    @property
    def errors(self) -> list[Finding]:
        """Records that could not be compared at all."""
        comparable = (FindingKind.CORRECTED, FindingKind.MISMATCH)
        return [f for f in self.findings if f.kind not in comparable]

    @property
    def clean(self) -> bool:
        """True when every record was accepted."""
        return not self.findings

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dictionary.

        Returns:
            Summary counts plus serialized findings and accepted links.
        """
        return {
            "summary": {
                "recordsChecked": self.records_checked,
                "accepted": len(self.accepted),
                "corrections": len(self.corrections),
                "mismatches": len(self.mismatches),
                "errors": len(self.errors),
            },
            "findings": [f.model_dump(mode="json", exclude_none=True) for f in self.findings],
            "accepted": [
                {
                    "recordIndex": a.record_index,
                    "recordName": a.record_name,
                    "referenceId": a.reference_id,
                    "rawName": a.raw_name,
                    "similarity": a.similarity,
                    "pinned": a.pinned,
                }
                for a in self.accepted
            ],
        }

    def to_text(self) -> str:
        """Generate the human-readable verification report.

        Returns:
            Plain-text report.
        """
        rule = "=" * 80
        lines = [
            rule,
            "EVENT LINK VERIFICATION REPORT",
            rule,
            "",
            "SUMMARY:",
            f"Total records checked: {self.records_checked}",
            f"Matching links: {len(self.accepted)}",
            f"Proposed corrections: {len(self.corrections)}",
            f"Mismatched links: {len(self.mismatches)}",
            f"Errors: {len(self.errors)}",
        ]

        if self.corrections:
            lines.extend(["", f"🔧 PROPOSED CORRECTIONS ({len(self.corrections)}):", "-" * 80])
            for n, finding in enumerate(self.corrections, start=1):
                lines.append(f"{n}. Event #{(finding.record_index or 0) + 1}: {finding.record_name!r}")
                lines.append(f"   Old: {finding.reference_id} ({finding.old_name!r})")
                if finding.action is CorrectionAction.CLEAR:
                    lines.append("   New: link removed")
                else:
                    score = f" [{finding.similarity:.1%} match]" if finding.similarity is not None else ""
                    lines.append(f"   New: {finding.new_reference_id} ({finding.new_name!r}){score}")
                lines.append(f"   Reason: {finding.message}")
                lines.append("")

        if self.mismatches:
            lines.extend(["", f"❌ MISMATCHED LINKS ({len(self.mismatches)}):", "-" * 80])
            for n, finding in enumerate(self.mismatches, start=1):
                lines.append(f"{n}. Event #{(finding.record_index or 0) + 1}: {finding.record_name!r}")
                lines.append(f"   Raw event:  {finding.old_name!r}")
                lines.append(f"   Event id:   {finding.reference_id}")
                if finding.similarity is not None:
                    lines.append(f"   Similarity: {finding.similarity:.2f}")
                if finding.catalog_date or finding.raw_date:
                    lines.append(f"   Catalog date: {finding.catalog_date or '-'}")
                    lines.append(f"   Raw date:     {finding.raw_date or '-'}")
                lines.append("")

        if self.errors:
            lines.extend(["", f"⚠️  ERRORS ({len(self.errors)}):", "-" * 80])
            for n, finding in enumerate(self.errors, start=1):
                number = (finding.record_index or 0) + 1
                lines.append(f"{n}. Event #{number}: {finding.record_name!r}")
                lines.append(f"   Issue: {finding.message}")
                if finding.reference_id:
                    lines.append(f"   Event id: {finding.reference_id}")
                lines.append("")

        if self.clean:
            lines.append("")
            lines.append("✅ All event links appear to be correctly matched!")

        lines.append("")
        lines.append(f"✅ CORRECTLY MATCHED LINKS: {len(self.accepted)}")
        return "\n".join(lines)


class Reconciler:
    """Decides, per catalog record, whether its link is right.

    Example:
        >>> reconciler = Reconciler(index, threshold=0.7)
        >>> result = reconciler.reconcile(catalog.entries())
        >>> for finding in result.corrections:
        ...     print(finding.reference_id, "->", finding.new_reference_id)
    """

    def __init__(
        self,
        index: ReferenceIndex,
        threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
        overrides: Sequence[OverrideRule] = (),
    ) -> None:
        """Initialize the reconciler.

        Args:
            index: Reference index over the raw corpus (read-only).
            threshold: Acceptance threshold (inclusive) and search floor
                (exclusive).
            overrides: Manual rules evaluated before automatic matching.
        """
        self.index = index
        self.threshold = threshold
        self.overrides = tuple(overrides)

    def reconcile(self, records: Iterable[CatalogRecord]) -> ReconciliationResult:
        """Reconcile every record against the index.

        Args:
            records: Catalog records in catalog order.

        Returns:
            ReconciliationResult with findings and accepted links.
        """
        result = ReconciliationResult()

        for record in records:
            result.records_checked += 1
            outcome = self.reconcile_record(record)
            if isinstance(outcome, AcceptedLink):
                result.accepted.append(outcome)
            else:
                result.findings.append(outcome)

        logger.info(
            "Reconciliation complete",
            records=result.records_checked,
            accepted=len(result.accepted),
            corrections=len(result.corrections),
            mismatches=len(result.mismatches),
            errors=len(result.errors),
        )

        return result

    def reconcile_record(self, record: CatalogRecord) -> Finding | AcceptedLink:
        """Reconcile a single record.

        Args:
            record: Catalog record.

        Returns:
            AcceptedLink when the current link is confirmed, otherwise a Finding.
        """
        rule = first_matching_rule(self.overrides, record)
        if rule is not None:
            return self._apply_override(record, rule)

        current_id = record.reference_id
        if current_id is None:
            return self._finding(
                FindingKind.UNLINKED,
                record,
                message="Invalid or missing event link",
            )

        fact = self.index.get(current_id)
        if fact is None:
            return self._unresolved(record, current_id)

        target = normalize_event_name(record.name)
        current_score = similarity(target, fact.normalized_name)
        if current_score >= self.threshold:
            return AcceptedLink(
                record_index=record.index,
                record_name=record.name,
                reference_id=current_id,
                raw_name=fact.name,
                similarity=current_score,
            )

        match = best_match(target, self.index.candidates(), floor=self.threshold)
        if match is not None and match.key != current_id:
            replacement = self.index.get(match.key)
            logger.debug(
                "Found replacement link",
                record_index=record.index,
                old_id=current_id,
                new_id=match.key,
                similarity=match.score,
            )
            return self._finding(
                FindingKind.CORRECTED,
                record,
                message="Best name match in raw corpus",
                old_name=fact.name,
                new_reference_id=match.key,
                new_name=replacement.name if replacement else None,
                similarity=match.score,
                action=CorrectionAction.RELINK,
                catalog_date=record.date,
                raw_date=fact.date,
            )

        return self._finding(
            FindingKind.MISMATCH,
            record,
            message="No confident replacement found",
            old_name=fact.name,
            similarity=current_score,
            catalog_date=record.date,
            raw_date=fact.date,
        )

    def _apply_override(self, record: CatalogRecord, rule: OverrideRule) -> Finding | AcceptedLink:
        current_id = record.reference_id
        current_fact = self.index.get(current_id) if current_id else None
        target = normalize_event_name(record.name)

        if rule.forced_id is not None and rule.forced_id == current_id:
            return AcceptedLink(
                record_index=record.index,
                record_name=record.name,
                reference_id=current_id,
                raw_name=current_fact.name if current_fact else None,
                similarity=(
                    similarity(target, current_fact.normalized_name) if current_fact else None
                ),
                pinned=True,
            )

        if rule.forced_id is None:
            if current_id is None:
                return self._finding(FindingKind.UNLINKED, record, message=rule.reason)
            return self._finding(
                FindingKind.CORRECTED,
                record,
                message=rule.reason,
                old_name=current_fact.name if current_fact else None,
                action=CorrectionAction.CLEAR,
            )

        forced_fact = self.index.get(rule.forced_id)
        if rule.forced_id not in self.index.entry_ids:
            logger.warning(
                "Override points at an id missing from the raw corpus",
                record_index=record.index,
                forced_id=rule.forced_id,
            )
        return self._finding(
            FindingKind.CORRECTED,
            record,
            message=rule.reason,
            old_name=current_fact.name if current_fact else None,
            new_reference_id=rule.forced_id,
            new_name=forced_fact.name if forced_fact else None,
            similarity=similarity(target, forced_fact.normalized_name) if forced_fact else None,
            action=CorrectionAction.RELINK,
        )

    def _unresolved(self, record: CatalogRecord, current_id: str) -> Finding:
        if current_id in self.index.access_denied:
            return self._finding(
                FindingKind.ACCESS_DENIED,
                record,
                message="Event page requires login (private or deleted)",
            )
        if current_id in self.index.unnamed:
            return self._finding(
                FindingKind.EXTRACTION_FAILED,
                record,
                message="Could not extract event name from raw content",
            )
        if current_id in self.index.unreadable:
            return self._finding(
                FindingKind.EXTRACTION_FAILED,
                record,
                message=f"Raw entry unreadable: {self.index.unreadable[current_id]}",
            )
        return self._finding(
            FindingKind.MISSING_REFERENCE,
            record,
            message="Raw event file not found",
        )

    @staticmethod
    def _finding(kind: FindingKind, record: CatalogRecord, **fields: Any) -> Finding:
        return Finding(
            kind=kind,
            record_index=record.index,
            record_name=record.name,
            reference_id=record.reference_id,
            **fields,
        )
