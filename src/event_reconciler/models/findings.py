"""Finding and audit models.

Findings classify every outcome of comparing catalog state to raw corpus
state. Audit entries are the serialized record of what the Correction
Applier did (or deliberately did not do) to each catalog record.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FindingKind(str, Enum):
    """Type of reconciliation finding."""

    MISSING_REFERENCE = "missing_reference"
    ORPHAN = "orphan"
    DUPLICATE = "duplicate"
    MISMATCH = "mismatch"
    CORRECTED = "corrected"
    ACCESS_DENIED = "access_denied"
    EXTRACTION_FAILED = "extraction_failed"
    UNLINKED = "unlinked"


class CorrectionAction(str, Enum):
    """What happened to a catalog record's link."""

    RELINK = "relink"
    CLEAR = "clear"
    KEEP = "keep"


class Finding(BaseModel):
    """A classified reconciliation outcome.

    Record-level findings carry ``record_index``/``record_name``; corpus-level
    findings (orphans, duplicates) only carry ``reference_id``.

    Attributes:
        kind: Finding type.
        message: Human-readable description.
        record_index: 0-based catalog position, if record-level.
        record_name: Catalog event name, if record-level.
        reference_id: Event id the record (or finding) refers to.
        old_name: Name extracted from the current reference, if known.
        new_reference_id: Replacement id (``None`` with CLEAR means removal).
        new_name: Name extracted from the replacement.
        similarity: Score behind the decision, if any.
        catalog_date: Date shown in the catalog, if any.
        raw_date: Date line extracted from the current raw entry, if any.
        action: Correction action, for CORRECTED findings.
        count: Occurrence count, for DUPLICATE findings.
    """

    model_config = ConfigDict(frozen=True)

    kind: FindingKind = Field(description="Finding type")
    message: str = Field(default="", description="Human-readable description")
    record_index: int | None = Field(default=None, description="0-based catalog position")
    record_name: str | None = Field(default=None, description="Catalog event name")
    reference_id: str | None = Field(default=None, description="Current event id")
    old_name: str | None = Field(default=None, description="Name behind current id")
    new_reference_id: str | None = Field(default=None, description="Replacement event id")
    new_name: str | None = Field(default=None, description="Name behind replacement id")
    similarity: float | None = Field(default=None, description="Similarity score")
    catalog_date: str | None = Field(default=None, description="Catalog display date")
    raw_date: str | None = Field(default=None, description="Raw page date line")
    action: CorrectionAction | None = Field(default=None, description="Correction action")
    count: int | None = Field(default=None, description="Occurrence count")


class AuditEntry(BaseModel):
    """One line of the correction audit log.

    Serializes with camelCase keys (``eventIndex``, ``oldEventId``...) so the
    log matches the report format consumed by the catalog tooling.

    Attributes:
        event_index: 1-based catalog position.
        event_name: Catalog event name.
        old_event_id: Event id before the change.
        new_event_id: Event id after the change (None when cleared).
        old_event_name: Name extracted for the old id.
        new_event_name: Name extracted for the new id.
        similarity: Score of the new match, if computed.
        old_link: Link before the change.
        new_link: Link after the change (None when cleared).
        reason: Why the change was (or was not) made.
        action: relink, clear or keep.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    event_index: int
    event_name: str
    old_event_id: str | None = None
    new_event_id: str | None = None
    old_event_name: str | None = None
    new_event_name: str | None = None
    similarity: float | None = None
    old_link: str | None = None
    new_link: str | None = None
    reason: str = ""
    action: CorrectionAction = CorrectionAction.RELINK
