"""Pydantic models for the Event Link Reconciler.

This package contains:
- Catalog and corpus models (records, raw entries, extracted facts)
- Finding and audit models
"""

from event_reconciler.models.catalog import (
    CatalogRecord,
    ExtractedFact,
    RawEntry,
    extract_reference_id,
    find_link,
)
from event_reconciler.models.findings import (
    AuditEntry,
    CorrectionAction,
    Finding,
    FindingKind,
)

__all__ = [
    # Catalog / corpus
    "CatalogRecord",
    "ExtractedFact",
    "RawEntry",
    "extract_reference_id",
    "find_link",
    # Findings
    "AuditEntry",
    "CorrectionAction",
    "Finding",
    "FindingKind",
]
