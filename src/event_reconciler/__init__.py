"""Event Link Reconciler.

Keeps a hand-maintained event catalog consistent with the scraped event
pages it links to. Each catalog record carries a link whose numeric id
names a raw ``<id>.txt`` snapshot; the reconciler checks that every link
resolves, that the page's event name matches the catalog's, and repairs
wrong links by fuzzy name search over the whole corpus.

Usage:
    from pathlib import Path
    from event_reconciler import (
        DirectoryCorpus,
        Reconciler,
        build_reference_index,
        load_catalog,
    )

    catalog = load_catalog(Path("page/events.json"))
    index = build_reference_index(DirectoryCorpus(Path("raw_events")))
    result = Reconciler(index).reconcile(catalog.entries())

    # Apply corrections (backup + atomic rewrite + audit log)
    from event_reconciler import CorrectionApplier, ReconcilerConfig
    outcome = CorrectionApplier(ReconcilerConfig()).apply(catalog, result)

    # Id-level consistency only
    from event_reconciler import check_consistency
    report = check_consistency(catalog.reference_ids(), index.entry_ids)
"""

# =============================================================================
# CONFIGURATION
# =============================================================================
from .config import (
    DEFAULT_SIMILARITY_THRESHOLD,
    LINK_KEYS,
    ReconcilerConfig,
)

# =============================================================================
# EXCEPTIONS
# =============================================================================
from .exceptions import (
    BackupError,
    CatalogParseError,
    CatalogReadError,
    CorpusNotFoundError,
    CorpusReadError,
    ReconcilerError,
)

# Extraction
from .extraction import (
    ExtractionResult,
    ExtractionRules,
    ExtractionStatus,
    HeuristicTextExtractor,
    TextExtractor,
)

# Loaders
from .loaders import (
    Catalog,
    DirectoryCorpus,
    MappingCorpus,
    ReferenceIndex,
    build_reference_index,
    load_catalog,
    write_catalog,
)

# Matching
from .matching import best_match, normalize_event_name, similarity

# =============================================================================
# MODELS
# =============================================================================
from .models import (
    AuditEntry,
    CatalogRecord,
    CorrectionAction,
    ExtractedFact,
    Finding,
    FindingKind,
    RawEntry,
)

# Reconciliation
from .reconciliation import (
    CorrectionApplier,
    OverrideRule,
    ReconciliationResult,
    Reconciler,
    load_override_rules,
    restore_backup,
)

# Validation
from .validation import ConsistencyReport, check_consistency

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Configuration
    "DEFAULT_SIMILARITY_THRESHOLD",
    "LINK_KEYS",
    "ReconcilerConfig",
    # Exceptions
    "BackupError",
    "CatalogParseError",
    "CatalogReadError",
    "CorpusNotFoundError",
    "CorpusReadError",
    "ReconcilerError",
    # Models
    "AuditEntry",
    "CatalogRecord",
    "CorrectionAction",
    "ExtractedFact",
    "Finding",
    "FindingKind",
    "RawEntry",
    # Extraction
    "ExtractionResult",
    "ExtractionRules",
    "ExtractionStatus",
    "HeuristicTextExtractor",
    "TextExtractor",
    # Matching
    "best_match",
    "normalize_event_name",
    "similarity",
    # Loaders
    "Catalog",
    "DirectoryCorpus",
    "MappingCorpus",
    "ReferenceIndex",
    "build_reference_index",
    "load_catalog",
    "write_catalog",
    # Reconciliation
    "CorrectionApplier",
    "OverrideRule",
    "ReconciliationResult",
    "Reconciler",
    "load_override_rules",
    "restore_backup",
    # Validation
    "ConsistencyReport",
    "check_consistency",
]
