"""Link reconciliation and correction.

This package provides:
- Manual override rules consulted before matching
- The reconciler deciding, per record, accept / correct / mismatch
- The correction applier (backup, atomic rewrite, audit log, restore)
"""

from event_reconciler.reconciliation.applier import (
    ApplyOutcome,
    CorrectionApplier,
    restore_backup,
)
from event_reconciler.reconciliation.overrides import (
    OverrideRule,
    first_matching_rule,
    load_override_rules,
)
from event_reconciler.reconciliation.reconciler import (
    AcceptedLink,
    ReconciliationResult,
    Reconciler,
)

__all__ = [
    # Overrides
    "OverrideRule",
    "first_matching_rule",
    "load_override_rules",
    # Reconciler
    "AcceptedLink",
    "ReconciliationResult",
    "Reconciler",
    # Applier
    "ApplyOutcome",
    "CorrectionApplier",
    "restore_backup",
]
