#!/usr/bin/env python3
"""Quick-run script for the Event Link Reconciler.

This runs the complete check:
1. Load the catalog and index the raw corpus
2. Report id-level consistency (orphans, missing entries, duplicates)
3. Verify every link by event name
4. Apply corrections (optional)

Usage:
    python run.py

    # Or with UV:
    uv run python run.py

    # Apply corrections (backup + rewrite + audit log):
    APPLY_FIXES=1 python run.py
"""

import os
from pathlib import Path

# Add src to path for development
import sys

sys.path.insert(0, str(Path(__file__).parent / "src"))

from event_reconciler import (
    CorrectionApplier,
    DirectoryCorpus,
    Reconciler,
    ReconcilerConfig,
    build_reference_index,
    check_consistency,
    load_catalog,
    load_override_rules,
)


def main() -> int:
    """Run the reconciler with environment settings."""
    apply_fixes = os.getenv("APPLY_FIXES", "").lower() in ("1", "true", "yes")
    config = ReconcilerConfig.from_env()

    catalog = load_catalog(config.catalog_path)
    index = build_reference_index(DirectoryCorpus(config.raw_dir))
    report = check_consistency(catalog.reference_ids(), index.entry_ids)

    overrides = load_override_rules(config.overrides_path) if config.overrides_path else []
    result = Reconciler(index, threshold=config.threshold, overrides=overrides).reconcile(
        catalog.entries()
    )

    print(f"\n{'=' * 60}")
    print("RECONCILIATION SUMMARY")
    print(f"{'=' * 60}")
    print(f"Catalog records: {len(catalog)}")
    print(f"Raw entries: {index.total_entries}")
    print(f"Consistent ids: {'yes' if report.consistent else 'no'}")
    print(f"Confirmed links: {len(result.accepted)}")
    print(f"Proposed corrections: {len(result.corrections)}")
    print(f"Mismatches: {len(result.mismatches)}")
    print(f"Errors: {len(result.errors)}")

    if apply_fixes:
        outcome = CorrectionApplier(config).apply(catalog, result)
        print(f"\nLinks changed: {len(outcome.changes)}")
        if outcome.backup_path:
            print(f"Backup: {outcome.backup_path}")
        if outcome.audit_path:
            print(f"Audit log: {outcome.audit_path}")

    return 0 if report.consistent and result.clean else 1


if __name__ == "__main__":
    sys.exit(main())
