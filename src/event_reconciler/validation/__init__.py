"""Validation of catalog references against the raw corpus.

This package provides:
- Set-difference and duplicate checks
- Consistency report rendering (text, JSON, findings)
"""

from event_reconciler.validation.consistency import (
    ConsistencyReport,
    DuplicateReference,
    check_consistency,
)

__all__ = [
    "ConsistencyReport",
    "DuplicateReference",
    "check_consistency",
]
