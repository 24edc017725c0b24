"""Test suite for event-reconciler.

This package contains tests for all modules:
- test_matching: Name normalization and similarity scoring
- test_extraction: Title and date extraction from raw pages
- test_loaders: Catalog parsing/writing, corpus sources, reference index
- test_validation: Id-level consistency checks
- test_reconciliation: Link decisions and override rules
- test_applier: Backups, rewrites, audit log, restore and configuration
- test_cli: Command-line interface
"""
