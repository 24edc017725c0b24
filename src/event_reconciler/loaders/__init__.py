"""Loaders for the catalog and the raw event corpus.

This package provides:
- Tolerant catalog parsing and atomic catalog writes
- Raw corpus sources (directory of ``<id>.txt`` files, in-memory mapping)
- The reference index over extracted event names
"""

from event_reconciler.loaders.catalog_loader import (
    Catalog,
    atomic_write_bytes,
    atomic_write_text,
    load_catalog,
    parse_catalog_text,
    write_catalog,
)
from event_reconciler.loaders.corpus import (
    CorpusSource,
    DirectoryCorpus,
    MappingCorpus,
)
from event_reconciler.loaders.reference_index import (
    ReferenceIndex,
    build_reference_index,
)

__all__ = [
    # Catalog
    "Catalog",
    "atomic_write_bytes",
    "atomic_write_text",
    "load_catalog",
    "parse_catalog_text",
    "write_catalog",
    # Corpus
    "CorpusSource",
    "DirectoryCorpus",
    "MappingCorpus",
    # Index
    "ReferenceIndex",
    "build_reference_index",
]
