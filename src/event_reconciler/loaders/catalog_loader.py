"""Catalog loading and writing.

The catalog is a hand-maintained JSON array of event records. It is parsed
with a few repair heuristics for near-valid files (byte-order mark, trailing
commas, a bare object instead of an array) and written back with a single
atomic replace so an interrupted run never leaves a half-written file.
"""

from dataclasses import dataclass, field
import json
import os
from pathlib import Path
import re
import tempfile
from typing import Any

import structlog

from event_reconciler.exceptions import CatalogParseError, CatalogReadError
from event_reconciler.models.catalog import CatalogRecord

logger = structlog.get_logger(__name__)

_BOM = "\ufeff"
_TRAILING_COMMA = re.compile(r",\s*([}\]])")


def parse_catalog_text(text: str, path: Path | None = None) -> list[Any]:
    """Parse catalog JSON, repairing common near-valid encodings.

    Repairs attempted, in order:
    - Strip a leading byte-order mark
    - Wrap a body starting with ``{`` into an array
    - Remove trailing commas before ``]`` or ``}`` (only if plain parsing fails)

    Args:
        text: Raw file content.
        path: Source path, for error messages.

    Returns:
        The list of catalog items.

    Raises:
        CatalogParseError: If the content cannot be parsed or is not an array.
    """
    raw = text.lstrip(_BOM).strip()
    if raw.startswith("{"):
        raw = f"[{raw}]"

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        cleaned = _TRAILING_COMMA.sub(r"\1", raw)
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as e:
            raise CatalogParseError(str(e), path) from e
        logger.warning("Repaired trailing commas in catalog", path=str(path) if path else None)

    if not isinstance(data, list):
        msg = "root is not an array after parsing"
        raise CatalogParseError(msg, path)

    return data


@dataclass
class Catalog:
    """Ordered catalog of event records.

    Records are kept as the raw dicts read from disk so every display field
    survives a rewrite. ``entries()`` provides read-only views for matching.

    Attributes:
        records: Raw catalog items in file order.
        path: File the catalog was loaded from, if any.
    """

    records: list[Any] = field(default_factory=list)
    path: Path | None = None

    def __len__(self) -> int:
        """Number of catalog items."""
        return len(self.records)

    def entries(self) -> list[CatalogRecord]:
        """Build read-only views over every record.

        Returns:
            One CatalogRecord per item, in catalog order.
        """
        return [CatalogRecord.from_dict(i, item) for i, item in enumerate(self.records)]

    def reference_ids(self) -> list[str]:
        """Reference ids of every linked record, in order, repeats included.

        Returns:
            List of event ids.
        """
        return [e.reference_id for e in self.entries() if e.reference_id is not None]

    def set_link(self, index: int, key: str, link: str | None) -> None:
        """Rewrite or remove the link of one record.

        Args:
            index: 0-based record position.
            key: Link key to write (the key the record already uses).
            link: New link, or None to remove the key.
        """
        record = self.records[index]
        if link is None:
            record.pop(key, None)
        else:
            record[key] = link

    def to_json(self) -> str:
        """Serialize the catalog as pretty-printed JSON.

        Returns:
            JSON text ending with a newline.
        """
        return json.dumps(self.records, indent=2, ensure_ascii=False) + "\n"


def load_catalog(path: Path) -> Catalog:
    """Load a catalog file.

    Args:
        path: Catalog JSON path.

    Returns:
        Loaded Catalog.

    Raises:
        CatalogReadError: If the file is missing or unreadable.
        CatalogParseError: If the content cannot be parsed.
    """
    if not path.exists():
        raise CatalogReadError(path, "file not found")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogReadError(path, str(e)) from e

    catalog = Catalog(records=parse_catalog_text(text, path), path=path)
    logger.info("Loaded catalog", path=str(path), records=len(catalog))
    return catalog


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Replace ``path`` with ``data`` in a single rename.

    The content is written to a temporary file in the same directory and
    moved over the destination with ``os.replace``.

    Args:
        path: Destination file.
        data: Full file content.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="wb",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    ) as tmp:
        tmp.write(data)
        tmp.flush()
        os.fsync(tmp.fileno())
        tmp_path = Path(tmp.name)

    try:
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


def atomic_write_text(path: Path, text: str) -> None:
    """Replace ``path`` with UTF-8 ``text`` in a single rename."""
    atomic_write_bytes(path, text.encode("utf-8"))


def write_catalog(catalog: Catalog, path: Path) -> None:
    """Atomically write a catalog to disk.

    Args:
        catalog: Catalog to write.
        path: Destination path.
    """
    atomic_write_text(path, catalog.to_json())
    logger.info("Saved catalog", path=str(path), records=len(catalog))
