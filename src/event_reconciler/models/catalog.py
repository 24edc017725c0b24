"""Catalog and raw-corpus models.

This module defines Pydantic models for the two views being reconciled:
- CatalogRecord: read-only view over one structured catalog entry
- RawEntry: one scraped text snapshot keyed by the source's event id
- ExtractedFact: name and date recovered from a RawEntry
"""

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field

from event_reconciler.config import LINK_KEYS

EVENT_ID_PATTERN = re.compile(r"/events/(\d+)", re.IGNORECASE)


def extract_reference_id(link: Any) -> str | None:
    """Extract the event id from a link value.

    Args:
        link: Link field value (usually a URL string).

    Returns:
        The numeric id as a string, or None if the link does not resolve.

    Example:
        >>> extract_reference_id("https://www.facebook.com/events/1200537458509104/")
        '1200537458509104'
        >>> extract_reference_id("https://example.com/about") is None
        True
    """
    if not isinstance(link, str):
        return None
    match = EVENT_ID_PATTERN.search(link)
    return match.group(1) if match else None


def find_link(data: dict[str, Any]) -> tuple[str | None, str | None]:
    """Find the link field of a catalog record.

    Args:
        data: Raw catalog record.

    Returns:
        Tuple of (key, value); both None when no string link is present.
    """
    for key in LINK_KEYS:
        value = data.get(key)
        if isinstance(value, str):
            return key, value
    return None, None


class CatalogRecord(BaseModel):
    """A structured catalog entry as seen by the reconciler.

    Identity is positional. The underlying dict (with every display field)
    stays in the Catalog; this view only carries what matching needs.

    Attributes:
        index: 0-based position in the catalog.
        name: Event name as curated in the catalog.
        link: Link value, if any.
        link_key: Key the link was found under.
        date: Display date, if any.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(description="0-based position in the catalog")
    name: str = Field(default="", description="Catalog event name")
    link: str | None = Field(default=None, description="Event page link")
    link_key: str | None = Field(default=None, description="Key holding the link")
    date: str | None = Field(default=None, description="Catalog display date")

    @computed_field
    @property
    def reference_id(self) -> str | None:
        """External event id referenced by the link."""
        return extract_reference_id(self.link)

    @property
    def display_number(self) -> int:
        """1-based position used in reports."""
        return self.index + 1

    @classmethod
    def from_dict(cls, index: int, data: Any) -> "CatalogRecord":
        """Build a view over a raw catalog item.

        Non-dict items produce a nameless, unlinked record.

        Args:
            index: Position of the item in the catalog.
            data: Raw catalog item.

        Returns:
            CatalogRecord view.
        """
        if not isinstance(data, dict):
            return cls(index=index)
        link_key, link = find_link(data)
        name = data.get("name")
        date = data.get("date")
        return cls(
            index=index,
            name=name if isinstance(name, str) else "",
            link=link,
            link_key=link_key,
            date=date if isinstance(date, str) else None,
        )


class RawEntry(BaseModel):
    """An unstructured text snapshot of one external event page.

    Attributes:
        id: The source's own numeric identifier.
        blob: Raw page text.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="External event id")
    blob: str = Field(description="Raw page text")


class ExtractedFact(BaseModel):
    """Name and date recovered from a raw entry.

    A ``None`` name means extraction failed, which is distinct from an
    extracted-but-empty name.

    Attributes:
        id: Raw entry id.
        name: Extracted event name, or None on failure.
        date: Extracted date line, or None.
        normalized_name: Normalized form of ``name`` ("" when absent).
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Raw entry id")
    name: str | None = Field(default=None, description="Extracted event name")
    date: str | None = Field(default=None, description="Extracted date line")
    normalized_name: str = Field(default="", description="Normalized name")

    @computed_field
    @property
    def has_name(self) -> bool:
        """Whether a name was extracted."""
        return self.name is not None
