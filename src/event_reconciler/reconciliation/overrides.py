"""Manual override rules consulted before automatic matching.

Some links cannot be fixed by name similarity: titles in another script,
multi-distance events whose page title differs from every catalog entry, or
events with no page at all. Override rules pin, replace or clear those links
explicitly. Rules are evaluated in order and the first match wins.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
import json
from pathlib import Path
from typing import Any

import structlog

from event_reconciler.exceptions import ReconcilerError
from event_reconciler.models.catalog import CatalogRecord

logger = structlog.get_logger(__name__)

RecordPredicate = Callable[[CatalogRecord], bool]


@dataclass(frozen=True)
class OverrideRule:
    """A forced link decision for matching catalog records.

    Attributes:
        predicate: Selects the records this rule applies to.
        forced_id: Event id to link to; None clears the link. A forced id
            equal to the current one pins the link as correct.
        reason: Recorded in findings and the audit log.
    """

    predicate: RecordPredicate
    forced_id: str | None
    reason: str = "Manual override"

    def matches(self, record: CatalogRecord) -> bool:
        """Whether this rule applies to a record."""
        return self.predicate(record)

    @classmethod
    def for_record(
        cls,
        name: str,
        forced_id: str | None,
        current_id: str | None = None,
        reason: str = "Manual override",
    ) -> "OverrideRule":
        """Build a rule matching an exact catalog name (and current id).

        Args:
            name: Exact catalog event name.
            forced_id: Event id to link to, or None to clear.
            current_id: Only apply while the record links to this id, or
                already links to ``forced_id`` (so a repeated run pins it).
            reason: Explanation for the audit log.

        Returns:
            OverrideRule.

        Example:
            >>> rule = OverrideRule.for_record(
            ...     "CRC Mini Race 2025 | 2.1k", None, current_id="575514851888090",
            ...     reason="No matching event page",
            ... )
        """

        def predicate(record: CatalogRecord) -> bool:
            if record.name != name:
                return False
            return current_id is None or record.reference_id in (current_id, forced_id)

        return cls(predicate=predicate, forced_id=forced_id, reason=reason)


def first_matching_rule(
    rules: Sequence[OverrideRule],
    record: CatalogRecord,
) -> OverrideRule | None:
    """Return the first rule that applies to a record, if any."""
    for rule in rules:
        if rule.matches(record):
            return rule
    return None


def _rule_from_dict(item: Any, position: int, path: Path) -> OverrideRule:
    if not isinstance(item, dict) or not isinstance(item.get("name"), str):
        msg = f"Override rule #{position + 1} in {path} needs a string 'name'"
        raise ReconcilerError(msg)

    forced_id = item.get("forced_id", item.get("forcedId"))
    current_id = item.get("current_id", item.get("currentId"))
    return OverrideRule.for_record(
        name=item["name"],
        forced_id=str(forced_id) if forced_id is not None else None,
        current_id=str(current_id) if current_id is not None else None,
        reason=item.get("reason") or "Manual override",
    )


def load_override_rules(path: Path) -> list[OverrideRule]:
    """Load override rules from a JSON file.

    The file holds an array of objects with ``name`` (exact catalog name),
    ``forced_id`` (id or null to clear) and optional ``current_id`` and
    ``reason``. camelCase keys are accepted too.

    Args:
        path: JSON file path.

    Returns:
        Rules in file order.

    Raises:
        ReconcilerError: If the file is unreadable or malformed.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        msg = f"Cannot load override rules from {path}: {e}"
        raise ReconcilerError(msg) from e

    if not isinstance(data, list):
        msg = f"Override rules in {path} must be a JSON array"
        raise ReconcilerError(msg)

    rules = [_rule_from_dict(item, i, path) for i, item in enumerate(data)]
    logger.info("Loaded override rules", path=str(path), rules=len(rules))
    return rules
