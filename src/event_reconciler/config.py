"""Configuration for the Event Link Reconciler.

Module-level constants hold the defaults; ``ReconcilerConfig`` carries the
values for one run so thresholds and output paths are passed explicitly
instead of being read from globals.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

DEFAULT_CATALOG_PATH = Path("page") / "events.json"
DEFAULT_RAW_DIR = Path("raw_events")
DEFAULT_AUDIT_FILENAME = "fblink_fixes_report.json"

# Shared by verification (inclusive accept) and correction (exclusive search floor)
DEFAULT_SIMILARITY_THRESHOLD = 0.7

EVENT_LINK_TEMPLATE = "https://www.facebook.com/events/{event_id}"

# Keys a catalog record may carry its event link under, in lookup order
LINK_KEYS = ("fbLink", "fblink", "fb_link", "fb-link", "fb")


@dataclass(frozen=True)
class ReconcilerConfig:
    """Configuration for a reconciliation run.

    Attributes:
        catalog_path: Catalog JSON file to check and correct.
        raw_dir: Directory holding ``<id>.txt`` raw snapshots.
        threshold: Similarity needed to accept a link or a replacement.
        audit_path: Where the correction audit log is written.
        backup_dir: Directory for catalog backups (defaults to the catalog's).
        overrides_path: Optional JSON file of manual override rules.
        link_template: Format string used to build a corrected link.
        clear_unmatched: Remove links that fail with no confident replacement.
    """

    catalog_path: Path = DEFAULT_CATALOG_PATH
    raw_dir: Path = DEFAULT_RAW_DIR
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD
    audit_path: Path | None = None
    backup_dir: Path | None = None
    overrides_path: Path | None = None
    link_template: str = EVENT_LINK_TEMPLATE
    clear_unmatched: bool = False

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not 0.0 < self.threshold <= 1.0:
            msg = "threshold must be in (0, 1]"
            raise ValueError(msg)
        if "{event_id}" not in self.link_template:
            msg = "link_template must contain an {event_id} placeholder"
            raise ValueError(msg)

    @property
    def resolved_audit_path(self) -> Path:
        """Audit log path, next to the catalog unless configured."""
        if self.audit_path is not None:
            return self.audit_path
        return self.catalog_path.parent / DEFAULT_AUDIT_FILENAME

    @property
    def resolved_backup_dir(self) -> Path:
        """Backup directory, the catalog's directory unless configured."""
        return self.backup_dir if self.backup_dir is not None else self.catalog_path.parent

    def build_link(self, event_id: str) -> str:
        """Return the catalog link for an event id."""
        return self.link_template.format(event_id=event_id)

    @classmethod
    def from_env(cls, **overrides: Any) -> "ReconcilerConfig":
        """Create configuration from environment variables.

        Reads (after loading a ``.env`` file if present):
        - RECONCILE_CATALOG, RECONCILE_RAW_DIR
        - RECONCILE_THRESHOLD
        - RECONCILE_AUDIT_PATH, RECONCILE_BACKUP_DIR, RECONCILE_OVERRIDES

        Args:
            **overrides: Values that take precedence over the environment
                (``None`` values are ignored).

        Returns:
            Configuration populated from environment.

        Raises:
            ValueError: If RECONCILE_THRESHOLD is not a number.
        """
        import os

        from dotenv import load_dotenv

        load_dotenv()

        values: dict[str, Any] = {
            "catalog_path": Path(os.getenv("RECONCILE_CATALOG", str(DEFAULT_CATALOG_PATH))),
            "raw_dir": Path(os.getenv("RECONCILE_RAW_DIR", str(DEFAULT_RAW_DIR))),
        }

        threshold = os.getenv("RECONCILE_THRESHOLD")
        if threshold:
            try:
                values["threshold"] = float(threshold)
            except ValueError:
                msg = f"RECONCILE_THRESHOLD must be a number, got {threshold!r}"
                raise ValueError(msg) from None

        for key, env_name in (
            ("audit_path", "RECONCILE_AUDIT_PATH"),
            ("backup_dir", "RECONCILE_BACKUP_DIR"),
            ("overrides_path", "RECONCILE_OVERRIDES"),
        ):
            value = os.getenv(env_name)
            if value:
                values[key] = Path(value)

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for display.

        Returns:
            Dictionary representation of configuration.
        """
        return {
            "catalog_path": str(self.catalog_path),
            "raw_dir": str(self.raw_dir),
            "threshold": self.threshold,
            "audit_path": str(self.resolved_audit_path),
            "backup_dir": str(self.resolved_backup_dir),
            "overrides_path": str(self.overrides_path) if self.overrides_path else None,
            "clear_unmatched": self.clear_unmatched,
        }
