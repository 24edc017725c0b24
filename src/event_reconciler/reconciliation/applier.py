"""Correction applier: rewrite catalog links and keep an audit trail.

Sequence for a batch with changes:
1. Snapshot the current catalog file byte-for-byte to a timestamped backup
2. Apply every relink/clear to the in-memory catalog
3. Atomically replace the catalog file
4. Write the audit log (one entry per relink, clear, or kept mismatch)

Restoring the backup reverses the whole batch.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
import json
from pathlib import Path
import shutil

import structlog

from event_reconciler.config import LINK_KEYS, ReconcilerConfig
from event_reconciler.exceptions import BackupError
from event_reconciler.loaders.catalog_loader import (
    Catalog,
    atomic_write_bytes,
    atomic_write_text,
    write_catalog,
)
from event_reconciler.models.catalog import CatalogRecord
from event_reconciler.models.findings import (
    AuditEntry,
    CorrectionAction,
    Finding,
    FindingKind,
)
from event_reconciler.reconciliation.reconciler import ReconciliationResult

logger = structlog.get_logger(__name__)

KEPT_REASON = "No confident replacement found; link left unchanged"
CLEARED_REASON = "No confident replacement found; link cleared"


@dataclass
class ApplyOutcome:
    """What a Correction Applier run did.

    Attributes:
        entries: Audit entries in catalog order (relinks, clears, kept).
        catalog_path: Catalog file written, if any.
        backup_path: Backup snapshot written, if any.
        audit_path: Audit log written, if any.
        dry_run: Whether writes were skipped.
    """

    entries: list[AuditEntry] = field(default_factory=list)
    catalog_path: Path | None = None
    backup_path: Path | None = None
    audit_path: Path | None = None
    dry_run: bool = False

    @property
    def changes(self) -> list[AuditEntry]:
        """Entries that changed a link."""
        return [e for e in self.entries if e.action is not CorrectionAction.KEEP]

    @property
    def kept(self) -> list[AuditEntry]:
        """Mismatches deliberately left unchanged."""
        return [e for e in self.entries if e.action is CorrectionAction.KEEP]


class CorrectionApplier:
    """Applies CORRECTED findings to a catalog.

    Example:
        >>> applier = CorrectionApplier(config)
        >>> outcome = applier.apply(catalog, result)
        >>> print(f"{len(outcome.changes)} links fixed, backup at {outcome.backup_path}")
    """

    def __init__(self, config: ReconcilerConfig) -> None:
        """Initialize the applier.

        Args:
            config: Paths, link template and clear policy.
        """
        self.config = config

    def plan(self, catalog: Catalog, result: ReconciliationResult) -> list[AuditEntry]:
        """Build the audit entries for a reconciliation result.

        Args:
            catalog: Catalog the result was computed from.
            result: Reconciliation result.

        Returns:
            Audit entries in catalog order.
        """
        records = catalog.entries()
        entries = []

        for finding in result.findings:
            if finding.record_index is None:
                continue
            record = records[finding.record_index]

            if finding.kind is FindingKind.CORRECTED:
                entries.append(self._correction_entry(record, finding))
            elif finding.kind is FindingKind.MISMATCH:
                action = (
                    CorrectionAction.CLEAR if self.config.clear_unmatched else CorrectionAction.KEEP
                )
                entries.append(
                    AuditEntry(
                        event_index=record.display_number,
                        event_name=record.name,
                        old_event_id=record.reference_id,
                        new_event_id=record.reference_id if action is CorrectionAction.KEEP else None,
                        old_event_name=finding.old_name,
                        similarity=finding.similarity,
                        old_link=record.link,
                        new_link=record.link if action is CorrectionAction.KEEP else None,
                        reason=KEPT_REASON if action is CorrectionAction.KEEP else CLEARED_REASON,
                        action=action,
                    )
                )

        return entries

    def apply(
        self,
        catalog: Catalog,
        result: ReconciliationResult,
        dry_run: bool = False,
    ) -> ApplyOutcome:
        """Apply corrections, writing backup, catalog and audit log.

        Nothing is written when there are no entries; the catalog and backup
        are only written when at least one link changes.

        Args:
            catalog: Catalog to mutate (the one the result was computed from).
            result: Reconciliation result.
            dry_run: Plan only, write nothing and leave the catalog untouched.

        Returns:
            ApplyOutcome describing the entries and files written.
        """
        entries = self.plan(catalog, result)
        outcome = ApplyOutcome(entries=entries, dry_run=dry_run)

        if dry_run:
            logger.info("Dry run: would apply corrections", changes=len(outcome.changes))
            return outcome

        if outcome.changes:
            catalog_path = catalog.path or self.config.catalog_path
            outcome.backup_path = self.backup(catalog, catalog_path)

            records = catalog.entries()
            for entry in outcome.changes:
                record = records[entry.event_index - 1]
                catalog.set_link(record.index, record.link_key or LINK_KEYS[0], entry.new_link)

            write_catalog(catalog, catalog_path)
            outcome.catalog_path = catalog_path

        if entries:
            outcome.audit_path = self.write_audit_log(entries)

        logger.info(
            "Corrections applied",
            relinked=sum(1 for e in entries if e.action is CorrectionAction.RELINK),
            cleared=sum(1 for e in entries if e.action is CorrectionAction.CLEAR),
            kept=len(outcome.kept),
            backup=str(outcome.backup_path) if outcome.backup_path else None,
        )

        return outcome

    def backup(self, catalog: Catalog, catalog_path: Path) -> Path:
        """Snapshot the current catalog state.

        Copies the file byte-for-byte when it exists, otherwise serializes the
        in-memory catalog.

        Args:
            catalog: Catalog before any change.
            catalog_path: Catalog file path.

        Returns:
            Path of the backup file.
        """
        backup_dir = self.config.resolved_backup_dir
        backup_dir.mkdir(parents=True, exist_ok=True)
        ts = datetime.now(UTC).strftime("%Y%m%dT%H%M%S%f")
        backup_path = backup_dir / f"{catalog_path.name}.backup.{ts}"
        suffix = 1
        while backup_path.exists():
            backup_path = backup_dir / f"{catalog_path.name}.backup.{ts}.{suffix}"
            suffix += 1

        if catalog_path.exists():
            shutil.copy2(catalog_path, backup_path)
        else:
            backup_path.write_text(catalog.to_json(), encoding="utf-8")

        logger.info("Backup created", path=str(backup_path))
        return backup_path

    def write_audit_log(self, entries: list[AuditEntry]) -> Path:
        """Write the audit log, archiving a previous one.

        Args:
            entries: Audit entries in catalog order.

        Returns:
            Path of the audit log.
        """
        audit_path = self.config.resolved_audit_path
        if audit_path.exists():
            _archive_existing(audit_path)
        payload = [e.model_dump(mode="json", by_alias=True) for e in entries]
        atomic_write_text(audit_path, json.dumps(payload, indent=2, ensure_ascii=False) + "\n")
        logger.info("Saved audit log", path=str(audit_path), entries=len(entries))
        return audit_path

    def _correction_entry(self, record: CatalogRecord, finding: Finding) -> AuditEntry:
        clear = finding.action is CorrectionAction.CLEAR or finding.new_reference_id is None
        new_id = None if clear else finding.new_reference_id
        return AuditEntry(
            event_index=record.display_number,
            event_name=record.name,
            old_event_id=record.reference_id,
            new_event_id=new_id,
            old_event_name=finding.old_name,
            new_event_name=None if clear else finding.new_name,
            similarity=finding.similarity,
            old_link=record.link,
            new_link=self.config.build_link(new_id) if new_id else None,
            reason=finding.message,
            action=CorrectionAction.CLEAR if clear else CorrectionAction.RELINK,
        )


def _archive_existing(filepath: Path) -> Path:
    """Rename an existing file with its modification timestamp.

    Args:
        filepath: Path to the existing file.

    Returns:
        Path to the archived file.
    """
    mtime = filepath.stat().st_mtime
    ts = datetime.fromtimestamp(mtime, tz=UTC).strftime("%Y-%m-%dT%H%M%S")
    archived = filepath.with_name(f"{filepath.stem}_{ts}{filepath.suffix}")
    filepath.rename(archived)
    logger.info("Archived previous audit log", path=str(archived))
    return archived


def restore_backup(backup_path: Path, catalog_path: Path) -> None:
    """Restore a catalog from a backup snapshot.

    Args:
        backup_path: Backup file written by ``CorrectionApplier.backup``.
        catalog_path: Catalog file to overwrite.

    Raises:
        BackupError: If the backup does not exist or cannot be read.
    """
    if not backup_path.is_file():
        msg = f"Backup not found at {backup_path}"
        raise BackupError(msg)
    try:
        data = backup_path.read_bytes()
    except OSError as e:
        msg = f"Cannot read backup {backup_path}: {e}"
        raise BackupError(msg) from e

    atomic_write_bytes(catalog_path, data)
    logger.info("Restored catalog from backup", backup=str(backup_path), catalog=str(catalog_path))
