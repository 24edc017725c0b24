"""Command-line interface for the Event Link Reconciler.

This CLI provides four commands:

1. `event-reconcile check`: Compare catalog link ids with raw corpus ids
   - Raw entries not referenced by the catalog
   - Catalog links with no raw entry
   - Ids referenced by more than one record

2. `event-reconcile verify`: Compare catalog names with raw page names
   - Confirmed links, mismatches, proposed corrections and errors
   - Nothing is written

3. `event-reconcile fix`: Apply corrections to the catalog
   - Timestamped backup, atomic rewrite, audit log
   - Preview with --dry-run

4. `event-reconcile restore`: Put a backup back in place of the catalog

Exit status is 0 when everything is consistent, 1 on any discrepancy or
fatal error.
"""

import argparse
import json
import logging
from pathlib import Path
import sys

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
import structlog

from .config import ReconcilerConfig
from .exceptions import ReconcilerError
from .extraction import HeuristicTextExtractor
from .loaders import Catalog, DirectoryCorpus, build_reference_index, load_catalog
from .models import CorrectionAction
from .reconciliation import (
    CorrectionApplier,
    Reconciler,
    ReconciliationResult,
    load_override_rules,
    restore_backup,
)
from .validation import check_consistency

logger = structlog.get_logger(__name__)

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Add catalog/corpus/matching options shared by every command.

    Args:
        parser: Subcommand parser.
    """
    parser.add_argument(
        "--catalog",
        type=Path,
        help="Catalog JSON file (default: $RECONCILE_CATALOG or page/events.json)",
    )
    parser.add_argument(
        "--raw-dir",
        type=Path,
        help="Directory of <id>.txt raw snapshots (default: $RECONCILE_RAW_DIR or raw_events)",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        help="Similarity threshold for accepting links and replacements (default: 0.7)",
    )
    parser.add_argument(
        "--overrides",
        type=Path,
        help="JSON file of manual override rules evaluated before matching",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress logs on stderr",
    )


def _create_check_parser(subparsers: argparse._SubParsersAction) -> None:
    """Create the check subcommand parser.

    Args:
        subparsers: Subparsers action to add the command to.
    """
    check_parser = subparsers.add_parser(
        "check",
        help="Compare catalog link ids with raw corpus ids",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Compare event ids between the raw corpus (<id>.txt files) and the catalog's
link fields.

Checks performed:
  - Raw entries not referenced by any catalog record
  - Catalog links pointing at ids with no raw entry
  - Ids referenced by more than one catalog record
        """,
    )
    _add_common_arguments(check_parser)
    check_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON",
    )


def _create_verify_parser(subparsers: argparse._SubParsersAction) -> None:
    """Create the verify subcommand parser.

    Args:
        subparsers: Subparsers action to add the command to.
    """
    verify_parser = subparsers.add_parser(
        "verify",
        help="Compare catalog names with the names on their linked pages",
    )
    _add_common_arguments(verify_parser)
    verify_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the findings as JSON",
    )


def _create_fix_parser(subparsers: argparse._SubParsersAction) -> None:
    """Create the fix subcommand parser.

    Args:
        subparsers: Subparsers action to add the command to.
    """
    fix_parser = subparsers.add_parser(
        "fix",
        help="Relink catalog records to their best-matching raw entries",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Reconcile the catalog and apply corrections.

A timestamped backup of the catalog is written before any change, the
catalog is replaced atomically, and every relink, clear or kept mismatch is
recorded in the audit log.

Examples:
  # Preview corrections
  event-reconcile fix --dry-run

  # Apply, clearing links that have no confident replacement
  event-reconcile fix --clear-unmatched
        """,
    )
    _add_common_arguments(fix_parser)
    fix_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would change without writing anything",
    )
    fix_parser.add_argument(
        "--clear-unmatched",
        action="store_true",
        help="Remove links that fail verification and have no confident replacement",
    )
    fix_parser.add_argument(
        "--audit",
        type=Path,
        help="Audit log path (default: next to the catalog)",
    )
    fix_parser.add_argument(
        "--backup-dir",
        type=Path,
        help="Directory for catalog backups (default: the catalog's directory)",
    )


def _create_restore_parser(subparsers: argparse._SubParsersAction) -> None:
    """Create the restore subcommand parser.

    Args:
        subparsers: Subparsers action to add the command to.
    """
    restore_parser = subparsers.add_parser(
        "restore",
        help="Restore the catalog from a backup written by 'fix'",
    )
    restore_parser.add_argument("backup", type=Path, help="Backup file to restore")
    restore_parser.add_argument("--catalog", type=Path, help="Catalog file to overwrite")
    restore_parser.add_argument("-v", "--verbose", action="store_true", help="Show logs")


def _configure_logging(verbose: bool) -> None:
    """Send structlog output to stderr so stdout carries only reports.

    Args:
        verbose: Show info-level logs instead of warnings only.
    """
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.INFO if verbose else logging.WARNING
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _build_config(args: argparse.Namespace) -> ReconcilerConfig:
    """Merge CLI flags over environment configuration.

    Args:
        args: Parsed command-line arguments.

    Returns:
        ReconcilerConfig for this run.
    """
    config = ReconcilerConfig.from_env(
        catalog_path=getattr(args, "catalog", None),
        raw_dir=getattr(args, "raw_dir", None),
        threshold=getattr(args, "threshold", None),
        overrides_path=getattr(args, "overrides", None),
        audit_path=getattr(args, "audit", None),
        backup_dir=getattr(args, "backup_dir", None),
        clear_unmatched=getattr(args, "clear_unmatched", None) or None,
    )
    logger.info("Configuration loaded", **config.to_dict())
    return config


def _reconcile(config: ReconcilerConfig, catalog: Catalog) -> ReconciliationResult:
    """Build the reference index and reconcile a loaded catalog.

    Args:
        config: Run configuration.
        catalog: Loaded catalog.

    Returns:
        ReconciliationResult.
    """
    corpus = DirectoryCorpus(config.raw_dir)
    index = build_reference_index(corpus, HeuristicTextExtractor())
    overrides = load_override_rules(config.overrides_path) if config.overrides_path else []
    reconciler = Reconciler(index, threshold=config.threshold, overrides=overrides)
    return reconciler.reconcile(catalog.entries())


def _run_check_command(args: argparse.Namespace) -> int:
    """Run the check subcommand.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Process exit status.
    """
    config = _build_config(args)
    catalog = load_catalog(config.catalog_path)
    corpus = DirectoryCorpus(config.raw_dir)
    report = check_consistency(catalog.reference_ids(), corpus.ids())

    if args.json:
        console.print_json(json.dumps(report.to_dict()))
    else:
        console.print(report.to_text(), markup=False)

    return 0 if report.consistent else 1


def _run_verify_command(args: argparse.Namespace) -> int:
    """Run the verify subcommand.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Process exit status.
    """
    config = _build_config(args)
    catalog = load_catalog(config.catalog_path)

    if not args.json:
        console.print(f"Checking {len(catalog)} events for link accuracy...")
        console.print()

    result = _reconcile(config, catalog)

    if args.json:
        console.print_json(json.dumps(result.to_dict()))
    else:
        console.print(result.to_text(), markup=False)

    return 0 if result.clean else 1


def _run_fix_command(args: argparse.Namespace) -> int:
    """Run the fix subcommand.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Process exit status.
    """
    config = _build_config(args)

    console.print("[bold cyan]Event Link Fix[/]")
    console.print(f"Catalog: {config.catalog_path}")
    console.print(f"Raw corpus: {config.raw_dir}")
    console.print(f"Threshold: {config.threshold}")
    console.print()

    catalog = load_catalog(config.catalog_path)
    result = _reconcile(config, catalog)

    applier = CorrectionApplier(config)
    outcome = applier.apply(catalog, result, dry_run=args.dry_run)

    if args.dry_run:
        console.print("[yellow]Dry run mode - no files will be written[/]")
        console.print()

    for entry in outcome.entries:
        if entry.action is CorrectionAction.RELINK:
            console.print(f"[green]✅ Fixed Event #{entry.event_index}:[/] {escape(entry.event_name)}")
            console.print(f"   Old: {entry.old_event_id} ({entry.old_event_name!r})", markup=False)
            score = f" [{entry.similarity:.1%} match]" if entry.similarity is not None else ""
            console.print(f"   New: {entry.new_event_id} ({entry.new_event_name!r}){score}", markup=False)
        elif entry.action is CorrectionAction.CLEAR:
            console.print(f"[yellow]⚠️  Removed link for Event #{entry.event_index}:[/] {escape(entry.event_name)}")
            console.print(f"   Old: {entry.old_event_id}", markup=False)
        else:
            console.print(f"[red]❌ No good match found for Event #{entry.event_index}:[/] {escape(entry.event_name)}")
            console.print(
                f"   Currently linked to: {entry.old_event_id} ({entry.old_event_name!r})",
                markup=False,
            )
        console.print(f"   Reason: {entry.reason}", markup=False)
        console.print()

    for finding in result.errors:
        console.print(
            f"Event #{(finding.record_index or 0) + 1}: {finding.record_name!r} - {finding.message}",
            markup=False,
        )

    console.print()
    console.print("Summary:")
    console.print(f"  - Links relinked: {sum(1 for e in outcome.changes if e.new_event_id)}")
    console.print(f"  - Links cleared: {sum(1 for e in outcome.changes if not e.new_event_id)}")
    console.print(f"  - Mismatches kept: {len(outcome.kept)}")
    console.print(f"  - Errors: {len(result.errors)}")

    if outcome.backup_path:
        console.print(f"[green]Backup created: {outcome.backup_path}[/]")
    if outcome.audit_path:
        console.print(f"[green]Audit log saved to: {outcome.audit_path}[/]")
    if not outcome.changes:
        console.print("No corrections needed.")

    return 0 if not (outcome.kept or result.errors) else 1


def _run_restore_command(args: argparse.Namespace) -> int:
    """Run the restore subcommand.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Process exit status.
    """
    config = _build_config(args)
    restore_backup(args.backup, config.catalog_path)
    console.print(f"[green]Restored {config.catalog_path} from {args.backup}[/]")
    return 0


COMMANDS = {
    "check": _run_check_command,
    "verify": _run_verify_command,
    "fix": _run_fix_command,
    "restore": _run_restore_command,
}


def _report_fatal(message: str, as_json: bool) -> None:
    if as_json:
        err_console.print_json(json.dumps({"error": message}))
    else:
        err_console.print(f"[red]Fatal error:[/] {escape(message)}")


def main(argv: list[str] | None = None) -> None:
    """Run the Event Link Reconciler CLI.

    Args:
        argv: Arguments to parse (defaults to sys.argv).
    """
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="event-reconcile",
        description="Check and repair catalog links to scraped event pages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  check      Compare catalog link ids with raw corpus ids
  verify     Compare catalog names with the names on their linked pages
  fix        Relink catalog records to their best-matching raw entries
  restore    Restore the catalog from a backup

Environment variables:
  RECONCILE_CATALOG      - Catalog JSON file (default: page/events.json)
  RECONCILE_RAW_DIR      - Raw snapshot directory (default: raw_events)
  RECONCILE_THRESHOLD    - Similarity threshold (default: 0.7)
  RECONCILE_AUDIT_PATH   - Audit log path
  RECONCILE_BACKUP_DIR   - Backup directory
  RECONCILE_OVERRIDES    - Override rules JSON file
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")
    _create_check_parser(subparsers)
    _create_verify_parser(subparsers)
    _create_fix_parser(subparsers)
    _create_restore_parser(subparsers)

    args = parser.parse_args(argv)

    # Default to check if no command given
    if args.command is None:
        args = parser.parse_args(["check", *(argv if argv is not None else sys.argv[1:])])

    _configure_logging(args.verbose)
    as_json = getattr(args, "json", False)

    try:
        status = COMMANDS[args.command](args)
    except ReconcilerError as e:
        _report_fatal(str(e), as_json)
        raise SystemExit(1) from None
    except ValueError as e:
        _report_fatal(f"Invalid configuration: {e}", as_json)
        raise SystemExit(1) from None
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Interrupted by user[/]")
        raise SystemExit(1) from None
    except Exception as e:
        _report_fatal(f"Unexpected error: {e}", as_json)
        raise SystemExit(1) from None

    raise SystemExit(status)


if __name__ == "__main__":
    main()
