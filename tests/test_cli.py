"""Tests for the command-line interface.

This module runs each subcommand against a temporary catalog and raw
corpus and checks exit codes and output.
"""

from __future__ import annotations

from collections.abc import Iterator
import json
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def reset_logging(clean_env: None) -> Iterator[None]:
    """Undo the CLI's structlog configuration after each test."""
    import structlog

    yield
    structlog.reset_defaults()


def _run(*argv: str) -> int:
    from event_reconciler.cli import main

    with pytest.raises(SystemExit) as exc_info:
        main(list(argv))
    return exc_info.value.code


def _paths(workspace: dict[str, Path]) -> list[str]:
    return ["--catalog", str(workspace["catalog"]), "--raw-dir", str(workspace["raw_dir"])]


class TestCheckCommand:
    """Tests for the check subcommand."""

    def test_reports_orphans(
        self, workspace: dict[str, Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test that an unreferenced raw entry fails the check."""
        code = _run("check", *_paths(workspace))

        out = capsys.readouterr().out
        assert code == 1
        assert "300" in out
        assert "RESULT: INCONSISTENCIES FOUND" in out

    def test_consistent_json(
        self, workspace: dict[str, Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test JSON output and exit code for a consistent catalog."""
        (workspace["raw_dir"] / "300.txt").unlink()

        code = _run("check", *_paths(workspace), "--json")

        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["summary"]["consistent"] is True
        assert data["missingInCatalog"] == []

    def test_missing_catalog(
        self, workspace: dict[str, Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test that a missing catalog is a fatal error."""
        workspace["catalog"].unlink()

        code = _run("check", *_paths(workspace), "--json")

        err = json.loads(capsys.readouterr().err)
        assert code == 1
        assert "Cannot read catalog" in err["error"]


class TestVerifyCommand:
    """Tests for the verify subcommand."""

    def test_verify_json(
        self, workspace: dict[str, Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test that verify reports the wrong link without writing."""
        original = workspace["catalog"].read_bytes()

        code = _run("verify", *_paths(workspace), "--json")

        data = json.loads(capsys.readouterr().out)
        assert code == 1
        assert data["summary"]["accepted"] == 1
        assert data["summary"]["corrections"] == 1
        assert data["findings"][0]["new_reference_id"] == "300"
        assert workspace["catalog"].read_bytes() == original

    def test_missing_raw_dir(self, workspace: dict[str, Path]) -> None:
        """Test that a missing corpus directory is a fatal error."""
        code = _run(
            "verify",
            "--catalog",
            str(workspace["catalog"]),
            "--raw-dir",
            str(workspace["raw_dir"] / "nope"),
        )

        assert code == 1


class TestFixCommand:
    """Tests for the fix and restore subcommands."""

    def test_fix_then_restore(self, workspace: dict[str, Path]) -> None:
        """Test a full fix followed by a restore of its backup."""
        original = workspace["catalog"].read_bytes()

        assert _run("fix", *_paths(workspace)) == 0

        saved = json.loads(workspace["catalog"].read_text(encoding="utf-8"))
        assert saved[1]["fbLink"].endswith("/events/300")
        backups = list(workspace["catalog"].parent.glob("events.json.backup.*"))
        assert len(backups) == 1

        assert _run("restore", str(backups[0]), "--catalog", str(workspace["catalog"])) == 0
        assert workspace["catalog"].read_bytes() == original

    def test_fix_dry_run(self, workspace: dict[str, Path]) -> None:
        """Test that --dry-run leaves the catalog untouched."""
        original = workspace["catalog"].read_bytes()

        _run("fix", *_paths(workspace), "--dry-run")

        assert workspace["catalog"].read_bytes() == original
        assert list(workspace["catalog"].parent.glob("events.json.backup.*")) == []

    def test_invalid_threshold(self, workspace: dict[str, Path]) -> None:
        """Test that an out-of-range threshold is rejected."""
        assert _run("fix", *_paths(workspace), "--threshold", "2") == 1
