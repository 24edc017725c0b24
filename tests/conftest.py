"""Pytest configuration and shared test fixtures.

This module provides fixtures for testing the Event Link Reconciler,
including raw page snapshots, catalog records and on-disk workspaces.
"""

from __future__ import annotations

from collections.abc import Callable
import json
from pathlib import Path

import pytest

# =============================================================================
# RAW PAGE FIXTURES
# =============================================================================


def render_page(title: str, location: str = "Dhaka, Dhaka Division, Bangladesh") -> str:
    """Render a raw snapshot shaped like a scraped public event page."""
    return "\n".join(
        [
            "Log in",
            "Forgotten account?",
            "",
            title,
            location,
            "Friday 17 July 2026 at 04:30 UTC+06",
            "Event by Dhaka Runners",
            "Public · Anyone on or off Facebook",
            "Details",
            "123 people responded",
            "",
        ]
    )


@pytest.fixture
def make_page() -> Callable[..., str]:
    """Provide the raw page renderer.

    Returns:
        Function building a raw page from a title and location line.
    """
    return render_page


@pytest.fixture
def access_denied_page() -> str:
    """Provide a login-wall snapshot.

    Returns:
        Raw text carrying an access marker.
    """
    return "Facebook\nYou must log in to continue.\nLog in\nForgotten account?\n"


@pytest.fixture
def unnamed_page() -> str:
    """Provide a readable snapshot with no recognizable title.

    Returns:
        Raw text made only of navigation chrome.
    """
    return "Log in\nHome\nEvents\n12345\nCategories\n"


@pytest.fixture
def corpus_entries() -> dict[str, str]:
    """Provide an in-memory raw corpus.

    Returns:
        Mapping of event id to raw text.
    """
    return {
        "100": render_page("Sherpur Half Marathon 2024"),
        "200": render_page("Chittagong Night Run 2025", "Chittagong, Bangladesh"),
        "300": render_page("Dhaka Dash 30K"),
        "600": "You must log in to continue.\nLog in\n",
        "700": "Log in\nHome\n12345\n",
    }


# =============================================================================
# CATALOG FIXTURES
# =============================================================================


def event_link(event_id: str) -> str:
    """Build a catalog link the way the catalog stores them."""
    return f"https://www.facebook.com/events/{event_id}/"


@pytest.fixture
def catalog_items() -> list[dict]:
    """Provide catalog records covering accept and relink.

    Returns:
        Two records: one correctly linked, one pointing at the wrong page.
    """
    return [
        {
            "name": "Sherpur Half Marathon 2025 | 21.1k",
            "date": "17 Jul 2026",
            "fbLink": event_link("100"),
        },
        {
            "name": "Dhaka Dash 30K",
            "date": "21 Dec 2025",
            "fbLink": event_link("200"),
        },
    ]


# =============================================================================
# WORKSPACE FIXTURES
# =============================================================================


@pytest.fixture
def workspace(
    tmp_path: Path,
    corpus_entries: dict[str, str],
    catalog_items: list[dict],
) -> dict[str, Path]:
    """Write a catalog and a raw corpus directory to a temporary directory.

    Returns:
        Dictionary with ``catalog`` and ``raw_dir`` paths.
    """
    raw_dir = tmp_path / "raw_events"
    raw_dir.mkdir()
    for entry_id, text in corpus_entries.items():
        if entry_id in ("100", "200", "300"):
            (raw_dir / f"{entry_id}.txt").write_text(text, encoding="utf-8")

    page_dir = tmp_path / "page"
    page_dir.mkdir()
    catalog = page_dir / "events.json"
    catalog.write_text(json.dumps(catalog_items, indent=2), encoding="utf-8")

    return {"catalog": catalog, "raw_dir": raw_dir}


# =============================================================================
# ENVIRONMENT FIXTURES
# =============================================================================


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove reconciler settings from the environment."""
    for key in (
        "RECONCILE_CATALOG",
        "RECONCILE_RAW_DIR",
        "RECONCILE_THRESHOLD",
        "RECONCILE_AUDIT_PATH",
        "RECONCILE_BACKUP_DIR",
        "RECONCILE_OVERRIDES",
    ):
        monkeypatch.delenv(key, raising=False)
