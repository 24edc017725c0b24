"""Tests for the loaders module.

This module tests tolerant catalog parsing, atomic catalog writes, raw
corpus sources and the reference index builder.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest


class TestParseCatalogText:
    """Tests for parse_catalog_text."""

    def test_plain_array(self) -> None:
        """Test parsing a well-formed catalog."""
        from event_reconciler.loaders import parse_catalog_text

        assert parse_catalog_text('[{"name": "A"}, {"name": "B"}]') == [
            {"name": "A"},
            {"name": "B"},
        ]

    def test_strips_byte_order_mark(self) -> None:
        """Test that a leading BOM is ignored."""
        from event_reconciler.loaders import parse_catalog_text

        assert parse_catalog_text('\ufeff[{"name": "A"}]') == [{"name": "A"}]

    def test_removes_trailing_commas(self) -> None:
        """Test repair of trailing commas before closing brackets."""
        from event_reconciler.loaders import parse_catalog_text

        text = '[\n  {"name": "A", "fbLink": "x",},\n  {"name": "B"},\n]'

        assert parse_catalog_text(text) == [{"name": "A", "fbLink": "x"}, {"name": "B"}]

    def test_wraps_bare_objects(self) -> None:
        """Test that comma-separated objects without brackets become an array."""
        from event_reconciler.loaders import parse_catalog_text

        assert parse_catalog_text('{"name": "A"},\n{"name": "B"}') == [
            {"name": "A"},
            {"name": "B"},
        ]

    def test_unparsable(self) -> None:
        """Test that hopeless content raises CatalogParseError."""
        from event_reconciler.exceptions import CatalogParseError
        from event_reconciler.loaders import parse_catalog_text

        with pytest.raises(CatalogParseError):
            parse_catalog_text("[{name: A}")

    def test_root_not_array(self) -> None:
        """Test that a scalar root is rejected."""
        from event_reconciler.exceptions import CatalogParseError
        from event_reconciler.loaders import parse_catalog_text

        with pytest.raises(CatalogParseError, match="not an array"):
            parse_catalog_text("42")


class TestCatalog:
    """Tests for Catalog loading and writing."""

    def test_load_catalog(self, workspace: dict[str, Path]) -> None:
        """Test loading a catalog file into record views."""
        from event_reconciler.loaders import load_catalog

        catalog = load_catalog(workspace["catalog"])

        assert len(catalog) == 2
        assert catalog.path == workspace["catalog"]
        entries = catalog.entries()
        assert entries[0].reference_id == "100"
        assert entries[1].name == "Dhaka Dash 30K"
        assert catalog.reference_ids() == ["100", "200"]

    def test_load_missing_catalog(self, tmp_path: Path) -> None:
        """Test that a missing file raises CatalogReadError."""
        from event_reconciler.exceptions import CatalogReadError
        from event_reconciler.loaders import load_catalog

        with pytest.raises(CatalogReadError, match="file not found"):
            load_catalog(tmp_path / "missing.json")

    def test_set_link_and_clear(self) -> None:
        """Test rewriting and removing a record's link."""
        from event_reconciler.loaders import Catalog

        catalog = Catalog(records=[{"name": "A", "fblink": "old"}])

        catalog.set_link(0, "fblink", "new")
        assert catalog.records[0]["fblink"] == "new"

        catalog.set_link(0, "fblink", None)
        assert "fblink" not in catalog.records[0]
        assert catalog.records[0]["name"] == "A"

    def test_write_catalog_round_trip(self, tmp_path: Path) -> None:
        """Test that writing keeps every field and non-ASCII text."""
        from event_reconciler.loaders import Catalog, load_catalog, write_catalog

        records = [{"name": "ঢাকা ম্যারাথন", "date": "1 Jan 2026", "extra": {"a": 1}}]
        path = tmp_path / "events.json"

        write_catalog(Catalog(records=records), path)

        text = path.read_text(encoding="utf-8")
        assert "ঢাকা" in text
        assert text.endswith("\n")
        assert load_catalog(path).records == records

    def test_atomic_write_leaves_no_temp_files(self, tmp_path: Path) -> None:
        """Test that the temporary file is renamed into place."""
        from event_reconciler.loaders import atomic_write_text

        target = tmp_path / "events.json"
        target.write_text("old", encoding="utf-8")

        atomic_write_text(target, "new")

        assert target.read_text(encoding="utf-8") == "new"
        assert [p.name for p in tmp_path.iterdir()] == ["events.json"]


class TestCorpus:
    """Tests for corpus sources."""

    def test_directory_corpus(self, tmp_path: Path) -> None:
        """Test id discovery and reading from a directory."""
        from event_reconciler.loaders import DirectoryCorpus

        (tmp_path / "300.txt").write_text("c", encoding="utf-8")
        (tmp_path / "100.txt").write_text("a", encoding="utf-8")
        (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")
        (tmp_path / "200.json").write_text("{}", encoding="utf-8")

        corpus = DirectoryCorpus(tmp_path)

        assert corpus.ids() == ["100", "300"]
        assert corpus.read("100") == "a"

    def test_directory_corpus_missing_dir(self, tmp_path: Path) -> None:
        """Test that a missing directory raises CorpusNotFoundError."""
        from event_reconciler.exceptions import CorpusNotFoundError
        from event_reconciler.loaders import DirectoryCorpus

        with pytest.raises(CorpusNotFoundError):
            DirectoryCorpus(tmp_path / "raw_events")

    def test_directory_corpus_missing_entry(self, tmp_path: Path) -> None:
        """Test that reading an absent id raises CorpusReadError."""
        from event_reconciler.exceptions import CorpusReadError
        from event_reconciler.loaders import DirectoryCorpus

        with pytest.raises(CorpusReadError):
            DirectoryCorpus(tmp_path).read("999")

    def test_mapping_corpus(self) -> None:
        """Test the in-memory corpus."""
        from event_reconciler.exceptions import CorpusReadError
        from event_reconciler.loaders import MappingCorpus

        corpus = MappingCorpus({"2": "b", "1": "a"})

        assert corpus.ids() == ["1", "2"]
        assert corpus.read("2") == "b"
        with pytest.raises(CorpusReadError):
            corpus.read("3")

    def test_mapping_corpus_from_entries(self) -> None:
        """Test building a corpus from RawEntry models."""
        from event_reconciler.loaders import MappingCorpus
        from event_reconciler.models import RawEntry

        corpus = MappingCorpus.from_entries([RawEntry(id="9", blob="x"), RawEntry(id="8", blob="y")])

        assert corpus.ids() == ["8", "9"]
        assert corpus.read("9") == "x"


class TestReferenceIndex:
    """Tests for build_reference_index."""

    def test_buckets(self, corpus_entries: dict[str, str]) -> None:
        """Test that every entry lands in exactly one bucket."""
        from event_reconciler.extraction import ExtractionStatus
        from event_reconciler.loaders import MappingCorpus, build_reference_index

        index = build_reference_index(MappingCorpus(corpus_entries))

        assert index.total_entries == 5
        assert set(index.facts) == {"100", "200", "300"}
        assert set(index.access_denied) == {"600"}
        assert set(index.unnamed) == {"700"}
        assert not index.unreadable
        assert index.status_of("600") is ExtractionStatus.ACCESS_DENIED
        assert index.status_of("700") is ExtractionStatus.NO_NAME
        assert index.status_of("999") is None
        assert "300" in index
        assert "600" not in index

    def test_candidates_sorted(self, corpus_entries: dict[str, str]) -> None:
        """Test that candidates are yielded in ascending id order."""
        from event_reconciler.loaders import MappingCorpus, build_reference_index

        index = build_reference_index(MappingCorpus(corpus_entries))

        assert list(index.candidates()) == [
            ("100", "sherpur half marathon 2025"),
            ("200", "chittagong night run 2025"),
            ("300", "dhaka dash"),
        ]

    def test_unreadable_entry_does_not_abort(self, tmp_path: Path, make_page) -> None:
        """Test that a file with invalid UTF-8 is recorded, not raised."""
        from event_reconciler.loaders import DirectoryCorpus, build_reference_index

        (tmp_path / "100.txt").write_text(make_page("Dhaka Dash 30K"), encoding="utf-8")
        (tmp_path / "200.txt").write_bytes(b"\xff\xfe\xfa bad bytes")

        index = build_reference_index(DirectoryCorpus(tmp_path))

        assert index.get("100") is not None
        assert "200" in index.unreadable
        assert index.entry_ids == ("100", "200")

    def test_nameless_fact_is_not_a_candidate(self) -> None:
        """Test that a fact without a name is indexed as unnamed."""
        from event_reconciler.extraction import ExtractionResult, ExtractionStatus
        from event_reconciler.loaders import MappingCorpus, build_reference_index
        from event_reconciler.models import ExtractedFact

        class NamelessExtractor:
            def extract(self, entry_id: str, blob: str) -> ExtractionResult:
                return ExtractionResult(
                    entry_id=entry_id,
                    status=ExtractionStatus.EXTRACTED,
                    fact=ExtractedFact(id=entry_id, date=blob),
                )

        index = build_reference_index(MappingCorpus({"1": "x"}), NamelessExtractor())

        assert "1" not in index
        assert set(index.unnamed) == {"1"}
        assert not index.unreadable
        assert list(index.candidates()) == []

    def test_index_is_read_only(self, corpus_entries: dict[str, str]) -> None:
        """Test that buckets cannot be mutated after construction."""
        from event_reconciler.loaders import MappingCorpus, build_reference_index

        index = build_reference_index(MappingCorpus(corpus_entries))

        with pytest.raises(TypeError):
            index.facts["999"] = index.facts["100"]


class TestCatalogRecord:
    """Tests for the CatalogRecord view."""

    def test_alternate_link_key(self) -> None:
        """Test that links under alternate keys are found."""
        from event_reconciler.models import CatalogRecord

        record = CatalogRecord.from_dict(
            4, {"name": "A", "fb_link": "https://facebook.com/events/55/?ref=x"}
        )

        assert record.link_key == "fb_link"
        assert record.reference_id == "55"
        assert record.display_number == 5

    def test_unresolvable_link(self) -> None:
        """Test that a link without an event id has no reference id."""
        from event_reconciler.models import CatalogRecord

        record = CatalogRecord.from_dict(0, {"name": "A", "fbLink": "https://example.com"})

        assert record.link == "https://example.com"
        assert record.reference_id is None

    def test_non_dict_item(self) -> None:
        """Test that a non-object catalog item becomes an empty record."""
        from event_reconciler.models import CatalogRecord

        record = CatalogRecord.from_dict(2, "not a record")

        assert record.name == ""
        assert record.reference_id is None

    def test_serializes_reference_id(self) -> None:
        """Test that the computed reference id is part of the dump."""
        from event_reconciler.models import CatalogRecord

        record = CatalogRecord.from_dict(0, {"fbLink": "https://facebook.com/events/7"})

        assert json.loads(record.model_dump_json())["reference_id"] == "7"
