"""Tests for snapshot reconciliation: reuse and deduplication."""
from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.catalog_sync.catalog import CatalogItem, Snapshot  # noqa: E402
from backend.catalog_sync.reconciler import CatalogReconciler, dedupe, reuse_key  # noqa: E402
from backend.catalog_sync.title_parser import ParsedCandidate  # noqa: E402


def _item(item_id: str, name: str, year: str = "2023", source_title: str | None = None) -> CatalogItem:
    return CatalogItem(id=item_id, name=name, release_info=year, source_title=source_title)


def test_dedupe_keeps_first_occurrence_in_order() -> None:
    """Later items sharing an id are dropped; order of survivors is preserved."""

    first = _item("tt1", "Saltburn")
    later = _item("tt1", "Saltburn (dup)")
    other = _item("tt2", "Poor Things")

    assert dedupe([first, other, later]) == [first, other]
    assert dedupe([first, other, later])[0] is first


def test_reconcile_builds_next_generation() -> None:
    """Reconciled snapshots are deduplicated and advance the generation."""

    previous = CatalogReconciler(Snapshot()).reconcile([_item("tt1", "A")])
    assert previous.generation == 1

    snapshot = CatalogReconciler(previous).reconcile(
        [_item("tt2", "B"), _item("tt1", "A"), _item("tt2", "B again")]
    )

    assert [item.id for item in snapshot] == ["tt2", "tt1"]
    assert snapshot.generation == 2
    assert snapshot.published_at is not None


def test_reuse_returns_previous_instance() -> None:
    """A candidate matching a previous (name, year) pair reuses the exact item."""

    cached = _item("tt1", "Saltburn")
    reconciler = CatalogReconciler(CatalogReconciler(Snapshot()).reconcile([cached]))

    reused = reconciler.reuse(ParsedCandidate("Saltburn", "2023"))

    assert reused is cached
    assert reconciler.reused == 1
    assert reconciler.reuse(ParsedCandidate("Saltburn", "2022")) is None


def test_reuse_matches_source_title_of_annotated_items() -> None:
    """Score-annotated names still match through the stored post title."""

    cached = _item("tt1", "[RT 71%] Saltburn", source_title="Saltburn")
    reconciler = CatalogReconciler(CatalogReconciler(Snapshot()).reconcile([cached]))

    assert reconciler.reuse(ParsedCandidate("saltburn", "2023")) is cached


def test_reuse_without_year_uses_unknown_marker() -> None:
    """Fallback items without a year are reused by title alone."""

    cached = CatalogItem(id="leaks_x", name="Weekly thread", source_title="Weekly thread")
    reconciler = CatalogReconciler(CatalogReconciler(Snapshot()).reconcile([cached]))

    assert reconciler.reuse(ParsedCandidate("Weekly thread", None)) is cached


def test_colliding_keys_reuse_first_cached_item() -> None:
    """Different items normalising to the same key resolve to the first one."""

    first = _item("tt1", "Heat")
    second = _item("tt2", "HEAT")
    reconciler = CatalogReconciler(CatalogReconciler(Snapshot()).reconcile([first, second]))

    assert reuse_key("Heat", "2023") == reuse_key(" heat ", "2023")
    assert reconciler.reuse(ParsedCandidate("heat", "2023")) is first


def test_dated_fallbacks_are_not_reused() -> None:
    """Raw listings with a year get another lookup; yearless ones stay cached."""

    dated = CatalogItem(id="leaks_p1", name="Saltburn", release_info="2023", source_title="Saltburn")
    undated = CatalogItem(id="leaks_p3", name="Mystery upload", source_title="Mystery upload")
    reconciler = CatalogReconciler(CatalogReconciler(Snapshot()).reconcile([dated, undated]))

    assert reconciler.reuse(ParsedCandidate("Saltburn", "2023")) is None
    assert reconciler.reuse(ParsedCandidate("Mystery upload", None)) is undated
    assert reconciler.reused == 1
