"""
Merge freshly resolved items with the previous snapshot.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from .catalog import FALLBACK_ID_PREFIX, UNKNOWN_YEAR, CatalogItem, Snapshot
from .title_parser import ParsedCandidate

logger = logging.getLogger(__name__)

ReuseKey = Tuple[str, str]


def reuse_key(title: str, year: Optional[str]) -> ReuseKey:
    return (" ".join(title.split()).casefold(), (year or UNKNOWN_YEAR).strip())


def dedupe(items: Iterable[CatalogItem]) -> List[CatalogItem]:
    """Drop items whose id was already seen, keeping the first occurrence."""

    seen: set[str] = set()
    unique: List[CatalogItem] = []
    for item in items:
        if item.id in seen:
            continue
        seen.add(item.id)
        unique.append(item)
    return unique


class CatalogReconciler:
    """Builds the next snapshot from the previous one.

    Items of the previous snapshot are indexed by (title, year) so that posts
    seen in an earlier cycle skip resolution and keep their exact instance.
    Distinct titles that normalise to the same key share the cached entry.
    Fallback items that carry a year are left out so their lookup is retried.
    """

    def __init__(self, previous: Snapshot) -> None:
        self.previous = previous
        self._index: Dict[ReuseKey, CatalogItem] = {}
        for item in previous:
            if item.id.startswith(FALLBACK_ID_PREFIX) and item.release_info != UNKNOWN_YEAR:
                continue
            for title in (item.name, item.source_title):
                if title:
                    self._index.setdefault(reuse_key(title, item.release_info), item)
        self.reused = 0

    def reuse(self, candidate: ParsedCandidate) -> Optional[CatalogItem]:
        item = self._index.get(reuse_key(candidate.title, candidate.year))
        if item is not None:
            self.reused += 1
        return item

    def reconcile(self, items: Iterable[CatalogItem]) -> Snapshot:
        candidates = list(items)
        unique = dedupe(candidates)
        dropped = len(candidates) - len(unique)
        if dropped:
            logger.debug("Dropped %d duplicate catalog items", dropped)
        return Snapshot(
            items=tuple(unique),
            generation=self.previous.generation + 1,
            published_at=datetime.now(timezone.utc),
        )
