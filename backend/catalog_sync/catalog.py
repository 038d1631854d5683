"""
Catalog value types shared by the pipeline and the addon API.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterator, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_YEAR = "Unknown"
FALLBACK_ID_PREFIX = "leaks_"

RefreshState = Literal["initializing", "running", "ready", "error"]


class CatalogItem(BaseModel):
    """A Stremio meta preview served from the catalog."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    type: str = "movie"
    name: str
    poster: Optional[str] = None
    description: Optional[str] = None
    release_info: str = Field(default=UNKNOWN_YEAR, alias="releaseInfo")
    # Parsed post title the item was built from; used for reuse lookups only.
    source_title: Optional[str] = Field(default=None, exclude=True)

    def to_meta(self) -> Dict[str, object]:
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass(frozen=True, slots=True)
class Snapshot:
    """One complete generation of the catalog. Never mutated after creation."""

    items: Tuple[CatalogItem, ...] = ()
    generation: int = 0
    published_at: Optional[datetime] = None
    _index: Dict[str, CatalogItem] = field(default_factory=dict, repr=False, compare=False)

    def __post_init__(self) -> None:
        for item in self.items:
            self._index.setdefault(item.id, item)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[CatalogItem]:
        return iter(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def page(self, offset: int, size: int) -> Tuple[CatalogItem, ...]:
        if offset < 0 or size <= 0:
            return ()
        return self.items[offset : offset + size]

    def get(self, item_id: str) -> Optional[CatalogItem]:
        return self._index.get(item_id)


@dataclass(frozen=True, slots=True)
class RefreshStatus:
    """Progress of the current (or last) refresh cycle."""

    message: str = "Initializing"
    state: RefreshState = "initializing"
    updated_at: Optional[datetime] = None
    last_success_at: Optional[datetime] = None
    last_error: Optional[str] = None
