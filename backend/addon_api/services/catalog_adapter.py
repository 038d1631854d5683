"""Read-side view of the catalog for the Stremio handlers."""
from __future__ import annotations

from ...catalog_sync.catalog import CatalogItem
from ..stores.catalog_store import CatalogStore

PLACEHOLDER_ID = "leaks_status"


class CatalogAdapter:
    """Serves catalog pages and single items from the current snapshot."""

    def __init__(
        self,
        store: CatalogStore,
        *,
        content_type: str = "movie",
        catalog_id: str = "movieleaks_imdb",
        page_size: int = 100,
        display_name: str = "Movie Leaks",
    ) -> None:
        self._store = store
        self.content_type = content_type
        self.catalog_id = catalog_id
        self.page_size = page_size
        self.display_name = display_name

    def serves(self, content_type: str, catalog_id: str) -> bool:
        return content_type == self.content_type and catalog_id == self.catalog_id

    def list_items(self, content_type: str, catalog_id: str, skip: int = 0) -> list[CatalogItem]:
        """Return one page of the catalog starting at ``skip``.

        An empty snapshot yields a single placeholder describing the refresh
        status, so clients always get something to render.
        """

        if not self.serves(content_type, catalog_id):
            return []
        snapshot = self._store.current()
        if snapshot.is_empty:
            return [self.placeholder()]
        return list(snapshot.page(max(skip, 0), self.page_size))

    def get_item(self, item_id: str) -> CatalogItem | None:
        """Return the item with ``item_id`` or ``None`` when it is not served."""

        return self._store.current().get(item_id)

    def placeholder(self) -> CatalogItem:
        status = self._store.status()
        return CatalogItem(
            id=PLACEHOLDER_ID,
            type=self.content_type,
            name=f"{self.display_name}: {status.message}",
            description=f"Catalog status: {status.message}. Check back in a few minutes.",
        )
