"""In-memory stores shared by the refresh path and the read path."""

from .catalog_store import CatalogStore

__all__ = ["CatalogStore"]
