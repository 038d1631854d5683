"""Service layer for the catalog refresh and read paths."""

from .catalog_adapter import PLACEHOLDER_ID, CatalogAdapter
from .refresher import (
    CycleError,
    RefreshAlreadyRunningError,
    RefreshService,
    RefreshServiceError,
)

__all__ = [
    "CatalogAdapter",
    "CycleError",
    "PLACEHOLDER_ID",
    "RefreshAlreadyRunningError",
    "RefreshService",
    "RefreshServiceError",
]
