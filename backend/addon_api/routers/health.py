"""Health endpoints."""
from fastapi import APIRouter, Depends

from ..dependencies import get_catalog_store, get_refresher, get_settings
from ..schemas import HealthStatus, RefreshStatusModel, SnapshotInfoModel
from ..services.refresher import RefreshService
from ..settings import AddonSettings
from ..stores.catalog_store import CatalogStore

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthStatus)
def get_health(
    settings: AddonSettings = Depends(get_settings),
    store: CatalogStore = Depends(get_catalog_store),
    refresher: RefreshService = Depends(get_refresher),
) -> HealthStatus:
    """Return refresh progress and a summary of the served snapshot."""

    status = store.status()
    snapshot = store.current()
    return HealthStatus(
        version=settings.addon_version,
        refresh=RefreshStatusModel(
            state=status.state,
            message=status.message,
            running=refresher.running,
            updated_at=status.updated_at,
            last_success_at=status.last_success_at,
            last_error=status.last_error,
        ),
        snapshot=SnapshotInfoModel(
            generation=snapshot.generation,
            size=len(snapshot),
            published_at=snapshot.published_at,
        ),
    )
