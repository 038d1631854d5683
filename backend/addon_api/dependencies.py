"""FastAPI dependencies for the addon API."""
from fastapi import Depends, Request

from .services.catalog_adapter import CatalogAdapter
from .services.refresher import RefreshService
from .settings import AddonSettings
from .state import AppState
from .stores.catalog_store import CatalogStore


def get_app_state(request: Request) -> AppState:
    """Resolve the shared application state from the FastAPI request."""
    return request.app.state.app_state


def get_settings(app_state: AppState = Depends(get_app_state)) -> AddonSettings:
    return app_state.settings


def get_catalog_store(app_state: AppState = Depends(get_app_state)) -> CatalogStore:
    """Return the catalog store dependency."""
    return app_state.store


def get_catalog_adapter(app_state: AppState = Depends(get_app_state)) -> CatalogAdapter:
    """Return the read-side catalog adapter."""
    return app_state.adapter


def get_refresher(app_state: AppState = Depends(get_app_state)) -> RefreshService:
    """Return the refresh service driving catalog updates."""
    return app_state.refresher
