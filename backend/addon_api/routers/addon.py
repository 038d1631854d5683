"""Stremio addon resources: manifest, catalog and meta."""
from __future__ import annotations

from typing import Any
from urllib.parse import parse_qs

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_catalog_adapter, get_settings
from ..schemas import CatalogResponse, MetaResponse
from ..services.catalog_adapter import CatalogAdapter
from ..settings import AddonSettings

router = APIRouter(tags=["addon"])


def build_manifest(settings: AddonSettings) -> dict[str, Any]:
    """Describe the addon and its single movie catalog."""

    return {
        "id": settings.addon_id,
        "version": settings.addon_version,
        "name": settings.addon_name,
        "description": settings.addon_description,
        "resources": [
            "catalog",
            {"name": "meta", "types": ["movie"], "idPrefixes": list(settings.meta_id_prefixes)},
        ],
        "types": ["movie"],
        "idPrefixes": list(settings.meta_id_prefixes),
        "catalogs": [
            {
                "type": "movie",
                "id": settings.catalog_id,
                "name": settings.catalog_name,
                "extra": [{"name": "skip"}],
            }
        ],
    }


def parse_skip(extra: str | None) -> int:
    """Read ``skip`` from a Stremio extra segment such as ``skip=100``."""

    if not extra:
        return 0
    values = parse_qs(extra).get("skip")
    if not values:
        return 0
    try:
        return max(int(values[0]), 0)
    except ValueError:
        return 0


@router.get("/manifest.json")
def manifest(settings: AddonSettings = Depends(get_settings)) -> dict[str, Any]:
    """Return the Stremio manifest."""

    return build_manifest(settings)


@router.get("/catalog/{content_type}/{catalog_id}.json", response_model=CatalogResponse)
def catalog(
    content_type: str,
    catalog_id: str,
    adapter: CatalogAdapter = Depends(get_catalog_adapter),
) -> CatalogResponse:
    """Return the first catalog page."""

    items = adapter.list_items(content_type, catalog_id)
    return CatalogResponse(metas=[item.to_meta() for item in items])


@router.get("/catalog/{content_type}/{catalog_id}/{extra}.json", response_model=CatalogResponse)
def catalog_with_extra(
    content_type: str,
    catalog_id: str,
    extra: str,
    adapter: CatalogAdapter = Depends(get_catalog_adapter),
) -> CatalogResponse:
    """Return the catalog page selected by the ``skip`` extra."""

    items = adapter.list_items(content_type, catalog_id, parse_skip(extra))
    return CatalogResponse(metas=[item.to_meta() for item in items])


@router.get("/meta/{content_type}/{item_id}.json", response_model=MetaResponse)
def meta(
    content_type: str,
    item_id: str,
    adapter: CatalogAdapter = Depends(get_catalog_adapter),
) -> MetaResponse:
    """Return one catalog item, or 404 so other addons can answer instead."""

    item = adapter.get_item(item_id)
    if item is None or item.type != content_type:
        raise HTTPException(status_code=404, detail="Item not found in catalog")
    return MetaResponse(meta=item.to_meta())
