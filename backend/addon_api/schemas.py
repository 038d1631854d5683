"""Pydantic models exposed by the addon API."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


class CatalogResponse(BaseModel):
    """Stremio catalog resource payload."""

    metas: list[dict[str, Any]] = Field(default_factory=list)


class MetaResponse(BaseModel):
    """Stremio meta resource payload."""

    meta: dict[str, Any]


class RefreshStatusModel(BaseModel):
    """Progress of the catalog refresh cycle."""

    state: Literal["initializing", "running", "ready", "error"]
    message: str
    running: bool = Field(description="Whether a refresh cycle is currently in flight.")
    updated_at: datetime | None = None
    last_success_at: datetime | None = Field(
        default=None, description="When the last successful cycle published its snapshot."
    )
    last_error: str | None = None


class SnapshotInfoModel(BaseModel):
    """Summary of the snapshot being served."""

    generation: int = Field(description="Monotonic counter incremented by every published snapshot.")
    size: int = Field(description="Number of catalog items in the snapshot.")
    published_at: datetime | None = None


class HealthStatus(BaseModel):
    """Service health payload."""

    status: Literal["ok"] = Field(default="ok")
    version: str = Field(description="Version advertised in the addon manifest.")
    refresh: RefreshStatusModel
    snapshot: SnapshotInfoModel


class RefreshTriggerResponse(BaseModel):
    """Acknowledgement returned when a manual refresh is scheduled."""

    scheduled: bool = True
    detail: str = Field(default="Refresh started")
