"""Manual refresh trigger."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_refresher
from ..schemas import RefreshTriggerResponse
from ..services.refresher import RefreshAlreadyRunningError, RefreshService

router = APIRouter(prefix="/refresh", tags=["refresh"])


@router.post("", status_code=202, response_model=RefreshTriggerResponse)
async def trigger_refresh(refresher: RefreshService = Depends(get_refresher)) -> RefreshTriggerResponse:
    """Start a refresh cycle in the background."""

    try:
        refresher.trigger()
    except RefreshAlreadyRunningError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return RefreshTriggerResponse()
