# account_api/api/routers/health.py

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from account_api.api.dependencies import get_event_bus
from account_api.config.settings import get_settings
from account_api.events.bus import EventBus

router = APIRouter()


@router.get("/health")
async def health(
    request: Request,
    bus: Annotated[EventBus, Depends(get_event_bus)],
):
    """Health check with correlation ID and event bus state."""
    settings = get_settings()
    return {
        "status": "ok",
        "correlation_id": getattr(request.state, "correlation_id", None),
        "environment": settings.environment,
        "version": settings.version,
        "event_bus_workers": bus.worker_count,
        "event_bus_pending": bus.pending,
    }
