from __future__ import annotations

from fastapi import APIRouter, Depends

from webhook_relay.api.dependencies import get_relay_service
from webhook_relay.services.relay_service import RelayService

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(service: RelayService = Depends(get_relay_service)) -> dict:
    """Liveness probe.

    Returns:
        dict: ``status`` "ok" and the names of the configured destinations.
    """

    return {"status": "ok", "destinations": sorted(service.destinations)}
