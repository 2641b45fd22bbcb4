"""
Health check endpoint for system monitoring.
"""

from datetime import datetime, timezone
from typing import Any, Dict

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from .... import __version__
from ....services.registry_service import RegistryService
from ..dependencies import get_registry

logger = structlog.get_logger(module=__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    timestamp: datetime
    services: Dict[str, Any]
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check(registry: RegistryService = Depends(get_registry)) -> HealthResponse:
    """
    Health check endpoint.

    Returns:
        HealthResponse: Registry status and state counters
    """
    stats = registry.stats()
    snapshot_store = registry.persistence.snapshot_store

    logger.debug("Health check completed", **stats)

    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        services={
            "registry": {
                "status": "healthy",
                **stats
            },
            "persistence": {
                "status": "healthy" if snapshot_store is not None else "disabled",
                "backend": snapshot_store.backend_name if snapshot_store is not None else None
            }
        }
    )


@router.get("/health/liveness")
async def liveness_probe() -> Dict[str, str]:
    """
    Kubernetes liveness probe endpoint.

    Returns:
        Dict[str, str]: Simple alive status
    """
    return {"status": "alive"}
