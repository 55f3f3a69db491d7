"""Health check endpoints."""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.v1.dependencies import get_profile_service
from core.config import settings
from core.exceptions import StoreUnavailableError
from domain.services.profile_service import ProfileService

logger = structlog.get_logger()

router = APIRouter(tags=["health"])

API_VERSION = "1.0.0"
# Probes must answer well before a load balancer gives up on them.
PROBE_TIMEOUT_SECONDS = 2.0


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    environment: str
    store: str | None = None
    identity_provider: str | None = None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", response_model=HealthResponse, summary="Liveness check")
async def health_check() -> HealthResponse:
    """Answer without touching the document store or the identity provider."""
    return HealthResponse(
        status="healthy",
        version=API_VERSION,
        timestamp=_now(),
        environment=settings.app_env,
    )


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Readiness check",
)
async def detailed_health_check(
    service: ProfileService = Depends(get_profile_service),
) -> HealthResponse:
    """
    Check that the profile collection answers a query.

    The identity provider is only reported as configured or not; it is never
    called from here.
    """
    try:
        await service.check_store(timeout=PROBE_TIMEOUT_SECONDS)
        store_status = "healthy"
    except StoreUnavailableError as e:
        logger.warning("health_store_unavailable", error=e.message)
        store_status = "unavailable"

    return HealthResponse(
        status="healthy" if store_status == "healthy" else "degraded",
        version=API_VERSION,
        timestamp=_now(),
        environment=settings.app_env,
        store=store_status,
        identity_provider="configured" if settings.supabase_url else "not_configured",
    )
