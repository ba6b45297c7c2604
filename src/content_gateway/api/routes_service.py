"""
Service-level routes: index, health, cache administration.
"""

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from content_gateway.api.dependencies import get_content_client, get_settings, get_tier_selector
from content_gateway.api.models import HealthResponse, TierResponse
from content_gateway.cache.tier_selector import CacheTierSelector
from content_gateway.clients.content_client import ContentApiClient
from content_gateway.config import Settings
from content_gateway.models.envelope import ApiResponse

logger = structlog.get_logger(__name__)

router = APIRouter()


def tier_snapshot(selector: CacheTierSelector) -> TierResponse:
    probe = selector.last_probe
    return TierResponse(
        state=selector.state.value,
        tier=selector.tier.value if selector.tier is not None else None,
        probe_latency_ms=probe.latency_ms if probe else None,
        probe_error=probe.error if probe else None,
    )


@router.get("/", summary="Service information")
async def root(settings: Settings = Depends(get_settings)):
    """Root endpoint with API documentation links."""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/health",
        "metrics": "/metrics" if settings.PROMETHEUS_ENABLED else None,
    }


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="""
    Reports the active cache tier and content API reachability.

    Running on the local fallback tier is reported as "degraded" but still
    answers 200; an unreachable content API answers 503.
    """,
    responses={
        200: {"description": "Gateway serving requests"},
        503: {"description": "Content API unreachable"},
    },
)
async def health_check(
    settings: Settings = Depends(get_settings),
    selector: CacheTierSelector = Depends(get_tier_selector),
    content_client: ContentApiClient = Depends(get_content_client),
) -> JSONResponse:
    await selector.active_backend()
    services = {
        "content_api": "ok" if await content_client.health_check() else "unreachable",
        # Probing costs a paid completion, see /api/claude/health
        "generative_api": "not_checked",
    }
    cache = tier_snapshot(selector)

    if services["content_api"] != "ok":
        health_status = "unhealthy"
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif selector.distributed_enabled and cache.tier != "distributed":
        health_status = "degraded"
        status_code = status.HTTP_200_OK
    else:
        health_status = "healthy"
        status_code = status.HTTP_200_OK

    logger.info("Health check", status=health_status, services=services, cache_state=cache.state)

    response = HealthResponse(
        status=health_status,
        version=settings.APP_VERSION,
        cache=cache,
        services=services,
    )
    return JSONResponse(status_code=status_code, content=response.model_dump(mode="json"))


@router.post(
    "/admin/cache/reprobe",
    response_model=ApiResponse[TierResponse],
    summary="Re-probe the distributed cache",
    description="The only way back from the local fallback tier to Redis.",
)
async def reprobe_cache(
    selector: CacheTierSelector = Depends(get_tier_selector),
) -> ApiResponse[TierResponse]:
    tier = await selector.reprobe()
    logger.info("Cache tier re-probed", tier=tier.value, state=selector.state.value)
    return ApiResponse.success(tier_snapshot(selector))
