"""
Health check router for observability.
"""
from fastapi import APIRouter

from feed_syndication.api.dependencies import get_content_length_circuit_breaker
from feed_syndication.config import get_settings
from feed_syndication.models.schemas import FeedVariant

router = APIRouter(tags=["health"])


@router.get("/health", summary="Health Check")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "healthy"}


@router.get("/health/ready", summary="Readiness Check")
async def readiness_check() -> dict:
    """
    Readiness check for Kubernetes.
    Returns the HEAD-lookup circuit breaker and the served feeds.
    """
    circuit_breaker = get_content_length_circuit_breaker()
    settings = get_settings()

    return {
        "status": "ready",
        "circuit_breaker": {
            "name": circuit_breaker.name,
            "state": circuit_breaker.state.value,
        },
        "feeds": [f"/feed/{variant.feed_name}" for variant in FeedVariant],
        "site": {
            "base_url": settings.WEB_BASE_URL,
            "images_host": settings.IMAGES_HOST,
        },
    }
