"""
Dependency injection container.
Creates and wires all application components.
Uses FastAPI's dependency injection system.
"""
from functools import lru_cache

from fastapi import Depends

from feed_syndication.config import get_settings
from feed_syndication.core.cache import TTLCache
from feed_syndication.core.circuit_breaker import CircuitBreaker
from feed_syndication.models.interfaces import (
    AttachmentMetadataProvider,
    ContentLengthLookup,
    PostRepository,
)
from feed_syndication.repositories.memory import (
    InMemoryAttachmentRepository,
    InMemoryPostRepository,
)
from feed_syndication.services.feed import FeedAssembler
from feed_syndication.services.hero import HeroBlockRenderer
from feed_syndication.services.http_metadata import HttpContentLengthLookup
from feed_syndication.services.images import ImageUrlResolver
from feed_syndication.services.sanitizer import AllowListSanitizer
from feed_syndication.services.widgets import WidgetRenderer


# =============================================================================
# Singleton Instances (Application Lifetime)
# =============================================================================


@lru_cache()
def get_post_repository() -> PostRepository:
    """Get singleton post repository."""
    return InMemoryPostRepository()


@lru_cache()
def get_attachment_repository() -> AttachmentMetadataProvider:
    """Get singleton attachment metadata repository."""
    return InMemoryAttachmentRepository()


@lru_cache()
def get_content_length_circuit_breaker() -> CircuitBreaker:
    """Get singleton circuit breaker for HEAD lookups."""
    settings = get_settings()
    return CircuitBreaker(
        name="content_length_lookup",
        failure_threshold=settings.CIRCUIT_BREAKER_FAILURE_THRESHOLD,
        recovery_timeout_sec=settings.CIRCUIT_BREAKER_RECOVERY_TIMEOUT_SEC,
    )


@lru_cache()
def get_content_length_lookup() -> ContentLengthLookup:
    """Get singleton content-length lookup (shares breaker and cache across requests)."""
    settings = get_settings()
    return HttpContentLengthLookup(
        timeout_sec=settings.CONTENT_LENGTH_TIMEOUT_SEC,
        circuit_breaker=get_content_length_circuit_breaker(),
        cache=TTLCache[str](ttl_seconds=settings.CONTENT_LENGTH_CACHE_TTL_SEC),
    )


@lru_cache()
def get_image_url_resolver() -> ImageUrlResolver:
    """Get singleton image URL resolver."""
    settings = get_settings()
    return ImageUrlResolver(
        site_base=settings.WEB_BASE_URL,
        images_host=settings.IMAGES_HOST,
    )


@lru_cache()
def get_sanitizer() -> AllowListSanitizer:
    """Get singleton Samsung allow-list sanitizer."""
    return AllowListSanitizer()


# =============================================================================
# Request-Scoped Dependencies (Per-Request Lifetime)
# =============================================================================


def get_feed_assembler(
    post_repo: PostRepository = Depends(get_post_repository),
    attachments: AttachmentMetadataProvider = Depends(get_attachment_repository),
    content_length_lookup: ContentLengthLookup = Depends(get_content_length_lookup),
    image_resolver: ImageUrlResolver = Depends(get_image_url_resolver),
    sanitizer: AllowListSanitizer = Depends(get_sanitizer),
) -> FeedAssembler:
    """
    Get feed assembler with all dependencies wired.
    Renderers are built per request so no render state outlives it.
    """
    settings = get_settings()
    return FeedAssembler(
        post_repo=post_repo,
        widget_renderer=WidgetRenderer(
            image_resolver=image_resolver,
            attachments=attachments,
            sanitizer=sanitizer,
            embed_proxy_domain=settings.EMBED_PROXY_DOMAIN,
        ),
        hero_renderer=HeroBlockRenderer(
            image_resolver=image_resolver,
            attachments=attachments,
            content_length_lookup=content_length_lookup,
        ),
        site_name=settings.SITE_NAME,
        site_base=settings.WEB_BASE_URL,
        language=settings.FEED_LANGUAGE,
        item_limit=settings.FEED_ITEM_LIMIT,
    )


# =============================================================================
# Cleanup Functions
# =============================================================================


def clear_caches() -> None:
    """Clear all cached singleton instances (for testing)."""
    get_post_repository.cache_clear()
    get_attachment_repository.cache_clear()
    get_content_length_circuit_breaker.cache_clear()
    get_content_length_lookup.cache_clear()
    get_image_url_resolver.cache_clear()
    get_sanitizer.cache_clear()
