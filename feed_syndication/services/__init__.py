"""Services package - business logic layer."""
from .embeds import extract_original_url
from .feed import FeedAssembler, VARIANT_PROFILES
from .hero import HeroBlockRenderer
from .http_metadata import HttpContentLengthLookup
from .images import ImageUrlResolver, resolve_image_fields, resolve_image_url
from .sanitizer import SAMSUNG_ALLOWLIST, AllowListSanitizer
from .widgets import RenderContext, WidgetRenderer

__all__ = [
    "AllowListSanitizer",
    "FeedAssembler",
    "HeroBlockRenderer",
    "HttpContentLengthLookup",
    "ImageUrlResolver",
    "RenderContext",
    "SAMSUNG_ALLOWLIST",
    "VARIANT_PROFILES",
    "WidgetRenderer",
    "extract_original_url",
    "resolve_image_fields",
    "resolve_image_url",
]
