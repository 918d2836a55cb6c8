"""Models package - domain entities and interfaces."""
from .interfaces import (
    AttachmentMetadataProvider,
    ContentLengthLookup,
    HtmlSanitizer,
    PostRepository,
)
from .schemas import (
    AttachmentImage,
    AttachmentMetadata,
    FeedVariant,
    ImageRef,
    InlineImage,
    Post,
    RenderedItem,
    ResolvedImage,
)
from .widgets import WIDGET_MODELS, WidgetModel, parse_widget

__all__ = [
    # Interfaces
    "AttachmentMetadataProvider",
    "ContentLengthLookup",
    "HtmlSanitizer",
    "PostRepository",
    # Schemas
    "AttachmentImage",
    "AttachmentMetadata",
    "FeedVariant",
    "ImageRef",
    "InlineImage",
    "Post",
    "RenderedItem",
    "ResolvedImage",
    # Widgets
    "WIDGET_MODELS",
    "WidgetModel",
    "parse_widget",
]
