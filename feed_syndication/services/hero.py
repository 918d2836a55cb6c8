"""
Hero block renderer.
Emits the lead image of a post as an MSN <enclosure> or a Samsung
<media:content> element.
"""
import logging
from html import escape
from typing import Optional, Sequence

from feed_syndication.models.interfaces import AttachmentMetadataProvider, ContentLengthLookup
from feed_syndication.models.schemas import FeedVariant, ImageRef, ResolvedImage
from feed_syndication.services.images import ImageUrlResolver, resolve_image_fields

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"


def _attr(value: str) -> str:
    return escape(value, quote=True)


def mime_type_for(image: ResolvedImage) -> str:
    """Explicit mime, else type/subtype, else image/jpeg."""
    if image.mime_type:
        return image.mime_type
    if image.type and image.subtype:
        return f"{image.type}/{image.subtype}"
    return DEFAULT_MIME_TYPE


class HeroBlockRenderer:
    """
    Renders the first hero image of a post.

    Videos, unknown attachments and URLs that are not static images all
    produce an empty block; the item is still syndicated without one.
    """

    def __init__(
        self,
        image_resolver: ImageUrlResolver,
        attachments: Optional[AttachmentMetadataProvider] = None,
        content_length_lookup: Optional[ContentLengthLookup] = None,
    ) -> None:
        """
        Args:
            image_resolver: Resolver carrying site base and images host override
            attachments: Attachment metadata source (credit fallback, id lookups)
            content_length_lookup: Best-effort enclosure length source (MSN)
        """
        self._images = image_resolver
        self._attachments = attachments
        self._content_length = content_length_lookup

    def select(self, hero_images: Sequence[Optional[ImageRef]]) -> Optional[ResolvedImage]:
        """Resolve the first hero entry, or None if it is unusable. Later entries are never tried."""
        if not hero_images:
            return None

        image = resolve_image_fields(hero_images[0], self._attachments)
        if image is None:
            return None

        if image.media_type and image.media_type != "image":
            logger.debug(f"Skipping non-image hero: type={image.media_type}")
            return None

        return image

    async def render(self, hero_images: Sequence[Optional[ImageRef]], variant: FeedVariant) -> str:
        """
        Args:
            hero_images: Hero candidates in CMS order; only the first is used
            variant: Target feed

        Returns:
            XML fragment, or "" when there is no usable hero image
        """
        image = self.select(hero_images)
        if image is None:
            return ""

        url = self._images.resolve(image.url)
        if not url:
            return ""

        mime_type = mime_type_for(image)

        if variant is FeedVariant.SAMSUNG:
            return self._media_content(url, mime_type, self._credit_for(image))

        length = ""
        if self._content_length is not None:
            length = await self._content_length.get_content_length(url)
        return f'<enclosure url="{_attr(url)}" type="{_attr(mime_type)}" length="{_attr(length)}" />'

    def _credit_for(self, image: ResolvedImage) -> str:
        if image.credit:
            return image.credit
        if image.attachment_id is None or self._attachments is None:
            return ""
        try:
            meta = self._attachments.get_attachment_metadata(image.attachment_id)
        except Exception as e:
            logger.warning(f"Credit lookup failed: id={image.attachment_id}, error={e}")
            return ""
        return meta.credit if meta is not None else ""

    @staticmethod
    def _media_content(url: str, mime_type: str, credit: str) -> str:
        opening = f'<media:content url="{_attr(url)}" type="{_attr(mime_type)}"'
        if not credit:
            return opening + " />"
        return f"{opening}><media:credit>{escape(credit)}</media:credit></media:content>"
