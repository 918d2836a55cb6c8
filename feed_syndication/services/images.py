"""
Image URL normalization and validation.

Resolution is split in two stages: `normalize_image_url` makes a stored
reference absolute (optionally moving it to the images host), and
`is_valid_image_url` only accepts static image formats so video files
never end up as hero enclosures.
"""
import logging
import posixpath
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from feed_syndication.models.interfaces import AttachmentMetadataProvider
from feed_syndication.models.schemas import AttachmentImage, ImageRef, ResolvedImage

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "webp", "avif"})
ALLOWED_SCHEMES = frozenset({"http", "https"})


# =============================================================================
# URL Resolution
# =============================================================================


def normalize_image_url(raw_url: str, site_base: str, images_host: Optional[str] = None) -> str:
    """
    Make an image reference absolute.

    Args:
        raw_url: Stored URL, possibly root-relative or without scheme
        site_base: Site origin, e.g. https://www.example.com
        images_host: Optional hostname replacing the URL's host

    Returns:
        Absolute URL, or "" for empty input
    """
    url = (raw_url or "").strip()
    if not url:
        return ""

    base = site_base.rstrip("/")
    if url.startswith("//"):
        url = f"{urlsplit(base).scheme or 'https'}:{url}"
    elif url.startswith("/"):
        url = base + url
    elif not urlsplit(url).scheme:
        url = f"{base}/{url}"

    if images_host:
        host = urlsplit(images_host).netloc if "://" in images_host else images_host
        parts = urlsplit(url)
        # Only scheme and path survive the host swap
        url = urlunsplit((parts.scheme, host.strip("/"), parts.path, "", ""))

    return url


def is_valid_image_url(url: str) -> bool:
    """Absolute http(s) URL whose path ends in a static image extension."""
    if not url:
        return False

    parts = urlsplit(url)
    if parts.scheme.lower() not in ALLOWED_SCHEMES or not parts.netloc:
        return False
    if not parts.path or parts.path == "/":
        return False

    extension = posixpath.splitext(parts.path)[1].lstrip(".").lower()
    return extension in ALLOWED_IMAGE_EXTENSIONS


def resolve_image_url(raw_url: str, site_base: str, images_host: Optional[str] = None) -> str:
    """Normalize then validate; "" when the result is not a usable image URL."""
    url = normalize_image_url(raw_url, site_base, images_host)
    if not is_valid_image_url(url):
        if url:
            logger.debug(f"Rejected image URL: {url}")
        return ""
    return url


class ImageUrlResolver:
    """Holds the site base and images host so callers only pass the raw URL."""

    def __init__(self, site_base: str, images_host: Optional[str] = None) -> None:
        self.site_base = site_base.rstrip("/")
        self.images_host = images_host or None

    def resolve(self, raw_url: str, rewrite_host: bool = True) -> str:
        """
        Args:
            raw_url: Stored image reference
            rewrite_host: Apply the images host override (hero images only)
        """
        images_host = self.images_host if rewrite_host else None
        return resolve_image_url(raw_url, self.site_base, images_host)


# =============================================================================
# Image Field Resolution
# =============================================================================


def resolve_image_fields(
    ref: Optional[ImageRef],
    attachments: Optional[AttachmentMetadataProvider],
) -> Optional[ResolvedImage]:
    """
    Resolve an inline image or attachment id into one set of image fields.

    Returns:
        ResolvedImage, or None when there is no image or the attachment is unknown
    """
    if ref is None:
        return None

    if isinstance(ref, AttachmentImage):
        if attachments is None:
            return None
        try:
            meta = attachments.get_attachment_metadata(ref.attachment_id)
        except Exception as e:
            logger.warning(f"Attachment lookup failed: id={ref.attachment_id}, error={e}")
            return None
        if meta is None:
            logger.debug(f"Unknown attachment: id={ref.attachment_id}")
            return None
        return ResolvedImage(
            url=meta.url,
            sizes=meta.sizes,
            alt=meta.alt,
            caption=meta.description or meta.caption,
            mime_type=meta.mime_type,
            credit=meta.credit,
            attachment_id=meta.attachment_id,
        )

    return ResolvedImage(
        url=ref.url,
        sizes=ref.sizes,
        alt=ref.alt,
        caption=ref.caption or ref.description,
        mime_type=ref.mime_type,
        type=ref.type,
        subtype=ref.subtype,
        credit=ref.credit or ref.copyright,
        attachment_id=ref.attachment_id,
    )
