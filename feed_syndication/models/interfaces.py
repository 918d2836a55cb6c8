"""
Collaborator interfaces (abstractions).
Using Protocol for structural subtyping (duck typing with type hints).
These define the contracts that data access implementations must follow.
"""
from typing import Collection, List, Mapping, Optional, Protocol, runtime_checkable

from feed_syndication.models.schemas import AttachmentMetadata, Post


@runtime_checkable
class PostRepository(Protocol):
    """
    Interface for the content store.
    Production: CMS database query.
    Testing: In-memory implementation.
    """

    async def get_feed_posts(self, limit: int) -> List[Post]:
        """
        Fetch the most recent posts flagged for syndication.

        Only public post types (plus the built-in "post") whose
        publish-to-feed flag is true, newest first.

        Args:
            limit: Maximum number of posts

        Returns:
            Ordered list of posts (may be empty)
        """
        ...


@runtime_checkable
class AttachmentMetadataProvider(Protocol):
    """
    Interface for attachment (media library) lookups.
    Called synchronously from the widget renderer.
    """

    def get_attachment_metadata(self, attachment_id: int) -> Optional[AttachmentMetadata]:
        """
        Fetch URL variants, alt text, caption and credit for an attachment.

        Returns:
            AttachmentMetadata if the attachment exists, None otherwise
        """
        ...


@runtime_checkable
class ContentLengthLookup(Protocol):
    """
    Best-effort HTTP metadata lookup for enclosure lengths.
    Implementations must never raise.
    """

    async def get_content_length(self, url: str) -> str:
        """
        Returns:
            Content-Length header value, or "" when unavailable
        """
        ...


@runtime_checkable
class HtmlSanitizer(Protocol):
    """Allow-list HTML sanitizer capability."""

    def sanitize(
        self,
        html: str,
        allowlist: Optional[Mapping[str, Collection[str]]] = None,
    ) -> str:
        """Strip every tag and attribute not on the allow-list."""
        ...
