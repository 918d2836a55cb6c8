"""
Feed API router.
Serves the MSN and Samsung RSS feeds from the same assembler.
"""
import logging

from fastapi import APIRouter, Depends, Request, Response

from feed_syndication.api.dependencies import get_feed_assembler
from feed_syndication.config import get_settings
from feed_syndication.core.exceptions import NotFoundError
from feed_syndication.models.schemas import FeedVariant
from feed_syndication.services.feed import FeedAssembler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get(
    "/{feed_name}",
    summary="Get Syndication Feed",
    description="""
    RSS 2.0 feed of the 30 most recent posts flagged for syndication.

    - `msn_feed`: hero images as `<enclosure>`, embeds passed through
    - `samsung_feed`: hero images as `<media:content>`, allow-list sanitized HTML
    """,
    response_class=Response,
    responses={
        200: {"content": {"application/xml": {}}, "description": "Feed document"},
        404: {"description": "Unknown feed name"},
        503: {"description": "Post source unavailable"},
    },
)
async def get_feed(
    feed_name: str,
    request: Request,
    assembler: FeedAssembler = Depends(get_feed_assembler),
) -> Response:
    """Render one feed variant."""
    variant = FeedVariant.from_feed_name(feed_name)
    if variant is None:
        raise NotFoundError("Feed", feed_name)

    settings = get_settings()
    document = await assembler.build_channel(variant, request_path=request.url.path)

    return Response(
        content=document,
        media_type=f"application/xml; charset={settings.SITE_CHARSET}",
    )
