"""
Feed assembler - main business logic orchestrator.
Fetches flagged posts, renders hero blocks and widget HTML per post,
and assembles the RSS 2.0 channel for one feed variant.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import timezone
from email.utils import format_datetime
from html import escape
from typing import Any, Dict, List, Sequence

from jinja2 import Environment, PackageLoader, select_autoescape
from markupsafe import Markup

from feed_syndication.core.exceptions import ServiceUnavailableError
from feed_syndication.core.telemetry import FEED_ITEMS_RENDERED, HERO_BLOCKS_SKIPPED
from feed_syndication.models.interfaces import PostRepository
from feed_syndication.models.schemas import FeedVariant, Post, RenderedItem
from feed_syndication.services.hero import HeroBlockRenderer
from feed_syndication.services.widgets import WidgetRenderer

logger = logging.getLogger(__name__)

MAX_FEED_ITEMS = 30


@dataclass(frozen=True)
class VariantProfile:
    """Channel-level differences between feed variants."""

    title_suffix: str
    description: str
    media_namespace: bool


VARIANT_PROFILES: Dict[FeedVariant, VariantProfile] = {
    FeedVariant.MSN: VariantProfile(
        title_suffix="MSN News",
        description="Custom MSN-compatible feed",
        media_namespace=False,
    ),
    FeedVariant.SAMSUNG: VariantProfile(
        title_suffix="Samsung News",
        description="Custom Samsung-compatible feed",
        media_namespace=True,
    ),
}


# =============================================================================
# Template Helpers
# =============================================================================


def cdata(value: Any) -> Markup:
    """Wrap text in a CDATA section, splitting any embedded terminator."""
    text = "" if value is None else str(value)
    return Markup("<![CDATA[" + text.replace("]]>", "]]]]><![CDATA[>") + "]]>")


def format_rss_date(value) -> str:
    """RFC 822 date in GMT, e.g. "Mon, 19 Oct 2026 08:30:00 GMT"."""
    return format_datetime(value.astimezone(timezone.utc), usegmt=True)


def _build_environment() -> Environment:
    env = Environment(
        loader=PackageLoader("feed_syndication", "templates"),
        autoescape=select_autoescape(["xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["cdata"] = cdata
    return env


# =============================================================================
# Feed Assembler
# =============================================================================


class FeedAssembler:
    """
    Builds complete feed documents.

    Responsibilities:
    - Fetch up to 30 flagged posts from the post source
    - Render hero blocks (concurrently, order preserved) and widget HTML
    - Fill the channel template for the requested variant
    """

    def __init__(
        self,
        post_repo: PostRepository,
        widget_renderer: WidgetRenderer,
        hero_renderer: HeroBlockRenderer,
        site_name: str,
        site_base: str,
        language: str = "en-US",
        item_limit: int = MAX_FEED_ITEMS,
    ) -> None:
        """
        Initialize feed assembler with dependencies.

        Args:
            post_repo: Source of flagged posts
            widget_renderer: Renders article bodies
            hero_renderer: Renders hero enclosures / media blocks
            site_name: Used in the channel title
            site_base: Site origin, used for channel and self links
            language: Channel language code
            item_limit: Maximum items per feed (capped at 30)
        """
        self._post_repo = post_repo
        self._widget_renderer = widget_renderer
        self._hero_renderer = hero_renderer
        self._site_name = site_name
        self._site_base = site_base.rstrip("/")
        self._language = language
        self._item_limit = max(0, min(item_limit, MAX_FEED_ITEMS))
        self._env = _build_environment()

    async def build_channel(self, variant: FeedVariant, request_path: str = "/") -> str:
        """
        Build the full RSS document for a variant.

        Args:
            variant: Target feed
            request_path: Path of the current request, for the atom self link

        Returns:
            XML document string

        Raises:
            ServiceUnavailableError: If the post source fails
        """
        start_time = time.time()

        posts = await self._fetch_posts()
        items = await self.render_items(posts, variant)

        profile = VARIANT_PROFILES[variant]
        document = self._env.get_template("rss.xml").render(
            title=f"{self._site_name} – {profile.title_suffix}",
            description=profile.description,
            media_namespace=profile.media_namespace,
            link=self._site_base,
            self_link=self._site_base + (request_path or "/"),
            language=self._language,
            items=items,
        )

        FEED_ITEMS_RENDERED.labels(variant=variant.value).inc(len(items))
        elapsed_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Feed built: variant={variant.value}, items={len(items)}, "
            f"elapsed_ms={elapsed_ms:.2f}",
            extra={"feed_variant": variant.value},
        )
        return document

    async def _fetch_posts(self) -> List[Post]:
        try:
            posts = await self._post_repo.get_feed_posts(self._item_limit)
        except Exception as e:
            logger.error(f"Post source failed: error={e}")
            raise ServiceUnavailableError("post_source", reason=str(e)) from e
        return list(posts)[: self._item_limit]

    async def render_items(self, posts: Sequence[Post], variant: FeedVariant) -> List[RenderedItem]:
        """Render items in post order; hero lookups run concurrently."""
        hero_results = await asyncio.gather(
            *(self._hero_renderer.render(post.hero_images, variant) for post in posts),
            return_exceptions=True,
        )

        items = []
        for post, hero in zip(posts, hero_results):
            if isinstance(hero, Exception):
                logger.warning(
                    f"Hero render failed: post={post.id}, error={hero}",
                    extra={"post_id": post.id, "feed_variant": variant.value},
                )
                hero = ""
            if not hero:
                HERO_BLOCKS_SKIPPED.labels(variant=variant.value).inc()
            items.append(self.render_item(post, variant, hero))
        return items

    def render_item(self, post: Post, variant: FeedVariant, hero_block: str = "") -> RenderedItem:
        """Build one item; the widget HTML is rendered fresh on every call."""
        return RenderedItem(
            title=post.title,
            link=post.permalink,
            guid=post.permalink,
            pub_date=format_rss_date(post.published_at),
            creator=post.author,
            description=escape(post.summary),
            hero_block=hero_block,
            content_html=self._widget_renderer.render(post.widgets, variant),
        )
