"""
Unit tests for the feed assembler.
"""
import json
import logging
import xml.etree.ElementTree as ET
from datetime import datetime, timezone

import pytest

from feed_syndication.config.logging import JsonFormatter
from feed_syndication.core.exceptions import ServiceUnavailableError
from feed_syndication.models.schemas import FeedVariant
from feed_syndication.repositories.memory import InMemoryPostRepository
from feed_syndication.services.feed import FeedAssembler, cdata, format_rss_date

MSN = FeedVariant.MSN
SAMSUNG = FeedVariant.SAMSUNG

NAMESPACES = {
    "content": "http://purl.org/rss/1.0/modules/content/",
    "dc": "http://purl.org/dc/elements/1.1/",
    "media": "http://search.yahoo.com/mrss/",
}


def _assembler(posts, widget_renderer, hero_renderer, **kwargs):
    repo = posts if hasattr(posts, "get_feed_posts") else InMemoryPostRepository(posts)
    return FeedAssembler(
        post_repo=repo,
        widget_renderer=widget_renderer,
        hero_renderer=hero_renderer,
        site_name="Example Site",
        site_base="https://www.example.com/",
        **kwargs,
    )


class TestHelpers:
    def test_cdata_splits_terminator(self):
        assert str(cdata("a]]>b")) == "<![CDATA[a]]]]><![CDATA[>b]]>"
        assert str(cdata(None)) == "<![CDATA[]]>"

    def test_rss_date(self):
        value = datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc)
        assert format_rss_date(value) == "Mon, 19 Oct 2026 08:30:00 GMT"


class TestBuildChannel:
    @pytest.mark.asyncio
    async def test_msn_channel(self, sample_post, widget_renderer, hero_renderer):
        assembler = _assembler([sample_post], widget_renderer, hero_renderer)
        document = await assembler.build_channel(MSN, request_path="/feed/msn_feed")

        assert "xmlns:media" not in document
        assert "<![CDATA[Example Site – MSN News]]>" in document
        assert "<![CDATA[Custom MSN-compatible feed]]>" in document
        assert '<atom:link href="https://www.example.com/feed/msn_feed" rel="self"' in document
        assert "<language>en-US</language>" in document

        root = ET.fromstring(document.encode("utf-8"))
        item = root.find("channel/item")
        assert item.findtext("title") == "Autumn coats"
        assert item.findtext("guid") == sample_post.permalink
        assert item.findtext("link") == sample_post.permalink
        assert item.findtext("pubDate") == "Mon, 19 Oct 2026 08:30:00 GMT"
        assert item.findtext("dc:creator", namespaces=NAMESPACES) == "Jane Writer"
        assert item.findtext("description") == "The coats worth buying"
        assert item.find("enclosure").attrib == {
            "url": "https://www.example.com/uploads/coat.jpg",
            "type": "image/jpeg",
            "length": "12345",
        }
        content = item.findtext("content:encoded", namespaces=NAMESPACES)
        assert content.startswith("<p>Coat season.</p>")
        assert 'id="boxout_1"' in content

    @pytest.mark.asyncio
    async def test_samsung_channel(self, sample_post, widget_renderer, hero_renderer):
        assembler = _assembler([sample_post], widget_renderer, hero_renderer)
        document = await assembler.build_channel(SAMSUNG)

        assert 'xmlns:media="http://search.yahoo.com/mrss/"' in document
        assert "<![CDATA[Example Site – Samsung News]]>" in document

        root = ET.fromstring(document.encode("utf-8"))
        item = root.find("channel/item")
        media = item.find("media:content", namespaces=NAMESPACES)
        assert media.attrib["url"] == "https://www.example.com/uploads/coat.jpg"
        assert item.find("enclosure") is None
        assert "boxout_1" not in item.findtext("content:encoded", namespaces=NAMESPACES)

    @pytest.mark.asyncio
    async def test_newest_first_and_capped(self, post_factory, widget_renderer, hero_renderer):
        posts = [post_factory(i, hours_ago=i) for i in range(1, 36)]
        assembler = _assembler(posts, widget_renderer, hero_renderer, item_limit=100)

        document = await assembler.build_channel(MSN)
        root = ET.fromstring(document.encode("utf-8"))
        titles = [item.findtext("title") for item in root.findall("channel/item")]

        assert len(titles) == 30
        assert titles[:3] == ["Post 1", "Post 2", "Post 3"]

    @pytest.mark.asyncio
    async def test_empty_feed(self, widget_renderer, hero_renderer):
        document = await _assembler([], widget_renderer, hero_renderer).build_channel(MSN)
        root = ET.fromstring(document.encode("utf-8"))
        assert root.findall("channel/item") == []

    @pytest.mark.asyncio
    async def test_repeat_builds_identical(self, sample_post, widget_renderer, hero_renderer):
        assembler = _assembler([sample_post], widget_renderer, hero_renderer)
        assert await assembler.build_channel(MSN) == await assembler.build_channel(MSN)

    @pytest.mark.asyncio
    async def test_description_escaped_and_cdata_safe(self, post_factory, widget_renderer, hero_renderer):
        post = post_factory(
            1,
            seo_description="",
            excerpt="Fish & <b>chips</b>",
            widgets=[{"layout": "paragraph", "paragraph": "<p>a]]>b</p>"}],
        )
        document = await _assembler([post], widget_renderer, hero_renderer).build_channel(MSN)

        root = ET.fromstring(document.encode("utf-8"))
        item = root.find("channel/item")
        assert item.findtext("description") == "Fish &amp; &lt;b&gt;chips&lt;/b&gt;"
        assert item.findtext("content:encoded", namespaces=NAMESPACES) == "<p>a]]>b</p>"

    @pytest.mark.asyncio
    async def test_post_source_failure(self, widget_renderer, hero_renderer):
        class BrokenRepository:
            async def get_feed_posts(self, limit):
                raise ConnectionError("db down")

        assembler = _assembler(BrokenRepository(), widget_renderer, hero_renderer)
        with pytest.raises(ServiceUnavailableError) as exc_info:
            await assembler.build_channel(MSN)
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_build_log_carries_variant(self, sample_post, widget_renderer, hero_renderer, caplog):
        assembler = _assembler([sample_post], widget_renderer, hero_renderer)

        with caplog.at_level(logging.INFO, logger="feed_syndication.services.feed"):
            await assembler.build_channel(SAMSUNG)

        record = next(r for r in caplog.records if r.getMessage().startswith("Feed built"))
        payload = json.loads(JsonFormatter().format(record))
        assert payload["context"] == {"feed_variant": "samsung"}


class TestRenderItems:
    @pytest.mark.asyncio
    async def test_hero_failure_keeps_item(self, post_factory, widget_renderer, image_resolver):
        from feed_syndication.services.hero import HeroBlockRenderer

        class FailingLookup:
            async def get_content_length(self, url):
                raise RuntimeError("unexpected")

        hero_renderer = HeroBlockRenderer(image_resolver, content_length_lookup=FailingLookup())
        posts = [
            post_factory(1, hero_images=[{"url": "https://cdn.example.com/a.jpg"}]),
            post_factory(2),
        ]
        assembler = _assembler(posts, widget_renderer, hero_renderer)

        items = await assembler.render_items(posts, MSN)

        assert [item.title for item in items] == ["Post 1", "Post 2"]
        assert all(item.hero_block == "" for item in items)

    @pytest.mark.asyncio
    async def test_video_hero_has_no_block(self, post_factory, widget_renderer, hero_renderer):
        post = post_factory(1, hero_images=[{"url": "https://media.example.com/v.mp4", "type": "video"}])
        items = await _assembler([post], widget_renderer, hero_renderer).render_items([post], MSN)

        assert items[0].hero_block == ""
        assert items[0].guid == post.permalink
