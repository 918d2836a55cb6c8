"""
Unit tests for hero block rendering.
"""
import pytest

from feed_syndication.models.schemas import FeedVariant, InlineImage, ResolvedImage
from feed_syndication.services.hero import HeroBlockRenderer, mime_type_for
from feed_syndication.services.images import ImageUrlResolver

MSN = FeedVariant.MSN
SAMSUNG = FeedVariant.SAMSUNG


class TestMimeType:
    def test_precedence(self):
        assert mime_type_for(ResolvedImage(mime_type="image/png", type="image", subtype="gif")) == "image/png"
        assert mime_type_for(ResolvedImage(type="image", subtype="gif")) == "image/gif"
        assert mime_type_for(ResolvedImage()) == "image/jpeg"


class TestSelect:
    def test_only_first_entry_considered(self, hero_renderer):
        heroes = [
            InlineImage(url="https://media.example.com/a.mp4", type="video"),
            InlineImage(url="https://cdn.example.com/b.jpg", type="image"),
        ]
        assert hero_renderer.select(heroes) is None

    def test_video_attachment_skipped(self, hero_renderer):
        from feed_syndication.models.schemas import AttachmentImage

        assert hero_renderer.select([AttachmentImage(attachment_id=9)]) is None


class TestUnusableFirstEntry:
    SECOND = {"url": "https://cdn.example.com/second.jpg", "type": "image", "subtype": "jpeg"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("first", [False, None, "", {"url": "", "type": "image"}])
    async def test_no_block_from_later_entries(self, hero_renderer, post_factory, first):
        post = post_factory(1, hero_images=[first, self.SECOND])

        assert post.hero_images[0] is None
        assert await hero_renderer.render(post.hero_images, SAMSUNG) == ""
        assert await hero_renderer.render(post.hero_images, MSN) == ""

    @pytest.mark.asyncio
    async def test_usable_first_entry_still_rendered(self, hero_renderer, post_factory):
        post = post_factory(1, hero_images=[self.SECOND, False])

        block = await hero_renderer.render(post.hero_images, SAMSUNG)
        assert block == '<media:content url="https://cdn.example.com/second.jpg" type="image/jpeg" />'


class TestMsnEnclosure:
    @pytest.mark.asyncio
    async def test_enclosure(self, hero_renderer, content_length_lookup):
        block = await hero_renderer.render(
            [InlineImage(url="/uploads/a.jpg", type="image", subtype="jpeg")], MSN
        )

        assert block == (
            '<enclosure url="https://www.example.com/uploads/a.jpg" type="image/jpeg" length="12345" />'
        )
        assert content_length_lookup.urls == ["https://www.example.com/uploads/a.jpg"]

    @pytest.mark.asyncio
    async def test_default_mime_and_missing_length(self, hero_renderer, content_length_lookup):
        content_length_lookup.length = ""
        block = await hero_renderer.render([InlineImage(url="https://cdn.example.com/a.jpg")], MSN)

        assert block == '<enclosure url="https://cdn.example.com/a.jpg" type="image/jpeg" length="" />'

    @pytest.mark.asyncio
    async def test_images_host_override(self, attachment_repo, content_length_lookup):
        renderer = HeroBlockRenderer(
            ImageUrlResolver("https://www.example.com", "images.example.com"),
            attachment_repo,
            content_length_lookup,
        )
        block = await renderer.render([InlineImage(url="https://www.example.com/u/a.png?w=300")], MSN)

        assert 'url="https://images.example.com/u/a.png"' in block

    @pytest.mark.asyncio
    async def test_attachment_hero(self, hero_renderer):
        from feed_syndication.models.schemas import AttachmentImage

        block = await hero_renderer.render([AttachmentImage(attachment_id=8)], MSN)
        assert block.startswith('<enclosure url="https://cdn.example.com/uploads/dog.png" type="image/png"')

    @pytest.mark.asyncio
    async def test_no_lookup_configured(self, image_resolver):
        renderer = HeroBlockRenderer(image_resolver)
        block = await renderer.render([InlineImage(url="https://cdn.example.com/a.gif")], MSN)
        assert block.endswith('length="" />')

    @pytest.mark.asyncio
    async def test_no_block_cases(self, hero_renderer, content_length_lookup):
        assert await hero_renderer.render([], MSN) == ""
        assert await hero_renderer.render([InlineImage(url="https://cdn.example.com/a.mp4")], MSN) == ""
        assert await hero_renderer.render(
            [InlineImage(url="https://cdn.example.com/a.mp4", type="image")], MSN
        ) == ""
        assert content_length_lookup.urls == []


class TestSamsungMediaContent:
    @pytest.mark.asyncio
    async def test_credit_from_image(self, hero_renderer, content_length_lookup):
        block = await hero_renderer.render(
            [InlineImage(url="https://cdn.example.com/a.jpg", mime_type="image/jpeg", credit="Photo: A & B")],
            SAMSUNG,
        )

        assert block == (
            '<media:content url="https://cdn.example.com/a.jpg" type="image/jpeg">'
            "<media:credit>Photo: A &amp; B</media:credit></media:content>"
        )
        assert content_length_lookup.urls == []

    @pytest.mark.asyncio
    async def test_credit_falls_back_to_attachment(self, hero_renderer):
        block = await hero_renderer.render(
            [InlineImage(url="https://cdn.example.com/a.jpg", attachment_id=8)], SAMSUNG
        )
        assert "<media:credit>Photo: Alex Lens</media:credit>" in block

    @pytest.mark.asyncio
    async def test_without_credit(self, hero_renderer):
        block = await hero_renderer.render([InlineImage(url="https://cdn.example.com/a.webp")], SAMSUNG)
        assert block == '<media:content url="https://cdn.example.com/a.webp" type="image/jpeg" />'
