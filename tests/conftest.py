"""
Pytest configuration and fixtures.
"""
from datetime import datetime, timedelta, timezone
from typing import List

import pytest
from fastapi.testclient import TestClient

from feed_syndication.api.dependencies import (
    clear_caches,
    get_attachment_repository,
    get_content_length_lookup,
    get_post_repository,
)
from feed_syndication.main import app
from feed_syndication.models.schemas import AttachmentMetadata, Post
from feed_syndication.repositories.memory import (
    InMemoryAttachmentRepository,
    InMemoryPostRepository,
)
from feed_syndication.services.hero import HeroBlockRenderer
from feed_syndication.services.images import ImageUrlResolver
from feed_syndication.services.widgets import WidgetRenderer

SITE_BASE = "https://www.example.com"
BASE_TIME = datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc)


class StubContentLengthLookup:
    """ContentLengthLookup returning a fixed length and recording requested URLs."""

    def __init__(self, length: str = "12345") -> None:
        self.length = length
        self.urls: List[str] = []

    async def get_content_length(self, url: str) -> str:
        self.urls.append(url)
        return self.length


def make_post(post_id: int, hours_ago: int = 0, **fields) -> Post:
    """Build a flagged post published `hours_ago` hours before BASE_TIME."""
    data = {
        "id": post_id,
        "title": f"Post {post_id}",
        "author": "Jane Writer",
        "published_at": BASE_TIME - timedelta(hours=hours_ago),
        "permalink": f"{SITE_BASE}/news/post-{post_id}/{post_id}",
        "excerpt": f"Excerpt {post_id}",
        "publish_to_feed": True,
    }
    data.update(fields)
    return Post(**data)


@pytest.fixture
def attachment_repo():
    """Attachment store: a plain image, a credited image and a video."""
    return InMemoryAttachmentRepository([
        AttachmentMetadata(
            attachment_id=7,
            url="https://cdn.example.com/uploads/cat.jpg",
            sizes={"square": "https://cdn.example.com/uploads/cat-square.jpg"},
            alt="A cat",
            description="The office cat",
            mime_type="image/jpeg",
        ),
        AttachmentMetadata(
            attachment_id=8,
            url="https://cdn.example.com/uploads/dog.png",
            alt="A dog",
            mime_type="image/png",
            credit="Photo: Alex Lens",
        ),
        AttachmentMetadata(
            attachment_id=9,
            url="https://cdn.example.com/uploads/clip.mp4",
            mime_type="video/mp4",
        ),
    ])


@pytest.fixture
def image_resolver():
    """Resolver without an images host override."""
    return ImageUrlResolver(SITE_BASE)


@pytest.fixture
def widget_renderer(image_resolver, attachment_repo):
    """Widget renderer wired to the test attachment store."""
    return WidgetRenderer(image_resolver, attachment_repo, embed_proxy_domain="embedly.com")


@pytest.fixture
def content_length_lookup():
    """Stub HEAD lookup returning "12345"."""
    return StubContentLengthLookup()


@pytest.fixture
def hero_renderer(image_resolver, attachment_repo, content_length_lookup):
    """Hero renderer wired to the stub content-length lookup."""
    return HeroBlockRenderer(image_resolver, attachment_repo, content_length_lookup)


@pytest.fixture
def sample_post():
    """Flagged post with an inline hero and a few widgets."""
    return make_post(
        1,
        title="Autumn coats",
        seo_description="The coats worth buying",
        hero_images=[{"url": "/uploads/coat.jpg", "type": "image", "subtype": "jpeg"}],
        widgets=[
            {"layout": "paragraph", "paragraph": "<p>Coat season.</p>"},
            {"layout": "pull-quote", "text": "Buy well", "quote_author": "Editor"},
        ],
    )


@pytest.fixture
def mock_post_repo():
    """Fixture for the seeded in-memory post repository."""
    return InMemoryPostRepository()


@pytest.fixture
def mock_attachment_repo():
    """Fixture for the seeded in-memory attachment repository."""
    return InMemoryAttachmentRepository()


@pytest.fixture
def test_client(mock_post_repo, mock_attachment_repo, content_length_lookup):
    """
    TestClient fixture with dependency overrides.
    Uses in-memory repositories and a stub HEAD lookup for isolation.
    """
    app.dependency_overrides[get_post_repository] = lambda: mock_post_repo
    app.dependency_overrides[get_attachment_repository] = lambda: mock_attachment_repo
    app.dependency_overrides[get_content_length_lookup] = lambda: content_length_lookup

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
    clear_caches()


@pytest.fixture
def post_factory():
    """Factory building flagged posts relative to a fixed publish time."""
    return make_post
