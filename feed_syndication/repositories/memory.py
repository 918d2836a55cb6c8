"""
In-memory repository implementations.
Used for prototyping and testing.
Production would replace these with queries against the CMS database.
"""
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional

from feed_syndication.models.schemas import AttachmentMetadata, Post

BUILTIN_POST_TYPE = "post"


class InMemoryPostRepository:
    """
    In-memory implementation of PostRepository.
    Applies the same filter as the CMS query: public post types plus the
    built-in "post", publish flag on, newest first.
    """

    def __init__(
        self,
        posts: Optional[Iterable[Post]] = None,
        public_post_types: Iterable[str] = ("recipe",),
    ) -> None:
        self._posts: Dict[int, Post] = {}
        self._post_types = {BUILTIN_POST_TYPE, *public_post_types}
        if posts is None:
            self._initialize_mock_data()
        else:
            for post in posts:
                self.save(post)

    def _initialize_mock_data(self) -> None:
        """Load mock posts for local runs."""
        now = datetime.now(timezone.utc).replace(microsecond=0)
        hour = timedelta(hours=1)

        mock_posts = [
            Post(
                id=101,
                title="The best autumn coats to buy now",
                author="Jane Writer",
                published_at=now - 2 * hour,
                permalink="https://www.example.com/fashion/best-autumn-coats/101",
                seo_description="Our edit of the coats worth investing in this season.",
                publish_to_feed=True,
                hero_images=[{
                    "url": "/wp-content/uploads/2026/10/coats.jpg",
                    "type": "image",
                    "subtype": "jpeg",
                    "alt": "Three women in wool coats",
                    "credit": "Photo: Studio Example",
                }],
                widgets=[
                    {"acf_fc_layout": "paragraph", "paragraph": "<p>Coat season is here.</p>"},
                    {"acf_fc_layout": "heading", "text": "Our top picks"},
                    {"acf_fc_layout": "image", "image": 9001},
                    {
                        "acf_fc_layout": "product-carousel",
                        "products": [{
                            "thumbnail": 9002,
                            "product_text": "Wool wrap coat",
                            "price": "£180",
                            "product_description": "<p>Camel, double-faced wool.</p>",
                            "button_text": "Shop now",
                            "button_url": "https://shop.example.com/wrap-coat",
                        }],
                    },
                    {"acf_fc_layout": "pull-quote", "text": "Buy once, buy well.", "quote_author": "Our fashion editor"},
                ],
            ),
            Post(
                id=102,
                title="How to make the perfect sourdough",
                author="Sam Baker",
                published_at=now - 5 * hour,
                permalink="https://www.example.com/food/perfect-sourdough/102",
                post_type="recipe",
                excerpt="A step-by-step guide to your first loaf.",
                publish_to_feed=True,
                hero_images=[9003],
                widgets=[
                    {
                        "acf_fc_layout": "list_widget",
                        "ingredients": [
                            {"header": "500g", "body": "<p>strong white flour</p>"},
                            {"header": "350ml", "body": "<p>water</p>"},
                        ],
                    },
                    {
                        "acf_fc_layout": "instructions",
                        "steps": [{"text": "<p>Mix and rest.</p>"}, {"text": "<p>Shape and bake.</p>"}],
                    },
                    {
                        "acf_fc_layout": "embed",
                        "embed_link": "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
                        "embed": '<iframe src="https://www.youtube.com/embed/dQw4w9WgXcQ"></iframe>',
                    },
                    {"acf_fc_layout": "looping_video", "video": "https://media.example.com/dough.mp4"},
                ],
            ),
            Post(
                id=103,
                title="Behind the scenes at fashion week",
                author="Jane Writer",
                published_at=now - 8 * hour,
                permalink="https://www.example.com/fashion/fashion-week-video/103",
                excerpt="Our video diary from the front row.",
                publish_to_feed=True,
                hero_images=[{
                    "url": "https://media.example.com/fashion-week.mp4",
                    "type": "video",
                    "subtype": "mp4",
                }],
                widgets=[{"acf_fc_layout": "paragraph", "paragraph": "<p>Watch the full diary.</p>"}],
            ),
            Post(
                id=104,
                title="Draft: not for syndication",
                author="Sam Baker",
                published_at=now - hour,
                permalink="https://www.example.com/news/draft/104",
                publish_to_feed=False,
            ),
            Post(
                id=105,
                title="Internal landing page",
                author="Site Team",
                published_at=now - 3 * hour,
                permalink="https://www.example.com/landing/105",
                post_type="landing_page",
                publish_to_feed=True,
            ),
        ]
        for post in mock_posts:
            self.save(post)

    def save(self, post: Post) -> None:
        """Insert or replace a post."""
        self._posts[post.id] = post

    async def get_feed_posts(self, limit: int) -> List[Post]:
        """Fetch the most recent flagged posts of public types."""
        eligible = [
            post
            for post in self._posts.values()
            if post.publish_to_feed and post.post_type in self._post_types
        ]
        eligible.sort(key=lambda post: post.published_at, reverse=True)
        return eligible[:limit]


class InMemoryAttachmentRepository:
    """
    In-memory implementation of AttachmentMetadataProvider.
    Simulates the media library with CDN size variants.
    """

    def __init__(self, attachments: Optional[Iterable[AttachmentMetadata]] = None) -> None:
        self._attachments: Dict[int, AttachmentMetadata] = {}
        if attachments is None:
            self._initialize_mock_data()
        else:
            for attachment in attachments:
                self.save(attachment)

    def _initialize_mock_data(self) -> None:
        """Load mock attachments for local runs."""
        mock_attachments = [
            AttachmentMetadata(
                attachment_id=9001,
                url="https://images.example.com/2026/10/coat-rail.jpg",
                sizes={"square": "https://images.example.com/2026/10/coat-rail-square.jpg"},
                alt="A rail of coats",
                description="Autumn's key shapes",
                mime_type="image/jpeg",
            ),
            AttachmentMetadata(
                attachment_id=9002,
                url="https://images.example.com/2026/10/wrap-coat.png",
                sizes={"square": "https://images.example.com/2026/10/wrap-coat-square.png"},
                alt="Camel wrap coat",
                mime_type="image/png",
            ),
            AttachmentMetadata(
                attachment_id=9003,
                url="https://images.example.com/2026/10/sourdough.webp",
                alt="A loaf of sourdough",
                mime_type="image/webp",
                credit="Photo: Sam Baker",
            ),
        ]
        for attachment in mock_attachments:
            self.save(attachment)

    def save(self, attachment: AttachmentMetadata) -> None:
        """Insert or replace an attachment."""
        self._attachments[attachment.attachment_id] = attachment

    def get_attachment_metadata(self, attachment_id: int) -> Optional[AttachmentMetadata]:
        """Fetch attachment metadata by id."""
        return self._attachments.get(attachment_id)
