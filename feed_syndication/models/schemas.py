"""
Domain models using Pydantic.
Posts, images and rendered feed items.

CMS data arrives loosely typed (false for empty repeaters, numeric ids as
strings, legacy byte strings), so text and list fields coerce instead of
rejecting. Rendering never fails on a malformed field.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# Lenient field types
# =============================================================================


def as_text(value: Any) -> str:
    """Coerce a stored CMS value to text; anything non-scalar becomes ""."""
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return value.decode("cp1252", errors="replace")
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def as_list(value: Any) -> List[Any]:
    """ACF returns false for an empty repeater."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def as_dict(value: Any) -> Dict[str, Any]:
    if isinstance(value, Mapping):
        return dict(value)
    return {}


Text = Annotated[str, BeforeValidator(as_text)]


# =============================================================================
# Images
# =============================================================================


class InlineImage(BaseModel):
    """Image whose fields are stored directly on the widget or post."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    kind: Literal["inline"] = "inline"
    url: Text = ""
    sizes: Annotated[Dict[str, Any], BeforeValidator(as_dict)] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("sizes", "doris_sizes"),
    )
    alt: Text = ""
    caption: Text = ""
    description: Text = ""
    mime_type: Text = Field(default="", validation_alias=AliasChoices("mime_type", "mime"))
    type: Text = ""
    subtype: Text = ""
    credit: Text = ""
    copyright: Text = ""
    attachment_id: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("attachment_id", "ID", "id"),
    )

    @field_validator("attachment_id", mode="before")
    @classmethod
    def _lenient_id(cls, value: Any) -> Optional[Any]:
        if isinstance(value, bool) or value in ("", None):
            return None
        if isinstance(value, str) and not value.strip().isdigit():
            return None
        return value


class AttachmentImage(BaseModel):
    """Opaque attachment identifier, resolved through AttachmentMetadataProvider."""

    kind: Literal["attachment"] = "attachment"
    attachment_id: int


ImageRef = Annotated[Union[InlineImage, AttachmentImage], Field(discriminator="kind")]


def coerce_image_ref(value: Any) -> Any:
    """
    Turn a raw CMS image field into ImageRef input.

    Integers and digit strings are attachment ids, mappings are inline
    images, URL strings become inline images; anything else means no image.
    """
    if isinstance(value, (InlineImage, AttachmentImage)):
        return value
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return {"kind": "attachment", "attachment_id": value}
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        if stripped.isdigit():
            return {"kind": "attachment", "attachment_id": int(stripped)}
        return {"kind": "inline", "url": stripped}
    if isinstance(value, Mapping):
        data = dict(value)
        if "kind" not in data:
            has_fields = any(data.get(key) for key in ("url", "sizes", "doris_sizes"))
            identifier = data.get("attachment_id") or data.get("ID") or data.get("id")
            if not has_fields:
                if isinstance(identifier, int) and not isinstance(identifier, bool):
                    return {"kind": "attachment", "attachment_id": identifier}
                if isinstance(identifier, str) and identifier.strip().isdigit():
                    return {"kind": "attachment", "attachment_id": int(identifier)}
                return None
            data["kind"] = "inline"
        return data
    return None


def coerce_image_ref_list(value: Any) -> List[Any]:
    """Coerce each entry in place; unusable entries stay as None so positions hold."""
    return [coerce_image_ref(entry) for entry in as_list(value)]


OptionalImageRef = Annotated[Optional[ImageRef], BeforeValidator(coerce_image_ref)]


class AttachmentMetadata(BaseModel):
    """Metadata returned by the attachment store for one attachment id."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    attachment_id: int
    url: Text = ""
    sizes: Annotated[Dict[str, Any], BeforeValidator(as_dict)] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("sizes", "doris_sizes"),
    )
    alt: Text = ""
    caption: Text = ""
    description: Text = ""
    mime_type: Text = ""
    credit: Text = ""


class ResolvedImage(BaseModel):
    """Image fields after inline/attachment resolution."""

    url: str = ""
    sizes: Dict[str, Any] = Field(default_factory=dict)
    alt: str = ""
    caption: str = ""
    mime_type: str = ""
    type: str = ""
    subtype: str = ""
    credit: str = ""
    attachment_id: Optional[int] = None

    @property
    def display_url(self) -> str:
        """Square crop when the CDN produced one, else the original upload."""
        square = self.sizes.get("square")
        if isinstance(square, str) and square.strip():
            return square
        return self.url

    @property
    def media_type(self) -> str:
        """Declared top-level type ("image", "video", ...) or ""."""
        if self.type:
            return self.type.lower()
        if "/" in self.mime_type:
            return self.mime_type.split("/", 1)[0].lower()
        return ""


# =============================================================================
# Posts & Feed Items
# =============================================================================


class FeedVariant(str, Enum):
    """Output flavor of the syndication feed."""

    MSN = "msn"
    SAMSUNG = "samsung"

    @property
    def feed_name(self) -> str:
        """Public feed slug, e.g. "msn_feed"."""
        return f"{self.value}_feed"

    @classmethod
    def from_feed_name(cls, feed_name: str) -> Optional["FeedVariant"]:
        for variant in cls:
            if variant.feed_name == feed_name:
                return variant
        return None


class Post(BaseModel):
    """
    Published article as read from the content store.
    Widgets stay raw here; they are parsed per layout at render time so an
    unknown layout never fails post validation.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int = Field(..., description="Post identifier")
    title: Text = ""
    author: Text = Field(
        default="",
        validation_alias=AliasChoices("author", "author_display_name"),
    )
    published_at: datetime = Field(..., description="Publish timestamp")
    permalink: str = Field(..., description="Canonical article URL")
    post_type: str = "post"
    seo_description: Text = ""
    excerpt: Text = ""
    publish_to_feed: bool = Field(
        default=False,
        validation_alias=AliasChoices("publish_to_feed", "publish_to_msn"),
    )
    widgets: Annotated[List[Any], BeforeValidator(as_list)] = Field(default_factory=list)
    hero_images: Annotated[List[Optional[ImageRef]], BeforeValidator(coerce_image_ref_list)] = Field(
        default_factory=list,
    )

    @field_validator("published_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def summary(self) -> str:
        """SEO description, falling back to the platform excerpt."""
        return self.seo_description or self.excerpt


class RenderedItem(BaseModel):
    """One <item> of a feed, built fresh per request."""

    title: str
    link: str
    guid: str
    pub_date: str
    creator: str
    description: str
    hero_block: str = ""
    content_html: str = ""
