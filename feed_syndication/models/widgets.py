"""
Article body widgets.

One pydantic model per layout tag. Raw widgets are parsed with
`parse_widget`, which returns None for unknown layouts so new CMS block
types can ship before the feed learns about them.
"""
import logging
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Type

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError

from feed_syndication.models.schemas import OptionalImageRef, Text, as_list

logger = logging.getLogger(__name__)


def _mappings_only(value: Any) -> List[Any]:
    return [entry for entry in as_list(value) if isinstance(entry, (Mapping, BaseModel))]


class WidgetModel(BaseModel):
    """Base for all layouts. Unknown extra fields are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    layout: str


# =============================================================================
# Nested repeater rows
# =============================================================================


class ListicleItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    media_type: Text = ""  # "image" | "loop" | "embed"
    image: OptionalImageRef = None
    video: Text = ""
    embed: Text = ""
    embed_link: Text = ""
    title: Text = ""
    paragraph: Text = ""
    label: Text = ""
    url: Text = ""


class Product(BaseModel):
    model_config = ConfigDict(extra="ignore")

    thumbnail: OptionalImageRef = None
    product_text: Text = ""
    price: Text = ""
    product_description: Text = ""
    button_text: Text = ""
    button_url: Text = ""


class ListEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    header: Text = ""
    body: Text = ""


class InstructionStep(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: Text = ""


# =============================================================================
# Layouts
# =============================================================================


class ParagraphWidget(WidgetModel):
    layout: Literal["paragraph"] = "paragraph"
    paragraph: Text = ""


class DividerWidget(WidgetModel):
    layout: Literal["divider"] = "divider"
    divider: Text = ""


class HeadingWidget(WidgetModel):
    layout: Literal["heading"] = "heading"
    text: Text = ""


class ImageWidget(WidgetModel):
    layout: Literal["image"] = "image"
    image: OptionalImageRef = None


class HtmlWidget(WidgetModel):
    layout: Literal["html"] = "html"
    html: Text = ""


class ListicleWidget(WidgetModel):
    layout: Literal["listicle"] = "listicle"
    item: Annotated[List[ListicleItem], BeforeValidator(_mappings_only)] = Field(default_factory=list)


class EmbedWidget(WidgetModel):
    layout: Literal["embed"] = "embed"
    embed: Text = ""
    embed_link: Text = ""


class ButtonWidget(WidgetModel):
    layout: Literal["button"] = "button"
    url: Text = ""
    label: Text = ""


class PullQuoteWidget(WidgetModel):
    layout: Literal["pull-quote"] = "pull-quote"
    text: Text = ""
    quote_author: Text = ""


class ProductCarouselWidget(WidgetModel):
    layout: Literal["product-carousel"] = "product-carousel"
    products: Annotated[List[Product], BeforeValidator(_mappings_only)] = Field(default_factory=list)


class LoopingVideoWidget(WidgetModel):
    layout: Literal["looping_video"] = "looping_video"
    video: Text = ""


class ListWidget(WidgetModel):
    layout: Literal["list_widget"] = "list_widget"
    ingredients: Annotated[List[ListEntry], BeforeValidator(_mappings_only)] = Field(default_factory=list)


class InstructionsWidget(WidgetModel):
    layout: Literal["instructions"] = "instructions"
    steps: Annotated[List[InstructionStep], BeforeValidator(_mappings_only)] = Field(default_factory=list)


class InteractiveImageWidget(WidgetModel):
    layout: Literal["interactive_image"] = "interactive_image"
    first_image: OptionalImageRef = None


WIDGET_MODELS: Dict[str, Type[WidgetModel]] = {
    model.model_fields["layout"].default: model
    for model in (
        ParagraphWidget,
        DividerWidget,
        HeadingWidget,
        ImageWidget,
        HtmlWidget,
        ListicleWidget,
        EmbedWidget,
        ButtonWidget,
        PullQuoteWidget,
        ProductCarouselWidget,
        LoopingVideoWidget,
        ListWidget,
        InstructionsWidget,
        InteractiveImageWidget,
    )
}


def layout_of(raw: Mapping[str, Any]) -> str:
    """Layout tag, accepting the ACF flexible-content key as well."""
    layout = raw.get("layout") or raw.get("acf_fc_layout") or ""
    return layout if isinstance(layout, str) else ""


def parse_widget(raw: Any) -> Optional[WidgetModel]:
    """
    Parse one raw widget.

    Returns:
        The layout model, or None for unknown layouts and unparseable data
    """
    if isinstance(raw, WidgetModel):
        return raw
    if not isinstance(raw, Mapping):
        return None

    layout = layout_of(raw)
    model = WIDGET_MODELS.get(layout)
    if model is None:
        if layout:
            logger.debug(f"Skipping unknown widget layout: {layout}")
        return None

    try:
        return model.model_validate({**raw, "layout": layout})
    except ValidationError as e:
        logger.warning(f"Skipping malformed {layout} widget: {e.error_count()} errors")
        return None
