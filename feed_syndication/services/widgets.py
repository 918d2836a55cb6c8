"""
Widget renderer.
Turns an article's widget list into the HTML carried in <content:encoded>.

Each layout has one handler in a dispatch table; layouts without a handler
render nothing. Variant rules:
- MSN passes embeds and looping videos through untouched.
- Samsung drops videos, replaces embeds with plain links to the source,
  and runs the final fragment through the allow-list sanitizer.
"""
import logging
from dataclasses import dataclass
from html import escape
from typing import Any, Callable, Dict, Iterable, List, Optional

from feed_syndication.models.interfaces import AttachmentMetadataProvider, HtmlSanitizer
from feed_syndication.models.schemas import FeedVariant, ImageRef
from feed_syndication.models.widgets import (
    ButtonWidget,
    DividerWidget,
    EmbedWidget,
    HeadingWidget,
    HtmlWidget,
    ImageWidget,
    InstructionsWidget,
    InteractiveImageWidget,
    ListicleItem,
    ListicleWidget,
    ListWidget,
    LoopingVideoWidget,
    ParagraphWidget,
    ProductCarouselWidget,
    PullQuoteWidget,
    WidgetModel,
    parse_widget,
)
from feed_syndication.services.embeds import extract_original_url
from feed_syndication.services.images import ImageUrlResolver, resolve_image_fields
from feed_syndication.services.sanitizer import AllowListSanitizer

logger = logging.getLogger(__name__)

VIDEO_ATTRIBUTES = 'preload="auto" muted autoplay loop playsinline webkit-playsinline x5-playsinline'
LINK_SCHEMES = ("http://", "https://", "mailto:", "/", "#")


def _attr(value: str) -> str:
    return escape(value, quote=True)


def _safe_href(url: str) -> str:
    """Trimmed URL if it uses a linkable scheme, else ""."""
    url = (url or "").strip()
    if url.lower().startswith(LINK_SCHEMES):
        return url
    return ""


@dataclass
class RenderContext:
    """State for one render call. Never shared between calls."""

    variant: FeedVariant
    boxout_count: int = 0

    @property
    def is_samsung(self) -> bool:
        return self.variant is FeedVariant.SAMSUNG

    def next_boxout_id(self) -> str:
        self.boxout_count += 1
        return f"boxout_{self.boxout_count}"


class WidgetRenderer:
    """
    Maps widget lists to feed HTML.

    Usage:
        renderer = WidgetRenderer(resolver, attachments)
        html = renderer.render(post.widgets, FeedVariant.MSN)
    """

    def __init__(
        self,
        image_resolver: ImageUrlResolver,
        attachments: Optional[AttachmentMetadataProvider] = None,
        sanitizer: Optional[HtmlSanitizer] = None,
        embed_proxy_domain: str = "",
    ) -> None:
        self._images = image_resolver
        self._attachments = attachments
        self._sanitizer = sanitizer or AllowListSanitizer()
        self._embed_proxy_domain = embed_proxy_domain

        self._handlers: Dict[str, Callable[[Any, RenderContext], str]] = {
            "paragraph": self._render_paragraph,
            "divider": self._render_divider,
            "heading": self._render_heading,
            "image": self._render_image,
            "html": self._render_html,
            "listicle": self._render_listicle,
            "embed": self._render_embed,
            "button": self._render_button,
            "pull-quote": self._render_pull_quote,
            "product-carousel": self._render_product_carousel,
            "looping_video": self._render_looping_video,
            "list_widget": self._render_list_widget,
            "instructions": self._render_instructions,
            "interactive_image": self._render_interactive_image,
        }

    def render(self, widgets: Iterable[Any], variant: FeedVariant) -> str:
        """
        Render widgets in order.

        Args:
            widgets: Raw widget mappings (or parsed WidgetModel instances)
            variant: Target feed

        Returns:
            HTML fragment; "" for an empty or fully unknown widget list
        """
        context = RenderContext(variant=variant)
        parts: List[str] = []

        for raw in widgets or ():
            widget = parse_widget(raw)
            if widget is None:
                continue
            parts.append(self._dispatch(widget, context))

        content = "".join(parts)
        if context.is_samsung:
            content = self._sanitizer.sanitize(content)
        return content

    def _dispatch(self, widget: WidgetModel, context: RenderContext) -> str:
        handler = self._handlers.get(widget.layout)
        if handler is None:
            return ""
        return handler(widget, context)

    # =========================================================================
    # Text layouts
    # =========================================================================

    def _render_paragraph(self, widget: ParagraphWidget, context: RenderContext) -> str:
        return widget.paragraph

    def _render_divider(self, widget: DividerWidget, context: RenderContext) -> str:
        return widget.divider

    def _render_html(self, widget: HtmlWidget, context: RenderContext) -> str:
        if context.is_samsung:
            return self._sanitizer.sanitize(widget.html)
        return widget.html

    def _render_heading(self, widget: HeadingWidget, context: RenderContext) -> str:
        if not widget.text:
            return ""
        return f"<h2>{escape(widget.text)}</h2>"

    def _render_button(self, widget: ButtonWidget, context: RenderContext) -> str:
        href = _safe_href(widget.url)
        if not href or not widget.label:
            return ""
        return f'<a class="button" href="{_attr(href)}">{escape(widget.label)}</a>'

    def _render_pull_quote(self, widget: PullQuoteWidget, context: RenderContext) -> str:
        if not widget.text:
            return ""
        body = f"<h4>{escape(widget.text)}</h4>"
        if widget.quote_author:
            body += f"<p>{escape(widget.quote_author)}</p>"
        return (
            '<section class="pp-article__boxout">'
            f'<div id="{context.next_boxout_id()}" class="pp-boxout" style="background-color:#606060;">'
            f'<div class="pp-boxout__body">{body}</div>'
            "</div></section>"
        )

    def _render_list_widget(self, widget: ListWidget, context: RenderContext) -> str:
        if not widget.ingredients:
            return ""
        items = []
        for entry in widget.ingredients:
            header = f"<strong>{escape(entry.header)}</strong> " if entry.header else ""
            items.append(f"<li>{header}{entry.body}</li>")
        return f"<ol>{''.join(items)}</ol>"

    def _render_instructions(self, widget: InstructionsWidget, context: RenderContext) -> str:
        if not widget.steps:
            return ""
        return "<ol>" + "".join(f"<li>{step.text}</li>" for step in widget.steps) + "</ol>"

    # =========================================================================
    # Media layouts
    # =========================================================================

    def _figure(
        self,
        ref: Optional[ImageRef],
        figure_class: Optional[str] = None,
        image_class: Optional[str] = None,
    ) -> str:
        """<figure> for an image ref, or "" when it does not resolve to a valid URL."""
        image = resolve_image_fields(ref, self._attachments)
        if image is None:
            return ""
        url = self._images.resolve(image.display_url, rewrite_host=False)
        if not url:
            return ""

        figure_open = f'<figure class="{figure_class}">' if figure_class else "<figure>"
        class_attr = f'class="{image_class}" ' if image_class else ""
        html = f'{figure_open}<img {class_attr}src="{_attr(url)}" alt="{_attr(image.alt)}" />'
        if image.caption:
            caption_class = ' class="pp-media__caption"' if figure_class else ""
            html += f"<figcaption{caption_class}>{escape(image.caption)}</figcaption>"
        return html + "</figure>"

    def _render_image(self, widget: ImageWidget, context: RenderContext) -> str:
        return self._figure(widget.image, "pp-media pp-media--pull-centre", "pp-media__image")

    def _render_interactive_image(self, widget: InteractiveImageWidget, context: RenderContext) -> str:
        # Only the first image of the comparison slider is syndicated
        return self._figure(widget.first_image)

    def _video(self, src: str, style: str) -> str:
        url = _safe_href(src)
        if not url.lower().startswith(("http://", "https://")):
            return ""
        return f'<video src="{_attr(url)}" {VIDEO_ATTRIBUTES} style="{style}"></video>'

    def _render_looping_video(self, widget: LoopingVideoWidget, context: RenderContext) -> str:
        if context.is_samsung:
            return ""
        return self._video(widget.video, "width:100%;height:auto;")

    def _source_link(self, embed_html: str, embed_link: str) -> str:
        url = extract_original_url(embed_html, embed_link, self._embed_proxy_domain)
        if not url:
            return ""
        return f'<p><a href="{_attr(url)}">{escape(url)}</a></p>'

    def _render_embed(self, widget: EmbedWidget, context: RenderContext) -> str:
        if context.is_samsung:
            return self._source_link(widget.embed, widget.embed_link)
        if "youtube" in widget.embed_link:
            return f'<p class="stylist-youtube">{widget.embed}</p>'
        return widget.embed

    def _render_listicle_item(self, item: ListicleItem, context: RenderContext) -> str:
        parts: List[str] = []

        if item.media_type == "image":
            parts.append(self._figure(item.image, "pp-media listicle__image", "pp-media__image"))
        elif item.media_type == "loop" and not context.is_samsung:
            parts.append(self._video(item.video, "width:100%;height:100%;"))
        elif item.media_type == "embed":
            if context.is_samsung:
                parts.append(self._source_link(item.embed, item.embed_link))
            else:
                parts.append(item.embed)

        if item.title:
            parts.append(f'<h4 class="listicle__title">{escape(item.title)}</h4>')
        if item.paragraph:
            parts.append(f'<div class="listicle__paragraph">{item.paragraph}</div>')

        href = _safe_href(item.url)
        if item.label and href:
            parts.append(f'<a class="listicle__link" href="{_attr(href)}">{escape(item.label)}</a>')

        return "".join(parts)

    def _render_listicle(self, widget: ListicleWidget, context: RenderContext) -> str:
        if not widget.item:
            return ""
        body = "".join(self._render_listicle_item(item, context) for item in widget.item)
        return f'<section class="listicle">{body}</section>'

    def _render_product_carousel(self, widget: ProductCarouselWidget, context: RenderContext) -> str:
        if not widget.products:
            return ""

        products: List[str] = []
        for product in widget.products:
            parts = ['<div class="product">']

            thumbnail = resolve_image_fields(product.thumbnail, self._attachments)
            if thumbnail is not None:
                url = self._images.resolve(thumbnail.display_url, rewrite_host=False)
                if url:
                    parts.append(
                        f'<img class="product__image" alt="{_attr(thumbnail.alt)}" src="{_attr(url)}" />'
                    )

            if product.product_text:
                parts.append(f'<h4 class="product__name">{escape(product.product_text)}</h4>')
            if product.price:
                parts.append(f'<span class="product__price">{escape(product.price)}</span>')
            if product.product_description:
                parts.append(f'<div class="product__description">{product.product_description}</div>')

            button_url = _safe_href(product.button_url)
            if product.button_text and button_url:
                parts.append(
                    f'<a class="product__button" href="{_attr(button_url)}">{escape(product.button_text)}</a>'
                )

            parts.append("</div>")
            products.append("".join(parts))

        return f'<section class="product-carousel">{"".join(products)}</section>'
