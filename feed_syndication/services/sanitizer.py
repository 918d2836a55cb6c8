"""
Allow-list HTML sanitizer.

Parses the fragment with BeautifulSoup and rebuilds it keeping only the
allowed tags and attributes. Disallowed tags are unwrapped (their text
survives); executable or embedded content is removed with its children.
Running the sanitizer on its own output changes nothing.
"""
import logging
from typing import Collection, Dict, FrozenSet, Mapping, Optional

from bs4 import BeautifulSoup, CData, Comment, Declaration, Doctype, ProcessingInstruction

logger = logging.getLogger(__name__)

_NO_ATTRS: FrozenSet[str] = frozenset()
_CLASS_ONLY: FrozenSet[str] = frozenset({"class"})

# Samsung feed allow-list: tag -> permitted attributes
SAMSUNG_ALLOWLIST: Dict[str, FrozenSet[str]] = {
    "p": _NO_ATTRS,
    "br": _NO_ATTRS,
    "strong": _NO_ATTRS,
    "em": _NO_ATTRS,
    "b": _NO_ATTRS,
    "i": _NO_ATTRS,
    "u": _NO_ATTRS,
    "h2": _NO_ATTRS,
    "h3": _NO_ATTRS,
    "h4": _NO_ATTRS,
    "ul": _NO_ATTRS,
    "ol": _NO_ATTRS,
    "li": _NO_ATTRS,
    "blockquote": _NO_ATTRS,
    "section": _CLASS_ONLY,
    "div": _CLASS_ONLY,
    "span": _CLASS_ONLY,
    "figure": _CLASS_ONLY,
    "figcaption": _CLASS_ONLY,
    "img": frozenset({"class", "alt", "src"}),
    "a": frozenset({"href", "title", "rel", "target"}),
}

# Removed together with everything inside them
DROP_WITH_CONTENT = frozenset({
    "script", "style", "iframe", "object", "embed", "noscript",
    "template", "video", "audio", "form", "svg", "math",
})

URL_ATTRIBUTES = frozenset({"href", "src"})
UNSAFE_URL_SCHEMES = ("javascript:", "vbscript:", "data:")

_SKIPPED_NODES = (Comment, CData, Declaration, Doctype, ProcessingInstruction)


class AllowListSanitizer:
    """
    HTML sanitizer restricted to an explicit tag/attribute allow-list.

    Usage:
        sanitizer = AllowListSanitizer()
        clean = sanitizer.sanitize('<p onclick="x()">Hi<script>bad()</script></p>')
        # '<p>Hi</p>'
    """

    def __init__(self, allowlist: Optional[Mapping[str, Collection[str]]] = None) -> None:
        self._allowlist = allowlist if allowlist is not None else SAMSUNG_ALLOWLIST

    def sanitize(
        self,
        html: str,
        allowlist: Optional[Mapping[str, Collection[str]]] = None,
    ) -> str:
        """Return `html` with every tag and attribute not on the allow-list stripped."""
        if not html:
            return ""

        allowed = allowlist if allowlist is not None else self._allowlist
        soup = BeautifulSoup(html, "html.parser")

        for node in soup.find_all(string=lambda text: isinstance(text, _SKIPPED_NODES)):
            node.extract()

        for tag in soup.find_all(sorted(DROP_WITH_CONTENT)):
            if not tag.decomposed:
                tag.decompose()

        for tag in soup.find_all(True):
            permitted = allowed.get(tag.name)
            if permitted is None:
                tag.unwrap()
                continue
            tag.attrs = {
                name: value
                for name, value in tag.attrs.items()
                if name in permitted and self._is_safe_value(name, value)
            }

        return str(soup)

    @staticmethod
    def _is_safe_value(name: str, value) -> bool:
        if name not in URL_ATTRIBUTES:
            return True
        text = value if isinstance(value, str) else " ".join(value)
        normalized = "".join(text.split()).lower()
        return not normalized.startswith(UNSAFE_URL_SCHEMES)
