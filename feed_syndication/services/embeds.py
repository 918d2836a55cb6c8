"""
Embed de-proxying.

Third-party embeds are stored wrapped by an embed proxy (an iframe on the
proxy's host with the real URL somewhere in its query string). Restricted
feeds cannot carry iframes, so they link to the original source instead.
"""
import html
import re
from typing import Optional
from urllib.parse import unquote, urlsplit

_URL_PATTERN = re.compile(r"https?://[^\s\"'<>()]+", re.IGNORECASE)
# Overlapping matches: finds URLs nested inside a proxy URL's query string
_NESTED_URL_PATTERN = re.compile(r"(?=(https?://[^\s\"'<>()&]+))", re.IGNORECASE)


def is_proxy_url(url: str, proxy_domain: str) -> bool:
    """True when the URL's host is the proxy domain or one of its subdomains."""
    if not proxy_domain:
        return False
    host = (urlsplit(url).hostname or "").lower()
    domain = proxy_domain.lower().lstrip(".")
    return host == domain or host.endswith("." + domain)


def _first_direct_url(text: str, proxy_domain: str) -> Optional[str]:
    for match in _URL_PATTERN.finditer(text):
        candidate = match.group(0).rstrip(".,")
        if not is_proxy_url(candidate, proxy_domain):
            return candidate
    return None


def extract_original_url(embed_html: str, embed_link: str, proxy_domain: str) -> str:
    """
    Find the source URL behind an embed.

    Order: the stored original link when it is not a proxy URL; then the
    first non-proxy URL in the markup; then the first one in the
    URL-decoded markup (proxy query strings carry the target encoded).

    Returns:
        The original URL, or "" when none is found
    """
    link = (embed_link or "").strip()
    if link and urlsplit(link).scheme in ("http", "https") and not is_proxy_url(link, proxy_domain):
        return link

    markup = html.unescape(embed_html or "")
    if not markup:
        return ""

    direct = _first_direct_url(markup, proxy_domain)
    if direct:
        return direct

    for match in _URL_PATTERN.finditer(markup):
        decoded = unquote(match.group(0))
        for nested in _NESTED_URL_PATTERN.finditer(decoded):
            candidate = nested.group(1).rstrip(".,")
            if not is_proxy_url(candidate, proxy_domain):
                return candidate

    return ""
