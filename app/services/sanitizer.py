"""Clean rich-text HTML from the post editor before it is stored."""

from urllib.parse import urlparse

import bleach
from bleach.css_sanitizer import CSSSanitizer

ALLOWED_TAGS = frozenset(
    {
        "a",
        "blockquote",
        "br",
        "code",
        "em",
        "figcaption",
        "figure",
        "h1",
        "h2",
        "h3",
        "h4",
        "hr",
        "i",
        "iframe",
        "img",
        "li",
        "ol",
        "p",
        "pre",
        "s",
        "span",
        "strong",
        "sub",
        "sup",
        "u",
        "ul",
    }
)

ALLOWED_PROTOCOLS = frozenset({"http", "https", "mailto"})

# Only embeds from these hosts survive; anything else drops the iframe's src.
VIDEO_EMBED_HOSTS = frozenset(
    {
        "www.youtube.com",
        "youtube.com",
        "www.youtube-nocookie.com",
        "player.vimeo.com",
    }
)

IFRAME_ATTRS = frozenset(
    {"src", "width", "height", "frameborder", "allow", "allowfullscreen", "title"}
)

_CSS_SANITIZER = CSSSanitizer(allowed_css_properties=["text-align", "color"])


def is_video_embed(url: str) -> bool:
    """True for https URLs on an allowed video host."""
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    return parsed.scheme == "https" and (parsed.hostname or "").lower() in VIDEO_EMBED_HOSTS


def _allow_attribute(tag: str, name: str, value: str) -> bool:
    if tag == "iframe":
        if name == "src":
            return is_video_embed(value)
        return name in IFRAME_ATTRS
    if tag == "a":
        return name in ("href", "title", "target", "rel")
    if tag == "img":
        return name in ("src", "alt", "title", "width", "height")
    if name == "style":
        return tag in ("p", "span", "h1", "h2", "h3", "h4")
    return name == "class"


def sanitize_html(html: str | None) -> str:
    """
    Return cleaned HTML: tags outside the allow-list are stripped, links get
    safe protocols only, and iframes are kept only as video embeds.
    """
    if not html:
        return ""
    cleaned = bleach.clean(
        html,
        tags=ALLOWED_TAGS,
        attributes=_allow_attribute,
        protocols=ALLOWED_PROTOCOLS,
        css_sanitizer=_CSS_SANITIZER,
        strip=True,
    )
    return cleaned.strip()
