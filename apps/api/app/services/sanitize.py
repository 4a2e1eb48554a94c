"""Allow-list HTML sanitizer for listing descriptions."""
from __future__ import annotations

import re

from bs4 import BeautifulSoup, Comment

ALLOWED_TAGS: dict[str, frozenset[str]] = {
    "p": frozenset(),
    "br": frozenset(),
    "strong": frozenset(),
    "b": frozenset(),
    "em": frozenset(),
    "i": frozenset(),
    "u": frozenset(),
    "ul": frozenset(),
    "ol": frozenset(),
    "li": frozenset(),
    "h3": frozenset(),
    "h4": frozenset(),
    "span": frozenset({"class"}),
    "div": frozenset({"class"}),
    "a": frozenset({"href", "title"}),
    "img": frozenset({"src", "alt", "width", "height"}),
}

# Dropped together with everything inside them.
STRIPPED_TAGS = frozenset(
    {"script", "style", "iframe", "object", "embed", "noscript", "template", "form", "frame", "frameset"}
)

URL_ATTRIBUTES = frozenset({"href", "src"})
_UNSAFE_SCHEME = re.compile(r"^(javascript|vbscript|data):", re.IGNORECASE)
_CONTROL_CHARS = re.compile(r"[\x00-\x20]+")


def sanitize_html(markup: str | None) -> str:
    """Return ``markup`` with unsafe elements, handlers and URLs removed.

    Tags outside the allow-list are unwrapped so their text survives. The
    result is serialized HTML, so a bare ``&`` in text comes back as ``&amp;``.
    """

    if not markup:
        return ""

    soup = BeautifulSoup(markup, "html.parser")

    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    for tag in soup.find_all(list(STRIPPED_TAGS)):
        if not tag.decomposed:
            tag.decompose()

    for tag in soup.find_all(True):
        allowed = ALLOWED_TAGS.get(tag.name)
        if allowed is None:
            tag.unwrap()
            continue
        for attr in list(tag.attrs):
            if attr not in allowed:
                del tag[attr]
            elif attr in URL_ATTRIBUTES and not _is_safe_url(tag[attr]):
                del tag[attr]

    return str(soup)


def _is_safe_url(value: object) -> bool:
    if not isinstance(value, str):
        return False
    # Browsers ignore embedded whitespace and control characters in schemes.
    compact = _CONTROL_CHARS.sub("", value)
    return not _UNSAFE_SCHEME.match(compact)
