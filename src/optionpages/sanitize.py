"""Escaping and allowlist sanitization for rendered admin markup.

``esc_*`` helpers turn arbitrary values into text that is safe inside an element
body, an attribute or an ``href``. ``kses`` keeps a restricted set of tags and
attributes and drops the rest, so help texts may carry light formatting.
"""

from __future__ import annotations

import html
from collections.abc import Iterable, Mapping
from html.parser import HTMLParser
from typing import Any
from urllib.parse import urlparse

AllowedTags = Mapping[str, Iterable[str]]

ALLOWED_PROTOCOLS = frozenset({"http", "https", "mailto", "ftp", "tel"})

# Attributes carrying URLs, checked against ALLOWED_PROTOCOLS.
URL_ATTRIBUTES = frozenset({"href", "src", "action", "cite"})

# Tags whose text content is dropped along with the tag.
DROP_CONTENT_TAGS = frozenset({"script", "style"})

VOID_TAGS = frozenset({"br", "hr", "img", "input", "wbr"})

_COMMON = ("class", "id", "style", "title", "dir", "lang")

POST_ALLOWED_TAGS: dict[str, tuple[str, ...]] = {
    "a": (*_COMMON, "href", "rel", "target", "name"),
    "abbr": _COMMON,
    "b": _COMMON,
    "blockquote": (*_COMMON, "cite"),
    "br": (),
    "code": _COMMON,
    "del": (*_COMMON, "datetime"),
    "div": (*_COMMON, "align"),
    "em": _COMMON,
    "h1": _COMMON,
    "h2": _COMMON,
    "h3": _COMMON,
    "h4": _COMMON,
    "h5": _COMMON,
    "h6": _COMMON,
    "hr": _COMMON,
    "i": _COMMON,
    "img": (*_COMMON, "src", "alt", "width", "height"),
    "ins": (*_COMMON, "datetime"),
    "kbd": _COMMON,
    "li": _COMMON,
    "ol": (*_COMMON, "start", "type"),
    "p": (*_COMMON, "align"),
    "pre": _COMMON,
    "small": _COMMON,
    "span": _COMMON,
    "strong": _COMMON,
    "sub": _COMMON,
    "sup": _COMMON,
    "table": _COMMON,
    "tbody": _COMMON,
    "td": (*_COMMON, "colspan", "rowspan"),
    "th": (*_COMMON, "colspan", "rowspan", "scope"),
    "thead": _COMMON,
    "tr": _COMMON,
    "u": _COMMON,
    "ul": _COMMON,
}


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def esc_html(value: Any) -> str:
    """Escape a value for use inside an element body."""
    return html.escape(_text(value), quote=True)


def esc_attr(value: Any) -> str:
    """Escape a value for use inside a double or single quoted attribute."""
    return html.escape(_text(value), quote=True)


def esc_url(value: Any) -> str:
    """Escape a URL, returning an empty string for disallowed protocols."""
    url = _text(value).strip()
    if not url or not _is_allowed_url(url):
        return ""
    return html.escape(url.replace(" ", "%20"), quote=True)


def _is_allowed_url(url: str) -> bool:
    scheme = urlparse(url).scheme.lower()
    return not scheme or scheme in ALLOWED_PROTOCOLS


class _AllowlistParser(HTMLParser):
    """Re-serializes markup keeping only allowlisted tags and attributes."""

    def __init__(self, allowed: AllowedTags) -> None:
        super().__init__(convert_charrefs=True)
        self._allowed = {tag.lower(): {attr.lower() for attr in attrs} for tag, attrs in allowed.items()}
        self._parts: list[str] = []
        self._drop_depth = 0

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in DROP_CONTENT_TAGS:
            self._drop_depth += 1
            return
        if self._drop_depth or tag not in self._allowed:
            return
        self._parts.append(self._open_tag(tag, attrs, closing=tag in VOID_TAGS))

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if self._drop_depth or tag not in self._allowed:
            return
        self._parts.append(self._open_tag(tag, attrs, closing=True))

    def handle_endtag(self, tag: str) -> None:
        if tag in DROP_CONTENT_TAGS:
            self._drop_depth = max(self._drop_depth - 1, 0)
            return
        if self._drop_depth or tag not in self._allowed or tag in VOID_TAGS:
            return
        self._parts.append(f"</{tag}>")

    def handle_data(self, data: str) -> None:
        if not self._drop_depth:
            self._parts.append(html.escape(data, quote=False))

    def _open_tag(self, tag: str, attrs: list[tuple[str, str | None]], *, closing: bool) -> str:
        allowed_attrs = self._allowed[tag]
        rendered = []
        for name, value in attrs:
            if name not in allowed_attrs:
                continue
            if value is None:
                rendered.append(f" {name}")
                continue
            if name in URL_ATTRIBUTES and not _is_allowed_url(value.strip()):
                continue
            rendered.append(f' {name}="{html.escape(value, quote=True)}"')
        suffix = " /" if closing else ""
        return f"<{tag}{''.join(rendered)}{suffix}>"

    def result(self) -> str:
        return "".join(self._parts)


def kses(content: Any, allowed: AllowedTags) -> str:
    """Strip every tag and attribute not present in ``allowed``.

    Text of removed tags is kept, except for ``script`` and ``style`` bodies.
    """
    parser = _AllowlistParser(allowed)
    parser.feed(_text(content))
    parser.close()
    return parser.result()


def kses_post(content: Any) -> str:
    """Sanitize content with the allowlist used for rich help texts."""
    return kses(content, POST_ALLOWED_TAGS)
