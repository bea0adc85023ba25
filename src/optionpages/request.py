"""Request and response objects exchanged with the admin shell."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

_BRACKET_PATTERN = re.compile(r"\[([^\[\]]*)\]")


@dataclass
class AdminRequest:
    """One admin request.

    Attributes:
        script: Admin script being requested, e.g. ``options-general.php``
        method: HTTP method
        query: Query string parameters
        form: Raw form fields in submission order (POST only)
    """

    script: str
    method: str = "GET"
    query: dict[str, str] = field(default_factory=dict)
    form: list[tuple[str, str]] = field(default_factory=list)

    @property
    def is_post(self) -> bool:
        return self.method.upper() == "POST"

    def form_data(self) -> dict[str, Any]:
        return parse_form_pairs(self.form)


@dataclass
class AdminResponse:
    """Result of handling an ``AdminRequest``."""

    status: int = 200
    body: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    styles: list[str] = field(default_factory=list)

    @property
    def location(self) -> str | None:
        return self.headers.get("Location")


def _split_name(name: str) -> list[str]:
    """Split ``a[b][]`` into ``["a", "b", ""]``."""
    head, bracket, _ = name.partition("[")
    if not bracket:
        return [name]
    return [head, *_BRACKET_PATTERN.findall(name[len(head):])]


def parse_form_pairs(pairs: Iterable[tuple[str, str]]) -> dict[str, Any]:
    """Decode bracketed form field names into nested dicts and lists.

    ``opt[key]`` sets a scalar, ``opt[key][]`` appends to a list and
    ``opt[key][cell]`` sets a nested mapping entry. Later scalars replace earlier
    ones with the same name.
    """
    result: dict[str, Any] = {}
    for name, value in pairs:
        parts = _split_name(name)
        if not parts[0]:
            continue

        container: Any = result
        for position, part in enumerate(parts):
            is_last = position == len(parts) - 1
            next_is_append = not is_last and parts[position + 1] == ""

            if isinstance(container, list):
                if is_last:
                    container.append(value)
                    break
                child: Any = [] if next_is_append else {}
                container.append(child)
                container = child
                continue

            if is_last:
                container[part] = value
                break

            existing = container.get(part)
            if next_is_append:
                if not isinstance(existing, list):
                    existing = []
                    container[part] = existing
            elif not isinstance(existing, dict):
                existing = {}
                container[part] = existing
            container = existing
    return result


def add_query_arg(url: str, **params: str) -> str:
    """Return ``url`` with ``params`` added or replaced in its query string."""
    parts = urlsplit(url)
    query = dict(parse_qsl(parts.query, keep_blank_values=True))
    query.update({key: str(value) for key, value in params.items()})
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


def query_from_mapping(data: Mapping[str, Any]) -> dict[str, str]:
    """Flatten a multi-dict style mapping into single string values."""
    return {str(key): str(value) for key, value in data.items()}
