from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from textwrap import wrap

DEFAULT_WRAP_WIDTH = 100
DEFAULT_LABEL_WIDTH = 18
DEFAULT_INDENT = "    "

FieldMapping = Mapping[str, object] | Sequence[tuple[str, object]]


def _stringify(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (list, tuple, set)):
        return ", ".join(_stringify(item) for item in value) or "(none)"
    if isinstance(value, Mapping):
        return ", ".join(f"{key}={_stringify(item)}" for key, item in value.items()) or "(none)"
    return str(value)


class LogBlockBuilder:
    """Builds an indented, titled block of text for multi-line log records."""

    def __init__(self, title: str, *, wrap_width: int = DEFAULT_WRAP_WIDTH, indent: str = DEFAULT_INDENT) -> None:
        self.wrap_width = wrap_width
        self.indent = indent
        self.lines: list[str] = ["", title, "-" * len(title)]

    def add_fields(self, fields: FieldMapping | None) -> None:
        if not fields:
            return
        items = list(fields.items()) if isinstance(fields, Mapping) else list(fields)
        label_width = min(max((len(str(key)) for key, _ in items), default=0), DEFAULT_LABEL_WIDTH)
        value_width = max(self.wrap_width - len(self.indent) - label_width - 2, 24)

        for key, value in items:
            wrapped = wrap(_stringify(value), width=value_width) or [""]
            self.lines.append(f"{self.indent}{str(key):<{label_width}}: {wrapped[0]}")
            self.lines.extend(f"{self.indent}{'':<{label_width}}  {line}" for line in wrapped[1:])

    def add_section(self, heading: str, items: Iterable[str], *, empty_label: str = "(none)") -> None:
        if self.lines[-1] != "":
            self.lines.append("")
        self.lines.append(f"{heading}:")
        materialized = [_stringify(item) for item in items if item is not None]
        if not materialized:
            self.lines.append(f"{self.indent}{empty_label}")
            return
        self.lines.extend(f"{self.indent}- {item}" for item in materialized)

    def render(self) -> str:
        return "\n".join(self.lines).rstrip()


def render_fields_block(title: str, fields: FieldMapping) -> str:
    builder = LogBlockBuilder(title)
    builder.add_fields(fields)
    return builder.render()


def render_section_block(title: str, sections: Sequence[tuple[str, Sequence[str]]]) -> str:
    builder = LogBlockBuilder(title)
    for heading, items in sections:
        builder.add_section(heading, items)
    return builder.render()
