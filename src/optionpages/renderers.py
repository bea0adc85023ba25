"""HTML renderers for settings fields.

Each renderer takes the option name the form posts into, the field spec and the
current stored value, and returns the control markup. Controls are named
``<option_name>[<key>]``, ``<option_name>[<key>][]`` for multi-valued controls
and ``<option_name>[<key>][<cell>]`` for table cells, which is the shape
``parse_form_pairs`` decodes on save.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from .fields import FieldSpec, FieldType
from .sanitize import esc_attr, esc_html, kses_post

Renderer = Callable[[str, FieldSpec, Any], str]

DEFAULT_CHECKBOX_OPTIONS = {"yes": ""}


def checked(flag: bool) -> str:
    return " checked='checked'" if flag else ""


def selected(flag: bool) -> str:
    return " selected='selected'" if flag else ""


def _as_list(value: Any) -> list[Any]:
    """Treat a stored value as a set of members, scalars becoming one member."""
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    if isinstance(value, Mapping):
        return list(value.values())
    return [value]


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple, dict)):
        return ""
    return str(value)


def text_field(option_name: str, spec: FieldSpec, value: Any) -> str:
    return (
        f'<input name="{esc_attr(option_name)}[{esc_attr(spec.key)}]" id="{esc_attr(spec.key)}"'
        f' type="{esc_attr(spec.type)}" placeholder="{esc_attr(spec.placeholder)}"'
        f' value="{esc_attr(_as_text(value))}" class="regular-text" />'
    )


def number_field(option_name: str, spec: FieldSpec, value: Any) -> str:
    bounds = ""
    if spec.min is not None:
        bounds += f' min="{esc_attr(spec.min)}"'
    if spec.max is not None:
        bounds += f' max="{esc_attr(spec.max)}"'
    return (
        f'<input name="{esc_attr(option_name)}[{esc_attr(spec.key)}]" id="{esc_attr(spec.key)}"'
        f' type="{esc_attr(spec.type)}" placeholder="{esc_attr(spec.placeholder)}"'
        f' value="{esc_attr(_as_text(value))}" class="regular-text"{bounds} />'
    )


def text_area_field(option_name: str, spec: FieldSpec, value: Any) -> str:
    return (
        f'<textarea name="{esc_attr(option_name)}[{esc_attr(spec.key)}]" id="{esc_attr(spec.key)}"'
        f' placeholder="{esc_attr(spec.placeholder)}" rows="5" cols="50">'
        f"{kses_post(_as_text(value))}</textarea>"
    )


def _choice_list(option_name: str, spec: FieldSpec, options: Mapping[str, str], is_checked, name_suffix: str) -> str:
    markup = []
    for index, (key, label) in enumerate(options.items(), start=1):
        control_id = f"{esc_attr(spec.key)}_{index}"
        markup.append(
            f'<label for="{control_id}">'
            f'<input id="{control_id}" name="{esc_attr(option_name)}[{esc_attr(spec.key)}]{name_suffix}"'
            f' type="{esc_attr(spec.type)}" value="{esc_attr(key)}"{checked(is_checked(key))} />'
            f" {esc_html(label)}"
            "</label><br/>"
        )
    return f"<fieldset>{''.join(markup)}</fieldset>"


def check_box_field(option_name: str, spec: FieldSpec, value: Any) -> str:
    members = _as_list(value)
    options = spec.options or DEFAULT_CHECKBOX_OPTIONS
    return _choice_list(option_name, spec, options, lambda key: key in members, "[]")


def radio_field(option_name: str, spec: FieldSpec, value: Any) -> str:
    if not spec.options:
        return ""
    current = _as_text(value)
    return _choice_list(option_name, spec, spec.options, lambda key: key == current, "")


def select_field(option_name: str, spec: FieldSpec, value: Any) -> str:
    if not spec.options:
        return ""
    current = _as_text(value)
    options = "".join(
        f'<option value="{esc_attr(key)}"{selected(key == current)}>{esc_html(label)}</option>'
        for key, label in spec.options.items()
    )
    return f'<select name="{esc_attr(option_name)}[{esc_attr(spec.key)}]">{options}</select>'


def multiple_select_field(option_name: str, spec: FieldSpec, value: Any) -> str:
    if not spec.options:
        return ""
    members = value if isinstance(value, list) else []
    options = "".join(
        f'<option value="{esc_attr(key)}"{selected(key in members)}>{esc_html(label)}</option>'
        for key, label in spec.options.items()
    )
    return f'<select multiple="multiple" name="{esc_attr(option_name)}[{esc_attr(spec.key)}][]">{options}</select>'


def table_field(option_name: str, spec: FieldSpec, value: Any) -> str:
    # Cells come from the stored mapping, not the schema.
    if not isinstance(value, Mapping):
        return ""

    cells = []
    for index, (key, cell_value) in enumerate(value.items()):
        cell_id = esc_attr(f"{spec.key}-{index}")
        cells.append(
            '<div class="ctl-table-cell">'
            f'<label for="{cell_id}">{esc_html(key)}</label>'
            f'<input name="{esc_attr(option_name)}[{esc_attr(spec.key)}][{esc_attr(key)}]" id="{cell_id}"'
            f' type="text" placeholder="{esc_attr(spec.placeholder)}"'
            f' value="{esc_attr(_as_text(cell_value))}" class="regular-text" />'
            "</div>"
        )
    return "".join(cells)


FIELD_RENDERERS: dict[FieldType, Renderer] = {
    FieldType.TEXT: text_field,
    FieldType.PASSWORD: text_field,
    FieldType.NUMBER: number_field,
    FieldType.TEXTAREA: text_area_field,
    FieldType.CHECKBOX: check_box_field,
    FieldType.RADIO: radio_field,
    FieldType.SELECT: select_field,
    FieldType.MULTIPLE: multiple_select_field,
    FieldType.TABLE: table_field,
}


def get_renderer(spec: FieldSpec) -> Renderer | None:
    """Return the renderer for a field, or None when its type is unsupported."""
    field_type = spec.field_type
    if field_type is None:
        return None
    return FIELD_RENDERERS.get(field_type)


def render_field(option_name: str, spec: FieldSpec, value: Any) -> str:
    """Render a control with its helper and supplemental texts.

    Unsupported field types render as an empty string.
    """
    renderer = get_renderer(spec)
    if renderer is None:
        return ""

    parts = []
    if spec.helper:
        parts.append(f'<span class="helper"><span class="helper-content">{kses_post(spec.helper)}</span></span>')
    parts.append(renderer(option_name, spec, value))
    if spec.supplemental:
        parts.append(f'<p class="description">{kses_post(spec.supplemental)}</p>')
    return "".join(parts)
