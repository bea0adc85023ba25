"""Field schema for settings pages.

A settings page describes its form as an ordered mapping of field key to
``FieldSpec``. Subclasses usually declare fields as plain dictionaries and let
``build_form_fields`` normalize them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class FieldType(str, Enum):
    """Supported form controls."""

    TEXT = "text"
    PASSWORD = "password"
    NUMBER = "number"
    TEXTAREA = "textarea"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    SELECT = "select"
    MULTIPLE = "multiple"
    TABLE = "table"

    @classmethod
    def parse(cls, value: str | FieldType) -> FieldType | None:
        """Return the matching member, or None for unsupported type names."""
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass
class FieldSpec:
    """One form control on a settings page.

    Attributes:
        key: Field id, unique within the page; also the key in the settings blob
        type: Control type; kept as the raw string so unknown types can be skipped
        label: Row label shown next to the control
        section: Id of the settings section the field belongs to
        title: Title of that section
        placeholder: Placeholder for text-like inputs
        helper: Markup printed before the control
        supplemental: Markup printed after the control
        options: Ordered value -> label pairs for choice controls
        default: Value used when nothing is stored; never None after normalization
        min: Lower bound for number fields
        max: Upper bound for number fields
    """

    key: str
    type: str = FieldType.TEXT.value
    label: str = ""
    section: str = ""
    title: str = ""
    placeholder: str = ""
    helper: str = ""
    supplemental: str = ""
    options: dict[str, str] = field(default_factory=dict)
    default: Any = ""
    min: int | float | None = None
    max: int | float | None = None

    @property
    def field_type(self) -> FieldType | None:
        return FieldType.parse(self.type)

    @classmethod
    def from_mapping(cls, key: str, data: Mapping[str, Any]) -> FieldSpec:
        """Build a spec from a declarative dictionary, ignoring unknown entries."""
        raw_type = data.get("type", FieldType.TEXT.value)
        options = data.get("options") or {}
        return cls(
            key=key,
            type=raw_type.value if isinstance(raw_type, FieldType) else str(raw_type),
            label=str(data.get("label", "")),
            section=str(data.get("section", "")),
            title=str(data.get("title", "")),
            placeholder=str(data.get("placeholder", "")),
            helper=str(data.get("helper", "")),
            supplemental=str(data.get("supplemental", "")),
            options={str(k): str(v) for k, v in options.items()} if isinstance(options, Mapping) else {},
            default=data.get("default"),
            min=data.get("min"),
            max=data.get("max"),
        )


def set_defaults(spec: FieldSpec) -> FieldSpec:
    """Return the field with required properties filled in."""
    if spec.default is None:
        return replace(spec, default="")
    return spec


def field_default(spec: FieldSpec) -> Any:
    """Value back-filled into the store for a missing key.

    Empty defaults (``""``, ``"0"``, ``[]``, ``{}``, ``0``) collapse to ``""``.
    """
    if not spec.default or spec.default == "0":
        return ""
    return spec.default


def build_form_fields(declared: Mapping[str, FieldSpec | Mapping[str, Any]]) -> dict[str, FieldSpec]:
    """Normalize declared fields into ``FieldSpec`` objects, preserving order."""
    form_fields: dict[str, FieldSpec] = {}
    for key, value in declared.items():
        spec = value if isinstance(value, FieldSpec) else FieldSpec.from_mapping(key, value)
        form_fields[key] = set_defaults(spec)
    return form_fields


def pluck_defaults(form_fields: Mapping[str, FieldSpec]) -> dict[str, Any]:
    """Map every field key to its declared default."""
    return {key: spec.default for key, spec in form_fields.items()}
