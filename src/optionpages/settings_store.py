"""In-memory settings blob shared by the pages of one tab group."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from .fields import FieldSpec, field_default, pluck_defaults

if TYPE_CHECKING:
    from .options import OptionStore

LOGGER = logging.getLogger(__name__)


class SettingsStore:
    """Flat field-key -> value mapping persisted as one option.

    Stored keys unknown to the current schema are kept, and schema keys missing
    from storage are back-filled with their defaults. Every write persists the
    whole mapping.
    """

    def __init__(self, options: OptionStore, option_name: str) -> None:
        self._options = options
        self.option_name = option_name
        self._data: dict[str, Any] = {}

    def __bool__(self) -> bool:
        return bool(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def as_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def load(self, form_fields: Mapping[str, FieldSpec]) -> None:
        """Merge the stored blob with the defaults of ``form_fields``.

        Keys already held in memory win, so pages of one group can load in turn
        without clobbering each other's unsaved values.
        """
        stored = self._options.get_option(self.option_name)
        defaults = pluck_defaults(form_fields)

        if isinstance(stored, dict):
            merged = {**defaults, **stored}
        else:
            # Nothing stored yet.
            merged = {**dict.fromkeys(form_fields, ""), **defaults}

        for key, value in merged.items():
            self._data.setdefault(key, value)

        LOGGER.debug("Loaded %d settings from option '%s'", len(self._data), self.option_name)

    def get(self, key: str, form_fields: Mapping[str, FieldSpec], empty_value: Any = None) -> Any:
        """Return a setting, back-filling it from the schema when missing.

        The back-filled (or ``empty_value``-substituted) value is written into
        the in-memory mapping.
        """
        if self._data.get(key) is None:
            spec = form_fields.get(key)
            self._data[key] = field_default(spec) if spec is not None else ""

        if self._data[key] == "" and empty_value is not None:
            self._data[key] = empty_value

        return self._data[key]

    def set(self, key: str, value: Any) -> None:
        """Set one key and persist the whole mapping."""
        self._data[key] = value
        self._options.update_option(self.option_name, dict(self._data))

    def reset(self) -> None:
        """Forget the in-memory values so the next read reloads from storage."""
        self._data.clear()
