from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:  # pragma: no cover
    from .fields import FieldSpec


# Color constants for value styling
ON_COLOR = "green"
OFF_COLOR = "dim"
UNKNOWN_COLOR = "yellow"

ON_SYMBOL = "✓"
OFF_SYMBOL = "✗"
UNKNOWN_SYMBOL = "?"


class SettingsTableRenderer:
    """Renders a stored settings blob as a Rich Table."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the renderer.

        Args:
            console: Optional Rich Console instance. If not provided, creates a new one.
        """
        self.console = console or Console()

    @staticmethod
    def format_value(value: Any) -> str:
        """Format a stored value as Rich markup.

        Args:
            value: Stored field value

        Returns:
            Rich formatted string
        """
        if value == "yes":
            return f"[{ON_COLOR}]{ON_SYMBOL} yes[/{ON_COLOR}]"
        if value == "no":
            return f"[{OFF_COLOR}]{OFF_SYMBOL} no[/{OFF_COLOR}]"
        if isinstance(value, Mapping):
            return f"[{OFF_COLOR}]{len(value)} entries[/{OFF_COLOR}]"
        if isinstance(value, (list, tuple)):
            return ", ".join(str(item) for item in value) or f"[{OFF_COLOR}](empty)[/{OFF_COLOR}]"
        if value in (None, ""):
            return f"[{OFF_COLOR}](empty)[/{OFF_COLOR}]"
        return str(value).replace("[", r"\[")

    def build_table(
        self,
        option_name: str,
        settings: Mapping[str, Any],
        form_fields: Mapping[str, FieldSpec] | None = None,
    ) -> Table:
        """Build a table with one row per stored key.

        Keys absent from ``form_fields`` are flagged, as they are kept only for
        other tabs or older schema versions.
        """
        table = Table(title=f"Option: {option_name}", show_header=True, header_style="bold")
        table.add_column("Key", style="cyan", no_wrap=True)
        table.add_column("Type")
        table.add_column("Value")

        for key, value in settings.items():
            spec = form_fields.get(key) if form_fields is not None else None
            if form_fields is not None and spec is None:
                field_type = f"[{UNKNOWN_COLOR}]{UNKNOWN_SYMBOL} not in schema[/{UNKNOWN_COLOR}]"
            else:
                field_type = spec.type if spec is not None else ""
            table.add_row(key, field_type, self.format_value(value))

        return table

    def render(
        self,
        option_name: str,
        settings: Mapping[str, Any],
        form_fields: Mapping[str, FieldSpec] | None = None,
    ) -> None:
        self.console.print(self.build_table(option_name, settings, form_fields))
