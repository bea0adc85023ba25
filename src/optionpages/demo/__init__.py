"""Demo transliteration plugin built on ``SettingsPage``.

Registers one settings screen under *Settings → Transliteration* with a
``Settings`` root page and ``Converter`` and ``Tables`` tabs.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from ..config import PluginConfig
from ..tabs import TabGroup
from .pages import OPTION_NAME, Converter, Settings, Tables

if TYPE_CHECKING:
    from ..host import AdminHost

DEMO_PATH = Path(__file__).parent


def demo_plugin_config(url: str = "/plugins/translit", *, version: str = "1.0.0", min_suffix: bool = True) -> PluginConfig:
    return PluginConfig(
        basename="translit/translit.php",
        version=version,
        url=url,
        path=DEMO_PATH,
        min_suffix=min_suffix,
    )


def load_demo_plugin(host: AdminHost, plugin: PluginConfig) -> TabGroup:
    """Build the transliteration settings screen for the current request."""
    return TabGroup(host, plugin, Settings, [Converter, Tables], option_name=OPTION_NAME)


__all__ = [
    "Converter",
    "DEMO_PATH",
    "OPTION_NAME",
    "Settings",
    "Tables",
    "demo_plugin_config",
    "load_demo_plugin",
]
