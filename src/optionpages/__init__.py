"""
optionpages: tabbed plugin settings pages.

Modules:
    - page: ``SettingsPage`` base class and ``TabRole``
    - tabs: ``TabGroup`` owning the pages and the settings store of one screen
    - fields / renderers: field schema and per-type HTML rendering
    - settings_store: in-memory settings blob backed by one option
    - options: SQLite option store with update filters
    - host: admin shell (menu, settings API, screens, nonces, text domains)
    - gui: NiceGUI web admin
    - cli: ``optionpages`` command line
"""

from __future__ import annotations

from .config import PluginConfig
from .fields import FieldSpec, FieldType
from .host import AdminHost
from .options import OptionStore
from .page import SettingsPage, TabRole
from .settings_store import SettingsStore
from .tabs import TabGroup
from .version import __version__

__all__ = [
    "AdminHost",
    "FieldSpec",
    "FieldType",
    "OptionStore",
    "PluginConfig",
    "SettingsPage",
    "SettingsStore",
    "TabGroup",
    "TabRole",
    "__version__",
]
