"""Tab groups: one root settings page plus the tab pages sharing its screen."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from .logging_utils import render_section_block
from .page import SettingsPage, TabRole
from .settings_store import SettingsStore

if TYPE_CHECKING:
    from .config import PluginConfig
    from .host import AdminHost

LOGGER = logging.getLogger(__name__)


class TabGroup:
    """Builds and owns the pages of one settings screen.

    The group owns the settings store; every page gets a reference to it, so a
    value read or written through one tab is visible to the others within the
    request. Membership is fixed once the group is built.
    """

    def __init__(
        self,
        host: AdminHost,
        plugin: PluginConfig,
        root_class: type[SettingsPage],
        tab_classes: Sequence[type[SettingsPage]] = (),
        *,
        option_name: str,
    ) -> None:
        self.host = host
        self.plugin = plugin
        self.store = SettingsStore(host.options, option_name)

        # Tabs first: the root needs them to resolve the active tab.
        tabs = [tab_class(host, plugin, store=self.store, role=TabRole.TAB) for tab_class in tab_classes]
        self.root = root_class(host, plugin, store=self.store, tabs=tabs, role=TabRole.ROOT)
        self._pages: tuple[SettingsPage, ...] = (self.root, *tabs)

        for page in self._pages:
            if page.option_name() != option_name:
                LOGGER.warning(
                    "%s stores its settings in '%s' but its group uses '%s'",
                    page.get_class_name(),
                    page.option_name(),
                    option_name,
                )

        if LOGGER.isEnabledFor(logging.DEBUG):
            LOGGER.debug(
                render_section_block(
                    f"Tab group '{option_name}'",
                    [
                        ("Pages", [page.get_class_name() for page in self._pages]),
                        ("Active", [self.active_tab.get_class_name()]),
                    ],
                )
            )

    @property
    def pages(self) -> tuple[SettingsPage, ...]:
        return self._pages

    @property
    def tabs(self) -> tuple[SettingsPage, ...]:
        return self._pages[1:]

    @property
    def active_tab(self) -> SettingsPage:
        return self.root.get_active_tab()

    def __iter__(self):
        return iter(self._pages)

    def __len__(self) -> int:
        return len(self._pages)
