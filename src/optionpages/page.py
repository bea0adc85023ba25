"""Abstract settings page.

A ``SettingsPage`` subclass declares its identity (option name, menu slug and so
on), its field schema and its rendering callbacks; the base class wires these
into the admin shell: menu entry, settings sections and fields, tab navigation,
the pre-save filter, stylesheet enqueueing and text-domain loading.

Several pages form one settings screen through a ``TabGroup``: the root page
owns the tab navigation and the tabs share its menu entry and settings store.
Only the page selected by the ``tab`` query parameter registers hooks, so a
group never registers the same menu entry or filter twice.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .fields import FieldSpec, FieldType, build_form_fields
from .logging_utils import render_fields_block
from .renderers import get_renderer, render_field
from .request import add_query_arg
from .sanitize import esc_attr, esc_html, esc_url
from .settings_store import SettingsStore

if TYPE_CHECKING:
    from .config import PluginConfig
    from .host import AdminHost, Screen, SettingsSection

LOGGER = logging.getLogger(__name__)

CHECKBOX_ON_VALUES = ("1", "yes")


class TabRole(Enum):
    """Position of a page inside its tab group."""

    ROOT = "root"
    TAB = "tab"


class SettingsPage(ABC):
    """Base class for one tab of a plugin settings screen."""

    # Stylesheet handle shared by every settings screen.
    HANDLE = "ctl-settings-base"

    def __init__(
        self,
        host: AdminHost,
        plugin: PluginConfig,
        *,
        store: SettingsStore | None = None,
        tabs: Sequence[SettingsPage] = (),
        role: TabRole = TabRole.ROOT,
    ) -> None:
        """Build the page and initialize it for the current request.

        Args:
            host: Admin shell the page registers with
            plugin: Identity of the owning plugin
            store: Settings store shared with the other pages of the group
            tabs: Sibling tab pages; only meaningful for the root page
            role: Whether the page is the group root or one of its tabs
        """
        self.host = host
        self.plugin = plugin
        self.role = role
        self.tabs: list[SettingsPage] = list(tabs) if role is TabRole.ROOT else []
        self.store = store if store is not None else SettingsStore(host.options, self.option_name())
        self._form_fields: dict[str, FieldSpec] = {}

        if not self.is_tab():
            self.host.hooks.add_action("current_screen", self.setup_tabs_section, 9)

        self.init()

    # -- identity -------------------------------------------------------------

    @abstractmethod
    def screen_id(self) -> str:
        """Admin screen id, e.g. ``settings_page_<slug>``."""

    @abstractmethod
    def option_group(self) -> str: ...

    @abstractmethod
    def option_page(self) -> str:
        """Menu slug of the settings screen."""

    @abstractmethod
    def option_name(self) -> str:
        """Name of the option holding the settings blob."""

    @abstractmethod
    def text_domain(self) -> str: ...

    def plugin_basename(self) -> str:
        return self.plugin.basename

    def plugin_url(self) -> str:
        return self.plugin.url

    def plugin_version(self) -> str:
        return self.plugin.version

    # -- content --------------------------------------------------------------

    @abstractmethod
    def settings_link_label(self) -> str: ...

    @abstractmethod
    def settings_link_text(self) -> str: ...

    @abstractmethod
    def init_form_fields(self) -> Mapping[str, FieldSpec | Mapping[str, Any]]:
        """Return the field schema, keyed by field id."""

    @abstractmethod
    def page_title(self) -> str: ...

    @abstractmethod
    def menu_title(self) -> str: ...

    @abstractmethod
    def settings_page(self) -> str:
        """Render the page body."""

    @abstractmethod
    def section_title(self) -> str: ...

    @abstractmethod
    def section_callback(self, section: SettingsSection) -> str:
        """Render the intro of a settings section."""

    @abstractmethod
    def admin_enqueue_scripts(self) -> None:
        """Enqueue the page's own assets."""

    # -- lifecycle ------------------------------------------------------------

    def init(self) -> None:
        self._form_fields = build_form_fields(self.init_form_fields())
        self.init_settings()

        if self.is_tab_active(self):
            LOGGER.debug("%s is the active tab, registering hooks", self.get_class_name())
            self.init_hooks()

    def init_hooks(self) -> None:
        hooks = self.host.hooks
        hooks.add_action("plugins_loaded", self.load_plugin_textdomain)
        hooks.add_filter(f"plugin_action_links_{self.plugin_basename()}", self.add_settings_link, 10)
        hooks.add_action("admin_menu", self.add_settings_page)
        hooks.add_action("current_screen", self.setup_sections)
        hooks.add_action("current_screen", self.setup_fields)
        hooks.add_filter(f"pre_update_option_{self.option_name()}", self.pre_update_option_filter, 10, 2)
        hooks.add_action("admin_enqueue_scripts", self.base_admin_enqueue_scripts)

        if LOGGER.isEnabledFor(logging.DEBUG):
            LOGGER.debug(
                render_fields_block(
                    f"Settings page {self.get_class_name()}",
                    {
                        "Option page": self.option_page(),
                        "Option name": self.option_name(),
                        "Parent": self.parent_slug() or "(top level)",
                        "Fields": list(self._form_fields),
                        "Tabs": [tab.get_class_name() for tab in self.tabs],
                    },
                )
            )

    def init_settings(self) -> None:
        """Load the stored blob merged with this page's defaults."""
        self.store.load(self.form_fields())

    def form_fields(self) -> dict[str, FieldSpec]:
        if not self._form_fields:
            self._form_fields = build_form_fields(self.init_form_fields())
        return self._form_fields

    # -- tabs -----------------------------------------------------------------

    def parent_slug(self) -> str:
        # Settings screens live under the Settings menu by default.
        return "options-general.php"

    def is_main_menu_page(self) -> bool:
        return not self.parent_slug()

    def tab_name(self) -> str:
        return self.get_class_name()

    def get_class_name(self) -> str:
        return type(self).__name__

    def is_tab(self) -> bool:
        return self.role is TabRole.TAB

    def get_tabs(self) -> list[SettingsPage]:
        return self.tabs

    def is_tab_active(self, tab: SettingsPage) -> bool:
        current_tab_name = self.host.query_param("tab")

        if current_tab_name is None and not tab.is_tab():
            return True

        return tab.get_class_name().lower() == current_tab_name

    def get_active_tab(self) -> SettingsPage:
        for tab in self.tabs:
            if self.is_tab_active(tab):
                return tab
        return self

    def setup_tabs_section(self, screen: Screen | None = None) -> None:
        if not self.is_options_screen():
            return

        tab = self.get_active_tab()
        self.host.add_settings_section("tabs_section", "", self.tabs_callback, tab.option_page())

    def tabs_callback(self, section: SettingsSection | None = None) -> str:
        links = [self._tab_link(self), *(self._tab_link(tab) for tab in self.tabs)]
        return f'<div class="ctl-settings-tabs">{"".join(links)}</div>'

    def _tab_link(self, tab: SettingsPage) -> str:
        url = add_query_arg(self.host.menu_page_url(self.option_page()), tab=tab.get_class_name().lower())
        active = " active" if self.is_tab_active(tab) else ""
        return f'<a class="ctl-settings-tab{esc_attr(active)}" href="{esc_url(url)}">{esc_html(tab.page_title())}</a>'

    # -- admin registration ---------------------------------------------------

    def add_settings_link(self, actions: dict[str, str]) -> dict[str, str]:
        """Put a link to this screen first among the plugin's action links."""
        url = self.host.admin_url(f"options-general.php?page={self.option_page()}")
        new_actions = {
            "settings": (
                f'<a href="{esc_url(url)}" aria-label="{esc_attr(self.settings_link_label())}">'
                f"{esc_html(self.settings_link_text())}</a>"
            ),
        }
        return {**new_actions, **actions}

    def add_settings_page(self) -> None:
        if self.is_main_menu_page():
            self.host.add_menu_page(
                self.page_title(),
                self.menu_title(),
                "manage_options",
                self.option_page(),
                self.settings_base_page,
            )
            return

        self.host.add_submenu_page(
            self.parent_slug(),
            self.page_title(),
            self.menu_title(),
            "manage_options",
            self.option_page(),
            self.settings_base_page,
        )

    def settings_base_page(self) -> str:
        return self.get_active_tab().settings_page()

    def base_admin_enqueue_scripts(self, hook_suffix: str | None = None) -> None:
        self.get_active_tab().admin_enqueue_scripts()

        self.host.enqueue_style(
            self.HANDLE,
            f"{self.plugin_url()}/assets/css/settings-base{self.plugin.asset_suffix}.css",
            [],
            self.plugin_version(),
        )

    def setup_sections(self, screen: Screen | None = None) -> None:
        if not self.is_options_screen():
            return

        tab = self.get_active_tab()
        for form_field in self._form_fields.values():
            self.host.add_settings_section(form_field.section, form_field.title, tab.section_callback, tab.option_page())

    def setup_fields(self, screen: Screen | None = None) -> None:
        if not self.is_options_screen():
            return

        self.host.register_setting(self.option_group(), self.option_name())

        for key, form_field in self._form_fields.items():
            self.host.add_settings_field(
                key,
                form_field.label,
                self.field_callback,
                self.option_page(),
                form_field.section,
                form_field,
            )

    def is_options_screen(self) -> bool:
        current_screen = self.host.get_current_screen()
        if current_screen is None:
            return False

        screen_id = self.screen_id()
        if self.is_main_menu_page():
            screen_id = screen_id.replace("settings_page", "toplevel_page")

        return current_screen.id in ("options", screen_id)

    def load_plugin_textdomain(self) -> None:
        if self.plugin.path is not None:
            languages = Path(self.plugin.path) / "languages"
        else:
            languages = Path(self.plugin_basename()).parent / "languages"
        self.host.load_plugin_textdomain(self.text_domain(), languages)

    # -- rendering ------------------------------------------------------------

    def field_callback(self, arguments: FieldSpec | Mapping[str, Any]) -> str:
        """Render one field; unsupported types and anonymous fields render nothing."""
        if isinstance(arguments, Mapping):
            if "field_id" not in arguments:
                return ""
            arguments = FieldSpec.from_mapping(str(arguments["field_id"]), arguments)

        if not arguments.key or get_renderer(arguments) is None:
            return ""

        return render_field(self.option_name(), arguments, self.get(arguments.key))

    def render_form(self) -> str:
        """Standard settings form posting every section of this screen to ``options.php``."""
        submit = esc_attr(self.translate("Save Changes"))
        return (
            '<div class="wrap">'
            f"<h1>{esc_html(self.page_title())}</h1>"
            f'<form id="ctl-options" action="{esc_url(self.host.admin_url("options.php"))}" method="post">'
            f"{self.host.do_settings_sections(self.option_page())}"
            f"{self.host.settings_fields(self.option_group())}"
            '<p class="submit">'
            f'<input type="submit" name="submit" id="submit" class="button button-primary" value="{submit}" />'
            "</p>"
            "</form>"
            "</div>"
        )

    def translate(self, text: str) -> str:
        return self.host.translate(text, self.text_domain())

    # -- settings access ------------------------------------------------------

    def get(self, key: str, empty_value: Any = None) -> Any:
        """Return a setting, falling back to the field default.

        ``empty_value`` replaces an empty-string value. Either substitution is
        kept in memory for the rest of the request.
        """
        if not self.store:
            self.init_settings()

        return self.store.get(key, self.form_fields(), empty_value)

    def update_option(self, key: str, value: Any) -> None:
        """Set one setting and persist the whole settings blob."""
        if not self.store:
            self.init_settings()

        self.store.set(key, value)

    def pre_update_option_filter(self, value: Any, old_value: Any) -> Any:
        """Normalize a submitted settings blob before it is stored.

        A save from one tab carries only that tab's fields, so the submission is
        merged over the stored blob. Checkbox fields are then stored as ``"yes"``
        when submitted as ``"1"`` or ``"yes"`` and ``"no"`` otherwise; list
        submissions from multi-option checkboxes therefore become ``"no"``.
        """
        # Nothing submitted still stores the checkbox fields.
        if value is None:
            value = {}
        elif value == old_value:
            return value

        if isinstance(old_value, dict) and isinstance(value, dict):
            value = {**old_value, **value}

        if not isinstance(value, dict):
            return value

        for key, form_field in self.form_fields().items():
            if form_field.type == FieldType.CHECKBOX.value:
                submitted = value.get(key, "no")
                value[key] = "yes" if submitted in CHECKBOX_ON_VALUES else "no"

        return value
