"""In-process admin shell hosting plugin settings pages.

The host owns everything a settings page consumes from its platform: the hook
registry, admin menu, settings sections and fields, the current screen, request
parameters, the option store, enqueued styles, text domains, nonces and user
capabilities. Registries other than the option store are request-scoped and are
rebuilt by calling every plugin loader at the start of ``handle``.
"""

from __future__ import annotations

import gettext
import hashlib
import hmac
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .hooks import HookRegistry
from .request import AdminRequest, AdminResponse, add_query_arg
from .sanitize import esc_attr, esc_html, esc_url
from .utils import sanitize_key

if TYPE_CHECKING:
    from .config import HostSettings, PluginConfig, UserSettings
    from .options import OptionStore

LOGGER = logging.getLogger(__name__)

OPTIONS_SCRIPT = "options.php"
PLUGINS_SCRIPT = "plugins.php"
TOPLEVEL_SCRIPT = "admin.php"

NONCE_LIFETIME = 86400

# Hook-name prefixes for submenus of core parent menus.
PARENT_PAGE_PREFIXES = {
    "options-general.php": "settings",
    "tools.php": "tools",
    "index.php": "dashboard",
    "users.php": "users",
    "themes.php": "appearance",
    "plugins.php": "plugins",
}

PluginLoader = Callable[["AdminHost"], Any]


@dataclass
class MenuPage:
    """A registered admin menu entry."""

    page_title: str
    menu_title: str
    capability: str
    menu_slug: str
    callback: Callable[[], str | None]
    hook_suffix: str
    parent_slug: str | None = None

    @property
    def script(self) -> str:
        return self.parent_slug or TOPLEVEL_SCRIPT


@dataclass
class SettingsSection:
    id: str
    title: str
    callback: Callable[[SettingsSection], str | None] | None
    page: str


@dataclass
class SettingsField:
    id: str
    title: str
    callback: Callable[[Any], str | None]
    page: str
    section: str
    args: Any = None


@dataclass
class Screen:
    id: str


@dataclass
class StyleAsset:
    handle: str
    src: str
    deps: list[str] = field(default_factory=list)
    ver: str | None = None

    def tag(self) -> str:
        href = add_query_arg(self.src, ver=self.ver) if self.ver else self.src
        return f"<link rel='stylesheet' id='{esc_attr(self.handle)}-css' href='{esc_url(href)}' media='all' />"


class AdminHost:
    """Admin shell serving settings pages for registered plugins."""

    def __init__(self, settings: HostSettings, options: OptionStore, user: UserSettings) -> None:
        self.settings = settings
        self.user = user
        self.hooks = HookRegistry()
        self.options = options
        self.options.hooks = self.hooks
        self.plugins: dict[str, PluginConfig] = {}
        self._loaders: dict[str, PluginLoader] = {}
        self.request = AdminRequest(script="index.php")
        self._reset()

    def _reset(self) -> None:
        self.hooks.clear()
        self.menu: dict[str, MenuPage] = {}
        self.sections: dict[str, dict[str, SettingsSection]] = {}
        self.fields: dict[str, dict[str, dict[str, SettingsField]]] = {}
        self.registered_settings: dict[str, list[str]] = {}
        self.styles: dict[str, StyleAsset] = {}
        self.translations: dict[str, gettext.NullTranslations] = {}
        self.current_screen: Screen | None = None
        self.loaded: dict[str, Any] = {}

    # -- plugins --------------------------------------------------------------

    def register_plugin(self, plugin: PluginConfig, loader: PluginLoader) -> None:
        """Register a plugin whose ``loader`` builds its pages on every request."""
        self.plugins[plugin.basename] = plugin
        self._loaders[plugin.basename] = loader

    def boot(self, request: AdminRequest) -> None:
        """Start a request: reset registries and run every plugin loader."""
        self._reset()
        self.request = request
        for basename, loader in self._loaders.items():
            self.loaded[basename] = loader(self)
        self.hooks.do_action("plugins_loaded")
        self.hooks.do_action("admin_menu")

    # -- request handling -----------------------------------------------------

    def handle(self, request: AdminRequest) -> AdminResponse:
        """Process one admin request and return the rendered response."""
        LOGGER.debug("Handling %s %s %s", request.method, request.script, request.query)
        self.boot(request)

        if not self.current_user_can("read"):
            return self._forbidden("Sorry, you are not allowed to access this page.")

        if request.script == OPTIONS_SCRIPT:
            self.set_current_screen("options")
            if request.is_post:
                return self._save_options()
            return AdminResponse(status=404, body="<p>Nothing to display.</p>")

        if request.script == PLUGINS_SCRIPT:
            self.set_current_screen("plugins")
            return AdminResponse(body=self._render_plugins(), styles=self.style_tags())

        menu_page = self.menu.get(request.query.get("page", ""))
        if menu_page is None or menu_page.script != request.script:
            LOGGER.warning("Unknown admin page requested: %s?%s", request.script, request.query)
            return AdminResponse(status=404, body="<p>Sorry, you are not allowed to access this page.</p>")

        if not self.current_user_can(menu_page.capability):
            return self._forbidden("Sorry, you are not allowed to access this page.")

        self.set_current_screen(menu_page.hook_suffix)
        self.hooks.do_action("admin_enqueue_scripts", menu_page.hook_suffix)

        body = menu_page.callback() or ""
        if request.query.get("settings-updated") == "true":
            body = '<div class="notice notice-success"><p>Settings saved.</p></div>' + body
        return AdminResponse(body=body, styles=self.style_tags())

    def _forbidden(self, message: str) -> AdminResponse:
        LOGGER.warning("Rejected admin request for %s: %s", self.user.login, message)
        return AdminResponse(status=403, body=f"<p>{esc_html(message)}</p>")

    def _save_options(self) -> AdminResponse:
        form = self.request.form_data()
        option_page = str(form.get("option_page", ""))

        if not self.verify_nonce(form.get("_wpnonce"), f"{option_page}-options"):
            return self._forbidden("The link you followed has expired.")
        if not self.current_user_can("manage_options"):
            return self._forbidden("Sorry, you are not allowed to manage options for this site.")

        allowed = self.registered_settings.get(option_page)
        if not allowed:
            LOGGER.warning("Options page '%s' not found in the allowed options list", option_page)
            return AdminResponse(status=400, body="<p>Options page not found in the allowed options list.</p>")

        for option_name in allowed:
            value = form.get(option_name)
            if isinstance(value, str):
                value = value.strip()
            self.options.update_option(option_name, value)

        referer = str(form.get("_wp_http_referer") or self.admin_url())
        location = add_query_arg(referer, **{"settings-updated": "true"})
        LOGGER.info("Saved options for '%s'", option_page)
        return AdminResponse(status=303, headers={"Location": location})

    def _render_plugins(self) -> str:
        rows = []
        for basename in self.plugins:
            links = self.plugin_action_links(basename)
            rows.append(
                "<tr>"
                f'<td class="plugin-title"><strong>{esc_html(basename)}</strong></td>'
                f'<td class="row-actions">{" | ".join(str(link) for link in links.values())}</td>'
                "</tr>"
            )
        return f'<table class="wp-list-table plugins">{"".join(rows)}</table>'

    # -- request access -------------------------------------------------------

    def query_param(self, name: str) -> str | None:
        """Return a query parameter of the current request, escaped for output."""
        value = self.request.query.get(name)
        if value is None:
            return None
        return esc_html(value)

    def set_current_screen(self, screen_id: str) -> None:
        self.current_screen = Screen(id=screen_id)
        self.hooks.do_action("current_screen", self.current_screen)

    def get_current_screen(self) -> Screen | None:
        return self.current_screen

    # -- urls -----------------------------------------------------------------

    def admin_url(self, path: str = "") -> str:
        return self.settings.admin_url + path.lstrip("/")

    def plugins_url(self, path: str = "") -> str:
        base = self.settings.plugins_url.rstrip("/")
        return f"{base}/{path.lstrip('/')}" if path else base

    def menu_page_url(self, menu_slug: str) -> str:
        menu_page = self.menu.get(menu_slug)
        if menu_page is None:
            return ""
        return self.admin_url(f"{menu_page.script}?page={menu_slug}")

    def current_url(self) -> str:
        url = self.admin_url(self.request.script)
        if self.request.query:
            url = add_query_arg(url, **self.request.query)
        return url

    # -- menu -----------------------------------------------------------------

    def add_menu_page(
        self,
        page_title: str,
        menu_title: str,
        capability: str,
        menu_slug: str,
        callback: Callable[[], str | None],
    ) -> str:
        hook_suffix = f"toplevel_page_{menu_slug}"
        self.menu[menu_slug] = MenuPage(page_title, menu_title, capability, menu_slug, callback, hook_suffix)
        LOGGER.debug("Added menu page '%s'", menu_slug)
        return hook_suffix

    def add_submenu_page(
        self,
        parent_slug: str,
        page_title: str,
        menu_title: str,
        capability: str,
        menu_slug: str,
        callback: Callable[[], str | None],
    ) -> str:
        prefix = PARENT_PAGE_PREFIXES.get(parent_slug) or sanitize_key(parent_slug.removesuffix(".php"))
        hook_suffix = f"{prefix}_page_{menu_slug}"
        self.menu[menu_slug] = MenuPage(
            page_title, menu_title, capability, menu_slug, callback, hook_suffix, parent_slug=parent_slug
        )
        LOGGER.debug("Added submenu page '%s' under '%s'", menu_slug, parent_slug)
        return hook_suffix

    # -- settings API ---------------------------------------------------------

    def register_setting(self, option_group: str, option_name: str) -> None:
        names = self.registered_settings.setdefault(option_group, [])
        if option_name not in names:
            names.append(option_name)

    def add_settings_section(
        self,
        section_id: str,
        title: str,
        callback: Callable[[SettingsSection], str | None] | None,
        page: str,
    ) -> None:
        self.sections.setdefault(page, {})[section_id] = SettingsSection(section_id, title, callback, page)

    def add_settings_field(
        self,
        field_id: str,
        title: str,
        callback: Callable[[Any], str | None],
        page: str,
        section: str = "default",
        args: Any = None,
    ) -> None:
        page_fields = self.fields.setdefault(page, {})
        page_fields.setdefault(section, {})[field_id] = SettingsField(field_id, title, callback, page, section, args)

    def settings_fields(self, option_group: str) -> str:
        """Hidden inputs identifying the option group and protecting the save."""
        return (
            f'<input type="hidden" name="option_page" value="{esc_attr(option_group)}" />'
            '<input type="hidden" name="action" value="update" />'
            f'<input type="hidden" name="_wpnonce" value="{esc_attr(self.create_nonce(f"{option_group}-options"))}" />'
            f'<input type="hidden" name="_wp_http_referer" value="{esc_attr(self.current_url())}" />'
        )

    def do_settings_sections(self, page: str) -> str:
        """Render every section of ``page`` with its fields as form tables."""
        parts = []
        for section in self.sections.get(page, {}).values():
            if section.title:
                parts.append(f"<h2>{esc_html(section.title)}</h2>")
            if section.callback is not None:
                parts.append(section.callback(section) or "")

            section_fields = self.fields.get(page, {}).get(section.id)
            if not section_fields:
                continue
            rows = "".join(
                f'<tr><th scope="row">{esc_html(item.title)}</th><td>{item.callback(item.args) or ""}</td></tr>'
                for item in section_fields.values()
            )
            parts.append(f'<table class="form-table" role="presentation">{rows}</table>')
        return "".join(parts)

    # -- assets ---------------------------------------------------------------

    def enqueue_style(self, handle: str, src: str, deps: list[str] | None = None, ver: str | None = None) -> None:
        self.styles[handle] = StyleAsset(handle=handle, src=src, deps=list(deps or []), ver=ver)

    def style_tags(self) -> list[str]:
        return [asset.tag() for asset in self.styles.values()]

    # -- i18n -----------------------------------------------------------------

    def load_plugin_textdomain(self, domain: str, plugin_rel_path: str | Path) -> bool:
        """Load ``<domain>-<locale>.mo`` for a plugin.

        The global languages directory is searched first, then the plugin's own
        ``plugin_rel_path`` (relative paths resolve against the working directory).

        Returns:
            True if a translation file was found
        """
        filename = f"{domain}-{self.settings.locale}.mo"
        candidates = [Path(plugin_rel_path) / filename]
        if self.settings.languages_dir is not None:
            candidates.insert(0, self.settings.languages_dir / "plugins" / filename)

        for candidate in candidates:
            if candidate.is_file():
                with candidate.open("rb") as handle:
                    self.translations[domain] = gettext.GNUTranslations(handle)
                LOGGER.debug("Loaded text domain '%s' from %s", domain, candidate)
                return True

        self.translations.setdefault(domain, gettext.NullTranslations())
        return False

    def translate(self, text: str, domain: str) -> str:
        translations = self.translations.get(domain)
        if translations is None:
            return text
        return translations.gettext(text)

    # -- security -------------------------------------------------------------

    def current_user_can(self, capability: str) -> bool:
        return capability in self.user.capabilities

    def _nonce_tick(self) -> int:
        return int(time.time() // (NONCE_LIFETIME / 2))

    def _nonce_for_tick(self, action: str, tick: int) -> str:
        message = f"{tick}|{action}|{self.user.login}".encode()
        digest = hmac.new(self.settings.secret_key.encode(), message, hashlib.sha256).hexdigest()
        return digest[-12:-2]

    def create_nonce(self, action: str) -> str:
        return self._nonce_for_tick(action, self._nonce_tick())

    def verify_nonce(self, nonce: Any, action: str) -> bool:
        """Accept nonces from the current or the previous half-lifetime."""
        if not isinstance(nonce, str) or not nonce:
            return False
        tick = self._nonce_tick()
        return any(hmac.compare_digest(nonce, self._nonce_for_tick(action, candidate)) for candidate in (tick, tick - 1))

    # -- plugin list ----------------------------------------------------------

    def plugin_action_links(self, basename: str, actions: dict[str, str] | None = None) -> dict[str, str]:
        return self.hooks.apply_filters(f"plugin_action_links_{basename}", dict(actions or {}))
