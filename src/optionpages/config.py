from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .utils import env_bool, env_list, load_yaml_file, validate_url

DEFAULT_CAPABILITIES = ["read", "manage_options"]


@dataclass
class PluginConfig:
    """Identity of the plugin owning a settings screen.

    Attributes:
        basename: ``<directory>/<main file>`` identifier used for action links
        version: Plugin version, appended to enqueued assets
        url: Base URL of the plugin's public files
        path: Plugin root directory on disk (holds ``languages/`` and ``assets/``)
        min_suffix: Whether to enqueue minified assets
        loader: ``module:function`` building the plugin's pages for a request
    """

    basename: str
    version: str = "1.0.0"
    url: str = ""
    path: Path | None = None
    min_suffix: bool = True
    loader: str | None = None

    @property
    def asset_suffix(self) -> str:
        return ".min" if self.min_suffix else ""

    @property
    def slug(self) -> str:
        return self.basename.split("/", 1)[0]


@dataclass
class UserSettings:
    login: str = "admin"
    capabilities: list[str] = field(default_factory=lambda: list(DEFAULT_CAPABILITIES))


@dataclass
class HostSettings:
    site_url: str = "http://localhost:8080"
    admin_path: str = "/wp-admin/"
    plugins_url: str = "/plugins"
    database: Path = Path("./optionpages.db")
    languages_dir: Path | None = None
    locale: str = "en_US"
    secret_key: str = "change-me"
    debug: bool = False

    @property
    def admin_url(self) -> str:
        return self.site_url.rstrip("/") + "/" + self.admin_path.strip("/") + "/"


@dataclass
class ServerSettings:
    host: str = "127.0.0.1"
    port: int = 8080
    title: str = "Settings"


@dataclass
class AppConfig:
    host: HostSettings = field(default_factory=HostSettings)
    user: UserSettings = field(default_factory=UserSettings)
    server: ServerSettings = field(default_factory=ServerSettings)
    plugins: list[PluginConfig] = field(default_factory=list)


def _require_mapping(data: Any, field_name: str) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"'{field_name}' must be provided as a mapping when specified")
    return data


def _build_host_settings(data: dict[str, Any]) -> HostSettings:
    data = _require_mapping(data, "host")
    defaults = HostSettings()

    site_url = str(data.get("site_url", defaults.site_url))
    if not validate_url(site_url):
        raise ValueError(f"'host.site_url' must be a valid http/https URL, got: {site_url}")

    languages_dir = data.get("languages_dir")
    settings = HostSettings(
        site_url=site_url,
        admin_path=str(data.get("admin_path", defaults.admin_path)),
        plugins_url=str(data.get("plugins_url", defaults.plugins_url)),
        database=Path(data.get("database", defaults.database)),
        languages_dir=Path(languages_dir) if languages_dir else None,
        locale=str(data.get("locale", defaults.locale)),
        secret_key=str(data.get("secret_key", defaults.secret_key)),
        debug=bool(data.get("debug", defaults.debug)),
    )

    database_override = os.getenv("OPTIONPAGES_DB")
    if database_override:
        settings.database = Path(database_override)
    debug_override = env_bool("OPTIONPAGES_DEBUG")
    if debug_override is not None:
        settings.debug = debug_override
    return settings


def _build_user_settings(data: dict[str, Any]) -> UserSettings:
    data = _require_mapping(data, "user")
    capabilities = data.get("capabilities", list(DEFAULT_CAPABILITIES))
    if not isinstance(capabilities, list) or not all(isinstance(item, str) for item in capabilities):
        raise ValueError("'user.capabilities' must be provided as a list of strings")

    override = env_list("OPTIONPAGES_CAPABILITIES")
    if override is not None:
        capabilities = override
    return UserSettings(login=str(data.get("login", "admin")), capabilities=list(capabilities))


def _build_server_settings(data: dict[str, Any]) -> ServerSettings:
    data = _require_mapping(data, "server")
    defaults = ServerSettings()
    try:
        port = int(data.get("port", defaults.port))
    except (TypeError, ValueError) as exc:
        raise ValueError("'server.port' must be an integer") from exc
    if not 0 < port < 65536:
        raise ValueError("'server.port' must be between 1 and 65535")
    return ServerSettings(
        host=str(data.get("host", defaults.host)),
        port=port,
        title=str(data.get("title", defaults.title)),
    )


def build_plugin_config(data: dict[str, Any], index: int = 0) -> PluginConfig:
    data = _require_mapping(data, f"plugins[{index}]")
    basename = data.get("basename")
    if not basename or not isinstance(basename, str):
        raise ValueError(f"'plugins[{index}].basename' is required")
    loader = data.get("loader")
    if loader is not None and (not isinstance(loader, str) or ":" not in loader):
        raise ValueError(f"'plugins[{index}].loader' must be given as 'module:function'")
    path = data.get("path")
    return PluginConfig(
        basename=basename,
        version=str(data.get("version", "1.0.0")),
        url=str(data.get("url", "")),
        path=Path(path) if path else None,
        min_suffix=bool(data.get("min_suffix", True)),
        loader=loader,
    )


def load_config(path: Path) -> AppConfig:
    data = load_yaml_file(path)

    plugins_raw = data.get("plugins", []) or []
    if not isinstance(plugins_raw, list):
        raise ValueError("'plugins' must be provided as a list when specified")

    return AppConfig(
        host=_build_host_settings(data.get("host")),
        user=_build_user_settings(data.get("user")),
        server=_build_server_settings(data.get("server")),
        plugins=[build_plugin_config(item, index) for index, item in enumerate(plugins_raw)],
    )
