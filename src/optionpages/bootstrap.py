"""Build an ``AdminHost`` from application configuration."""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable
from dataclasses import replace
from functools import partial
from typing import TYPE_CHECKING, Any

from .host import AdminHost
from .options import OptionStore

if TYPE_CHECKING:
    from .config import AppConfig, PluginConfig

LOGGER = logging.getLogger(__name__)

DEMO_LOADER = "optionpages.demo:load_demo_plugin"


def resolve_loader(spec: str) -> Callable[..., Any]:
    """Import a ``module:function`` loader reference."""
    module_name, _, attribute = spec.partition(":")
    if not module_name or not attribute:
        raise ValueError(f"Invalid plugin loader reference: {spec!r}")
    module = importlib.import_module(module_name)
    try:
        return getattr(module, attribute)
    except AttributeError as exc:
        raise ValueError(f"Plugin loader {spec!r} not found") from exc


def _plugin_configs(config: AppConfig, host: AdminHost) -> list[PluginConfig]:
    if config.plugins:
        return config.plugins

    from .demo import demo_plugin_config

    LOGGER.info("No plugins configured, loading the demo transliteration plugin")
    return [replace(demo_plugin_config(host.plugins_url("translit")), loader=DEMO_LOADER)]


def create_host(config: AppConfig) -> AdminHost:
    """Open the option store and register every configured plugin."""
    options = OptionStore(config.host.database)
    host = AdminHost(config.host, options, config.user)

    for plugin in _plugin_configs(config, host):
        loader = resolve_loader(plugin.loader or DEMO_LOADER)
        host.register_plugin(plugin, partial(loader, plugin=plugin))
        LOGGER.debug("Registered plugin %s (%s)", plugin.basename, plugin.version)

    return host
