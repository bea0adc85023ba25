from __future__ import annotations

from functools import partial

import pytest
from sample_pages import SAMPLE_OPTION, Converter, General, Tables

from optionpages.config import HostSettings, PluginConfig, UserSettings
from optionpages.demo import demo_plugin_config, load_demo_plugin
from optionpages.host import AdminHost
from optionpages.options import OptionStore
from optionpages.request import AdminRequest
from optionpages.tabs import TabGroup


@pytest.fixture
def option_store(tmp_path):
    store = OptionStore(tmp_path / "options.db")
    yield store
    store.close()


@pytest.fixture
def host_settings(tmp_path) -> HostSettings:
    return HostSettings(database=tmp_path / "options.db", secret_key="test-secret", languages_dir=tmp_path / "lang")


@pytest.fixture
def host(host_settings, option_store) -> AdminHost:
    return AdminHost(host_settings, option_store, UserSettings())


@pytest.fixture
def sample_plugin() -> PluginConfig:
    return PluginConfig(basename="sample/sample.php", version="2.1.0", url="/plugins/sample")


@pytest.fixture
def build_group(host, sample_plugin):
    """Build the sample tab group as if ``query`` were the current request."""

    def _build(query: dict[str, str] | None = None) -> TabGroup:
        host.request = AdminRequest(script="options-general.php", query=dict(query or {}))
        return TabGroup(host, sample_plugin, General, [Converter, Tables], option_name=SAMPLE_OPTION)

    return _build


@pytest.fixture
def demo_host(host) -> AdminHost:
    plugin = demo_plugin_config(host.plugins_url("translit"))
    host.register_plugin(plugin, partial(load_demo_plugin, plugin=plugin))
    return host
