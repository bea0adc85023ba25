from __future__ import annotations

import logging

from sample_pages import SAMPLE_OPTION, Converter, General, Tables

from optionpages.page import TabRole
from optionpages.tabs import TabGroup


class TestTabGroup:
    def test_pages_in_declaration_order(self, build_group) -> None:
        group = build_group()

        assert [type(page) for page in group] == [General, Converter, Tables]
        assert len(group) == 3
        assert group.pages[0] is group.root
        assert group.tabs == group.pages[1:]

    def test_roles_are_assigned(self, build_group) -> None:
        group = build_group()

        assert group.root.role is TabRole.ROOT
        assert all(tab.role is TabRole.TAB for tab in group.tabs)
        assert group.root.get_tabs() == list(group.tabs)

    def test_group_owns_single_store(self, build_group) -> None:
        group = build_group()

        assert group.store.option_name == SAMPLE_OPTION
        assert all(page.store is group.store for page in group)

    def test_store_merges_every_page_schema(self, build_group) -> None:
        group = build_group()

        stored = group.store.as_dict()
        assert stored["color"] == "red"
        assert stored["post_types"] == ["post"]
        assert stored["notes"] == ""

    def test_active_tab_follows_query(self, build_group) -> None:
        assert isinstance(build_group({"tab": "tables"}).active_tab, Tables)
        assert isinstance(build_group().active_tab, General)

    def test_root_without_tabs(self, host, sample_plugin) -> None:
        group = TabGroup(host, sample_plugin, General, option_name=SAMPLE_OPTION)

        assert len(group) == 1
        assert group.tabs == ()
        assert group.active_tab is group.root
        assert group.root.tabs_callback().count("<a ") == 1

    def test_mismatched_option_name_is_logged(self, host, sample_plugin, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="optionpages.tabs"):
            TabGroup(host, sample_plugin, General, [Converter], option_name="other_settings")

        assert "stores its settings in 'sample_settings'" in caplog.text

    def test_debug_summary_logged(self, build_group, caplog) -> None:
        with caplog.at_level(logging.DEBUG, logger="optionpages.tabs"):
            build_group({"tab": "tables"})

        assert f"Tab group '{SAMPLE_OPTION}'" in caplog.text
        assert "Tables" in caplog.text

    def test_debug_summary_skipped_above_debug(self, build_group, caplog, monkeypatch) -> None:
        def fail(*args, **kwargs):
            raise AssertionError("summary built while DEBUG is off")

        monkeypatch.setattr("optionpages.tabs.render_section_block", fail)

        with caplog.at_level(logging.INFO, logger="optionpages.tabs"):
            group = build_group()

        assert group.active_tab is group.root
