from __future__ import annotations

import sqlite3

from optionpages.hooks import HookRegistry
from optionpages.options import OptionStore


class TestOptionStore:
    def test_missing_option_returns_default(self, option_store) -> None:
        assert option_store.get_option("missing") is None
        assert option_store.get_option("missing", {}) == {}

    def test_add_option_does_not_overwrite(self, option_store) -> None:
        assert option_store.add_option("blob", {"a": 1})
        assert not option_store.add_option("blob", {"a": 2})
        assert option_store.get_option("blob") == {"a": 1}

    def test_update_option_round_trips_nested_values(self, option_store) -> None:
        value = {"flag": "yes", "types": ["post", "page"], "table": {"ж": "zh"}}

        assert option_store.update_option("blob", value)
        assert option_store.get_option("blob") == value

    def test_unchanged_update_is_skipped(self, option_store) -> None:
        option_store.update_option("blob", {"a": 1})

        assert not option_store.update_option("blob", {"a": 1})

    def test_delete_and_list(self, option_store) -> None:
        option_store.update_option("b", 1)
        option_store.update_option("a", 2)

        assert option_store.list_options() == ["a", "b"]
        assert option_store.delete_option("a")
        assert not option_store.delete_option("a")
        assert option_store.list_options() == ["b"]

    def test_values_survive_reopen(self, tmp_path) -> None:
        db_path = tmp_path / "nested" / "options.db"
        first = OptionStore(db_path)
        first.update_option("blob", {"a": 1})
        first.close()

        second = OptionStore(db_path)
        try:
            assert second.get_option("blob") == {"a": 1}
        finally:
            second.close()

    def test_schema_version_recorded(self, tmp_path) -> None:
        db_path = tmp_path / "options.db"
        OptionStore(db_path).close()

        with sqlite3.connect(db_path) as conn:
            version = conn.execute("SELECT version FROM options_schema_version").fetchone()[0]

        assert version == OptionStore.SCHEMA_VERSION


class TestUpdateHooks:
    def test_pre_update_filters_receive_old_value(self, tmp_path) -> None:
        hooks = HookRegistry()
        store = OptionStore(tmp_path / "options.db", hooks)
        seen = []

        def merge(value, old_value, name):
            seen.append((old_value, name))
            return {**(old_value or {}), **value}

        hooks.add_filter("pre_update_option_blob", merge, 10, 3)
        try:
            store.update_option("blob", {"a": 1})
            store.update_option("blob", {"b": 2})

            assert store.get_option("blob") == {"a": 1, "b": 2}
            assert seen == [(None, "blob"), ({"a": 1}, "blob")]
        finally:
            store.close()

    def test_generic_filter_runs_after_named_filter(self, tmp_path) -> None:
        hooks = HookRegistry()
        store = OptionStore(tmp_path / "options.db", hooks)
        hooks.add_filter("pre_update_option_blob", lambda value: value + ["named"])
        hooks.add_filter("pre_update_option", lambda value, name: value + [name], 10, 2)
        try:
            store.update_option("blob", [])

            assert store.get_option("blob") == ["named", "blob"]
        finally:
            store.close()

    def test_filter_returning_old_value_skips_write(self, tmp_path) -> None:
        hooks = HookRegistry()
        store = OptionStore(tmp_path / "options.db", hooks)
        updates = []
        hooks.add_filter("pre_update_option_blob", lambda value, old: old, 10, 2)
        hooks.add_action("updated_option", lambda name: updates.append(name))
        try:
            assert not store.update_option("blob", {"a": 1})
            assert store.get_option("blob") is None
            assert updates == []
        finally:
            store.close()

    def test_update_actions_fire_after_write(self, tmp_path) -> None:
        hooks = HookRegistry()
        store = OptionStore(tmp_path / "options.db", hooks)
        events = []
        hooks.add_action("update_option_blob", lambda old, new: events.append(("named", old, new)), 10, 2)
        hooks.add_action("updated_option", lambda name: events.append(("generic", name)))
        try:
            store.update_option("blob", 1)
            store.update_option("blob", 2)

            assert events == [("named", None, 1), ("generic", "blob"), ("named", 1, 2), ("generic", "blob")]
        finally:
            store.close()
