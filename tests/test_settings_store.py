from __future__ import annotations

from optionpages.fields import build_form_fields
from optionpages.settings_store import SettingsStore

FORM_FIELDS = build_form_fields(
    {
        "color": {"default": "red"},
        "flag": {"type": "checkbox", "default": "no"},
        "types": {"type": "multiple", "default": []},
        "name": {},
    }
)


class TestLoad:
    def test_nothing_stored_uses_defaults(self, option_store) -> None:
        store = SettingsStore(option_store, "blob")
        store.load(FORM_FIELDS)

        assert store.as_dict() == {"color": "red", "flag": "no", "types": [], "name": ""}

    def test_stored_values_win_and_extra_keys_are_kept(self, option_store) -> None:
        option_store.add_option("blob", {"color": "blue", "legacy": 1})
        store = SettingsStore(option_store, "blob")
        store.load(FORM_FIELDS)

        assert store.as_dict() == {"color": "blue", "flag": "no", "types": [], "name": "", "legacy": 1}

    def test_non_mapping_stored_value_is_ignored(self, option_store) -> None:
        option_store.add_option("blob", "corrupt")
        store = SettingsStore(option_store, "blob")
        store.load(FORM_FIELDS)

        assert store.get("color", FORM_FIELDS) == "red"

    def test_second_load_keeps_values_in_memory(self, option_store) -> None:
        store = SettingsStore(option_store, "blob")
        store.load(FORM_FIELDS)
        store.get("name", FORM_FIELDS, "anonymous")

        store.load(build_form_fields({"name": {"default": "other"}, "extra": {"default": "x"}}))

        assert store.get("name", FORM_FIELDS) == "anonymous"
        assert store.get("extra", FORM_FIELDS) == "x"

    def test_container_protocol(self, option_store) -> None:
        store = SettingsStore(option_store, "blob")
        assert not store
        assert len(store) == 0

        store.load(FORM_FIELDS)

        assert store
        assert "color" in store
        assert list(store) == ["color", "flag", "types", "name"]
        assert len(store) == 4


class TestGetSet:
    def test_get_backfills_from_schema(self, option_store) -> None:
        store = SettingsStore(option_store, "blob")

        assert store.get("color", FORM_FIELDS) == "red"
        assert store.get("types", FORM_FIELDS) == ""
        assert store.get("unknown", FORM_FIELDS) == ""

    def test_empty_value_only_replaces_empty_string(self, option_store) -> None:
        store = SettingsStore(option_store, "blob")
        store.load(FORM_FIELDS)

        assert store.get("name", FORM_FIELDS, "anonymous") == "anonymous"
        assert store.get("flag", FORM_FIELDS, "yes") == "no"

    def test_set_persists_whole_mapping(self, option_store) -> None:
        store = SettingsStore(option_store, "blob")
        store.load(FORM_FIELDS)

        store.set("color", "green")

        assert option_store.get_option("blob") == {"color": "green", "flag": "no", "types": [], "name": ""}

    def test_reset_forgets_memory(self, option_store) -> None:
        store = SettingsStore(option_store, "blob")
        store.load(FORM_FIELDS)
        store.reset()

        assert not store
