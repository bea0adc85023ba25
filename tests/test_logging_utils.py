from __future__ import annotations

from optionpages.logging_utils import LogBlockBuilder, _stringify, render_fields_block, render_section_block


class TestStringify:
    def test_none_is_empty(self) -> None:
        assert _stringify(None) == ""

    def test_strings_are_stripped(self) -> None:
        assert _stringify("  value  ") == "value"

    def test_sequences_are_joined(self) -> None:
        assert _stringify(["General", "Converter"]) == "General, Converter"
        assert _stringify([]) == "(none)"

    def test_mappings_are_rendered_as_pairs(self) -> None:
        assert _stringify({"a": 1, "b": [2, 3]}) == "a=1, b=2, 3"
        assert _stringify({}) == "(none)"

    def test_other_values_use_str(self) -> None:
        assert _stringify(42) == "42"


class TestLogBlockBuilder:
    def test_title_is_underlined(self) -> None:
        rendered = LogBlockBuilder("Settings page").render()

        assert rendered.splitlines() == ["", "Settings page", "-------------"]

    def test_fields_are_aligned(self) -> None:
        builder = LogBlockBuilder("Page")
        builder.add_fields({"Option": "translit", "Fields": ["a", "b"]})

        lines = builder.render().splitlines()
        assert lines[3] == "    Option: translit"
        assert lines[4] == "    Fields: a, b"

    def test_long_values_wrap_under_the_value_column(self) -> None:
        builder = LogBlockBuilder("Page", wrap_width=40)
        builder.add_fields([("Key", "word " * 20)])

        lines = builder.render().splitlines()[3:]
        assert len(lines) > 1
        assert lines[0].startswith("    Key: word")
        assert all(line.startswith("         word") for line in lines[1:])

    def test_empty_fields_are_ignored(self) -> None:
        builder = LogBlockBuilder("Page")
        builder.add_fields(None)
        builder.add_fields({})

        assert builder.render().splitlines() == ["", "Page", "----"]

    def test_sections_list_items(self) -> None:
        builder = LogBlockBuilder("Group")
        builder.add_section("Pages", ["Settings", None, "Tables"])
        builder.add_section("Empty", [])

        assert builder.render().splitlines()[3:] == [
            "",
            "Pages:",
            "    - Settings",
            "    - Tables",
            "",
            "Empty:",
            "    (none)",
        ]


def test_render_fields_block() -> None:
    rendered = render_fields_block("Settings page General", {"Option name": "sample_settings"})

    assert "Settings page General" in rendered
    assert "Option name: sample_settings" in rendered


def test_render_section_block() -> None:
    rendered = render_section_block("Tab group 'x'", [("Pages", ["A", "B"]), ("Active", ["A"])])

    assert rendered.splitlines()[-1] == "    - A"
    assert "Active:" in rendered
