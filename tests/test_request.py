from __future__ import annotations

from optionpages.request import AdminRequest, AdminResponse, add_query_arg, parse_form_pairs, query_from_mapping


class TestParseFormPairs:
    def test_scalars_and_nested_keys(self) -> None:
        form = parse_form_pairs(
            [
                ("option_page", "translit_group"),
                ("opt[color]", "red"),
                ("opt[iso9][ж]", "zh"),
                ("opt[iso9][я]", "ya"),
            ]
        )

        assert form == {"option_page": "translit_group", "opt": {"color": "red", "iso9": {"ж": "zh", "я": "ya"}}}

    def test_append_brackets_build_lists(self) -> None:
        form = parse_form_pairs([("opt[types][]", "post"), ("opt[types][]", "page"), ("opt[flag][]", "yes")])

        assert form == {"opt": {"types": ["post", "page"], "flag": ["yes"]}}

    def test_later_scalars_replace_earlier(self) -> None:
        assert parse_form_pairs([("a", "1"), ("a", "2")]) == {"a": "2"}

    def test_nameless_fields_are_skipped(self) -> None:
        assert parse_form_pairs([("[x]", "1"), ("", "2")]) == {}

    def test_scalar_replaced_by_nested_value(self) -> None:
        assert parse_form_pairs([("opt", "x"), ("opt[a]", "1")]) == {"opt": {"a": "1"}}


class TestRequestObjects:
    def test_is_post_ignores_case(self) -> None:
        assert AdminRequest(script="options.php", method="post").is_post
        assert not AdminRequest(script="options.php").is_post

    def test_form_data_decodes_pairs(self) -> None:
        request = AdminRequest(script="options.php", method="POST", form=[("opt[a]", "1")])

        assert request.form_data() == {"opt": {"a": "1"}}

    def test_response_location(self) -> None:
        assert AdminResponse().location is None
        assert AdminResponse(status=303, headers={"Location": "/x"}).location == "/x"


class TestQueryHelpers:
    def test_add_query_arg_appends(self) -> None:
        assert add_query_arg("/wp-admin/options-general.php?page=translit", tab="tables") == (
            "/wp-admin/options-general.php?page=translit&tab=tables"
        )

    def test_add_query_arg_replaces_existing(self) -> None:
        assert add_query_arg("/x?tab=a&page=p", tab="b") == "/x?tab=b&page=p"

    def test_add_query_arg_without_query(self) -> None:
        assert add_query_arg("http://localhost/wp-admin/", ver="1.0") == "http://localhost/wp-admin/?ver=1.0"

    def test_query_from_mapping_stringifies(self) -> None:
        assert query_from_mapping({"page": "translit", "n": 2}) == {"page": "translit", "n": "2"}
