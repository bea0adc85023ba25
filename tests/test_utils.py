from __future__ import annotations

import pytest

from optionpages.utils import (
    ensure_directory,
    env_bool,
    env_list,
    expand_env,
    load_yaml_file,
    sanitize_key,
    validate_url,
)


def test_sanitize_key_lowercases_and_strips() -> None:
    assert sanitize_key("My Plugin.php!") == "mypluginphp"
    assert sanitize_key("edit_tags-2") == "edit_tags-2"


def test_ensure_directory_creates_parents(tmp_path) -> None:
    target = tmp_path / "a" / "b"

    ensure_directory(target)
    ensure_directory(target)

    assert target.is_dir()


def test_expand_env_walks_nested_values(monkeypatch) -> None:
    monkeypatch.setenv("OPTIONPAGES_TEST_SECRET", "s3cret")

    data = {"host": {"secret_key": "$OPTIONPAGES_TEST_SECRET"}, "list": ["${OPTIONPAGES_TEST_SECRET}", 1]}

    assert expand_env(data) == {"host": {"secret_key": "s3cret"}, "list": ["s3cret", 1]}


def test_load_yaml_file_expands_env(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("OPTIONPAGES_TEST_PORT", "9000")
    path = tmp_path / "config.yaml"
    path.write_text("server:\n  port: ${OPTIONPAGES_TEST_PORT}\n", encoding="utf-8")

    assert load_yaml_file(path) == {"server": {"port": "9000"}}


def test_load_yaml_file_empty_document(tmp_path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert load_yaml_file(path) == {}


class TestEnvBool:
    @pytest.mark.parametrize("value", ["true", "True", "TRUE", "1", "yes", "YES", "on", "  ON  "])
    def test_parses_truthy_values(self, monkeypatch, value: str) -> None:
        monkeypatch.setenv("TEST_BOOL", value)
        assert env_bool("TEST_BOOL") is True

    @pytest.mark.parametrize("value", ["false", "False", "FALSE", "0", "no", "NO", "off", "OFF"])
    def test_parses_falsy_values(self, monkeypatch, value: str) -> None:
        monkeypatch.setenv("TEST_BOOL", value)
        assert env_bool("TEST_BOOL") is False

    @pytest.mark.parametrize("value", ["maybe", ""])
    def test_returns_none_for_unrecognized(self, monkeypatch, value: str) -> None:
        monkeypatch.setenv("TEST_BOOL", value)
        assert env_bool("TEST_BOOL") is None

    def test_returns_none_when_not_set(self, monkeypatch) -> None:
        monkeypatch.delenv("NONEXISTENT_VAR", raising=False)
        assert env_bool("NONEXISTENT_VAR") is None


class TestEnvList:
    def test_parses_comma_separated(self, monkeypatch) -> None:
        monkeypatch.setenv("TEST_LIST", "read, manage_options")
        assert env_list("TEST_LIST") == ["read", "manage_options"]

    def test_filters_empty_parts(self, monkeypatch) -> None:
        monkeypatch.setenv("TEST_LIST", "a,,b,  ,c")
        assert env_list("TEST_LIST") == ["a", "b", "c"]

    def test_returns_empty_list_for_empty_value(self, monkeypatch) -> None:
        monkeypatch.setenv("TEST_LIST", "")
        assert env_list("TEST_LIST") == []

    def test_returns_none_when_not_set(self, monkeypatch) -> None:
        monkeypatch.delenv("NONEXISTENT_VAR", raising=False)
        assert env_list("NONEXISTENT_VAR") is None


class TestValidateUrl:
    @pytest.mark.parametrize("url", ["http://localhost:8080", "https://example.com/wp"])
    def test_accepts_http_urls(self, url: str) -> None:
        assert validate_url(url) is True

    @pytest.mark.parametrize("url", ["localhost:8080", "file:///etc/passwd", "", None, "http://"])
    def test_rejects_everything_else(self, url) -> None:
        assert validate_url(url) is False
