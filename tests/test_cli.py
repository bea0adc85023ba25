from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from optionpages import cli
from optionpages.demo import OPTION_NAME
from optionpages.options import OptionStore


def _write_config(tmp_path: Path) -> Path:
    config_path = tmp_path / "optionpages.yaml"
    config_path.write_text(
        f"""
host:
  database: {tmp_path / "options.db"}
  secret_key: test-secret
""",
        encoding="utf-8",
    )
    return config_path


def _stored(tmp_path: Path) -> dict:
    store = OptionStore(tmp_path / "options.db")
    try:
        return store.get_option(OPTION_NAME)
    finally:
        store.close()


@pytest.fixture
def console(monkeypatch) -> io.StringIO:
    buffer = io.StringIO()
    monkeypatch.setattr("optionpages.cli.CONSOLE", Console(file=buffer, width=200, color_system=None))
    monkeypatch.setattr("optionpages.cli.configure_logging", lambda *args, **kwargs: None)
    return buffer


def test_command_is_required() -> None:
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


def test_parse_value_prefers_json() -> None:
    assert cli._parse_value("120") == 120
    assert cli._parse_value('["post"]') == ["post"]
    assert cli._parse_value("yes") == "yes"


def test_set_root_field(tmp_path, console) -> None:
    config_path = _write_config(tmp_path)

    assert cli.main(["set", "max_length", "120", "--config", str(config_path)]) == 0

    stored = _stored(tmp_path)
    assert stored["max_length"] == 120
    assert stored["fix_mac_filenames"] == "no"
    assert "max_length = 120" in console.getvalue()


def test_set_checkbox_goes_through_filter(tmp_path, console) -> None:
    config_path = _write_config(tmp_path)

    cli.main(["set", "fix_mac_filenames", "yes", "--config", str(config_path)])
    assert _stored(tmp_path)["fix_mac_filenames"] == "yes"

    cli.main(["set", "fix_mac_filenames", "on", "--config", str(config_path)])
    assert _stored(tmp_path)["fix_mac_filenames"] == "no"


def test_set_tab_field(tmp_path, console) -> None:
    config_path = _write_config(tmp_path)

    assert cli.main(["set", "background_post_types", '["attachment"]', "--config", str(config_path)]) == 0

    stored = _stored(tmp_path)
    assert stored["background_post_types"] == ["attachment"]
    assert stored["mode"] == "slugs"


def test_set_unknown_key(tmp_path, console) -> None:
    config_path = _write_config(tmp_path)

    assert cli.main(["set", "nope", "1", "--config", str(config_path)]) == 1
    assert "Unknown setting" in console.getvalue()


def test_show_prints_table(tmp_path, console) -> None:
    config_path = _write_config(tmp_path)

    assert cli.main(["show", "--config", str(config_path)]) == 0

    output = console.getvalue()
    assert f"Option: {OPTION_NAME}" in output
    assert "max_length" in output
    assert "background_post_types" in output


def test_show_unknown_option(tmp_path, console) -> None:
    config_path = _write_config(tmp_path)

    assert cli.main(["show", "--option", "missing", "--config", str(config_path)]) == 1


def test_render_tab(tmp_path, console, capsys) -> None:
    config_path = _write_config(tmp_path)

    assert cli.main(["render", "--tab", "Tables", "--config", str(config_path)]) == 0

    out = capsys.readouterr().out
    assert '<div class="ctl-settings-tabs">' in out
    assert f"{OPTION_NAME}[iso9]" in out
    assert "tables.min.css" in out


def test_render_unknown_plugin(tmp_path, console) -> None:
    config_path = _write_config(tmp_path)

    assert cli.main(["render", "--plugin", "other", "--config", str(config_path)]) == 1


def test_invalid_config_exit_code(tmp_path, console) -> None:
    config_path = tmp_path / "bad.yaml"
    config_path.write_text("server:\n  port: 0\n", encoding="utf-8")

    assert cli.main(["show", "--config", str(config_path)]) == 2
    assert "server.port" in console.getvalue()
