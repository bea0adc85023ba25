from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .bootstrap import create_host
from .config import AppConfig, load_config
from .host import AdminHost
from .request import AdminRequest
from .summary_table import SettingsTableRenderer
from .tabs import TabGroup
from .version import __version__

LOGGER = logging.getLogger(__name__)
CONSOLE = Console()


def configure_logging(verbose: bool = False, log_level: str | None = None) -> None:
    """Install a Rich console handler on the root logger."""
    if log_level:
        level = getattr(logging, log_level.upper(), logging.INFO)
    else:
        level = logging.DEBUG if verbose else logging.INFO

    handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # Keep the web stack quiet unless debugging.
    for noisy in ("uvicorn.access", "watchfiles"):
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))


def _load_app_config(args: argparse.Namespace) -> AppConfig:
    config = load_config(args.config) if args.config is not None else AppConfig()
    if config.host.debug and not args.log_level:
        logging.getLogger().setLevel(logging.DEBUG)
    return config


def _tab_groups(host: AdminHost) -> list[TabGroup]:
    return [loaded for loaded in host.loaded.values() if isinstance(loaded, TabGroup)]


def _find_group(host: AdminHost, plugin: str | None) -> TabGroup | None:
    groups = [
        group
        for group in _tab_groups(host)
        if plugin is None or plugin in (group.plugin.basename, group.plugin.slug)
    ]
    return groups[0] if groups else None


def _parse_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def run_serve(args: argparse.Namespace) -> int:
    configure_logging(args.verbose, args.log_level)
    config = _load_app_config(args)

    from .gui import run_admin

    host = create_host(config)
    run_admin(config, host)
    return 0


def run_show(args: argparse.Namespace) -> int:
    configure_logging(args.verbose, args.log_level)
    host = create_host(_load_app_config(args))
    try:
        host.boot(AdminRequest(script="index.php"))
        groups = _tab_groups(host)
        if args.option:
            groups = [group for group in groups if group.store.option_name == args.option]
        if not groups:
            CONSOLE.print("[red]No settings screen found[/red]")
            return 1

        renderer = SettingsTableRenderer(CONSOLE)
        for group in groups:
            form_fields: dict[str, Any] = {}
            for page in group:
                form_fields.update(page.form_fields())
            renderer.render(group.store.option_name, group.store.as_dict(), form_fields)
        return 0
    finally:
        host.options.close()


def run_render(args: argparse.Namespace) -> int:
    configure_logging(args.verbose, args.log_level)
    host = create_host(_load_app_config(args))
    try:
        host.boot(AdminRequest(script="index.php"))
        group = _find_group(host, args.plugin)
        if group is None:
            CONSOLE.print("[red]No settings screen found[/red]")
            return 1

        slug = group.root.option_page()
        menu_page = host.menu.get(slug)
        script = menu_page.script if menu_page is not None else group.root.parent_slug()
        query = {"page": slug}
        if args.tab:
            query["tab"] = args.tab.lower()

        response = host.handle(AdminRequest(script=script, query=query))
        if response.status >= 400:
            CONSOLE.print(f"[red]Request failed with status {response.status}[/red]")
            return 1

        # Raw HTML, bypassing Rich markup.
        sys.stdout.write("\n".join([*response.styles, response.body]) + "\n")
        return 0
    finally:
        host.options.close()


def run_set(args: argparse.Namespace) -> int:
    configure_logging(args.verbose, args.log_level)
    host = create_host(_load_app_config(args))
    try:
        host.boot(AdminRequest(script="index.php"))
        group = _find_group(host, args.plugin)
        owner = None
        if group is not None:
            owner = next((page for page in group if args.key in page.form_fields()), None)
        if group is None or owner is None:
            CONSOLE.print(f"[red]Unknown setting {escape(args.key)!r}[/red]")
            return 1

        # Boot as the owning tab so its pre-save filter is registered.
        query = {"page": owner.option_page()}
        if owner.is_tab():
            query["tab"] = owner.get_class_name().lower()
        menu_page = host.menu.get(owner.option_page())
        script = menu_page.script if menu_page is not None else "index.php"
        host.boot(AdminRequest(script=script, query=query))
        group = _find_group(host, args.plugin)
        page = next(page for page in group if page.get_class_name() == owner.get_class_name())

        page.update_option(args.key, _parse_value(args.value))
        CONSOLE.print(f"[green]✓[/green] {escape(args.key)} = {escape(repr(page.get(args.key)))}")
        return 0
    finally:
        host.options.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="optionpages", description="Tabbed plugin settings pages.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        type=Path,
        default=Path(os.environ["OPTIONPAGES_CONFIG"]) if os.environ.get("OPTIONPAGES_CONFIG") else None,
        help="Path to the YAML configuration (defaults to $OPTIONPAGES_CONFIG)",
    )
    common.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    common.add_argument("--log-level", help="Explicit log level (overrides --verbose)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", parents=[common], help="Serve the web admin")
    serve.set_defaults(func=run_serve)

    show = subparsers.add_parser("show", parents=[common], help="Print stored settings as a table")
    show.add_argument("--option", help="Only show this option name")
    show.set_defaults(func=run_show)

    render = subparsers.add_parser("render", parents=[common], help="Print the HTML of a settings tab")
    render.add_argument("--tab", help="Tab to render (class name, case-insensitive)")
    render.add_argument("--plugin", help="Plugin basename or slug")
    render.set_defaults(func=run_render)

    set_cmd = subparsers.add_parser("set", parents=[common], help="Update one setting")
    set_cmd.add_argument("key")
    set_cmd.add_argument("value", help="JSON value, or a plain string")
    set_cmd.add_argument("--plugin", help="Plugin basename or slug")
    set_cmd.set_defaults(func=run_set)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except ValueError as exc:
        CONSOLE.print(f"[red]Configuration error:[/red] {exc}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
