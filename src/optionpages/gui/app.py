"""
NiceGUI application serving the admin shell.

Admin scripts (``/wp-admin/<script>``) are rendered by the ``AdminHost`` and
embedded into a NiceGUI page; the settings form posts natively to
``/wp-admin/options.php`` and is redirected back after the save.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import Request
from fastapi.responses import HTMLResponse, RedirectResponse
from nicegui import app, ui

from ..request import AdminRequest, AdminResponse, query_from_mapping

if TYPE_CHECKING:
    from ..config import AppConfig
    from ..host import AdminHost

LOGGER = logging.getLogger(__name__)

ADMIN_PREFIX = "/wp-admin"


def create_app(host: AdminHost) -> None:
    """Register admin routes and plugin asset directories."""

    for plugin in host.plugins.values():
        if plugin.path is None or not plugin.url.startswith("/"):
            continue
        assets = plugin.path / "assets"
        if assets.is_dir():
            app.add_static_files(f"{plugin.url.rstrip('/')}/assets", assets)
            LOGGER.debug("Serving assets of %s from %s", plugin.basename, assets)

    @app.post(f"{ADMIN_PREFIX}/options.php")
    async def save_options(request: Request):
        """Settings form submission."""
        form = await request.form()
        response = host.handle(
            AdminRequest(
                script="options.php",
                method="POST",
                query=query_from_mapping(request.query_params),
                form=[(key, str(value)) for key, value in form.multi_items()],
            )
        )
        if response.location:
            return RedirectResponse(response.location, status_code=303)
        return HTMLResponse(response.body, status_code=response.status)

    @ui.page(f"{ADMIN_PREFIX}/{{script}}")
    def admin_page(script: str, request: Request) -> None:
        """Any admin script rendered by the host."""
        response = host.handle(AdminRequest(script=script, query=query_from_mapping(request.query_params)))
        _page_wrapper(host, response)

    @ui.page("/")
    def index_page() -> RedirectResponse:
        return RedirectResponse(host.admin_url("plugins.php"))


def _page_wrapper(host: AdminHost, response: AdminResponse) -> None:
    """Lay out the admin menu next to the rendered response."""
    for tag in response.styles:
        ui.add_head_html(tag)

    with ui.header().classes("items-center gap-4 bg-slate-800"):
        ui.label("Admin").classes("text-lg font-bold text-white")
        ui.link("Plugins", host.admin_url("plugins.php")).classes("text-white")
        for menu_page in host.menu.values():
            ui.link(menu_page.menu_title, host.menu_page_url(menu_page.menu_slug)).classes("text-white")

    with ui.column().classes("w-full max-w-5xl mx-auto p-4"):
        if response.status >= 400:
            ui.label(f"Error {response.status}").classes("text-xl font-bold text-red-600")
        ui.html(response.body, sanitize=False)


def run_admin(config: AppConfig, host: AdminHost) -> None:
    """Serve the admin shell until interrupted.

    Args:
        config: Application configuration (server address and title)
        host: Host with all plugins registered
    """
    create_app(host)

    @app.on_shutdown
    async def on_shutdown() -> None:
        LOGGER.info("Shutting down admin GUI...")
        host.options.close()

    LOGGER.info("Starting admin GUI on http://%s:%d%s/", config.server.host, config.server.port, ADMIN_PREFIX)
    ui.run(
        host=config.server.host,
        port=config.server.port,
        title=config.server.title,
        dark=False,
        reload=False,
        show=False,
    )
