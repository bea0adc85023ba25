"""
Web admin for optionpages using NiceGUI.

Public API:
    - create_app: Register admin routes for an ``AdminHost``
    - run_admin: Serve the admin shell
"""

from __future__ import annotations

from .app import create_app, run_admin

__all__ = [
    "create_app",
    "run_admin",
]
