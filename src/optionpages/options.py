"""SQLite-backed option store.

Each option is one named row whose value is a JSON document, so a settings page
can keep all of its fields in a single blob. Writes go through the
``pre_update_option_<name>`` filter of the attached hook registry.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .utils import ensure_directory

if TYPE_CHECKING:
    from .hooks import HookRegistry

LOGGER = logging.getLogger(__name__)


class OptionStore:
    """Persistent key-value store for named options.

    The database uses WAL mode so the web server's worker threads can read while
    a save is in progress.
    """

    SCHEMA_VERSION = 1

    def __init__(self, db_path: Path, hooks: HookRegistry | None = None) -> None:
        """Initialize the store with the given database path.

        Args:
            db_path: Path to the SQLite database file
            hooks: Registry used to filter writes; may be attached later
        """
        self._db_path = db_path
        self._local = threading.local()
        self.hooks = hooks
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create database connection for the current thread."""
        if not hasattr(self._local, "connection") or self._local.connection is None:
            ensure_directory(self._db_path.parent)
            self._local.connection = sqlite3.connect(self._db_path)
            self._local.connection.execute("PRAGMA journal_mode=WAL")
            self._local.connection.row_factory = sqlite3.Row
        return self._local.connection

    def _init_db(self) -> None:
        """Initialize database schema."""
        conn = self._get_connection()
        conn.execute("""
            CREATE TABLE IF NOT EXISTS options_schema_version (
                version INTEGER PRIMARY KEY
            )
        """)

        cursor = conn.execute("SELECT version FROM options_schema_version LIMIT 1")
        row = cursor.fetchone()
        current_version = row["version"] if row else 0

        if current_version < self.SCHEMA_VERSION:
            self._migrate_schema(current_version)

    def _migrate_schema(self, from_version: int) -> None:
        """Migrate schema from a previous version."""
        conn = self._get_connection()

        if from_version < 1:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS options (
                    option_name TEXT PRIMARY KEY,
                    option_value TEXT NOT NULL,
                    autoload INTEGER NOT NULL DEFAULT 1,
                    updated_at TEXT NOT NULL
                )
            """)

        conn.execute("DELETE FROM options_schema_version")
        conn.execute("INSERT INTO options_schema_version (version) VALUES (?)", (self.SCHEMA_VERSION,))
        conn.commit()

    def close(self) -> None:
        """Close the database connection for the current thread."""
        if hasattr(self._local, "connection") and self._local.connection is not None:
            self._local.connection.close()
            self._local.connection = None

    def get_option(self, name: str, default: Any = None) -> Any:
        """Return the decoded value of an option, or ``default`` when it is not stored."""
        conn = self._get_connection()
        row = conn.execute("SELECT option_value FROM options WHERE option_name = ?", (name,)).fetchone()
        if row is None:
            return default
        return json.loads(row["option_value"])

    def add_option(self, name: str, value: Any, autoload: bool = True) -> bool:
        """Store an option only if it does not exist yet.

        Returns:
            True if the option was created
        """
        conn = self._get_connection()
        cursor = conn.execute(
            """
            INSERT OR IGNORE INTO options (option_name, option_value, autoload, updated_at)
            VALUES (?, ?, ?, ?)
            """,
            (name, json.dumps(value), 1 if autoload else 0, datetime.now().isoformat()),
        )
        conn.commit()
        return cursor.rowcount > 0

    def update_option(self, name: str, value: Any) -> bool:
        """Filter and persist a new value for an option.

        The value is passed through ``pre_update_option_<name>`` and then
        ``pre_update_option`` with the previously stored value. Nothing is written
        when the filtered value equals the stored one.

        Returns:
            True if the stored value changed
        """
        old_value = self.get_option(name)

        if self.hooks is not None:
            value = self.hooks.apply_filters(f"pre_update_option_{name}", value, old_value, name)
            value = self.hooks.apply_filters("pre_update_option", value, name, old_value)

        if value == old_value:
            LOGGER.debug("Option '%s' unchanged, skipping write", name)
            return False

        conn = self._get_connection()
        conn.execute(
            """
            INSERT INTO options (option_name, option_value, autoload, updated_at)
            VALUES (?, ?, 1, ?)
            ON CONFLICT(option_name) DO UPDATE SET
                option_value = excluded.option_value,
                updated_at = excluded.updated_at
            """,
            (name, json.dumps(value), datetime.now().isoformat()),
        )
        conn.commit()
        LOGGER.info("Updated option '%s'", name)

        if self.hooks is not None:
            self.hooks.do_action(f"update_option_{name}", old_value, value, name)
            self.hooks.do_action("updated_option", name, old_value, value)
        return True

    def delete_option(self, name: str) -> bool:
        """Remove an option.

        Returns:
            True if a row was deleted
        """
        conn = self._get_connection()
        cursor = conn.execute("DELETE FROM options WHERE option_name = ?", (name,))
        conn.commit()
        return cursor.rowcount > 0

    def list_options(self) -> list[str]:
        """Return every stored option name in alphabetical order."""
        conn = self._get_connection()
        rows = conn.execute("SELECT option_name FROM options ORDER BY option_name").fetchall()
        return [row["option_name"] for row in rows]
