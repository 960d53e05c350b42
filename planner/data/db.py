"""
Pregnancy Planner — Settings Database.

Sync credentials persist in SQLite across sessions. Every field edit is
written through immediately, so a crash never loses a typed token.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from planner.data.models import SyncSettings

logger = logging.getLogger(__name__)


class SettingsDB:
    """SQLite-backed key-value storage for sync settings."""

    def __init__(self, db_path: str | None = None) -> None:
        if db_path is None:
            from planner.config import settings
            db_path = settings.DATABASE_PATH

        self._db_path = db_path
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        """Create the settings table if it doesn't exist."""
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS settings (
                    key   TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)
        logger.debug("Settings table initialized at %s", self._db_path)

    def load(self) -> SyncSettings:
        """Return stored settings, falling back to defaults for missing keys."""
        with self._connect() as conn:
            rows = conn.execute("SELECT key, value FROM settings").fetchall()
        record = {row["key"]: row["value"] for row in rows}
        return SyncSettings.from_record(record)

    def save(self, sync_settings: SyncSettings) -> None:
        """Overwrite every stored field with the given settings."""
        record = sync_settings.to_record()
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO settings (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                list(record.items()),
            )
        logger.info(
            "Sync settings saved for %s/%s",
            sync_settings.owner or "-", sync_settings.repo or "-",
        )
