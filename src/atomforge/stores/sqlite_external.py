# src/atomforge/stores/sqlite_external.py
"""SQLite implementation of the external library registry."""

import json
import sqlite3
from datetime import UTC, datetime
from pathlib import Path

from atomforge.models import InstalledExternal, RegistryEntry
from atomforge.stores.base import ExternalStore

_ENTRY_COLUMNS = (
    "name, display_name, package_name, version, cdn_url, global_name, "
    "description, load_type, module_imports"
)


def _row_to_entry(row: tuple) -> dict:
    return {
        "name": row[0],
        "display_name": row[1],
        "package_name": row[2],
        "version": row[3],
        "cdn_url": row[4],
        "global_name": row[5],
        "description": row[6],
        "load_type": row[7] or "script",
        "module_imports": json.loads(row[8]) if row[8] else None,
    }


class SQLiteExternalStore(ExternalStore):
    """SQLite-backed registry of external libraries and per-game installs."""

    def __init__(self, db_path: str) -> None:
        """Initialize the store.

        Args:
            db_path: Path to SQLite database file
        """
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._db_path = db_path
        self._init_db()

    def _init_db(self) -> None:
        """Initialize the database schema."""
        with sqlite3.connect(self._db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS external_registry (
                    name TEXT PRIMARY KEY,
                    display_name TEXT NOT NULL,
                    package_name TEXT NOT NULL,
                    version TEXT NOT NULL,
                    cdn_url TEXT NOT NULL,
                    global_name TEXT NOT NULL,
                    description TEXT,
                    load_type TEXT NOT NULL DEFAULT 'script',
                    module_imports TEXT,
                    api_surface TEXT
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS game_externals (
                    game_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    installed_at TEXT NOT NULL,
                    PRIMARY KEY (game_id, name)
                )
            """)

    def register(self, entry: RegistryEntry) -> None:
        """Add or replace a registry entry."""
        with sqlite3.connect(self._db_path) as conn:
            conn.execute(
                f"INSERT OR REPLACE INTO external_registry ({_ENTRY_COLUMNS}, api_surface) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    entry.name,
                    entry.display_name,
                    entry.package_name,
                    entry.version,
                    entry.cdn_url,
                    entry.global_name,
                    entry.description,
                    entry.load_type,
                    json.dumps(entry.module_imports) if entry.module_imports else None,
                    entry.api_surface,
                ),
            )

    def get_entry(self, name: str) -> RegistryEntry | None:
        """Retrieve a registry entry by name."""
        with sqlite3.connect(self._db_path) as conn:
            row = conn.execute(
                f"SELECT {_ENTRY_COLUMNS} FROM external_registry WHERE name = ?", (name,)
            ).fetchone()
        return RegistryEntry(**_row_to_entry(row)) if row else None

    def list_registry(self) -> list[RegistryEntry]:
        """List the registry, ordered by name, without API surfaces."""
        with sqlite3.connect(self._db_path) as conn:
            cursor = conn.execute(f"SELECT {_ENTRY_COLUMNS} FROM external_registry ORDER BY name")
            return [RegistryEntry(**_row_to_entry(row)) for row in cursor.fetchall()]

    def install(self, game_id: str, name: str) -> InstalledExternal:
        """Install a registered library into a game.

        Raises sqlite3.IntegrityError if it is already installed.
        """
        now = datetime.now(UTC)
        with sqlite3.connect(self._db_path) as conn:
            conn.execute(
                "INSERT INTO game_externals (game_id, name, installed_at) VALUES (?, ?, ?)",
                (game_id, name, now.isoformat()),
            )
            row = conn.execute(
                f"SELECT {_ENTRY_COLUMNS} FROM external_registry WHERE name = ?", (name,)
            ).fetchone()
        return InstalledExternal(**_row_to_entry(row), installed_at=now)

    def uninstall(self, game_id: str, name: str) -> bool:
        """Remove a library from a game. Returns False if it was not installed."""
        with sqlite3.connect(self._db_path) as conn:
            cursor = conn.execute(
                "DELETE FROM game_externals WHERE game_id = ? AND name = ?",
                (game_id, name),
            )
            return cursor.rowcount > 0

    def list_installed(self, game_id: str) -> list[InstalledExternal]:
        """List a game's installed libraries in install order, without API surfaces."""
        columns = ", ".join(f"r.{c.strip()}" for c in _ENTRY_COLUMNS.split(","))
        with sqlite3.connect(self._db_path) as conn:
            cursor = conn.execute(
                f"""
                SELECT {columns}, g.installed_at
                FROM game_externals g JOIN external_registry r ON r.name = g.name
                WHERE g.game_id = ?
                ORDER BY g.installed_at, g.rowid
                """,
                (game_id,),
            )
            return [
                InstalledExternal(
                    **_row_to_entry(row[:9]),
                    installed_at=datetime.fromisoformat(row[9]),
                )
                for row in cursor.fetchall()
            ]

    def read_installed(self, game_id: str, names: list[str]) -> list[InstalledExternal]:
        """Return the named libraries installed in a game, with their API surface."""
        if not names:
            return []
        columns = ", ".join(f"r.{c.strip()}" for c in _ENTRY_COLUMNS.split(","))
        placeholders = ", ".join("?" for _ in names)
        with sqlite3.connect(self._db_path) as conn:
            cursor = conn.execute(
                f"""
                SELECT {columns}, g.installed_at, r.api_surface
                FROM game_externals g JOIN external_registry r ON r.name = g.name
                WHERE g.game_id = ? AND g.name IN ({placeholders})
                ORDER BY g.installed_at, g.rowid
                """,
                (game_id, *names),
            )
            return [
                InstalledExternal(
                    **_row_to_entry(row[:9]),
                    installed_at=datetime.fromisoformat(row[9]),
                    api_surface=row[10],
                )
                for row in cursor.fetchall()
            ]
