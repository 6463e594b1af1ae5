# src/atomforge/stores/sqlite_game.py
"""SQLite game store implementation."""

import sqlite3
from datetime import UTC, datetime
from pathlib import Path

from atomforge.models import Game
from atomforge.stores.base import GameStore

_GAME_COLUMNS = "id, name, description, active_build_id, created_at, updated_at"


class SQLiteGameStore(GameStore):
    """SQLite-backed game store."""

    def __init__(self, db_path: str) -> None:
        """Initialize the game store.

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
                CREATE TABLE IF NOT EXISTS games (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL UNIQUE,
                    description TEXT,
                    active_build_id TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

    def _row_to_game(self, row: tuple) -> Game:
        return Game(
            id=row[0],
            name=row[1],
            description=row[2],
            active_build_id=row[3],
            created_at=datetime.fromisoformat(row[4]),
            updated_at=datetime.fromisoformat(row[5]),
        )

    def create(self, name: str, description: str | None = None) -> Game:
        """Create a game. Raises sqlite3.IntegrityError on a duplicate name."""
        game = Game(name=name, description=description)
        with sqlite3.connect(self._db_path) as conn:
            conn.execute(
                f"INSERT INTO games ({_GAME_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",
                (
                    game.id,
                    game.name,
                    game.description,
                    None,
                    game.created_at.isoformat(),
                    game.updated_at.isoformat(),
                ),
            )
        return game

    def get(self, game_id: str) -> Game | None:
        """Retrieve a game by ID. Returns None if not found."""
        with sqlite3.connect(self._db_path) as conn:
            row = conn.execute(
                f"SELECT {_GAME_COLUMNS} FROM games WHERE id = ?", (game_id,)
            ).fetchone()
        return self._row_to_game(row) if row else None

    def get_by_name(self, name: str) -> Game | None:
        """Retrieve a game by name. Returns None if not found."""
        with sqlite3.connect(self._db_path) as conn:
            row = conn.execute(
                f"SELECT {_GAME_COLUMNS} FROM games WHERE name = ?", (name,)
            ).fetchone()
        return self._row_to_game(row) if row else None

    def list_games(self) -> list[Game]:
        """List all games, oldest first."""
        with sqlite3.connect(self._db_path) as conn:
            cursor = conn.execute(f"SELECT {_GAME_COLUMNS} FROM games ORDER BY created_at, rowid")
            return [self._row_to_game(row) for row in cursor.fetchall()]

    def set_active_build(self, game_id: str, build_id: str) -> None:
        """Point the game at a build. Last writer wins."""
        now = datetime.now(UTC).isoformat()
        with sqlite3.connect(self._db_path) as conn:
            conn.execute(
                "UPDATE games SET active_build_id = ?, updated_at = ? WHERE id = ?",
                (build_id, now, game_id),
            )
