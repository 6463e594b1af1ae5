# src/atomforge/stores/sqlite_atom.py
"""SQLite atom store implementation."""

import json
import sqlite3
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

from atomforge.models import Atom, Dependency, Port, SnapshotAtom
from atomforge.stores.base import AtomStore

_ATOM_COLUMNS = "name, type, code, description, inputs, outputs, version"


def _dump_ports(ports: Sequence[Port]) -> str:
    return json.dumps([p.model_dump(exclude_none=True) for p in ports])


def _load_ports(raw: str | None) -> list[Port]:
    return [Port(**p) for p in json.loads(raw or "[]")]


class SQLiteAtomStore(AtomStore):
    """SQLite-based atom and dependency edge store.

    Multi-statement writes (upsert with edge replacement, delete, replace_all)
    run inside one connection context, which commits them as a single
    transaction or rolls all of them back.
    """

    def __init__(self, db_path: str) -> None:
        """Initialize the SQLite atom store."""
        self.db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        """Create tables if they don't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS atoms (
                    game_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    type TEXT NOT NULL,
                    code TEXT NOT NULL,
                    description TEXT,
                    inputs TEXT NOT NULL DEFAULT '[]',
                    outputs TEXT NOT NULL DEFAULT '[]',
                    version INTEGER NOT NULL DEFAULT 1,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (game_id, name)
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS atom_dependencies (
                    game_id TEXT NOT NULL,
                    atom_name TEXT NOT NULL,
                    depends_on TEXT NOT NULL,
                    PRIMARY KEY (game_id, atom_name, depends_on)
                )
            """)
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_dep_target "
                "ON atom_dependencies(game_id, depends_on)"
            )
            conn.commit()

    def _row_to_atom(self, row: tuple, depends_on: list[str]) -> Atom:
        return Atom(
            name=row[0],
            type=row[1],
            code=row[2],
            description=row[3],
            inputs=_load_ports(row[4]),
            outputs=_load_ports(row[5]),
            version=row[6],
            depends_on=depends_on,
        )

    def _deps_by_atom(self, conn: sqlite3.Connection, game_id: str) -> dict[str, list[str]]:
        cursor = conn.execute(
            "SELECT atom_name, depends_on FROM atom_dependencies WHERE game_id = ? ORDER BY rowid",
            (game_id,),
        )
        deps: dict[str, list[str]] = {}
        for atom_name, depends_on in cursor.fetchall():
            deps.setdefault(atom_name, []).append(depends_on)
        return deps

    def list_atoms(self, game_id: str, type_filter: str | None = None) -> list[Atom]:
        """List all atoms of a game with their dependencies, in creation order."""
        query = f"SELECT {_ATOM_COLUMNS} FROM atoms WHERE game_id = ?"
        params: tuple = (game_id,)
        if type_filter:
            query += " AND type = ?"
            params = (game_id, type_filter)
        with sqlite3.connect(self.db_path) as conn:
            rows = conn.execute(query + " ORDER BY rowid", params).fetchall()
            deps = self._deps_by_atom(conn, game_id)
        return [self._row_to_atom(row, deps.get(row[0], [])) for row in rows]

    def get_many(self, game_id: str, names: Sequence[str]) -> list[Atom]:
        """Retrieve atoms by name. Skips missing atoms."""
        if not names:
            return []
        placeholders = ",".join("?" * len(names))
        with sqlite3.connect(self.db_path) as conn:
            rows = conn.execute(
                f"SELECT {_ATOM_COLUMNS} FROM atoms "
                f"WHERE game_id = ? AND name IN ({placeholders}) ORDER BY rowid",
                (game_id, *names),
            ).fetchall()
            deps = self._deps_by_atom(conn, game_id)
        return [self._row_to_atom(row, deps.get(row[0], [])) for row in rows]

    def existing_names(self, game_id: str, names: Sequence[str]) -> set[str]:
        """Return the subset of names that exist in the game."""
        if not names:
            return set()
        placeholders = ",".join("?" * len(names))
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                f"SELECT name FROM atoms WHERE game_id = ? AND name IN ({placeholders})",
                (game_id, *names),
            )
            return {row[0] for row in cursor.fetchall()}

    def list_dependents(self, game_id: str, name: str) -> list[str]:
        """List the other atoms that depend on `name`."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                "SELECT atom_name FROM atom_dependencies "
                "WHERE game_id = ? AND depends_on = ? AND atom_name != ? ORDER BY rowid",
                (game_id, name, name),
            )
            return [row[0] for row in cursor.fetchall()]

    def upsert(self, game_id: str, atom: Atom, dependencies: Sequence[str]) -> int:
        """Insert or replace an atom and all of its outgoing edges atomically."""
        now = datetime.now(UTC).isoformat()
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO atoms
                    (game_id, name, type, code, description, inputs, outputs, version, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, 1, ?)
                ON CONFLICT (game_id, name) DO UPDATE SET
                    type = excluded.type,
                    code = excluded.code,
                    description = excluded.description,
                    inputs = excluded.inputs,
                    outputs = excluded.outputs,
                    version = atoms.version + 1,
                    updated_at = excluded.updated_at
                """,
                (
                    game_id,
                    atom.name,
                    atom.type,
                    atom.code,
                    atom.description,
                    _dump_ports(atom.inputs),
                    _dump_ports(atom.outputs),
                    now,
                ),
            )
            conn.execute(
                "DELETE FROM atom_dependencies WHERE game_id = ? AND atom_name = ?",
                (game_id, atom.name),
            )
            if dependencies:
                conn.executemany(
                    "INSERT INTO atom_dependencies (game_id, atom_name, depends_on) "
                    "VALUES (?, ?, ?)",
                    [(game_id, atom.name, dep) for dep in dependencies],
                )
            row = conn.execute(
                "SELECT version FROM atoms WHERE game_id = ? AND name = ?",
                (game_id, atom.name),
            ).fetchone()
            conn.commit()
        return int(row[0])

    def delete(self, game_id: str, name: str) -> bool:
        """Delete an atom and its outgoing edges. Returns False if absent."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                "DELETE FROM atoms WHERE game_id = ? AND name = ?",
                (game_id, name),
            )
            conn.execute(
                "DELETE FROM atom_dependencies WHERE game_id = ? AND atom_name = ?",
                (game_id, name),
            )
            conn.commit()
            return cursor.rowcount > 0

    def replace_all(
        self,
        game_id: str,
        atoms: Sequence[SnapshotAtom],
        dependencies: Sequence[Dependency],
    ) -> None:
        """Replace every atom and edge of a game in a single transaction."""
        now = datetime.now(UTC).isoformat()
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DELETE FROM atom_dependencies WHERE game_id = ?", (game_id,))
            conn.execute("DELETE FROM atoms WHERE game_id = ?", (game_id,))
            conn.executemany(
                """
                INSERT INTO atoms
                    (game_id, name, type, code, description, inputs, outputs, version, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, 1, ?)
                """,
                [
                    (
                        game_id,
                        a.name,
                        a.type,
                        a.code,
                        a.description,
                        _dump_ports(a.inputs),
                        _dump_ports(a.outputs),
                        now,
                    )
                    for a in atoms
                ],
            )
            conn.executemany(
                "INSERT INTO atom_dependencies (game_id, atom_name, depends_on) VALUES (?, ?, ?)",
                [(game_id, d.atom_name, d.depends_on) for d in dependencies],
            )
            conn.commit()

    def count_atoms(self, game_id: str) -> int:
        """Count the atoms in a game."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute("SELECT COUNT(name) FROM atoms WHERE game_id = ?", (game_id,))
            count = cursor.fetchone()
            return count[0] if count else 0
