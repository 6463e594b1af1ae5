# src/atomforge/stores/sqlite_build.py
"""SQLite build history store implementation."""

import json
import sqlite3
from datetime import datetime
from pathlib import Path

from atomforge.models import AtomSnapshot, Build, BuildStatus, BuildSummary
from atomforge.stores.base import BuildStore

_BUILD_COLUMNS = (
    "id, game_id, status, bundle_url, atom_count, error_message, build_log, "
    "atom_snapshot, created_at"
)


class SQLiteBuildStore(BuildStore):
    """SQLite-backed build history.

    Snapshots are serialized into the build row itself, so every build owns
    an independent copy.
    """

    def __init__(self, db_path: str) -> None:
        """Initialize the build store.

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
                CREATE TABLE IF NOT EXISTS builds (
                    id TEXT PRIMARY KEY,
                    game_id TEXT NOT NULL,
                    status TEXT NOT NULL,
                    bundle_url TEXT,
                    atom_count INTEGER,
                    error_message TEXT,
                    build_log TEXT NOT NULL DEFAULT '[]',
                    atom_snapshot TEXT,
                    created_at TEXT NOT NULL
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_build_game ON builds(game_id, created_at)")

    def _insert(self, build: Build) -> Build:
        with sqlite3.connect(self._db_path) as conn:
            conn.execute(
                f"INSERT INTO builds ({_BUILD_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    build.id,
                    build.game_id,
                    build.status.value,
                    build.bundle_url,
                    build.atom_count,
                    build.error_message,
                    json.dumps(build.build_log),
                    build.atom_snapshot.model_dump_json() if build.atom_snapshot else None,
                    build.created_at.isoformat(),
                ),
            )
        return build

    def create(self, game_id: str) -> Build:
        """Create a build in `building` state."""
        return self._insert(Build(game_id=game_id))

    def attach_snapshot(self, build_id: str, snapshot: AtomSnapshot) -> None:
        """Store the snapshot on a build that is still `building`."""
        with sqlite3.connect(self._db_path) as conn:
            conn.execute(
                "UPDATE builds SET atom_snapshot = ? WHERE id = ? AND status = ?",
                (snapshot.model_dump_json(), build_id, BuildStatus.BUILDING.value),
            )

    def finalize_success(
        self,
        build_id: str,
        atom_count: int,
        build_log: list[str],
        bundle_url: str | None,
    ) -> bool:
        """Move a build to `success`. Returns False if it was already final."""
        with sqlite3.connect(self._db_path) as conn:
            cursor = conn.execute(
                """
                UPDATE builds SET status = ?, atom_count = ?, build_log = ?, bundle_url = ?
                WHERE id = ? AND status = ?
                """,
                (
                    BuildStatus.SUCCESS.value,
                    atom_count,
                    json.dumps(build_log),
                    bundle_url,
                    build_id,
                    BuildStatus.BUILDING.value,
                ),
            )
            return cursor.rowcount > 0

    def finalize_error(self, build_id: str, message: str) -> bool:
        """Move a build to `error`. Returns False if it was already final."""
        with sqlite3.connect(self._db_path) as conn:
            cursor = conn.execute(
                "UPDATE builds SET status = ?, error_message = ? WHERE id = ? AND status = ?",
                (BuildStatus.ERROR.value, message, build_id, BuildStatus.BUILDING.value),
            )
            return cursor.rowcount > 0

    def create_checkpoint(
        self,
        game_id: str,
        snapshot: AtomSnapshot,
        build_log: list[str],
    ) -> Build:
        """Insert an already-successful build holding a snapshot."""
        return self._insert(
            Build(
                game_id=game_id,
                status=BuildStatus.SUCCESS,
                atom_count=len(snapshot.atoms),
                build_log=build_log,
                atom_snapshot=snapshot,
            )
        )

    def get(self, game_id: str, build_id: str) -> Build | None:
        """Retrieve a build of a game, including its snapshot."""
        with sqlite3.connect(self._db_path) as conn:
            row = conn.execute(
                f"SELECT {_BUILD_COLUMNS} FROM builds WHERE id = ? AND game_id = ?",
                (build_id, game_id),
            ).fetchone()
        if row is None:
            return None
        return Build(
            id=row[0],
            game_id=row[1],
            status=BuildStatus(row[2]),
            bundle_url=row[3],
            atom_count=row[4],
            error_message=row[5],
            build_log=json.loads(row[6] or "[]"),
            atom_snapshot=AtomSnapshot.model_validate_json(row[7]) if row[7] else None,
            created_at=datetime.fromisoformat(row[8]),
        )

    def list_builds(self, game_id: str, limit: int = 20) -> list[BuildSummary]:
        """List builds of a game, newest first."""
        with sqlite3.connect(self._db_path) as conn:
            cursor = conn.execute(
                """
                SELECT id, status, bundle_url, atom_count, error_message,
                       atom_snapshot IS NOT NULL, created_at
                FROM builds WHERE game_id = ?
                ORDER BY created_at DESC, rowid DESC
                LIMIT ?
                """,
                (game_id, limit),
            )
            return [
                BuildSummary(
                    id=row[0],
                    status=BuildStatus(row[1]),
                    bundle_url=row[2],
                    atom_count=row[3],
                    error_message=row[4],
                    has_snapshot=bool(row[5]),
                    created_at=datetime.fromisoformat(row[6]),
                )
                for row in cursor.fetchall()
            ]
