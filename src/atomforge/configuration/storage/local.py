# src/atomforge/configuration/storage/local.py
"""Local filesystem storage configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from atomforge.configuration.base import StoreBundle


@dataclass(frozen=True)
class LocalStorage:
    """Local filesystem storage using SQLite, Chroma and plain files.

    All data is persisted under the specified directory:
    - atomforge.db: Games, atoms, edges, builds and externals (SQLite)
    - chroma/: Atom embeddings (ChromaDB)
    - bundles/: Published bundles and manifests

    Args:
        data_dir: Base directory for all storage files.
                  Created if it doesn't exist.
        public_base_url: URL the bundles/ directory is served from. Defaults
                         to file:// URLs.

    Example:
        storage = LocalStorage("./forge_data", public_base_url="https://cdn.example.com")
    """

    data_dir: str
    public_base_url: str | None = None

    def build_stores(self) -> StoreBundle:
        """Build all storage components, creating the data directory if needed."""
        from atomforge.stores import (
            ChromaAtomIndex,
            LocalBlobStore,
            SQLiteAtomStore,
            SQLiteBuildStore,
            SQLiteExternalStore,
            SQLiteGameStore,
        )

        Path(self.data_dir).mkdir(parents=True, exist_ok=True)
        db_path = os.path.join(self.data_dir, "atomforge.db")

        return StoreBundle(
            game_store=SQLiteGameStore(db_path),
            atom_store=SQLiteAtomStore(db_path),
            build_store=SQLiteBuildStore(db_path),
            external_store=SQLiteExternalStore(db_path),
            atom_index=ChromaAtomIndex(os.path.join(self.data_dir, "chroma")),
            blob_store=LocalBlobStore(
                os.path.join(self.data_dir, "bundles"),
                base_url=self.public_base_url,
            ),
        )
