# src/atomforge/stores/__init__.py
"""Storage abstractions for Atomforge."""

from atomforge.stores.base import (
    AtomIndex,
    AtomStore,
    BlobStore,
    BuildStore,
    ExternalStore,
    GameStore,
)
from atomforge.stores.blob import LocalBlobStore
from atomforge.stores.chroma import ChromaAtomIndex
from atomforge.stores.sqlite_atom import SQLiteAtomStore
from atomforge.stores.sqlite_build import SQLiteBuildStore
from atomforge.stores.sqlite_external import SQLiteExternalStore
from atomforge.stores.sqlite_game import SQLiteGameStore

__all__ = [
    "AtomIndex",
    "AtomStore",
    "BlobStore",
    "BuildStore",
    "ExternalStore",
    "GameStore",
    "ChromaAtomIndex",
    "LocalBlobStore",
    "SQLiteAtomStore",
    "SQLiteBuildStore",
    "SQLiteExternalStore",
    "SQLiteGameStore",
]
