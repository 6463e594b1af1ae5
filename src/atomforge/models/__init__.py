# src/atomforge/models/__init__.py
"""Data models for Atomforge."""

from atomforge.models.atom import (
    ATOM_NAME_PATTERN,
    Atom,
    AtomSearchResult,
    AtomSummary,
    AtomType,
    Port,
    format_signature,
)
from atomforge.models.build import (
    AtomSnapshot,
    Build,
    BuildStatus,
    BuildSummary,
    Dependency,
    SnapshotAtom,
)
from atomforge.models.external import InstalledExternal, RegistryEntry
from atomforge.models.game import GAME_NAME_PATTERN, Game
from atomforge.models.results import BuildResult, RollbackResult, UpsertResult

__all__ = [
    "ATOM_NAME_PATTERN",
    "GAME_NAME_PATTERN",
    "Atom",
    "AtomSearchResult",
    "AtomSnapshot",
    "AtomSummary",
    "AtomType",
    "Build",
    "BuildResult",
    "BuildStatus",
    "BuildSummary",
    "Dependency",
    "Game",
    "InstalledExternal",
    "Port",
    "RegistryEntry",
    "RollbackResult",
    "SnapshotAtom",
    "UpsertResult",
    "format_signature",
]
