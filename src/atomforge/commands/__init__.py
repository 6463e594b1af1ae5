# src/atomforge/commands/__init__.py
"""UI-agnostic command layer for Atomforge.

Command functions return result dataclasses instead of raising, so any
transport (the CLI, an HTTP handler, an agent tool) can render them.

Usage:
    from atomforge.commands import atoms, builds, games

    games.create("asteroids")
    atoms.put("asteroids", "math_clamp", code, "util")
    result = builds.build("asteroids")
"""

from atomforge.commands import atoms, builds, config_cmd, externals, games
from atomforge.commands.base import (
    BuildCommandResult,
    BuildListResult,
    BuildShowResult,
    CommandResult,
    ConfigResult,
    DeleteResult,
    ExternalReadResult,
    ErrorKind,
    ForgeUnavailable,
    GameListResult,
    GameResult,
    InstalledResult,
    PutResult,
    ReadResult,
    RegistryResult,
    RollbackCommandResult,
    SearchResult,
    SettingInfo,
    StructureResult,
    classify_error,
)

__all__ = [
    # Base types
    "CommandResult",
    "ErrorKind",
    "ForgeUnavailable",
    "classify_error",
    # Result types
    "GameResult",
    "GameListResult",
    "StructureResult",
    "ReadResult",
    "PutResult",
    "DeleteResult",
    "SearchResult",
    "BuildCommandResult",
    "BuildListResult",
    "BuildShowResult",
    "RollbackCommandResult",
    "RegistryResult",
    "InstalledResult",
    "ExternalReadResult",
    "ConfigResult",
    "SettingInfo",
    # Command modules
    "games",
    "atoms",
    "builds",
    "externals",
    "config_cmd",
]
