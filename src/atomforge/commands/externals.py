# src/atomforge/commands/externals.py
"""External library commands - registry and per-game installs."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from atomforge.commands.base import ExternalReadResult, InstalledResult, RegistryResult, failure
from atomforge.commands.session import open_forge, run
from atomforge.forge import Forge
from atomforge.models import RegistryEntry


def registry(
    *,
    forge: Forge | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> RegistryResult:
    """List the libraries games can install."""
    try:
        with open_forge(forge, data_dir, config_path) as f:
            entries = f.externals.list_registry()
    except Exception as e:
        return failure(RegistryResult, e)
    return RegistryResult(success=True, entries=entries)


def register(
    entry: RegistryEntry,
    *,
    forge: Forge | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> RegistryResult:
    """Add or replace a registry entry."""
    try:
        with open_forge(forge, data_dir, config_path) as f:
            f.externals.register(entry)
    except Exception as e:
        return failure(RegistryResult, e)
    return RegistryResult(success=True, entries=[entry])


def installed(
    game: str,
    *,
    forge: Forge | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> InstalledResult:
    """List the libraries installed in a game."""
    try:
        with open_forge(forge, data_dir, config_path) as f:
            externals = f.externals.list_installed(f.resolve_game(game).id)
    except Exception as e:
        return failure(InstalledResult, e, game=game)
    return InstalledResult(success=True, game=game, externals=externals)


def read(
    game: str,
    names: Sequence[str],
    *,
    forge: Forge | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> ExternalReadResult:
    """Read installed libraries with their API surface. Other names are reported as missing."""
    try:
        with open_forge(forge, data_dir, config_path) as f:
            externals = f.externals.read(f.resolve_game(game).id, list(names))
    except Exception as e:
        return failure(ExternalReadResult, e, game=game)
    found = {ext.name for ext in externals}
    missing = [name for name in dict.fromkeys(names) if name not in found]
    return ExternalReadResult(success=True, game=game, externals=externals, missing=missing)


def install(
    game: str,
    name: str,
    *,
    forge: Forge | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> InstalledResult:
    """Install a registry library into a game and rebuild its manifest."""
    try:
        with open_forge(forge, data_dir, config_path) as f:
            game_id = f.resolve_game(game).id
            external = run(f, lambda: f.externals.install(game_id, name))
    except Exception as e:
        return failure(InstalledResult, e, game=game)
    return InstalledResult(success=True, game=game, externals=[external])


def uninstall(
    game: str,
    name: str,
    *,
    forge: Forge | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> InstalledResult:
    """Remove a library from a game and rebuild its manifest."""
    try:
        with open_forge(forge, data_dir, config_path) as f:
            game_id = f.resolve_game(game).id
            run(f, lambda: f.externals.uninstall(game_id, name))
    except Exception as e:
        return failure(InstalledResult, e, game=game)
    return InstalledResult(success=True, game=game)
