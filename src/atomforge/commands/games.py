# src/atomforge/commands/games.py
"""Game commands - create, list and show games."""

from __future__ import annotations

from pathlib import Path

from atomforge.commands.base import GameListResult, GameResult, failure
from atomforge.commands.session import open_forge
from atomforge.forge import Forge


def create(
    name: str,
    description: str | None = None,
    *,
    forge: Forge | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> GameResult:
    """Create a game.

    Args:
        name: Game name, also the path prefix of its published bundles
        description: Optional description
        forge: Forge to use instead of one built from configuration
        data_dir: Override data directory
        config_path: Override config file path

    Returns:
        GameResult with the new game
    """
    try:
        with open_forge(forge, data_dir, config_path) as f:
            game = f.create_game(name, description)
    except Exception as e:
        return failure(GameResult, e)
    return GameResult(success=True, game=game)


def list_games(
    *,
    forge: Forge | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> GameListResult:
    """List all games, oldest first."""
    try:
        with open_forge(forge, data_dir, config_path) as f:
            games = f.list_games()
    except Exception as e:
        return failure(GameListResult, e)
    return GameListResult(success=True, games=games)


def show(
    name: str,
    *,
    forge: Forge | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> GameResult:
    """Show a game with its atom count and installed libraries."""
    try:
        with open_forge(forge, data_dir, config_path) as f:
            game = f.resolve_game(name)
            atom_count = f.atom_store.count_atoms(game.id)
            installed = [ext.name for ext in f.externals.list_installed(game.id)]
    except Exception as e:
        return failure(GameResult, e)
    return GameResult(success=True, game=game, atom_count=atom_count, installed=installed)
