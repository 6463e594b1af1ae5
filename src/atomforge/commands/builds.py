# src/atomforge/commands/builds.py
"""Build commands - build, history, show and rollback."""

from __future__ import annotations

from pathlib import Path

from atomforge.commands.base import (
    BuildCommandResult,
    BuildListResult,
    BuildShowResult,
    RollbackCommandResult,
    failure,
)
from atomforge.commands.session import open_forge, run
from atomforge.forge import Forge
from atomforge.graph import CycleError


def build(
    game: str,
    *,
    forge: Forge | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> BuildCommandResult:
    """Build a game's bundle and make it the active build.

    On failure the build row is already finalized as `error`; for a cycle
    the result lists every atom left unsorted.
    """
    try:
        with open_forge(forge, data_dir, config_path) as f:
            game_id = f.resolve_game(game).id
            result = run(f, lambda: f.builder.build(game_id))
    except CycleError as e:
        return failure(BuildCommandResult, e, remaining=e.remaining)
    except Exception as e:
        return failure(BuildCommandResult, e)
    return BuildCommandResult(success=True, build=result, build_id=result.build_id)


def history(
    game: str,
    limit: int | None = None,
    *,
    forge: Forge | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> BuildListResult:
    """List a game's builds, newest first, and which one is active."""
    try:
        with open_forge(forge, data_dir, config_path) as f:
            resolved = f.resolve_game(game)
            builds = f.list_builds(resolved.id, limit)
    except Exception as e:
        return failure(BuildListResult, e, game=game)
    return BuildListResult(
        success=True,
        game=game,
        active_build_id=resolved.active_build_id,
        builds=builds,
    )


def show(
    game: str,
    build_id: str,
    *,
    forge: Forge | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> BuildShowResult:
    """Show one build, including its log and snapshot."""
    try:
        with open_forge(forge, data_dir, config_path) as f:
            found = f.get_build(f.resolve_game(game).id, build_id)
    except Exception as e:
        return failure(BuildShowResult, e)
    return BuildShowResult(success=True, build=found)


def rollback(
    game: str,
    build_id: str,
    *,
    forge: Forge | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> RollbackCommandResult:
    """Restore a game's atoms from a build snapshot and rebuild."""
    try:
        with open_forge(forge, data_dir, config_path) as f:
            game_id = f.resolve_game(game).id
            result = run(f, lambda: f.restorer.rollback(game_id, build_id))
    except Exception as e:
        return failure(RollbackCommandResult, e)
    return RollbackCommandResult(success=True, rollback=result)
