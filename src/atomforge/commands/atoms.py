# src/atomforge/commands/atoms.py
"""Atom commands - structure, read, put, delete and search.

Every command names the game it works on; atom names are unique per game.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from atomforge.commands.base import (
    DeleteResult,
    PutResult,
    ReadResult,
    SearchResult,
    StructureResult,
    failure,
)
from atomforge.commands.session import open_forge, run
from atomforge.exceptions import DependentsError
from atomforge.forge import Forge


def structure(
    game: str,
    type_filter: str | None = None,
    *,
    forge: Forge | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> StructureResult:
    """List the signatures and dependencies of a game's atoms.

    Args:
        game: Game name
        type_filter: Only list atoms of this type (core, feature, util)
        forge: Forge to use instead of one built from configuration
        data_dir: Override data directory
        config_path: Override config file path
    """
    try:
        with open_forge(forge, data_dir, config_path) as f:
            game_id = f.resolve_game(game).id
            atoms = f.editor.list_structure(game_id, type_filter)
    except Exception as e:
        return failure(StructureResult, e, game=game)
    return StructureResult(success=True, game=game, atoms=atoms)


def read(
    game: str,
    names: Sequence[str],
    *,
    forge: Forge | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> ReadResult:
    """Read full atom records. Names that do not exist are reported as missing."""
    try:
        with open_forge(forge, data_dir, config_path) as f:
            game_id = f.resolve_game(game).id
            atoms = f.editor.read_atoms(game_id, names)
    except Exception as e:
        return failure(ReadResult, e)
    found = {atom.name for atom in atoms}
    missing = [name for name in dict.fromkeys(names) if name not in found]
    return ReadResult(success=True, atoms=atoms, missing=missing)


def put(
    game: str,
    name: str,
    code: str,
    type: str,
    inputs: Sequence[Mapping[str, Any]] | None = None,
    outputs: Sequence[Mapping[str, Any]] | None = None,
    dependencies: Sequence[str] | None = None,
    description: str | None = None,
    *,
    forge: Forge | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> PutResult:
    """Create or update an atom, then let the requested rebuild finish.

    The rebuild's outcome does not affect the result: a failed rebuild is
    logged and recorded on its build row.
    """
    try:
        with open_forge(forge, data_dir, config_path) as f:
            game_id = f.resolve_game(game).id
            atom = run(
                f,
                lambda: f.editor.upsert_atom(
                    game_id,
                    name,
                    code,
                    type,
                    inputs=inputs,
                    outputs=outputs,
                    dependencies=dependencies,
                    description=description,
                ),
            )
    except Exception as e:
        return failure(PutResult, e)
    return PutResult(success=True, atom=atom)


def delete(
    game: str,
    name: str,
    *,
    forge: Forge | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> DeleteResult:
    """Delete an atom that no other atom depends on."""
    try:
        with open_forge(forge, data_dir, config_path) as f:
            game_id = f.resolve_game(game).id
            run(f, lambda: f.editor.delete_atom(game_id, name))
    except DependentsError as e:
        return failure(DeleteResult, e, name=name, dependents=e.dependents)
    except Exception as e:
        return failure(DeleteResult, e, name=name)
    return DeleteResult(success=True, name=name)


def search(
    game: str,
    query: str,
    limit: int | None = None,
    *,
    forge: Forge | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> SearchResult:
    """Find a game's atoms by meaning."""
    try:
        with open_forge(forge, data_dir, config_path) as f:
            game_id = f.resolve_game(game).id
            results = run(f, lambda: f.editor.search(game_id, query, limit))
    except Exception as e:
        return failure(SearchResult, e, query=query)
    return SearchResult(success=True, query=query, results=results)
