# src/atomforge/commands/base.py
"""Base types for the commands layer.

Commands never raise for expected failures. They return a result whose
`error_kind` tells a transport how to respond:

- validation: the request was unacceptable (bad request)
- not_found: a game, atom, build or registry entry is missing
- cycle: the dependency graph has a cycle
- upstream: storage, embedding or upload failure
- config: Atomforge is not configured correctly
"""

from __future__ import annotations

import dataclasses
import sqlite3
from dataclasses import dataclass, field
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ValidationError

from atomforge.exceptions import AtomValidationError, NotFoundError, UpstreamError
from atomforge.graph import CycleError
from atomforge.models import (
    Atom,
    AtomSearchResult,
    AtomSummary,
    Build,
    BuildResult,
    BuildSummary,
    Game,
    InstalledExternal,
    RegistryEntry,
    RollbackResult,
    UpsertResult,
)

ErrorKind = Literal["validation", "not_found", "cycle", "upstream", "config"]

R = TypeVar("R", bound="CommandResult")


class ForgeUnavailable(Exception):
    """Raised when no Forge can be built from the configuration."""


def classify_error(error: Exception) -> ErrorKind | None:
    """Map an exception to an error kind. Returns None for unexpected errors."""
    if isinstance(error, ForgeUnavailable):
        return "config"
    if isinstance(error, CycleError):
        return "cycle"
    if isinstance(error, AtomValidationError | ValidationError):
        return "validation"
    if isinstance(error, NotFoundError):
        return "not_found"
    if isinstance(error, UpstreamError | sqlite3.Error | OSError):
        return "upstream"
    return None


def failure(result_type: type[R], error: Exception, **fields: Any) -> R:
    """Build a failed result from an expected error. Unexpected errors are re-raised."""
    kind = classify_error(error)
    if kind is None:
        raise error
    return result_type(success=False, error=str(error), error_kind=kind, **fields)


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    return value


@dataclass
class CommandResult:
    """Base result type for commands."""

    success: bool
    error: str | None = None
    error_kind: ErrorKind | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to plain JSON-compatible data."""
        return {f.name: _jsonable(getattr(self, f.name)) for f in dataclasses.fields(self)}


@dataclass
class GameResult(CommandResult):
    """Result of creating or showing a game.

    Attributes:
        game: The game
        atom_count: Number of atoms in the game
        installed: Names of installed external libraries
    """

    game: Game | None = None
    atom_count: int = 0
    installed: list[str] = field(default_factory=list)


@dataclass
class GameListResult(CommandResult):
    games: list[Game] = field(default_factory=list)


@dataclass
class StructureResult(CommandResult):
    """Result of listing a game's atom structure."""

    game: str = ""
    atoms: list[AtomSummary] = field(default_factory=list)


@dataclass
class ReadResult(CommandResult):
    """Result of reading atoms.

    Attributes:
        atoms: Atoms that exist
        missing: Requested names that do not exist
    """

    atoms: list[Atom] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)


@dataclass
class PutResult(CommandResult):
    atom: UpsertResult | None = None


@dataclass
class DeleteResult(CommandResult):
    """Result of deleting an atom.

    Attributes:
        name: The atom that was deleted
        dependents: Atoms that blocked the delete, if any
    """

    name: str = ""
    dependents: list[str] = field(default_factory=list)


@dataclass
class SearchResult(CommandResult):
    query: str = ""
    results: list[AtomSearchResult] = field(default_factory=list)


@dataclass
class BuildCommandResult(CommandResult):
    """Result of the build command.

    Attributes:
        build: Build outcome on success
        build_id: ID of the failed build when a cycle or upload aborted it
        remaining: Atoms involved in a dependency cycle
    """

    build: BuildResult | None = None
    build_id: str | None = None
    remaining: list[str] = field(default_factory=list)


@dataclass
class BuildListResult(CommandResult):
    """Result of listing a game's build history."""

    game: str = ""
    active_build_id: str | None = None
    builds: list[BuildSummary] = field(default_factory=list)


@dataclass
class BuildShowResult(CommandResult):
    build: Build | None = None


@dataclass
class RollbackCommandResult(CommandResult):
    rollback: RollbackResult | None = None


@dataclass
class RegistryResult(CommandResult):
    entries: list[RegistryEntry] = field(default_factory=list)


@dataclass
class InstalledResult(CommandResult):
    game: str = ""
    externals: list[InstalledExternal] = field(default_factory=list)


@dataclass
class ExternalReadResult(CommandResult):
    """Result of reading installed externals.

    Attributes:
        game: Game name
        externals: Installed matches, with their API surface
        missing: Requested names not installed in the game
    """

    game: str = ""
    externals: list[InstalledExternal] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)


@dataclass
class SettingInfo:
    """Information about a single setting."""

    name: str
    value: str
    source: str  # "env var", "yaml", "default"


@dataclass
class ConfigResult(CommandResult):
    """Result of the config command.

    Attributes:
        provider: Provider type
        embedding_model: Embedding model name
        data_dir: Data directory path
        public_base_url: Base URL of published bundles, if configured
        settings: Behavioral settings with their sources
        config_path: Path to config file (if found)
        warnings: Unknown keys found in the config file
    """

    provider: str = "litellm"
    embedding_model: str = ""
    data_dir: str = ""
    public_base_url: str | None = None
    settings: list[SettingInfo] = field(default_factory=list)
    config_path: str | None = None
    warnings: list[str] = field(default_factory=list)
