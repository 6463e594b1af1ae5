# src/atomforge/stores/base.py
"""Abstract base classes for storage."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from atomforge.models import (
    Atom,
    AtomSnapshot,
    Build,
    BuildSummary,
    Dependency,
    Game,
    InstalledExternal,
    RegistryEntry,
    SnapshotAtom,
)


class GameStore(ABC):
    """Abstract base class for game (project scope) storage."""

    @abstractmethod
    def create(self, name: str, description: str | None = None) -> Game:
        """Create a game. Names are unique."""
        ...

    @abstractmethod
    def get(self, game_id: str) -> Game | None:
        """Retrieve a game by ID. Returns None if not found."""
        ...

    @abstractmethod
    def get_by_name(self, name: str) -> Game | None:
        """Retrieve a game by name. Returns None if not found."""
        ...

    @abstractmethod
    def list_games(self) -> list[Game]:
        """List all games, oldest first."""
        ...

    @abstractmethod
    def set_active_build(self, game_id: str, build_id: str) -> None:
        """Point the game at a build. Last writer wins."""
        ...


class AtomStore(ABC):
    """Abstract base class for atom and dependency edge storage.

    Every method is scoped by game ID; atom names are unique per game.
    """

    @abstractmethod
    def list_atoms(self, game_id: str, type_filter: str | None = None) -> list[Atom]:
        """List all atoms of a game with their dependencies, in creation order."""
        ...

    @abstractmethod
    def get_many(self, game_id: str, names: Sequence[str]) -> list[Atom]:
        """Retrieve atoms by name. Skips missing atoms."""
        ...

    @abstractmethod
    def existing_names(self, game_id: str, names: Sequence[str]) -> set[str]:
        """Return the subset of names that exist in the game."""
        ...

    @abstractmethod
    def list_dependents(self, game_id: str, name: str) -> list[str]:
        """List the other atoms that depend on `name`."""
        ...

    @abstractmethod
    def upsert(self, game_id: str, atom: Atom, dependencies: Sequence[str]) -> int:
        """Insert or replace an atom and all of its outgoing edges atomically.

        Returns:
            The stored version: 1 on insert, previous version + 1 on update.
        """
        ...

    @abstractmethod
    def delete(self, game_id: str, name: str) -> bool:
        """Delete an atom and its outgoing edges. Returns False if absent."""
        ...

    @abstractmethod
    def replace_all(
        self,
        game_id: str,
        atoms: Sequence[SnapshotAtom],
        dependencies: Sequence[Dependency],
    ) -> None:
        """Replace every atom and edge of a game in a single transaction."""
        ...

    @abstractmethod
    def count_atoms(self, game_id: str) -> int:
        """Count the atoms in a game."""
        ...


class BuildStore(ABC):
    """Abstract base class for build history.

    Builds are created in `building` state and finalized exactly once.
    Finalizing a build that already left `building` is a no-op.
    """

    @abstractmethod
    def create(self, game_id: str) -> Build:
        """Create a build in `building` state."""
        ...

    @abstractmethod
    def attach_snapshot(self, build_id: str, snapshot: AtomSnapshot) -> None:
        """Store the snapshot on a build that is still `building`."""
        ...

    @abstractmethod
    def finalize_success(
        self,
        build_id: str,
        atom_count: int,
        build_log: list[str],
        bundle_url: str | None,
    ) -> bool:
        """Move a build to `success`. Returns False if it was already final."""
        ...

    @abstractmethod
    def finalize_error(self, build_id: str, message: str) -> bool:
        """Move a build to `error`. Returns False if it was already final."""
        ...

    @abstractmethod
    def create_checkpoint(
        self,
        game_id: str,
        snapshot: AtomSnapshot,
        build_log: list[str],
    ) -> Build:
        """Insert an already-successful build holding a snapshot."""
        ...

    @abstractmethod
    def get(self, game_id: str, build_id: str) -> Build | None:
        """Retrieve a build of a game, including its snapshot."""
        ...

    @abstractmethod
    def list_builds(self, game_id: str, limit: int = 20) -> list[BuildSummary]:
        """List builds of a game, newest first."""
        ...


class ExternalStore(ABC):
    """Abstract base class for the external library registry and installs."""

    @abstractmethod
    def register(self, entry: RegistryEntry) -> None:
        """Add or replace a registry entry."""
        ...

    @abstractmethod
    def get_entry(self, name: str) -> RegistryEntry | None:
        """Retrieve a registry entry by name."""
        ...

    @abstractmethod
    def list_registry(self) -> list[RegistryEntry]:
        """List the registry, ordered by name."""
        ...

    @abstractmethod
    def install(self, game_id: str, name: str) -> InstalledExternal:
        """Install a registered library into a game."""
        ...

    @abstractmethod
    def uninstall(self, game_id: str, name: str) -> bool:
        """Remove a library from a game. Returns False if it was not installed."""
        ...

    @abstractmethod
    def list_installed(self, game_id: str) -> list[InstalledExternal]:
        """List a game's installed libraries in install order, without API surfaces."""
        ...

    @abstractmethod
    def read_installed(self, game_id: str, names: list[str]) -> list[InstalledExternal]:
        """Return the named libraries installed in a game, with their API surface.

        Names that are not installed are skipped.
        """
        ...


class AtomIndex(ABC):
    """Abstract base class for the atom embedding index."""

    @abstractmethod
    def upsert(self, game_id: str, name: str, embedding: list[float]) -> None:
        """Add or replace the embedding of one atom."""
        ...

    @abstractmethod
    def delete(self, game_id: str, name: str) -> None:
        """Remove the embedding of one atom."""
        ...

    @abstractmethod
    def replace_game(self, game_id: str, embeddings: dict[str, list[float]]) -> None:
        """Drop every embedding of a game and index the given ones."""
        ...

    @abstractmethod
    def search(
        self,
        game_id: str,
        embedding: list[float],
        threshold: float,
        limit: int,
    ) -> list[tuple[str, float]]:
        """Find similar atoms. Returns (name, similarity) pairs, most similar first."""
        ...


class BlobStore(ABC):
    """Abstract base class for artifact storage with public URLs."""

    @abstractmethod
    def upload(
        self,
        path: str,
        data: bytes,
        content_type: str,
        cache_control: str,
        overwrite: bool = True,
    ) -> None:
        """Write an object. Raises UploadError on failure."""
        ...

    @abstractmethod
    def public_url(self, path: str) -> str:
        """Return the public URL of an object."""
        ...
