# src/atomforge/forge.py
"""Central Atomforge entry point."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from atomforge.builder import Builder
from atomforge.editor import AtomEditor
from atomforge.exceptions import AtomValidationError, NotFoundError
from atomforge.externals import ExternalsManager
from atomforge.models import GAME_NAME_PATTERN, Build, BuildSummary, Game
from atomforge.restorer import Restorer
from atomforge.settings import Settings
from atomforge.trigger import HTTPRebuildTrigger, LocalRebuildTrigger, RebuildTrigger

if TYPE_CHECKING:
    from atomforge.configuration import ProviderConfig, StorageConfig
    from atomforge.embedder import Embedder
    from atomforge.stores import (
        AtomIndex,
        AtomStore,
        BlobStore,
        BuildStore,
        ExternalStore,
        GameStore,
    )

logger = logging.getLogger(__name__)


class Forge:
    """Central configuration and factory for Atomforge components.

    Holds the stores, the embedder and the rebuild trigger, and exposes the
    editor, builder, restorer and externals manager built on top of them.

    Example (configuration objects):
        from atomforge import Forge, LiteLLMProvider, LocalStorage

        forge = Forge(
            provider=LiteLLMProvider(embedding="openai/text-embedding-3-small"),
            storage=LocalStorage("./forge_data"),
        )
        game = forge.create_game("asteroids")
        await forge.editor.upsert_atom(game.id, "math_clamp", code, "util")
        result = await forge.builder.build(game.id)

    Example (explicit stores):
        forge = Forge.from_stores(
            embedder=my_embedder,
            game_store=SQLiteGameStore("./data/atomforge.db"),
            ...
        )
    """

    def __init__(
        self,
        *,
        # EITHER a provider...
        provider: ProviderConfig | None = None,
        # ...OR an explicit embedder
        embedder: Embedder | None = None,
        # EITHER storage bundle...
        storage: StorageConfig | None = None,
        # ...OR explicit stores
        game_store: GameStore | None = None,
        atom_store: AtomStore | None = None,
        build_store: BuildStore | None = None,
        external_store: ExternalStore | None = None,
        atom_index: AtomIndex | None = None,
        blob_store: BlobStore | None = None,
        # Common
        settings: Settings | None = None,
        trigger: RebuildTrigger | None = None,
    ) -> None:
        """Create a Forge instance.

        Args:
            provider: Provider configuration that builds the embedder.
                      Mutually exclusive with embedder.
            embedder: Explicit embedder.
            storage: Storage bundle (convenience). Mutually exclusive with explicit stores.
                     Example: LocalStorage("./forge_data")
            game_store: Explicit game store.
            atom_store: Explicit atom store.
            build_store: Explicit build store.
            external_store: Explicit external library store.
            atom_index: Explicit embedding index.
            blob_store: Explicit blob store for published bundles.
            settings: Behavioral settings (size limit, search threshold, etc.)
            trigger: Rebuild trigger. If None, an HTTP trigger is used when
                     settings.rebuild_url is set, otherwise rebuilds run in-process.

        Raises:
            ValueError: If neither or both of provider/embedder are given, or
                        if neither storage nor all explicit stores are given,
                        or if both are.
        """
        self.settings = settings if settings is not None else Settings()

        explicit = [game_store, atom_store, build_store, external_store, atom_index, blob_store]

        # Path 1: Storage bundle (convenience)
        if storage is not None:
            if any(s is not None for s in explicit):
                raise ValueError("Cannot mix 'storage' bundle with explicit stores")
            stores = storage.build_stores()
            self.game_store = stores.game_store
            self.atom_store = stores.atom_store
            self.build_store = stores.build_store
            self.external_store = stores.external_store
            self.atom_index = stores.atom_index
            self.blob_store = stores.blob_store

        # Path 2: Explicit stores
        elif all(s is not None for s in explicit):
            self.game_store = game_store  # type: ignore[assignment]
            self.atom_store = atom_store  # type: ignore[assignment]
            self.build_store = build_store  # type: ignore[assignment]
            self.external_store = external_store  # type: ignore[assignment]
            self.atom_index = atom_index  # type: ignore[assignment]
            self.blob_store = blob_store  # type: ignore[assignment]

        else:
            raise ValueError(
                "Must provide either 'storage' bundle or all explicit stores "
                "(game_store, atom_store, build_store, external_store, atom_index, blob_store)"
            )

        if (provider is None) == (embedder is None):
            raise ValueError("Must provide exactly one of 'provider' or 'embedder'")
        if embedder is not None:
            self.embedder = embedder
        else:
            assert provider is not None
            self.embedder = provider.build_embedder(self.settings)

        self.builder = Builder(
            game_store=self.game_store,
            atom_store=self.atom_store,
            build_store=self.build_store,
            external_store=self.external_store,
            blob_store=self.blob_store,
            versioned_cache_seconds=self.settings.versioned_cache_seconds,
        )

        if trigger is None:
            if self.settings.rebuild_url:
                trigger = HTTPRebuildTrigger(
                    url=self.settings.rebuild_url,
                    token=self.settings.rebuild_token,
                    timeout=self.settings.rebuild_timeout,
                )
            else:
                trigger = LocalRebuildTrigger(self.builder)
        self.trigger = trigger

        self.editor = AtomEditor(
            atom_store=self.atom_store,
            atom_index=self.atom_index,
            embedder=self.embedder,
            trigger=self.trigger,
            max_code_bytes=self.settings.max_code_bytes,
            search_threshold=self.settings.search_threshold,
            default_search_limit=self.settings.default_search_limit,
        )
        self.restorer = Restorer(
            game_store=self.game_store,
            atom_store=self.atom_store,
            build_store=self.build_store,
            atom_index=self.atom_index,
            embedder=self.embedder,
            trigger=self.trigger,
        )
        self.externals = ExternalsManager(self.external_store, self.trigger)

    @classmethod
    def from_stores(
        cls,
        *,
        embedder: Embedder,
        game_store: GameStore,
        atom_store: AtomStore,
        build_store: BuildStore,
        external_store: ExternalStore,
        atom_index: AtomIndex,
        blob_store: BlobStore,
        settings: Settings | None = None,
        trigger: RebuildTrigger | None = None,
    ) -> Forge:
        """Create a Forge with an explicit embedder and explicit stores.

        This is the explicit alternative to using provider and storage
        configuration objects, and the way tests substitute fakes.
        """
        return cls(
            embedder=embedder,
            game_store=game_store,
            atom_store=atom_store,
            build_store=build_store,
            external_store=external_store,
            atom_index=atom_index,
            blob_store=blob_store,
            settings=settings,
            trigger=trigger,
        )

    # Games

    def create_game(self, name: str, description: str | None = None) -> Game:
        """Create a game.

        Game names become blob path prefixes, so they are restricted to
        lowercase letters, digits, `-` and `_`.

        Raises:
            AtomValidationError: If the name is malformed or already taken
        """
        if not re.match(GAME_NAME_PATTERN, name):
            raise AtomValidationError(
                f'Invalid game name "{name}". Use lowercase letters, digits, "-" and "_", '
                "starting with a letter or digit."
            )
        if self.game_store.get_by_name(name) is not None:
            raise AtomValidationError(f'Game "{name}" already exists.')
        game = self.game_store.create(name, description)
        logger.info("Created game %s (%s)", game.name, game.id)
        return game

    def get_game(self, name: str) -> Game | None:
        return self.game_store.get_by_name(name)

    def resolve_game(self, name: str) -> Game:
        """Look up a game by name.

        Raises:
            NotFoundError: If no game has this name
        """
        game = self.game_store.get_by_name(name)
        if game is None:
            raise NotFoundError(f'Game "{name}" not found.')
        return game

    def list_games(self) -> list[Game]:
        return self.game_store.list_games()

    # Builds

    def list_builds(self, game_id: str, limit: int | None = None) -> list[BuildSummary]:
        """List a game's builds, newest first."""
        limit = self.settings.build_history_limit if limit is None else limit
        return self.build_store.list_builds(game_id, limit=limit)

    def get_build(self, game_id: str, build_id: str) -> Build:
        """Fetch one build of a game, including its snapshot.

        Raises:
            NotFoundError: If the build does not exist in this game
        """
        build = self.build_store.get(game_id, build_id)
        if build is None:
            raise NotFoundError(f'Build "{build_id}" not found for this game.')
        return build

    # Lifecycle

    async def drain(self) -> None:
        """Wait for every pending background rebuild to finish."""
        await self.trigger.drain()

    def close(self) -> None:
        """Release the embedding index, if it holds resources."""
        close = getattr(self.atom_index, "close", None)
        if callable(close):
            close()
