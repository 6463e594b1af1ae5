# src/atomforge/configuration/base.py
"""Protocol definitions for configuration objects.

Provider configurations build the embedder; storage configurations build
the stores. Implementations are frozen dataclasses that satisfy these
protocols structurally, while the stores themselves (`atomforge.stores`)
are ABCs that implementations inherit from.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple, Protocol, runtime_checkable

if TYPE_CHECKING:
    from atomforge.embedder import Embedder
    from atomforge.settings import Settings
    from atomforge.stores import (
        AtomIndex,
        AtomStore,
        BlobStore,
        BuildStore,
        ExternalStore,
        GameStore,
    )


class StoreBundle(NamedTuple):
    """Every store a Forge needs."""

    game_store: GameStore
    atom_store: AtomStore
    build_store: BuildStore
    external_store: ExternalStore
    atom_index: AtomIndex
    blob_store: BlobStore


@runtime_checkable
class ProviderConfig(Protocol):
    """Protocol for provider configurations.

    Example implementation:
        @dataclass(frozen=True)
        class LiteLLMProvider:
            embedding: str

            def build_embedder(self, settings: Settings) -> Embedder: ...
    """

    def build_embedder(self, settings: Settings) -> Embedder:
        """Build an embedder for atom and query text.

        Args:
            settings: Settings containing num_retries and embedding_max_chars.
        """
        ...


@runtime_checkable
class StorageConfig(Protocol):
    """Protocol for storage configurations.

    Example implementation:
        @dataclass(frozen=True)
        class LocalStorage:
            data_dir: str

            def build_stores(self) -> StoreBundle: ...
    """

    def build_stores(self) -> StoreBundle:
        """Build all storage components."""
        ...
