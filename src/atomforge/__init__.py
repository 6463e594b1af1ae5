"""Atomforge - build browser games from code atoms.

A game is a set of small, typed, size-bounded JavaScript functions ("atoms")
with declared dependencies. Atomforge stores and semantically indexes them,
orders them by dependency, publishes a single bundle per game, and keeps a
snapshot with every build so a game can be rolled back.

Quick Start (LiteLLM + Local Storage):
    import asyncio
    from atomforge import Forge, LiteLLMProvider, LocalStorage

    forge = Forge(
        provider=LiteLLMProvider(embedding="openai/text-embedding-3-small"),
        storage=LocalStorage("./forge_data"),
    )
    game = forge.create_game("asteroids")

    async def main():
        await forge.editor.upsert_atom(
            game.id,
            "math_clamp",
            "function math_clamp(v, lo, hi) { return Math.min(hi, Math.max(lo, v)); }",
            "util",
            inputs=[{"name": "v", "type": "number"}, ...],
            outputs=[{"name": "result", "type": "number"}],
        )
        result = await forge.builder.build(game.id)
        print(result.bundle_url)
        await forge.drain()

    asyncio.run(main())
"""

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("atomforge")
except PackageNotFoundError:
    # Source tree without an installed distribution
    __version__ = "unknown"

from atomforge.builder import Builder

# Configuration objects
from atomforge.configuration import (
    LiteLLMProvider,
    LocalStorage,
    ProviderConfig,
    StorageConfig,
)
from atomforge.editor import AtomEditor
from atomforge.embedder import ClientEmbedder, Embedder

# Errors
from atomforge.exceptions import (
    AtomforgeError,
    AtomValidationError,
    DependentsError,
    EmbeddingError,
    NotFoundError,
    UploadError,
    UpstreamError,
)
from atomforge.externals import ExternalsManager

# Central configuration
from atomforge.forge import Forge
from atomforge.graph import CycleError, topological_sort

# Models
from atomforge.models import (
    Atom,
    AtomSearchResult,
    AtomSnapshot,
    AtomSummary,
    Build,
    BuildResult,
    BuildStatus,
    BuildSummary,
    Dependency,
    Game,
    InstalledExternal,
    Port,
    RegistryEntry,
    RollbackResult,
    SnapshotAtom,
    UpsertResult,
)
from atomforge.restorer import Restorer
from atomforge.settings import Settings
from atomforge.snapshot import take_snapshot
from atomforge.trigger import (
    BackgroundTasks,
    HTTPRebuildTrigger,
    LocalRebuildTrigger,
    RebuildTrigger,
)

__all__ = [
    "__version__",
    # Central
    "Forge",
    "Settings",
    # Configuration
    "LiteLLMProvider",
    "LocalStorage",
    "ProviderConfig",
    "StorageConfig",
    # Services
    "AtomEditor",
    "Builder",
    "Restorer",
    "ExternalsManager",
    "take_snapshot",
    "topological_sort",
    # Embedding
    "Embedder",
    "ClientEmbedder",
    # Rebuild triggers
    "RebuildTrigger",
    "HTTPRebuildTrigger",
    "LocalRebuildTrigger",
    "BackgroundTasks",
    # Models
    "Atom",
    "AtomSearchResult",
    "AtomSnapshot",
    "AtomSummary",
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
    # Errors
    "AtomforgeError",
    "AtomValidationError",
    "CycleError",
    "DependentsError",
    "EmbeddingError",
    "NotFoundError",
    "UploadError",
    "UpstreamError",
]
