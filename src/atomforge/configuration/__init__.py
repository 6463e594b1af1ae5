# src/atomforge/configuration/__init__.py
"""Configuration objects for Atomforge.

Instead of wiring stores and clients by hand, pass configuration objects
that know how to build them.

Provider configurations (build the embedder):
- LiteLLMProvider: Uses LiteLLM for embedding calls

Storage configurations (build the stores):
- LocalStorage: SQLite + Chroma + local bundle directory

Example:
    from atomforge import Forge, LiteLLMProvider, LocalStorage

    forge = Forge(
        provider=LiteLLMProvider(embedding="openai/text-embedding-3-small"),
        storage=LocalStorage("./forge_data"),
    )
"""

from atomforge.configuration.base import ProviderConfig, StorageConfig, StoreBundle
from atomforge.configuration.providers import LiteLLMProvider
from atomforge.configuration.storage import LocalStorage

__all__ = [
    "ProviderConfig",
    "StorageConfig",
    "StoreBundle",
    "LiteLLMProvider",
    "LocalStorage",
]
