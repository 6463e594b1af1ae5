# src/atomforge/providers/__init__.py
"""Provider implementations for Atomforge.

- EmbeddingClient: Abstract base class for embedding providers
- LiteLLMEmbeddingClient: Embeddings through LiteLLM
"""

from atomforge.providers.base import EmbeddingClient
from atomforge.providers.litellm import EmbeddingModels, LiteLLMEmbeddingClient

__all__ = [
    "EmbeddingClient",
    "EmbeddingModels",
    "LiteLLMEmbeddingClient",
]
