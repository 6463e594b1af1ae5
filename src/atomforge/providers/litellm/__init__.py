# src/atomforge/providers/litellm/__init__.py
"""LiteLLM provider clients for Atomforge.

Usage:
    from atomforge.providers.litellm import LiteLLMEmbeddingClient, EmbeddingModels

    client = LiteLLMEmbeddingClient(model=EmbeddingModels.TEXT_3_SMALL)
"""

from atomforge.providers.litellm.client import LiteLLMEmbeddingClient
from atomforge.providers.litellm.models import EmbeddingModels

__all__ = [
    "EmbeddingModels",
    "LiteLLMEmbeddingClient",
]
