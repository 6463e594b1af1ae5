# src/atomforge/configuration/providers/litellm.py
"""LiteLLM provider configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from atomforge.providers.litellm.models import EmbeddingModels

if TYPE_CHECKING:
    from atomforge.embedder import Embedder
    from atomforge.settings import Settings


@dataclass(frozen=True)
class LiteLLMProvider:
    """Provider configuration using LiteLLM for embedding calls.

    API keys are read by LiteLLM from the provider's usual environment
    variables (OPENAI_API_KEY, GEMINI_API_KEY, ...).

    Args:
        embedding: LiteLLM model identifier for embeddings.
                   Examples: "openai/text-embedding-3-small", "gemini/text-embedding-004"

    Example:
        provider = LiteLLMProvider(embedding="openai/text-embedding-3-small")
    """

    embedding: str = EmbeddingModels.TEXT_3_SMALL

    def build_embedder(self, settings: Settings) -> Embedder:
        """Build a ClientEmbedder using the LiteLLM embedding client.

        Args:
            settings: Settings containing num_retries and embedding_max_chars.
        """
        from atomforge.embedder import ClientEmbedder
        from atomforge.providers.litellm import LiteLLMEmbeddingClient

        embedding_client = LiteLLMEmbeddingClient(
            model=self.embedding,
            num_retries=settings.num_retries,
        )
        return ClientEmbedder(
            embedding_client=embedding_client,
            max_chars=settings.embedding_max_chars,
        )
