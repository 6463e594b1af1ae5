# src/atomforge/providers/litellm/client.py
"""LiteLLM client implementation for embedding APIs."""

from typing import Any

import litellm

from atomforge.exceptions import EmbeddingError
from atomforge.providers.base import EmbeddingClient
from atomforge.providers.litellm.models import EmbeddingModels


class LiteLLMEmbeddingClient(EmbeddingClient):
    """LiteLLM-based embedding client.

    Supports any embedding model available through LiteLLM. Provider errors
    are re-raised as EmbeddingError carrying the upstream status code.

    Example:
        from atomforge.providers.litellm import LiteLLMEmbeddingClient, EmbeddingModels

        client = LiteLLMEmbeddingClient(model=EmbeddingModels.TEXT_3_SMALL)
        embeddings = client.embed(["function clamp(v, lo, hi) { ... }"])
    """

    def __init__(
        self,
        model: str = EmbeddingModels.TEXT_3_SMALL,
        num_retries: int = 3,
    ) -> None:
        """Initialize the LiteLLM embedding client.

        Args:
            model: LiteLLM embedding model identifier.
            num_retries: Number of retries on rate limit errors. LiteLLM handles
                        exponential backoff automatically. Default: 3.
        """
        self.model = model
        self.num_retries = num_retries

    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings using LiteLLM."""
        if not texts:
            return []

        try:
            response = litellm.embedding(
                model=self.model,
                input=texts,
                num_retries=self.num_retries,
            )
        except Exception as e:
            raise self._wrap_error(e) from e
        return self._vectors(response)

    async def aembed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings using LiteLLM (async)."""
        if not texts:
            return []

        try:
            response = await litellm.aembedding(
                model=self.model,
                input=texts,
                num_retries=self.num_retries,
            )
        except Exception as e:
            raise self._wrap_error(e) from e
        return self._vectors(response)

    def _vectors(self, response: Any) -> list[list[float]]:
        # Sort by index to maintain order
        sorted_data = sorted(response.data, key=lambda x: x["index"])
        return [item["embedding"] for item in sorted_data]

    def _wrap_error(self, error: Exception) -> EmbeddingError:
        status_code = getattr(error, "status_code", None)
        return EmbeddingError(
            f"Embedding error from {self.model} ({status_code or 'no status'}): {error}",
            status_code=status_code,
        )
