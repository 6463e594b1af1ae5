# src/atomforge/embedder/client.py
"""Client-based embedder implementation."""

from atomforge.embedder.base import Embedder
from atomforge.providers.base import EmbeddingClient

DEFAULT_MAX_CHARS = 30000


class ClientEmbedder(Embedder):
    """Embedder that uses an EmbeddingClient for generating embeddings.

    Input is truncated to `max_chars` characters before submission to stay
    inside the model's token limit.

    Example:
        from atomforge.providers.litellm import LiteLLMEmbeddingClient
        from atomforge.embedder import ClientEmbedder

        client = LiteLLMEmbeddingClient(model="openai/text-embedding-3-small")
        embedder = ClientEmbedder(embedding_client=client)
    """

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        max_chars: int = DEFAULT_MAX_CHARS,
    ) -> None:
        """Initialize the embedder.

        Args:
            embedding_client: Any EmbeddingClient implementation
            max_chars: Character cap applied to every input text
        """
        self._client = embedding_client
        self.max_chars = max_chars

    def _truncate(self, texts: list[str]) -> list[str]:
        return [text[: self.max_chars] for text in texts]

    def embed_text(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text."""
        return self._client.embed(self._truncate([text]))[0]

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for multiple texts (batched)."""
        if not texts:
            return []
        return self._client.embed(self._truncate(texts))

    async def aembed_text(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text (async)."""
        result = await self._client.aembed(self._truncate([text]))
        return result[0]

    async def aembed_texts(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for multiple texts (async, batched)."""
        if not texts:
            return []
        return await self._client.aembed(self._truncate(texts))
