# tests/embedder/test_embedder.py
"""Tests for the embedder."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

pytest.importorskip("litellm", reason="Tests require litellm package")

from atomforge.embedder import ClientEmbedder, Embedder, build_embedding_text
from atomforge.exceptions import EmbeddingError
from atomforge.models import Port
from atomforge.providers import EmbeddingClient
from atomforge.providers.litellm import EmbeddingModels, LiteLLMEmbeddingClient


def mock_embedding_response(embeddings: list[list[float]]) -> MagicMock:
    """Create a mock LiteLLM embedding response."""
    response = MagicMock()
    response.data = [{"index": i, "embedding": emb} for i, emb in enumerate(embeddings)]
    return response


class TestBuildEmbeddingText:
    def test_format(self):
        text = build_embedding_text(
            "math_clamp",
            [Port(name="v", type="number"), Port(name="lo", type="number")],
            [Port(name="result", type="number")],
            "Clamp a value",
            "function math_clamp() {}",
        )
        assert text == (
            "math_clamp(v:number, lo:number) => result:number: Clamp a value\n"
            "function math_clamp() {}"
        )

    def test_no_description_or_ports(self):
        text = build_embedding_text("boot", [], [], None, "boot();")
        assert text == "boot() => : \nboot();"


class TestEmbedderABC:
    def test_is_abstract(self):
        with pytest.raises(TypeError):
            Embedder()

    def test_client_embedder_is_embedder(self):
        assert isinstance(ClientEmbedder(embedding_client=LiteLLMEmbeddingClient()), Embedder)


class TestClientEmbedder:
    @pytest.fixture
    def client(self):
        client = MagicMock(spec=EmbeddingClient)
        client.embed.side_effect = lambda texts: [[float(len(t))] for t in texts]
        return client

    def test_embed_text(self, client):
        embedder = ClientEmbedder(embedding_client=client)
        assert embedder.embed_text("abc") == [3.0]
        client.embed.assert_called_once_with(["abc"])

    def test_embed_texts_empty(self, client):
        embedder = ClientEmbedder(embedding_client=client)
        assert embedder.embed_texts([]) == []
        client.embed.assert_not_called()

    def test_truncates_input(self, client):
        embedder = ClientEmbedder(embedding_client=client, max_chars=5)
        assert embedder.embed_texts(["abcdefgh", "xy"]) == [[5.0], [2.0]]
        client.embed.assert_called_once_with(["abcde", "xy"])

    @pytest.mark.asyncio
    async def test_aembed_text_uses_client_aembed(self):
        class AsyncClient(EmbeddingClient):
            def embed(self, texts):
                raise AssertionError("sync path used")

            async def aembed(self, texts):
                return [[1.0, 2.0] for _ in texts]

        embedder = ClientEmbedder(embedding_client=AsyncClient())
        assert await embedder.aembed_text("hello") == [1.0, 2.0]
        assert await embedder.aembed_texts(["a", "b"]) == [[1.0, 2.0], [1.0, 2.0]]
        assert await embedder.aembed_texts([]) == []


class TestLiteLLMEmbeddingClient:
    def test_default_model(self):
        client = LiteLLMEmbeddingClient()
        assert client.model == EmbeddingModels.TEXT_3_SMALL
        assert client.num_retries == 3

    @patch("atomforge.providers.litellm.client.litellm.embedding")
    def test_embed(self, mock_embedding):
        mock_embedding.return_value = mock_embedding_response([[0.1, 0.2], [0.3, 0.4]])
        client = LiteLLMEmbeddingClient(model="openai/text-embedding-3-small", num_retries=5)

        result = client.embed(["a", "b"])

        assert result == [[0.1, 0.2], [0.3, 0.4]]
        mock_embedding.assert_called_once_with(
            model="openai/text-embedding-3-small", input=["a", "b"], num_retries=5
        )

    @patch("atomforge.providers.litellm.client.litellm.embedding")
    def test_embed_sorts_by_index(self, mock_embedding):
        response = MagicMock()
        response.data = [{"index": 1, "embedding": [2.0]}, {"index": 0, "embedding": [1.0]}]
        mock_embedding.return_value = response

        assert LiteLLMEmbeddingClient().embed(["a", "b"]) == [[1.0], [2.0]]

    @patch("atomforge.providers.litellm.client.litellm.embedding")
    def test_embed_empty_skips_call(self, mock_embedding):
        assert LiteLLMEmbeddingClient().embed([]) == []
        mock_embedding.assert_not_called()

    @patch("atomforge.providers.litellm.client.litellm.embedding")
    def test_provider_error_becomes_embedding_error(self, mock_embedding):
        error = RuntimeError("rate limited")
        error.status_code = 429  # type: ignore[attr-defined]
        mock_embedding.side_effect = error

        with pytest.raises(EmbeddingError) as exc_info:
            LiteLLMEmbeddingClient().embed(["a"])

        assert exc_info.value.status_code == 429
        assert "429" in str(exc_info.value)
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    @patch("atomforge.providers.litellm.client.litellm.aembedding", new_callable=AsyncMock)
    async def test_aembed(self, mock_aembedding):
        mock_aembedding.return_value = mock_embedding_response([[0.5]])

        assert await LiteLLMEmbeddingClient().aembed(["a"]) == [[0.5]]
        mock_aembedding.assert_awaited_once()

    @pytest.mark.asyncio
    @patch("atomforge.providers.litellm.client.litellm.aembedding", new_callable=AsyncMock)
    async def test_aembed_error(self, mock_aembedding):
        mock_aembedding.side_effect = RuntimeError("down")

        with pytest.raises(EmbeddingError) as exc_info:
            await LiteLLMEmbeddingClient().aembed(["a"])
        assert exc_info.value.status_code is None
