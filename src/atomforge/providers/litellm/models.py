# src/atomforge/providers/litellm/models.py
"""Curated embedding model constants for the LiteLLM provider.

You can always pass any valid LiteLLM model string directly.

Example:
    from atomforge.providers.litellm import EmbeddingModels, LiteLLMEmbeddingClient

    client = LiteLLMEmbeddingClient(model=EmbeddingModels.TEXT_3_SMALL)
"""


class EmbeddingModels:
    """Embedding models for LiteLLMEmbeddingClient."""

    # OpenAI (1536 dimensions for 3-small)
    TEXT_3_SMALL = "openai/text-embedding-3-small"
    TEXT_3_LARGE = "openai/text-embedding-3-large"

    # OpenRouter proxy of the OpenAI embeddings API
    OPENROUTER_TEXT_3_SMALL = "openrouter/openai/text-embedding-3-small"

    # Google Gemini
    GEMINI_004 = "gemini/text-embedding-004"

    # AWS Bedrock
    BEDROCK_TITAN_V2 = "bedrock/amazon.titan-embed-text-v2:0"
