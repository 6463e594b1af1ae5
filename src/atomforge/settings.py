# src/atomforge/settings.py
"""Behavioral settings for Atomforge.

Settings are passed programmatically; this module does not read the
environment. `atomforge.config` layers YAML and `ATOMFORGE_*` environment
variables on top of these defaults for the CLI.
"""

from pydantic import BaseModel

from atomforge.embedder.client import DEFAULT_MAX_CHARS


class Settings(BaseModel):
    """Behavioral settings for Atomforge.

    Example:
        settings = Settings(max_code_bytes=4096, search_threshold=0.5)
    """

    # Atom validation
    max_code_bytes: int = 2048  # UTF-8 bytes per atom body

    # Semantic search
    search_threshold: float = 0.3  # Minimum cosine similarity
    default_search_limit: int = 5

    # Embedding
    embedding_max_chars: int = DEFAULT_MAX_CHARS  # Input is truncated to this many characters
    num_retries: int = 3  # LiteLLM retries with backoff on rate limits

    # Builds
    build_history_limit: int = 20
    versioned_cache_seconds: int = 3600  # max-age of build_{id}.js

    # Remote rebuild trigger (None = rebuild in-process)
    rebuild_url: str | None = None
    rebuild_token: str | None = None
    rebuild_timeout: float = 10.0
