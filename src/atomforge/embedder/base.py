# src/atomforge/embedder/base.py
"""Embedder abstract base class."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from atomforge.models import Port


def build_embedding_text(
    name: str,
    inputs: Sequence[Port],
    outputs: Sequence[Port],
    description: str | None,
    code: str,
) -> str:
    """Build the text an atom is embedded from.

    Format: `name(in: type, ...) => out: type, ...: description` followed by
    the code on the next line.
    """
    in_text = ", ".join(f"{p.name}:{p.type}" for p in inputs)
    out_text = ", ".join(f"{p.name}:{p.type}" for p in outputs)
    return f"{name}({in_text}) => {out_text}: {description or ''}\n{code}"


class Embedder(ABC):
    """Abstract base class for embedding generation.

    Subclasses must implement embed_text and embed_texts. The async variants
    fall back to the sync ones.
    """

    @abstractmethod
    def embed_text(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text."""
        ...

    @abstractmethod
    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for multiple texts (batched)."""
        ...

    async def aembed_text(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text (async)."""
        return self.embed_text(text)

    async def aembed_texts(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for multiple texts (async)."""
        return self.embed_texts(texts)
