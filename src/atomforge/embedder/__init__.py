# src/atomforge/embedder/__init__.py
"""Embedding functionality for Atomforge."""

from atomforge.embedder.base import Embedder, build_embedding_text
from atomforge.embedder.client import ClientEmbedder

__all__ = ["Embedder", "ClientEmbedder", "build_embedding_text"]
