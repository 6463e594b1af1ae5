# src/atomforge/stores/chroma.py
"""ChromaDB atom index implementation."""

from pathlib import Path

import chromadb

from atomforge.stores.base import AtomIndex


class ChromaAtomIndex(AtomIndex):
    """ChromaDB-based atom embedding index.

    One cosine-space collection holds every game; each entry carries its
    game ID in metadata and every query filters on it.
    """

    def __init__(self, persist_dir: str, collection_name: str = "atoms") -> None:
        """Initialize the ChromaDB index."""
        Path(persist_dir).mkdir(parents=True, exist_ok=True)
        self._client = chromadb.PersistentClient(path=persist_dir)
        self._collection = self._client.get_or_create_collection(
            name=collection_name,
            metadata={"hnsw:space": "cosine"},
        )

    @staticmethod
    def _entry_id(game_id: str, name: str) -> str:
        return f"{game_id}/{name}"

    def close(self) -> None:
        """Close the index and release resources.

        ChromaDB doesn't have an official close method, so we call the internal
        _system.stop() to release file handles.

        See: https://github.com/chroma-core/chroma/issues/5868
        """
        self._collection = None  # type: ignore[assignment]
        if self._client is not None and hasattr(self._client, "_system"):
            self._client._system.stop()
        self._client = None  # type: ignore[assignment]

    def upsert(self, game_id: str, name: str, embedding: list[float]) -> None:
        """Add or replace the embedding of one atom."""
        self._collection.upsert(
            ids=[self._entry_id(game_id, name)],
            embeddings=[embedding],  # type: ignore[arg-type]
            metadatas=[{"game_id": game_id, "name": name}],
        )

    def delete(self, game_id: str, name: str) -> None:
        """Remove the embedding of one atom."""
        self._collection.delete(ids=[self._entry_id(game_id, name)])

    def replace_game(self, game_id: str, embeddings: dict[str, list[float]]) -> None:
        """Drop every embedding of a game and index the given ones."""
        self._collection.delete(where={"game_id": game_id})
        if not embeddings:
            return
        names = list(embeddings)
        self._collection.upsert(
            ids=[self._entry_id(game_id, name) for name in names],
            embeddings=[embeddings[name] for name in names],  # type: ignore[arg-type]
            metadatas=[{"game_id": game_id, "name": name} for name in names],
        )

    def count(self, game_id: str) -> int:
        """Count the indexed atoms of a game."""
        return len(self._collection.get(where={"game_id": game_id}, include=[])["ids"])

    def search(
        self,
        game_id: str,
        embedding: list[float],
        threshold: float,
        limit: int,
    ) -> list[tuple[str, float]]:
        """Find similar atoms of one game above a similarity threshold."""
        available = self.count(game_id)
        if available == 0 or limit <= 0:
            return []

        results = self._collection.query(
            query_embeddings=[embedding],  # type: ignore[arg-type]
            n_results=min(limit, available),
            where={"game_id": game_id},
            include=["metadatas", "distances"],
        )

        matches = []
        metadatas = results["metadatas"][0]  # type: ignore[index]
        distances = results["distances"][0]  # type: ignore[index]
        for meta, dist in zip(metadatas, distances, strict=True):
            # Cosine distance: similarity = 1 - distance
            similarity = 1.0 - dist
            if similarity >= threshold:
                matches.append((str(meta["name"]), similarity))
        return matches
