"""Shared pytest fixtures."""

import contextlib
import math
import os
import tempfile

import pytest

from atomforge.embedder import Embedder
from atomforge.exceptions import EmbeddingError, UploadError
from atomforge.forge import Forge
from atomforge.settings import Settings
from atomforge.stores import (
    AtomIndex,
    BlobStore,
    SQLiteAtomStore,
    SQLiteBuildStore,
    SQLiteExternalStore,
    SQLiteGameStore,
)
from atomforge.trigger import RebuildTrigger


@pytest.fixture
def temp_dir():
    """Create a temporary directory for stores."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir

        # Release ChromaDB's cached systems for this directory, otherwise file
        # handles pile up across the suite.
        # See: https://github.com/chroma-core/chroma/issues/5868
        try:
            from chromadb.api.shared_system_client import SharedSystemClient

            if hasattr(SharedSystemClient, "_identifier_to_system"):
                stale = [
                    identifier
                    for identifier in list(SharedSystemClient._identifier_to_system.keys())
                    if tmpdir in str(identifier)
                ]
                for identifier in stale:
                    system = SharedSystemClient._identifier_to_system.pop(identifier, None)
                    if system is not None:
                        with contextlib.suppress(Exception):
                            system.stop()
        except ImportError:
            pass


class MockEmbedder(Embedder):
    """Deterministic embedder: letter counts of the lowercased text.

    Texts sharing vocabulary get similar vectors, which is enough for
    similarity search tests.
    """

    def __init__(self) -> None:
        self.calls: list[str] = []

    def embed_text(self, text: str) -> list[float]:
        self.calls.append(text)
        counts = [0.0] * 26
        for ch in text.lower():
            if "a" <= ch <= "z":
                counts[ord(ch) - ord("a")] += 1.0
        return counts

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        return [self.embed_text(t) for t in texts]


class FailingEmbedder(Embedder):
    """Embedder whose every call fails like an upstream outage."""

    def embed_text(self, text: str) -> list[float]:
        raise EmbeddingError("Embedding error (503): service unavailable", status_code=503)

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        return [self.embed_text(t) for t in texts]


def _cosine(a: list[float], b: list[float]) -> float:
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    if norm == 0:
        return 0.0
    return sum(x * y for x, y in zip(a, b, strict=True)) / norm


class InMemoryAtomIndex(AtomIndex):
    """Dict-backed index with exact cosine search."""

    def __init__(self) -> None:
        self.entries: dict[tuple[str, str], list[float]] = {}

    def upsert(self, game_id: str, name: str, embedding: list[float]) -> None:
        self.entries[(game_id, name)] = embedding

    def delete(self, game_id: str, name: str) -> None:
        self.entries.pop((game_id, name), None)

    def replace_game(self, game_id: str, embeddings: dict[str, list[float]]) -> None:
        for key in [k for k in self.entries if k[0] == game_id]:
            del self.entries[key]
        for name, embedding in embeddings.items():
            self.entries[(game_id, name)] = embedding

    def names(self, game_id: str) -> set[str]:
        return {name for gid, name in self.entries if gid == game_id}

    def search(
        self,
        game_id: str,
        embedding: list[float],
        threshold: float,
        limit: int,
    ) -> list[tuple[str, float]]:
        scored = [
            (name, _cosine(embedding, vector))
            for (gid, name), vector in self.entries.items()
            if gid == game_id
        ]
        scored = [(name, sim) for name, sim in scored if sim >= threshold]
        scored.sort(key=lambda item: item[1], reverse=True)
        return scored[:limit]


class RecordingBlobStore(BlobStore):
    """Blob store keeping uploads in memory.

    Args:
        fail_on: Path suffix whose upload raises UploadError.
    """

    def __init__(self, fail_on: str | None = None) -> None:
        self.objects: dict[str, bytes] = {}
        self.meta: dict[str, tuple[str, str]] = {}
        self.fail_on = fail_on

    def upload(
        self,
        path: str,
        data: bytes,
        content_type: str,
        cache_control: str,
        overwrite: bool = True,
    ) -> None:
        if self.fail_on and path.endswith(self.fail_on):
            raise UploadError(f"Upload failed for {path}: bucket unavailable")
        if not overwrite and path in self.objects:
            raise UploadError(f"Upload failed: {path} already exists")
        self.objects[path] = data
        self.meta[path] = (content_type, cache_control)

    def public_url(self, path: str) -> str:
        return f"https://cdn.test/{path}"

    def text(self, path: str) -> str:
        return self.objects[path].decode("utf-8")


class RecordingTrigger(RebuildTrigger):
    """Trigger that records the games it was asked to rebuild."""

    def __init__(self) -> None:
        super().__init__()
        self.requested: list[str] = []

    async def trigger(self, game_id: str) -> None:
        self.requested.append(game_id)


@pytest.fixture
def db_path(temp_dir):
    return os.path.join(temp_dir, "atomforge.db")


@pytest.fixture
def game_store(db_path):
    return SQLiteGameStore(db_path)


@pytest.fixture
def atom_store(db_path):
    return SQLiteAtomStore(db_path)


@pytest.fixture
def build_store(db_path):
    return SQLiteBuildStore(db_path)


@pytest.fixture
def external_store(db_path):
    return SQLiteExternalStore(db_path)


@pytest.fixture
def atom_index():
    return InMemoryAtomIndex()


@pytest.fixture
def blob_store():
    return RecordingBlobStore()


@pytest.fixture
def mock_embedder():
    return MockEmbedder()


@pytest.fixture
def recording_trigger():
    return RecordingTrigger()


@pytest.fixture
def game(game_store):
    return game_store.create("asteroids", "Shoot rocks")


@pytest.fixture
def failing_embedder():
    return FailingEmbedder()


@pytest.fixture
def failing_blob_store():
    """Blob store whose versioned bundle upload fails."""
    return RecordingBlobStore(fail_on=".js")


@pytest.fixture
def forge_factory(game_store, atom_store, build_store, external_store, atom_index, blob_store):
    """Build a Forge over the shared stores with any embedder, trigger or blob store."""

    def make(embedder, trigger=None, settings=None, blobs=None):
        return Forge.from_stores(
            embedder=embedder,
            game_store=game_store,
            atom_store=atom_store,
            build_store=build_store,
            external_store=external_store,
            atom_index=atom_index,
            blob_store=blobs if blobs is not None else blob_store,
            settings=settings or Settings(),
            trigger=trigger,
        )

    return make


@pytest.fixture
def forge(forge_factory, mock_embedder, recording_trigger):
    """Forge over SQLite stores and in-memory fakes; rebuilds are only recorded."""
    return forge_factory(mock_embedder, trigger=recording_trigger)


@pytest.fixture
def local_forge(forge_factory, mock_embedder):
    """Forge whose rebuilds run in-process."""
    return forge_factory(mock_embedder)
