# tests/test_restorer.py
"""Tests for rollback."""

from unittest.mock import patch

import pytest

from atomforge.exceptions import EmbeddingError, NotFoundError
from atomforge.models import BuildStatus
from atomforge.restorer import CHECKPOINT_LOG


async def put(forge, game, name, code, deps=None, atom_type="util"):
    await forge.editor.upsert_atom(game.id, name, code, atom_type, dependencies=deps)


class TestRollback:
    @pytest.mark.asyncio
    async def test_restores_snapshot(self, forge, game, atom_store):
        await put(forge, game, "math_clamp", "function math_clamp() { return 1; }")
        await put(forge, game, "player_jump", "function player_jump() {}", deps=["math_clamp"])
        original = await forge.builder.build(game.id)

        await put(forge, game, "math_clamp", "function math_clamp() { return 2; }")
        await put(forge, game, "extra", "function extra() {}")
        await forge.editor.delete_atom(game.id, "player_jump")

        result = await forge.restorer.rollback(game.id, original.build_id)

        assert result.restored_atom_count == 2
        atoms = atom_store.list_atoms(game.id)
        assert [a.name for a in atoms] == ["math_clamp", "player_jump"]
        assert atoms[0].code == "function math_clamp() { return 1; }"
        assert atoms[1].depends_on == ["math_clamp"]
        await forge.drain()

    @pytest.mark.asyncio
    async def test_versions_restart_at_one(self, forge, game, atom_store):
        await put(forge, game, "a", "v1")
        build = await forge.builder.build(game.id)
        await put(forge, game, "a", "v2")
        await put(forge, game, "a", "v3")

        await forge.restorer.rollback(game.id, build.build_id)

        assert atom_store.list_atoms(game.id)[0].version == 1
        await forge.drain()

    @pytest.mark.asyncio
    async def test_checkpoint_captures_current_state(self, forge, game, build_store):
        await put(forge, game, "a", "v1")
        build = await forge.builder.build(game.id)
        await put(forge, game, "a", "v2")
        await put(forge, game, "b", "b")

        result = await forge.restorer.rollback(game.id, build.build_id)

        checkpoint = build_store.get(game.id, result.checkpoint_build_id)
        assert checkpoint.status == BuildStatus.SUCCESS
        assert checkpoint.build_log == [CHECKPOINT_LOG]
        assert checkpoint.atom_snapshot.atom_names == ["a", "b"]
        assert [a.code for a in checkpoint.atom_snapshot.atoms] == ["v2", "b"]
        await forge.drain()

    @pytest.mark.asyncio
    async def test_rollback_of_rollback(self, forge, game, atom_store):
        await put(forge, game, "a", "v1")
        build = await forge.builder.build(game.id)
        await put(forge, game, "a", "v2")

        first = await forge.restorer.rollback(game.id, build.build_id)
        await forge.restorer.rollback(game.id, first.checkpoint_build_id)

        assert atom_store.list_atoms(game.id)[0].code == "v2"
        await forge.drain()

    @pytest.mark.asyncio
    async def test_reindexes_embeddings(self, forge, game, atom_index):
        await put(forge, game, "a", "aaaa")
        build = await forge.builder.build(game.id)
        await put(forge, game, "b", "bbbb")
        assert atom_index.names(game.id) == {"a", "b"}

        await forge.restorer.rollback(game.id, build.build_id)

        assert atom_index.names(game.id) == {"a"}
        results = await forge.editor.search(game.id, "aaaa")
        assert [r.name for r in results] == ["a"]
        await forge.drain()

    @pytest.mark.asyncio
    async def test_sets_active_build_and_requests_rebuild(
        self, forge, game, game_store, recording_trigger
    ):
        await put(forge, game, "a", "v1")
        build = await forge.builder.build(game.id)
        await forge.drain()
        recording_trigger.requested.clear()

        await forge.restorer.rollback(game.id, build.build_id)
        await forge.drain()

        assert game_store.get(game.id).active_build_id == build.build_id
        assert recording_trigger.requested == [game.id]

    @pytest.mark.asyncio
    async def test_empty_snapshot_clears_game(self, forge, game, atom_store, atom_index):
        empty = await forge.builder.build(game.id)
        await put(forge, game, "a", "v1")

        result = await forge.restorer.rollback(game.id, empty.build_id)

        assert result.restored_atom_count == 0
        assert atom_store.count_atoms(game.id) == 0
        assert atom_index.names(game.id) == set()
        await forge.drain()


class TestRollbackErrors:
    @pytest.mark.asyncio
    async def test_unknown_build(self, forge, game):
        with pytest.raises(NotFoundError, match='Build "nope" not found for this game.'):
            await forge.restorer.rollback(game.id, "nope")

    @pytest.mark.asyncio
    async def test_build_of_other_game(self, forge, game, game_store):
        other = game_store.create("other")
        build = await forge.builder.build(other.id)

        with pytest.raises(NotFoundError):
            await forge.restorer.rollback(game.id, build.build_id)

    @pytest.mark.asyncio
    async def test_build_without_snapshot(self, forge, game, build_store):
        legacy = build_store.create(game.id)
        build_store.finalize_success(legacy.id, 0, [], None)

        with pytest.raises(NotFoundError, match="has no atom snapshot"):
            await forge.restorer.rollback(game.id, legacy.id)

        # No checkpoint is written for a rejected rollback
        assert len(build_store.list_builds(game.id)) == 1

    @pytest.mark.asyncio
    async def test_embedding_failure_keeps_live_atoms(
        self, forge, forge_factory, failing_embedder, recording_trigger, game, atom_store
    ):
        await put(forge, game, "a", "v1")
        build = await forge.builder.build(game.id)
        await put(forge, game, "a", "v2")
        await forge.drain()

        broken = forge_factory(failing_embedder, trigger=recording_trigger)
        with pytest.raises(EmbeddingError):
            await broken.restorer.rollback(game.id, build.build_id)

        assert atom_store.list_atoms(game.id)[0].code == "v2"

    @pytest.mark.asyncio
    async def test_index_failure_still_activates_and_rebuilds(
        self, forge, game, atom_store, atom_index, game_store, recording_trigger, caplog
    ):
        await put(forge, game, "a", "v1")
        build = await forge.builder.build(game.id)
        await put(forge, game, "a", "v2")
        await put(forge, game, "b", "b")
        await forge.drain()
        recording_trigger.requested.clear()

        with patch.object(atom_index, "replace_game", side_effect=RuntimeError("index down")):
            result = await forge.restorer.rollback(game.id, build.build_id)
        await forge.drain()

        assert result.restored_atom_count == 1
        assert [a.code for a in atom_store.list_atoms(game.id)] == ["v1"]
        assert game_store.get(game.id).active_build_id == build.build_id
        assert recording_trigger.requested == [game.id]
        assert "Could not refresh the embedding index" in caplog.text
