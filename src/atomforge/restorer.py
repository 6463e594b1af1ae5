# src/atomforge/restorer.py
"""Rollback of a game's atoms to an earlier build's snapshot."""

import logging

from atomforge.embedder import Embedder, build_embedding_text
from atomforge.exceptions import NotFoundError
from atomforge.models import RollbackResult
from atomforge.snapshot import take_snapshot
from atomforge.stores import AtomIndex, AtomStore, BuildStore, GameStore
from atomforge.trigger import RebuildTrigger

logger = logging.getLogger(__name__)

CHECKPOINT_LOG = "auto-checkpoint before rollback"


class Restorer:
    """Restores a game's live atoms and edges from a build snapshot.

    The current state is checkpointed as a build first, so a rollback can
    itself be rolled back.
    """

    def __init__(
        self,
        game_store: GameStore,
        atom_store: AtomStore,
        build_store: BuildStore,
        atom_index: AtomIndex,
        embedder: Embedder,
        trigger: RebuildTrigger,
    ) -> None:
        self.game_store = game_store
        self.atom_store = atom_store
        self.build_store = build_store
        self.atom_index = atom_index
        self.embedder = embedder
        self.trigger = trigger

    async def rollback(self, game_id: str, build_id: str) -> RollbackResult:
        """Replace the game's atoms with those captured by `build_id`.

        Embeddings are regenerated before anything is written, so an embedding
        failure leaves the live atoms untouched (the checkpoint build remains).
        Atoms and edges are then replaced in one storage transaction.

        Args:
            game_id: Game to roll back
            build_id: Build whose snapshot to restore

        Returns:
            RollbackResult with the checkpoint build ID and restored atom count

        Raises:
            NotFoundError: If the build does not exist in this game or has no snapshot
            EmbeddingError: If re-embedding the restored atoms fails
        """
        target = self.build_store.get(game_id, build_id)
        if target is None:
            raise NotFoundError(f'Build "{build_id}" not found for this game.')
        if target.atom_snapshot is None:
            raise NotFoundError(
                f'Build "{build_id}" has no atom snapshot and cannot be restored. '
                "It predates snapshot support."
            )
        snapshot = target.atom_snapshot

        checkpoint = self.build_store.create_checkpoint(
            game_id,
            take_snapshot(self.atom_store, game_id),
            [CHECKPOINT_LOG],
        )
        logger.info(
            "Checkpointed game %s as build %s before rolling back to %s",
            game_id,
            checkpoint.id,
            build_id,
        )

        texts = [
            build_embedding_text(a.name, a.inputs, a.outputs, a.description, a.code)
            for a in snapshot.atoms
        ]
        embeddings = await self.embedder.aembed_texts(texts)

        self.atom_store.replace_all(game_id, snapshot.atoms, snapshot.dependencies)
        try:
            self.atom_index.replace_game(
                game_id,
                dict(zip(snapshot.atom_names, embeddings, strict=True)),
            )
        except Exception:
            # The restored atoms are committed; the rollback still has to
            # activate the target and rebuild. Search may be stale until the
            # atoms are saved again.
            logger.exception("Could not refresh the embedding index of game %s", game_id)
        self.game_store.set_active_build(game_id, target.id)
        logger.info(
            "Rolled back game %s to build %s (%d atoms)", game_id, build_id, len(snapshot.atoms)
        )

        self.trigger.request(game_id)

        return RollbackResult(
            checkpoint_build_id=checkpoint.id,
            restored_atom_count=len(snapshot.atoms),
        )
