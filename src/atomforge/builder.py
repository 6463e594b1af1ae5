# src/atomforge/builder.py
"""Build pipeline: snapshot, sort, render and publish a game's bundle."""

import asyncio
import logging
from datetime import UTC, datetime

from atomforge.bundle import (
    JS_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    artifact_paths,
    render_bundle,
    render_manifest,
)
from atomforge.exceptions import NotFoundError
from atomforge.graph import CycleError, topological_sort
from atomforge.models import BuildResult, Game
from atomforge.snapshot import take_snapshot
from atomforge.stores import AtomStore, BlobStore, BuildStore, ExternalStore, GameStore

logger = logging.getLogger(__name__)

NO_CACHE = "no-cache"


class Builder:
    """Runs the build pipeline for a game.

    Each run owns one build row. The row starts in `building` and is moved
    to `success` or `error` before `build` returns or raises, whatever fails
    in between. Concurrent runs for the same game are independent; the last
    one to succeed becomes the game's active build.
    """

    def __init__(
        self,
        game_store: GameStore,
        atom_store: AtomStore,
        build_store: BuildStore,
        external_store: ExternalStore,
        blob_store: BlobStore,
        versioned_cache_seconds: int = 3600,
    ) -> None:
        self.game_store = game_store
        self.atom_store = atom_store
        self.build_store = build_store
        self.external_store = external_store
        self.blob_store = blob_store
        self.versioned_cache_control = f"public, max-age={versioned_cache_seconds}"

    async def build(self, game_id: str) -> BuildResult:
        """Build a game's bundle and make it the active build.

        Args:
            game_id: Game to build

        Returns:
            BuildResult with the build ID, atom order and public bundle URL

        Raises:
            NotFoundError: If the game does not exist (no build row is created)
            CycleError: If the dependency graph has a cycle
            UploadError: If publishing an artifact fails
        """
        game = self.game_store.get(game_id)
        if game is None:
            raise NotFoundError(f"Game not found: {game_id}")

        build = self.build_store.create(game.id)
        logger.info("Build %s started for game %s", build.id, game.name)

        try:
            return await self._run(game, build.id)
        except asyncio.CancelledError:
            self._record_failure(build.id, "Build cancelled")
            raise
        except CycleError as e:
            logger.error("Build %s failed: %s", build.id, e)
            self._record_failure(build.id, str(e))
            raise
        except Exception as e:
            logger.error("Build %s failed: %s", build.id, e, exc_info=True)
            self._record_failure(build.id, str(e) or type(e).__name__)
            raise

    def _record_failure(self, build_id: str, message: str) -> None:
        try:
            self.build_store.finalize_error(build_id, message)
        except Exception:
            # Keep the original failure as the one that propagates.
            logger.exception("Could not mark build %s as failed", build_id)

    async def _run(self, game: Game, build_id: str) -> BuildResult:
        snapshot = take_snapshot(self.atom_store, game.id)
        self.build_store.attach_snapshot(build_id, snapshot)

        atoms, externals = await asyncio.gather(
            asyncio.to_thread(self.atom_store.list_atoms, game.id),
            asyncio.to_thread(self.external_store.list_installed, game.id),
        )

        if not atoms:
            self.build_store.finalize_success(build_id, 0, [], None)
            logger.info("Build %s for game %s: no atoms, nothing to publish", build_id, game.name)
            return BuildResult(build_id=build_id, atom_count=0, order=[], bundle_url=None)

        by_name = {atom.name: atom for atom in atoms}
        edges = [(atom.name, dep) for atom in atoms for dep in atom.depends_on]
        order = topological_sort(by_name, edges)

        built_at = datetime.now(UTC)
        bundle = render_bundle(game.name, by_name, order, built_at).encode("utf-8")
        manifest = render_manifest(externals, built_at).encode("utf-8")

        paths = artifact_paths(game.name, build_id)
        await asyncio.to_thread(
            self.blob_store.upload, paths.latest, bundle, JS_CONTENT_TYPE, NO_CACHE
        )
        await asyncio.to_thread(
            self.blob_store.upload,
            paths.versioned,
            bundle,
            JS_CONTENT_TYPE,
            self.versioned_cache_control,
        )
        await asyncio.to_thread(
            self.blob_store.upload, paths.manifest, manifest, JSON_CONTENT_TYPE, NO_CACHE
        )
        bundle_url = self.blob_store.public_url(paths.latest)

        if self.build_store.finalize_success(build_id, len(order), order, bundle_url):
            self.game_store.set_active_build(game.id, build_id)
        else:
            logger.warning("Build %s was already finalized, not activating it", build_id)

        logger.info(
            "Build %s succeeded for game %s: %d atoms (%s)",
            build_id,
            game.name,
            len(order),
            " -> ".join(order),
        )
        return BuildResult(
            build_id=build_id,
            atom_count=len(order),
            order=order,
            bundle_url=bundle_url,
        )
