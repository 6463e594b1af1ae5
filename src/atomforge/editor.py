# src/atomforge/editor.py
"""Atom editing and lookup for a game."""

import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any, get_args

from pydantic import ValidationError

from atomforge.embedder import Embedder, build_embedding_text
from atomforge.exceptions import AtomValidationError, DependentsError, NotFoundError
from atomforge.models import (
    ATOM_NAME_PATTERN,
    Atom,
    AtomSearchResult,
    AtomSummary,
    AtomType,
    Port,
    UpsertResult,
)
from atomforge.stores import AtomIndex, AtomStore
from atomforge.trigger import RebuildTrigger

logger = logging.getLogger(__name__)

ATOM_TYPES: tuple[str, ...] = get_args(AtomType)


def _coerce_ports(ports: Sequence[Port | Mapping[str, Any]] | None, field: str) -> list[Port]:
    try:
        return [p if isinstance(p, Port) else Port(**p) for p in ports or []]
    except (TypeError, ValidationError) as e:
        raise AtomValidationError(f"Invalid {field}: {e}") from e


class AtomEditor:
    """Reads and mutates the atoms of a game.

    Mutations keep the atom store and the embedding index in step and then
    request a rebuild without waiting for it.
    """

    def __init__(
        self,
        atom_store: AtomStore,
        atom_index: AtomIndex,
        embedder: Embedder,
        trigger: RebuildTrigger,
        max_code_bytes: int = 2048,
        search_threshold: float = 0.3,
        default_search_limit: int = 5,
    ) -> None:
        """Initialize the editor.

        Args:
            atom_store: Store for atoms and dependency edges
            atom_index: Embedding index for semantic search
            embedder: Embedder for atom and query text
            trigger: Rebuild trigger notified after every mutation
            max_code_bytes: Largest accepted atom body, in UTF-8 bytes
            search_threshold: Minimum similarity for search results
            default_search_limit: Result count when search is called without a limit
        """
        self.atom_store = atom_store
        self.atom_index = atom_index
        self.embedder = embedder
        self.trigger = trigger
        self.max_code_bytes = max_code_bytes
        self.search_threshold = search_threshold
        self.default_search_limit = default_search_limit

    def list_structure(self, game_id: str, type_filter: str | None = None) -> list[AtomSummary]:
        """List every atom's signature and dependencies, without code."""
        if type_filter is not None and type_filter not in ATOM_TYPES:
            raise AtomValidationError(
                f'Invalid atom type "{type_filter}". Expected one of: {", ".join(ATOM_TYPES)}'
            )
        return [
            AtomSummary(
                name=atom.name,
                type=atom.type,
                inputs=atom.inputs,
                outputs=atom.outputs,
                depends_on=atom.depends_on,
            )
            for atom in self.atom_store.list_atoms(game_id, type_filter)
        ]

    def read_atoms(self, game_id: str, names: Sequence[str]) -> list[Atom]:
        """Return the full records of the named atoms that exist. Missing names are skipped."""
        return self.atom_store.get_many(game_id, list(dict.fromkeys(names)))

    def _validate(
        self,
        game_id: str,
        name: str,
        code: str,
        atom_type: str,
        dependencies: list[str],
    ) -> None:
        if not re.match(ATOM_NAME_PATTERN, name):
            raise AtomValidationError(
                f'Invalid atom name "{name}". Use snake_case: lowercase letters, '
                "digits and underscores, starting with a letter."
            )
        if atom_type not in ATOM_TYPES:
            raise AtomValidationError(
                f'Invalid atom type "{atom_type}". Expected one of: {", ".join(ATOM_TYPES)}'
            )

        size = len(code.encode("utf-8"))
        if size > self.max_code_bytes:
            raise AtomValidationError(
                f"Code is {size} bytes (limit: {self.max_code_bytes}). "
                f"Remove {size - self.max_code_bytes} bytes or split it into smaller atoms."
            )

        if name in dependencies:
            raise AtomValidationError(f'Atom "{name}" cannot depend on itself.')

        if dependencies:
            existing = self.atom_store.existing_names(game_id, dependencies)
            missing = [dep for dep in dependencies if dep not in existing]
            if missing:
                raise AtomValidationError(
                    f"Dependencies not found: {', '.join(missing)}. Create them first."
                )

    async def upsert_atom(
        self,
        game_id: str,
        name: str,
        code: str,
        type: str,
        inputs: Sequence[Port | Mapping[str, Any]] | None = None,
        outputs: Sequence[Port | Mapping[str, Any]] | None = None,
        dependencies: Sequence[str] | None = None,
        description: str | None = None,
    ) -> UpsertResult:
        """Create or replace an atom and its outgoing dependency edges.

        A failure before the store write leaves the atom as it was and
        requests no rebuild.

        Args:
            game_id: Game the atom belongs to
            name: snake_case atom name, unique in the game
            code: Atom body
            type: One of core, feature, util
            inputs: Input ports as Port objects or dicts
            outputs: Output ports as Port objects or dicts
            dependencies: Names of atoms this one calls; each must already exist
            description: Free-text description, included in the embedding

        Returns:
            UpsertResult with the rendered signature and stored version

        Raises:
            AtomValidationError: On a bad name, type, port, size or dependency
            EmbeddingError: If the embedding service fails
        """
        deps = list(dict.fromkeys(dependencies or []))
        self._validate(game_id, name, code, type, deps)
        input_ports = _coerce_ports(inputs, "inputs")
        output_ports = _coerce_ports(outputs, "outputs")

        atom = Atom(
            name=name,
            type=type,  # type: ignore[arg-type]
            code=code,
            description=description,
            inputs=input_ports,
            outputs=output_ports,
            depends_on=deps,
        )

        text = build_embedding_text(name, input_ports, output_ports, description, code)
        embedding = await self.embedder.aembed_text(text)
        logger.debug("Embedded atom %s (%d dims)", name, len(embedding))

        # Index first: if it fails the store is untouched. An index entry
        # without a stored atom is skipped by search.
        self.atom_index.upsert(game_id, name, embedding)
        version = self.atom_store.upsert(game_id, atom, deps)
        logger.info("Upserted atom %s v%d in game %s", name, version, game_id)

        self.trigger.request(game_id)

        return UpsertResult(
            name=name,
            signature=atom.signature,
            dependencies=deps,
            version=version,
        )

    async def delete_atom(self, game_id: str, name: str) -> None:
        """Delete an atom that nothing else depends on.

        Raises:
            DependentsError: If other atoms depend on it
            NotFoundError: If the atom does not exist
        """
        dependents = self.atom_store.list_dependents(game_id, name)
        if dependents:
            raise DependentsError(name, dependents)

        if not self.atom_store.delete(game_id, name):
            raise NotFoundError(f'Atom "{name}" not found.')
        logger.info("Deleted atom %s from game %s", name, game_id)
        try:
            self.atom_index.delete(game_id, name)
        except Exception:
            # The delete is committed; a leftover index entry is skipped by search.
            logger.exception("Could not remove %s from the embedding index", name)

        self.trigger.request(game_id)

    async def search(
        self,
        game_id: str,
        query: str,
        limit: int | None = None,
    ) -> list[AtomSearchResult]:
        """Find atoms whose embedded text is close to the query.

        Results are ordered by similarity and carry their current dependencies.
        """
        limit = self.default_search_limit if limit is None else limit
        embedding = await self.embedder.aembed_text(query)
        matches = self.atom_index.search(game_id, embedding, self.search_threshold, limit)
        if not matches:
            return []

        found = self.atom_store.get_many(game_id, [name for name, _ in matches])
        atoms = {atom.name: atom for atom in found}

        results = []
        for name, similarity in matches:
            atom = atoms.get(name)
            if atom is None:
                # Indexed but deleted since; the store is authoritative.
                continue
            results.append(
                AtomSearchResult(
                    **atom.model_dump(exclude={"version"}),
                    similarity=similarity,
                )
            )
        return results
