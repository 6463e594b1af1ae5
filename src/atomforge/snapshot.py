# src/atomforge/snapshot.py
"""Point-in-time capture of a game's atoms and edges."""

from atomforge.models import AtomSnapshot, Dependency, SnapshotAtom
from atomforge.stores import AtomStore


def take_snapshot(atom_store: AtomStore, game_id: str) -> AtomSnapshot:
    """Capture every atom and dependency edge of a game.

    Atoms and their edges come from a single `list_atoms` read, so the edge
    set always matches the atom set it was read with. Embeddings and
    versions are not part of a snapshot.

    Args:
        atom_store: Store holding the game's atoms
        game_id: Game to capture

    Returns:
        Immutable snapshot in atom creation order
    """
    atoms = atom_store.list_atoms(game_id)
    return AtomSnapshot(
        atoms=tuple(
            SnapshotAtom(
                name=atom.name,
                type=atom.type,
                code=atom.code,
                description=atom.description,
                inputs=tuple(atom.inputs),
                outputs=tuple(atom.outputs),
            )
            for atom in atoms
        ),
        dependencies=tuple(
            Dependency(atom_name=atom.name, depends_on=dep)
            for atom in atoms
            for dep in atom.depends_on
        ),
    )
