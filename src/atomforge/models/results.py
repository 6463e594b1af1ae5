# src/atomforge/models/results.py
"""Result models returned by the editor, builder and restorer."""

from pydantic import BaseModel


class UpsertResult(BaseModel):
    """Outcome of creating or updating an atom."""

    name: str
    signature: str
    dependencies: list[str]
    version: int


class BuildResult(BaseModel):
    """Outcome of a successful build."""

    build_id: str
    atom_count: int
    order: list[str]
    bundle_url: str | None = None


class RollbackResult(BaseModel):
    """Outcome of a rollback."""

    checkpoint_build_id: str
    restored_atom_count: int
