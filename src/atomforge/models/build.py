# src/atomforge/models/build.py
"""Build and snapshot data models."""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from atomforge.models.atom import AtomType, Port


class BuildStatus(str, Enum):
    """Build lifecycle states. `building` moves exactly once to a terminal state."""

    BUILDING = "building"
    SUCCESS = "success"
    ERROR = "error"


class Dependency(BaseModel):
    """Directed edge: `atom_name` depends on `depends_on`."""

    model_config = ConfigDict(frozen=True)

    atom_name: str
    depends_on: str


class SnapshotAtom(BaseModel):
    """An atom as captured in a snapshot (no embedding, no version)."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: AtomType
    code: str
    description: str | None = None
    inputs: tuple[Port, ...] = ()
    outputs: tuple[Port, ...] = ()


class AtomSnapshot(BaseModel):
    """Point-in-time copy of a game's full atom and edge set.

    Self-contained: restoring it needs nothing but this value.
    """

    model_config = ConfigDict(frozen=True)

    atoms: tuple[SnapshotAtom, ...] = ()
    dependencies: tuple[Dependency, ...] = ()

    @property
    def atom_names(self) -> list[str]:
        return [a.name for a in self.atoms]


class Build(BaseModel):
    """One run of the build pipeline for a game."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    game_id: str
    status: BuildStatus = BuildStatus.BUILDING
    bundle_url: str | None = None
    atom_count: int | None = None
    error_message: str | None = None
    build_log: list[str] = Field(default_factory=list)
    atom_snapshot: AtomSnapshot | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class BuildSummary(BaseModel):
    """Build history row, without the embedded snapshot."""

    id: str
    status: BuildStatus
    bundle_url: str | None = None
    atom_count: int | None = None
    error_message: str | None = None
    has_snapshot: bool = False
    created_at: datetime
