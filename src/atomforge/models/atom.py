# src/atomforge/models/atom.py
"""Atom data models."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

AtomType = Literal["core", "feature", "util"]

ATOM_NAME_PATTERN = r"^[a-z][a-z0-9_]*$"


class Port(BaseModel):
    """One input or output in an atom's signature."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    optional: bool = False
    description: str | None = None

    def format(self) -> str:
        """Render as `name: type` with a `?` suffix when optional."""
        return f"{self.name}: {self.type}{'?' if self.optional else ''}"


def format_signature(inputs: list[Port], outputs: list[Port]) -> str:
    """Render a signature string like `(x: number, y: number) => number`.

    No outputs renders as `void`, one output as its bare type, several as an
    object shape.
    """
    in_sig = ", ".join(p.format() for p in inputs)
    if not outputs:
        out_sig = "void"
    elif len(outputs) == 1:
        out_sig = outputs[0].type
    else:
        out_sig = "{ " + ", ".join(p.format() for p in outputs) + " }"
    return f"({in_sig}) => {out_sig}"


class AtomSummary(BaseModel):
    """Structure view of an atom: signature and dependencies, no code."""

    name: str
    type: AtomType
    inputs: list[Port] = Field(default_factory=list)
    outputs: list[Port] = Field(default_factory=list)
    depends_on: list[str] = Field(default_factory=list)


class Atom(AtomSummary):
    """A full atom record as stored for a game."""

    code: str
    description: str | None = None
    version: int = 1

    @property
    def signature(self) -> str:
        return format_signature(self.inputs, self.outputs)


class AtomSearchResult(Atom):
    """An atom matched by semantic search.

    Version is not tracked by the index, so it is always 0 here.
    """

    version: int = 0
    similarity: float
