# src/atomforge/models/game.py
"""Game (project scope) data model."""

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, Field

GAME_NAME_PATTERN = r"^[a-z0-9][a-z0-9_-]*$"


class Game(BaseModel):
    """Isolation boundary for atoms, edges and builds."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    description: str | None = None
    active_build_id: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
