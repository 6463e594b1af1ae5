# src/atomforge/models/external.py
"""External library models."""

from datetime import datetime

from pydantic import BaseModel


class RegistryEntry(BaseModel):
    """A library from the curated registry that games can install."""

    name: str
    display_name: str
    package_name: str
    version: str
    cdn_url: str
    global_name: str
    description: str | None = None
    load_type: str = "script"
    module_imports: dict[str, str] | None = None
    # Usage notes for atom authors. Only returned by explicit reads.
    api_surface: str | None = None


class InstalledExternal(RegistryEntry):
    """A registry entry installed into a game."""

    installed_at: datetime
