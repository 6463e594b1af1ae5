# src/atomforge/externals.py
"""External library registry and per-game installation."""

import logging

from atomforge.exceptions import AtomValidationError, NotFoundError
from atomforge.models import InstalledExternal, RegistryEntry
from atomforge.stores import ExternalStore
from atomforge.trigger import RebuildTrigger

logger = logging.getLogger(__name__)


class ExternalsManager:
    """Installs registry libraries into games.

    Installed libraries end up in the build manifest, so installing or
    uninstalling requests a rebuild.
    """

    def __init__(self, external_store: ExternalStore, trigger: RebuildTrigger) -> None:
        self.external_store = external_store
        self.trigger = trigger

    def register(self, entry: RegistryEntry) -> RegistryEntry:
        """Add or replace a library in the registry."""
        self.external_store.register(entry)
        logger.info("Registered external %s %s", entry.name, entry.version)
        return entry

    def list_registry(self) -> list[RegistryEntry]:
        return self.external_store.list_registry()

    def list_installed(self, game_id: str) -> list[InstalledExternal]:
        return self.external_store.list_installed(game_id)

    def read(self, game_id: str, names: list[str]) -> list[InstalledExternal]:
        """Return the named libraries installed in the game, with their API surface.

        Names that are not installed (or not registered) are skipped.
        """
        return self.external_store.read_installed(game_id, list(dict.fromkeys(names)))

    async def install(self, game_id: str, name: str) -> InstalledExternal:
        """Install a registry library into a game.

        Raises:
            NotFoundError: If no registry entry has this name
            AtomValidationError: If the library is already installed
        """
        if self.external_store.get_entry(name) is None:
            raise NotFoundError(f'External "{name}" is not in the registry.')
        if any(ext.name == name for ext in self.external_store.list_installed(game_id)):
            raise AtomValidationError(f'External "{name}" is already installed.')

        installed = self.external_store.install(game_id, name)
        logger.info("Installed external %s into game %s", name, game_id)
        self.trigger.request(game_id)
        return installed

    async def uninstall(self, game_id: str, name: str) -> None:
        """Remove a library from a game.

        Raises:
            AtomValidationError: If the library is not installed
        """
        if not self.external_store.uninstall(game_id, name):
            raise AtomValidationError(f'External "{name}" is not installed.')
        logger.info("Uninstalled external %s from game %s", name, game_id)
        self.trigger.request(game_id)
