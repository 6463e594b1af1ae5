# src/atomforge/commands/session.py
"""Forge lifecycle shared by the command modules."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TypeVar

from atomforge.commands.base import ForgeUnavailable
from atomforge.config import ConfigError, create_forge, get_forge_config
from atomforge.forge import Forge

T = TypeVar("T")


@contextmanager
def open_forge(
    forge: Forge | None = None,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> Iterator[Forge]:
    """Yield the given Forge, or one built from configuration and closed afterwards.

    Raises:
        ForgeUnavailable: If the configuration is invalid
    """
    if forge is not None:
        yield forge
        return

    config = get_forge_config(data_dir, config_path)
    if isinstance(config, ConfigError):
        message = config.message
        if config.suggestion:
            message = f"{message} {config.suggestion}"
        raise ForgeUnavailable(message)

    owned = create_forge(config)
    try:
        yield owned
    finally:
        owned.close()


def run(forge: Forge, operation: Callable[[], Awaitable[T]]) -> T:
    """Run an async operation, then wait for the rebuilds it requested.

    Background rebuilds are detached from the operation's result; draining
    only keeps them from being cut off when the event loop closes.
    """

    async def _main() -> T:
        try:
            return await operation()
        finally:
            await forge.drain()

    return asyncio.run(_main())
