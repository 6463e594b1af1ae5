# src/atomforge/trigger.py
"""Fire-and-forget rebuild requests.

Atom mutations and rollbacks ask for a rebuild without waiting for it. The
request runs as a detached asyncio task; its failure is logged and never
reaches the caller whose mutation already succeeded.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Coroutine
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from atomforge.builder import Builder

logger = logging.getLogger(__name__)


class BackgroundTasks:
    """Holds strong references to detached tasks until they finish.

    The event loop keeps only weak references to tasks, so a task nobody
    holds can be garbage collected mid-flight.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()

    def __len__(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], name: str | None = None) -> asyncio.Task[Any]:
        """Schedule a coroutine on the running loop without awaiting it."""
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Background task %s failed", task.get_name(), exc_info=exc)

    async def drain(self) -> None:
        """Wait until every scheduled task, including ones spawned meanwhile, is done."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


class RebuildTrigger(ABC):
    """Requests a rebuild of a game, best effort.

    Subclasses implement `trigger`. Callers use `request`, which detaches the
    trigger onto the trigger's background task set and returns immediately.
    """

    def __init__(self, tasks: BackgroundTasks | None = None) -> None:
        self.tasks = tasks if tasks is not None else BackgroundTasks()

    @abstractmethod
    async def trigger(self, game_id: str) -> None:
        """Run one rebuild request. Must log failures instead of raising."""
        ...

    def request(self, game_id: str) -> asyncio.Task[Any]:
        """Schedule a rebuild and return without waiting for it."""
        logger.debug("Rebuild requested for game %s", game_id)
        return self.tasks.spawn(self.trigger(game_id), name=f"rebuild:{game_id}")

    async def drain(self) -> None:
        await self.tasks.drain()


class HTTPRebuildTrigger(RebuildTrigger):
    """Posts `{"game_id": ...}` to a remote rebuild endpoint.

    Without a URL every request is skipped with a warning.

    Args:
        url: Rebuild endpoint. None disables the trigger.
        token: Optional bearer token sent in the Authorization header.
        timeout: Request timeout in seconds.
        tasks: Background task set to detach requests onto.
    """

    def __init__(
        self,
        url: str | None,
        token: str | None = None,
        timeout: float = 10.0,
        tasks: BackgroundTasks | None = None,
    ) -> None:
        super().__init__(tasks)
        self.url = url
        self.token = token
        self.timeout = timeout

    async def trigger(self, game_id: str) -> None:
        if not self.url:
            logger.warning("Rebuild endpoint not configured, skipping rebuild of %s", game_id)
            return

        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.url, json={"game_id": game_id}, headers=headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Rebuild trigger for %s returned %s: %s",
                game_id,
                e.response.status_code,
                e.response.text,
            )
        except httpx.HTTPError as e:
            logger.error("Rebuild trigger for %s failed: %s", game_id, e)
        else:
            logger.info("Rebuild triggered for game %s", game_id)


class LocalRebuildTrigger(RebuildTrigger):
    """Runs the build pipeline in-process."""

    def __init__(self, builder: Builder, tasks: BackgroundTasks | None = None) -> None:
        super().__init__(tasks)
        self.builder = builder

    async def trigger(self, game_id: str) -> None:
        try:
            result = await self.builder.build(game_id)
        except Exception as e:
            # The build row already carries the error; the mutation that
            # requested this rebuild has succeeded regardless.
            logger.error("Background rebuild of %s failed: %s", game_id, e)
        else:
            logger.info(
                "Background rebuild of %s finished: build %s, %d atoms",
                game_id,
                result.build_id,
                result.atom_count,
            )
