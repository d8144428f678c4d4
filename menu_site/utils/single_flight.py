"""
In-flight de-duplication for async calls.

Concurrent callers asking for the same key share one running task instead of
each starting their own. Used by the catalog cache so a burst of requests that
all see a stale snapshot triggers a single provider fetch.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Hashable

logger = logging.getLogger(__name__)


class SingleFlight:
    def __init__(self) -> None:
        self._inflight: Dict[Hashable, "asyncio.Task[Any]"] = {}

    async def do(self, key: Hashable, fn: Callable[[], Awaitable[Any]]) -> Any:
        """Run ``fn`` for ``key`` unless a call for that key is already running.

        The shared task is shielded: cancelling one waiter (e.g. the client
        disconnected) does not abort the call for the others.
        """
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(fn())
            self._inflight[key] = task
            task.add_done_callback(lambda t, k=key: self._forget(k, t))
        else:
            logger.debug("Joining in-flight call for %r", key)
        return await asyncio.shield(task)

    def in_flight(self, key: Hashable) -> bool:
        return key in self._inflight

    def _forget(self, key: Hashable, task: "asyncio.Task[Any]") -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        # Mark the exception as retrieved when every waiter was cancelled.
        if not task.cancelled():
            task.exception()
