# jackbar
# Copyright (C) 2024-2026 Markus Kirsten
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Refresh requests and the scheduler that serves them.

Watchers never touch device state.  They push a RefreshRequest carrying the
block identity into the UpdateDispatcher queue; the Scheduler drains the
queue, collapses requests per identity and calls that block's update() once.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field

logger = logging.getLogger("jackbar.dispatch")


@dataclass(frozen=True)
class RefreshRequest:
    identity: str
    update_time: float = field(default_factory=time.monotonic)


class UpdateDispatcher:
    """Multi-producer queue of refresh requests (unbounded)."""

    def __init__(self):
        self.queue: asyncio.Queue[RefreshRequest] = asyncio.Queue()

    def request(self, identity: str) -> None:
        """Queue a refresh for *identity*.  Call from the event loop thread."""
        self.queue.put_nowait(RefreshRequest(identity))

    def drain(self) -> list[RefreshRequest]:
        """Pop everything currently queued without waiting."""
        pending = []
        while True:
            try:
                pending.append(self.queue.get_nowait())
            except asyncio.QueueEmpty:
                return pending


class Scheduler:
    """Runs block updates on request, at most one per identity per round."""

    def __init__(self, dispatcher: UpdateDispatcher, on_render=None):
        self._dispatcher = dispatcher
        self._blocks = {}
        self._on_render = on_render
        self._timers: dict[str, asyncio.Task] = {}

    def register(self, block) -> None:
        self._blocks[block.id] = block
        interval = getattr(block, "interval", None)
        if interval:
            self._timers[block.id] = asyncio.create_task(
                self._poll(block.id, interval), name=f"poll-{block.id}")

    async def _poll(self, identity: str, interval: float):
        while True:
            await asyncio.sleep(interval)
            self._dispatcher.request(identity)

    async def run_once(self) -> list[str]:
        """Wait for at least one request, then serve everything queued.

        Returns the identities that were updated successfully.
        """
        first = await self._dispatcher.queue.get()
        requests = [first] + self._dispatcher.drain()
        # dict keeps first-seen order; later requests for the same block collapse
        identities = list(dict.fromkeys(r.identity for r in requests))
        updated = []
        for identity in identities:
            block = self._blocks.get(identity)
            if block is None:
                logger.debug("Refresh for unknown block %s dropped", identity)
                continue
            try:
                await block.update()
            except Exception as e:
                logger.warning("Block %s update failed: %s", identity, e)
                continue
            updated.append(identity)
        if updated and self._on_render is not None:
            self._on_render()
        return updated

    async def run(self):
        while True:
            await self.run_once()

    def stop(self) -> None:
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
