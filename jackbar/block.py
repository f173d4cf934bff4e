# jackbar
# Copyright (C) 2024-2026 Markus Kirsten
# SPDX-License-Identifier: GPL-3.0-or-later

"""
JackBlock, the status-bar block itself.

Construction does one synchronous refresh (a block without mixer info is
useless, so errors propagate), then starts the device's watchers.  After
that the block only refreshes when the scheduler asks it to.
"""

import asyncio
import logging
import uuid

from .config import BlockConfig
from .devices import SoundDevice, create_sound_device
from .display import BlockView, JackDisplay

logger = logging.getLogger("jackbar.block")


class JackBlock:
    def __init__(self, device: SoundDevice, display: JackDisplay,
                 identity: str | None = None, interval: float | None = None):
        self.id = identity or uuid.uuid4().hex
        self.device = device
        self.display = display
        self.interval = interval
        self._view: BlockView | None = None
        self._watchers = []

    @classmethod
    async def create(cls, block_config: BlockConfig, icons: dict | None,
                     dispatcher, device: SoundDevice | None = None) -> "JackBlock":
        """Build, refresh once and start monitoring."""
        if device is None:
            device = create_sound_device(block_config)
        block = cls(
            device,
            JackDisplay(icons, block_config.show_volume_when_muted),
            interval=block_config.interval,
        )
        await block.update()
        block.start_monitoring(dispatcher)
        return block

    def start_monitoring(self, dispatcher) -> None:
        self._watchers = self.device.watchers(self.id, dispatcher)
        for watcher in self._watchers:
            watcher.start()
        logger.info("Block %s: %d watchers started", self.id, len(self._watchers))

    async def update(self) -> None:
        """Re-read the device and re-project the view.

        The device read blocks on amixer and the JACK probe, so it runs in
        the default executor.
        """
        loop = asyncio.get_running_loop()
        snapshot = await loop.run_in_executor(None, self.device.get_info)
        self._view = self.display.project(snapshot)

    def view(self) -> BlockView | None:
        return self._view

    async def stop(self) -> None:
        watchers, self._watchers = self._watchers, []
        for watcher in watchers:
            await watcher.stop()
        logger.info("Block %s stopped", self.id)
