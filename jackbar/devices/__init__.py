# jackbar
# Copyright (C) 2024-2026 Markus Kirsten
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Pluggable sound devices for the jackbar block.

Each device reads its state into a DeviceSnapshot and builds the watchers
that trigger refreshes.  The factory ``create_sound_device`` reads the block
config and returns the right one.

Supported drivers:
  - ``auto``  – ALSA mixer plus JACK server state (default)
  - ``alsa``  – ALSA mixer only
"""

import logging

from ..config import BlockConfig
from .alsa import AlsaSoundDevice
from .base import DeviceSnapshot, SoundDevice
from .jack import JackSoundDevice

logger = logging.getLogger("jackbar.device")

__all__ = [
    "AlsaSoundDevice",
    "DeviceSnapshot",
    "JackSoundDevice",
    "SoundDevice",
    "create_sound_device",
]


def create_sound_device(block_config: BlockConfig) -> SoundDevice:
    """Create the sound device selected by ``jack.driver``."""
    driver = block_config.driver
    if driver == "alsa":
        logger.info("Sound device: ALSA control '%s'", block_config.name)
        return AlsaSoundDevice(block_config.name, block_config.card,
                               monitor_pulse=block_config.monitor_pulse)
    if driver != "auto":
        logger.warning("Unknown driver '%s', using auto", driver)
    logger.info("Sound device: ALSA control '%s' + JACK (capture port %s)",
                block_config.name, block_config.capture_port)
    return JackSoundDevice(
        block_config.name,
        block_config.card,
        capture_port=block_config.capture_port,
        client_name=block_config.client_name,
        monitor_pulse=block_config.monitor_pulse,
    )
