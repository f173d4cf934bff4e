# jackbar
# Copyright (C) 2024-2026 Markus Kirsten
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Plain ALSA sound device: mixer only, never touches JACK.

Useful on machines without libjack or where the JACK probe is unwanted.
"""

from ..monitors import ControlChangeWatcher, SubscriptionWatcher
from .amixer import read_mixer
from .base import DeviceSnapshot, SoundDevice


class AlsaSoundDevice(SoundDevice):
    """ALSA mixer control; JACK flags stay false."""

    def __init__(self, name: str, card: str | None = None, monitor_pulse: bool = False):
        super().__init__()
        self.name = name
        self.card = card
        self.monitor_pulse = monitor_pulse

    def read_snapshot(self) -> DeviceSnapshot:
        volume, muted = read_mixer(self.name, self.card)
        return DeviceSnapshot(volume=volume, muted=muted)

    def watchers(self, identity: str, dispatcher) -> list:
        watchers = [ControlChangeWatcher(identity, dispatcher)]
        if self.monitor_pulse:
            watchers.append(SubscriptionWatcher(identity, dispatcher))
        return watchers
