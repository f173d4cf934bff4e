# jackbar
# Copyright (C) 2024-2026 Markus Kirsten
# SPDX-License-Identifier: GPL-3.0-or-later

"""
JACK + ALSA sound device, the default backend.

Volume and mute always come from the ALSA mixer; JACK only adds the
running / rolling / capturing flags on top.  Refreshes are triggered by
``alsactl monitor`` (mixer changes) and the jackdbus session-bus signals
(server and jack_capture lifecycle).
"""

import logging

from ..monitors import BusSignalWatcher, ControlChangeWatcher, SubscriptionWatcher
from .amixer import read_mixer
from .base import DeviceSnapshot, SoundDevice
from .jack_server import DEFAULT_CAPTURE_PORT, JackServerProbe

logger = logging.getLogger("jackbar.device.jack")


class JackSoundDevice(SoundDevice):
    """ALSA mixer control plus JACK server state."""

    def __init__(self, name: str, card: str | None = None,
                 probe: JackServerProbe | None = None,
                 capture_port: str = DEFAULT_CAPTURE_PORT,
                 client_name: str = "jackbar", monitor_pulse: bool = False):
        super().__init__()
        self.name = name
        self.card = card
        self.monitor_pulse = monitor_pulse
        self._probe = probe or JackServerProbe(client_name, capture_port)

    def read_snapshot(self) -> DeviceSnapshot:
        # The probe builds a fresh ServerState every time, so a failed probe
        # never leaves an earlier "running" behind.
        server = self._probe.probe()
        volume, muted = read_mixer(self.name, self.card)
        logger.debug("%s: %d%% muted=%s jack=%s", self.name, volume, muted, server)
        return DeviceSnapshot(
            volume=volume,
            muted=muted,
            jack_running=server.running,
            jack_rolling=server.running and server.rolling,
            jack_capturing=server.running and server.capturing,
        )

    def watchers(self, identity: str, dispatcher) -> list:
        watchers = [
            ControlChangeWatcher(identity, dispatcher),
            BusSignalWatcher(identity, dispatcher),
        ]
        if self.monitor_pulse:
            watchers.append(SubscriptionWatcher(identity, dispatcher))
        return watchers
