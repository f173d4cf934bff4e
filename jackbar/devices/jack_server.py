# jackbar
# Copyright (C) 2024-2026 Markus Kirsten
# SPDX-License-Identifier: GPL-3.0-or-later

"""
JACK server probe.

Opens a short-lived JACK client without starting the server, reads the
transport state and looks for the jack_capture input port, then closes the
client again.  A missing server (or a missing libjack) is the normal state
on ALSA-only machines and simply reports "not running".
"""

import logging
from dataclasses import dataclass

logger = logging.getLogger("jackbar.device.jack")

DEFAULT_CAPTURE_PORT = "jack_capture:input1"


@dataclass(frozen=True)
class ServerState:
    running: bool = False
    rolling: bool = False
    capturing: bool = False


class JackServerProbe:
    """Probe a JACK server through the JACK-Client library."""

    def __init__(self, client_name: str = "jackbar",
                 capture_port: str = DEFAULT_CAPTURE_PORT, jack_module=None):
        self._client_name = client_name
        self._capture_port = capture_port
        self._jack = jack_module

    def _module(self):
        if self._jack is None:
            # libjack is loaded when the module is imported
            import jack
            self._jack = jack
        return self._jack

    def probe(self) -> ServerState:
        try:
            jack = self._module()
        except OSError as e:
            logger.debug("JACK library unavailable: %s", e)
            return ServerState()

        try:
            client = jack.Client(self._client_name, no_start_server=True)
        except jack.JackError as e:
            logger.debug("JACK server not running: %s", e)
            return ServerState()

        try:
            state, _position = client.transport_query()
            rolling = state == jack.ROLLING
            try:
                client.get_port_by_name(self._capture_port)
                capturing = True
            except jack.JackError:
                capturing = False
        finally:
            client.close()

        return ServerState(running=True, rolling=rolling, capturing=capturing)
