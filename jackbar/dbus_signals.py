# jackbar
# Copyright (C) 2024-2026 Markus Kirsten
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Session D-Bus subscription for JACK lifecycle signals.

jackdbus announces server start/stop on org.jackaudio.JackControl and client
changes on org.jackaudio.JackPatchbay.  We only care *that* something
happened, so every matching signal just calls ``on_signal()``; the payload
is dropped.

dbus-python delivers signals through a GLib main loop, which runs in its own
daemon thread here so the asyncio loop stays free.
"""

import logging
import threading
from dataclasses import dataclass, field

import dbus
from dbus.mainloop.glib import DBusGMainLoop
from gi.repository import GLib

logger = logging.getLogger("jackbar.dbus")

JACK_CONTROL = "org.jackaudio.JackControl"
JACK_PATCHBAY = "org.jackaudio.JackPatchbay"


@dataclass(frozen=True)
class SignalRule:
    interface: str
    member: str
    args: dict = field(default_factory=dict)


JACK_SIGNAL_RULES = [
    SignalRule(JACK_CONTROL, "ServerStarted"),
    SignalRule(JACK_CONTROL, "ServerStopped"),
    SignalRule(JACK_CONTROL, "IsStarted"),
    # jack_capture / jack_transport appearing or going away
    SignalRule(JACK_PATCHBAY, "ClientAppeared", {"arg2": "jack_transport"}),
    SignalRule(JACK_PATCHBAY, "ClientAppeared", {"arg2": "jack_capture"}),
    SignalRule(JACK_PATCHBAY, "ClientDisappeared", {"arg2": "jack_capture"}),
]


class SessionBusSignals:
    """Private session bus connection with a GLib loop in a daemon thread."""

    def __init__(self, on_signal, rules=JACK_SIGNAL_RULES):
        self._on_signal = on_signal
        self._rules = rules
        self._bus = None
        self._matches = []
        self._loop = None
        self._thread = None

    def start(self) -> None:
        """Connect and subscribe.  Raises dbus.exceptions.DBusException."""
        DBusGMainLoop(set_as_default=True)
        self._bus = dbus.SessionBus(private=True)
        for rule in self._rules:
            self._matches.append(self._bus.add_signal_receiver(
                self._handle,
                signal_name=rule.member,
                dbus_interface=rule.interface,
                **rule.args,
            ))
        self._loop = GLib.MainLoop()
        self._thread = threading.Thread(
            target=self._loop.run, name="jackbar-dbus", daemon=True)
        self._thread.start()
        logger.info("Listening for JACK D-Bus signals (%d rules)", len(self._rules))

    def _handle(self, *args, **kwargs):
        self._on_signal()

    def stop(self) -> None:
        for match in self._matches:
            match.remove()
        self._matches = []
        if self._loop is not None:
            self._loop.quit()
            self._loop = None
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None
        if self._bus is not None:
            self._bus.close()
            self._bus = None
