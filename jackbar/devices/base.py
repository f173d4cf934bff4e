# jackbar
# Copyright (C) 2024-2026 Markus Kirsten
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Abstract base class for jackbar sound devices.

A sound device reports volume, mute and JACK server state from its most
recent snapshot, refreshes that snapshot on demand, and builds the watchers
that tell the scheduler when a refresh is due.  Devices that know nothing
about JACK keep the server flags at their defaults (all false).
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class DeviceSnapshot:
    """Everything the block shows, captured in one refresh."""

    volume: int = 0
    muted: bool = False
    jack_running: bool = False
    jack_rolling: bool = False
    jack_capturing: bool = False

    def as_dict(self) -> dict:
        data = asdict(self)
        if not self.jack_running:
            # Transport and capture state only mean something with a server.
            data["jack_rolling"] = None
            data["jack_capturing"] = None
        return data


class SoundDevice(ABC):
    """Interface every sound backend must implement."""

    def __init__(self):
        self._snapshot = DeviceSnapshot()

    @property
    def snapshot(self) -> DeviceSnapshot:
        return self._snapshot

    @property
    def volume(self) -> int:
        return self._snapshot.volume

    @property
    def muted(self) -> bool:
        return self._snapshot.muted

    @property
    def jack_running(self) -> bool:
        return self._snapshot.jack_running

    @property
    def jack_rolling(self) -> bool:
        return self._snapshot.jack_rolling

    @property
    def jack_capturing(self) -> bool:
        return self._snapshot.jack_capturing

    def get_info(self) -> DeviceSnapshot:
        """Refresh the snapshot from live state and return it.

        Blocking.  On failure the exception propagates and the previous
        snapshot is kept.
        """
        snapshot = self.read_snapshot()
        self._snapshot = snapshot
        return snapshot

    @abstractmethod
    def read_snapshot(self) -> DeviceSnapshot: ...

    @abstractmethod
    def watchers(self, identity: str, dispatcher) -> list: ...
