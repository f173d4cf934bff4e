# jackbar
# Copyright (C) 2024-2026 Markus Kirsten
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Turns a DeviceSnapshot into what the bar shows: icon name, text and state.

The icon table is plain config (``icons`` section merged over
DEFAULT_ICONS), so nothing here knows about fonts or themes.
"""

from dataclasses import dataclass

from .devices.base import DeviceSnapshot
from .errors import BlockError

DEFAULT_ICONS = {
    "volume_muted": "🔇",
    "volume_empty": "🔈",
    "volume_half": "🔉",
    "volume_full": "🔊",
    "rec": "●",
    "play": "▶",
    "stop": "■",
}

# Icon name thresholds, checked in order: (highest volume, icon)
_VOLUME_ICONS = [
    (20, "volume_empty"),
    (70, "volume_half"),
]

IDLE = "idle"
WARNING = "warning"
CRITICAL = "critical"


@dataclass(frozen=True)
class BlockView:
    icon: str
    text: str
    state: str = IDLE


def volume_icon(volume: int) -> str:
    for limit, icon in _VOLUME_ICONS:
        if volume <= limit:
            return icon
    return "volume_full"


class JackDisplay:
    """Projects device snapshots onto a BlockView."""

    def __init__(self, icons: dict | None = None, show_volume_when_muted: bool = False):
        self.icons = {**DEFAULT_ICONS, **(icons or {})}
        self.show_volume_when_muted = show_volume_when_muted

    def _icon(self, key: str) -> str:
        try:
            return self.icons[key]
        except KeyError:
            raise BlockError("sound", f"cannot find icon '{key}'") from None

    def project(self, snapshot: DeviceSnapshot) -> BlockView:
        if snapshot.muted:
            icon = self._icon("volume_muted")
            text = f"{icon} {snapshot.volume:02}%" if self.show_volume_when_muted else icon
            return BlockView("volume_empty", text, WARNING)

        # Transport and capture flags mean nothing without a running server.
        parts = ["ALSA", f"{snapshot.volume:02}%"]
        if snapshot.jack_running:
            parts[0] = "JACK"
            if snapshot.jack_capturing:
                parts.append(self._icon("rec"))
            parts.append(self._icon("play" if snapshot.jack_rolling else "stop"))
        return BlockView(volume_icon(snapshot.volume), " ".join(parts), IDLE)

    def error(self, message: str) -> BlockView:
        return BlockView("volume_empty", f"jack: {message}", CRITICAL)
