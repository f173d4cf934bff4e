# jackbar
# Copyright (C) 2024-2026 Markus Kirsten
# SPDX-License-Identifier: GPL-3.0-or-later

"""
ALSA mixer reader, runs ``amixer get <control>`` and parses the result.

amixer prints one line per channel; for a simple control the last line is
the one that matters, e.g.::

    Simple mixer control 'Master',0
      ...
      Mono: Playback 50 [80%] [-12.00dB] [on]

Bracketed tokens without a ``dB`` suffix are kept: the first is the volume
percentage, the second (if any) the switch state, ``off`` meaning muted.
"""

import logging
import subprocess

from ..errors import MixerError

logger = logging.getLogger("jackbar.device.amixer")

# To filter [100%] output from amixer into 100
FILTER = "[]%"

AMIXER_TIMEOUT = 3


def parse_amixer_output(output: str) -> tuple[int, bool]:
    """Return ``(volume, muted)`` from amixer stdout."""
    lines = output.strip().splitlines()
    if not lines:
        raise MixerError("could not get sound info")

    tokens = [
        tok.strip(FILTER)
        for tok in lines[-1].split()
        if tok.startswith("[") and "dB" not in tok
    ]
    if not tokens:
        raise MixerError("could not get volume")

    if not tokens[0].isdecimal():
        raise MixerError(f"could not parse volume {tokens[0]!r} to an unsigned integer")
    volume = int(tokens[0])
    muted = len(tokens) > 1 and tokens[1] == "off"
    return volume, muted


def read_mixer(control: str, card: str | None = None) -> tuple[int, bool]:
    """Query amixer for *control* (optionally on *card*)."""
    cmd = ["amixer"]
    if card is not None:
        cmd += ["-c", card]
    cmd += ["get", control]
    try:
        result = subprocess.run(
            cmd, capture_output=True, text=True, timeout=AMIXER_TIMEOUT,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        raise MixerError(f"could not run amixer to get sound info: {e}") from e

    if result.returncode != 0:
        logger.debug("amixer stderr: %s", result.stderr.strip())
        raise MixerError(f"amixer exited with status {result.returncode}")
    return parse_amixer_output(result.stdout)
