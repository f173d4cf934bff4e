# jackbar
# Copyright (C) 2024-2026 Markus Kirsten
# SPDX-License-Identifier: GPL-3.0-or-later

"""
jackbar: ALSA volume / JACK transport block for i3bar-compatible status bars.

The block reads the mixer with ``amixer``, probes the JACK server for its
transport and ``jack_capture`` state, and refreshes itself whenever
``alsactl monitor`` or the JACK D-Bus interface reports a change.
"""

__version__ = "0.3.0"
