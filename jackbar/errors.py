# jackbar
# Copyright (C) 2024-2026 Markus Kirsten
# SPDX-License-Identifier: GPL-3.0-or-later

"""Error types raised on the block refresh path."""


class BlockError(Exception):
    """A block could not produce its information for this update cycle."""

    def __init__(self, block: str, message: str):
        super().__init__(f"{block}: {message}")
        self.block = block
        self.message = message


class MixerError(BlockError):
    """amixer could not be run or its output could not be parsed."""

    def __init__(self, message: str):
        super().__init__("sound", message)


class ConfigError(BlockError):
    """The block configuration is invalid."""

    def __init__(self, message: str):
        super().__init__("config", message)
