# jackbar
# Copyright (C) 2024-2026 Markus Kirsten
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Configuration loader for jackbar.

Loads a single JSON config file.  Search order:
  1. $JACKBAR_CONFIG                  (explicit override, also set by --config)
  2. ~/.config/jackbar/config.json
  3. /etc/jackbar/config.json
  4. config.json                      (CWD, handy for local dev)

Usage:
    from jackbar.config import cfg, BlockConfig

    control = cfg("jack", "name", default="Master")
    icons   = cfg("icons", default={})
    block   = BlockConfig.from_dict(cfg("jack", default={}))
"""

import json
import logging
import os
from dataclasses import dataclass

from .errors import ConfigError

logger = logging.getLogger(__name__)

_config: dict | None = None

DRIVERS = ("auto", "alsa")

_BLOCK_KEYS = {
    "name", "card", "driver", "show_volume_when_muted", "capture_port",
    "client_name", "monitor_pulse", "interval",
}
_SECTIONS = {"jack", "icons", "status_server"}


def _search_paths() -> list[str]:
    paths = []
    override = os.environ.get("JACKBAR_CONFIG")
    if override:
        paths.append(override)
    paths += [
        os.path.expanduser("~/.config/jackbar/config.json"),
        "/etc/jackbar/config.json",
        "config.json",
    ]
    return paths


def _validate(config: dict, path: str) -> None:
    """Warn about unknown or suspicious config values."""
    for section in config:
        if section not in _SECTIONS:
            logger.warning("Config %s: unknown section '%s'", path, section)
    block = config.get("jack")
    if block is None:
        return
    if not isinstance(block, dict):
        logger.warning("Config %s: 'jack' should be an object, got %s", path, type(block).__name__)
        return
    for key in block.keys() - _BLOCK_KEYS:
        logger.warning("Config %s: unknown key jack.%s", path, key)
    driver = block.get("driver", "auto")
    if str(driver).lower() not in DRIVERS:
        logger.warning("Config %s: unknown jack.driver '%s'", path, driver)


def _read(path: str) -> dict | None:
    """Parse one candidate file.  None means: try the next path."""
    try:
        with open(path) as f:
            data = json.load(f)
    except FileNotFoundError:
        return None
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Cannot read config %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        logger.error("Config %s: expected a JSON object, got %s", path, type(data).__name__)
        return None
    return data


def load_config() -> dict:
    """Load config from the first usable JSON file. Cached after first call."""
    global _config
    if _config is not None:
        return _config

    for path in _search_paths():
        data = _read(path)
        if data is None:
            continue
        logger.info("Config loaded from %s", path)
        _validate(data, path)
        _config = data
        return _config

    logger.warning("No config.json found, using defaults")
    _config = {}
    return _config


def cfg(section: str, key: str | None = None, *, default=None):
    """Read a config value; missing and null values give *default*.

    cfg("icons")                          → config["icons"]
    cfg("jack", "name", default="Master") → config["jack"]["name"] or "Master"
    """
    val = load_config().get(section)
    if key is not None:
        val = val.get(key) if isinstance(val, dict) else None
    return default if val is None else val


def reload_config():
    """Force re-read from disk (after --config, or in tests)."""
    global _config
    _config = None
    return load_config()


def _string(data: dict, key: str, default: str) -> str:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"jack.{key} must be a non-empty string, got {value!r}")
    return value


@dataclass(frozen=True)
class BlockConfig:
    """Typed view of the ``jack`` config section."""

    name: str = "Master"
    card: str | None = None
    driver: str = "auto"
    show_volume_when_muted: bool = False
    capture_port: str = "jack_capture:input1"
    client_name: str = "jackbar"
    monitor_pulse: bool = False
    interval: float | None = None

    @classmethod
    def from_dict(cls, data: dict | None) -> "BlockConfig":
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"'jack' must be an object, got {data!r}")

        for key in ("show_volume_when_muted", "monitor_pulse"):
            if key in data and not isinstance(data[key], bool):
                raise ConfigError(f"jack.{key} must be true or false, got {data[key]!r}")

        interval = data.get("interval")
        if interval is not None:
            if isinstance(interval, bool) or not isinstance(interval, (int, float)) or interval <= 0:
                raise ConfigError(f"jack.interval must be a positive number, got {interval!r}")
            interval = float(interval)

        # amixer accepts both card indexes and names
        card = data.get("card")
        if isinstance(card, bool) or not isinstance(card, (str, int, type(None))):
            raise ConfigError(f"jack.card must be a card name or index, got {card!r}")

        return cls(
            name=_string(data, "name", cls.name),
            card=str(card) if card is not None else None,
            driver=_string(data, "driver", cls.driver).lower(),
            show_volume_when_muted=data.get("show_volume_when_muted", cls.show_volume_when_muted),
            capture_port=_string(data, "capture_port", cls.capture_port),
            client_name=_string(data, "client_name", cls.client_name),
            monitor_pulse=data.get("monitor_pulse", cls.monitor_pulse),
            interval=interval,
        )
