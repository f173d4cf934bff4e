#!/usr/bin/env python3
# jackbar
# Copyright (C) 2024-2026 Markus Kirsten
# SPDX-License-Identifier: GPL-3.0-or-later

"""
jackbar status command (i3bar protocol on stdout).

Use as ``status_command jackbar`` in i3/sway, or ``jackbar --once`` to print
the current state as JSON.  Logs go to stderr since stdout belongs to the bar.
"""

import argparse
import asyncio
import json
import logging
import os
import signal
import sys
from dataclasses import asdict

from .block import JackBlock
from .config import BlockConfig, cfg, reload_config
from .devices import create_sound_device
from .dispatch import Scheduler, UpdateDispatcher
from .display import CRITICAL, WARNING, JackDisplay
from .errors import BlockError
from .status_server import StatusServer

logger = logging.getLogger("jackbar")

CREATE_RETRY = 5

STATE_COLORS = {
    WARNING: "#ebcb8b",
    CRITICAL: "#bf616a",
}


class BarWriter:
    """Writes the i3bar JSON stream: header, opening bracket, one array per update."""

    def __init__(self, stream=None):
        self._stream = stream or sys.stdout
        self._started = False

    def header(self):
        self._stream.write(json.dumps({"version": 1}) + "\n[\n")
        self._stream.flush()
        self._started = True

    def write(self, block_id: str, view, icons: dict):
        if not self._started:
            self.header()
        entry = {
            "name": "jack",
            "instance": block_id,
            "full_text": f"{icons.get(view.icon, '')} {view.text}".strip(),
        }
        if view.state in STATE_COLORS:
            entry["color"] = STATE_COLORS[view.state]
        if view.state == CRITICAL:
            entry["urgent"] = True
        self._stream.write(json.dumps([entry], ensure_ascii=False) + ",\n")
        self._stream.flush()


async def _create_block(block_config, icons, dispatcher, writer):
    """Build the block, retrying while the mixer is unreadable."""
    display = JackDisplay(icons)
    while True:
        try:
            return await JackBlock.create(block_config, icons, dispatcher)
        except BlockError as e:
            logger.warning("Block setup failed: %s, retrying in %ds", e, CREATE_RETRY)
            writer.write("setup", display.error(e.message), display.icons)
        await asyncio.sleep(CREATE_RETRY)


async def print_once(block_config: BlockConfig, icons: dict) -> int:
    device = create_sound_device(block_config)
    block = JackBlock(device, JackDisplay(icons, block_config.show_volume_when_muted))
    try:
        await block.update()
    except BlockError as e:
        logger.error("%s", e)
        return 1
    print(json.dumps({
        "snapshot": device.snapshot.as_dict(),
        "view": asdict(block.view()),
    }, ensure_ascii=False))
    return 0


async def run(block_config: BlockConfig, icons: dict, stream=None, stop_event=None) -> int:
    loop = asyncio.get_running_loop()
    if stop_event is None:
        stop_event = asyncio.Event()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, stop_event.set)
    writer = BarWriter(stream)
    try:
        writer.header()
        return await _serve(block_config, icons, writer, stop_event)
    except OSError as e:
        logger.error("Stopping: %s", e)
        return 1
    finally:
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.remove_signal_handler(sig)


async def _serve(block_config, icons, writer, stop_event) -> int:
    dispatcher = UpdateDispatcher()
    create = asyncio.create_task(_create_block(block_config, icons, dispatcher, writer))
    stopped = asyncio.create_task(stop_event.wait())
    await asyncio.wait({create, stopped}, return_when=asyncio.FIRST_COMPLETED)
    if not create.done():
        create.cancel()
        return 0
    stopped.cancel()
    block = create.result()

    def render():
        try:
            writer.write(block.id, block.view(), block.display.icons)
        except OSError as e:
            # i3bar went away; nobody is left to read us
            logger.error("Cannot write to the bar: %s", e)
            stop_event.set()

    scheduler = Scheduler(dispatcher, on_render=render)
    scheduler.register(block)
    render()

    server = None
    port = int(cfg("status_server", "port", default=0) or 0)
    if port:
        server = StatusServer(block, cfg("status_server", "host", default="127.0.0.1"), port)
        await server.start()

    scheduler_task = asyncio.create_task(scheduler.run())
    try:
        await stop_event.wait()
    finally:
        scheduler_task.cancel()
        scheduler.stop()
        await block.stop()
        if server is not None:
            await server.stop()
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="ALSA volume / JACK transport block for i3bar")
    parser.add_argument("--config", help="path to config.json")
    parser.add_argument("--log-level", default=os.getenv("JACKBAR_LOG_LEVEL", "WARNING"),
                        help="logging level (default: WARNING, env JACKBAR_LOG_LEVEL)")
    parser.add_argument("--once", action="store_true",
                        help="print the current state as JSON and exit")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="[%(asctime)s] %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    if args.config:
        os.environ["JACKBAR_CONFIG"] = args.config
        reload_config()

    try:
        block_config = BlockConfig.from_dict(cfg("jack", default={}))
    except BlockError as e:
        logger.error("%s", e)
        return 2
    icons = cfg("icons", default={})

    if args.once:
        return asyncio.run(print_once(block_config, icons))
    return asyncio.run(run(block_config, icons))


if __name__ == "__main__":
    sys.exit(main())
