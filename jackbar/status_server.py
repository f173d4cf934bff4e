# jackbar
# Copyright (C) 2024-2026 Markus Kirsten
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Optional HTTP status endpoint.

Serves the block's last snapshot and view so other widgets (eww, scripts)
can read the same state without running their own watchers.

    GET /status  → {"id", "snapshot", "view"}
    GET /health  → {"status": "ok"}

Enabled by ``status_server.port`` in config.json.
"""

import logging
from dataclasses import asdict

from aiohttp import web

logger = logging.getLogger("jackbar.http")


class StatusServer:
    def __init__(self, block, host: str = "127.0.0.1", port: int = 0):
        self.block = block
        self.host = host
        self.port = port
        self._runner: web.AppRunner | None = None

    def _cors_headers(self):
        return {
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": "GET, OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type",
        }

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/status", self._handle_status)
        app.router.add_get("/health", self._handle_health)
        return app

    async def start(self):
        self._runner = web.AppRunner(self.make_app())
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        logger.info("HTTP status on %s:%d", self.host, self.port)

    async def stop(self):
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None

    async def _handle_status(self, request):
        view = self.block.view()
        return web.json_response({
            "id": self.block.id,
            "snapshot": self.block.device.snapshot.as_dict(),
            "view": asdict(view) if view is not None else None,
        }, headers=self._cors_headers())

    async def _handle_health(self, request):
        return web.json_response({"status": "ok"}, headers=self._cors_headers())
