# jackbar
# Copyright (C) 2024-2026 Markus Kirsten
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Change watchers: decide *when* a block must re-read its device.

Each watcher is an asyncio task that waits on one event source and, on any
event, asks the dispatcher for a refresh tagged with the block identity.
Event content is ignored; the device re-reads everything on refresh.  After
emitting, a watcher cools down for ``debounce`` seconds so that a burst of
events (volume-key mashing) collapses into a handful of refreshes.

    waiting-for-event -> emitting -> cooling-down -> waiting-for-event ...

Usage:
    watcher = ControlChangeWatcher(block_id, dispatcher)
    watcher.start()
    ...
    await watcher.stop()
"""

import asyncio
import contextlib
import logging
from abc import ABC, abstractmethod

logger = logging.getLogger("jackbar.monitor")

DEBOUNCE = 0.25       # fast enough for button mashing, slow enough to skip event spam
READ_SIZE = 1024      # one read is plenty for a burst of monitor lines
RESPAWN_DELAY = 5.0
BUS_WAIT = 1.0
BUS_RETRY_MIN = 5.0
BUS_RETRY_MAX = 60.0

# Shell convention, also used by stdbuf: 126 cannot execute, 127 not found
EXEC_FAILED = (126, 127)


class Watcher(ABC):
    """Base class: owns the task, emits refresh requests."""

    name = "watcher"

    def __init__(self, identity: str, dispatcher, debounce: float = DEBOUNCE):
        self.identity = identity
        self._dispatcher = dispatcher
        self.debounce = debounce
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.create_task(self._run(), name=f"{self.name}-{self.identity}")
        return self._task

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    def emit(self) -> None:
        self._dispatcher.request(self.identity)

    @abstractmethod
    async def _run(self): ...


class ProcessWatcher(Watcher):
    """Treats every chunk a line-buffered monitor process prints as an event."""

    name = "process"
    command: tuple[str, ...] = ()

    def __init__(self, identity: str, dispatcher, debounce: float = DEBOUNCE,
                 command=None, respawn_delay: float = RESPAWN_DELAY):
        super().__init__(identity, dispatcher, debounce)
        if command is not None:
            self.command = tuple(command)
        self.respawn_delay = respawn_delay

    async def _spawn(self) -> asyncio.subprocess.Process:
        return await asyncio.create_subprocess_exec(
            *self.command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
        )

    async def _run(self):
        while True:
            try:
                proc = await self._spawn()
            except FileNotFoundError:
                logger.error("%s: %s not found, watcher disabled", self.name, self.command[0])
                return
            logger.info("%s: started %s (pid %d)", self.name, " ".join(self.command), proc.pid)
            try:
                events = await self.watch_stream(proc.stdout)
                status = await proc.wait()
            finally:
                if proc.returncode is None:
                    with contextlib.suppress(ProcessLookupError):
                        proc.terminate()
                    await proc.wait()
            if not events and status in EXEC_FAILED:
                logger.error("%s: %s could not be run (exit %d), watcher disabled",
                             self.name, " ".join(self.command), status)
                return
            logger.warning("%s: monitor exited, restarting in %.0fs", self.name, self.respawn_delay)
            await asyncio.sleep(self.respawn_delay)

    async def watch_stream(self, stream: asyncio.StreamReader) -> int:
        """Emit on every non-empty read until EOF.  Returns the number of emits."""
        events = 0
        while True:
            try:
                data = await stream.read(READ_SIZE)
            except (OSError, ValueError) as e:
                logger.debug("%s: read failed: %s", self.name, e)
            else:
                if not data:
                    return events
                events += 1
                self.emit()
            await asyncio.sleep(self.debounce)


class ControlChangeWatcher(ProcessWatcher):
    """ALSA control changes via ``alsactl monitor``."""

    name = "alsactl"
    # Line-buffer to reduce noise.
    command = ("stdbuf", "-oL", "alsactl", "monitor")


class SubscriptionWatcher(ProcessWatcher):
    """PulseAudio / PipeWire-pulse events via ``pactl subscribe``."""

    name = "pactl"
    command = ("stdbuf", "-oL", "pactl", "subscribe")


class BusSignalWatcher(Watcher):
    """JACK server and jack_capture changes announced on the session bus.

    Signals arrive on the D-Bus thread and only set a flag.  The watcher
    waits up to ``wait`` seconds for the flag, emits once no matter how many
    signals arrived, then always cools down.
    """

    name = "dbus"

    def __init__(self, identity: str, dispatcher, debounce: float = DEBOUNCE,
                 wait: float = BUS_WAIT, signals_factory=None):
        super().__init__(identity, dispatcher, debounce)
        self.wait = wait
        self._signals_factory = signals_factory

    def _make_signals(self, on_signal):
        if self._signals_factory is not None:
            return self._signals_factory(on_signal)
        from .dbus_signals import SessionBusSignals
        return SessionBusSignals(on_signal)

    async def _connect(self, pending: asyncio.Event):
        loop = asyncio.get_running_loop()
        retry = BUS_RETRY_MIN
        while True:
            signals = self._make_signals(lambda: loop.call_soon_threadsafe(pending.set))
            try:
                signals.start()
                return signals
            except Exception as e:
                signals.stop()
                logger.warning("%s: session bus unavailable (%s), retrying in %.0fs",
                               self.name, e, retry)
            await asyncio.sleep(retry)
            retry = min(retry * 2, BUS_RETRY_MAX)

    async def _run(self):
        pending = asyncio.Event()
        signals = await self._connect(pending)
        try:
            while True:
                try:
                    await asyncio.wait_for(pending.wait(), timeout=self.wait)
                except asyncio.TimeoutError:
                    pass
                else:
                    pending.clear()
                    self.emit()
                await asyncio.sleep(self.debounce)
        finally:
            # stop() joins the D-Bus thread; keep that off the event loop
            await asyncio.get_running_loop().run_in_executor(None, signals.stop)
