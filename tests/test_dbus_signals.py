"""
Tests for the session bus subscription: match rules, delivery and teardown
"""

import threading
from types import SimpleNamespace

import pytest

pytest.importorskip("dbus")
pytest.importorskip("gi")

from jackbar import dbus_signals  # noqa: E402
from jackbar.dbus_signals import JACK_CONTROL, JACK_PATCHBAY, SessionBusSignals  # noqa: E402


class FakeMatch:
    def __init__(self):
        self.removed = False

    def remove(self):
        self.removed = True


class FakeBus:
    def __init__(self, private=False):
        self.private = private
        self.receivers = []
        self.matches = []
        self.closed = False

    def add_signal_receiver(self, handler, **kwargs):
        self.receivers.append((handler, kwargs))
        self.matches.append(FakeMatch())
        return self.matches[-1]

    def close(self):
        self.closed = True


class FakeMainLoop:
    def __init__(self):
        self._quit = threading.Event()
        self.ran = threading.Event()

    def run(self):
        self.ran.set()
        self._quit.wait(5)

    def quit(self):
        self._quit.set()


@pytest.fixture
def fake_bus(monkeypatch):
    made = {}

    def session_bus(private=False):
        made["bus"] = FakeBus(private)
        return made["bus"]

    def main_loop():
        made["loop"] = FakeMainLoop()
        return made["loop"]

    monkeypatch.setattr(dbus_signals, "dbus", SimpleNamespace(SessionBus=session_bus))
    monkeypatch.setattr(dbus_signals, "DBusGMainLoop", lambda set_as_default: None)
    monkeypatch.setattr(dbus_signals, "GLib", SimpleNamespace(MainLoop=main_loop))
    return made


class TestSessionBusSignals:

    def test_subscribes_to_jack_rules(self, fake_bus):
        signals = SessionBusSignals(lambda: None)
        signals.start()
        try:
            bus = fake_bus["bus"]
            assert bus.private
            rules = [kwargs for _, kwargs in bus.receivers]
            assert rules == [
                {"signal_name": "ServerStarted", "dbus_interface": JACK_CONTROL},
                {"signal_name": "ServerStopped", "dbus_interface": JACK_CONTROL},
                {"signal_name": "IsStarted", "dbus_interface": JACK_CONTROL},
                {"signal_name": "ClientAppeared", "dbus_interface": JACK_PATCHBAY,
                 "arg2": "jack_transport"},
                {"signal_name": "ClientAppeared", "dbus_interface": JACK_PATCHBAY,
                 "arg2": "jack_capture"},
                {"signal_name": "ClientDisappeared", "dbus_interface": JACK_PATCHBAY,
                 "arg2": "jack_capture"},
            ]
            assert fake_bus["loop"].ran.wait(2)
        finally:
            signals.stop()

    def test_any_signal_payload_calls_back(self, fake_bus):
        calls = []
        signals = SessionBusSignals(lambda: calls.append(True))
        signals.start()
        try:
            handler = fake_bus["bus"].receivers[-1][0]
            handler(1, "jack_capture", 7, "jack_capture")
            handler()
        finally:
            signals.stop()
        assert calls == [True, True]

    def test_stop_tears_everything_down(self, fake_bus):
        signals = SessionBusSignals(lambda: None)
        signals.start()
        thread = signals._thread
        signals.stop()

        bus = fake_bus["bus"]
        assert all(match.removed for match in bus.matches)
        assert bus.closed
        assert not thread.is_alive()

    def test_stop_without_start(self):
        SessionBusSignals(lambda: None).stop()
