"""
Tests for the sound devices and the device factory
"""

import pytest

from jackbar.config import BlockConfig
from jackbar.devices import (
    AlsaSoundDevice, DeviceSnapshot, JackSoundDevice, create_sound_device,
)
from jackbar.devices import alsa as alsa_module
from jackbar.devices import jack as jack_module
from jackbar.devices.jack_server import ServerState
from jackbar.errors import MixerError
from jackbar.monitors import BusSignalWatcher, ControlChangeWatcher, SubscriptionWatcher


class FakeProbe:
    def __init__(self, *states):
        self.states = list(states)
        self.calls = 0

    def probe(self):
        self.calls += 1
        return self.states.pop(0) if len(self.states) > 1 else self.states[0]


class FakeMixer:
    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    def __call__(self, control, card=None):
        self.calls.append((control, card))
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, Exception):
            raise result
        return result


class TestJackSoundDevice:

    def test_combines_mixer_and_server(self, monkeypatch):
        monkeypatch.setattr(jack_module, "read_mixer", FakeMixer((80, False)))
        probe = FakeProbe(ServerState(running=True, rolling=True, capturing=True))
        device = JackSoundDevice("Master", probe=probe)

        snapshot = device.get_info()

        assert snapshot == DeviceSnapshot(80, False, True, True, True)
        assert device.snapshot is snapshot
        assert (device.volume, device.muted) == (80, False)
        assert (device.jack_running, device.jack_rolling, device.jack_capturing) == (True, True, True)

    def test_server_flags_reset_when_server_goes_away(self, monkeypatch):
        monkeypatch.setattr(jack_module, "read_mixer", FakeMixer((50, False)))
        probe = FakeProbe(ServerState(True, True, True), ServerState())
        device = JackSoundDevice("Master", probe=probe)

        device.get_info()
        snapshot = device.get_info()

        assert not snapshot.jack_running
        assert not snapshot.jack_rolling
        assert not snapshot.jack_capturing

    def test_flags_meaningless_without_server_are_false(self, monkeypatch):
        monkeypatch.setattr(jack_module, "read_mixer", FakeMixer((50, False)))
        device = JackSoundDevice("Master", probe=FakeProbe(ServerState(False, True, True)))
        snapshot = device.get_info()
        assert snapshot == DeviceSnapshot(50, False, False, False, False)

    def test_mixer_failure_keeps_previous_snapshot(self, monkeypatch):
        mixer = FakeMixer((70, True), MixerError("could not get volume"))
        monkeypatch.setattr(jack_module, "read_mixer", mixer)
        device = JackSoundDevice("Master", probe=FakeProbe(ServerState(True, False, False)))

        first = device.get_info()
        with pytest.raises(MixerError):
            device.get_info()

        assert device.snapshot is first
        assert device.volume == 70 and device.muted

    def test_mixer_is_read_even_without_server(self, monkeypatch):
        mixer = FakeMixer((10, False))
        monkeypatch.setattr(jack_module, "read_mixer", mixer)
        device = JackSoundDevice("Headphone", card="1", probe=FakeProbe(ServerState()))
        device.get_info()
        assert mixer.calls == [("Headphone", "1")]

    def test_watchers(self):
        device = JackSoundDevice("Master", probe=FakeProbe(ServerState()))
        kinds = [type(w) for w in device.watchers("abc", dispatcher=None)]
        assert kinds == [ControlChangeWatcher, BusSignalWatcher]

    def test_watchers_with_pulse(self):
        device = JackSoundDevice("Master", probe=FakeProbe(ServerState()), monitor_pulse=True)
        watchers = device.watchers("abc", dispatcher=None)
        assert isinstance(watchers[-1], SubscriptionWatcher)
        assert all(w.identity == "abc" for w in watchers)


class TestAlsaSoundDevice:

    def test_reads_mixer_only(self, monkeypatch):
        monkeypatch.setattr(alsa_module, "read_mixer", FakeMixer((33, True)))
        device = AlsaSoundDevice("PCM")
        assert device.get_info() == DeviceSnapshot(volume=33, muted=True)

    def test_watches_alsactl_only(self):
        kinds = [type(w) for w in AlsaSoundDevice("PCM").watchers("x", None)]
        assert kinds == [ControlChangeWatcher]


class TestSnapshot:

    def test_as_dict_hides_server_flags_without_server(self):
        data = DeviceSnapshot(volume=5, jack_rolling=True).as_dict()
        assert data["jack_running"] is False
        assert data["jack_rolling"] is None
        assert data["jack_capturing"] is None

    def test_as_dict_with_server(self):
        data = DeviceSnapshot(5, False, True, True, False).as_dict()
        assert data == {"volume": 5, "muted": False, "jack_running": True,
                        "jack_rolling": True, "jack_capturing": False}


class TestFactory:

    def test_auto_builds_jack_device(self):
        device = create_sound_device(BlockConfig(name="PCM", card="0"))
        assert isinstance(device, JackSoundDevice)
        assert (device.name, device.card) == ("PCM", "0")

    def test_alsa_driver(self):
        assert isinstance(create_sound_device(BlockConfig(driver="alsa")), AlsaSoundDevice)

    def test_unknown_driver_falls_back(self):
        assert isinstance(create_sound_device(BlockConfig(driver="oss")), JackSoundDevice)
